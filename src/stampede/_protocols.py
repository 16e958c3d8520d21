"""
Protocols and the protocol registry.

A protocol is a configuration block describing how actions talk to an
external system (base URLs, headers, ...). Scenarios hold at most one
protocol per kind, the kind being the protocol class.

Available implementations:
    - HttpProtocol: HTTP settings, warmed up with a single GET request.

Example:
    >>> protocols = Protocols() + HttpProtocol(base_url="https://shop.example.com")
    >>> protocols.get(HttpProtocol).base_url
    'https://shop.example.com'
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TypeVar, override

import requests

from stampede._config import StampedeConfig
from stampede._pause import CONSTANT, PauseType
from stampede._throttle import ThrottlingProfile

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="Protocol")


class Protocol:
    """
    Base class for protocols.

    Subclasses are typically frozen dataclasses. Override `warm_up()` when
    the protocol needs one-time preparation before virtual users start.
    """

    def warm_up(self, config: StampedeConfig) -> None:
        """Prepare the protocol before any virtual user starts. No-op by default."""
        pass


@dataclass(frozen=True)
class HttpProtocol(Protocol):
    """
    HTTP protocol settings.

    Attributes:
        base_url: Prefix for relative request URLs.
        headers: Headers added to every request.
        warm_up_url: URL requested during warm-up. Falls back to
            `config.http.warm_up_url` when not set.
        request_timeout: Timeout in seconds for requests sent by virtual users.
    """

    base_url: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    warm_up_url: str | None = None
    request_timeout: float = 60.0

    def resolve_url(self, url: str) -> str:
        """Prefix relative URLs with `base_url`."""
        if self.base_url and not (url.startswith("http://") or url.startswith("https://")):
            return f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"
        return url

    @override
    def warm_up(self, config: StampedeConfig) -> None:
        """
        Send one GET request so that the first virtual users do not pay for
        DNS resolution and connection setup.

        Failures are logged and ignored: warm-up never aborts a run.
        """
        url = self.warm_up_url or config.http.warm_up_url
        if not config.http.enable_warm_up or not url:
            logger.debug("HTTP warm-up is disabled, skipping.")
            return

        try:
            response = requests.get(url, headers=dict(self.headers), timeout=config.http.warm_up_timeout)
            logger.info(f"HTTP warm-up request to {url} returned status {response.status_code}.")
        except requests.RequestException as e:
            logger.info(f"Couldn't execute HTTP warm-up request to {url}: {e}")


@dataclass(frozen=True)
class Protocols:
    """
    Immutable registry of protocols, one per kind.

    Adding a protocol whose kind is already registered replaces the earlier
    instance. The registry of a built scenario also carries the resolved
    pause type and throttling profiles.

    Attributes:
        protocols: Mapping of protocol class to protocol instance.
        pause_type: Pause type resolved for the scenario.
        global_throttling: Run-wide throttling profile, if any.
        scenario_throttling: Scenario throttling profile, if any.
    """

    protocols: Mapping[type[Protocol], Protocol] = field(default_factory=dict)
    pause_type: PauseType = CONSTANT
    global_throttling: ThrottlingProfile | None = None
    scenario_throttling: ThrottlingProfile | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "protocols", MappingProxyType(dict(self.protocols)))

    def __add__(self, other: Protocol | Iterable[Protocol]) -> Protocols:
        """Returns a registry with `other` layered on top, kind by kind."""
        added = [other] if isinstance(other, Protocol) else list(other)
        merged = dict(self.protocols)
        for protocol in added:
            merged[type(protocol)] = protocol
        return replace(self, protocols=merged)

    def __iter__(self) -> Iterator[Protocol]:
        return iter(self.protocols.values())

    def __len__(self) -> int:
        return len(self.protocols)

    def __contains__(self, kind: object) -> bool:
        return kind in self.protocols

    def get(self, kind: type[P]) -> P | None:
        """Returns the protocol registered for `kind`, if any."""
        return self.protocols.get(kind)  # type: ignore[return-value]

    def warm_up(self, config: StampedeConfig) -> None:
        """Warm up every registered protocol, in registration order."""
        for protocol in self:
            logger.debug(f"Warming up {type(protocol).__name__}.")
            protocol.warm_up(config)
