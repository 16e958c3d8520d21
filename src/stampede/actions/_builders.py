"""
Action builders.

An ActionBuilder is one unit of a scenario chain. At build time it wraps
the action that follows it into a new action, and before that it may
register the protocol it needs by default.

Available builders:
    - SessionHookBuilder: applies a function to the session.
    - PauseBuilder: waits, as decided by the resolved pause type.
    - HttpRequestBuilder: sends an HTTP request, requires an HttpProtocol.

Example:
    >>> builder = PauseBuilder(duration=2)
    >>> action = builder.build(UserEnd(), Protocols())
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, override

from stampede._protocols import HttpProtocol, Protocols
from stampede._session import Session
from stampede._utils import Duration, as_expression
from stampede.actions._action import Action, Pause, SessionHook
from stampede.actions._http import HttpRequest


class ActionBuilder(ABC):
    """
    Abstract base class for scenario units.

    Example:
        >>> @dataclass(frozen=True)
        ... class Tag(ActionBuilder):
        ...     def build(self, next_action, protocols):
        ...         return SessionHook("tag", lambda s: s.set("tagged", True), next_action)
    """

    @abstractmethod
    def build(self, next_action: Action, protocols: Protocols) -> Action:
        """
        Create the action for this unit.

        Args:
            next_action: The action to continue with.
            protocols: The resolved protocols of the scenario.

        Returns:
            The new action, running before `next_action`.
        """
        pass

    def register_default_protocols(self, protocols: Protocols) -> Protocols:
        """Returns `protocols` augmented with this unit's default protocol. Unchanged by default."""
        return protocols


@dataclass(frozen=True)
class SessionHookBuilder(ActionBuilder):
    """
    Unit applying a session function.

    Attributes:
        function: Returns the session handed to the next action.
        name: Action name.
    """

    function: Callable[[Session], Session]
    name: str = "session-hook"

    @override
    def build(self, next_action: Action, protocols: Protocols) -> Action:
        return SessionHook(self.name, self.function, next_action)


@dataclass(frozen=True)
class PauseBuilder(ActionBuilder):
    """
    Unit pausing the virtual user.

    The declared duration goes through the pause type resolved for the
    scenario, so the same chain may pause constantly, randomly or not at all.

    Attributes:
        duration: Seconds, timedelta, or session expression returning either.
        sleep: Function performing the wait.
    """

    duration: Duration | Callable[[Session], Any]
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False, repr=False)

    @override
    def build(self, next_action: Action, protocols: Protocols) -> Action:
        generator = protocols.pause_type.generator(as_expression(self.duration))
        return Pause(generator, next_action, self.sleep)


@dataclass(frozen=True)
class HttpRequestBuilder(ActionBuilder):
    """
    Unit sending an HTTP request.

    Registers a default HttpProtocol so that scenarios without an explicit
    HTTP protocol still build.

    Attributes:
        request_name: Name of the request, also the action name.
        method: HTTP method.
        url: Absolute URL, or a path relative to the protocol's base_url.
    """

    request_name: str
    method: str
    url: str

    def __post_init__(self) -> None:
        assert self.request_name, "Request name can not be empty."
        assert self.url, "Request URL can not be empty."

    @override
    def build(self, next_action: Action, protocols: Protocols) -> Action:
        protocol = protocols.get(HttpProtocol) or HttpProtocol()
        return HttpRequest(self.request_name, self.method.upper(), self.url, protocol, next_action)

    @override
    def register_default_protocols(self, protocols: Protocols) -> Protocols:
        return protocols + HttpProtocol()


@dataclass(frozen=True)
class _HttpIntermediate:
    request_name: str

    def get(self, url: str) -> HttpRequestBuilder:
        return HttpRequestBuilder(self.request_name, "GET", url)

    def post(self, url: str) -> HttpRequestBuilder:
        return HttpRequestBuilder(self.request_name, "POST", url)

    def put(self, url: str) -> HttpRequestBuilder:
        return HttpRequestBuilder(self.request_name, "PUT", url)

    def delete(self, url: str) -> HttpRequestBuilder:
        return HttpRequestBuilder(self.request_name, "DELETE", url)


def http(request_name: str) -> _HttpIntermediate:
    """
    Start an HTTP request unit.

    Example:
        >>> http("home").get("/")
    """
    return _HttpIntermediate(request_name)
