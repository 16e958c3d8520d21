"""
Session model for virtual users.

A Session is the immutable state one virtual user carries through its
action chain. Every action receives a Session and hands a (possibly new)
Session to the next action.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class Session:
    """
    Immutable state of a single virtual user.

    Attributes:
        scenario: Name of the scenario the user runs.
        user_id: Identifier of the virtual user inside the run.
        attributes: Read-only user attributes set by actions.

    Example:
        >>> session = Session(scenario="checkout", user_id=1)
        >>> session = session.set("cart_id", "abc")
        >>> session.get("cart_id")
        'abc'
    """

    scenario: str
    user_id: int
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        assert self.scenario, "Session scenario can not be empty."
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get(self, key: str, default: Any = None) -> Any:
        """Returns the attribute stored under `key`, or `default`."""
        return self.attributes.get(key, default)

    def set(self, key: str, value: Any) -> Session:
        """Returns a new session with `key` set to `value`."""
        return replace(self, attributes={**self.attributes, key: value})
