"""
Action chain builder.

An ActionChainBuilder is an ordered, append-only list of action builders.
Every fluent call returns a new builder; existing builders are never
modified, so partial chains can be shared and reused safely.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from functools import reduce
from typing import Any, Self

from stampede._protocols import Protocols
from stampede._session import Session
from stampede._utils import Duration
from stampede.actions._action import Action
from stampede.actions._builders import ActionBuilder, PauseBuilder, SessionHookBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionChainBuilder:
    """
    Immutable, ordered chain of action builders.

    Attributes:
        action_builders: The units of the chain, in declaration order.

    Example:
        >>> checkout = (
        ...     ActionChainBuilder()
        ...     .exec(http("home").get("/"))
        ...     .pause(2)
        ...     .exec(http("cart").post("/cart"))
        ... )
        >>> len(checkout.action_builders)
        3
    """

    action_builders: tuple[ActionBuilder, ...] = ()

    def append(self, action_builder: ActionBuilder) -> Self:
        """Returns a new chain ending with `action_builder`."""
        return replace(self, action_builders=(*self.action_builders, action_builder))

    def exec(self, *elements: ActionBuilder | ActionChainBuilder | Callable[[Session], Session]) -> Self:
        """
        Returns a new chain with `elements` appended in order.

        Chains contribute all their units, and plain functions are wrapped
        into session hooks.
        """
        added: list[ActionBuilder] = []
        for element in elements:
            if isinstance(element, ActionChainBuilder):
                added.extend(element.action_builders)
            elif isinstance(element, ActionBuilder):
                added.append(element)
            else:
                added.append(SessionHookBuilder(element))
        return replace(self, action_builders=(*self.action_builders, *added))

    def pause(self, duration: Duration | Callable[[Session], Any]) -> Self:
        """Returns a new chain ending with a pause of `duration`."""
        return self.append(PauseBuilder(duration))

    def build(self, terminal: Action, protocols: Protocols) -> Action:
        """
        Materialize the chain into linked actions.

        Units are folded from last to first, each wrapping the action built
        so far, so actions run in declaration order and `terminal` runs last.

        Args:
            terminal: The action that ends the chain.
            protocols: Resolved protocols handed to every unit.

        Returns:
            The first action of the chain, or `terminal` for an empty chain.
        """
        logger.debug(f"Building chain of {len(self.action_builders)} action(s).")
        return reduce(
            lambda next_action, action_builder: action_builder.build(next_action, protocols),
            reversed(self.action_builders),
            terminal,
        )
