"""
Runtime actions.

An Action is one executable step of a virtual user. Actions are linked:
each chainable action hands the session to its `next` action once done,
and every chain ends with the UserEnd sentinel.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import override

from stampede._session import Session

logger = logging.getLogger(__name__)


class Action(ABC):
    """
    Abstract base class for actions.

    Example:
        >>> class Log(Action):
        ...     name = "log"
        ...     def execute(self, session):
        ...         print(session)
    """

    name: str = "action"

    @abstractmethod
    def execute(self, session: Session) -> None:
        """Run this action for `session`."""
        pass


class ChainableAction(Action):
    """Action followed by another action."""

    def __init__(self, name: str, next_action: Action):
        self.name = name
        self.next = next_action

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, next={self.next!r})"


class UserEnd(Action):
    """Terminal action reached when a virtual user finished its chain."""

    name = "user-end"

    @override
    def execute(self, session: Session) -> None:
        logger.debug(f"{session.scenario} | user {session.user_id} | finished.")

    def __repr__(self) -> str:
        return "UserEnd()"


class SessionHook(ChainableAction):
    """Applies a session function, then continues with the next action."""

    def __init__(self, name: str, function: Callable[[Session], Session], next_action: Action):
        super().__init__(name, next_action)
        self.function = function

    @override
    def execute(self, session: Session) -> None:
        self.next.execute(self.function(session))


class Pause(ChainableAction):
    """Waits for the duration computed by the resolved pause type."""

    def __init__(
        self,
        generator: Callable[[Session], float],
        next_action: Action,
        sleep: Callable[[float], None],
    ):
        super().__init__("pause", next_action)
        self.generator = generator
        self.sleep = sleep

    @override
    def execute(self, session: Session) -> None:
        duration = self.generator(session)
        if duration > 0:
            self.sleep(duration)
        self.next.execute(session)
