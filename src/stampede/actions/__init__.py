"""
Actions and action builders.

Action builders are the units a scenario is declared with. Once the
scenario is built, each builder has produced an Action linked to the
next one, and the chain ends with UserEnd.

Example:
    >>> from stampede.actions import PauseBuilder, http
    >>> units = [http("home").get("/"), PauseBuilder(duration=1)]
"""

from stampede.actions._action import (
    Action,
    ChainableAction,
    Pause,
    SessionHook,
    UserEnd,
)
from stampede.actions._builders import (
    ActionBuilder,
    HttpRequestBuilder,
    PauseBuilder,
    SessionHookBuilder,
    http,
)
from stampede.actions._http import HttpRequest

__all__ = [
    # Actions
    "Action",
    "ChainableAction",
    "UserEnd",
    "SessionHook",
    "Pause",
    "HttpRequest",
    # Builders
    "ActionBuilder",
    "SessionHookBuilder",
    "PauseBuilder",
    "HttpRequestBuilder",
    "http",
]
