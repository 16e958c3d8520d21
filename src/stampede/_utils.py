"""
Utility functions shared by the builder modules.

These functions are not part of the public API and may change without notice.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stampede._session import Session

# Durations are given in seconds (int/float) or as timedelta.
Duration = float | int | timedelta


def to_seconds(duration: Duration) -> float:
    """
    Normalize a duration to seconds.

    Example:
        >>> to_seconds(timedelta(minutes=1))
        60.0
        >>> to_seconds(2)
        2.0
    """
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


def as_expression(value: Duration | Callable[[Session], Any]) -> Callable[[Session], float]:
    """
    Turn a static duration or a session expression into a session expression
    returning seconds.
    """
    if callable(value):
        return lambda session: to_seconds(value(session))
    seconds = to_seconds(value)
    return lambda session: seconds
