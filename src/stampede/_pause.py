"""
Pause types.

A pause type decides how the duration declared on a pause is turned into
the duration a virtual user actually waits. Exactly one pause type is
resolved per scenario (see PopulatedScenarioBuilder.build).

Available pause types:
    - Disabled: pauses are skipped.
    - Constant: the declared duration is used as-is (default).
    - Exponential: durations follow an exponential distribution around the declared mean.
    - Custom: a session expression replaces the declared duration.
    - UniformPercentage: uniform distribution of +/- a percentage around the declared duration.
    - UniformDuration: uniform distribution of +/- a fixed duration around the declared duration.

Module Constants:
    - DISABLED, CONSTANT, EXPONENTIAL: shared instances of the stateless pause types.

Example:
    >>> generator = UniformPercentage(plus_or_minus=20).generator(lambda session: 10.0)
    >>> generator(session)  # somewhere between 8.0 and 12.0
"""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Self, override

from stampede._session import Session
from stampede._utils import Duration, as_expression, to_seconds

# Produces the pause duration, in seconds, for a given session.
DurationExpression = Callable[[Session], float]


class PauseType(ABC):
    """
    Abstract base class for pause types.

    Example:
        >>> class Halved(PauseType):
        ...     def generator(self, duration):
        ...         return lambda session: duration(session) / 2
    """

    @abstractmethod
    def generator(self, duration: DurationExpression) -> DurationExpression:
        """
        Wrap the declared duration into the expression that computes the actual pause.

        Args:
            duration: Expression returning the declared pause, in seconds.

        Returns:
            Expression returning the pause to apply, in seconds.
        """
        pass


@dataclass(frozen=True)
class Disabled(PauseType):
    """Pause type that skips every pause."""

    @override
    def generator(self, duration: DurationExpression) -> DurationExpression:
        return lambda session: 0.0


@dataclass(frozen=True)
class Constant(PauseType):
    """Pause type that applies the declared duration."""

    @override
    def generator(self, duration: DurationExpression) -> DurationExpression:
        return duration


@dataclass(frozen=True)
class Exponential(PauseType):
    """
    Pause type drawing durations from an exponential distribution whose mean
    is the declared duration.
    """

    rng: random.Random | None = field(default=None, compare=False, repr=False)

    @override
    def generator(self, duration: DurationExpression) -> DurationExpression:
        rng = self.rng or random.Random()

        def exponential(session: Session) -> float:
            mean = duration(session)
            # 1 - random() lies in (0, 1], so the log is always defined
            return -math.log(1.0 - rng.random()) * mean

        return exponential


@dataclass(frozen=True)
class Custom(PauseType):
    """
    Pause type whose durations come from a session expression.

    The declared duration is ignored.

    Attributes:
        expression: Session expression returning the pause (seconds or timedelta).
    """

    expression: Callable[[Session], Any]

    @override
    def generator(self, duration: DurationExpression) -> DurationExpression:
        return as_expression(self.expression)


class _Uniform(PauseType):
    """Uniform distribution of durations around the declared one."""

    rng: random.Random | None

    @abstractmethod
    def half_width(self, mean: float) -> float:
        pass

    @override
    def generator(self, duration: DurationExpression) -> DurationExpression:
        rng = self.rng or random.Random()

        def uniform(session: Session) -> float:
            mean = duration(session)
            half_width = self.half_width(mean)
            least = max(mean - half_width, 0.0)
            return rng.uniform(least, mean + half_width)

        return uniform


@dataclass(frozen=True)
class UniformPercentage(_Uniform):
    """
    Uniform pause type with a range expressed in percent of the declared duration.

    Attributes:
        plus_or_minus: Half width of the range, in percent (20 means +/- 20%).
    """

    plus_or_minus: float
    rng: random.Random | None = field(default=None, compare=False, repr=False)

    @override
    def half_width(self, mean: float) -> float:
        return mean * self.plus_or_minus / 100.0


@dataclass(frozen=True)
class UniformDuration(_Uniform):
    """
    Uniform pause type with a range expressed as an absolute duration.

    Attributes:
        plus_or_minus: Half width of the range, in seconds or as timedelta.
    """

    plus_or_minus: Duration
    rng: random.Random | None = field(default=None, compare=False, repr=False)

    @override
    def half_width(self, mean: float) -> float:
        return to_seconds(self.plus_or_minus)


DISABLED = Disabled()
CONSTANT = Constant()
EXPONENTIAL = Exponential()

_NAMED_PAUSE_TYPES: dict[str, PauseType] = {
    "disabled": DISABLED,
    "constant": CONSTANT,
    "exponential": EXPONENTIAL,
}


def pause_type_named(name: str) -> PauseType:
    """
    Returns the pause type selected by a configuration name
    ("constant", "disabled" or "exponential").
    """
    return _NAMED_PAUSE_TYPES[name]


class PauseSupport(ABC):
    """
    Fluent pause setters shared by scenario and simulation builders.

    Subclasses implement `pauses()` returning a copy with the given pause type.
    Only one pause type is kept: the last call wins.
    """

    @abstractmethod
    def pauses(self, pause_type: PauseType) -> Self:
        pass

    def disable_pauses(self) -> Self:
        return self.pauses(DISABLED)

    def constant_pauses(self) -> Self:
        return self.pauses(CONSTANT)

    def exponential_pauses(self) -> Self:
        return self.pauses(EXPONENTIAL)

    def custom_pauses(self, expression: Callable[[Session], Any]) -> Self:
        return self.pauses(Custom(expression))

    def uniform_pauses(self, plus_or_minus: Duration) -> Self:
        """
        Select uniformly distributed pauses.

        A number is read as a percentage of the declared duration,
        a timedelta as an absolute half width.
        """
        if isinstance(plus_or_minus, timedelta):
            return self.pauses(UniformDuration(plus_or_minus))
        return self.pauses(UniformPercentage(plus_or_minus))
