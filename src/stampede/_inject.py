"""
Injection steps and profiles.

An injection profile describes how many virtual users start and over which
period. This module only describes the profile; turning it into a timed
stream of user starts is the scheduler's job.

Available steps:
    - at_once_users(n): n users at the same time.
    - ramp_users(n).over(d): n users evenly spread over d.
    - constant_users_per_sec(rate).during(d): a fixed arrival rate for d.
    - ramp_users_per_sec(r1).to(r2).during(d): an arrival rate growing linearly from r1 to r2.
    - nothing_for(d): a pause in the injection.

Example:
    >>> profile = InjectionProfile.of(
    ...     nothing_for(5),
    ...     at_once_users(10),
    ...     ramp_users(50).over(timedelta(minutes=1)),
    ... )
    >>> profile.total_users
    60
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import override

from stampede._config import ConfigurationError
from stampede._utils import Duration, to_seconds


class InjectionStep(ABC):
    """Abstract base class for injection steps."""

    @property
    @abstractmethod
    def users(self) -> int:
        """Number of users this step starts."""
        pass

    @property
    @abstractmethod
    def duration(self) -> float:
        """Seconds covered by this step."""
        pass


@dataclass(frozen=True)
class AtOnceInjection(InjectionStep):
    """Starts all users at once."""

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ConfigurationError(f"at_once_users requires a non-negative user count, got {self.count}.")

    @property
    @override
    def users(self) -> int:
        return self.count

    @property
    @override
    def duration(self) -> float:
        return 0.0


@dataclass(frozen=True)
class RampInjection(InjectionStep):
    """Starts users evenly spread over a duration."""

    count: int
    seconds: float

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ConfigurationError(f"ramp_users requires a non-negative user count, got {self.count}.")
        if self.seconds < 0:
            raise ConfigurationError(f"ramp_users requires a non-negative duration, got {self.seconds}.")

    @property
    @override
    def users(self) -> int:
        return self.count

    @property
    @override
    def duration(self) -> float:
        return self.seconds


@dataclass(frozen=True)
class ConstantRateInjection(InjectionStep):
    """Starts users at a constant rate (users per second)."""

    rate: float
    seconds: float

    def __post_init__(self) -> None:
        if self.rate < 0:
            raise ConfigurationError(f"constant_users_per_sec requires a non-negative rate, got {self.rate}.")
        if self.seconds < 0:
            raise ConfigurationError(f"constant_users_per_sec requires a non-negative duration, got {self.seconds}.")

    @property
    @override
    def users(self) -> int:
        return round(self.rate * self.seconds)

    @property
    @override
    def duration(self) -> float:
        return self.seconds


@dataclass(frozen=True)
class RampRateInjection(InjectionStep):
    """Starts users at a rate growing linearly from `start_rate` to `end_rate`."""

    start_rate: float
    end_rate: float
    seconds: float

    def __post_init__(self) -> None:
        if self.start_rate < 0 or self.end_rate < 0:
            raise ConfigurationError(
                f"ramp_users_per_sec requires non-negative rates, got {self.start_rate} to {self.end_rate}."
            )
        if self.seconds < 0:
            raise ConfigurationError(f"ramp_users_per_sec requires a non-negative duration, got {self.seconds}.")

    @property
    @override
    def users(self) -> int:
        return round((self.start_rate + self.end_rate) * self.seconds / 2)

    @property
    @override
    def duration(self) -> float:
        return self.seconds


@dataclass(frozen=True)
class NothingForInjection(InjectionStep):
    """Starts no users for a duration."""

    seconds: float

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ConfigurationError(f"nothing_for requires a non-negative duration, got {self.seconds}.")

    @property
    @override
    def users(self) -> int:
        return 0

    @property
    @override
    def duration(self) -> float:
        return self.seconds


# =============================================================================
# DSL
# =============================================================================


@dataclass(frozen=True)
class _RampUsers:
    count: int

    def over(self, duration: Duration) -> RampInjection:
        return RampInjection(self.count, to_seconds(duration))


@dataclass(frozen=True)
class _ConstantRate:
    rate: float

    def during(self, duration: Duration) -> ConstantRateInjection:
        return ConstantRateInjection(self.rate, to_seconds(duration))


@dataclass(frozen=True)
class _PartialRampRate:
    start_rate: float
    end_rate: float

    def during(self, duration: Duration) -> RampRateInjection:
        return RampRateInjection(self.start_rate, self.end_rate, to_seconds(duration))


@dataclass(frozen=True)
class _RampRate:
    start_rate: float

    def to(self, end_rate: float) -> _PartialRampRate:
        return _PartialRampRate(self.start_rate, end_rate)


def at_once_users(count: int) -> AtOnceInjection:
    return AtOnceInjection(count)


def ramp_users(count: int) -> _RampUsers:
    return _RampUsers(count)


def constant_users_per_sec(rate: float) -> _ConstantRate:
    return _ConstantRate(rate)


def ramp_users_per_sec(rate: float) -> _RampRate:
    return _RampRate(rate)


def nothing_for(duration: Duration) -> NothingForInjection:
    return NothingForInjection(to_seconds(duration))


# =============================================================================
# Profile
# =============================================================================


@dataclass(frozen=True)
class InjectionProfile:
    """
    Ordered, non-empty sequence of injection steps.

    Attributes:
        steps: The injection steps, in the order they are scheduled.

    Raises:
        ConfigurationError: If created without steps.
    """

    steps: tuple[InjectionStep, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ConfigurationError("An injection profile requires at least one injection step.")

    @classmethod
    def of(cls, *steps: InjectionStep) -> InjectionProfile:
        return cls.from_steps(steps)

    @classmethod
    def from_steps(cls, steps: Iterable[InjectionStep]) -> InjectionProfile:
        return cls(tuple(steps))

    @property
    def total_users(self) -> int:
        """Total number of users started by the profile."""
        return sum(step.users for step in self.steps)

    @property
    def duration(self) -> float:
        """Total duration of the profile, in seconds."""
        return sum(step.duration for step in self.steps)
