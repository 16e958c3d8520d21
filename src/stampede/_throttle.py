"""
Throttling steps and profiles.

Throttling caps the request throughput of a simulation or scenario. A
profile is made of ordered steps, each one starting from the target the
previous step ended with (0 before the first step).

Available steps:
    - reach_rps(n).during(d): ramp linearly to n requests per second over d.
    - jump_to_rps(n): switch to n requests per second immediately.
    - hold_for(d): keep the current target for d.

Example:
    >>> profile = Throttling.of(reach_rps(100).during(10), hold_for(60)).profile
    >>> profile.limit(5)
    50
    >>> profile.duration
    70.0
"""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from functools import cached_property
from typing import override

from stampede._config import ConfigurationError
from stampede._utils import Duration, to_seconds


class ThrottleStep(ABC):
    """Abstract base class for throttling steps."""

    @property
    @abstractmethod
    def duration(self) -> float:
        """Seconds covered by this step."""
        pass

    @abstractmethod
    def target(self, previous_target: int) -> int:
        """Target rps at the end of the step."""
        pass

    @abstractmethod
    def rps(self, elapsed: float, previous_target: int) -> int:
        """Target rps `elapsed` seconds after the step started."""
        pass


@dataclass(frozen=True)
class Reach(ThrottleStep):
    """Ramps linearly from the previous target to `target_rps`."""

    target_rps: int
    seconds: float

    def __post_init__(self) -> None:
        if self.target_rps < 0:
            raise ConfigurationError(f"reach_rps requires a non-negative target, got {self.target_rps}.")
        if self.seconds <= 0:
            raise ConfigurationError(f"reach_rps requires a positive duration, got {self.seconds}.")

    @property
    @override
    def duration(self) -> float:
        return self.seconds

    @override
    def target(self, previous_target: int) -> int:
        return self.target_rps

    @override
    def rps(self, elapsed: float, previous_target: int) -> int:
        return int((self.target_rps - previous_target) * elapsed / self.seconds + previous_target)


@dataclass(frozen=True)
class Jump(ThrottleStep):
    """Switches to `target_rps` without ramping."""

    target_rps: int

    def __post_init__(self) -> None:
        if self.target_rps < 0:
            raise ConfigurationError(f"jump_to_rps requires a non-negative target, got {self.target_rps}.")

    @property
    @override
    def duration(self) -> float:
        return 0.0

    @override
    def target(self, previous_target: int) -> int:
        return self.target_rps

    @override
    def rps(self, elapsed: float, previous_target: int) -> int:
        return self.target_rps


@dataclass(frozen=True)
class Hold(ThrottleStep):
    """Keeps the previous target for a duration."""

    seconds: float

    def __post_init__(self) -> None:
        if self.seconds <= 0:
            raise ConfigurationError(f"hold_for requires a positive duration, got {self.seconds}.")

    @property
    @override
    def duration(self) -> float:
        return self.seconds

    @override
    def target(self, previous_target: int) -> int:
        return previous_target

    @override
    def rps(self, elapsed: float, previous_target: int) -> int:
        return previous_target


@dataclass(frozen=True)
class _ReachIntermediate:
    target_rps: int

    def during(self, duration: Duration) -> Reach:
        return Reach(self.target_rps, to_seconds(duration))


def reach_rps(target: int) -> _ReachIntermediate:
    return _ReachIntermediate(target)


def jump_to_rps(target: int) -> Jump:
    return Jump(target)


def hold_for(duration: Duration) -> Hold:
    return Hold(to_seconds(duration))


@dataclass(frozen=True)
class ThrottlingProfile:
    """
    Resolved throttling schedule.

    Attributes:
        steps: Throttle steps in the order they apply.
    """

    steps: tuple[ThrottleStep, ...]

    @cached_property
    def _timeline(self) -> tuple[tuple[float, ...], tuple[int, ...], int]:
        # start offset and starting target of every step, plus the final target
        offsets: list[float] = []
        previous_targets: list[int] = []
        offset, target = 0.0, 0
        for step in self.steps:
            offsets.append(offset)
            previous_targets.append(target)
            offset += step.duration
            target = step.target(target)
        return tuple(offsets), tuple(previous_targets), target

    @property
    def duration(self) -> float:
        """Total duration of the profile, in seconds."""
        return sum(step.duration for step in self.steps)

    def limit(self, elapsed: float) -> int:
        """
        Target requests per second `elapsed` seconds after the run started.

        After the last step, the last target keeps applying.
        """
        if elapsed < 0:
            return 0
        offsets, previous_targets, final_target = self._timeline
        if elapsed >= self.duration:
            return final_target
        # zero-length steps share their offset with the following step, which wins
        index = bisect.bisect_right(offsets, elapsed) - 1
        return self.steps[index].rps(elapsed - offsets[index], previous_targets[index])


@dataclass(frozen=True)
class Throttling:
    """
    Ordered group of throttle steps, as passed to `throttle()`.

    Attributes:
        steps: The steps of the group, in declaration order.
    """

    steps: tuple[ThrottleStep, ...]

    @classmethod
    def of(cls, *steps: ThrottleStep) -> Throttling:
        return cls(tuple(steps))

    @property
    def profile(self) -> ThrottlingProfile:
        return ThrottlingProfile(self.steps)

    @staticmethod
    def combine(groups: Iterable[Throttling | ThrottleStep], owner: str) -> ThrottlingProfile:
        """
        Combine the groups passed to a single `throttle()` call into one profile.

        Groups are concatenated in reverse call order while the steps inside
        each group keep their order: `throttle(a, b)` yields the steps of `b`
        followed by the steps of `a`.

        Args:
            groups: Throttling groups, bare steps count as one-step groups.
            owner: Description of the throttled element, used in error messages.

        Raises:
            ConfigurationError: If the groups hold no step at all.
        """
        normalized = [group if isinstance(group, Throttling) else Throttling.of(group) for group in groups]
        steps = tuple(step for group in reversed(normalized) for step in group.steps)
        if not steps:
            raise ConfigurationError(f"{owner} has an empty throttling definition.")
        return ThrottlingProfile(steps)
