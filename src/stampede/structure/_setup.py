"""
Simulation setup.

A SimulationSetup groups the populated scenarios of a run with the
run-wide settings (protocols, pause type, throttling, maximum duration)
and builds every scenario with them.

Example:
    >>> from stampede import HttpProtocol, at_once_users, hold_for, reach_rps, scenario, setup
    >>> simulation = (
    ...     setup(scenario("browse").pause(1).inject(at_once_users(10)))
    ...     .protocols(HttpProtocol(base_url="https://shop.example.com"))
    ...     .throttle(reach_rps(50).during(10), hold_for(60))
    ... )
    >>> scenarios = simulation.build_scenarios()
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Self, override

from stampede._config import STAMPEDE, ConfigurationError, StampedeConfig
from stampede._pause import PauseSupport, PauseType, pause_type_named
from stampede._protocols import Protocol
from stampede._throttle import Throttling, ThrottleStep, ThrottlingProfile
from stampede._utils import Duration, to_seconds
from stampede.structure._scenario import PopulatedScenarioBuilder, Scenario

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationSetup(PauseSupport):
    """
    Scenarios of a run together with the run-wide settings.

    Every setter returns a new instance.

    Attributes:
        populated_scenarios: The scenarios to run.
        global_protocols: Run-wide protocols, in call order.
        global_pause_type: Run-wide pause type. When None, the configured
            `core.default_pause_type` applies.
        global_throttling: Run-wide throttling, if any.
        max_duration: Maximum run duration in seconds, if any.
    """

    populated_scenarios: tuple[PopulatedScenarioBuilder, ...]
    global_protocols: tuple[Protocol, ...] = ()
    global_pause_type: PauseType | None = None
    global_throttling: ThrottlingProfile | None = None
    max_duration: float | None = None

    def __post_init__(self) -> None:
        if not self.populated_scenarios:
            raise ConfigurationError("A simulation requires at least one scenario.")
        duplicates = sorted(name for name, count in Counter(s.name for s in self.populated_scenarios).items() if count > 1)
        if duplicates:
            raise ConfigurationError(f"Scenario names must be unique but found duplicates: {duplicates}.")

    def protocols(self, *protocols: Protocol) -> Self:
        """Add run-wide protocols."""
        return replace(self, global_protocols=(*self.global_protocols, *protocols))

    @override
    def pauses(self, pause_type: PauseType) -> Self:
        return replace(self, global_pause_type=pause_type)

    def throttle(self, *throttlings: Throttling | ThrottleStep) -> Self:
        """
        Throttle the whole run. Disables pauses in every scenario.

        Raises:
            ConfigurationError: If no throttle step is given.
        """
        profile = Throttling.combine(throttlings, owner="Simulation")
        return replace(self, global_throttling=profile)

    def with_max_duration(self, duration: Duration) -> Self:
        """Stop the run after `duration`, whatever the injection profiles say."""
        seconds = to_seconds(duration)
        if seconds <= 0:
            raise ConfigurationError(f"Maximum duration must be positive, got {seconds}.")
        return replace(self, max_duration=seconds)

    def build_scenarios(self, config: StampedeConfig | None = None) -> list[Scenario]:
        """
        Build every scenario with the run-wide settings.

        Args:
            config: Run configuration. Defaults to `STAMPEDE.config`.

        Returns:
            The built scenarios, in declaration order.
        """
        config = config or STAMPEDE.config
        pause_type = self.global_pause_type
        if pause_type is None:
            pause_type = pause_type_named(config.core.default_pause_type)

        logger.info(f"Building {len(self.populated_scenarios)} scenario(s).")
        return [
            populated.build(
                self.global_protocols,
                pause_type,
                self.global_throttling,
                config=config,
            )
            for populated in self.populated_scenarios
        ]


def setup(*populated_scenarios: PopulatedScenarioBuilder) -> SimulationSetup:
    """
    Declare the scenarios of a run.

    Raises:
        ConfigurationError: If no scenario is given or two scenarios share a name.
    """
    return SimulationSetup(tuple(populated_scenarios))
