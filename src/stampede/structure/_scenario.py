"""
Scenario assembly and policy resolution.

A scenario is declared in three stages:

1. ScenarioBuilder: a named action chain, built with the fluent chain API.
2. PopulatedScenarioBuilder: returned by `inject()`, it carries the
   injection profile and accumulates scenario-level overrides
   (protocols, pause type, throttling).
3. Scenario: returned by `build()`, the immutable description handed to
   the execution engine.

Precedence applied by `PopulatedScenarioBuilder.build()`:
    - Pause type: Disabled when any throttling is active, else the scenario
      pause type, else the global one.
    - Protocols: scenario > global > defaults registered by the units,
      merged kind by kind.

Example:
    >>> from stampede import HttpProtocol, at_once_users, http, scenario
    >>> populated = (
    ...     scenario("browse")
    ...     .exec(http("home").get("/"))
    ...     .pause(1)
    ...     .inject(at_once_users(10))
    ...     .exponential_pauses()
    ... )
    >>> built = populated.build(global_protocols=[HttpProtocol(base_url="https://shop.example.com")])
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Self, override

from stampede._config import STAMPEDE, ConfigurationError, StampedeConfig
from stampede._inject import InjectionProfile, InjectionStep
from stampede._pause import CONSTANT, DISABLED, PauseSupport, PauseType
from stampede._protocols import Protocol, Protocols
from stampede._throttle import Throttling, ThrottleStep, ThrottlingProfile
from stampede.actions._action import Action, UserEnd
from stampede.structure._chain import ActionChainBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    """
    Immutable, fully resolved scenario.

    Attributes:
        name: Scenario name.
        entry_point: First action of every virtual user.
        injection_profile: How virtual users are started.
        protocols: Resolved protocols, pause type and throttling profiles.
    """

    name: str
    entry_point: Action
    injection_profile: InjectionProfile
    protocols: Protocols

    @property
    def pause_type(self) -> PauseType:
        """The pause type resolved for this scenario."""
        return self.protocols.pause_type


@dataclass(frozen=True)
class ScenarioBuilder(ActionChainBuilder):
    """
    Named action chain, the starting point of a scenario declaration.

    Attributes:
        name: Scenario name.
        action_builders: The units of the scenario, in declaration order.
    """

    name: str = field(kw_only=True)

    def __post_init__(self) -> None:
        assert self.name, "Scenario name can not be empty."

    def inject(self, *steps: InjectionStep | Iterable[InjectionStep]) -> PopulatedScenarioBuilder:
        """
        Attach an injection profile to the scenario.

        Steps can be passed one by one or as a single iterable.

        Returns:
            A PopulatedScenarioBuilder seeded with the protocols the units
            register by default.

        Raises:
            ConfigurationError: If no injection step is given.
        """
        if len(steps) == 1 and not isinstance(steps[0], InjectionStep):
            flattened = tuple(steps[0])
        else:
            flattened = steps
        if not flattened:
            raise ConfigurationError(f"Scenario '{self.name}' is injected with empty injection steps.")

        default_protocols = Protocols()
        for action_builder in self.action_builders:
            default_protocols = action_builder.register_default_protocols(default_protocols)

        return PopulatedScenarioBuilder(
            scenario_builder=self,
            injection_profile=InjectionProfile.from_steps(flattened),
            default_protocols=default_protocols,
        )


def scenario(name: str) -> ScenarioBuilder:
    """Start declaring the scenario `name`."""
    return ScenarioBuilder(name=name)


@dataclass(frozen=True)
class PopulatedScenarioBuilder(PauseSupport):
    """
    Scenario with an injection profile, collecting scenario-level overrides.

    Every setter returns a new instance.

    Attributes:
        scenario_builder: The declared chain.
        injection_profile: How virtual users are started.
        default_protocols: Protocols registered by the units of the chain.
        scenario_protocols: Protocols set on this scenario, in call order.
        scenario_throttling: Throttling set on this scenario, if any.
        pause_type: Pause type set on this scenario, if any.
    """

    scenario_builder: ScenarioBuilder
    injection_profile: InjectionProfile
    default_protocols: Protocols
    scenario_protocols: tuple[Protocol, ...] = ()
    scenario_throttling: ThrottlingProfile | None = None
    pause_type: PauseType | None = None

    @property
    def name(self) -> str:
        return self.scenario_builder.name

    def protocols(self, *protocols: Protocol) -> Self:
        """Add scenario-level protocols, overriding global and default ones of the same kind."""
        return replace(self, scenario_protocols=(*self.scenario_protocols, *protocols))

    @override
    def pauses(self, pause_type: PauseType) -> Self:
        return replace(self, pause_type=pause_type)

    def throttle(self, *throttlings: Throttling | ThrottleStep) -> Self:
        """
        Throttle this scenario.

        Groups are concatenated in reverse call order; see `Throttling.combine`.

        Raises:
            ConfigurationError: If no throttle step is given.
        """
        profile = Throttling.combine(throttlings, owner=f"Scenario '{self.name}'")
        return replace(self, scenario_throttling=profile)

    def build(
        self,
        global_protocols: Iterable[Protocol] = (),
        global_pause_type: PauseType = CONSTANT,
        global_throttling: ThrottlingProfile | None = None,
        *,
        config: StampedeConfig | None = None,
    ) -> Scenario:
        """
        Resolve the run policies and build the scenario.

        Protocols are warmed up once, before the entry point is created.

        Args:
            global_protocols: Run-wide protocols.
            global_pause_type: Run-wide pause type.
            global_throttling: Run-wide throttling profile, if any.
            config: Run configuration used for warm-up. Defaults to `STAMPEDE.config`.

        Returns:
            The immutable Scenario.
        """
        config = config or STAMPEDE.config

        if global_throttling is not None or self.scenario_throttling is not None:
            logger.info(f"Scenario '{self.name}' | Throttle is enabled, disabling pauses.")
            resolved_pause_type = DISABLED
        elif self.pause_type is not None:
            resolved_pause_type = self.pause_type
        else:
            resolved_pause_type = global_pause_type

        protocols = replace(
            self.default_protocols + global_protocols + self.scenario_protocols,
            pause_type=resolved_pause_type,
            global_throttling=global_throttling,
            scenario_throttling=self.scenario_throttling,
        )
        logger.debug(
            f"Scenario '{self.name}' | resolved protocols "
            f"{[type(p).__name__ for p in protocols]} with pause type {resolved_pause_type!r}."
        )

        protocols.warm_up(config)

        entry_point = self.scenario_builder.build(UserEnd(), protocols)
        return Scenario(
            name=self.name,
            entry_point=entry_point,
            injection_profile=self.injection_profile,
            protocols=protocols,
        )
