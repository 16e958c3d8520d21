"""
Scenario structure: chains, scenarios and simulation setup.

Example:
    >>> from stampede import at_once_users
    >>> from stampede.structure import scenario, setup
    >>> browse = scenario("browse").pause(1).inject(at_once_users(1))
    >>> scenarios = setup(browse).build_scenarios()
"""

from stampede.structure._chain import ActionChainBuilder
from stampede.structure._scenario import (
    PopulatedScenarioBuilder,
    Scenario,
    ScenarioBuilder,
    scenario,
)
from stampede.structure._setup import SimulationSetup, setup

__all__ = [
    "ActionChainBuilder",
    "ScenarioBuilder",
    "PopulatedScenarioBuilder",
    "Scenario",
    "SimulationSetup",
    "scenario",
    "setup",
]
