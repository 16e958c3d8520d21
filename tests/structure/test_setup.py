"""Tests for SimulationSetup."""

import unittest
from dataclasses import dataclass
from datetime import timedelta

from stampede._config import ConfigurationError, StampedeConfig
from stampede._inject import at_once_users
from stampede._pause import CONSTANT, DISABLED, EXPONENTIAL, UniformPercentage
from stampede._protocols import HttpProtocol, Protocol
from stampede._throttle import Throttling, hold_for, jump_to_rps, reach_rps
from stampede.structure import SimulationSetup, scenario, setup

NO_WARM_UP = StampedeConfig().with_section_overrides(http={"enable_warm_up": False})


@dataclass(frozen=True)
class XProtocol(Protocol):
    label: str


def populated(name: str):
    return scenario(name).pause(1).inject(at_once_users(1))


class TestSetupValidation(unittest.TestCase):
    """Tests for setup() validation."""

    def test_empty_setup_rejected(self):
        """Should reject a simulation without scenarios."""
        with self.assertRaises(ConfigurationError):
            setup()

    def test_duplicate_names_rejected(self):
        """Should reject scenarios sharing a name and list the duplicates."""
        with self.assertRaises(ConfigurationError) as context:
            setup(populated("b"), populated("a"), populated("b"), populated("a"), populated("c"))
        self.assertIn("['a', 'b']", str(context.exception))

    def test_setup_keeps_declaration_order(self):
        """Should keep scenarios in declaration order."""
        simulation = setup(populated("first"), populated("second"))
        self.assertIsInstance(simulation, SimulationSetup)
        self.assertEqual([p.name for p in simulation.populated_scenarios], ["first", "second"])


class TestSetupSetters(unittest.TestCase):
    """Tests for the fluent setters of SimulationSetup."""

    def setUp(self):
        self.simulation = setup(populated("s"))

    def test_protocols_append(self):
        """Should append global protocols and leave the original untouched."""
        updated = self.simulation.protocols(XProtocol("a")).protocols(XProtocol("b"))
        self.assertEqual(self.simulation.global_protocols, ())
        self.assertEqual(updated.global_protocols, (XProtocol("a"), XProtocol("b")))

    def test_pause_setters(self):
        """Should keep the last global pause type."""
        self.assertEqual(self.simulation.disable_pauses().global_pause_type, DISABLED)
        self.assertEqual(self.simulation.uniform_pauses(10).global_pause_type, UniformPercentage(10))
        self.assertEqual(self.simulation.constant_pauses().exponential_pauses().global_pause_type, EXPONENTIAL)
        self.assertIsNone(self.simulation.global_pause_type)

    def test_throttle(self):
        """Should reverse throttle groups and reject empty ones."""
        a, b = reach_rps(10).during(5), hold_for(10)
        updated = self.simulation.throttle(Throttling.of(a), Throttling.of(b))
        self.assertEqual(updated.global_throttling.steps, (b, a))
        with self.assertRaises(ConfigurationError) as context:
            self.simulation.throttle(Throttling.of())
        self.assertIn("Simulation", str(context.exception))

    def test_max_duration(self):
        """Should store the maximum duration in seconds."""
        self.assertEqual(self.simulation.with_max_duration(timedelta(minutes=2)).max_duration, 120.0)
        self.assertIsNone(self.simulation.max_duration)

    def test_max_duration_must_be_positive(self):
        """Should reject a zero or negative maximum duration."""
        with self.assertRaises(ConfigurationError):
            self.simulation.with_max_duration(0)


class TestBuildScenarios(unittest.TestCase):
    """Tests for SimulationSetup.build_scenarios()."""

    def test_builds_every_scenario(self):
        """Should build one Scenario per populated scenario, in order."""
        scenarios = setup(populated("a"), populated("b")).build_scenarios(config=NO_WARM_UP)
        self.assertEqual([s.name for s in scenarios], ["a", "b"])

    def test_default_pause_type_comes_from_config(self):
        """Should use core.default_pause_type when no global pause type is set."""
        config = NO_WARM_UP.with_section_overrides(core={"default_pause_type": "exponential"})
        scenarios = setup(populated("a")).build_scenarios(config=config)
        self.assertEqual(scenarios[0].pause_type, EXPONENTIAL)

    def test_default_pause_type_is_constant(self):
        """Should resolve constant pauses with the default config."""
        scenarios = setup(populated("a")).build_scenarios(config=NO_WARM_UP)
        self.assertEqual(scenarios[0].pause_type, CONSTANT)

    def test_scenario_pause_type_overrides_global(self):
        """Should let a scenario pause type win over the global one."""
        simulation = setup(populated("a").disable_pauses(), populated("b")).exponential_pauses()
        scenarios = simulation.build_scenarios(config=NO_WARM_UP)
        self.assertEqual(scenarios[0].pause_type, DISABLED)
        self.assertEqual(scenarios[1].pause_type, EXPONENTIAL)

    def test_global_throttling_disables_every_pause(self):
        """Should disable pauses in every scenario when the run is throttled."""
        simulation = setup(populated("a").exponential_pauses(), populated("b")).throttle(jump_to_rps(20))
        scenarios = simulation.build_scenarios(config=NO_WARM_UP)
        self.assertEqual([s.pause_type for s in scenarios], [DISABLED, DISABLED])
        self.assertEqual(scenarios[0].protocols.global_throttling.limit(0), 20)

    def test_global_protocols_reach_scenarios(self):
        """Should pass global protocols to every scenario, scenario ones winning."""
        simulation = setup(
            populated("a"),
            populated("b").protocols(HttpProtocol(base_url="https://b.example.com")),
        ).protocols(HttpProtocol(base_url="https://global.example.com"), XProtocol("g"))
        scenarios = simulation.build_scenarios(config=NO_WARM_UP)
        self.assertEqual(scenarios[0].protocols.get(HttpProtocol).base_url, "https://global.example.com")
        self.assertEqual(scenarios[1].protocols.get(HttpProtocol).base_url, "https://b.example.com")
        self.assertEqual(scenarios[1].protocols.get(XProtocol), XProtocol("g"))


if __name__ == "__main__":
    unittest.main()
