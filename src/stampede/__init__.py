"""
stampede: load-test scenario assembly.

Declare scenarios with a fluent, immutable API and resolve them into
Scenario objects ready for an execution engine.

Quick Start:
    >>> from stampede import HttpProtocol, at_once_users, http, scenario, setup
    >>> browse = (
    ...     scenario("browse")
    ...     .exec(http("home").get("/"))
    ...     .pause(2)
    ...     .exec(http("search").get("/search?q=shoes"))
    ...     .inject(at_once_users(10))
    ...     .uniform_pauses(20)
    ... )
    >>> scenarios = (
    ...     setup(browse)
    ...     .protocols(HttpProtocol(base_url="https://shop.example.com"))
    ...     .build_scenarios()
    ... )

Global Configuration:
    >>> from stampede import STAMPEDE
    >>> STAMPEDE.configure(http={"enable_warm_up": False})

Main Classes:
    - ActionChainBuilder: Immutable, ordered chain of action builders.
    - ScenarioBuilder: Named chain; `inject()` attaches an injection profile.
    - PopulatedScenarioBuilder: Collects scenario-level protocols, pauses and throttling.
    - Scenario: Immutable, resolved scenario.
    - SimulationSetup: Scenarios of a run with the run-wide settings.

Configuration:
    - STAMPEDE: Global singleton for configuration.
    - StampedeConfig, CoreConfig, HttpConfig: Configuration dataclasses.
    - ConfigurationError: Raised for any misconfiguration.
    - ConfigValidationError, ConfigEnvVarError: Configuration value errors.
"""

from importlib.metadata import version as _get_version

__version__ = _get_version("stampede")

from stampede._config import (
    STAMPEDE,
    ConfigEnvVarError,
    ConfigurationError,
    ConfigValidationError,
    CoreConfig,
    HttpConfig,
    StampedeConfig,
)
from stampede._inject import (
    InjectionProfile,
    InjectionStep,
    at_once_users,
    constant_users_per_sec,
    nothing_for,
    ramp_users,
    ramp_users_per_sec,
)
from stampede._pause import (
    CONSTANT,
    DISABLED,
    EXPONENTIAL,
    Constant,
    Custom,
    Disabled,
    Exponential,
    PauseType,
    UniformDuration,
    UniformPercentage,
)
from stampede._protocols import HttpProtocol, Protocol, Protocols
from stampede._session import Session
from stampede._throttle import (
    ThrottleStep,
    Throttling,
    ThrottlingProfile,
    hold_for,
    jump_to_rps,
    reach_rps,
)
from stampede.actions import (
    Action,
    ActionBuilder,
    PauseBuilder,
    SessionHookBuilder,
    UserEnd,
    http,
)
from stampede.structure import (
    ActionChainBuilder,
    PopulatedScenarioBuilder,
    Scenario,
    ScenarioBuilder,
    SimulationSetup,
    scenario,
    setup,
)

__all__ = [
    "__version__",
    # Configuration
    "STAMPEDE",
    "StampedeConfig",
    "CoreConfig",
    "HttpConfig",
    "ConfigurationError",
    "ConfigValidationError",
    "ConfigEnvVarError",
    # Structure
    "ActionChainBuilder",
    "ScenarioBuilder",
    "PopulatedScenarioBuilder",
    "Scenario",
    "SimulationSetup",
    "scenario",
    "setup",
    # Actions
    "Action",
    "ActionBuilder",
    "SessionHookBuilder",
    "PauseBuilder",
    "UserEnd",
    "Session",
    "http",
    # Protocols
    "Protocol",
    "Protocols",
    "HttpProtocol",
    # Pauses
    "PauseType",
    "Disabled",
    "Constant",
    "Exponential",
    "Custom",
    "UniformPercentage",
    "UniformDuration",
    "DISABLED",
    "CONSTANT",
    "EXPONENTIAL",
    # Injection
    "InjectionProfile",
    "InjectionStep",
    "at_once_users",
    "ramp_users",
    "constant_users_per_sec",
    "ramp_users_per_sec",
    "nothing_for",
    # Throttling
    "Throttling",
    "ThrottleStep",
    "ThrottlingProfile",
    "reach_rps",
    "jump_to_rps",
    "hold_for",
]
