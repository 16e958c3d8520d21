"""
Run-wide configuration for stampede.

This module provides a simple configuration system following Convention over Configuration (CoC).
Users can optionally call STAMPEDE.configure() before building scenarios to customize defaults.
If not called, sensible defaults are used.

Hierarchy of precedence (highest to lowest):
1. Values set via STAMPEDE.configure()
2. Environment variables (STAMPEDE_*) - when allow_env_override=True
3. Hardcoded defaults (in dataclass fields)

Example:
    >>> from stampede import STAMPEDE
    >>>
    >>> # Pre-loaded with defaults + env vars
    >>> url = STAMPEDE.config.http.warm_up_url
    >>>
    >>> # Custom configuration
    >>> STAMPEDE.configure(
    ...     core={"default_pause_type": "exponential"},
    ...     http={"enable_warm_up": False},
    ... )
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal, Self, get_args

# Type alias for the pause types selectable from configuration
DefaultPauseType = Literal["constant", "disabled", "exponential"]


# =============================================================================
# Exceptions
# =============================================================================


class ConfigurationError(ValueError):
    """
    Raised when a scenario or simulation is misconfigured.

    Configuration errors are raised eagerly, at the point of misuse, while
    the scenario is being assembled. They are never deferred to run time.

    Example:
        >>> try:
        ...     scenario("empty").inject()
        ... except ConfigurationError as e:
        ...     print(f"Invalid scenario: {e}")
    """

    pass


class ConfigEnvVarError(ConfigurationError):
    """Raised when an environment variable has an invalid value."""

    def __init__(
        self,
        env_var: str,
        value: str,
        expected_type: str,
        cause: Exception | None = None,
    ):
        self.env_var = env_var
        self.value = value
        self.expected_type = expected_type
        super().__init__(f"Invalid value for {env_var}: '{value}' (expected {expected_type})")
        self.__cause__ = cause


class ConfigValidationError(ConfigurationError):
    """Raised when a configuration value fails validation."""

    def __init__(
        self,
        field: str,
        value: Any,
        message: str,
        section: str | None = None,
    ):
        self.field = field
        self.value = value
        self.section = section
        prefix = f"[{section}] " if section else ""
        super().__init__(f"{prefix}Invalid value for '{field}': {value!r}. {message}")


# =============================================================================
# Environment Variables
# =============================================================================


class EnvVars:
    """
    Utility class for reading environment variables with type conversion.

    Example:
        >>> EnvVars.get("STAMPEDE_HTTP_WARM_UP_TIMEOUT", type_hint=float)
        5.0
        >>> EnvVars.get("UNDEFINED_VAR")
        None
    """

    @staticmethod
    def get(
        var_name: str,
        type_hint: Any = str,
        converter: Callable[[str], Any] | None = None,
    ) -> Any:
        """
        Read an environment variable with optional type conversion.

        Args:
            var_name: The environment variable name.
            type_hint: Type hint used to infer the converter (ignored if converter is provided).
            converter: Custom converter function (takes precedence over type_hint).

        Returns:
            The converted value, or None if env var is not set/empty.

        Raises:
            ConfigEnvVarError: If the value cannot be converted.
        """
        raw_value = os.environ.get(var_name)
        if not raw_value:  # None or empty string
            return None

        actual_converter = converter or EnvVars._infer_converter(type_hint)
        try:
            return actual_converter(raw_value)
        except (ValueError, TypeError) as e:
            raise ConfigEnvVarError(
                env_var=var_name,
                value=raw_value,
                expected_type=type_hint.__name__ if hasattr(type_hint, "__name__") else str(type_hint),
                cause=e,
            ) from e

    @staticmethod
    def _infer_converter(type_hint: Any) -> Callable[[str], Any]:
        """
        Infer converter function from type hint.

        Handles both actual types and string annotations (PEP 563).
        """
        type_str = str(type_hint)

        if type_hint is int or type_str == "int":
            return int
        if type_hint is float or type_str == "float":
            return float
        if type_hint is bool or type_str == "bool":
            return lambda v: v.lower() in ("true", "1", "yes")
        return str


# =============================================================================
# Base Class
# =============================================================================


@dataclass(frozen=True)
class OverridableConfig:
    """
    Base class for immutable configuration dataclasses.

    Provides `.with_overrides()` method for creating new instances
    with partial field updates. Uses strict validation to catch
    typos and invalid field names early.

    Example:
        >>> config = HttpConfig()
        >>> custom = config.with_overrides({"warm_up_timeout": 1.0})
        >>> custom.warm_up_timeout
        1.0
    """

    def with_overrides(self, overrides: dict[str, Any]) -> Self:
        """
        Return a new instance with specified fields overridden.

        None values are ignored, so callers can pass optional values as-is.

        Raises:
            ValueError: If overrides contains unknown field names.
        """
        if not overrides:
            return self

        valid_fields = {f.name for f in fields(self)}
        invalid_fields = set(overrides.keys()) - valid_fields

        if invalid_fields:
            raise ValueError(
                f"Unknown config fields: {invalid_fields}. "
                f"Valid fields are: {valid_fields}"
            )

        filtered = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered) if filtered else self

    def with_env_vars(self) -> Self:
        """
        Return new instance with environment variables applied.

        Reads env vars declared in field metadata and applies them as overrides.

        Raises:
            ConfigEnvVarError: If an env var has an invalid value.
        """
        overrides: dict[str, Any] = {}
        for f in fields(self):
            env_var = f.metadata.get("env")
            if env_var:
                value = EnvVars.get(
                    var_name=env_var,
                    type_hint=f.type,
                    converter=f.metadata.get("converter"),
                )
                if value is not None:
                    overrides[f.name] = value
        return self.with_overrides(overrides)


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass(frozen=True)
class CoreConfig(OverridableConfig):
    """
    Core settings applied to every simulation.

    Attributes:
        default_pause_type: Pause type used by a simulation setup that does
            not select one explicitly.
            Env var: STAMPEDE_CORE_DEFAULT_PAUSE_TYPE

    Example:
        >>> from stampede import STAMPEDE
        >>> STAMPEDE.config.core.default_pause_type
        'constant'
    """

    default_pause_type: DefaultPauseType = field(default="constant", metadata={"env": "STAMPEDE_CORE_DEFAULT_PAUSE_TYPE"})

    def validate(self) -> Self:
        """Validate core configuration fields."""
        if self.default_pause_type not in get_args(DefaultPauseType):
            raise ConfigValidationError(
                "default_pause_type", self.default_pause_type,
                f"Must be one of: {', '.join(get_args(DefaultPauseType))}.", section="core"
            )
        return self


@dataclass(frozen=True)
class HttpConfig(OverridableConfig):
    """
    Configuration for the HTTP protocol.

    Attributes:
        enable_warm_up: Whether HTTP protocols send a warm-up request before
            any virtual user starts.
            Env var: STAMPEDE_HTTP_ENABLE_WARM_UP

        warm_up_url: URL requested during warm-up, unless the protocol
            defines its own.
            Env var: STAMPEDE_HTTP_WARM_UP_URL

        warm_up_timeout: Timeout in seconds for the warm-up request.
            Env var: STAMPEDE_HTTP_WARM_UP_TIMEOUT

    Example:
        >>> from stampede import STAMPEDE
        >>> STAMPEDE.config.http.warm_up_url
        'https://gatling.io'
    """

    enable_warm_up: bool = field(default=True, metadata={"env": "STAMPEDE_HTTP_ENABLE_WARM_UP"})
    warm_up_url: str = field(default="https://gatling.io", metadata={"env": "STAMPEDE_HTTP_WARM_UP_URL"})
    warm_up_timeout: float = field(default=5.0, metadata={"env": "STAMPEDE_HTTP_WARM_UP_TIMEOUT"})

    def validate(self) -> Self:
        """Validate HTTP configuration fields."""
        if self.warm_up_url and not (self.warm_up_url.startswith("http://") or self.warm_up_url.startswith("https://")):
            raise ConfigValidationError(
                "warm_up_url", self.warm_up_url,
                "Must start with 'http://' or 'https://'.", section="http"
            )
        if self.warm_up_timeout <= 0:
            raise ConfigValidationError(
                "warm_up_timeout", self.warm_up_timeout,
                "Must be greater than 0.", section="http"
            )
        return self


@dataclass(frozen=True)
class StampedeConfig:
    """
    Root configuration with all run-wide settings.

    Instances are immutable. Build variations with `with_env_vars()` and
    `with_section_overrides()`.

    Attributes:
        core: Core settings (default pause type).
        http: HTTP protocol settings (warm-up, timeouts).

    Example:
        >>> config = StampedeConfig().with_section_overrides(http={"enable_warm_up": False})
        >>> config.http.enable_warm_up
        False
    """

    core: CoreConfig = field(default_factory=CoreConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    def with_env_vars(self) -> StampedeConfig:
        """Return a new config with STAMPEDE_* environment variables applied on top."""
        return StampedeConfig(
            core=self.core.with_env_vars(),
            http=self.http.with_env_vars(),
        )

    def with_section_overrides(
        self,
        *,
        core: dict[str, Any] | None = None,
        http: dict[str, Any] | None = None,
    ) -> StampedeConfig:
        """
        Return a new config with overrides applied to nested sections.

        Each section dict is merged with the existing section config,
        only overriding the specified fields.
        """
        return StampedeConfig(
            core=self.core.with_overrides(core or {}),
            http=self.http.with_overrides(http or {}),
        )

    def validate(self) -> Self:
        """Validate every section."""
        self.core.validate()
        self.http.validate()
        return self


# =============================================================================
# Global Configuration Singleton
# =============================================================================


class _STAMPEDE:
    """
    Singleton holding the current run-wide configuration.

    Use `STAMPEDE.configure()` to customize settings and `STAMPEDE.config`
    to access current configuration. Builders only read it when no config
    is passed to them explicitly.
    """

    def __init__(self) -> None:
        """Initialize with defaults and environment variables."""
        self._config: StampedeConfig = StampedeConfig().with_env_vars()

    def configure(
        self,
        *,
        core: dict[str, Any] | None = None,
        http: dict[str, Any] | None = None,
        allow_env_override: bool = True,
    ) -> StampedeConfig:
        """
        Configure run-wide settings.

        Args:
            core: Core config overrides (default_pause_type).
            http: HTTP config overrides (warm-up, timeouts).
            allow_env_override: If True (default), env vars are used as fallback
                for fields NOT provided. If False, ignores env vars entirely.

        Returns:
            The configured StampedeConfig instance.

        Raises:
            ValueError: If any dict contains unknown field names.
            ConfigValidationError: If any config value fails validation.
        """
        base = StampedeConfig()
        if allow_env_override:
            base = base.with_env_vars()

        self._config = base.with_section_overrides(core=core, http=http)
        return self.validate()

    @property
    def config(self) -> StampedeConfig:
        """Access current configuration (read-only)."""
        return self._config

    def reset(self) -> StampedeConfig:
        """
        Reset configuration to defaults + env vars.

        Useful for testing to ensure clean state between tests.
        """
        self._config = StampedeConfig().with_env_vars()
        return self.validate()

    def validate(self) -> StampedeConfig:
        """
        Validate current configuration.

        Raises:
            ConfigValidationError: If any config value is invalid.
        """
        return self._config.validate()

    def __repr__(self) -> str:
        return f"STAMPEDE(config={self._config!r})"


# Global singleton instance - always reflects current configuration
STAMPEDE: _STAMPEDE = _STAMPEDE()
STAMPEDE.validate()  # Validate defaults + env vars on module load
