"""Tests for global configuration module."""

import os
import unittest
from unittest.mock import patch

from stampede._config import (
    STAMPEDE,
    ConfigEnvVarError,
    ConfigurationError,
    ConfigValidationError,
    CoreConfig,
    EnvVars,
    HttpConfig,
    StampedeConfig,
)


class TestDefaults(unittest.TestCase):
    """Tests for default configuration values."""

    def setUp(self):
        STAMPEDE.reset()

    def tearDown(self):
        STAMPEDE.reset()

    def test_core_defaults(self):
        """Should use constant pauses by default."""
        self.assertEqual(STAMPEDE.config.core.default_pause_type, "constant")

    def test_http_defaults(self):
        """Should enable warm-up with sensible defaults."""
        self.assertTrue(STAMPEDE.config.http.enable_warm_up)
        self.assertEqual(STAMPEDE.config.http.warm_up_url, "https://gatling.io")
        self.assertEqual(STAMPEDE.config.http.warm_up_timeout, 5.0)


class TestSTAMPEDEConfigure(unittest.TestCase):
    """Tests for STAMPEDE.configure() method."""

    def setUp(self):
        STAMPEDE.reset()

    def tearDown(self):
        STAMPEDE.reset()

    def test_user_http_values(self):
        """Should override HTTP defaults with STAMPEDE.configure()."""
        STAMPEDE.configure(http={"enable_warm_up": False, "warm_up_timeout": 1.5})
        self.assertFalse(STAMPEDE.config.http.enable_warm_up)
        self.assertEqual(STAMPEDE.config.http.warm_up_timeout, 1.5)
        # Other values should remain default
        self.assertEqual(STAMPEDE.config.http.warm_up_url, "https://gatling.io")

    def test_user_core_values(self):
        """Should override core defaults with STAMPEDE.configure()."""
        STAMPEDE.configure(core={"default_pause_type": "exponential"})
        self.assertEqual(STAMPEDE.config.core.default_pause_type, "exponential")

    def test_configure_returns_config(self):
        """Should return the configured instance."""
        result = STAMPEDE.configure(http={"warm_up_timeout": 2.0})
        self.assertIs(result, STAMPEDE.config)

    def test_unknown_field_raises_value_error(self):
        """Should reject unknown fields."""
        with self.assertRaises(ValueError) as context:
            STAMPEDE.configure(http={"warmup_url": "https://x"})
        self.assertIn("warmup_url", str(context.exception))

    def test_invalid_value_raises_validation_error(self):
        """Should validate configured values."""
        with self.assertRaises(ConfigValidationError) as context:
            STAMPEDE.configure(http={"warm_up_timeout": 0})
        self.assertEqual(context.exception.field, "warm_up_timeout")
        self.assertEqual(context.exception.section, "http")

    @patch.dict(os.environ, {"STAMPEDE_HTTP_WARM_UP_TIMEOUT": "9.0"})
    def test_configure_wins_over_env_vars(self):
        """Values passed to configure() should take precedence over env vars."""
        STAMPEDE.configure(http={"warm_up_timeout": 3.0})
        self.assertEqual(STAMPEDE.config.http.warm_up_timeout, 3.0)

    @patch.dict(os.environ, {"STAMPEDE_HTTP_WARM_UP_TIMEOUT": "9.0"})
    def test_env_vars_used_as_fallback(self):
        """Env vars should apply to fields not passed to configure()."""
        STAMPEDE.configure(http={"enable_warm_up": False})
        self.assertEqual(STAMPEDE.config.http.warm_up_timeout, 9.0)

    @patch.dict(os.environ, {"STAMPEDE_HTTP_WARM_UP_TIMEOUT": "9.0"})
    def test_env_vars_ignored_when_not_allowed(self):
        """Env vars should be ignored with allow_env_override=False."""
        STAMPEDE.configure(allow_env_override=False)
        self.assertEqual(STAMPEDE.config.http.warm_up_timeout, 5.0)


class TestEnvVars(unittest.TestCase):
    """Tests for environment variable handling."""

    def setUp(self):
        STAMPEDE.reset()

    def tearDown(self):
        STAMPEDE.reset()

    @patch.dict(
        os.environ,
        {
            "STAMPEDE_CORE_DEFAULT_PAUSE_TYPE": "disabled",
            "STAMPEDE_HTTP_ENABLE_WARM_UP": "false",
            "STAMPEDE_HTTP_WARM_UP_URL": "https://warm.example.com",
            "STAMPEDE_HTTP_WARM_UP_TIMEOUT": "2.5",
        },
    )
    def test_all_env_vars(self):
        """All env vars should be read correctly."""
        STAMPEDE.reset()
        self.assertEqual(STAMPEDE.config.core.default_pause_type, "disabled")
        self.assertFalse(STAMPEDE.config.http.enable_warm_up)
        self.assertEqual(STAMPEDE.config.http.warm_up_url, "https://warm.example.com")
        self.assertEqual(STAMPEDE.config.http.warm_up_timeout, 2.5)

    @patch.dict(os.environ, {"STAMPEDE_HTTP_ENABLE_WARM_UP": "yes"})
    def test_bool_env_var_accepts_yes(self):
        """Boolean env vars should accept 'yes'."""
        self.assertTrue(HttpConfig(enable_warm_up=False).with_env_vars().enable_warm_up)

    @patch.dict(os.environ, {"STAMPEDE_HTTP_WARM_UP_TIMEOUT": "soon"})
    def test_invalid_env_var_raises(self):
        """Unconvertible env vars should raise ConfigEnvVarError."""
        with self.assertRaises(ConfigEnvVarError) as context:
            HttpConfig().with_env_vars()
        self.assertEqual(context.exception.env_var, "STAMPEDE_HTTP_WARM_UP_TIMEOUT")
        self.assertIsInstance(context.exception, ConfigurationError)

    @patch.dict(os.environ, {"STAMPEDE_HTTP_WARM_UP_URL": ""})
    def test_empty_env_var_is_ignored(self):
        """Empty env vars should be treated as unset."""
        self.assertIsNone(EnvVars.get("STAMPEDE_HTTP_WARM_UP_URL"))


class TestWithOverrides(unittest.TestCase):
    """Tests for OverridableConfig.with_overrides() method."""

    def test_with_overrides_returns_new_instance(self):
        """with_overrides() should return a new instance."""
        original = HttpConfig()
        modified = original.with_overrides({"warm_up_timeout": 1.0})
        self.assertIsNot(original, modified)
        self.assertEqual(original.warm_up_timeout, 5.0)
        self.assertEqual(modified.warm_up_timeout, 1.0)

    def test_with_empty_overrides_returns_same_instance(self):
        """Empty overrides should return the same instance."""
        original = HttpConfig()
        self.assertIs(original.with_overrides({}), original)

    def test_none_values_are_ignored(self):
        """None values should not override fields."""
        modified = HttpConfig().with_overrides({"warm_up_url": None})
        self.assertEqual(modified.warm_up_url, "https://gatling.io")

    def test_section_overrides(self):
        """StampedeConfig should merge section overrides."""
        config = StampedeConfig().with_section_overrides(core={"default_pause_type": "disabled"})
        self.assertEqual(config.core.default_pause_type, "disabled")
        self.assertTrue(config.http.enable_warm_up)


class TestValidation(unittest.TestCase):
    """Tests for config validation."""

    def test_invalid_pause_type(self):
        """Should reject unknown default pause types."""
        with self.assertRaises(ConfigValidationError):
            CoreConfig(default_pause_type="sometimes").validate()  # type: ignore[arg-type]

    def test_invalid_warm_up_url(self):
        """Should reject non-HTTP warm-up URLs."""
        with self.assertRaises(ConfigValidationError):
            HttpConfig(warm_up_url="ftp://example.com").validate()

    def test_valid_config_returns_self(self):
        """validate() should return the validated instance."""
        config = StampedeConfig()
        self.assertIs(config.validate(), config)


class TestDataclassImmutability(unittest.TestCase):
    """Tests for config immutability."""

    def test_http_config_is_frozen(self):
        """HttpConfig should be immutable."""
        with self.assertRaises(AttributeError):
            HttpConfig().warm_up_timeout = 1.0  # type: ignore[misc]

    def test_root_config_is_frozen(self):
        """StampedeConfig should be immutable."""
        with self.assertRaises(AttributeError):
            StampedeConfig().http = HttpConfig()  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
