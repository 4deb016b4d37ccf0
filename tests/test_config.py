"""Tests for the render configuration and error hierarchy."""

import pytest


class TestRenderConfig:
    """Test RenderConfig defaults and validation."""

    def test_defaults(self):
        """Test the default tolerances."""
        from src.whitted.core.config import RenderConfig

        config = RenderConfig()

        assert config.epsilon == 1e-5
        assert config.shadow_bias == 1e-5
        assert config.invertibility_threshold == 1e-5
        assert config.max_depth == 5
        assert config.kernel_bias == 1e-4

    @pytest.mark.parametrize(
        "field,value",
        [
            ("epsilon", 0.0),
            ("shadow_bias", -1e-3),
            ("invertibility_threshold", 0.0),
            ("kernel_bias", -1.0),
            ("max_depth", -1),
        ],
    )
    def test_invalid_values(self, field, value):
        """Test that out-of-range values raise ValueError."""
        from src.whitted.core.config import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(**{field: value})

    def test_frozen(self):
        """Test that a config cannot be mutated in place."""
        import dataclasses

        from src.whitted.core.config import RenderConfig

        with pytest.raises(dataclasses.FrozenInstanceError):
            RenderConfig().epsilon = 0.1


class TestActiveConfig:
    """Test replacing the process-wide configuration."""

    def test_configure_returns_previous(self):
        """Test that configure activates overrides and returns the old config."""
        from src.whitted.core.config import configure, get_config

        previous = configure(max_depth=2)

        assert get_config().max_depth == 2
        assert previous.max_depth == 5

    def test_set_config(self):
        """Test activating an explicit config."""
        from src.whitted.core.config import RenderConfig, get_config, set_config

        custom = RenderConfig(epsilon=1e-3)
        set_config(custom)

        assert get_config() is custom

    def test_configure_rejects_unknown_field(self):
        """Test that unknown overrides raise TypeError."""
        from src.whitted.core.config import configure

        with pytest.raises(TypeError):
            configure(not_a_field=1)


class TestFromEnv:
    """Test loading configuration from environment variables."""

    def test_reads_prefixed_variables(self, monkeypatch):
        """Test that WHITTED_* variables override defaults."""
        from src.whitted.core.config import RenderConfig

        monkeypatch.setenv("WHITTED_MAX_DEPTH", "3")
        monkeypatch.setenv("WHITTED_SHADOW_BIAS", "0.001")

        config = RenderConfig.from_env()

        assert config.max_depth == 3
        assert config.shadow_bias == 0.001
        assert config.epsilon == 1e-5

    def test_custom_prefix(self, monkeypatch):
        """Test reading variables with a different prefix."""
        from src.whitted.core.config import RenderConfig

        monkeypatch.setenv("RT_EPSILON", "0.01")

        assert RenderConfig.from_env(prefix="RT_").epsilon == 0.01

    def test_unparsable_value(self, monkeypatch):
        """Test that garbage values raise ValueError naming the variable."""
        from src.whitted.core.config import RenderConfig

        monkeypatch.setenv("WHITTED_MAX_DEPTH", "deep")

        with pytest.raises(ValueError, match="WHITTED_MAX_DEPTH"):
            RenderConfig.from_env()


class TestErrors:
    """Test the exception hierarchy."""

    def test_all_errors_share_a_base(self):
        """Test that every tracer error derives from RayTracerError."""
        from src.whitted.core.errors import (
            DegenerateVectorError,
            InvalidOperandError,
            NonInvertibleMatrixError,
            RayTracerError,
        )

        for error in (DegenerateVectorError, InvalidOperandError, NonInvertibleMatrixError):
            assert issubclass(error, RayTracerError)

    def test_builtin_bases(self):
        """Test that errors are also the matching built-in exceptions."""
        from src.whitted.core.errors import (
            DegenerateVectorError,
            InvalidOperandError,
            NonInvertibleMatrixError,
        )

        assert issubclass(NonInvertibleMatrixError, ValueError)
        assert issubclass(DegenerateVectorError, ValueError)
        assert issubclass(InvalidOperandError, TypeError)
