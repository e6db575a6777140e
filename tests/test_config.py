"""Unit tests for render configuration validation."""

import pytest


class TestRenderConfig:
    """Tests for RenderConfig."""

    def test_defaults_are_valid(self):
        """Test the default configuration passes validation."""
        from spectracer.core.config import RenderConfig

        config = RenderConfig()
        config.validate()
        assert config.max_depth == 30
        assert 1 <= config.workers <= 64

    def test_default_worker_count(self, monkeypatch):
        """Test the worker count falls back to 20 without a CPU count."""
        import os

        from spectracer.core.config import FALLBACK_WORKER_COUNT, default_worker_count

        monkeypatch.setattr(os, "cpu_count", lambda: None)
        assert default_worker_count() == FALLBACK_WORKER_COUNT

    def test_with_overrides(self):
        """Test overrides return a modified copy."""
        from spectracer.core.config import RenderConfig

        config = RenderConfig(width=10, height=5)
        changed = config.with_overrides(width=20)
        assert changed.width == 20
        assert config.width == 10
        assert changed.aspect_ratio == pytest.approx(4.0)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("width", 0),
            ("height", -1),
            ("width", 2.5),
            ("workers", 0),
            ("workers", 65),
            ("samples_per_pixel", 0),
            ("frames", 0),
            ("max_depth", -1),
            ("max_depth", 101),
            ("max_depth", True),
            ("seed", -3),
            ("gamma", 0.0),
        ],
    )
    def test_invalid_values(self, field, value):
        """Test each invalid field raises ConfigurationError."""
        from spectracer.core.config import RenderConfig
        from spectracer.core.errors import ConfigurationError

        with pytest.raises(ConfigurationError):
            RenderConfig(**{field: value}).validate()

    def test_configuration_error_is_value_error(self):
        """Test configuration errors can be caught as ValueError."""
        from spectracer.core.errors import ConfigurationError, SpectracerError

        assert issubclass(ConfigurationError, ValueError)
        assert issubclass(ConfigurationError, SpectracerError)

    def test_depth_bounds_accepted(self):
        """Test max_depth 0 and 100 are accepted."""
        from spectracer.core.config import RenderConfig

        RenderConfig(max_depth=0).validate()
        RenderConfig(max_depth=100).validate()
