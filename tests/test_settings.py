"""Tests for RenderSettings."""

import pytest


class TestRenderSettings:
    """Tests for defaults, derived height and validation."""

    def test_defaults(self):
        from src.pathtracer.core.settings import RenderSettings

        settings = RenderSettings()
        assert settings.width == 400
        assert settings.height == 225
        assert settings.samples_per_pixel == 100
        assert settings.max_depth == 50
        assert settings.seed is None
        assert settings.gamma == 2.0

    @pytest.mark.parametrize(
        "width, aspect_ratio, height",
        [(1200, 3.0 / 2.0, 800), (64, 16.0 / 9.0, 36), (10, 3.0, 3), (7, 0.5, 14)],
    )
    def test_height_truncates(self, width, aspect_ratio, height):
        from src.pathtracer.core.settings import RenderSettings

        assert RenderSettings(width=width, aspect_ratio=aspect_ratio).height == height

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"width": 0}, "width"),
            ({"aspect_ratio": 0.0}, "Aspect ratio"),
            ({"width": 2, "aspect_ratio": 4.0}, "empty image"),
            ({"samples_per_pixel": 0}, "Samples per pixel"),
            ({"max_depth": 0}, "Max depth"),
            ({"gamma": 0.0}, "Gamma"),
            ({"rows_per_batch": 0}, "Rows per batch"),
        ],
    )
    def test_invalid_settings_raise(self, kwargs, message):
        from src.pathtracer.core.settings import RenderSettings

        with pytest.raises(ValueError, match=message):
            RenderSettings(**kwargs)

    def test_frozen(self):
        import dataclasses

        from src.pathtracer.core.settings import RenderSettings

        with pytest.raises(dataclasses.FrozenInstanceError):
            RenderSettings().width = 10
