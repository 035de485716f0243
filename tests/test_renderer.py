"""Tests for the batch renderer.

Tests cover:
- Image shape and dtype
- The empty scene renders the sky gradient
- Fixed seeds reproduce images bit for bit
- Row batching does not change the result
- Progress reporting
"""

import math

import numpy as np
import pytest


def _render(scene, camera_config, **settings_kwargs):
    from src.pathtracer.camera.thin_lens import Camera
    from src.pathtracer.core.renderer import Renderer
    from src.pathtracer.core.settings import RenderSettings

    settings = RenderSettings(**settings_kwargs)
    renderer = Renderer(settings)
    config = camera_config.with_aspect_ratio(settings.aspect_ratio)
    return renderer, renderer.render(scene, Camera(config))


@pytest.fixture
def demo():
    from src.pathtracer.scene.presets import create_demo_scene

    return create_demo_scene()


class TestRendererOutput:
    """Tests for Renderer.render output."""

    def test_shape_and_dtype(self, demo):
        scene, camera_config = demo
        renderer, image = _render(
            scene, camera_config, width=32, samples_per_pixel=1, max_depth=4, seed=1
        )
        assert image.shape == (18, 32, 3)
        assert image.dtype == np.uint8
        assert renderer.width == 32
        assert renderer.height == 18

    def test_last_seed_is_recorded(self, demo):
        scene, camera_config = demo
        renderer, _ = _render(
            scene, camera_config, width=8, samples_per_pixel=1, max_depth=2, seed=99
        )
        assert renderer.last_seed == 99

    def test_entropy_seed_is_recorded(self, demo):
        scene, camera_config = demo
        renderer, _ = _render(scene, camera_config, width=8, samples_per_pixel=1, max_depth=2)
        assert renderer.last_seed is not None
        assert 0 <= renderer.last_seed <= 0xFFFFFFFF

    def test_empty_scene_is_sky(self):
        """Test that every pixel of an empty scene matches the sky at its center."""
        from src.pathtracer.camera.thin_lens import Camera
        from src.pathtracer.scene.presets import create_demo_scene
        from src.pathtracer.scene.scene import Scene

        _, camera_config = create_demo_scene()
        _, image = _render(
            Scene(), camera_config, width=64, samples_per_pixel=16, max_depth=5, seed=3
        )
        height, width, _ = image.shape
        camera = Camera(camera_config)

        for row in range(0, height, 5):
            for col in range(0, width, 7):
                u = (col + 0.5) / (width - 1)
                v = (height - 1 - row + 0.5) / (height - 1)
                direction = camera.viewport_point(u, v) - camera.origin
                y = direction.y / direction.length()
                t = 0.5 * (y + 1.0)
                expected = [
                    (1.0 - t) + t * 0.5,
                    (1.0 - t) + t * 0.7,
                    1.0,
                ]
                expected = [int(256 * min(math.sqrt(c), 0.999)) for c in expected]
                assert np.all(np.abs(image[row, col].astype(int) - expected) <= 2), (row, col)

        assert np.all(image[:, :, 2] == 255)

    def test_sky_brightens_downward(self):
        from src.pathtracer.scene.presets import create_demo_scene
        from src.pathtracer.scene.scene import Scene

        _, camera_config = create_demo_scene()
        _, image = _render(Scene(), camera_config, width=16, samples_per_pixel=4, seed=5)
        red = image[:, :, 0].astype(int)
        # White at the bottom, blue at the top
        assert red[-1].mean() > red[0].mean()

    def test_demo_scene_has_sphere_shadow(self, demo):
        """Test that the demo sphere is darker than the sky above it."""
        scene, camera_config = demo
        _, image = _render(
            scene, camera_config, width=32, samples_per_pixel=8, max_depth=10, seed=2
        )
        height, width, _ = image.shape
        sphere_pixel = image[height // 2, width // 2].astype(int)
        sky_pixel = image[0, width // 2].astype(int)
        assert sphere_pixel.sum() < sky_pixel.sum()


class TestDeterminism:
    """Tests for seeded reproducibility."""

    def test_same_seed_same_image(self, demo):
        scene, camera_config = demo
        kwargs = dict(width=24, samples_per_pixel=4, max_depth=8, seed=1234)
        _, first = _render(scene, camera_config, **kwargs)
        _, second = _render(scene, camera_config, **kwargs)
        np.testing.assert_array_equal(first, second)

    def test_batch_size_does_not_change_image(self, demo):
        scene, camera_config = demo
        kwargs = dict(width=24, samples_per_pixel=4, max_depth=8, seed=77)
        _, whole = _render(scene, camera_config, rows_per_batch=64, **kwargs)
        _, batched = _render(scene, camera_config, rows_per_batch=1, **kwargs)
        np.testing.assert_array_equal(whole, batched)

    def test_different_seed_different_image(self, demo):
        scene, camera_config = demo
        kwargs = dict(width=24, samples_per_pixel=2, max_depth=8)
        _, first = _render(scene, camera_config, seed=1, **kwargs)
        _, second = _render(scene, camera_config, seed=2, **kwargs)
        assert not np.array_equal(first, second)

    def test_renderer_reuse_is_deterministic(self, demo):
        from src.pathtracer.camera.thin_lens import Camera
        from src.pathtracer.core.renderer import Renderer
        from src.pathtracer.core.settings import RenderSettings

        scene, camera_config = demo
        renderer = Renderer(RenderSettings(width=16, samples_per_pixel=2, max_depth=4, seed=8))
        camera = Camera(camera_config)
        first = renderer.render(scene, camera)
        second = renderer.render(scene, camera)
        np.testing.assert_array_equal(first, second)


class TestProgress:
    """Tests for progress callbacks and the generator interface."""

    def test_callback_reports_every_batch(self, demo):
        from src.pathtracer.camera.thin_lens import Camera
        from src.pathtracer.core.renderer import Renderer
        from src.pathtracer.core.settings import RenderSettings

        scene, camera_config = demo
        renderer = Renderer(
            RenderSettings(width=32, samples_per_pixel=1, max_depth=2, seed=1, rows_per_batch=5)
        )
        calls = []
        renderer.render(scene, Camera(camera_config), callback=lambda d, t: calls.append((d, t)))

        assert calls == [(5, 18), (10, 18), (15, 18), (18, 18)]

    def test_progressive_is_monotonic(self, demo):
        from src.pathtracer.camera.thin_lens import Camera
        from src.pathtracer.core.renderer import Renderer
        from src.pathtracer.core.settings import RenderSettings

        scene, camera_config = demo
        renderer = Renderer(
            RenderSettings(width=16, samples_per_pixel=1, max_depth=2, seed=1, rows_per_batch=2)
        )
        done = [d for d, _ in renderer.render_progressive(scene, Camera(camera_config))]
        assert done == sorted(done)
        assert done[-1] == renderer.height

    def test_accepts_uploaded_scene(self, demo):
        from src.pathtracer.camera.thin_lens import Camera
        from src.pathtracer.core.renderer import Renderer
        from src.pathtracer.core.settings import RenderSettings
        from src.pathtracer.scene.intersection import SceneData

        scene, camera_config = demo
        settings = RenderSettings(width=16, samples_per_pixel=2, max_depth=4, seed=4)
        camera = Camera(camera_config)
        from_scene = Renderer(settings).render(scene, camera)
        from_data = Renderer(settings).render(SceneData(scene), camera)
        np.testing.assert_array_equal(from_scene, from_data)

    def test_repr(self):
        from src.pathtracer.core.renderer import Renderer
        from src.pathtracer.core.settings import RenderSettings

        renderer = Renderer(RenderSettings(width=8, samples_per_pixel=3, max_depth=2))
        assert repr(renderer) == "Renderer(width=8, height=4, samples=3, max_depth=2)"
