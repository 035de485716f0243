"""Batch renderer driving the integrator kernel.

This module wraps :func:`src.pathtracer.core.integrator.render_rows` with:
- Render settings (size, samples, depth, seed, gamma)
- Row batches, so long renders can report progress between launches
- Progress callbacks and a generator interface
- Conversion of the device image to a NumPy array

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.renderer import Renderer
    >>> from src.pathtracer.core.settings import RenderSettings
    >>> from src.pathtracer.scene.presets import create_demo_scene
    >>> from src.pathtracer.camera.thin_lens import Camera
    >>>
    >>> scene, camera_config = create_demo_scene()
    >>> settings = RenderSettings(width=200, samples_per_pixel=10, seed=7)
    >>> renderer = Renderer(settings)
    >>> image = renderer.render(scene, Camera(camera_config))
    >>> image.shape
    (112, 200, 3)
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.pathtracer.core.integrator import render_rows
from src.pathtracer.core.rng import resolve_seed
from src.pathtracer.core.settings import RenderSettings
from src.pathtracer.scene.intersection import SceneData
from src.pathtracer.scene.scene import Scene

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders scenes into an 8-bit RGB image.

    The image buffer is a Taichi u8 vector field of shape (height, width),
    allocated once per renderer and overwritten pixel by pixel on every
    render.

    Attributes:
        settings: The render settings.
        last_seed: Base seed used by the most recent render, or None before
            the first one. Pass it back as RenderSettings.seed to reproduce
            an entropy-seeded render.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        self.last_seed: int | None = None
        self._image = ti.Vector.field(
            3, dtype=ti.u8, shape=(self.settings.height, self.settings.width)
        )

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.settings.height

    def _prepare(self, scene: Scene | SceneData) -> tuple[SceneData, int]:
        scene_data = scene if isinstance(scene, SceneData) else SceneData(scene)
        seed = resolve_seed(self.settings.seed)
        self.last_seed = seed
        return scene_data, seed

    def render_progressive(
        self,
        scene: Scene | SceneData,
        camera,
    ) -> Generator[tuple[int, int], None, None]:
        """Render row batches, yielding progress after each one.

        Args:
            scene: The scene, or an already uploaded SceneData.
            camera: The Camera generating primary rays.

        Yields:
            Tuple of (rows_done, total_rows).
        """
        scene_data, seed = self._prepare(scene)
        settings = self.settings
        height = settings.height

        for row_start in range(0, height, settings.rows_per_batch):
            row_end = min(row_start + settings.rows_per_batch, height)
            render_rows(
                scene_data,
                camera,
                self._image,
                row_start,
                row_end,
                settings.samples_per_pixel,
                settings.max_depth,
                seed,
                settings.gamma,
            )
            yield (row_end, height)

    def render(
        self,
        scene: Scene | SceneData,
        camera,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render the full image.

        Args:
            scene: The scene, or an already uploaded SceneData.
            camera: The Camera generating primary rays.
            callback: Optional function called after each row batch with
                (rows_done, total_rows).

        Returns:
            The image as a (height, width, 3) uint8 array, row 0 at the top.

        Example:
            >>> def progress(done, total):
            ...     print(f"rendering row {done} / {total}")
            >>> image = renderer.render(scene, camera, callback=progress)
        """
        for done, total in self.render_progressive(scene, camera):
            if callback is not None:
                callback(done, total)
        return self.get_image_numpy()

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """Copy the current image to a (height, width, 3) uint8 array."""
        return self._image.to_numpy().astype(np.uint8)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.settings.samples_per_pixel}, max_depth={self.settings.max_depth})"
        )
