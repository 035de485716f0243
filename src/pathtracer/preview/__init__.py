"""Preview module for output and visualization.

Components:
    export: PPM and Pillow image export
    display: Matplotlib-based image display

Example:
    >>> from src.pathtracer.preview import save_image, show_image
    >>> image = renderer.render(scene, camera)
    >>> save_image(image, "output.ppm")
    >>> show_image(image)
"""

from src.pathtracer.preview.display import show_comparison, show_image
from src.pathtracer.preview.export import (
    compute_rmse,
    load_image,
    save_image,
    save_png,
    save_ppm,
    write_ppm,
)

__all__ = [
    "show_image",
    "show_comparison",
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "load_image",
    "compute_rmse",
]
