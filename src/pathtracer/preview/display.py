"""Display utilities for rendered images.

Shows a finished render in a Matplotlib window. The renderer already applies
gamma and quantizes to bytes, so images are displayed as-is.

Example:
    >>> from src.pathtracer.preview.display import show_image
    >>> image = renderer.render(scene, camera)
    >>> show_image(image, title="showcase - 100 SPP")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def show_image(
    image: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display an 8-bit RGB image as a Matplotlib figure.

    Args:
        image: (H, W, 3) uint8 array, row 0 at the top.
        title: Optional figure title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(image, interpolation="nearest")
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 4.5),
    block: bool = True,
) -> float:
    """Display two renders side by side with an amplified difference view.

    Useful for checking that two seeds, or two sample counts, converge to
    the same image.

    Args:
        image_a: First image (H, W, 3) uint8.
        image_b: Second image (H, W, 3) uint8.
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until the figure is closed.

    Returns:
        RMSE between the two images in byte units.
    """
    import matplotlib.pyplot as plt

    from src.pathtracer.preview.export import compute_rmse

    rmse = compute_rmse(image_a, image_b)

    diff = np.abs(image_a.astype(np.float64) - image_b.astype(np.float64)) / 255.0
    diff_amplified = np.clip(diff * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(image_a, interpolation="nearest")
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(image_b, interpolation="nearest")
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified, interpolation="nearest")
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.3f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
