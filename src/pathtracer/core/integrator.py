"""Path tracing integrator for Monte Carlo light transport.

This module implements the per-pixel sampling loop and the path evaluation
it drives. Each sample follows one scattering chain through the scene:

    camera ray -> nearest hit -> material scatter -> nearest hit -> ...

until the ray escapes to the sky, a material absorbs it or the depth limit
runs out. The attenuations collected along the way multiply the sky color
the path finally sees; an absorbed or exhausted path contributes black.

The chain is an explicit loop bounded by ``max_depth`` rather than a
recursion.

Pixels are independent. Every pixel keeps its own accumulator and derives a
private generator state per sample from ``(seed, row, col, sample)``, and
writes its final byte triple exactly once, so the outer loop parallelises
without synchronisation and a fixed seed reproduces the image exactly.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.core.renderer import Renderer
    >>> from src.pathtracer.core.settings import RenderSettings
    >>> # Renderer(RenderSettings(seed=1)).render(scene, camera)
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, normalize
from src.pathtracer.core.rng import next_float, seed_sample

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Nearest accepted hit distance, avoids re-hitting the surface a ray left
T_MIN = 0.001
T_MAX = float("inf")

# Sky gradient endpoints: looking straight down and straight up
SKY_BOTTOM = vec3(1.0, 1.0, 1.0)
SKY_TOP = vec3(0.5, 0.7, 1.0)

# Largest channel value before quantization; keeps 256 * c below 256
MAX_CHANNEL = 0.999


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background seen by a ray that escapes the scene.

    A vertical gradient from white (t = 0, looking down) to sky blue
    (t = 1, looking up) with t = (normalize(direction).y + 1) / 2.
    """
    t = 0.5 * (normalize(direction).y + 1.0)
    return (1.0 - t) * SKY_BOTTOM + t * SKY_TOP


@ti.func
def ray_color(ray: Ray, scene: ti.template(), max_depth: ti.i32, rng: ti.u32):
    """Estimate the color carried back along a ray.

    Args:
        ray: The camera ray.
        scene: SceneData to trace against.
        max_depth: Maximum number of hits followed. A path still bouncing
            after max_depth hits is black.
        rng: Generator state.

    Returns:
        A tuple (color, new_state).
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray
    state = rng

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = scene.hit(current, T_MIN, T_MAX)
            if rec.hit == 0:
                color = throughput * sky_color(current.direction)
                active = 0
            else:
                did_scatter, attenuation, scattered, st = scene.scatter(current, rec, state)
                state = st
                if did_scatter == 0:
                    # Absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    current = scattered

    return color, state


# =============================================================================
# Pixel Finishing
# =============================================================================


@ti.func
def apply_gamma(color: vec3, gamma: ti.f32) -> vec3:
    """Map linear color to display values.

    gamma == 2 uses a square root, gamma == 1 is the identity, anything
    else raises each channel to 1 / gamma.
    """
    result = color
    if gamma == 2.0:
        result = ti.sqrt(color)
    elif gamma != 1.0:
        result = color ** (1.0 / gamma)
    return result


@ti.func
def quantize(color: vec3):
    """Clamp to [0, 0.999], scale by 256 and truncate to bytes."""
    return ti.cast(256.0 * tm.clamp(color, 0.0, MAX_CHANNEL), ti.u8)


@ti.func
def finish_pixel(accumulated: vec3, samples: ti.i32, gamma: ti.f32):
    """Average accumulated samples, gamma-correct and quantize."""
    color = accumulated / ti.cast(samples, ti.f32)

    # NaN/Inf from degenerate geometry count as black
    for c in ti.static(range(3)):
        if tm.isnan(color[c]) or tm.isinf(color[c]):
            color[c] = 0.0

    return quantize(apply_gamma(color, gamma))


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def render_rows(
    scene: ti.template(),
    camera: ti.template(),
    image: ti.template(),
    row_start: ti.i32,
    row_end: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
    gamma: ti.f32,
):
    """Render rows [row_start, row_end) of the image.

    Row 0 is the top of the image. Pixel (row, col) covers the footprint
    u in [col, col + 1) / (width - 1) and v in
    [height - 1 - row, height - row) / (height - 1); each sample jitters
    uniformly inside it.

    Args:
        scene: SceneData to render.
        camera: Camera generating the primary rays.
        image: (height, width) u8 vector field; each pixel is written once.
        row_start: First row to render.
        row_end: One past the last row to render.
        samples: Samples per pixel.
        max_depth: Maximum scattering depth.
        seed: Render-wide base seed.
        gamma: Display gamma.
    """
    height = ti.static(image.shape[0])
    width = ti.static(image.shape[1])
    u_scale = ti.static(1.0 / max(width - 1, 1))
    v_scale = ti.static(1.0 / max(height - 1, 1))

    for row, col in ti.ndrange((row_start, row_end), width):
        accumulated = vec3(0.0, 0.0, 0.0)
        for sample in range(samples):
            rng = seed_sample(seed, row, col, sample)
            du, rng = next_float(rng)
            dv, rng = next_float(rng)
            u = (ti.cast(col, ti.f32) + du) * u_scale
            v = (ti.cast(height - 1 - row, ti.f32) + dv) * v_scale
            ray, rng = camera.get_ray(u, v, rng)
            color, rng = ray_color(ray, scene, max_depth, rng)
            accumulated += color
        image[row, col] = finish_pixel(accumulated, samples, gamma)
