"""Canonical scenes.

Two scenes are built in:

- ``demo``: a radius-0.5 sphere at (0, 0, -1) resting on a radius-100
  ground sphere, seen from the origin.
- ``showcase``: a large ground sphere, three radius-1 feature spheres
  (glass, diffuse, metal) and a 22 x 22 grid of small spheres with random
  materials. Grid spheres that would overlap a feature sphere are skipped.

Each factory returns the scene together with the camera configuration that
frames it. The showcase layout is drawn from a NumPy generator seeded by the
caller, so the same seed always gives the same scene.

Example:
    >>> scene, camera_config = create_showcase_scene(seed=42)
    >>> len(scene) > 4
    True
"""

import numpy as np

from src.pathtracer.camera.thin_lens import CameraConfig
from src.pathtracer.core.vector import Vector3, WorldPoint, random_vector
from src.pathtracer.materials.material import Dielectric, Lambertian, Metal
from src.pathtracer.scene.scene import Scene

# =============================================================================
# Showcase Parameters
# =============================================================================

GROUND_CENTER = WorldPoint(0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.5, 0.5, 0.5)

FEATURE_RADIUS = 1.0
GLASS_CENTER = WorldPoint(0.0, 1.0, 0.0)
DIFFUSE_CENTER = WorldPoint(-4.0, 1.0, 0.0)
METAL_CENTER = WorldPoint(4.0, 1.0, 0.0)
FEATURE_CENTERS = (GLASS_CENTER, DIFFUSE_CENTER, METAL_CENTER)

GRID_RANGE = 11
SMALL_RADIUS = 0.2
GLASS_IOR = 1.5

# Minimum distance from a grid sphere's center to any feature sphere's center
MIN_FEATURE_DISTANCE = FEATURE_RADIUS + SMALL_RADIUS

# Material thresholds on a uniform draw: diffuse below 0.8, metal below 0.95
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95

# Upward travel of moving diffuse spheres over the shutter interval
MAX_BOUNCE_HEIGHT = 0.5


def create_demo_scene(aspect_ratio: float = 16.0 / 9.0) -> tuple[Scene, CameraConfig]:
    """Create the two-sphere demo scene.

    Args:
        aspect_ratio: Aspect ratio of the image the camera renders.

    Returns:
        A tuple (scene, camera_config).
    """
    scene = Scene()
    scene.add_sphere(WorldPoint(0.0, 0.0, -1.0), 0.5, Lambertian((0.5, 0.5, 0.5)))
    scene.add_sphere(WorldPoint(0.0, -100.5, -1.0), 100.0, Lambertian((0.5, 0.5, 0.5)))

    camera = CameraConfig(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_distance=1.0,
    )
    return scene, camera


def _overlaps_feature(center: WorldPoint) -> bool:
    return any(center.distance_to(f) <= MIN_FEATURE_DISTANCE for f in FEATURE_CENTERS)


def create_showcase_scene(
    seed: int | None = None,
    motion_blur: bool = False,
    aspect_ratio: float = 16.0 / 9.0,
) -> tuple[Scene, CameraConfig]:
    """Create the showcase scene with a grid of random small spheres.

    Each grid cell (a, b) with a, b in [-11, 11) draws a material choice and
    a jitter, then places a radius-0.2 sphere at
    (a + 0.9 * r1, 0.2, b + 0.9 * r2). Diffuse spheres get albedo
    random * random, metal spheres albedo in [0.5, 1) and fuzz in [0, 0.5),
    the rest are glass.

    Args:
        seed: Seed for the layout generator, or None for a fresh layout.
        motion_blur: If True, diffuse grid spheres rise by a random height
            in [0, 0.5) over the shutter interval [0, 1], and the camera
            shutter is opened for that interval.
        aspect_ratio: Aspect ratio of the image the camera renders.

    Returns:
        A tuple (scene, camera_config).
    """
    rng = np.random.default_rng(seed)
    scene = Scene()

    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, Lambertian(GROUND_ALBEDO))

    for a in range(-GRID_RANGE, GRID_RANGE):
        for b in range(-GRID_RANGE, GRID_RANGE):
            choose_mat = rng.random()
            center = WorldPoint(a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random())

            if _overlaps_feature(center):
                continue

            if choose_mat < DIFFUSE_PROBABILITY:
                albedo = random_vector(rng) * random_vector(rng)
                material = Lambertian(albedo.to_tuple())
                if motion_blur:
                    rise = Vector3(0.0, float(rng.uniform(0.0, MAX_BOUNCE_HEIGHT)), 0.0)
                    scene.add_moving_sphere(center, center + rise, 0.0, 1.0, SMALL_RADIUS, material)
                    continue
            elif choose_mat < METAL_PROBABILITY:
                albedo = random_vector(rng, 0.5, 1.0)
                fuzz = float(rng.uniform(0.0, 0.5))
                material = Metal(albedo.to_tuple(), fuzz)
            else:
                material = Dielectric(GLASS_IOR)

            scene.add_sphere(center, SMALL_RADIUS, material)

    scene.add_sphere(GLASS_CENTER, FEATURE_RADIUS, Dielectric(GLASS_IOR))
    scene.add_sphere(DIFFUSE_CENTER, FEATURE_RADIUS, Lambertian((0.4, 0.2, 0.1)))
    scene.add_sphere(METAL_CENTER, FEATURE_RADIUS, Metal((0.7, 0.6, 0.5), 0.0))

    camera = CameraConfig(
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_distance=10.0,
        shutter_open=0.0,
        shutter_close=1.0 if motion_blur else 0.0,
    )
    return scene, camera


SCENE_NAMES = ("demo", "showcase")


def create_scene(
    name: str,
    seed: int | None = None,
    motion_blur: bool = False,
    aspect_ratio: float = 16.0 / 9.0,
) -> tuple[Scene, CameraConfig]:
    """Create a canonical scene by name.

    The demo scene ignores seed and motion_blur.

    Raises:
        ValueError: If the name is not one of SCENE_NAMES.
    """
    if name == "demo":
        return create_demo_scene(aspect_ratio=aspect_ratio)
    if name == "showcase":
        return create_showcase_scene(seed=seed, motion_blur=motion_blur, aspect_ratio=aspect_ratio)
    raise ValueError(f"Unknown scene {name!r}, expected one of {', '.join(SCENE_NAMES)}")
