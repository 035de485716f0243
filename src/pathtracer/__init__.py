"""Taichi-based Monte Carlo path tracer for scenes of spheres.

This package renders a fixed scene of spheres into an 8-bit RGB image with:
- Path tracing with an iterative, depth-bounded scattering loop
- Lambertian, metal and dielectric materials
- Static and moving spheres, with motion blur over a shutter interval
- A thin-lens camera with depth of field
- Explicit-state random number generation, reproducible per seed

Subpackages:
    core: Random numbers, rays, host vector types, settings, integrator, renderer
    geometry: Sphere, moving sphere and bounding box intersection
    materials: Material descriptions and their scattering functions
    scene: Scene container, device upload and built-in scenes
    camera: Thin-lens camera with ray generation
    preview: Image export and Matplotlib display
"""

__version__ = "0.1.0"
