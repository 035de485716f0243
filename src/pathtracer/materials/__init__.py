"""Materials module.

Host-side material descriptions live in :mod:`material`; each variant has a
matching Taichi scatter function.

Scatter functions:
    scatter_lambertian: Diffuse scattering around the surface normal
    scatter_metal: Mirror reflection perturbed by fuzz
    scatter_dielectric: Schlick-weighted reflection or refraction
"""

from src.pathtracer.materials.dielectric import refraction_ratio, scatter_dielectric
from src.pathtracer.materials.lambertian import scatter_lambertian
from src.pathtracer.materials.material import (
    Dielectric,
    Lambertian,
    Material,
    MaterialType,
    Metal,
    material_from_dict,
    material_to_dict,
)
from src.pathtracer.materials.metal import scatter_metal

__all__ = [
    "MaterialType",
    "Material",
    "Lambertian",
    "Metal",
    "Dielectric",
    "material_to_dict",
    "material_from_dict",
    "scatter_lambertian",
    "scatter_metal",
    "scatter_dielectric",
    "refraction_ratio",
]
