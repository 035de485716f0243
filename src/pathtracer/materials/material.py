"""Host-side material descriptions.

Materials form a closed set of variants, each an immutable dataclass tagged
with a :class:`MaterialType`. Parameters are validated at construction; the
scattering functions running inside kernels assume valid inputs.

Example:
    >>> glass = Dielectric(index_of_refraction=1.5)
    >>> glass.material_type
    <MaterialType.DIELECTRIC: 2>
    >>> material_from_dict({"type": "metal", "albedo": [0.7, 0.6, 0.5], "fuzz": 0.0})
    Metal(albedo=(0.7, 0.6, 0.5), fuzz=0.0)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Stored per primitive in the scene fields and used for material dispatch
    in the path tracer.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


Color = tuple[float, float, float]


def _validate_albedo(albedo: Color) -> Color:
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))


@dataclass(frozen=True)
class Lambertian:
    """Ideal diffuse material.

    Attributes:
        albedo: Diffuse reflectance (RGB, each component in [0, 1]).
    """

    albedo: Color

    material_type = MaterialType.LAMBERTIAN

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", _validate_albedo(self.albedo))


@dataclass(frozen=True)
class Metal:
    """Specular reflector with optional fuzz.

    Attributes:
        albedo: Reflectance (RGB, each component in [0, 1]).
        fuzz: Perturbation radius of the mirror direction, in [0, 1].
            0 is a perfect mirror.
    """

    albedo: Color
    fuzz: float = 0.0

    material_type = MaterialType.METAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", _validate_albedo(self.albedo))
        if self.fuzz < 0.0 or self.fuzz > 1.0:
            raise ValueError(f"Metal fuzz must be in [0, 1], got {self.fuzz}")


@dataclass(frozen=True)
class Dielectric:
    """Clear refractive material such as glass or water.

    Attributes:
        index_of_refraction: Must be positive. Air 1.0, water 1.33,
            glass 1.5, diamond 2.4.
    """

    index_of_refraction: float

    material_type = MaterialType.DIELECTRIC

    def __post_init__(self) -> None:
        if self.index_of_refraction <= 0.0:
            raise ValueError(
                f"Index of refraction must be positive, got {self.index_of_refraction}"
            )


Material = Union[Lambertian, Metal, Dielectric]


def material_to_dict(material: Material) -> dict[str, Any]:
    """Serialize a material to a JSON-ready dictionary."""
    if isinstance(material, Lambertian):
        return {"type": "lambertian", "albedo": list(material.albedo)}
    if isinstance(material, Metal):
        return {"type": "metal", "albedo": list(material.albedo), "fuzz": material.fuzz}
    if isinstance(material, Dielectric):
        return {"type": "dielectric", "index_of_refraction": material.index_of_refraction}
    raise TypeError(f"Unsupported material: {type(material).__name__}")


def material_from_dict(data: dict[str, Any]) -> Material:
    """Build a material from a dictionary produced by :func:`material_to_dict`.

    Raises:
        ValueError: If the type is unknown or the parameters are invalid.
    """
    kind = data.get("type")
    if kind == "lambertian":
        return Lambertian(albedo=tuple(data["albedo"]))
    if kind == "metal":
        return Metal(albedo=tuple(data["albedo"]), fuzz=float(data.get("fuzz", 0.0)))
    if kind == "dielectric":
        return Dielectric(index_of_refraction=float(data["index_of_refraction"]))
    raise ValueError(f"Unknown material type: {kind!r}")
