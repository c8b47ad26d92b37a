"""
Shape types and dimensional configuration for pattern generation.

Lengths (width, height, depth) are in cm, material thickness is in mm.
Not every shape uses every dimension; DIMENSION_USAGE records which ones
each generator reads. Every per-shape table in this module is checked on
import to cover every ShapeType, so adding a shape fails loudly until all
tables are extended.
"""
import math
import numbers
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping

from geometry_primitives import PatternGeometryError

MM_PER_CM = 10.0
# Bounds on every dimension, in that dimension's own unit. Below MIN_DIMENSION
# generated edges fall under MIN_EDGE_LENGTH
MIN_DIMENSION = 1e-6
MAX_DIMENSION = 1e6


class ShapeType(Enum):
    """Solids the generators can unfold."""
    BOX = "box"
    PYRAMID = "pyramid"
    ENVELOPE = "envelope"
    PRISM = "prism"
    CYLINDER = "cylinder"


class InvalidDimension(PatternGeometryError):
    """A dimension is not a finite number within [MIN_DIMENSION, MAX_DIMENSION]."""
    pass


@dataclass(frozen=True)
class DimensionUsage:
    """Which lengths a generator actually reads."""
    width: bool
    height: bool
    depth: bool
    notes: str = ""


DIMENSION_USAGE: Dict[ShapeType, DimensionUsage] = {
    ShapeType.BOX: DimensionUsage(
        width=True, height=True, depth=True,
        notes="All dimensions used",
    ),
    ShapeType.PYRAMID: DimensionUsage(
        width=True, height=True, depth=True,
        notes="Square base of side min(width, depth); the larger of the two has no effect",
    ),
    ShapeType.PRISM: DimensionUsage(
        width=True, height=True, depth=False,
        notes="Hexagonal prism defined by width (diameter) and height only",
    ),
    ShapeType.CYLINDER: DimensionUsage(
        width=True, height=True, depth=False,
        notes="Wrapped body of circumference pi * width; depth ignored",
    ),
    ShapeType.ENVELOPE: DimensionUsage(
        width=True, height=False, depth=True,
        notes="Envelopes are flat: width x depth, height ignored",
    ),
}

# Expected tab depth as a fraction of min(width, height, depth)
TAB_DEPTH_COEFFICIENT: Dict[ShapeType, float] = {
    ShapeType.BOX: 0.15,
    ShapeType.PYRAMID: 0.12,
    ShapeType.PRISM: 0.15,
    ShapeType.CYLINDER: 0.15,
    ShapeType.ENVELOPE: 0.10,
}


def require_all_shapes(table: Mapping[ShapeType, Any], name: str) -> None:
    """Raise if a per-shape table is missing a ShapeType."""
    missing = [s.value for s in ShapeType if s not in table]
    if missing:
        raise RuntimeError(f"{name} has no entry for: {', '.join(missing)}")


require_all_shapes(DIMENSION_USAGE, "DIMENSION_USAGE")
require_all_shapes(TAB_DEPTH_COEFFICIENT, "TAB_DEPTH_COEFFICIENT")


@dataclass(frozen=True)
class PatternConfig:
    """Shape type plus the four scalar dimensions.

    Construction only coerces the shape type (an unknown name raises
    ValueError); dimensions are checked by ``validate()``, which every
    generator calls before building anything.
    """

    shape_type: ShapeType
    width: float  # cm
    height: float  # cm
    depth: float  # cm
    thickness: float = 0.5  # mm

    def __post_init__(self):
        if not isinstance(self.shape_type, ShapeType):
            object.__setattr__(self, "shape_type", ShapeType(self.shape_type))

    def validate(self) -> "PatternConfig":
        """Check every dimension is a finite number within the dimension bounds.

        Raises:
            InvalidDimension: naming the first offending dimension.
        """
        for name in ("width", "height", "depth", "thickness"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidDimension(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise InvalidDimension(f"{name} must be positive, got {value}")
            if value < MIN_DIMENSION or value > MAX_DIMENSION:
                raise InvalidDimension(f"{name} must be within [{MIN_DIMENSION:g}, {MAX_DIMENSION:g}], got {value:g}")
        return self

    @property
    def min_dimension(self) -> float:
        """Smallest of width, height, depth (cm)."""
        return min(self.width, self.height, self.depth)

    @property
    def thickness_cm(self) -> float:
        return self.thickness / MM_PER_CM

    @property
    def usage(self) -> DimensionUsage:
        return DIMENSION_USAGE[self.shape_type]

    def replace(self, **changes) -> "PatternConfig":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["shape_type"] = self.shape_type.value
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PatternConfig":
        return cls(
            shape_type=ShapeType(data["shape_type"]),
            width=float(data["width"]),
            height=float(data["height"]),
            depth=float(data["depth"]),
            thickness=float(data.get("thickness", 0.5)),
        )
