"""
Core geometry types for glue-free fold patterns.

Every pattern lies flat on the sheet: points keep a 3D layout (x, y, z) but
the vertical y coordinate is always zero, so x and z are the two active
coordinates. Provides Point, FoldLine (mountain / valley / cut), and the
trapezoidal locking tab and slit generators used by the shape generators.
Tab outlines can be converted to Shapely polygons for area and overlap checks.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple, Union

import numpy as np
from shapely.geometry import Polygon

# Vertex clustering tolerance (pattern units, cm)
POINT_TOLERANCE = 1e-3

# Tab tip width as a fraction of its base width
TAB_TAPER_RATIO = 0.7
DEFAULT_SLIT_RATIO = 0.8
# Shorter edges count as coincident endpoints
MIN_EDGE_LENGTH = 1e-9


class PatternGeometryError(ValueError):
    """Base exception for malformed pattern geometry or configuration."""
    pass


class DegenerateGeometry(PatternGeometryError):
    """Coincident endpoints, zero-length edges or non-finite coordinates."""
    pass


class FoldType(Enum):
    """Classification of a line drawn on the unfolded sheet."""
    MOUNTAIN = "mountain"
    VALLEY = "valley"
    CUT = "cut"

    @property
    def symbol(self) -> str:
        """Single-letter code used in vertex type sequences (M, V, C)."""
        return {"mountain": "M", "valley": "V", "cut": "C"}[self.value]

    @property
    def is_crease(self) -> bool:
        return self is not FoldType.CUT


@dataclass(frozen=True)
class Point:
    """An immutable point on the sheet.

    ``==`` is exact (used for idempotence checks); use ``is_close`` for
    tolerance-based identity.
    """
    x: float
    y: float = 0.0
    z: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def planar(self) -> Tuple[float, float]:
        """The two active coordinates (x, z)."""
        return (self.x, self.z)

    def distance_to(self, other: "Point") -> float:
        return math.sqrt(
            (self.x - other.x) ** 2
            + (self.y - other.y) ** 2
            + (self.z - other.z) ** 2
        )

    def is_close(self, other: "Point", tolerance: float = POINT_TOLERANCE) -> bool:
        return self.distance_to(other) < tolerance

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in (self.x, self.y, self.z))

    def label(self) -> str:
        """Short planar label used in validation messages."""
        return f"({self.x:.2f}, {self.z:.2f})"


PointLike = Union[Point, Sequence[float]]


def planar_point(x: float, z: float) -> Point:
    """Construct a point on the sheet (vertical coordinate fixed at zero)."""
    return Point(float(x), 0.0, float(z))


def as_point(value: PointLike) -> Point:
    """Copy a Point, an (x, z) pair or an (x, y, z) triple into a new Point."""
    if isinstance(value, Point):
        return Point(float(value.x), float(value.y), float(value.z))
    coords = [float(c) for c in value]
    if len(coords) == 2:
        return planar_point(coords[0], coords[1])
    if len(coords) == 3:
        return Point(coords[0], coords[1], coords[2])
    raise DegenerateGeometry(f"Expected 2 or 3 coordinates, got {len(coords)}")


@dataclass(frozen=True)
class FoldLine:
    """A crease (mountain/valley) or a cut between two points."""
    start: Point
    end: Point
    fold_type: FoldType

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def midpoint(self) -> Point:
        return Point(
            (self.start.x + self.end.x) / 2,
            (self.start.y + self.end.y) / 2,
            (self.start.z + self.end.z) / 2,
        )

    def touches(self, vertex: Point, tolerance: float = POINT_TOLERANCE) -> bool:
        return self.start.is_close(vertex, tolerance) or self.end.is_close(vertex, tolerance)

    def far_end(self, vertex: Point, tolerance: float = POINT_TOLERANCE) -> Point:
        """The endpoint that is not at ``vertex``."""
        return self.end if self.start.is_close(vertex, tolerance) else self.start


def make_fold(
    start: PointLike,
    end: PointLike,
    fold_type: Union[FoldType, str],
) -> FoldLine:
    """Create a FoldLine holding its own copies of the endpoints.

    Raises:
        DegenerateGeometry: if the endpoints coincide or are not finite.
    """
    p0 = as_point(start)
    p1 = as_point(end)
    _require_edge(p0, p1)
    return FoldLine(p0, p1, FoldType(fold_type))


@dataclass(frozen=True)
class LockingTab:
    """A tapered tab: base edge (mountain fold) plus three cut lines.

    vertices are ordered base_start, base_end, tip_end, tip_start.
    """
    vertices: Tuple[Point, Point, Point, Point]
    fold_lines: Tuple[FoldLine, FoldLine, FoldLine, FoldLine]
    depth: float

    @property
    def base_width(self) -> float:
        return self.vertices[0].distance_to(self.vertices[1])

    @property
    def tip_width(self) -> float:
        return self.vertices[2].distance_to(self.vertices[3])

    def outline(self) -> Polygon:
        """Tab outline as a Shapely polygon in (x, z)."""
        return Polygon([v.planar() for v in self.vertices])


def generate_locking_tab(
    base_start: PointLike,
    base_end: PointLike,
    depth: float,
    inward: bool = False,
) -> LockingTab:
    """Generate a trapezoidal locking tab on a base edge.

    The tab extends to the right of base_start -> base_end, which is outward
    for faces wound counter-clockwise in (x, z); ``inward`` flips it. The tip
    is inset by (1 - TAB_TAPER_RATIO) / 2 of the base at each end.

    Args:
        base_start: First endpoint of the edge the tab hinges on.
        base_end: Second endpoint of that edge.
        depth: Distance from the base to the tip (must be positive).
        inward: Extend to the left of the edge instead.

    Returns:
        LockingTab with one mountain fold along the base and three cuts.

    Raises:
        DegenerateGeometry: zero-length base or non-positive depth.
    """
    p0 = as_point(base_start)
    p1 = as_point(base_end)
    _require_edge(p0, p1)
    if not (math.isfinite(depth) and depth > 0):
        raise DegenerateGeometry(f"Tab depth must be positive, got {depth}")

    a = np.array(p0.planar())
    b = np.array(p1.planar())
    edge = b - a
    direction = edge / np.linalg.norm(edge)
    normal = np.array([direction[1], -direction[0]])
    if inward:
        normal = -normal

    inset = (1.0 - TAB_TAPER_RATIO) / 2
    tip_start = a + edge * inset + normal * depth
    tip_end = b - edge * inset + normal * depth

    q_start = planar_point(tip_start[0], tip_start[1])
    q_end = planar_point(tip_end[0], tip_end[1])

    fold_lines = (
        FoldLine(p0, p1, FoldType.MOUNTAIN),
        FoldLine(p0, q_start, FoldType.CUT),
        FoldLine(q_start, q_end, FoldType.CUT),
        FoldLine(q_end, p1, FoldType.CUT),
    )
    return LockingTab(
        vertices=(p0, p1, q_end, q_start),
        fold_lines=fold_lines,
        depth=float(depth),
    )


def generate_slit(
    start: PointLike,
    end: PointLike,
    slit_ratio: float = DEFAULT_SLIT_RATIO,
) -> FoldLine:
    """Generate a cut centred on an edge covering ``slit_ratio`` of its length.

    Raises:
        DegenerateGeometry: zero-length edge or ratio outside (0, 1].
    """
    p0 = as_point(start)
    p1 = as_point(end)
    _require_edge(p0, p1)
    if not (0.0 < slit_ratio <= 1.0):
        raise DegenerateGeometry(f"Slit ratio must be in (0, 1], got {slit_ratio}")

    a = p0.as_array()
    b = p1.as_array()
    inset = (1.0 - slit_ratio) / 2
    s = a + (b - a) * inset
    e = b - (b - a) * inset
    return FoldLine(
        Point(float(s[0]), float(s[1]), float(s[2])),
        Point(float(e[0]), float(e[1]), float(e[2])),
        FoldType.CUT,
    )


# ─── Internal helpers ────────────────────────────────────────────────────────

def _require_edge(p0: Point, p1: Point) -> None:
    if not (p0.is_finite() and p1.is_finite()):
        raise DegenerateGeometry(f"Non-finite endpoint: {p0}, {p1}")
    if p0.distance_to(p1) < MIN_EDGE_LENGTH:
        raise DegenerateGeometry(f"Coincident endpoints at {p0.label()}")
