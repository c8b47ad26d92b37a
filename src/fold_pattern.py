"""
The FoldPattern aggregate produced by the shape generators.

A pattern is an immutable value: ordered vertices, classified fold lines and
faces (vertex index lists). Changing a parameter always produces a new
pattern, so two patterns can be compared directly. Faces convert to Shapely
polygons for geometry checks and to triangle indices for downstream
renderers and mesh exporters.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Tuple

from shapely.geometry import Polygon

from geometry_primitives import FoldLine, FoldType, PatternGeometryError, Point

PATTERN_EQUALITY_TOLERANCE = 1e-4


@dataclass(frozen=True)
class FoldPattern:
    """Vertices, fold lines and faces of one unfolded solid."""

    name: str
    vertices: Tuple[Point, ...]
    fold_lines: Tuple[FoldLine, ...]
    faces: Tuple[Tuple[int, ...], ...]
    face_names: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "vertices", tuple(self.vertices))
        object.__setattr__(self, "fold_lines", tuple(self.fold_lines))
        object.__setattr__(self, "faces", tuple(tuple(f) for f in self.faces))
        object.__setattr__(self, "face_names", tuple(self.face_names))

        n = len(self.vertices)
        for i, face in enumerate(self.faces):
            if len(face) < 3:
                raise PatternGeometryError(f"Face {i} has fewer than 3 vertices")
            for idx in face:
                if not 0 <= idx < n:
                    raise PatternGeometryError(
                        f"Face {i} references vertex {idx} (pattern has {n})"
                    )
        if self.face_names and len(self.face_names) != len(self.faces):
            raise PatternGeometryError(
                f"{len(self.face_names)} face names for {len(self.faces)} faces"
            )

    def lines_of_type(self, fold_type: FoldType) -> List[FoldLine]:
        return [line for line in self.fold_lines if line.fold_type is fold_type]

    def count_by_type(self) -> Dict[str, int]:
        counts = Counter(line.fold_type.value for line in self.fold_lines)
        return {t.value: counts.get(t.value, 0) for t in FoldType}

    def face_index(self, name: str) -> int:
        """Index of a named face."""
        try:
            return self.face_names.index(name)
        except ValueError:
            raise KeyError(f"Pattern '{self.name}' has no face named '{name}'") from None

    def face_points(self, face_idx: int) -> List[Point]:
        return [self.vertices[i] for i in self.faces[face_idx]]

    def face_polygon(self, face_idx: int) -> Polygon:
        """Face outline as a Shapely polygon in (x, z)."""
        return Polygon([p.planar() for p in self.face_points(face_idx)])

    def face_polygons(self) -> List[Polygon]:
        return [self.face_polygon(i) for i in range(len(self.faces))]

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_z, max_x, max_z) over every fold line endpoint."""
        xs = [p.x for line in self.fold_lines for p in (line.start, line.end)]
        zs = [p.z for line in self.fold_lines for p in (line.start, line.end)]
        if not xs:
            return (0.0, 0.0, 0.0, 0.0)
        return (min(xs), min(zs), max(xs), max(zs))

    def triangulate_faces(self) -> List[Tuple[int, int, int]]:
        """Fan-triangulate every face (faces are convex)."""
        triangles = []
        for face in self.faces:
            for k in range(1, len(face) - 1):
                triangles.append((face[0], face[k], face[k + 1]))
        return triangles

    def validate_geometry(self, overlap_tolerance: float = 1e-9) -> List[str]:
        """Check for geometry issues.

        Returns list of issue strings (empty = ok).
        """
        issues = []
        polygons = self.face_polygons()
        for i, poly in enumerate(polygons):
            label = self.face_names[i] if self.face_names else str(i)
            if not poly.is_valid:
                issues.append(f"Face {label} polygon is invalid")
            elif poly.area <= overlap_tolerance:
                issues.append(f"Face {label} has zero area")

        for i in range(len(polygons)):
            for j in range(i + 1, len(polygons)):
                if not (polygons[i].is_valid and polygons[j].is_valid):
                    continue
                overlap = polygons[i].intersection(polygons[j]).area
                if overlap > overlap_tolerance:
                    issues.append(f"Faces {i} and {j} overlap by {overlap:.4f}")
        return issues


def patterns_equal(
    a: FoldPattern,
    b: FoldPattern,
    tolerance: float = PATTERN_EQUALITY_TOLERANCE,
) -> bool:
    """True if both patterns have the same vertices and fold lines, in order,
    within ``tolerance``."""
    if len(a.vertices) != len(b.vertices):
        return False
    if len(a.fold_lines) != len(b.fold_lines):
        return False
    if a.faces != b.faces:
        return False

    for v1, v2 in zip(a.vertices, b.vertices):
        if v1.distance_to(v2) > tolerance:
            return False

    for l1, l2 in zip(a.fold_lines, b.fold_lines):
        if l1.fold_type is not l2.fold_type:
            return False
        if l1.start.distance_to(l2.start) > tolerance:
            return False
        if l1.end.distance_to(l2.end) > tolerance:
            return False
    return True

