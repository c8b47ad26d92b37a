"""
Vertex extraction and local neighbourhoods for fold-line sets.

Fold lines only know their endpoints, so the theorem checks first recover
the unique vertices (endpoints merged within POINT_TOLERANCE) and then the
lines meeting at each one. Vertex identity uses a uniform grid with one
tolerance-sized cell per bucket; lookups scan the 3x3 neighbourhood and
confirm with an exact distance check, so discovery order is the order in
which endpoints are first seen.
"""
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from geometry_primitives import POINT_TOLERANCE, FoldLine, FoldType, Point

FULL_TURN = 2 * math.pi


class PointIndex:
    """Tolerance-aware point set with stable insertion order."""

    def __init__(self, tolerance: float = POINT_TOLERANCE):
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance
        self.points: List[Point] = []
        self._cells: Dict[Tuple[int, int], List[int]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self.points)

    def cell_of(self, p: Point) -> Tuple[int, int]:
        return (math.floor(p.x / self.tolerance), math.floor(p.z / self.tolerance))

    def find(self, p: Point) -> Optional[int]:
        """Index of the earliest stored point within tolerance of p, or None."""
        cx, cz = self.cell_of(p)
        best = None
        for dx in (-1, 0, 1):
            for dz in (-1, 0, 1):
                for idx in self._cells.get((cx + dx, cz + dz), ()):
                    if (best is None or idx < best) and self.points[idx].is_close(p, self.tolerance):
                        best = idx
        return best

    def add(self, p: Point) -> int:
        """Return the index of p, storing it first if it is new."""
        idx = self.find(p)
        if idx is not None:
            return idx
        self.points.append(p)
        idx = len(self.points) - 1
        self._cells[self.cell_of(p)].append(idx)
        return idx


@dataclass(frozen=True)
class Vertex:
    """A unique point plus every fold line touching it."""

    position: Point
    lines: Tuple[FoldLine, ...]
    tolerance: float = POINT_TOLERANCE

    @property
    def degree(self) -> int:
        return len(self.lines)

    def count(self, fold_type: FoldType) -> int:
        return sum(1 for line in self.lines if line.fold_type is fold_type)

    @property
    def mountains(self) -> int:
        return self.count(FoldType.MOUNTAIN)

    @property
    def valleys(self) -> int:
        return self.count(FoldType.VALLEY)

    @property
    def crease_count(self) -> int:
        return self.mountains + self.valleys

    def sorted_directions(self) -> List[Tuple[float, FoldLine]]:
        """(angle, line) pairs sorted by atan2 of the direction to the far end."""
        if not self.lines:
            return []
        origin = np.array(self.position.planar())
        far = np.array([line.far_end(self.position, self.tolerance).planar() for line in self.lines])
        d = far - origin
        angles = np.arctan2(d[:, 1], d[:, 0])
        order = np.argsort(angles, kind="stable")
        return [(float(angles[i]), self.lines[i]) for i in order]

    def label(self) -> str:
        return self.position.label()


def extract_vertices(
    fold_lines: Sequence[FoldLine],
    tolerance: float = POINT_TOLERANCE,
) -> List[Point]:
    """Unique endpoint positions across all fold lines, in discovery order."""
    index = PointIndex(tolerance)
    for line in fold_lines:
        index.add(line.start)
        index.add(line.end)
    return list(index.points)


def find_connected_lines(
    vertex: Point,
    fold_lines: Sequence[FoldLine],
    tolerance: float = POINT_TOLERANCE,
) -> List[FoldLine]:
    """Every fold line with an endpoint within tolerance of vertex, in input order."""
    return [line for line in fold_lines if line.touches(vertex, tolerance)]


def analyze_vertices(
    fold_lines: Sequence[FoldLine],
    tolerance: float = POINT_TOLERANCE,
) -> List[Vertex]:
    """Build the neighbourhood of every unique vertex.

    Lines are bucketed by the grid cells of their endpoints, so each vertex
    only scans lines from its own 3x3 neighbourhood; the result matches
    ``find_connected_lines`` over the full set.
    """
    index = PointIndex(tolerance)
    buckets: Dict[Tuple[int, int], List[int]] = defaultdict(list)
    for li, line in enumerate(fold_lines):
        for p in (line.start, line.end):
            index.add(p)
            cell = index.cell_of(p)
            if not buckets[cell] or buckets[cell][-1] != li:
                buckets[cell].append(li)

    vertices = []
    for p in index.points:
        cx, cz = index.cell_of(p)
        candidates = set()
        for dx in (-1, 0, 1):
            for dz in (-1, 0, 1):
                candidates.update(buckets.get((cx + dx, cz + dz), ()))
        lines = [fold_lines[li] for li in sorted(candidates) if fold_lines[li].touches(p, tolerance)]
        vertices.append(Vertex(position=p, lines=tuple(lines), tolerance=tolerance))
    return vertices


def sector_angles(sorted_angles: Sequence[float]) -> List[float]:
    """Consecutive angles between sorted directions, wrapping at 2*pi.

    The sectors of a vertex always sum to 2*pi; a single direction yields
    one full-turn sector.
    """
    n = len(sorted_angles)
    if n == 0:
        return []
    if n == 1:
        return [FULL_TURN]
    sectors = [sorted_angles[i + 1] - sorted_angles[i] for i in range(n - 1)]
    sectors.append(sorted_angles[0] + FULL_TURN - sorted_angles[-1])
    return sectors
