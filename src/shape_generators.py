"""
Procedural fold-pattern generators, one per shape type.

Each generator is a pure function PatternConfig -> FoldPattern. The sheet
lies flat (y = 0); faces unfold outward from a reference face and are wound
counter-clockwise in (x, z), so the right-hand normal of every face edge
points away from the face. Locking tabs sit on the middle 80% of an edge
(cut margins at both ends) and each one has a matching slit drawn parallel
to the receiving edge inside the face it tucks into.

Wherever four or more lines meet, the sectors alternate to pi, and no
vertex carries four creases.
"""
import logging
import math
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from fold_pattern import FoldPattern
from geometry_primitives import (
    DEFAULT_SLIT_RATIO,
    POINT_TOLERANCE,
    FoldType,
    Point,
    generate_locking_tab,
    generate_slit,
    make_fold,
    planar_point,
)
from pattern_config import PatternConfig, ShapeType, require_all_shapes
from vertex_analysis import PointIndex

logger = logging.getLogger(__name__)

# Fraction of an edge left as plain cut at each end of a tabbed edge
TAB_EDGE_MARGIN = 0.1
# Slit offset from its receiving edge, as a fraction of the tab depth
SLIT_INSET_RATIO = 0.25
# Relief cut at each end of a hinged triangle base (fraction of the edge)
CORNER_RELIEF_RATIO = 0.05

BOX_TAB_COEFFICIENT = 0.15
PYRAMID_TAB_COEFFICIENT = 0.12
PYRAMID_SLIT_RATIO = 0.7
PRISM_TAB_COEFFICIENT = 0.15
PRISM_SIDES = 6
CYLINDER_TAB_COEFFICIENT = 0.15
CAP_SEGMENTS = 12
# Radial cap creases start this far from the cap centre (fraction of radius)
CAP_HUB_RATIO = 0.2
# Tooth depth on the two cap sides beside the hinge (fraction of the cap side),
# small enough that the tooth stays clear of the body edge
CAP_NEIGHBOUR_TOOTH_RATIO = 0.1

ENVELOPE_BODY_RATIO = 0.6
# Flap depths as fractions of depth, in edge order bottom, right, top, left
ENVELOPE_FLAP_RATIOS = (0.3, 0.25, 0.35, 0.25)
ENVELOPE_TUCK_SLIT_RATIO = 0.3


class _PatternBuilder:
    """Accumulates faces and fold lines for one pattern."""

    def __init__(self, name: str):
        self.name = name
        self._index = PointIndex(POINT_TOLERANCE)
        self.fold_lines = []
        self.faces: List[Tuple[int, ...]] = []
        self.face_names: List[str] = []

    def face(self, name: str, corners: Sequence[Point]) -> None:
        self.faces.append(tuple(self._index.add(p) for p in corners))
        self.face_names.append(name)

    def line(self, start: Point, end: Point, fold_type: FoldType) -> None:
        self.fold_lines.append(make_fold(start, end, fold_type))

    def cut(self, start: Point, end: Point) -> None:
        self.line(start, end, FoldType.CUT)

    def tab(self, base_start: Point, base_end: Point, depth: float) -> None:
        self.fold_lines.extend(generate_locking_tab(base_start, base_end, depth).fold_lines)

    def tabbed_edge(self, start: Point, end: Point, depth: float) -> None:
        """Cut margin, tab on the middle of the edge, cut margin."""
        a = _lerp(start, end, TAB_EDGE_MARGIN)
        b = _lerp(start, end, 1.0 - TAB_EDGE_MARGIN)
        self.cut(start, a)
        self.tab(a, b, depth)
        self.cut(b, end)

    def relieved_hinge(self, start: Point, end: Point, fold_type: FoldType) -> Tuple[Point, Point]:
        """Relief cuts at both corners with a crease between them.

        Returns the crease endpoints.
        """
        a = _lerp(start, end, CORNER_RELIEF_RATIO)
        b = _lerp(start, end, 1.0 - CORNER_RELIEF_RATIO)
        self.cut(start, a)
        self.line(a, b, fold_type)
        self.cut(b, end)
        return a, b

    def slit(self, start: Point, end: Point, ratio: float) -> None:
        self.fold_lines.append(generate_slit(start, end, ratio))

    def offset_slit(self, start: Point, end: Point, inset: float, ratio: float) -> None:
        """Slit parallel to start -> end, shifted left (into a CCW face) by inset."""
        d = _vec(end) - _vec(start)
        left = np.array([-d[1], d[0]]) / np.linalg.norm(d)
        self.slit(_shift(start, left * inset), _shift(end, left * inset), ratio)

    def build(self) -> FoldPattern:
        pattern = FoldPattern(
            name=self.name,
            vertices=tuple(self._index.points),
            fold_lines=tuple(self.fold_lines),
            faces=tuple(self.faces),
            face_names=tuple(self.face_names),
        )
        logger.debug(
            "Generated %s: %d vertices, %d fold lines, %d faces",
            self.name, len(pattern.vertices), len(pattern.fold_lines), len(pattern.faces),
        )
        return pattern


# ─── Generators ──────────────────────────────────────────────────────────────


def generate_box_pattern(config: PatternConfig) -> FoldPattern:
    """Cross-layout box: bottom in the middle, lid folding over from the front.

    Tabs on the back side edges lock into the left/right faces near their
    back edge, tabs on the lid sides lock near their far edge, and the lid's
    leading tab locks into the back face just below its free edge.
    """
    config.validate()
    w, h, d = config.width, config.height, config.depth
    t = BOX_TAB_COEFFICIENT * min(w, h, d)
    inset = SLIT_INSET_RATIO * t
    P = planar_point

    b = _PatternBuilder("box")
    b.face("bottom", [P(0, 0), P(w, 0), P(w, d), P(0, d)])
    b.face("front", [P(0, -h), P(w, -h), P(w, 0), P(0, 0)])
    b.face("back", [P(0, d), P(w, d), P(w, d + h), P(0, d + h)])
    b.face("left", [P(-h, 0), P(0, 0), P(0, d), P(-h, d)])
    b.face("right", [P(w, 0), P(w + h, 0), P(w + h, d), P(w, d)])
    b.face("top", [P(0, -h - d), P(w, -h - d), P(w, -h), P(0, -h)])

    # Hinges
    b.line(P(0, 0), P(w, 0), FoldType.MOUNTAIN)
    b.line(P(0, d), P(w, d), FoldType.MOUNTAIN)
    b.line(P(0, 0), P(0, d), FoldType.MOUNTAIN)
    b.line(P(w, 0), P(w, d), FoldType.MOUNTAIN)
    b.line(P(0, -h), P(w, -h), FoldType.MOUNTAIN)

    # Front
    b.cut(P(0, 0), P(0, -h))
    b.cut(P(w, -h), P(w, 0))

    # Left and right faces
    b.cut(P(-h, 0), P(0, 0))
    b.cut(P(0, d), P(-h, d))
    b.cut(P(-h, d), P(-h, 0))
    b.cut(P(w, 0), P(w + h, 0))
    b.cut(P(w + h, 0), P(w + h, d))
    b.cut(P(w + h, d), P(w, d))

    # Back face: side tabs, free top edge
    b.tabbed_edge(P(w, d), P(w, d + h), t)
    b.cut(P(w, d + h), P(0, d + h))
    b.tabbed_edge(P(0, d + h), P(0, d), t)

    # Lid: side tabs and leading tab
    b.tabbed_edge(P(0, -h - d), P(w, -h - d), t)
    b.tabbed_edge(P(w, -h - d), P(w, -h), t)
    b.tabbed_edge(P(0, -h), P(0, -h - d), t)

    # Slits for the back face tabs
    b.slit(P(-h, d - inset), P(0, d - inset), DEFAULT_SLIT_RATIO)
    b.slit(P(w, d - inset), P(w + h, d - inset), DEFAULT_SLIT_RATIO)
    # Slits for the lid side tabs
    b.slit(P(-h + inset, 0), P(-h + inset, d), DEFAULT_SLIT_RATIO)
    b.slit(P(w + h - inset, 0), P(w + h - inset, d), DEFAULT_SLIT_RATIO)
    # Slit for the lid leading tab
    b.slit(P(0, d + h - inset), P(w, d + h - inset), DEFAULT_SLIT_RATIO)

    return b.build()


def generate_pyramid_pattern(config: PatternConfig) -> FoldPattern:
    """Square base with four triangles hinged on its edges.

    The base side is min(width, depth); the larger of the two has no effect.
    Front and back triangles carry tabs on both slant edges, the right and
    left triangles carry the matching slits.

    Corner relief trims each triangle base to 0.9 of the base side, but the
    apex still sits at the slant height of the full base. Folded up, the
    triangles meet at the apex and leave a gap that tapers from the relief
    cuts at the base corners to nothing at the apex.
    """
    config.validate()
    base = min(config.width, config.depth)
    slant = math.sqrt(config.height ** 2 + (base / 2) ** 2)
    t = PYRAMID_TAB_COEFFICIENT * base
    inset = SLIT_INSET_RATIO * t
    half = base / 2

    corners = [
        planar_point(-half, -half),
        planar_point(half, -half),
        planar_point(half, half),
        planar_point(-half, half),
    ]

    b = _PatternBuilder("pyramid")
    b.face("base", corners)

    names = ("front", "right", "back", "left")
    for k, name in enumerate(names):
        c0, c1 = corners[k], corners[(k + 1) % 4]
        a, r = b.relieved_hinge(c0, c1, FoldType.MOUNTAIN)
        apex = _shift(_lerp(c0, c1, 0.5), _outward_normal(c0, c1) * slant)
        b.face(name, [r, a, apex])

        if k % 2 == 0:
            b.tabbed_edge(a, apex, t)
            b.tabbed_edge(apex, r, t)
        else:
            b.cut(a, apex)
            b.cut(apex, r)
            b.offset_slit(a, apex, inset, PYRAMID_SLIT_RATIO)
            b.offset_slit(apex, r, inset, PYRAMID_SLIT_RATIO)

    return b.build()


def generate_envelope_pattern(config: PatternConfig) -> FoldPattern:
    """Rectangular body with four triangular flaps folding in over it.

    Height is not used. The top flap closes through a tuck slit centred at
    half its depth.
    """
    config.validate()
    w, d = config.width, config.depth
    body = ENVELOPE_BODY_RATIO * d

    corners = [
        planar_point(0, 0),
        planar_point(w, 0),
        planar_point(w, body),
        planar_point(0, body),
    ]

    b = _PatternBuilder("envelope")
    b.face("body", corners)

    names = ("bottom_flap", "right_flap", "top_flap", "left_flap")
    for k, name in enumerate(names):
        c0, c1 = corners[k], corners[(k + 1) % 4]
        a, r = b.relieved_hinge(c0, c1, FoldType.VALLEY)
        flap_depth = ENVELOPE_FLAP_RATIOS[k] * d
        apex = _shift(_lerp(c0, c1, 0.5), _outward_normal(c0, c1) * flap_depth)
        b.face(name, [r, a, apex])
        b.cut(a, apex)
        b.cut(apex, r)

    slit_z = body + 0.5 * ENVELOPE_FLAP_RATIOS[2] * d
    b.slit(planar_point(0, slit_z), planar_point(w, slit_z), ENVELOPE_TUCK_SLIT_RATIO)

    return b.build()


def generate_prism_pattern(config: PatternConfig) -> FoldPattern:
    """Hexagonal base with six side walls extruded along the edge normals.

    Radius is width / 2; depth is not used. Even walls carry tabs on both
    side edges, odd walls carry the matching slits.
    """
    config.validate()
    radius = config.width / 2
    h = config.height
    t = PRISM_TAB_COEFFICIENT * radius
    inset = SLIT_INSET_RATIO * t

    hexagon = []
    for i in range(PRISM_SIDES):
        angle = i * math.pi / 3 - math.pi / 6
        hexagon.append(planar_point(radius * math.cos(angle), radius * math.sin(angle)))

    b = _PatternBuilder("prism")
    b.face("base", hexagon)

    for i in range(PRISM_SIDES):
        v0, v1 = hexagon[i], hexagon[(i + 1) % PRISM_SIDES]
        n = _outward_normal(v0, v1)
        f0, f1 = _shift(v0, n * h), _shift(v1, n * h)

        b.line(v0, v1, FoldType.MOUNTAIN)
        b.face(f"side_{i}", [v1, v0, f0, f1])
        b.cut(f0, f1)

        if i % 2 == 0:
            b.tabbed_edge(v0, f0, t)
            b.tabbed_edge(f1, v1, t)
        else:
            b.cut(v0, f0)
            b.cut(f1, v1)
            b.offset_slit(v0, f0, inset, DEFAULT_SLIT_RATIO)
            b.offset_slit(f1, v1, inset, DEFAULT_SLIT_RATIO)

    return b.build()


def generate_cylinder_pattern(config: PatternConfig) -> FoldPattern:
    """Wrapped body of width 2*pi*r plus two 12-sided end caps.

    Radius is width / 2; depth is not used. The body closes with a tab on
    its right edge into a slit near its left edge.

    Each cap hangs off the middle of the body's top or bottom edge on one
    of its sides. That side is a mountain hinge and each of the other
    eleven carries a mountain tooth base, so every cap has 12 mountain
    attachment segments. The teeth press against the inside of the wrapped
    body (friction fit) and have no slits. Every cap corner gets a radial
    valley crease starting at a small central hub.
    """
    config.validate()
    radius = config.width / 2
    h = config.height
    circumference = 2 * math.pi * radius
    t = CYLINDER_TAB_COEFFICIENT * radius
    inset = SLIT_INSET_RATIO * t
    apothem = radius * math.cos(math.pi / CAP_SEGMENTS)
    P = planar_point

    b = _PatternBuilder("cylinder")
    b.face("body", [P(0, 0), P(circumference, 0), P(circumference, h), P(0, h)])
    b.tabbed_edge(P(circumference, 0), P(circumference, h), t)
    b.cut(P(0, h), P(0, 0))
    b.slit(P(inset, 0), P(inset, h), DEFAULT_SLIT_RATIO)

    _add_cap(
        b, "top_cap", P(circumference / 2, h + apothem), radius, t,
        facing=-math.pi / 2, body_edge=(P(0, h), P(circumference, h)),
    )
    _add_cap(
        b, "bottom_cap", P(circumference / 2, -apothem), radius, t,
        facing=math.pi / 2, body_edge=(P(circumference, 0), P(0, 0)),
    )

    return b.build()


# ─── Dispatch ────────────────────────────────────────────────────────────────


GENERATORS: Dict[ShapeType, Callable[[PatternConfig], FoldPattern]] = {
    ShapeType.BOX: generate_box_pattern,
    ShapeType.PYRAMID: generate_pyramid_pattern,
    ShapeType.ENVELOPE: generate_envelope_pattern,
    ShapeType.PRISM: generate_prism_pattern,
    ShapeType.CYLINDER: generate_cylinder_pattern,
}

require_all_shapes(GENERATORS, "GENERATORS")


def generate_pattern(config: PatternConfig) -> FoldPattern:
    """Generate the fold pattern for config.shape_type.

    Args:
        config: Shape type and dimensions.

    Returns:
        A new FoldPattern; identical configs give identical patterns.

    Raises:
        InvalidDimension: if any dimension is non-positive or not finite.
    """
    return GENERATORS[config.shape_type](config)


# ─── Internal helpers ────────────────────────────────────────────────────────

def _vec(p: Point) -> np.ndarray:
    return np.array(p.planar(), dtype=float)


def _shift(p: Point, offset: np.ndarray) -> Point:
    return planar_point(p.x + offset[0], p.z + offset[1])


def _lerp(p0: Point, p1: Point, s: float) -> Point:
    return planar_point(p0.x + (p1.x - p0.x) * s, p0.z + (p1.z - p0.z) * s)


def _outward_normal(p0: Point, p1: Point) -> np.ndarray:
    """Right-hand unit normal of p0 -> p1 (outward for CCW faces)."""
    d = _vec(p1) - _vec(p0)
    return np.array([d[1], -d[0]]) / np.linalg.norm(d)


def _add_cap(
    b: _PatternBuilder,
    name: str,
    centre: Point,
    radius: float,
    depth: float,
    facing: float,
    body_edge: Tuple[Point, Point],
) -> None:
    """12-gon cap hinged on the body edge.

    The hinge side is the last side (corner 11 -> corner 0), centred on
    direction ``facing`` from the cap centre. ``body_edge`` runs the same way
    as the hinge. Its cuts run through the hinge corners and stop at the
    relief points, so no hinge corner collects four lines.
    """
    half_step = math.pi / CAP_SEGMENTS
    corners = []
    for j in range(CAP_SEGMENTS):
        angle = facing + half_step + 2 * math.pi * j / CAP_SEGMENTS
        corners.append(planar_point(
            centre.x + radius * math.cos(angle),
            centre.z + radius * math.sin(angle),
        ))
    b.face(name, corners)

    hinge_start, hinge_end = corners[-1], corners[0]
    a = _lerp(hinge_start, hinge_end, CORNER_RELIEF_RATIO)
    r = _lerp(hinge_start, hinge_end, 1.0 - CORNER_RELIEF_RATIO)
    b.cut(body_edge[0], a)
    b.line(a, r, FoldType.MOUNTAIN)
    b.cut(r, body_edge[1])

    side = hinge_start.distance_to(hinge_end)
    neighbour_depth = min(depth, CAP_NEIGHBOUR_TOOTH_RATIO * side)
    for j in range(CAP_SEGMENTS - 1):
        beside_hinge = j in (0, CAP_SEGMENTS - 2)
        b.tabbed_edge(corners[j], corners[j + 1], neighbour_depth if beside_hinge else depth)

    for corner in corners:
        hub = _lerp(centre, corner, CAP_HUB_RATIO)
        b.line(hub, corner, FoldType.VALLEY)
