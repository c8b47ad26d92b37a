"""
Flat-foldability checks: Kawasaki-Justin, Maekawa and crimping validity.

All three run over the vertex neighbourhoods from vertex_analysis. Theorem
violations never raise; they are recorded as errors on the returned
ValidationResult so the pattern can still be inspected.

Vertices with fewer than four connected lines (Kawasaki-Justin) or fewer
than four creases (Maekawa, crimping) are perimeter vertices and only earn
a warning.
"""
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fold_pattern import FoldPattern
from geometry_primitives import POINT_TOLERANCE, FoldType, Point
from validation_result import ValidationResult
from vertex_analysis import Vertex, analyze_vertices, sector_angles

logger = logging.getLogger(__name__)

KAWASAKI_JUSTIN_ID = "kawasaki-justin"
MAEKAWA_ID = "maekawa"
VERTEX_VALIDITY_ID = "vertex-validity"

# Sectors closer than this are treated as tied for smallest
CRIMP_TIE_TOLERANCE = 1e-9
# Single-vertex explorer enumerates 2**degree assignments
MAX_ENUMERATION_DEGREE = 12


@dataclass(frozen=True)
class KawasakiJustinConfig:
    """Kawasaki-Justin theorem constants."""

    min_folds: int = 4
    tolerance: float = 0.01  # rad, ~0.57 deg
    vertex_tolerance: float = POINT_TOLERANCE

    @property
    def alternating_sum(self) -> float:
        return math.pi

    @property
    def total_sum(self) -> float:
        return 2 * math.pi


@dataclass(frozen=True)
class MaekawaConfig:
    """Maekawa theorem constants."""

    min_folds: int = 4
    difference: int = 2  # |M - V|
    vertex_tolerance: float = POINT_TOLERANCE


# ─── Kawasaki-Justin ─────────────────────────────────────────────────────────


def alternating_sums(sectors: Sequence[float]) -> Tuple[float, float]:
    """(even-indexed sum, odd-indexed sum) of consecutive sectors."""
    even = sum(sectors[0::2])
    odd = sum(sectors[1::2])
    return even, odd


def verify_kawasaki_justin_at_vertex(
    vertex: Vertex,
    config: Optional[KawasakiJustinConfig] = None,
) -> ValidationResult:
    """Check the alternating angle sums at one vertex.

    Args:
        vertex: Vertex with its connected lines (cuts included).
        config: Theorem constants.

    Returns:
        ValidationResult; perimeter vertices are valid with a warning.
    """
    config = config or KawasakiJustinConfig()
    result = ValidationResult(theorem_id=KAWASAKI_JUSTIN_ID)

    if vertex.degree < config.min_folds:
        result.add_warning(
            f"Vertex at {vertex.label()} has only {vertex.degree} folds (exempt from theorem)"
        )
        result.details = {"vertex_type": "perimeter", "fold_count": vertex.degree}
        return result

    angles = [a for a, _ in vertex.sorted_directions()]
    sectors = sector_angles(angles)
    sum_even, sum_odd = alternating_sums(sectors)
    total = sum_even + sum_odd

    if abs(total - config.total_sum) > config.tolerance:
        result.add_error(
            f"Vertex at {vertex.label()}: total angle sum {total:.4f} != 2*pi "
            f"({config.total_sum:.4f})"
        )

    error_even = abs(sum_even - config.alternating_sum)
    error_odd = abs(sum_odd - config.alternating_sum)
    if error_even > config.tolerance:
        result.add_error(
            f"Vertex at {vertex.label()}: even angle sum {sum_even:.4f} != pi "
            f"(error: {error_even:.4f})"
        )
    if error_odd > config.tolerance:
        result.add_error(
            f"Vertex at {vertex.label()}: odd angle sum {sum_odd:.4f} != pi "
            f"(error: {error_odd:.4f})"
        )

    result.details = {
        "vertex_type": "interior",
        "position": vertex.label(),
        "fold_count": vertex.degree,
        "sectors": [round(s, 4) for s in sectors],
        "sum_even": round(sum_even, 4),
        "sum_odd": round(sum_odd, 4),
        "sum_total": round(total, 4),
        "deviation": max(error_even, error_odd),
    }
    return result


def validate_kawasaki_justin(
    pattern: FoldPattern,
    config: Optional[KawasakiJustinConfig] = None,
    vertices: Optional[List[Vertex]] = None,
) -> ValidationResult:
    """Kawasaki-Justin over every vertex of a pattern."""
    config = config or KawasakiJustinConfig()
    if vertices is None:
        vertices = analyze_vertices(pattern.fold_lines, config.vertex_tolerance)
    result = ValidationResult(theorem_id=KAWASAKI_JUSTIN_ID)

    interior = []
    for vertex in vertices:
        vr = verify_kawasaki_justin_at_vertex(vertex, config)
        for err in vr.errors:
            result.add_error(err)
        result.warnings.extend(vr.warnings)
        if vr.details["vertex_type"] == "interior":
            interior.append({**vr.details, "valid": vr.valid})

    result.details = {
        "total_vertices": len(vertices),
        "interior_vertices": len(interior),
        "valid_interior_vertices": sum(1 for v in interior if v["valid"]),
        "max_deviation": max((v["deviation"] for v in interior), default=0.0),
        "vertices": interior,
    }
    logger.debug(
        "Kawasaki-Justin: %d/%d interior vertices valid",
        result.details["valid_interior_vertices"], len(interior),
    )
    return result


# ─── Vertex type and Maekawa ─────────────────────────────────────────────────


@dataclass(frozen=True)
class VertexType:
    """Circular fold-type sequence at a vertex, in angular order."""

    position: Point
    sequence: Tuple[str, ...]  # "M", "V" or "C"
    angles: Tuple[float, ...]  # sorted direction angles (rad)
    sectors: Tuple[float, ...]  # sector after each line (rad)
    mountains: int
    valleys: int
    interior: bool
    maekawa_satisfied: bool

    @property
    def degree(self) -> int:
        return len(self.sequence)

    @property
    def maekawa_difference(self) -> int:
        return abs(self.mountains - self.valleys)

    @property
    def sequence_str(self) -> str:
        return "".join(self.sequence)

    def crease_sequence(self) -> Tuple[List[str], List[float]]:
        """Mountain/valley sequence with cuts dropped, sectors re-measured."""
        kept = [(a, s) for a, s in zip(self.angles, self.sequence) if s != FoldType.CUT.symbol]
        return [s for _, s in kept], sector_angles([a for a, _ in kept])


def get_vertex_type(vertex: Vertex, config: Optional[MaekawaConfig] = None) -> VertexType:
    """Sort a vertex's lines by angle and classify them."""
    config = config or MaekawaConfig()
    directions = vertex.sorted_directions()
    angles = tuple(a for a, _ in directions)
    sequence = tuple(line.fold_type.symbol for _, line in directions)
    mountains = sequence.count(FoldType.MOUNTAIN.symbol)
    valleys = sequence.count(FoldType.VALLEY.symbol)
    interior = mountains + valleys >= config.min_folds
    return VertexType(
        position=vertex.position,
        sequence=sequence,
        angles=angles,
        sectors=tuple(sector_angles(angles)),
        mountains=mountains,
        valleys=valleys,
        interior=interior,
        maekawa_satisfied=(not interior) or abs(mountains - valleys) == config.difference,
    )


def validate_maekawa(
    pattern: FoldPattern,
    config: Optional[MaekawaConfig] = None,
    vertices: Optional[List[Vertex]] = None,
) -> ValidationResult:
    """Check |M - V| = 2 at every interior vertex."""
    config = config or MaekawaConfig()
    if vertices is None:
        vertices = analyze_vertices(pattern.fold_lines, config.vertex_tolerance)
    result = ValidationResult(theorem_id=MAEKAWA_ID)

    types = [get_vertex_type(v, config) for v in vertices]
    for vt in types:
        label = vt.position.label()
        if not vt.interior:
            result.add_warning(
                f"Vertex {label}: perimeter vertex ({vt.degree} folds, exempt)"
            )
            continue
        if not vt.maekawa_satisfied:
            result.add_error(
                f"Vertex {label} violates Maekawa: M={vt.mountains}, V={vt.valleys}, "
                f"|M-V|={vt.maekawa_difference} (must be {config.difference}). "
                f"Type: [{vt.sequence_str}]"
            )

    result.details = {
        "total_vertices": len(types),
        "interior_vertices": sum(1 for vt in types if vt.interior),
        "valid_vertices": sum(1 for vt in types if vt.maekawa_satisfied),
        "vertex_types": [
            {
                "position": vt.position.label(),
                "sequence": vt.sequence_str,
                "M": vt.mountains,
                "V": vt.valleys,
                "satisfied": vt.maekawa_satisfied,
            }
            for vt in types if vt.interior
        ],
    }
    logger.debug("Maekawa: %d errors over %d vertices", len(result.errors), len(types))
    return result


# ─── Crimping ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CrimpStep:
    step: int
    crimped_angle: float
    fold_types: Tuple[str, str]
    remaining_degree: int


@dataclass(frozen=True)
class CrimpResult:
    """Outcome of the crimping reduction on one crease sequence."""

    valid: bool
    steps: Tuple[CrimpStep, ...] = ()
    failure_reason: Optional[str] = None
    remaining: Tuple[str, ...] = ()


class _CrimpRing:
    """Doubly-linked ring of creases stored as parallel arrays.

    Node i owns sectors[i], the angle from crease i to the next crease.
    """

    def __init__(self, types: Sequence[str], sectors: Sequence[float]):
        n = len(types)
        self.types = list(types)
        self.sectors = list(sectors)
        self.next = [(i + 1) % n for i in range(n)]
        self.prev = [(i - 1) % n for i in range(n)]
        self.head = 0
        self.size = n

    def nodes(self) -> List[int]:
        out = [self.head]
        node = self.next[self.head]
        while node != self.head:
            out.append(node)
            node = self.next[node]
        return out

    def sequence(self) -> Tuple[str, ...]:
        return tuple(self.types[i] for i in self.nodes())

    def smallest(self) -> int:
        """First node (ring order from head) owning the smallest sector."""
        best = self.head
        for node in self.nodes()[1:]:
            if self.sectors[node] < self.sectors[best] - CRIMP_TIE_TOLERANCE:
                best = node
        return best

    def crimp(self, left: int) -> None:
        """Remove left and its successor, merging the neighbouring sectors."""
        right = self.next[left]
        before = self.prev[left]
        after = self.next[right]
        self.sectors[before] = self.sectors[before] + self.sectors[right] - self.sectors[left]
        self.next[before] = after
        self.prev[after] = before
        self.size -= 2
        if self.head in (left, right):
            self.head = after


def crimp_reduce(sequence: Sequence[str], sectors: Sequence[float]) -> CrimpResult:
    """Run the crimping reduction on a circular M/V sequence.

    Repeatedly takes the smallest sector; if it is bounded by one mountain
    and one valley the pair is crimped away, otherwise the sequence cannot
    fold flat. Stops when two creases remain.

    Args:
        sequence: "M"/"V" symbols in angular order.
        sectors: sectors[i] is the angle from crease i to crease i + 1 (rad).

    Returns:
        CrimpResult with every crimp performed and, on failure, the reason.

    Raises:
        ValueError: mismatched lengths or symbols other than M and V.
    """
    if len(sequence) != len(sectors):
        raise ValueError(f"{len(sequence)} creases but {len(sectors)} sectors")
    bad = [s for s in sequence if s not in ("M", "V")]
    if bad:
        raise ValueError(f"Crimping takes only M/V creases, got {bad}")

    n = len(sequence)
    if n < 4:
        return CrimpResult(valid=True, remaining=tuple(sequence))
    if n % 2:
        return CrimpResult(
            valid=False,
            failure_reason=f"Odd number of creases ({n}) cannot reduce to two",
            remaining=tuple(sequence),
        )

    ring = _CrimpRing(sequence, sectors)
    steps: List[CrimpStep] = []
    while ring.size > 2:
        left = ring.smallest()
        right = ring.next[left]
        left_type, right_type = ring.types[left], ring.types[right]
        angle = ring.sectors[left]

        if left_type == right_type:
            remaining = ring.sequence()
            return CrimpResult(
                valid=False,
                steps=tuple(steps),
                failure_reason=(
                    f"Cannot crimp: smallest angle ({math.degrees(angle):.1f}°) "
                    f"bounded by same fold types ({left_type}, {right_type}) at step "
                    f"{len(steps) + 1}. Remaining sequence: [{''.join(remaining)}]"
                ),
                remaining=remaining,
            )

        ring.crimp(left)
        steps.append(CrimpStep(
            step=len(steps) + 1,
            crimped_angle=angle,
            fold_types=(left_type, right_type),
            remaining_degree=ring.size,
        ))

    return CrimpResult(valid=True, steps=tuple(steps), remaining=ring.sequence())


@dataclass(frozen=True)
class VertexValidityResult:
    valid: bool
    vertex_type: VertexType
    crimp_steps: Tuple[CrimpStep, ...] = ()
    failure_reason: Optional[str] = None


def check_vertex_validity(
    vertex_type: VertexType,
    config: Optional[MaekawaConfig] = None,
) -> VertexValidityResult:
    """Maekawa prerequisite followed by the crimping reduction."""
    config = config or MaekawaConfig()
    creases, sectors = vertex_type.crease_sequence()

    if len(creases) < config.min_folds:
        return VertexValidityResult(valid=True, vertex_type=vertex_type)

    if not vertex_type.maekawa_satisfied:
        return VertexValidityResult(
            valid=False,
            vertex_type=vertex_type,
            failure_reason=(
                f"Maekawa violated: |M-V|={vertex_type.maekawa_difference} "
                f"(must be {config.difference})"
            ),
        )

    crimp = crimp_reduce(creases, sectors)
    return VertexValidityResult(
        valid=crimp.valid,
        vertex_type=vertex_type,
        crimp_steps=crimp.steps,
        failure_reason=crimp.failure_reason,
    )


def validate_vertex_validity(
    pattern: FoldPattern,
    config: Optional[MaekawaConfig] = None,
    vertices: Optional[List[Vertex]] = None,
) -> ValidationResult:
    """Crimping validity at every interior vertex; perimeter vertices are skipped."""
    config = config or MaekawaConfig()
    if vertices is None:
        vertices = analyze_vertices(pattern.fold_lines, config.vertex_tolerance)
    result = ValidationResult(theorem_id=VERTEX_VALIDITY_ID)

    checked = []
    for vertex in vertices:
        vt = get_vertex_type(vertex, config)
        if not vt.interior:
            continue
        validity = check_vertex_validity(vt, config)
        checked.append(validity)
        label = vt.position.label()
        if not validity.valid:
            result.add_error(
                f"Vertex {label} type [{vt.sequence_str}] is invalid: {validity.failure_reason}"
            )
        elif validity.crimp_steps:
            result.add_warning(
                f"Vertex {label} type [{vt.sequence_str}] valid after "
                f"{len(validity.crimp_steps)} crimp(s)"
            )

    result.details = {
        "interior_vertices": len(checked),
        "valid_vertices": sum(1 for v in checked if v.valid),
        "invalid_vertices": sum(1 for v in checked if not v.valid),
        "results": [
            {
                "position": v.vertex_type.position.label(),
                "type": v.vertex_type.sequence_str,
                "valid": v.valid,
                "crimp_steps": len(v.crimp_steps),
                "failure_reason": v.failure_reason,
            }
            for v in checked
        ],
    }
    logger.debug("Vertex validity: %d interior vertices checked", len(checked))
    return result


# ─── Single-vertex explorer ──────────────────────────────────────────────────


def analyze_single_vertex(
    crease_angles_deg: Sequence[float],
    config: Optional[KawasakiJustinConfig] = None,
) -> Dict[str, Any]:
    """Explore one vertex given the directions of its creases (degrees).

    Reports the sector angles and Kawasaki-Justin sums, how many mountain /
    valley assignments satisfy Maekawa, and which of those also survive
    crimping. No assignment is valid when Kawasaki-Justin fails.

    Raises:
        ValueError: fewer than two creases or more than MAX_ENUMERATION_DEGREE.
    """
    config = config or KawasakiJustinConfig()
    n = len(crease_angles_deg)
    if n < 2:
        raise ValueError(f"Need at least 2 creases, got {n}")
    if n > MAX_ENUMERATION_DEGREE:
        raise ValueError(f"Degree {n} exceeds enumeration limit {MAX_ENUMERATION_DEGREE}")

    angles = sorted(math.radians(a % 360.0) for a in crease_angles_deg)
    sectors = sector_angles(angles)
    sum_even, sum_odd = alternating_sums(sectors)
    kawasaki_error = max(abs(sum_even - math.pi), abs(sum_odd - math.pi))
    kawasaki_ok = kawasaki_error <= config.tolerance

    maekawa_count = 0
    valid_assignments = []
    for assignment in itertools.product("MV", repeat=n):
        if abs(assignment.count("M") - assignment.count("V")) != 2:
            continue
        maekawa_count += 1
        if kawasaki_ok and crimp_reduce(assignment, sectors).valid:
            valid_assignments.append("".join(assignment))

    return {
        "degree": n,
        "sectors_deg": [round(math.degrees(s), 4) for s in sectors],
        "sum_even_deg": round(math.degrees(sum_even), 4),
        "sum_odd_deg": round(math.degrees(sum_odd), 4),
        "kawasaki_error": kawasaki_error,
        "kawasaki_satisfied": kawasaki_ok,
        "maekawa_assignments": maekawa_count,
        "valid_assignments": valid_assignments,
    }
