"""
Whole-pattern validation: runs every check and renders the report.

All six validators always run, even after one has failed, so a single pass
surfaces every problem. The verdict is the AND of every result's ``valid``
flag; placeholder checks are listed separately so a reader never mistakes
them for real passes.
"""
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from assembly_rules import (
    AssemblyMechanicsConfig,
    validate_tab_design,
    validate_tab_slit_pairing,
    validate_thickness,
)
from fold_pattern import FoldPattern
from pattern_config import PatternConfig
from theorems import (
    KawasakiJustinConfig,
    MaekawaConfig,
    validate_kawasaki_justin,
    validate_maekawa,
    validate_vertex_validity,
)
from validation_result import PatternValidation, ValidationResult
from vertex_analysis import analyze_vertices

logger = logging.getLogger(__name__)

REPORT_VERSION = "1.0"


def validate_pattern(
    pattern: FoldPattern,
    config: PatternConfig,
    kawasaki: Optional[KawasakiJustinConfig] = None,
    maekawa: Optional[MaekawaConfig] = None,
    mechanics: Optional[AssemblyMechanicsConfig] = None,
) -> PatternValidation:
    """Validate a fold pattern against every theorem and assembly rule.

    Args:
        pattern: Pattern produced by a shape generator.
        config: Configuration the pattern was generated from.
        kawasaki: Kawasaki-Justin constants.
        maekawa: Maekawa / crimping constants.
        mechanics: Assembly-mechanics limits.

    Returns:
        PatternValidation holding all six results in a fixed order.

    Raises:
        InvalidDimension: if ``config`` has a non-positive dimension.
    """
    config.validate()
    kawasaki = kawasaki or KawasakiJustinConfig()
    maekawa = maekawa or MaekawaConfig()
    mechanics = mechanics or AssemblyMechanicsConfig()

    vertices = analyze_vertices(pattern.fold_lines, kawasaki.vertex_tolerance)
    shared = vertices if maekawa.vertex_tolerance == kawasaki.vertex_tolerance else None

    results: List[ValidationResult] = [
        validate_kawasaki_justin(pattern, kawasaki, vertices),
        validate_maekawa(pattern, maekawa, shared),
        validate_vertex_validity(pattern, maekawa, shared),
        validate_tab_design(config, mechanics),
        validate_thickness(config, mechanics),
        validate_tab_slit_pairing(pattern),
    ]
    validation = PatternValidation(theorems=results)

    for r in results:
        if not r.valid:
            logger.warning("%s: %s failed with %d error(s)", pattern.name, r.theorem_id, len(r.errors))
    logger.info(
        "Validated %s: %s (%d errors, %d warnings)",
        pattern.name,
        "VALID" if validation.overall else "INVALID",
        len(validation.errors),
        len(validation.warnings),
    )
    return validation


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _make_serializable(obj: Any) -> Any:
    """Recursively convert numpy and tuple values to JSON-native types."""
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, dict):
        return {k: _make_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_make_serializable(v) for v in obj]
    if isinstance(obj, float) and (obj == float("inf") or obj == float("-inf")):
        return str(obj)
    return obj


def validation_to_json(
    validation: PatternValidation,
    config: Optional[PatternConfig] = None,
) -> Dict[str, Any]:
    """Convert a PatternValidation to a JSON-serializable dict."""
    d = {
        "version": REPORT_VERSION,
        "timestamp": validation.timestamp.isoformat(),
        "overall": validation.overall,
        "unchecked": validation.unchecked,
        "config": config.to_dict() if config is not None else None,
        "theorems": [r.to_dict() for r in validation.theorems],
    }
    return _make_serializable(d)


def format_validation_report(
    validation: PatternValidation,
    max_warnings: Optional[int] = None,
) -> str:
    """Render a PatternValidation as a markdown string for stdout.

    ``max_warnings`` truncates each check's warning list (perimeter
    exemptions run to dozens per pattern).
    """
    lines: List[str] = []
    verdict = "VALID" if validation.overall else "INVALID"
    lines.append(f"# Pattern Validation Report — {verdict}")
    lines.append("")
    lines.append(f"**Timestamp:** {validation.timestamp.isoformat()}")
    if validation.unchecked:
        lines.append(f"**Not fully checked:** {', '.join(validation.unchecked)}")
    lines.append("")

    for r in validation.theorems:
        status = "PASS" if r.valid else "FAIL"
        suffix = "" if r.is_authoritative else " (placeholder)"
        lines.append(f"## [{status}] {r.theorem_id}{suffix}")

        if r.errors:
            lines.append("Errors:")
            for err in r.errors:
                lines.append(f"- {err}")

        if r.warnings:
            shown = r.warnings if max_warnings is None else r.warnings[:max_warnings]
            lines.append("Warnings:")
            for warn in shown:
                lines.append(f"- {warn}")
            hidden = len(r.warnings) - len(shown)
            if hidden:
                lines.append(f"- ... {hidden} more")

        scalars = {k: v for k, v in r.details.items() if not isinstance(v, (list, dict))}
        if scalars:
            lines.append("Details:")
            for key, val in scalars.items():
                if isinstance(val, float):
                    val = f"{val:.4f}"
                lines.append(f"- {key}: {val}")
        lines.append("")

    return "\n".join(lines)
