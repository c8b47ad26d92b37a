"""
Assembly-mechanics rules for glue-free tab-and-slit patterns.

Tab design and thickness work on the configuration alone; tab-slit pairing
looks at the pattern but is only a structural placeholder: it counts line
types and always says so in a warning.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from fold_pattern import FoldPattern
from geometry_primitives import DEFAULT_SLIT_RATIO, TAB_TAPER_RATIO, FoldType
from pattern_config import TAB_DEPTH_COEFFICIENT, PatternConfig
from validation_result import CheckCoverage, ValidationResult

logger = logging.getLogger(__name__)

TAB_DESIGN_ID = "assembly-mechanics-tabs"
THICKNESS_ID = "assembly-mechanics-thickness"
PAIRING_ID = "assembly-mechanics-pairing"


@dataclass(frozen=True)
class AssemblyMechanicsConfig:
    """Engineering limits for tabs, slits and material thickness."""

    taper_ratio: float = TAB_TAPER_RATIO
    taper_ratio_range: Tuple[float, float] = (0.65, 0.75)
    slit_length_ratio: float = DEFAULT_SLIT_RATIO
    slit_length_range: Tuple[float, float] = (0.7, 0.85)
    interference_fit_coefficient: float = 0.05  # fraction of thickness
    depth_coefficient_range: Tuple[float, float] = (0.08, 0.2)  # fraction of min dimension
    min_feature_multiplier: float = 5.0  # features >= 5x thickness
    thickness_warning_ratio: float = 0.1  # of min dimension


def validate_tab_design(
    config: PatternConfig,
    mechanics: Optional[AssemblyMechanicsConfig] = None,
) -> ValidationResult:
    """Check the expected tab depth against the minimum feature size.

    Expected tab depth is min(width, height, depth) times the shape's depth
    coefficient; it must be at least min_feature_multiplier times the
    material thickness (converted to cm).

    Args:
        config: Pattern configuration.
        mechanics: Engineering limits.

    Returns:
        ValidationResult with the sizing figures in ``details``.

    Raises:
        InvalidDimension: if the configuration has a non-positive dimension.
    """
    config.validate()
    mechanics = mechanics or AssemblyMechanicsConfig()
    result = ValidationResult(theorem_id=TAB_DESIGN_ID)

    min_dim = config.min_dimension
    coefficient = TAB_DEPTH_COEFFICIENT[config.shape_type]
    expected_depth = min_dim * coefficient
    min_feature = config.thickness_cm * mechanics.min_feature_multiplier

    result.add_warning(
        f"Tab depth should be ~{expected_depth:.2f}cm "
        f"({coefficient * 100:.0f}% of {min_dim:.2f}cm)"
    )

    lo, hi = mechanics.depth_coefficient_range
    if not lo <= coefficient <= hi:
        result.add_error(
            f"Tab depth coefficient {coefficient} outside [{lo}, {hi}] for {config.shape_type.value}"
        )
    lo, hi = mechanics.taper_ratio_range
    if not lo <= mechanics.taper_ratio <= hi:
        result.add_error(f"Tab taper ratio {mechanics.taper_ratio} outside [{lo}, {hi}]")
    lo, hi = mechanics.slit_length_range
    if not lo <= mechanics.slit_length_ratio <= hi:
        result.add_error(f"Slit length ratio {mechanics.slit_length_ratio} outside [{lo}, {hi}]")

    if expected_depth < min_feature:
        result.add_error(
            f"Tab depth {expected_depth:.2f}cm < minimum feature size {min_feature:.2f}cm "
            f"({mechanics.min_feature_multiplier:g}x thickness)"
        )

    result.details = {
        "min_dimension": min_dim,
        "depth_coefficient": coefficient,
        "expected_tab_depth": expected_depth,
        "min_feature_size": min_feature,
        "thickness_mm": config.thickness,
        "taper_ratio": mechanics.taper_ratio,
        "slit_length_ratio": mechanics.slit_length_ratio,
        "interference_fit_mm": config.thickness * mechanics.interference_fit_coefficient,
    }
    return result


def validate_thickness(
    config: PatternConfig,
    mechanics: Optional[AssemblyMechanicsConfig] = None,
) -> ValidationResult:
    """Warn when the material is thick relative to the smallest dimension."""
    config.validate()
    mechanics = mechanics or AssemblyMechanicsConfig()
    result = ValidationResult(theorem_id=THICKNESS_ID)

    min_dim = config.min_dimension
    if config.thickness_cm > min_dim * mechanics.thickness_warning_ratio:
        result.add_warning(
            f"Thickness {config.thickness}mm is > {mechanics.thickness_warning_ratio:.0%} "
            f"of smallest dimension ({min_dim}cm). May be difficult to fold."
        )

    result.details = {
        "thickness_mm": config.thickness,
        "min_fold_radius_mm": config.thickness / 2,
        "min_feature_size": config.thickness_cm * mechanics.min_feature_multiplier,
    }
    return result


def validate_tab_slit_pairing(pattern: FoldPattern) -> ValidationResult:
    """Placeholder pairing check: counts mountain folds against cut lines.

    Mountain folds stand in for tab bases and cut lines for slits, so the
    counts are only a proxy. The result is always valid, always warns and is
    marked as a placeholder.
    """
    result = ValidationResult(theorem_id=PAIRING_ID, coverage=CheckCoverage.PLACEHOLDER)

    mountains = {_line_key(line) for line in pattern.lines_of_type(FoldType.MOUNTAIN)}
    cuts = {_line_key(line) for line in pattern.lines_of_type(FoldType.CUT)}

    result.details = {
        "mountain_folds": len(mountains),
        "cut_lines": len(cuts),
        "note": "Tab-slit pairing requires geometric analysis beyond line type",
    }
    result.add_warning(
        "Tab-slit pairing validation requires geometric context (not yet implemented)"
    )
    logger.debug("Pairing placeholder: %d mountain folds, %d cuts", len(mountains), len(cuts))
    return result


def _line_key(line) -> Tuple[float, float, float, float]:
    return (line.start.x, line.start.z, line.end.x, line.end.z)
