"""
Parameter-behaviour diagnostics.

Not every shape reads every dimension: pyramids clamp their base to
min(width, depth), prisms and cylinders ignore depth, envelopes ignore
height. These helpers confirm the documented usage by regenerating patterns
with one parameter changed and comparing the results, and flag the pyramid
clamp so callers can explain it.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fold_pattern import patterns_equal
from pattern_config import DIMENSION_USAGE, PatternConfig, ShapeType, require_all_shapes
from shape_generators import generate_pattern

logger = logging.getLogger(__name__)

TESTED_PARAMETERS = ("width", "height", "depth", "thickness")


@dataclass(frozen=True)
class ParameterRange:
    """Recommended UI range for one parameter."""
    min: float
    max: float
    step: float
    default: float


RECOMMENDED_RANGES: Dict[ShapeType, Dict[str, ParameterRange]] = {
    ShapeType.BOX: {
        "width": ParameterRange(1, 20, 0.5, 5),
        "height": ParameterRange(1, 20, 0.5, 3),
        "depth": ParameterRange(1, 20, 0.5, 5),
        "thickness": ParameterRange(0.1, 5, 0.1, 0.5),
    },
    ShapeType.PYRAMID: {
        "width": ParameterRange(2, 15, 0.5, 6),
        "height": ParameterRange(2, 15, 0.5, 5),
        "depth": ParameterRange(2, 15, 0.5, 6),  # keep equal to width
        "thickness": ParameterRange(0.1, 3, 0.1, 0.5),
    },
    ShapeType.PRISM: {
        "width": ParameterRange(2, 15, 0.5, 4),
        "height": ParameterRange(2, 20, 0.5, 6),
        "depth": ParameterRange(1, 20, 0.5, 4),  # unused
        "thickness": ParameterRange(0.1, 3, 0.1, 0.5),
    },
    ShapeType.CYLINDER: {
        "width": ParameterRange(2, 15, 0.5, 5),
        "height": ParameterRange(2, 20, 0.5, 7),
        "depth": ParameterRange(1, 20, 0.5, 5),  # unused
        "thickness": ParameterRange(0.1, 3, 0.1, 0.5),
    },
    ShapeType.ENVELOPE: {
        "width": ParameterRange(5, 25, 0.5, 16),
        "height": ParameterRange(1, 20, 0.5, 11),  # unused
        "depth": ParameterRange(5, 20, 0.5, 11),
        "thickness": ParameterRange(0.1, 1, 0.05, 0.3),
    },
}

require_all_shapes(RECOMMENDED_RANGES, "RECOMMENDED_RANGES")


@dataclass
class ParameterTestResult:
    parameter: str
    used: bool
    affects_pattern: bool
    should_be_shown: bool
    issue: Optional[str] = None


@dataclass
class BehaviorValidation:
    """Parameter tests for one configuration."""

    shape_type: ShapeType
    tests: List[ParameterTestResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        """True if no parameter contradicts its documented usage."""
        return all(t.issue is None for t in self.tests)

    def test_for(self, parameter: str) -> ParameterTestResult:
        for t in self.tests:
            if t.parameter == parameter:
                return t
        raise KeyError(parameter)


@dataclass(frozen=True)
class PyramidEdgeCase:
    is_edge_case: bool
    base_size: float
    limiting_dimension: str  # "width", "depth" or "both"
    message: Optional[str] = None


def parameter_is_used(shape_type: ShapeType, parameter: str) -> bool:
    """Documented usage; thickness only feeds validation, never generation."""
    if parameter == "thickness":
        return False
    return getattr(DIMENSION_USAGE[shape_type], parameter)


def parameter_affects_pattern(config: PatternConfig, parameter: str, value: float) -> bool:
    """True if regenerating with ``parameter = value`` changes the pattern."""
    baseline = generate_pattern(config)
    modified = generate_pattern(config.replace(**{parameter: value}))
    return not patterns_equal(baseline, modified)


def validate_parameter_behavior(config: PatternConfig) -> BehaviorValidation:
    """Double each parameter in turn and compare against its documented usage.

    Args:
        config: Baseline configuration.

    Returns:
        BehaviorValidation with one test per parameter plus warnings and
        recommendations.
    """
    config.validate()
    shape = config.shape_type
    validation = BehaviorValidation(shape_type=shape)

    for parameter in TESTED_PARAMETERS:
        used = parameter_is_used(shape, parameter)
        affects = parameter_affects_pattern(config, parameter, getattr(config, parameter) * 2)
        test = ParameterTestResult(
            parameter=parameter,
            used=used,
            affects_pattern=affects,
            should_be_shown=used or parameter in ("width", "thickness"),
        )

        if used and not affects:
            test.issue = "Parameter marked as used but changing it has no effect"
            validation.warnings.append(
                f"{parameter.capitalize()} parameter has no effect (likely due to min() constraint)"
            )
        elif not used and affects:
            test.issue = "Parameter marked as unused but actually affects pattern"
            validation.warnings.append(f"{parameter.capitalize()} affects pattern but is marked as unused")
        elif parameter == "thickness":
            validation.recommendations.append("Thickness only used in validation, not pattern generation")
        elif not used:
            validation.recommendations.append(f"Hide {parameter} slider for {shape.value} (not used)")
        validation.tests.append(test)

    edge = detect_pyramid_edge_case(config)
    if edge.is_edge_case:
        validation.warnings.append(edge.message)
        validation.recommendations.append(
            "Set width = depth for predictable behavior, or fix pyramid to use separate dimensions"
        )

    logger.debug("Parameter behavior for %s: %d warnings", shape.value, len(validation.warnings))
    return validation


def validate_all_shapes(
    width: float = 5.0,
    height: float = 3.0,
    depth: float = 5.0,
    thickness: float = 0.5,
) -> Dict[ShapeType, BehaviorValidation]:
    """Parameter behaviour of every shape at one shared set of dimensions."""
    return {
        shape: validate_parameter_behavior(
            PatternConfig(shape, width=width, height=height, depth=depth, thickness=thickness)
        )
        for shape in ShapeType
    }


def detect_pyramid_edge_case(config: PatternConfig) -> PyramidEdgeCase:
    """Report which of width/depth limits a pyramid's base."""
    if config.shape_type is not ShapeType.PYRAMID:
        return PyramidEdgeCase(is_edge_case=False, base_size=0.0, limiting_dimension="both")

    base = min(config.width, config.depth)
    if config.width == config.depth:
        return PyramidEdgeCase(
            is_edge_case=False,
            base_size=base,
            limiting_dimension="both",
            message="Square base: both width and depth affect pattern",
        )

    limiting = "width" if config.width < config.depth else "depth"
    unused = "depth" if limiting == "width" else "width"
    return PyramidEdgeCase(
        is_edge_case=True,
        base_size=base,
        limiting_dimension=limiting,
        message=(
            f"Base size limited by {limiting} ({base}cm). "
            f"Changing {unused} has no effect unless it becomes < {base}cm."
        ),
    )


def recommended_ranges(shape_type: ShapeType) -> Dict[str, ParameterRange]:
    return RECOMMENDED_RANGES[ShapeType(shape_type)]


def format_behavior_report(validation: BehaviorValidation) -> str:
    lines = [f"=== Parameter Behavior: {validation.shape_type.value} ===", "", "Parameter Tests:"]
    for test in validation.tests:
        lines.append(f"  {test.parameter}:")
        lines.append(f"    - {'Affects pattern' if test.affects_pattern else 'No effect'}")
        lines.append(f"    - {'Show in UI' if test.should_be_shown else 'Hide from UI'}")
        if test.issue:
            lines.append(f"    - WARNING: {test.issue}")

    if validation.warnings:
        lines += ["", "Warnings:"] + [f"  - {w}" for w in validation.warnings]
    if validation.recommendations:
        lines += ["", "Recommendations:"] + [f"  - {r}" for r in validation.recommendations]
    return "\n".join(lines)


def format_all_shapes_report(
    validations: Optional[Dict[ShapeType, BehaviorValidation]] = None,
) -> str:
    if validations is None:
        validations = validate_all_shapes()
    lines = ["=== Parameter Behavior Validation: All Shapes ===", ""]
    for validation in validations.values():
        lines.append(format_behavior_report(validation))
        lines.append("")
    return "\n".join(lines)
