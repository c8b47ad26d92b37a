#!/usr/bin/env python3
"""
Report which dimensions actually change each shape's pattern.

Usage:
    python scripts/check_parameter_behavior.py
    python scripts/check_parameter_behavior.py --width 10 --depth 5
"""
import sys
import argparse
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pattern_config import PatternConfig, ShapeType
from parameter_behavior import detect_pyramid_edge_case, format_all_shapes_report, validate_all_shapes


PYRAMID_CASES = [
    (5.0, 5.0),
    (10.0, 5.0),
    (5.0, 10.0),
    (15.0, 5.0),
]


def main():
    parser = argparse.ArgumentParser(description="Check parameter behaviour for every shape")
    parser.add_argument("--width", type=float, default=5.0, help="Width in cm (default: 5)")
    parser.add_argument("--height", type=float, default=3.0, help="Height in cm (default: 3)")
    parser.add_argument("--depth", type=float, default=5.0, help="Depth in cm (default: 5)")
    parser.add_argument("--thickness", type=float, default=0.5, help="Thickness in mm (default: 0.5)")
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    validations = validate_all_shapes(args.width, args.height, args.depth, args.thickness)
    print(format_all_shapes_report(validations))

    print("=== Pyramid base clamp ===")
    for width, depth in PYRAMID_CASES:
        edge = detect_pyramid_edge_case(
            PatternConfig(ShapeType.PYRAMID, width=width, height=args.height, depth=depth)
        )
        print(f"  width={width:g} depth={depth:g}: base {edge.base_size:g}cm - {edge.message}")

    inconsistent = [s.value for s, v in validations.items() if not v.consistent]
    if inconsistent:
        print(f"\nParameters contradicting documented usage: {', '.join(inconsistent)}")


if __name__ == "__main__":
    main()
