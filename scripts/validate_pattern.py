#!/usr/bin/env python3
"""
Generate one fold pattern and validate it.

Usage:
    # From explicit dimensions (cm, thickness in mm)
    python scripts/validate_pattern.py --shape box --width 5 --height 3 --depth 5 --thickness 0.5

    # From a starter template
    python scripts/validate_pattern.py --template pyramid

    # Machine-readable output
    python scripts/validate_pattern.py --template cylinder --json report.json
"""
import sys
import json
import argparse
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from geometry_primitives import PatternGeometryError
from pattern_config import PatternConfig, ShapeType
from pattern_validation import format_validation_report, validate_pattern, validation_to_json
from shape_generators import generate_pattern
from templates import TEMPLATES, get_template


def main():
    parser = argparse.ArgumentParser(
        description="Generate a glue-free fold pattern and check foldability and assembly rules"
    )
    parser.add_argument(
        "--template", type=str, default=None,
        choices=[t.id for t in TEMPLATES],
        help="Start from a named template (overrides --shape)",
    )
    parser.add_argument(
        "--shape", type=str, default="box",
        choices=[s.value for s in ShapeType],
        help="Shape type (default: box)",
    )
    parser.add_argument("--width", type=float, default=None, help="Width in cm")
    parser.add_argument("--height", type=float, default=None, help="Height in cm")
    parser.add_argument("--depth", type=float, default=None, help="Depth in cm")
    parser.add_argument("--thickness", type=float, default=None, help="Material thickness in mm")
    parser.add_argument(
        "--json", type=str, default=None,
        help="Write the JSON report to this path",
    )
    parser.add_argument(
        "--max-warnings", type=int, default=5,
        help="Warnings shown per check in the text report (default: 5)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="DEBUG logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.template:
        config = get_template(args.template).config
    else:
        config = PatternConfig(ShapeType(args.shape), width=5.0, height=3.0, depth=5.0)

    overrides = {
        name: getattr(args, name)
        for name in ("width", "height", "depth", "thickness")
        if getattr(args, name) is not None
    }
    config = config.replace(**overrides)

    try:
        pattern = generate_pattern(config)
    except PatternGeometryError as e:
        print(f"Error: {e}")
        sys.exit(1)

    validation = validate_pattern(pattern, config)
    print(format_validation_report(validation, max_warnings=args.max_warnings))

    if args.json:
        out = Path(args.json)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w") as f:
            json.dump(validation_to_json(validation, config), f, indent=2)
        print(f"JSON report written to {out}")

    sys.exit(0 if validation.overall else 2)


if __name__ == "__main__":
    main()
