"""
Shared test fixtures for fold-pattern generation and validation tests.
"""
import math
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from geometry_primitives import FoldType, make_fold, planar_point
from pattern_config import PatternConfig, ShapeType
from shape_generators import generate_pattern
from vertex_analysis import Vertex


# Default configurations of the starter templates
DEFAULT_CONFIGS = {
    ShapeType.BOX: PatternConfig(ShapeType.BOX, width=5, height=3, depth=5, thickness=0.5),
    ShapeType.PYRAMID: PatternConfig(ShapeType.PYRAMID, width=6, height=5, depth=6, thickness=0.5),
    ShapeType.PRISM: PatternConfig(ShapeType.PRISM, width=4, height=6, depth=4, thickness=0.5),
    ShapeType.CYLINDER: PatternConfig(ShapeType.CYLINDER, width=5, height=7, depth=5, thickness=0.5),
    ShapeType.ENVELOPE: PatternConfig(ShapeType.ENVELOPE, width=16, height=11, depth=8, thickness=0.3),
}


@pytest.fixture
def box_config():
    """The 5 x 3 x 5 cm box on 0.5 mm stock."""
    return DEFAULT_CONFIGS[ShapeType.BOX]


@pytest.fixture
def box_pattern(box_config):
    return generate_pattern(box_config)


@pytest.fixture
def thin_pyramid_config():
    """A 1 cm pyramid on 2 mm stock (tabs too small for the material)."""
    return PatternConfig(ShapeType.PYRAMID, width=1, height=1, depth=1, thickness=2)


@pytest.fixture(params=list(DEFAULT_CONFIGS), ids=lambda s: s.value)
def any_config(request):
    """Default configuration for every shape type."""
    return DEFAULT_CONFIGS[request.param]


@pytest.fixture
def star_vertex():
    """Factory for a synthetic vertex at the origin.

    Takes crease directions in degrees and matching M, V or C symbols, returns a
    Vertex whose lines radiate to unit distance.
    """
    by_symbol = {t.symbol: t for t in FoldType}

    def _make(angles_deg, fold_types):
        centre = planar_point(0.0, 0.0)
        lines = []
        for angle, fold_type in zip(angles_deg, fold_types):
            a = math.radians(angle)
            lines.append(make_fold(centre, planar_point(math.cos(a), math.sin(a)), by_symbol[fold_type]))
        return Vertex(position=centre, lines=tuple(lines))
    return _make
