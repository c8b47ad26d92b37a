"""
Starter templates.

Each template is a named default configuration that generates and validates
cleanly; they are the starting points offered before any parameter is
changed.
"""
from dataclasses import dataclass
from typing import Dict, List

from fold_pattern import FoldPattern
from pattern_config import PatternConfig, ShapeType
from shape_generators import generate_pattern


@dataclass(frozen=True)
class PatternTemplate:
    id: str
    name: str
    description: str
    category: str
    config: PatternConfig

    def generate(self) -> FoldPattern:
        return generate_pattern(self.config)


TEMPLATES: List[PatternTemplate] = [
    PatternTemplate(
        id="box-simple",
        name="Simple Box",
        description="Basic rectangular box with lid",
        category="box",
        config=PatternConfig(ShapeType.BOX, width=5, height=3, depth=5, thickness=0.5),
    ),
    PatternTemplate(
        id="pyramid",
        name="Pyramid",
        description="Four-sided pyramid shape",
        category="box",
        config=PatternConfig(ShapeType.PYRAMID, width=6, height=5, depth=6, thickness=0.5),
    ),
    PatternTemplate(
        id="hexagonal-prism",
        name="Hexagonal Prism",
        description="Six-sided prism container",
        category="box",
        config=PatternConfig(ShapeType.PRISM, width=4, height=6, depth=4, thickness=0.5),
    ),
    PatternTemplate(
        id="cylinder",
        name="Cylinder",
        description="Round cylindrical container",
        category="box",
        config=PatternConfig(ShapeType.CYLINDER, width=5, height=7, depth=5, thickness=0.5),
    ),
    PatternTemplate(
        id="envelope-basic",
        name="Envelope",
        description="Standard envelope pattern",
        category="envelope",
        config=PatternConfig(ShapeType.ENVELOPE, width=16, height=11, depth=8, thickness=0.3),
    ),
]

_BY_ID: Dict[str, PatternTemplate] = {t.id: t for t in TEMPLATES}


def get_template(template_id: str) -> PatternTemplate:
    """Look up a template by id.

    Raises:
        KeyError: unknown id (the message lists the known ones).
    """
    try:
        return _BY_ID[template_id]
    except KeyError:
        raise KeyError(
            f"Unknown template '{template_id}'. Available: {', '.join(_BY_ID)}"
        ) from None


def templates_for_category(category: str) -> List[PatternTemplate]:
    return [t for t in TEMPLATES if t.category == category]
