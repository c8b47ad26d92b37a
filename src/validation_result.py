"""
Result containers shared by every validator.

A ValidationResult records one check: validity, ordered errors and warnings,
and a check-specific details payload. ``coverage`` distinguishes a check that
actually ran from a structural placeholder, so callers can tell "checked and
passed" apart from "not really checked".
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List


class CheckCoverage(Enum):
    COMPLETE = "complete"
    PLACEHOLDER = "placeholder"


@dataclass
class ValidationResult:
    """Outcome of one theorem or assembly rule."""

    theorem_id: str
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)
    coverage: CheckCoverage = CheckCoverage.COMPLETE

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    @property
    def is_authoritative(self) -> bool:
        return self.coverage is CheckCoverage.COMPLETE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "theorem_id": self.theorem_id,
            "valid": self.valid,
            "coverage": self.coverage.value,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "details": self.details,
        }


@dataclass
class PatternValidation:
    """All validator results for one pattern."""

    theorems: List[ValidationResult]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def overall(self) -> bool:
        return all(r.valid for r in self.theorems)

    def get(self, theorem_id: str) -> ValidationResult:
        for r in self.theorems:
            if r.theorem_id == theorem_id:
                return r
        raise KeyError(f"No result for '{theorem_id}'")

    @property
    def errors(self) -> List[str]:
        return [e for r in self.theorems for e in r.errors]

    @property
    def warnings(self) -> List[str]:
        return [w for r in self.theorems for w in r.warnings]

    @property
    def unchecked(self) -> List[str]:
        """Ids of results that are placeholders rather than real checks."""
        return [r.theorem_id for r in self.theorems if not r.is_authoritative]
