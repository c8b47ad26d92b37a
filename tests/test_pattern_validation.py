"""Tests for pattern_validation module."""
import json
import logging

import pytest

from pattern_config import InvalidDimension
from pattern_validation import format_validation_report, validate_pattern, validation_to_json
from shape_generators import generate_pattern
from validation_result import PatternValidation, ValidationResult

EXPECTED_ORDER = [
    "kawasaki-justin",
    "maekawa",
    "vertex-validity",
    "assembly-mechanics-tabs",
    "assembly-mechanics-thickness",
    "assembly-mechanics-pairing",
]


@pytest.fixture
def box_validation(box_pattern, box_config):
    return validate_pattern(box_pattern, box_config)


@pytest.fixture
def thin_pyramid_validation(thin_pyramid_config):
    return validate_pattern(generate_pattern(thin_pyramid_config), thin_pyramid_config)


class TestValidatePattern:
    """Test the aggregated verdict."""

    def test_box_is_valid(self, box_validation):
        assert box_validation.overall
        assert box_validation.errors == []

    def test_fixed_result_order(self, box_validation):
        assert [r.theorem_id for r in box_validation.theorems] == EXPECTED_ORDER

    def test_every_default_config_is_valid(self, any_config):
        validation = validate_pattern(generate_pattern(any_config), any_config)
        assert validation.overall, validation.errors

    def test_thin_pyramid_fails_only_on_tabs(self, thin_pyramid_validation):
        assert not thin_pyramid_validation.overall
        failed = [r.theorem_id for r in thin_pyramid_validation.theorems if not r.valid]
        assert failed == ["assembly-mechanics-tabs"]

    def test_all_checks_run_after_failure(self, thin_pyramid_validation):
        assert len(thin_pyramid_validation.theorems) == 6
        assert thin_pyramid_validation.get("assembly-mechanics-thickness").warnings

    def test_pairing_reported_as_unchecked(self, box_validation):
        assert box_validation.unchecked == ["assembly-mechanics-pairing"]

    def test_kawasaki_details(self, box_validation):
        details = box_validation.get("kawasaki-justin").details
        assert details["interior_vertices"] == 4
        assert details["max_deviation"] < 1e-9

    def test_get_unknown_id(self, box_validation):
        with pytest.raises(KeyError):
            box_validation.get("gauss")

    def test_invalid_config_raises(self, box_pattern, box_config):
        with pytest.raises(InvalidDimension):
            validate_pattern(box_pattern, box_config.replace(width=0))

    def test_failure_is_logged(self, thin_pyramid_config, caplog):
        pattern = generate_pattern(thin_pyramid_config)
        with caplog.at_level(logging.WARNING, logger="pattern_validation"):
            validate_pattern(pattern, thin_pyramid_config)
        assert any("assembly-mechanics-tabs" in rec.getMessage() for rec in caplog.records)


class TestAggregation:
    """Test PatternValidation on hand-built results."""

    def test_single_error_flips_overall(self):
        ok = ValidationResult("a")
        bad = ValidationResult("b")
        bad.add_error("broken")
        validation = PatternValidation(theorems=[ok, bad])
        assert not validation.overall
        assert validation.errors == ["broken"]

    def test_warnings_do_not_flip_overall(self):
        r = ValidationResult("a")
        r.add_warning("careful")
        assert PatternValidation(theorems=[r]).overall


class TestSerialization:
    """Test JSON conversion and the markdown report."""

    def test_json_round_trips_through_dumps(self, box_validation, box_config):
        d = validation_to_json(box_validation, box_config)
        text = json.dumps(d)
        loaded = json.loads(text)
        assert loaded["overall"] is True
        assert loaded["config"]["shape_type"] == "box"
        assert [t["theorem_id"] for t in loaded["theorems"]] == EXPECTED_ORDER
        assert loaded["unchecked"] == ["assembly-mechanics-pairing"]

    def test_json_without_config(self, box_validation):
        assert validation_to_json(box_validation)["config"] is None

    def test_placeholder_coverage_in_json(self, box_validation):
        theorems = validation_to_json(box_validation)["theorems"]
        assert theorems[-1]["coverage"] == "placeholder"
        assert theorems[0]["coverage"] == "complete"

    def test_report_verdict_and_sections(self, box_validation):
        report = format_validation_report(box_validation)
        assert report.startswith("# Pattern Validation Report")
        assert "VALID" in report.splitlines()[0]
        assert "## [PASS] assembly-mechanics-pairing (placeholder)" in report
        assert "**Not fully checked:** assembly-mechanics-pairing" in report

    def test_report_lists_errors(self, thin_pyramid_validation):
        report = format_validation_report(thin_pyramid_validation)
        assert "INVALID" in report.splitlines()[0]
        assert "## [FAIL] assembly-mechanics-tabs" in report
        assert "minimum feature size" in report

    def test_report_truncates_warnings(self, box_validation):
        report = format_validation_report(box_validation, max_warnings=1)
        assert "more" in report
        assert len(report) < len(format_validation_report(box_validation))
