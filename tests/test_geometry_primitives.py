"""Tests for geometry_primitives module."""
import math

import pytest

from geometry_primitives import (
    DegenerateGeometry,
    FoldType,
    MIN_EDGE_LENGTH,
    PatternGeometryError,
    Point,
    TAB_TAPER_RATIO,
    as_point,
    generate_locking_tab,
    generate_slit,
    make_fold,
    planar_point,
)


class TestPoint:
    """Test the immutable sheet point."""

    def test_planar_point_has_zero_y(self):
        p = planar_point(2, 3)
        assert p.y == 0.0
        assert p.planar() == (2.0, 3.0)

    def test_is_close_uses_tolerance(self):
        p = planar_point(1.0, 1.0)
        assert p.is_close(planar_point(1.0005, 1.0))
        assert not p.is_close(planar_point(1.002, 1.0))

    def test_point_is_immutable(self):
        p = planar_point(1, 2)
        with pytest.raises(AttributeError):
            p.x = 5.0

    def test_as_point_accepts_pairs_and_triples(self):
        assert as_point((1, 2)) == Point(1.0, 0.0, 2.0)
        assert as_point((1, 2, 3)) == Point(1.0, 2.0, 3.0)
        with pytest.raises(DegenerateGeometry):
            as_point((1, 2, 3, 4))

    def test_label(self):
        assert planar_point(1.234, -5.0).label() == "(1.23, -5.00)"


class TestFoldType:
    """Test fold type symbols."""

    def test_symbols(self):
        assert FoldType.MOUNTAIN.symbol == "M"
        assert FoldType.VALLEY.symbol == "V"
        assert FoldType.CUT.symbol == "C"

    def test_cut_is_not_a_crease(self):
        assert FoldType.MOUNTAIN.is_crease
        assert not FoldType.CUT.is_crease


class TestMakeFold:
    """Test fold line construction."""

    def test_basic_fold(self):
        line = make_fold((0, 0), (3, 4), "valley")
        assert line.fold_type is FoldType.VALLEY
        assert line.length == pytest.approx(5.0)
        assert line.midpoint == Point(1.5, 0.0, 2.0)

    def test_endpoints_are_copies(self):
        start = planar_point(0, 0)
        line = make_fold(start, planar_point(1, 0), FoldType.CUT)
        assert line.start == start
        assert line.start is not start

    def test_coincident_endpoints_raise(self):
        with pytest.raises(DegenerateGeometry):
            make_fold((1, 1), (1, 1), FoldType.MOUNTAIN)

    def test_near_coincident_endpoints_raise(self):
        with pytest.raises(DegenerateGeometry):
            make_fold((0, 0), (1e-12, 0), FoldType.MOUNTAIN)

    def test_short_edge_above_minimum_is_kept(self):
        assert make_fold((0, 0), (10 * MIN_EDGE_LENGTH, 0), FoldType.CUT).length > 0

    def test_non_finite_endpoint_raises(self):
        with pytest.raises(DegenerateGeometry):
            make_fold((0, 0), (math.inf, 1), FoldType.MOUNTAIN)

    def test_degenerate_geometry_is_value_error(self):
        assert issubclass(DegenerateGeometry, PatternGeometryError)
        assert issubclass(DegenerateGeometry, ValueError)

    def test_unknown_fold_type_raises(self):
        with pytest.raises(ValueError):
            make_fold((0, 0), (1, 0), "crease")

    def test_far_end(self):
        line = make_fold((0, 0), (2, 0), FoldType.CUT)
        assert line.far_end(planar_point(0, 0)) == planar_point(2, 0)
        assert line.far_end(planar_point(2, 0)) == planar_point(0, 0)


class TestLockingTab:
    """Test trapezoidal tab generation."""

    @pytest.mark.parametrize("start, end", [
        ((0, 0), (10, 0)),
        ((0, 0), (0, 3)),
        ((1, 2), (-4, 7)),
        ((0.5, 0.5), (0.6, 0.51)),
    ])
    def test_tip_is_seventy_percent_of_base(self, start, end):
        tab = generate_locking_tab(start, end, 1.0)
        assert tab.tip_width == pytest.approx(TAB_TAPER_RATIO * tab.base_width, abs=1e-6)

    def test_fold_line_types(self):
        tab = generate_locking_tab((0, 0), (10, 0), 2.0)
        types = [line.fold_type for line in tab.fold_lines]
        assert types == [FoldType.MOUNTAIN, FoldType.CUT, FoldType.CUT, FoldType.CUT]

    def test_tab_extends_to_the_right_of_edge(self):
        # Right of +x is -z
        tab = generate_locking_tab((0, 0), (10, 0), 2.0)
        tip_start = tab.vertices[3]
        assert tip_start.z == pytest.approx(-2.0)
        assert tip_start.x == pytest.approx(1.5)

    def test_inward_flips_direction(self):
        tab = generate_locking_tab((0, 0), (10, 0), 2.0, inward=True)
        assert all(v.z >= 0 for v in tab.vertices)
        assert tab.vertices[2].z == pytest.approx(2.0)

    def test_outline_area(self):
        tab = generate_locking_tab((0, 0), (10, 0), 2.0)
        # Trapezoid: (10 + 7) / 2 * 2
        assert tab.outline().area == pytest.approx(17.0)

    def test_zero_length_base_raises(self):
        with pytest.raises(DegenerateGeometry):
            generate_locking_tab((1, 1), (1, 1), 1.0)

    def test_near_zero_base_raises(self):
        with pytest.raises(DegenerateGeometry):
            generate_locking_tab((0, 0), (1e-12, 0), 1.0)

    @pytest.mark.parametrize("depth", [0.0, -1.0, float("nan")])
    def test_bad_depth_raises(self, depth):
        with pytest.raises(DegenerateGeometry):
            generate_locking_tab((0, 0), (1, 0), depth)


class TestSlit:
    """Test centred slit generation."""

    def test_default_ratio_covers_eighty_percent(self):
        slit = generate_slit((0, 0), (10, 0))
        assert slit.fold_type is FoldType.CUT
        assert slit.start.x == pytest.approx(1.0)
        assert slit.end.x == pytest.approx(9.0)
        assert slit.length == pytest.approx(8.0)

    def test_custom_ratio(self):
        slit = generate_slit((0, 0), (0, 10), slit_ratio=0.3)
        assert slit.length == pytest.approx(3.0)
        assert slit.midpoint.z == pytest.approx(5.0)

    def test_zero_length_edge_raises(self):
        with pytest.raises(DegenerateGeometry):
            generate_slit((2, 2), (2, 2))

    @pytest.mark.parametrize("ratio", [0.0, -0.5, 1.5])
    def test_bad_ratio_raises(self, ratio):
        with pytest.raises(DegenerateGeometry):
            generate_slit((0, 0), (1, 0), slit_ratio=ratio)
