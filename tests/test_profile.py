"""Unit tests for the cross-section profile builder."""

import pytest

from cuespec_mcp_server.drawing.profile import (
    build_profile,
    compute_drawing_metrics,
    machined_cuts,
    material_diameter,
    overall_depth,
    step_diameter,
)
from cuespec_mcp_server.models import (
    DrawingSettings,
    FerruleSpec,
    MachiningProcess,
    MachiningStep,
    PinSpec,
    SegmentKind,
    StepUnit,
)


def drill(size, depth, unit=StepUnit.INCHES):
    return MachiningStep(process=MachiningProcess.DRILL, size=size, depth=depth, unit=unit)


def assert_partition(segments, total):
    assert segments[0].start_depth == 0.0
    assert segments[-1].end_depth == pytest.approx(total)
    for left, right in zip(segments, segments[1:]):
        assert left.end_depth == right.start_depth
    assert all(s.length > 0 for s in segments)
    assert sum(s.length for s in segments) == pytest.approx(total)


class TestStepGeometry:
    """Tests for per-step diameter and depth."""

    def test_bore_prefers_final_diameter(self):
        """Test that Bore uses final_diameter over size."""
        step = MachiningStep(process=MachiningProcess.BORE, size="1/4", final_diameter="1/2", depth="1")
        assert step_diameter(step) == 0.5

    def test_bore_falls_back_to_size(self):
        """Test that Bore uses size when final_diameter is blank."""
        step = MachiningStep(process=MachiningProcess.BORE, size="1/4", final_diameter=" ", depth="1")
        assert step_diameter(step) == 0.25

    def test_other_processes_cut_nothing(self):
        """Test that Ream, Face and Center Drill carry no geometry."""
        for process in (MachiningProcess.REAM, MachiningProcess.FACE, MachiningProcess.CENTER_DRILL):
            step = MachiningStep(process=process, size="1", depth="1")
            assert step_diameter(step) == 0.0

    def test_zero_size_or_depth_excluded(self):
        """Test partially filled steps are ignored."""
        cuts = machined_cuts([drill("0", "1"), drill("1/4", "0"), drill("1/4", ""), drill("1/4", "1")])
        assert [c.index for c in cuts] == [3]

    def test_step_unit_applies(self):
        """Test mm steps convert to inches."""
        cut = machined_cuts([drill("25.4", "12.7", StepUnit.MILLIMETERS)])[0]
        assert cut.diameter == pytest.approx(1.0)
        assert cut.depth == pytest.approx(0.5)


class TestMetrics:
    """Tests for material diameter and drawn length."""

    def test_explicit_diameter_wins(self):
        """Test an explicit diameter field is used as given."""
        spec = FerruleSpec(name="F", diameter="0.85", machining_steps=[drill("1/2", "1")])
        assert material_diameter(spec) == 0.85

    def test_allowance_over_largest_cut(self):
        """Test the 25% stock allowance."""
        spec = PinSpec(name="P", machining_steps=[drill("1/4", "1"), drill("1/2", "0.5")])
        assert material_diameter(spec) == pytest.approx(0.625)

    def test_fallback_diameter(self):
        """Test the fallback radius when nothing is known."""
        assert material_diameter(PinSpec(name="P")) == 0.5

    def test_depth_includes_lengths(self):
        """Test exposed and stock length extend the drawn length."""
        assert overall_depth([drill("1/4", "1")], exposed_length="1 1/2") == 1.5
        assert overall_depth([drill("1/4", "1")], length="0.5") == 1.0

    def test_default_depth(self):
        """Test the default length with no steps."""
        assert overall_depth([]) == 1.0

    def test_compute_drawing_metrics(self):
        """Test the metrics entry point."""
        spec = PinSpec(name="P", exposed_length="2", machining_steps=[drill("3/8", "1")])
        metrics = compute_drawing_metrics(spec)
        assert metrics.max_depth == 2.0
        assert metrics.max_diameter == pytest.approx(0.46875)

    def test_settings_override(self):
        """Test custom drawing settings."""
        settings = DrawingSettings(default_radius=0.5, default_depth=3.0)
        metrics = compute_drawing_metrics(PinSpec(name="P"), settings)
        assert metrics.max_diameter == 1.0
        assert metrics.max_depth == 3.0


class TestBuildProfile:
    """Tests for the largest-hole-wins profile."""

    def test_empty_is_single_solid(self):
        """Test no steps gives one solid default bar."""
        segments = build_profile([])
        assert len(segments) == 1
        seg = segments[0]
        assert seg.kind == SegmentKind.SOLID
        assert (seg.start_depth, seg.end_depth) == (0.0, 1.0)
        assert seg.radius == 0.25
        assert seg.outer_radius == 0.25

    def test_largest_hole_wins(self):
        """Test a shallow large hole dominates a deep small one only to its depth."""
        steps = [drill("0.25", "0.5"), drill("0.5", "0.25")]
        segments = build_profile(steps, max_diameter=1.0)
        assert [(s.start_depth, s.end_depth) for s in segments] == [(0.0, 0.25), (0.25, 0.5)]
        assert segments[0].radius == 0.25
        assert segments[1].radius == 0.125
        assert all(s.outer_radius == 0.5 for s in segments)

    def test_single_drill(self):
        """Test one drill to full depth."""
        segments = build_profile([drill("3/8", "1")])
        assert len(segments) == 1
        assert segments[0].kind == SegmentKind.HOLE
        assert segments[0].radius == 0.1875

    def test_solid_after_holes(self):
        """Test material beyond the deepest hole is solid."""
        segments = build_profile([drill("1/4", "0.5")], max_diameter=0.5, max_depth=2.0)
        assert [s.kind for s in segments] == [SegmentKind.HOLE, SegmentKind.SOLID]
        assert segments[1].radius == 0.25

    def test_duplicate_depths_collapse(self):
        """Test equal depths give no zero-length segment."""
        steps = [drill("1/4", "0.5"), drill("1/8", "0.5"), drill("1/8", "1/2")]
        segments = build_profile(steps, max_diameter=1.0, max_depth=1.0)
        assert len(segments) == 2
        assert segments[0].radius == 0.125

    def test_bore_does_not_shape_profile(self):
        """Test only Drill steps form holes."""
        steps = [MachiningStep(process=MachiningProcess.BORE, final_diameter="1/2", depth="1")]
        segments = build_profile(steps, max_diameter=1.0, max_depth=1.0)
        assert [s.kind for s in segments] == [SegmentKind.SOLID]

    @pytest.mark.parametrize("steps,depth", [
        ([], 1.0),
        ([drill("1/4", "1")], 1.0),
        ([drill("1/4", "0.3"), drill("1/8", "0.7"), drill("3/8", "0.1")], 2.0),
        ([drill("5mm", "10mm"), drill("1/8", "1 1/4"), drill("1/2", "1/3")], 1.25),
    ])
    def test_partition(self, steps, depth):
        """Test segments partition [0, max_depth] with no gaps or overlaps."""
        segments = build_profile(steps, max_diameter=1.0, max_depth=depth)
        assert_partition(segments, depth)

    def test_derived_arguments(self):
        """Test diameter and depth derived from steps when omitted."""
        segments = build_profile([drill("1/2", "0.75")])
        assert segments[-1].end_depth == 0.75
        assert segments[0].outer_radius == pytest.approx(0.3125)
