"""Unit tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from cuespec_mcp_server.models import (
    # Machining
    MachiningProcess, StepUnit, DimensionUnit, MachiningStep, Dimension,
    # Drawing
    SegmentKind, CrossSectionSegment, LinePrimitive, TextPrimitive, VectorScene, DrawingMode,
    # Records
    RecordType, ModificationCategory, Difficulty,
    PinSpec, FerruleSpec, JointSpec, ModificationSpec, model_for, parse_record,
)


class TestMachiningStep:
    """Tests for MachiningStep model."""

    def test_creation_default_unit(self):
        """Test that unit defaults to inches."""
        step = MachiningStep(process=MachiningProcess.DRILL, size="3/8", depth="1")
        assert step.unit == StepUnit.INCHES
        assert step.thread_size is None

    def test_camel_case_input(self):
        """Test stored camelCase keys are accepted."""
        step = MachiningStep.model_validate(
            {"process": "Tap", "threadSize": "5/16-18", "finalDiameter": "1/4", "unit": "mm"}
        )
        assert step.thread_size == "5/16-18"
        assert step.final_diameter == "1/4"
        assert step.unit == StepUnit.MILLIMETERS

    def test_serialization_by_alias(self):
        """Test documents serialize in camelCase."""
        step = MachiningStep(process=MachiningProcess.CENTER_DRILL, thread_size="x")
        data = step.model_dump(by_alias=True)
        assert data["process"] == "Center Drill"
        assert "threadSize" in data

    def test_unknown_process_rejected(self):
        """Test that processes outside the list are rejected."""
        with pytest.raises(ValidationError):
            MachiningStep(process="Knurl")


class TestDimension:
    """Tests for Dimension model."""

    def test_default(self):
        """Test default dimension is zero inches."""
        d = Dimension()
        assert d.value == 0.0
        assert d.unit == DimensionUnit.INCHES

    def test_negative_rejected(self):
        """Test value must be non-negative."""
        with pytest.raises(ValidationError):
            Dimension(value=-1.0)

    def test_frozen(self):
        """Test dimensions are immutable."""
        d = Dimension(value=1.0)
        with pytest.raises(ValidationError):
            d.value = 2.0


class TestDrawingModels:
    """Tests for drawing models."""

    def test_segment_length(self):
        """Test computed length and hole flag."""
        seg = CrossSectionSegment(start_depth=0.25, end_depth=1.0, radius=0.1, outer_radius=0.2, kind=SegmentKind.HOLE)
        assert seg.length == 0.75
        assert seg.is_hole
        assert seg.model_dump()["length"] == 0.75

    def test_scene_discriminated_union(self):
        """Test scenes round-trip their primitive kinds."""
        scene = VectorScene(
            width=10, height=10, mode=DrawingMode.FULL,
            primitives=[
                LinePrimitive(role="outline", x1=0, y1=0, x2=1, y2=1),
                TextPrimitive(role="label", x=0, y=0, text="0"),
            ],
        )
        restored = VectorScene.model_validate_json(scene.model_dump_json())
        assert isinstance(restored.primitives[0], LinePrimitive)
        assert isinstance(restored.primitives[1], TextPrimitive)
        assert restored == scene

    def test_scene_groups(self):
        """Test groups are listed in first-seen order."""
        scene = VectorScene(
            width=10, height=10, mode=DrawingMode.FULL,
            primitives=[
                LinePrimitive(role="thread", group="thread-3", x1=0, y1=0, x2=1, y2=1),
                LinePrimitive(role="thread", group="thread-1", x1=0, y1=0, x2=1, y2=1),
                LinePrimitive(role="thread", group="thread-3", x1=0, y1=0, x2=1, y2=1),
            ],
        )
        assert scene.groups("thread") == ["thread-3", "thread-1"]
        assert len(scene.by_role("thread")) == 3


class TestRecords:
    """Tests for component record models."""

    def test_record_type_label(self):
        """Test record type labels."""
        assert RecordType.PIN.label == "Pin"
        assert RecordType.MODIFICATION.label == "Modification"

    def test_model_for(self):
        """Test record type to model mapping."""
        assert model_for(RecordType.PIN) is PinSpec
        assert model_for("ferrules") is FerruleSpec
        assert model_for(RecordType.JOINT) is JointSpec

    def test_parse_stored_document(self):
        """Test a camelCase document from the store."""
        pin = parse_record(RecordType.PIN, {
            "id": "abc",
            "name": "Radial pin",
            "exposedLength": "3/4",
            "assemblyNotes": "Loctite",
            "machiningSteps": [{"process": "Drill", "size": "3/8", "depth": "1"}],
            "createdAt": "2024-05-01T12:00:00Z",
        })
        assert pin.id == "abc"
        assert pin.exposed_length == "3/4"
        assert pin.machining_steps[0].process == MachiningProcess.DRILL
        assert pin.created_at.year == 2024

    def test_legacy_string_steps_dropped(self):
        """Test free-text steps from old records are dropped."""
        joint = parse_record(RecordType.JOINT, {
            "name": "Uni-loc",
            "machiningSteps": ["drill 3/8 thru", {"process": "Tap", "threadSize": "3/8-10"}],
        })
        assert len(joint.machining_steps) == 1
        assert joint.machining_steps[0].process == MachiningProcess.TAP

    def test_null_steps(self):
        """Test null steps become an empty list."""
        assert FerruleSpec(name="F", machining_steps=None).machining_steps == []

    def test_to_document(self):
        """Test documents are camelCase and carry no id."""
        ferrule = FerruleSpec(id="x", name="F", vault_plate=True, vault_plate_thickness="1/16")
        doc = ferrule.to_document()
        assert "id" not in doc
        assert doc["vaultPlate"] is True
        assert doc["vaultPlateThickness"] == "1/16"
        assert doc["machiningSteps"] == []

    def test_modification_enums(self):
        """Test modification category and difficulty."""
        mod = ModificationSpec(name="Weight bolt", category="Weight", difficulty="Advanced")
        assert mod.category == ModificationCategory.WEIGHT
        assert mod.difficulty == Difficulty.ADVANCED
        with pytest.raises(ValidationError):
            ModificationSpec(name="x", difficulty="Trivial")
