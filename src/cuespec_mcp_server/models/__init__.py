"""Pydantic models for CueSpec MCP Server."""

from .machining import (
    MachiningProcess,
    StepUnit,
    DimensionUnit,
    MachiningStep,
    Dimension,
)
from .drawing import (
    SegmentKind,
    DrawingMode,
    DrawingSettings,
    CrossSectionSegment,
    ThreadRegion,
    DrawingMetrics,
    LinePrimitive,
    TextPrimitive,
    VectorScene,
)
from .records import (
    RecordType,
    ModificationCategory,
    Difficulty,
    BaseSpec,
    PinSpec,
    FerruleSpec,
    JointSpec,
    ModificationSpec,
    RECORD_MODELS,
    model_for,
    parse_record,
)

__all__ = [
    # Machining
    "MachiningProcess", "StepUnit", "DimensionUnit", "MachiningStep", "Dimension",
    # Drawing
    "SegmentKind", "DrawingMode", "DrawingSettings", "CrossSectionSegment", "ThreadRegion",
    "DrawingMetrics", "LinePrimitive", "TextPrimitive", "VectorScene",
    # Records
    "RecordType", "ModificationCategory", "Difficulty",
    "BaseSpec", "PinSpec", "FerruleSpec", "JointSpec", "ModificationSpec",
    "RECORD_MODELS", "model_for", "parse_record",
]
