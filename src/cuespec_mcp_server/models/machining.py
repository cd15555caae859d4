"""Machining models for CueSpec MCP Server.

Defines the machining operations recorded on a component and the parsed
dimension type used by the drawing core.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from enum import Enum


class MachiningProcess(str, Enum):
    """Manufacturing operations a step can describe."""
    CENTER_DRILL = "Center Drill"
    DRILL = "Drill"
    TAP = "Tap"
    BORE = "Bore"
    REAM = "Ream"
    FACE = "Face"


class StepUnit(str, Enum):
    """Unit a step's un-suffixed dimension text is authored in."""
    INCHES = "inches"
    MILLIMETERS = "mm"


class DimensionUnit(str, Enum):
    """Units recognised by the dimension parser."""
    INCHES = "inches"
    MILLIMETERS = "mm"
    CENTIMETERS = "cm"


class MachiningStep(BaseModel):
    """One manufacturing operation in a component's machining sequence."""

    id: Optional[str] = Field(default=None, description="Step identifier")
    process: MachiningProcess = Field(description="Operation performed")
    size: Optional[str] = Field(default=None, description="Drill diameter text")
    depth: Optional[str] = Field(default=None, description="Depth from the zero face")
    thread_size: Optional[str] = Field(default=None, description="Thread label for taps (e.g. '5/16-18')")
    final_diameter: Optional[str] = Field(default=None, description="Finished diameter for bores")
    unit: StepUnit = Field(default=StepUnit.INCHES, description="Unit of un-suffixed values")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "process": "Drill",
                "size": "3/8",
                "depth": "1",
                "unit": "inches"
            }
        }
    }


class Dimension(BaseModel):
    """A parsed dimension value with its unit."""

    value: float = Field(default=0.0, ge=0, description="Numeric value in `unit`")
    unit: DimensionUnit = Field(default=DimensionUnit.INCHES, description="Unit of the value")
    original_text: str = Field(default="", description="Trimmed source text")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {"value": 25.4, "unit": "mm", "original_text": "25.4mm"}
        }
    }
