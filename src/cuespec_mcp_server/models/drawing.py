"""Drawing models for CueSpec MCP Server.

Defines the cross-section profile, thread regions and the vector scene
emitted by the technical-drawing generator. Depths and radii are in inches;
scene coordinates are in pixels.
"""

from pydantic import BaseModel, Field, computed_field
from typing import Annotated, Optional, List, Union, Literal
from enum import Enum


class SegmentKind(str, Enum):
    """Material state of a depth segment."""
    SOLID = "solid"
    HOLE = "hole"


class DrawingMode(str, Enum):
    """Render verbosity."""
    THUMBNAIL = "thumbnail"
    FULL = "full"


class DrawingSettings(BaseModel):
    """Tunable constants for the drawing generator."""

    thumbnail_scale: float = Field(default=40.0, gt=0, description="Thumbnail pixels per inch")
    full_scale: float = Field(default=120.0, gt=0, description="Full view pixels per inch")
    default_radius: float = Field(default=0.25, gt=0, description="Fallback stock radius (in)")
    default_depth: float = Field(default=1.0, gt=0, description="Fallback part length (in)")
    stock_allowance: float = Field(default=1.25, gt=0, description="Stock factor over largest cut")
    exposed_diameter: float = Field(default=0.25, gt=0, description="Exposed pin diameter (in)")
    hatch_pitch: float = Field(default=8.0, gt=0, description="Cross hatch spacing (px)")

    model_config = {"frozen": True}


class CrossSectionSegment(BaseModel):
    """One depth interval of the part's profile."""

    start_depth: float = Field(ge=0, description="Interval start in inches")
    end_depth: float = Field(description="Interval end in inches")
    radius: float = Field(description="Bore radius for holes, stock radius for solids")
    outer_radius: float = Field(description="Stock radius")
    kind: SegmentKind = Field(description="Solid or hole")

    @computed_field
    @property
    def length(self) -> float:
        """Segment length along the axis."""
        return self.end_depth - self.start_depth

    @property
    def is_hole(self) -> bool:
        return self.kind == SegmentKind.HOLE

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "start_depth": 0.0,
                "end_depth": 1.0,
                "radius": 0.1875,
                "outer_radius": 0.234375,
                "kind": "hole"
            }
        }
    }


class ThreadRegion(BaseModel):
    """Depth range where a tap's threads remain visible."""

    tap_index: int = Field(description="Index of the tap step")
    thread_size: Optional[str] = Field(default=None, description="Thread label")
    start: float = Field(ge=0, description="Start depth in inches")
    end: float = Field(description="End depth in inches")
    radius: float = Field(description="Radius of the tapped hole in inches")

    model_config = {"frozen": True}


class DrawingMetrics(BaseModel):
    """Overall extents used for layout decisions."""

    max_diameter: float = Field(description="Stock diameter in inches")
    max_depth: float = Field(description="Overall drawn length in inches")


class LinePrimitive(BaseModel):
    """A straight stroke."""

    kind: Literal["line"] = "line"
    role: str = Field(description="Drawing layer (outline, bore, thread, ...)")
    group: str = Field(default="", description="Feature grouping key")
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = "#000000"
    stroke_width: float = 1.0
    dash: Optional[str] = Field(default=None, description="SVG dash array, e.g. '4,4'")
    opacity: Optional[float] = None

    model_config = {"frozen": True}


class TextPrimitive(BaseModel):
    """A text label."""

    kind: Literal["text"] = "text"
    role: str = Field(description="Drawing layer (label, dimension, ...)")
    group: str = ""
    x: float
    y: float
    text: str
    font_size: float = 12.0
    fill: str = "#000000"
    anchor: str = Field(default="start", description="start, middle or end")
    bold: bool = False
    rotate: Optional[float] = Field(default=None, description="Rotation in degrees about (x, y)")

    model_config = {"frozen": True}


Primitive = Annotated[Union[LinePrimitive, TextPrimitive], Field(discriminator="kind")]


class VectorScene(BaseModel):
    """Ordered list of drawing primitives and canvas size."""

    width: float = Field(description="Canvas width in pixels")
    height: float = Field(description="Canvas height in pixels")
    mode: DrawingMode = Field(description="Verbosity the scene was rendered at")
    title: Optional[str] = Field(default=None, description="Header label (full mode)")
    primitives: List[Primitive] = Field(default_factory=list)

    def by_role(self, role: str) -> List[Union[LinePrimitive, TextPrimitive]]:
        """Primitives on one drawing layer, in draw order."""
        return [p for p in self.primitives if p.role == role]

    def groups(self, role: str) -> List[str]:
        """Distinct group keys on a layer, in first-seen order."""
        seen: List[str] = []
        for p in self.primitives:
            if p.role == role and p.group not in seen:
                seen.append(p.group)
        return seen
