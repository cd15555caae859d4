"""Record models for CueSpec MCP Server.

Defines the cue component specifications kept in the record store. Field
names are snake_case in Python and camelCase in stored documents.
"""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Type
from enum import Enum

from .machining import MachiningStep


class RecordType(str, Enum):
    """Kinds of component record, valued by their collection name."""
    PIN = "pins"
    FERRULE = "ferrules"
    JOINT = "joints"
    MODIFICATION = "modifications"

    @property
    def label(self) -> str:
        return self.value[:-1].capitalize()


class ModificationCategory(str, Enum):
    """What a modification changes on the cue."""
    WEIGHT = "Weight"
    BALANCE = "Balance"
    GRIP = "Grip"
    AESTHETICS = "Aesthetics"
    PERFORMANCE = "Performance"
    OTHER = "Other"


class Difficulty(str, Enum):
    """Skill level needed for a modification."""
    EASY = "Easy"
    MODERATE = "Moderate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class BaseSpec(BaseModel):
    """Fields shared by every component record."""

    id: Optional[str] = Field(default=None, description="Record identifier assigned by the store")
    name: str = Field(default="", description="Display name")
    manufacture: str = Field(default="", description="Manufacturer or build style")
    machining_steps: List[MachiningStep] = Field(default_factory=list, description="Ordered operations")
    assembly_notes: str = Field(default="", description="Free-form notes")
    created_at: Optional[datetime] = Field(default=None, description="Creation time (UTC)")
    updated_at: Optional[datetime] = Field(default=None, description="Last update time (UTC)")

    @field_validator("machining_steps", mode="before")
    @classmethod
    def drop_legacy_steps(cls, v: Any) -> Any:
        """Drop free-text steps from older records; they carry no geometry."""
        if v is None:
            return []
        if isinstance(v, list):
            return [step for step in v if not isinstance(step, str)]
        return v

    def to_document(self) -> Dict[str, Any]:
        """Serialize for storage (camelCase, without id)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class PinSpec(BaseSpec):
    """Joint pin specification."""

    exposed_length: Optional[str] = Field(default=None, description="Length protruding past the joint face")

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Radial pin",
                "exposedLength": "3/4",
                "machiningSteps": [
                    {"process": "Drill", "size": "3/8", "depth": "1", "unit": "inches"},
                    {"process": "Tap", "threadSize": "5/16-18", "unit": "inches"}
                ]
            }
        }
    }


class FerruleSpec(BaseSpec):
    """Ferrule specification."""

    diameter: Optional[str] = Field(default=None, description="Stock diameter")
    length: Optional[str] = Field(default=None, description="Stock length")
    material: str = Field(default="", description="Ferrule material")
    vault_plate: bool = Field(default=False, description="Whether a vault plate is fitted")
    vault_plate_material: Optional[str] = Field(default=None)
    vault_plate_thickness: Optional[str] = Field(default=None)


class JointSpec(BaseSpec):
    """Joint specification."""

    diameter: Optional[str] = Field(default=None, description="Finished joint diameter")
    has_insert: bool = Field(default=False, description="Whether the joint takes an insert")
    insert_material: Optional[str] = Field(default=None)


class ModificationSpec(BaseSpec):
    """Cue modification recipe."""

    description: str = Field(default="")
    category: ModificationCategory = Field(default=ModificationCategory.OTHER)
    difficulty: Difficulty = Field(default=Difficulty.EASY)
    time_estimate: Optional[str] = Field(default=None)
    tools_required: Optional[str] = Field(default=None)
    materials_needed: Optional[str] = Field(default=None)


RECORD_MODELS: Dict[RecordType, Type[BaseSpec]] = {
    RecordType.PIN: PinSpec,
    RecordType.FERRULE: FerruleSpec,
    RecordType.JOINT: JointSpec,
    RecordType.MODIFICATION: ModificationSpec,
}


def model_for(record_type: RecordType) -> Type[BaseSpec]:
    """Get the model class for a record type."""
    return RECORD_MODELS[RecordType(record_type)]


def parse_record(record_type: RecordType, data: Dict[str, Any]) -> BaseSpec:
    """Validate a stored or user-supplied document as its record model."""
    return model_for(record_type).model_validate(data)
