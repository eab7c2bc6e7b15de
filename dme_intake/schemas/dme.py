"""
Pydantic Schemas for DME Extraction.

DeviceDefinition is loaded once from configuration; ExtractionResult is
created fresh for every extracted note. Both are immutable.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from dme_intake.core.enums import UNKNOWN_DEVICE


DEFAULT_DEVICE_PRIORITY = 999


class DeviceDefinition(BaseModel):
    """A recognizable device: canonical label, keywords and check priority."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("name", "Name"),
        description="Canonical device label returned downstream",
    )
    keywords: tuple[str, ...] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("keywords", "Keywords"),
        description="Phrases that identify the device (case-insensitive)",
    )
    priority: int = Field(
        default=DEFAULT_DEVICE_PRIORITY,
        validation_alias=AliasChoices("priority", "Priority"),
        description="Lower values are checked first",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Device names must not be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Device name cannot be blank")
        return v

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """A blank keyword would match every note."""
        for keyword in v:
            if not keyword.strip():
                raise ValueError("Device keywords cannot be blank")
        return v


class ExtractionResult(BaseModel):
    """
    Structured DME order extracted from one physician note.

    ``None`` means the field was not found in the note (or does not apply to
    the classified device). An empty string means the label was present with
    nothing after it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device: str = Field(default=UNKNOWN_DEVICE, description="Classified device label")

    # CPAP
    mask_type: Optional[str] = Field(None, description="CPAP mask type")
    add_ons: Optional[frozenset[str]] = Field(None, description="CPAP add-ons (zero or one)")
    qualifier: Optional[str] = Field(None, description="Qualifying metric, e.g. AHI > 20")

    # Oxygen Tank
    liters: Optional[str] = Field(None, description="Oxygen flow rate, e.g. 2 L")
    usage: Optional[str] = Field(None, description="Oxygen usage scenarios")

    # Note-level
    ordering_provider: Optional[str] = Field(None, description="Ordering physician")
    patient_name: Optional[str] = Field(None, description="Patient name")
    date_of_birth: Optional[str] = Field(
        None,
        serialization_alias="dob",
        description="Date of birth as written in the note",
    )
    diagnosis: Optional[str] = Field(None, description="Diagnosis as written in the note")

    @property
    def is_unknown_device(self) -> bool:
        """Check if no configured device matched the note."""
        return self.device == UNKNOWN_DEVICE
