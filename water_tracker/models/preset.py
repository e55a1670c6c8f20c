"""
Cup Preset Model

A preset is a named, reusable quick-add volume shown on the main screen.
The persisted form is a JSON array of {id, name, volume}.
"""

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class CupPreset(BaseModel):
    """
    A quick-add water volume.
    
    `id` is generated at creation and is only unique within the owning
    list. Names and volumes may repeat.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)
    
    id: UUID = Field(
        default_factory=uuid4,
        description="Opaque identifier, unique within the preset list"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    volume: int = Field(
        ...,
        description="Volume in mL (expected positive, not enforced)"
    )
    
    @property
    def label(self) -> str:
        return f"{self.name} ({self.volume} mL)"


# Seeded on first run
DEFAULT_PRESETS: tuple[tuple[str, int], ...] = (
    ("Small", 200),
    ("Medium", 350),
    ("Large", 500),
)

_preset_list_adapter = TypeAdapter(list[CupPreset])


def default_presets() -> list[CupPreset]:
    """Fresh copies of the seed presets (new ids every call)."""
    return [CupPreset(name=name, volume=volume) for name, volume in DEFAULT_PRESETS]


def encode_presets(presets: list[CupPreset]) -> bytes:
    """Serialize presets to the persisted JSON blob."""
    return _preset_list_adapter.dump_json(presets)


def decode_presets(blob: Optional[bytes]) -> Optional[list[CupPreset]]:
    """
    Decode a persisted preset blob.
    
    Returns None when the blob is missing or undecodable so the caller
    can fall back to defaults.
    """
    if blob is None:
        return None
    try:
        return _preset_list_adapter.validate_json(blob)
    except ValidationError:
        return None
