"""
Replication Snapshot Model

A snapshot is the subset of tracker fields pushed to / received from the
paired device. Every field is optional: absent fields leave the receiver's
state untouched.

Wire shape (camelCase keys, matching the persisted key names):
    {"currentIntake": int, "dailyGoal": int,
     "cupPresets": [{"name": str, "volume": int}, ...]}

Preset ids are NOT transmitted; the receiver generates fresh ones.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from water_tracker.models.preset import CupPreset


class PresetPayload(BaseModel):
    """A preset as sent over the wire (no id)."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)
    
    name: str = Field(..., min_length=1)
    volume: int
    
    def to_preset(self) -> CupPreset:
        return CupPreset(name=self.name, volume=self.volume)


class SyncSnapshot(BaseModel):
    """Partial tracker state exchanged with the paired device."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    
    current_intake: Optional[int] = Field(default=None, alias="currentIntake")
    daily_goal: Optional[int] = Field(default=None, alias="dailyGoal")
    cup_presets: Optional[list[PresetPayload]] = Field(default=None, alias="cupPresets")
    
    @classmethod
    def from_state(
        cls,
        current_intake: int,
        daily_goal: int,
        presets: list[CupPreset],
    ) -> "SyncSnapshot":
        return cls(
            current_intake=current_intake,
            daily_goal=daily_goal,
            cup_presets=[PresetPayload(name=p.name, volume=p.volume) for p in presets],
        )
    
    @classmethod
    def from_message(cls, message: Any) -> "SyncSnapshot":
        """
        Build a snapshot from an inbound message, field by field.
        
        A field of the wrong type is treated as absent rather than failing
        the whole message. Malformed preset entries are skipped.
        """
        if not isinstance(message, dict):
            return cls()
        
        intake = message.get("currentIntake")
        goal = message.get("dailyGoal")
        raw_presets = message.get("cupPresets")
        
        presets = None
        if isinstance(raw_presets, list):
            presets = []
            for entry in raw_presets:
                if not isinstance(entry, dict):
                    continue
                name = entry.get("name")
                volume = entry.get("volume")
                # an empty name can't become a CupPreset
                if isinstance(name, str) and name.strip() and _is_int(volume):
                    presets.append(PresetPayload(name=name, volume=volume))
        
        return cls(
            current_intake=intake if _is_int(intake) else None,
            daily_goal=goal if _is_int(goal) else None,
            cup_presets=presets,
        )
    
    def to_message(self) -> dict[str, Any]:
        """Wire form; absent fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
    
    @property
    def is_empty(self) -> bool:
        return (
            self.current_intake is None
            and self.daily_goal is None
            and self.cup_presets is None
        )
    
    def to_presets(self) -> Optional[list[CupPreset]]:
        if self.cup_presets is None:
            return None
        return [payload.to_preset() for payload in self.cup_presets]


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid volume
    return isinstance(value, int) and not isinstance(value, bool)
