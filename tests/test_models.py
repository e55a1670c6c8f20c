"""
Tests for Water Tracker models

Test strategy:
1. Unit tests for individual components (models, parsers, stores)
2. Tracker tests against in-memory and SQLite stores, loopback channels
3. No real broker in tests (paho client is mocked)
"""

import json
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from water_tracker.models.events import (
    Severity,
    TrackerEvent,
    TrackerEventBuilder,
    TrackerEventType,
)
from water_tracker.models.preset import (
    CupPreset,
    decode_presets,
    default_presets,
    encode_presets,
)
from water_tracker.models.snapshot import PresetPayload, SyncSnapshot


class TestCupPreset:
    """Tests for the CupPreset model."""
    
    def test_preset_creation_generates_id(self):
        """Test that each preset gets its own id."""
        first = CupPreset(name="Mug", volume=300)
        second = CupPreset(name="Mug", volume=300)
        assert isinstance(first.id, UUID)
        assert first.id != second.id
    
    def test_preset_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        preset = CupPreset(name="  Mug  ", volume=300)
        assert preset.name == "Mug"
    
    def test_preset_rejects_empty_name(self):
        """Test that an empty name is rejected."""
        with pytest.raises(ValueError):
            CupPreset(name="", volume=300)
    
    def test_preset_label(self):
        """Test display label."""
        assert CupPreset(name="Large", volume=500).label == "Large (500 mL)"
    
    def test_default_presets(self):
        """Test the three seed presets."""
        presets = default_presets()
        assert [(p.name, p.volume) for p in presets] == [
            ("Small", 200),
            ("Medium", 350),
            ("Large", 500),
        ]
        assert len({p.id for p in presets}) == 3


class TestPresetBlob:
    """Tests for encoding/decoding the persisted preset list."""
    
    def test_encoded_blob_shape(self):
        """Test the blob is a JSON array of {id, name, volume}."""
        preset = CupPreset(name="Bottle", volume=750)
        records = json.loads(encode_presets([preset]))
        assert records == [{"id": str(preset.id), "name": "Bottle", "volume": 750}]
    
    def test_decode_preserves_ids(self):
        """Test decoding keeps ids, names, volumes and order."""
        presets = default_presets()
        assert decode_presets(encode_presets(presets)) == presets
    
    def test_decode_uppercase_uuid(self):
        """Test blobs written with uppercase UUID strings still decode."""
        blob = b'[{"id": "E621E1F8-C36C-495A-93FC-0C247A3E6E5F", "name": "Mug", "volume": 300}]'
        presets = decode_presets(blob)
        assert presets[0].id == UUID("e621e1f8-c36c-495a-93fc-0c247a3e6e5f")
        assert presets[0].name == "Mug"
    
    def test_decode_missing_blob(self):
        """Test that a missing blob decodes to None."""
        assert decode_presets(None) is None
    
    @pytest.mark.parametrize("blob", [
        b"not json",
        b'{"name": "Mug"}',
        b'[{"name": "Mug"}]',
        b'[{"id": "nope", "name": "Mug", "volume": 300}]',
    ])
    def test_decode_garbage(self, blob):
        """Test undecodable blobs yield None."""
        assert decode_presets(blob) is None


class TestSyncSnapshot:
    """Tests for the replication snapshot model."""
    
    def test_from_state_to_message(self):
        """Test wire form uses camelCase keys and omits preset ids."""
        snapshot = SyncSnapshot.from_state(
            current_intake=850,
            daily_goal=2000,
            presets=[CupPreset(name="Small", volume=200)],
        )
        assert snapshot.to_message() == {
            "currentIntake": 850,
            "dailyGoal": 2000,
            "cupPresets": [{"name": "Small", "volume": 200}],
        }
    
    def test_partial_message(self):
        """Test absent fields stay absent."""
        snapshot = SyncSnapshot.from_message({"currentIntake": 1200})
        assert snapshot.current_intake == 1200
        assert snapshot.daily_goal is None
        assert snapshot.cup_presets is None
        assert snapshot.to_message() == {"currentIntake": 1200}
    
    def test_wrong_types_are_dropped_per_field(self):
        """Test a bad field doesn't spoil the rest of the message."""
        snapshot = SyncSnapshot.from_message({
            "currentIntake": "1200",
            "dailyGoal": 2500,
            "cupPresets": "lots",
        })
        assert snapshot.current_intake is None
        assert snapshot.daily_goal == 2500
        assert snapshot.cup_presets is None
    
    def test_booleans_are_not_integers(self):
        """Test True is not accepted as an intake."""
        assert SyncSnapshot.from_message({"currentIntake": True}).current_intake is None
    
    def test_malformed_presets_are_skipped(self):
        """Test preset entries missing name or volume are skipped."""
        snapshot = SyncSnapshot.from_message({
            "cupPresets": [
                {"name": "Mug", "volume": 300},
                {"name": "Broken"},
                {"volume": 100},
                "junk",
                {"name": "", "volume": 50},
            ],
        })
        assert snapshot.cup_presets == [PresetPayload(name="Mug", volume=300)]
    
    @pytest.mark.parametrize("name", ["", "   "])
    def test_payload_rejects_blank_name(self, name):
        """Test a wire preset needs a name, like CupPreset."""
        with pytest.raises(ValidationError):
            PresetPayload(name=name, volume=50)
    
    def test_empty_preset_list_is_present(self):
        """Test an empty list still counts as a field."""
        snapshot = SyncSnapshot.from_message({"cupPresets": []})
        assert snapshot.cup_presets == []
        assert snapshot.to_presets() == []
        assert not snapshot.is_empty
    
    def test_non_dict_message(self):
        """Test non-mapping messages give an empty snapshot."""
        assert SyncSnapshot.from_message(["currentIntake", 5]).is_empty
    
    def test_to_presets_generates_fresh_ids(self):
        """Test received presets get new ids."""
        original = CupPreset(name="Mug", volume=300)
        snapshot = SyncSnapshot.from_state(0, 2000, [original])
        received = snapshot.to_presets()
        assert received[0].name == "Mug"
        assert received[0].id != original.id


class TestTrackerEvents:
    """Tests for tracker event models."""
    
    def test_event_defaults(self):
        """Test TrackerEvent defaults."""
        event = TrackerEvent(
            event_type=TrackerEventType.DAILY_RESET,
            description="reset",
        )
        assert event.severity == Severity.INFO
        assert event.is_user_action is False
    
    def test_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = TrackerEventBuilder.water_added(requested=1500, before=850, after=2000)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "water_added"
        assert log_dict["details"]["clamped"] is True
        assert log_dict["is_user_action"] is True
    
    def test_persistence_failed_is_error(self):
        """Test persistence failures are logged as errors."""
        event = TrackerEventBuilder.persistence_failed(key="dailyGoal", error_message="disk full")
        assert event.severity == Severity.ERROR
        assert event.error_message == "disk full"
    
    def test_preset_rejected_is_debug(self):
        """Test rejected preset input is only debug noise."""
        event = TrackerEventBuilder.preset_rejected(name="", volume_text="abc")
        assert event.severity == Severity.DEBUG
    
    def test_preset_added_accepts_any_name_length(self):
        """Test a long preset name goes into details intact."""
        event = TrackerEventBuilder.preset_added(preset_id=uuid4(), name="x" * 600, volume=250)
        assert event.description == "Preset added"
        assert event.details["name"] == "x" * 600
    
    def test_subscriber_failed_is_error(self):
        """Test subscriber failures are logged as errors."""
        event = TrackerEventBuilder.subscriber_failed(subscriber="redraw", error_message="boom")
        assert event.event_type == TrackerEventType.SUBSCRIBER_FAILED
        assert event.severity == Severity.ERROR
        assert event.details == {"subscriber": "redraw"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
