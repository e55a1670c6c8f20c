"""
Tests for replication channels

The MQTT channel is exercised against a mocked paho client; no broker
is contacted.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import paho.mqtt.client as mqtt
import pytest

from water_tracker.config import ReplicationSettings
from water_tracker.models.snapshot import SyncSnapshot
from water_tracker.services.replication import (
    LoopbackReplicationChannel,
    MqttReplicationChannel,
    NullReplicationChannel,
    SessionUnavailableError,
)


@pytest.fixture
def settings():
    return ReplicationSettings(
        enabled=True,
        broker_host="broker.local",
        pair_id="kitchen",
        device_id="phone",
        username="user",
        password="secret",
    )


@pytest.fixture
def client():
    client = MagicMock()
    client.publish.return_value = SimpleNamespace(rc=mqtt.MQTT_ERR_SUCCESS)
    return client


@pytest.fixture
def channel(settings, client):
    return MqttReplicationChannel(settings, client=client)


def message(payload) -> SimpleNamespace:
    return SimpleNamespace(topic="water-tracker/kitchen/snapshot", payload=payload)


class TestMqttReplicationChannel:
    """Tests for the paho-mqtt channel."""
    
    def test_topic(self, channel):
        """Test both devices share the pair topic."""
        assert channel.topic == "water-tracker/kitchen/snapshot"
    
    def test_credentials_applied(self, client, channel):
        """Test username/password are passed to the client."""
        client.username_pw_set.assert_called_once_with("user", "secret")
    
    def test_activate_connects_in_background(self, client, channel):
        """Test activation uses connect_async and starts the loop."""
        channel.activate()
        client.connect_async.assert_called_once_with("broker.local", 1883, 60)
        client.loop_start.assert_called_once()
        assert channel.is_session_active() is False
    
    def test_activate_failure(self, client, channel):
        """Test an unusable broker address raises SessionUnavailableError."""
        client.connect_async.side_effect = ValueError("Invalid host.")
        with pytest.raises(SessionUnavailableError):
            channel.activate()
    
    def test_connect_subscribes_and_activates(self, client, channel):
        """Test a successful connect subscribes to the pair topic."""
        channel._on_connect(client, None, {}, 0, None)
        client.subscribe.assert_called_once_with("water-tracker/kitchen/snapshot", qos=1)
        assert channel.is_session_active() is True
    
    def test_refused_connect(self, client, channel):
        """Test a refused connect leaves the session inactive."""
        channel._on_connect(client, None, {}, 5, None)
        assert channel.is_session_active() is False
        client.subscribe.assert_not_called()
    
    def test_disconnect_deactivates(self, client, channel):
        """Test losing the broker ends the session."""
        channel._on_connect(client, None, {}, 0, None)
        channel._on_disconnect(client, None, {}, 7, None)
        assert channel.is_session_active() is False
    
    def test_send_without_session(self, client, channel):
        """Test sends are dropped while inactive."""
        assert channel.send_snapshot(SyncSnapshot(current_intake=250)) is False
        client.publish.assert_not_called()
    
    def test_send_wraps_snapshot(self, client, channel):
        """Test published payload carries the sender id."""
        channel._on_connect(client, None, {}, 0, None)
        assert channel.send_snapshot(SyncSnapshot(current_intake=250, daily_goal=2000)) is True
        topic, payload = client.publish.call_args.args
        assert topic == "water-tracker/kitchen/snapshot"
        assert json.loads(payload) == {
            "sender": "phone",
            "snapshot": {"currentIntake": 250, "dailyGoal": 2000},
        }
    
    def test_send_refused_by_transport(self, client, channel):
        """Test a non-success publish rc reports a drop."""
        client.publish.return_value = SimpleNamespace(rc=mqtt.MQTT_ERR_NO_CONN)
        channel._on_connect(client, None, {}, 0, None)
        assert channel.send_snapshot(SyncSnapshot(current_intake=250)) is False
    
    def test_receive_from_peer(self, channel):
        """Test a peer's message reaches the callback."""
        received = []
        channel.on_snapshot_received(received.append)
        channel._on_message(None, None, message(json.dumps({
            "sender": "watch",
            "snapshot": {"currentIntake": 1200},
        }).encode()))
        assert received == [SyncSnapshot(current_intake=1200)]
    
    def test_own_messages_are_ignored(self, channel):
        """Test a device doesn't apply its own publications."""
        received = []
        channel.on_snapshot_received(received.append)
        channel._on_message(None, None, message(json.dumps({
            "sender": "phone",
            "snapshot": {"currentIntake": 1200},
        }).encode()))
        assert received == []
    
    @pytest.mark.parametrize("payload", [
        b"\xff\xfe",
        b"not json",
        b"[1, 2, 3]",
        json.dumps({"sender": "watch", "snapshot": {"currentIntake": "lots"}}).encode(),
    ])
    def test_garbage_is_ignored(self, channel, payload):
        """Test undecodable or empty messages never reach the callback."""
        received = []
        channel.on_snapshot_received(received.append)
        channel._on_message(None, None, message(payload))
        assert received == []
    
    def test_close(self, client, channel):
        """Test close stops the network loop."""
        channel._on_connect(client, None, {}, 0, None)
        channel.close()
        client.disconnect.assert_called_once()
        client.loop_stop.assert_called_once()
        assert channel.is_session_active() is False


class TestLocalChannels:
    """Tests for loopback and null channels."""
    
    def test_loopback_requires_both_ends(self):
        """Test the session is active only once both ends activate."""
        first, second = LoopbackReplicationChannel.pair()
        first.activate()
        assert first.is_session_active() is False
        second.activate()
        assert first.is_session_active() is True
        second.close()
        assert first.is_session_active() is False
    
    def test_loopback_delivers_wire_form(self):
        """Test delivery goes through the wire message."""
        first, second = LoopbackReplicationChannel.pair()
        first.activate()
        second.activate()
        received = []
        second.on_snapshot_received(received.append)
        assert first.send_snapshot(SyncSnapshot(daily_goal=2500)) is True
        assert received == [SyncSnapshot(daily_goal=2500)]
        assert first.sent == [{"dailyGoal": 2500}]
    
    def test_null_channel(self):
        """Test the null channel never sends."""
        channel = NullReplicationChannel()
        channel.activate()
        assert channel.is_session_active() is False
        assert channel.send_snapshot(SyncSnapshot(current_intake=1)) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
