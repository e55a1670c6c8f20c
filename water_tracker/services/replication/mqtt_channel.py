"""
MQTT Replication Channel

DESIGN DECISION: Paired devices meet on an MQTT broker because:
1. Both ends only need an outbound connection
2. paho-mqtt runs its own network thread and reconnects by itself
3. Publish is naturally fire-and-forget

Both devices publish to and subscribe on the same pair topic. Every
message is wrapped in an envelope carrying the sender's device_id so
a device can ignore its own publications:

    {"sender": "<device_id>", "snapshot": {"currentIntake": ..., ...}}

Callbacks (connect, disconnect, message) run on paho's network thread.
"""

import json
from typing import Any, Optional

import paho.mqtt.client as mqtt
import structlog

from water_tracker.config import ReplicationSettings
from water_tracker.models.snapshot import SyncSnapshot
from water_tracker.services.replication.interface import (
    ReplicationChannelInterface,
    SessionUnavailableError,
    SnapshotCallback,
)


class MqttReplicationChannel(ReplicationChannelInterface):
    """
    Replication over an MQTT broker.
    
    The session counts as active only while the broker connection is up
    and the pair topic has been subscribed.
    """
    
    name = "mqtt"
    
    def __init__(
        self,
        settings: ReplicationSettings,
        client: Optional[Any] = None,
    ):
        self._settings = settings
        self._topic = settings.snapshot_topic
        self._callback: Optional[SnapshotCallback] = None
        self._active = False
        self._logger = structlog.get_logger(__name__)
        
        self._client = client or mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=f"water-tracker-{settings.device_id}",
        )
        if settings.username:
            self._client.username_pw_set(settings.username, settings.password)
        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.on_message = self._on_message
    
    @property
    def topic(self) -> str:
        return self._topic
    
    def activate(self) -> None:
        """
        Connect in the background.
        
        Returns immediately; the session becomes active once the broker
        accepts the connection. paho retries dropped connections.
        """
        try:
            self._client.reconnect_delay_set(min_delay=1, max_delay=30)
            self._client.connect_async(
                self._settings.broker_host,
                self._settings.broker_port,
                self._settings.keepalive,
            )
            self._client.loop_start()
        except (OSError, ValueError) as e:
            raise SessionUnavailableError(
                f"Cannot reach broker {self._settings.broker_host}:"
                f"{self._settings.broker_port}: {e}"
            ) from e
    
    def close(self) -> None:
        self._active = False
        self._client.disconnect()
        self._client.loop_stop()
    
    def is_session_active(self) -> bool:
        return self._active
    
    def send_snapshot(self, snapshot: SyncSnapshot) -> bool:
        if not self._active:
            return False
        
        payload = json.dumps({
            "sender": self._settings.device_id,
            "snapshot": snapshot.to_message(),
        })
        info = self._client.publish(self._topic, payload, qos=self._settings.qos)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._logger.debug("mqtt_publish_dropped", topic=self._topic, rc=info.rc)
            return False
        return True
    
    def on_snapshot_received(self, callback: SnapshotCallback) -> None:
        self._callback = callback
    
    # ==================== paho callbacks ====================
    
    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code != 0:
            self._logger.warning(
                "mqtt_connect_refused",
                broker=self._settings.broker_host,
                reason=str(reason_code),
            )
            self._active = False
            return
        # Subscribe on every (re)connect - subscriptions don't survive a clean session
        client.subscribe(self._topic, qos=self._settings.qos)
        self._active = True
        self._logger.info("mqtt_session_active", topic=self._topic)
    
    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties=None):
        self._active = False
        self._logger.info("mqtt_session_inactive", reason=str(reason_code))
    
    def _on_message(self, client, userdata, msg):
        try:
            envelope = json.loads(msg.payload)
        except (UnicodeDecodeError, json.JSONDecodeError):
            self._logger.warning("mqtt_message_undecodable", topic=msg.topic)
            return
        
        if not isinstance(envelope, dict):
            return
        if envelope.get("sender") == self._settings.device_id:
            return
        
        snapshot = SyncSnapshot.from_message(envelope.get("snapshot"))
        if snapshot.is_empty or self._callback is None:
            return
        self._callback(snapshot)
