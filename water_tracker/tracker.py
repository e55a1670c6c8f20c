"""
Tracker State

The single in-process owner of hydration data: daily goal, current
intake and the cup preset list.

DESIGN DECISION: Every mutating operation ends with one commit step:
1. Persist the keys that operation touched (once per key, never per field write)
2. Push a full snapshot to the paired device
3. Notify subscribers

Inbound snapshots from the paired device are persisted but not pushed
back, otherwise two devices would bounce the same snapshot forever.

Failures in persistence or replication are logged and swallowed.
There is no user-visible error state anywhere in the tracker.
"""

from typing import Callable, Iterable, Optional, Union

from pydantic import ValidationError

from water_tracker.audit import ActivityLogger
from water_tracker.dispatch import MainContextDispatcher
from water_tracker.models.events import TrackerEventBuilder
from water_tracker.models.preset import (
    CupPreset,
    decode_presets,
    default_presets,
    encode_presets,
)
from water_tracker.models.snapshot import SyncSnapshot
from water_tracker.services.replication import (
    NullReplicationChannel,
    ReplicationChannelInterface,
    ReplicationError,
)
from water_tracker.services.storage import (
    CUP_PRESETS_KEY,
    CURRENT_INTAKE_KEY,
    DAILY_GOAL_KEY,
    KeyValueStoreInterface,
    StorageError,
)
from water_tracker.validation import parse_volume_text


DEFAULT_DAILY_GOAL = 2000

# Field names passed to subscribers
DAILY_GOAL = "daily_goal"
CURRENT_INTAKE = "current_intake"
PRESETS = "presets"
GOAL_REACHED = "goal_reached"

_FIELD_KEYS = {
    DAILY_GOAL: DAILY_GOAL_KEY,
    CURRENT_INTAKE: CURRENT_INTAKE_KEY,
    PRESETS: CUP_PRESETS_KEY,
}

Subscriber = Callable[[frozenset[str]], None]


class TrackerState:
    """
    Process-wide hydration state.
    
    Create one at startup and share it by reference. All operations are
    meant to run on one owning context; snapshots arriving from the
    paired device are queued and applied by process_pending().
    
    Flow per user action:
    1. Mutate (add_water, reset_daily, set_daily_goal, add_preset, remove_preset)
    2. Persist touched keys
    3. Replicate snapshot (best-effort)
    4. Notify subscribers with the set of changed fields
    """
    
    def __init__(
        self,
        store: KeyValueStoreInterface,
        channel: Optional[ReplicationChannelInterface] = None,
        dispatcher: Optional[MainContextDispatcher] = None,
        activity_logger: Optional[ActivityLogger] = None,
        default_daily_goal: int = DEFAULT_DAILY_GOAL,
    ):
        self._store = store
        self._channel = channel or NullReplicationChannel()
        self._dispatcher = dispatcher or MainContextDispatcher()
        self._activity = activity_logger or ActivityLogger()
        self._default_daily_goal = default_daily_goal
        self._subscribers: list[Subscriber] = []
        
        self._daily_goal = self._load_daily_goal()
        self._current_intake = self._load_current_intake()
        self._presets = self._load_presets()
        self._goal_reached = self._compute_goal_reached()
        
        self._activity.log(TrackerEventBuilder.state_loaded(
            daily_goal=self._daily_goal,
            current_intake=self._current_intake,
            preset_count=len(self._presets),
        ))
        
        self._activate_replication()
    
    # ==================== Observable fields ====================
    
    @property
    def daily_goal(self) -> int:
        return self._daily_goal
    
    @property
    def current_intake(self) -> int:
        return self._current_intake
    
    @property
    def presets(self) -> tuple[CupPreset, ...]:
        return tuple(self._presets)
    
    @property
    def goal_reached(self) -> bool:
        """True once intake hits the goal; cleared when it falls back below."""
        return self._goal_reached
    
    @property
    def progress(self) -> float:
        """Fraction of the goal reached, within 0..1 (for the progress ring)."""
        if self._daily_goal <= 0:
            return 0.0
        return max(0.0, min(1.0, self._current_intake / self._daily_goal))
    
    def snapshot(self) -> SyncSnapshot:
        return SyncSnapshot.from_state(
            current_intake=self._current_intake,
            daily_goal=self._daily_goal,
            presets=self._presets,
        )
    
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change listener.
        
        The callback receives the names of the fields that changed.
        Returns a function that unsubscribes it.
        """
        self._subscribers.append(callback)
        
        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        
        return unsubscribe
    
    # ==================== User operations ====================
    
    def add_water(self, volume: int) -> int:
        """
        Log a drink.
        
        Intake is capped at the daily goal; the excess is discarded.
        Intake never goes below 0, even for a negative volume.
        
        Returns the new intake.
        """
        before = self._current_intake
        self._current_intake = max(0, min(before + volume, self._daily_goal))
        
        self._activity.log(TrackerEventBuilder.water_added(
            requested=volume,
            before=before,
            after=self._current_intake,
        ))
        self._commit({CURRENT_INTAKE})
        return self._current_intake
    
    def reset_daily(self) -> None:
        """Start the day over at 0 mL."""
        previous = self._current_intake
        self._current_intake = 0
        
        self._activity.log(TrackerEventBuilder.daily_reset(previous_intake=previous))
        self._commit({CURRENT_INTAKE})
    
    def set_daily_goal(self, goal: int) -> None:
        """
        Replace the daily goal.
        
        The value is taken as-is; current intake is not re-clamped.
        """
        old_goal = self._daily_goal
        self._daily_goal = int(goal)
        
        self._activity.log(TrackerEventBuilder.goal_changed(old_goal=old_goal, new_goal=self._daily_goal))
        self._commit({DAILY_GOAL})
    
    def add_preset(self, name: str, volume_text: Union[str, int]) -> Optional[CupPreset]:
        """
        Append a new preset from the settings form.
        
        Does nothing (returns None) when the name is empty or the volume
        isn't an integer.
        """
        volume = parse_volume_text(volume_text)
        if not name or volume is None:
            self._activity.log(TrackerEventBuilder.preset_rejected(name=name or "", volume_text=str(volume_text)))
            return None
        
        try:
            preset = CupPreset(name=name, volume=volume)
        except ValidationError:
            # whitespace-only name
            self._activity.log(TrackerEventBuilder.preset_rejected(name=name, volume_text=str(volume_text)))
            return None
        
        self._presets.append(preset)
        self._commit({PRESETS})
        self._activity.log(TrackerEventBuilder.preset_added(
            preset_id=preset.id,
            name=preset.name,
            volume=preset.volume,
        ))
        return preset
    
    def remove_preset(self, indices: Union[int, Iterable[int]]) -> list[CupPreset]:
        """
        Remove presets by position.
        
        Accepts one index or any collection of indices. Out-of-range
        indices are ignored; remaining presets keep their order.
        
        Returns the removed presets.
        """
        if isinstance(indices, int):
            indices = [indices]
        targets = sorted({i for i in indices if 0 <= i < len(self._presets)})
        if not targets:
            return []
        
        removed = [self._presets[i] for i in targets]
        doomed = set(targets)
        self._presets = [p for i, p in enumerate(self._presets) if i not in doomed]
        
        self._activity.log(TrackerEventBuilder.presets_removed(
            indices=targets,
            names=[p.name for p in removed],
        ))
        self._commit({PRESETS})
        return removed
    
    # ==================== Replication ====================
    
    def receive_remote_snapshot(self, snapshot: SyncSnapshot) -> frozenset[str]:
        """
        Apply a snapshot from the paired device.
        
        Last writer wins: every field present overwrites the local one,
        with no clamping and no comparison. Absent fields are untouched.
        Must run on the owning context - use process_pending() for
        snapshots delivered by a channel.
        
        Returns the names of the fields that were overwritten.
        """
        # Build presets before touching state so a bad payload changes nothing
        presets = snapshot.to_presets()
        
        changed = set()
        if snapshot.current_intake is not None:
            self._current_intake = snapshot.current_intake
            changed.add(CURRENT_INTAKE)
        if snapshot.daily_goal is not None:
            self._daily_goal = snapshot.daily_goal
            changed.add(DAILY_GOAL)
        if presets is not None:
            self._presets = presets
            changed.add(PRESETS)
        
        if not changed:
            return frozenset()
        
        self._activity.log(TrackerEventBuilder.snapshot_received(fields=sorted(changed)))
        return self._commit(changed, replicate=False)
    
    def process_pending(self) -> int:
        """
        Apply snapshots queued by the replication channel.
        
        Call from the owning context (e.g. at the top of each UI render).
        Returns the number of snapshots applied.
        """
        return self._dispatcher.drain()
    
    def _handle_inbound(self, snapshot: SyncSnapshot) -> None:
        # May run on the channel's thread; defer to the owner
        self._dispatcher.post(lambda: self.receive_remote_snapshot(snapshot))
    
    def _activate_replication(self) -> None:
        self._channel.on_snapshot_received(self._handle_inbound)
        try:
            self._channel.activate()
        except (ReplicationError, OSError) as e:
            self._activity.log(TrackerEventBuilder.replication_unavailable(
                channel=self._channel.name,
                error_message=str(e),
            ))
            return
        self._activity.log(TrackerEventBuilder.replication_activated(channel=self._channel.name))
    
    def _replicate(self) -> None:
        if not self._channel.is_session_active():
            self._activity.log(TrackerEventBuilder.snapshot_dropped(reason="no active session"))
            return
        
        snapshot = self.snapshot()
        try:
            sent = self._channel.send_snapshot(snapshot)
        except (ReplicationError, OSError) as e:
            self._activity.log(TrackerEventBuilder.snapshot_dropped(reason=str(e)))
            return
        
        if sent:
            self._activity.log(TrackerEventBuilder.snapshot_sent(fields=sorted(snapshot.to_message())))
        else:
            self._activity.log(TrackerEventBuilder.snapshot_dropped(reason="transport refused"))
    
    # ==================== Persistence ====================
    
    def _commit(self, changed: set[str], replicate: bool = True) -> frozenset[str]:
        for field in sorted(changed):
            self._persist(field)
        
        if self._update_goal_reached():
            changed = changed | {GOAL_REACHED}
        
        if replicate:
            self._replicate()
        
        changed = frozenset(changed)
        for callback in list(self._subscribers):
            try:
                callback(changed)
            except Exception as e:
                self._activity.log(TrackerEventBuilder.subscriber_failed(
                    subscriber=getattr(callback, "__qualname__", repr(callback)),
                    error_message=str(e),
                ))
        return changed
    
    def _persist(self, field: str) -> None:
        key = _FIELD_KEYS[field]
        try:
            if field == PRESETS:
                self._store.save_blob(key, encode_presets(self._presets))
            elif field == DAILY_GOAL:
                self._store.save_int(key, self._daily_goal)
            else:
                self._store.save_int(key, self._current_intake)
        except StorageError as e:
            self._activity.log(TrackerEventBuilder.persistence_failed(key=key, error_message=str(e)))
    
    def _load_int(self, key: str) -> Optional[int]:
        try:
            return self._store.load_int(key)
        except StorageError as e:
            self._activity.log(TrackerEventBuilder.defaults_substituted(key=key, reason=str(e)))
            return None
    
    def _load_daily_goal(self) -> int:
        goal = self._load_int(DAILY_GOAL_KEY)
        # 0 means "never set"
        return goal if goal else self._default_daily_goal
    
    def _load_current_intake(self) -> int:
        intake = self._load_int(CURRENT_INTAKE_KEY)
        return intake if intake is not None else 0
    
    def _load_presets(self) -> list[CupPreset]:
        try:
            blob = self._store.load_blob(CUP_PRESETS_KEY)
        except StorageError as e:
            self._activity.log(TrackerEventBuilder.defaults_substituted(key=CUP_PRESETS_KEY, reason=str(e)))
            return default_presets()
        
        if blob is None:
            return default_presets()
        
        presets = decode_presets(blob)
        if presets is None:
            self._activity.log(TrackerEventBuilder.defaults_substituted(
                key=CUP_PRESETS_KEY,
                reason="stored presets could not be decoded",
            ))
            return default_presets()
        return presets
    
    # ==================== Goal flag ====================
    
    def _compute_goal_reached(self) -> bool:
        return self._current_intake > 0 and self._current_intake >= self._daily_goal
    
    def _update_goal_reached(self) -> bool:
        """Recompute the flag; True if it flipped."""
        reached = self._compute_goal_reached()
        if reached == self._goal_reached:
            return False
        self._goal_reached = reached
        if reached:
            self._activity.log(TrackerEventBuilder.goal_reached(
                current_intake=self._current_intake,
                daily_goal=self._daily_goal,
            ))
        return True
