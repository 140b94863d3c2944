# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Trajectory request manager.

Requests sampled orbits for the hovered and the selected object and
accepts a reply only if it still describes the live selection. Replies
for an index (or generation) the user has moved away from are discarded
without touching what is on screen.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol, runtime_checkable

import numpy as np

from orrery.domain.config import DEFAULT_SCENE_UNITS_PER_KM, DEFAULT_TRAJECTORY_SAMPLES
from orrery.domain.epochs import format_time_iso
from orrery.domain.frames import native_to_display
from orrery.domain.messages import TrajectoryData, TrajectoryRequest
from orrery.domain.selection import SelectionState, TrajectorySlot
from orrery.domain.tracked_objects import TrackedObjectRecord
from orrery.ports.worker import PropagationWorker

_log = logging.getLogger(__name__)


class SlotState(Enum):
    IDLE = "idle"
    REQUESTED = "requested"
    FULFILLED = "fulfilled"
    STALE = "stale"


@runtime_checkable
class TrajectorySink(Protocol):
    """Receives polyline geometry for display."""

    def show(self, slot: TrajectorySlot, points: np.ndarray) -> None:
        ...

    def release(self, slot: TrajectorySlot) -> None:
        ...


@dataclass
class _SlotTrack:
    state: SlotState = SlotState.IDLE
    polyline: np.ndarray | None = None
    discarded: int = 0


class TrajectoryRequestManager:
    """
    Per-slot trajectory lifecycle.

    Args:
        worker: PropagationWorker receiving TrajectoryRequest messages.
        selection: Live selection state, shared with the coordinator.
        sample_count: Points per requested trajectory.
        scene_units_per_km: Scene scale applied to propagator output.
        sink: Optional display sink notified on show/release.
    """

    def __init__(
        self,
        worker: PropagationWorker,
        selection: SelectionState,
        sample_count: int = DEFAULT_TRAJECTORY_SAMPLES,
        scene_units_per_km: float = DEFAULT_SCENE_UNITS_PER_KM,
        sink: TrajectorySink | None = None,
    ):
        self._worker = worker
        self._selection = selection
        self._sample_count = sample_count
        self._scene_units_per_km = scene_units_per_km
        self._sink = sink
        self._tracks = {slot: _SlotTrack() for slot in TrajectorySlot}

    def state(self, slot: TrajectorySlot) -> SlotState:
        return self._tracks[slot].state

    def polyline(self, slot: TrajectorySlot) -> np.ndarray | None:
        polyline = self._tracks[slot].polyline
        return None if polyline is None else polyline.copy()

    def discarded(self, slot: TrajectorySlot) -> int:
        return self._tracks[slot].discarded

    def hover(self, index: int, record: TrackedObjectRecord, when: datetime) -> bool:
        return self.request(TrajectorySlot.HIGHLIGHTED, index, record, when)

    def select(self, index: int, record: TrackedObjectRecord, when: datetime) -> bool:
        return self.request(TrajectorySlot.SELECTED, index, record, when)

    def request(
        self,
        slot: TrajectorySlot,
        index: int,
        record: TrackedObjectRecord,
        when: datetime,
    ) -> bool:
        """
        Ask the worker for the trajectory of ``index`` in ``slot``.

        Returns:
            True if a request was submitted. False when the slot already
            tracks this index, or when the worker refused the request
            (the slot is then IDLE).
        """
        track = self._tracks[slot]
        if (
            self._selection.index_of(slot) == index
            and track.state in (SlotState.REQUESTED, SlotState.FULFILLED)
        ):
            return False

        generation = self._selection.begin(slot, index)
        request = TrajectoryRequest(
            index=index,
            record=record,
            start_time_iso=format_time_iso(when),
            sample_count=self._sample_count,
            slot=slot,
            generation=generation,
        )
        if not self._worker.submit(request):
            self._release(slot)
            track.state = SlotState.IDLE
            return False
        track.state = SlotState.REQUESTED
        return True

    def handle_reply(
        self,
        reply: TrajectoryData,
        parent_absolute: np.ndarray,
        scene_offset: np.ndarray,
    ) -> bool:
        """
        Apply a trajectory reply if it matches the live selection.

        Returns:
            True if the reply replaced the slot's polyline, False if it was
            discarded as stale.
        """
        slot = reply.slot
        track = self._tracks[slot]
        if not self._selection.matches(slot, reply.index, reply.generation):
            track.discarded += 1
            if track.state is SlotState.IDLE:
                track.state = SlotState.STALE
            _log.debug(
                "Discarding stale trajectory for index %d (%s, generation %d)",
                reply.index, slot.value, reply.generation,
            )
            return False

        self._release(slot)
        track.state = SlotState.FULFILLED
        if len(reply.points) == 0:
            return True
        track.polyline = native_to_display(
            reply.points, parent_absolute, scene_offset, self._scene_units_per_km,
        )
        if self._sink is not None:
            self._sink.show(slot, track.polyline.copy())
        return True

    def clear(self, slot: TrajectorySlot) -> None:
        """Drop the slot's trajectory; late replies for it become stale."""
        self._release(slot)
        self._selection.clear(slot)
        self._tracks[slot].state = SlotState.IDLE

    def clear_all(self) -> None:
        for slot in TrajectorySlot:
            self.clear(slot)

    def shift(self, delta) -> None:
        delta = np.asarray(delta, dtype=np.float64)
        for slot, track in self._tracks.items():
            if track.polyline is None:
                continue
            track.polyline = track.polyline + delta
            if self._sink is not None:
                self._sink.release(slot)
                self._sink.show(slot, track.polyline.copy())

    def visible(self) -> dict[TrajectorySlot, np.ndarray]:
        return {
            slot: track.polyline.copy()
            for slot, track in self._tracks.items()
            if track.polyline is not None
        }

    def _release(self, slot: TrajectorySlot) -> None:
        track = self._tracks[slot]
        if track.polyline is None:
            return
        track.polyline = None
        if self._sink is not None:
            self._sink.release(slot)
