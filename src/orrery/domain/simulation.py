# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Simulation coordinator.

Owns all mutable session state on the control thread: simulation time,
body positions, the floating origin, the satellite position buffer and
the trajectory slots. Worker replies are routed here once per tick.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import numpy as np

from orrery.domain.batch_pipeline import BatchPositionPipeline
from orrery.domain.bodies import Body, resolve_body
from orrery.domain.config import SimulationConfig, validate_config
from orrery.domain.epochs import as_utc, format_time_iso
from orrery.domain.ephemeris import solar_system_positions_km
from orrery.domain.floating_origin import FloatingOrigin
from orrery.domain.messages import PositionsUpdate, TrajectoryData
from orrery.domain.position_buffer import PositionBuffer
from orrery.domain.scene import CelestialDisplay, MarkerSet
from orrery.domain.selection import SelectionState, TrajectorySlot
from orrery.domain.tracked_objects import TrackedObjectRecord, limit_records
from orrery.domain.trajectory import TrajectoryRequestManager, TrajectorySink
from orrery.ports.worker import PropagationWorker

_log = logging.getLogger(__name__)

_MIN_QUERY_LENGTH = 2


@dataclass
class SimulationState:
    current_time: datetime
    is_realtime: bool = False
    selection: SelectionState = field(default_factory=SelectionState)
    initial_load_complete: bool = False
    last_realtime_update: datetime | None = None


class Simulation:
    """
    One interactive session.

    Args:
        records: Tracked objects; truncated to ``config.max_objects``.
        worker: PropagationWorker used for positions and trajectories.
        config: Session configuration (defaults if omitted).
        start_time: Initial simulation time (now, UTC, if omitted).
        trajectory_sink: Optional display sink for trajectory polylines.
    """

    def __init__(
        self,
        records,
        worker: PropagationWorker,
        config: SimulationConfig | None = None,
        start_time: datetime | None = None,
        trajectory_sink: TrajectorySink | None = None,
    ):
        self._config = validate_config(config or SimulationConfig())
        self._worker = worker
        self.state = SimulationState(
            current_time=as_utc(start_time or datetime.now(timezone.utc)),
        )
        self.records: tuple[TrackedObjectRecord, ...] = limit_records(
            records, self._config.max_objects,
        )
        self._absolute = self._compute_absolute(self.state.current_time)

        self.origin = FloatingOrigin(self.absolute_position, focus=self._config.initial_focus)
        self.celestial = CelestialDisplay()
        self.celestial.update(self._absolute, self.origin.offset)
        self.buffer = PositionBuffer(self._config.max_objects, dtype=self._config.position_dtype)
        self.pipeline = BatchPositionPipeline(
            self.buffer,
            worker,
            batch_size=self._config.batch_size,
            scene_units_per_km=self._config.scene_units_per_km,
        )
        self.trajectories = TrajectoryRequestManager(
            worker,
            self.state.selection,
            sample_count=self._config.trajectory_sample_count,
            scene_units_per_km=self._config.scene_units_per_km,
            sink=trajectory_sink,
        )
        self.markers = MarkerSet()
        # Trajectories are shifted with Earth by _follow_earth, not by the origin.
        for shiftable in (self.celestial, self.buffer, self.markers):
            self.origin.register(shiftable)

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def focus(self) -> Body:
        return self.origin.focus

    # ── Positions ─────────────────────────────────────────────────────

    def _compute_absolute(self, when: datetime) -> dict[Body, np.ndarray]:
        scale = self._config.scene_units_per_km
        return {
            body: position * scale
            for body, position in solar_system_positions_km(when).items()
        }

    def absolute_position(self, body: Body | str) -> np.ndarray:
        """Pre-offset scene position of a body at the current time."""
        return self._absolute[resolve_body(body)].copy()

    def display_position(self, body: Body | str) -> np.ndarray:
        return self.celestial.position(body)

    def _earth_display(self) -> np.ndarray:
        return self._absolute[Body.EARTH] + self.origin.offset

    def _follow_earth(self, earth_before: np.ndarray) -> None:
        """Move trajectory polylines, which are drawn relative to Earth, with it."""
        delta = self._earth_display() - earth_before
        if np.any(delta):
            self.trajectories.shift(delta)

    # ── Time control ──────────────────────────────────────────────────

    def start(self) -> bool:
        """Request the first batch of positions at the current time."""
        return self.set_time(self.state.current_time)

    def set_time(self, when: datetime) -> bool:
        """
        Move the simulation to ``when``.

        Body positions are recomputed at once; satellite positions are
        requested from the worker and arrive through process_replies().

        Returns:
            True if the positions request was accepted.
        """
        when = as_utc(when)
        self.state.current_time = when
        earth_before = self._earth_display()
        self._absolute = self._compute_absolute(when)
        self.origin.refocus()
        self._follow_earth(earth_before)
        self.celestial.update(self._absolute, self.origin.offset)
        return self.pipeline.request_batch_update(self.records, when)

    def step_time(self, direction: int = 1) -> bool:
        """Manual step of ``time_step_s`` forwards (1) or backwards (-1)."""
        self.state.is_realtime = False
        step = timedelta(seconds=direction * self._config.time_step_s)
        return self.set_time(self.state.current_time + step)

    def set_realtime(self, enabled: bool, now: datetime | None = None) -> None:
        self.state.is_realtime = enabled
        if enabled:
            now = as_utc(now or datetime.now(timezone.utc))
            self.state.last_realtime_update = now
            self.set_time(now)

    def tick(self, now: datetime | None = None) -> int:
        """
        One control-loop iteration.

        In real-time mode the time follows the wall clock, re-requesting
        positions at most once per ``realtime_update_interval_s``. Worker
        replies are always drained.

        Returns:
            Number of replies applied.
        """
        if self.state.is_realtime:
            now = as_utc(now or datetime.now(timezone.utc))
            last = self.state.last_realtime_update
            interval = self._config.realtime_update_interval_s
            if last is None or (now - last).total_seconds() >= interval:
                self.state.last_realtime_update = now
                self.set_time(now)
        return self.process_replies()

    def process_replies(self) -> int:
        """Drain the worker and route each reply. Returns the number applied."""
        applied = 0
        earth = self._absolute[Body.EARTH]
        for reply in self._worker.drain():
            offset = self.origin.offset
            if isinstance(reply, PositionsUpdate):
                ok = self.pipeline.apply_update(reply, earth, offset)
            elif isinstance(reply, TrajectoryData):
                ok = self.trajectories.handle_reply(reply, earth, offset)
            else:
                _log.warning("Ignoring unexpected worker reply: %s", type(reply).__name__)
                continue
            applied += int(ok)

        if not self.state.initial_load_complete and self.pipeline.initial_load_complete:
            self.state.initial_load_complete = True
        return applied

    # ── Focus, selection and markers ──────────────────────────────────

    def set_focus(self, body: Body | str) -> bool:
        earth_before = self._earth_display()
        changed = self.origin.set_focus(body)
        if changed:
            self._follow_earth(earth_before)
        return changed

    def _record(self, index: int) -> TrackedObjectRecord:
        if not 0 <= index < len(self.records):
            raise IndexError(f"object index {index} outside [0, {len(self.records)})")
        return self.records[index]

    def hover(self, index: int | None) -> bool:
        """Hover an object (None when the pointer leaves all objects)."""
        if index is None:
            self.trajectories.clear(TrajectorySlot.HIGHLIGHTED)
            return False
        return self.trajectories.hover(index, self._record(index), self.state.current_time)

    def select(self, index: int | None) -> bool:
        if index is None:
            self.trajectories.clear(TrajectorySlot.SELECTED)
            return False
        return self.trajectories.select(index, self._record(index), self.state.current_time)

    def clear_selection(self) -> None:
        self.trajectories.clear_all()

    def add_marker(self, name: str, absolute_position) -> None:
        """Place a named marker at an absolute (pre-offset) scene position."""
        self.markers.add(name, self.origin.to_display(absolute_position))

    # ── Queries ───────────────────────────────────────────────────────

    def find_objects(self, query: str, limit: int = 10) -> list[tuple[int, TrackedObjectRecord]]:
        """
        Search by case-insensitive substring of the name or catalogue number.

        Queries shorter than two characters match nothing.
        """
        query = query.strip()
        if len(query) < _MIN_QUERY_LENGTH:
            return []
        needle = query.lower()
        matches: list[tuple[int, TrackedObjectRecord]] = []
        for index, record in enumerate(self.records):
            if needle in record.name.lower() or needle in str(record.object_id):
                matches.append((index, record))
                if len(matches) >= limit:
                    break
        return matches

    def object_info(self, index: int) -> dict:
        record = self._record(index)
        info = {
            "index": index,
            "id": record.object_id,
            "name": record.name,
            "position": None,
        }
        if index < self.buffer.valid_count:
            info["position"] = [float(c) for c in self.buffer.position(index)]
        return info

    def snapshot(self) -> dict:
        """Plain-dict view of the scene for export."""
        return {
            "time": format_time_iso(self.state.current_time),
            "focus": self.focus.value,
            "offset": [float(c) for c in self.origin.offset],
            "bodies": {
                body.value: [float(c) for c in position]
                for body, position in self.celestial.as_dict().items()
            },
            "objects": {
                "total": len(self.records),
                "valid": self.buffer.valid_count,
                "positions": self.buffer.valid_positions().astype(float).tolist(),
            },
            "markers": {
                name: [float(c) for c in self.markers.position(name)]
                for name in self.markers.names()
            },
            "trajectories": {
                slot.value: points.tolist()
                for slot, points in self.trajectories.visible().items()
            },
        }
