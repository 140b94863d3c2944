# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Messages exchanged with the propagation worker.

Requests carry only immutable records and strings; replies carry freshly
built, read-only position arrays (km, TEME). Each type converts to and from
the plain-dict wire shape used for logging and JSON export.
"""
from dataclasses import dataclass
from datetime import datetime

import numpy as np

from orrery.domain.config import DEFAULT_BATCH_SIZE, DEFAULT_TRAJECTORY_SAMPLES
from orrery.domain.epochs import parse_time_iso
from orrery.domain.selection import TrajectorySlot
from orrery.domain.tracked_objects import TrackedObjectRecord


def _frozen_points(points) -> np.ndarray:
    arr = np.array(points, dtype=np.float64).reshape(-1, 3)
    arr.setflags(write=False)
    return arr


def _points_to_dicts(points: np.ndarray) -> list[dict]:
    return [{"x": float(p[0]), "y": float(p[1]), "z": float(p[2])} for p in points]


def _points_from_dicts(items: list[dict]) -> np.ndarray:
    return _frozen_points([(p["x"], p["y"], p["z"]) for p in items])


@dataclass(frozen=True)
class PositionVelocity:
    """Propagator output in the TEME frame."""
    position_km: tuple[float, float, float]
    velocity_km_s: tuple[float, float, float]


@dataclass(frozen=True)
class PositionsRequest:
    """Propagate every record to one instant."""
    records: tuple[TrackedObjectRecord, ...]
    time_iso: str
    batch_size: int = DEFAULT_BATCH_SIZE

    @property
    def when(self) -> datetime:
        return parse_time_iso(self.time_iso)

    def to_dict(self) -> dict:
        return {
            "kind": "positions",
            "records": [r.to_dict() for r in self.records],
            "timeIso": self.time_iso,
            "batchSize": self.batch_size,
        }


@dataclass(frozen=True, eq=False)
class PositionsUpdate:
    """Positions for records [start_index, start_index + count)."""
    start_index: int
    count: int
    positions: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "positions", _frozen_points(self.positions))

    def to_dict(self) -> dict:
        return {
            "kind": "positionsUpdate",
            "startIndex": self.start_index,
            "count": self.count,
            "positions": _points_to_dicts(self.positions),
        }


@dataclass(frozen=True)
class TrajectoryRequest:
    """Sample one orbital period of a record starting at start_time_iso."""
    index: int
    record: TrackedObjectRecord
    start_time_iso: str
    sample_count: int = DEFAULT_TRAJECTORY_SAMPLES
    slot: TrajectorySlot = TrajectorySlot.SELECTED
    generation: int = 0

    @property
    def start_time(self) -> datetime:
        return parse_time_iso(self.start_time_iso)

    def to_dict(self) -> dict:
        return {
            "kind": "trajectory",
            "index": self.index,
            "record": self.record.to_dict(),
            "startTimeIso": self.start_time_iso,
            "sampleCount": self.sample_count,
            "slot": self.slot.value,
            "generation": self.generation,
        }


@dataclass(frozen=True, eq=False)
class TrajectoryData:
    """Sampled trajectory points for the request with the same slot/index/generation."""
    index: int
    points: np.ndarray
    slot: TrajectorySlot = TrajectorySlot.SELECTED
    generation: int = 0

    def __post_init__(self):
        object.__setattr__(self, "points", _frozen_points(self.points))

    def to_dict(self) -> dict:
        return {
            "kind": "trajectoryData",
            "index": self.index,
            "points": _points_to_dicts(self.points),
            "slot": self.slot.value,
            "generation": self.generation,
        }


def message_from_dict(data: dict):
    """Rebuild a message from its wire dict.

    Raises:
        ValueError: If the kind is unknown.
        KeyError: If a required field is missing.
    """
    kind = data.get("kind")
    if kind == "positions":
        return PositionsRequest(
            records=tuple(TrackedObjectRecord.from_dict(r) for r in data["records"]),
            time_iso=data["timeIso"],
            batch_size=int(data.get("batchSize", DEFAULT_BATCH_SIZE)),
        )
    if kind == "positionsUpdate":
        return PositionsUpdate(
            start_index=int(data["startIndex"]),
            count=int(data["count"]),
            positions=_points_from_dicts(data["positions"]),
        )
    if kind == "trajectory":
        return TrajectoryRequest(
            index=int(data["index"]),
            record=TrackedObjectRecord.from_dict(data["record"]),
            start_time_iso=data["startTimeIso"],
            sample_count=int(data.get("sampleCount", DEFAULT_TRAJECTORY_SAMPLES)),
            slot=TrajectorySlot(data.get("slot", TrajectorySlot.SELECTED.value)),
            generation=int(data.get("generation", 0)),
        )
    if kind == "trajectoryData":
        return TrajectoryData(
            index=int(data["index"]),
            points=_points_from_dicts(data["points"]),
            slot=TrajectorySlot(data.get("slot", TrajectorySlot.SELECTED.value)),
            generation=int(data.get("generation", 0)),
        )
    raise ValueError(f"Unknown message kind: {kind!r}")
