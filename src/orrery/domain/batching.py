# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Worker-side batch computation.

Splits a positions request into contiguous chunks, propagates each record
through a Propagator and builds the reply messages. A record that fails
to propagate is written at the origin of the native frame so every chunk
stays index-aligned with the request. Shared by the sequential and the
threaded workers.
"""
import logging
from datetime import datetime, timedelta

import numpy as np

from orrery.domain.errors import PropagationError
from orrery.domain.messages import (
    PositionsRequest,
    PositionsUpdate,
    TrajectoryData,
    TrajectoryRequest,
)
from orrery.domain.tracked_objects import TrackedObjectRecord
from orrery.ports.propagation import Propagator

_log = logging.getLogger(__name__)

# Native-frame origin written for records that fail to propagate.
SENTINEL_POSITION_KM = (0.0, 0.0, 0.0)


def chunk_ranges(total: int, batch_size: int) -> list[tuple[int, int]]:
    """(start_index, count) pairs covering [0, total) in batch_size steps."""
    if batch_size <= 0:
        raise ValueError(f"batch_size must be > 0, got {batch_size}")
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")
    return [
        (start, min(batch_size, total - start))
        for start in range(0, total, batch_size)
    ]


def propagate_record(
    propagator: Propagator,
    record: TrackedObjectRecord,
    when: datetime,
) -> tuple[float, float, float]:
    """Position of one record at ``when``, or the sentinel on failure."""
    try:
        return propagator.propagate(record.line1, record.line2, when).position_km
    except PropagationError as e:
        _log.debug("Propagation failed for %s (%d): %s", record.name, record.object_id, e)
    except Exception as e:
        _log.debug(
            "Propagator raised %s for %s (%d): %s",
            type(e).__name__, record.name, record.object_id, e,
        )
    return SENTINEL_POSITION_KM


def propagate_chunk(
    propagator: Propagator,
    records,
    start_index: int,
    count: int,
    when: datetime,
) -> PositionsUpdate:
    """Propagate records[start_index:start_index + count] into one update."""
    positions = np.empty((count, 3), dtype=np.float64)
    for offset in range(count):
        positions[offset] = propagate_record(propagator, records[start_index + offset], when)
    return PositionsUpdate(start_index=start_index, count=count, positions=positions)


def iter_position_updates(propagator: Propagator, request: PositionsRequest):
    """Yield one PositionsUpdate per chunk of the request, in index order."""
    when = request.when
    for start, count in chunk_ranges(len(request.records), request.batch_size):
        yield propagate_chunk(propagator, request.records, start, count, when)


def sample_trajectory(propagator: Propagator, request: TrajectoryRequest) -> TrajectoryData:
    """
    Sample one orbital period of the requested record.

    ``sample_count`` instants evenly spaced over [start, start + period],
    both ends included. Samples that fail to propagate are left out; a
    record whose period cannot be determined yields an empty point list.
    """
    record = request.record

    def _reply(points) -> TrajectoryData:
        return TrajectoryData(
            index=request.index,
            points=points,
            slot=request.slot,
            generation=request.generation,
        )

    try:
        period_s = propagator.orbital_period_s(record.line1, record.line2)
    except Exception as e:
        _log.debug("No orbital period for %s (%d): %s", record.name, record.object_id, e)
        return _reply(np.empty((0, 3)))

    start = request.start_time
    points = []
    for offset_s in np.linspace(0.0, period_s, request.sample_count):
        try:
            when = start + timedelta(seconds=float(offset_s))
            points.append(propagator.propagate(record.line1, record.line2, when).position_km)
        except Exception as e:
            _log.debug("Skipping trajectory sample of %s at +%.0f s: %s", record.name, offset_s, e)
    return _reply(np.array(points, dtype=np.float64).reshape(-1, 3))
