# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for worker-side chunking, per-record failure handling and trajectory sampling."""
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from orrery.domain.batching import (
    SENTINEL_POSITION_KM,
    chunk_ranges,
    iter_position_updates,
    propagate_chunk,
    sample_trajectory,
)
from orrery.domain.errors import PropagationError
from orrery.domain.messages import PositionVelocity, PositionsRequest, TrajectoryRequest
from orrery.domain.selection import TrajectorySlot
from orrery.domain.tracked_objects import TrackedObjectRecord
from orrery.ports.propagation import Propagator

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class _FakePropagator:
    """Position encodes catalogue number and minutes since T0; 'BAD' lines fail."""

    def __init__(self, period_s: float = 5400.0, fail_after_s: float | None = None):
        self.period_s = period_s
        self.fail_after_s = fail_after_s

    def propagate(self, line1, line2, when):
        if "BAD" in line1:
            raise PropagationError("bad element set")
        elapsed = (when - T0).total_seconds()
        if self.fail_after_s is not None and elapsed > self.fail_after_s:
            raise PropagationError("decayed")
        object_id = int(line1.split()[1])
        return PositionVelocity((float(object_id), elapsed / 60.0, 7000.0), (0.0, 7.5, 0.0))

    def orbital_period_s(self, line1, line2):
        if "BAD" in line1:
            raise PropagationError("bad element set")
        return self.period_s


def _record(i: int, bad: bool = False) -> TrackedObjectRecord:
    line1 = f"1 {i} BAD" if bad else f"1 {i}"
    return TrackedObjectRecord(i, f"SAT-{i}", line1, f"2 {i}")


class TestChunkRanges:

    def test_exact_and_partial_chunks(self):
        assert chunk_ranges(750, 500) == [(0, 500), (500, 250)]

    def test_empty(self):
        assert chunk_ranges(0, 500) == []

    def test_covers_every_index_once(self):
        covered = [i for start, count in chunk_ranges(1234, 100) for i in range(start, start + count)]
        assert covered == list(range(1234))

    def test_rejects_nonpositive_batch(self):
        with pytest.raises(ValueError):
            chunk_ranges(10, 0)


class TestPropagateChunk:

    def test_fake_satisfies_port(self):
        assert isinstance(_FakePropagator(), Propagator)

    def test_chunk_rows_follow_record_order(self):
        records = [_record(i) for i in range(10)]
        update = propagate_chunk(_FakePropagator(), records, 4, 3, T0)
        assert update.start_index == 4
        assert update.count == 3
        np.testing.assert_array_equal(update.positions[:, 0], [4.0, 5.0, 6.0])

    def test_failed_record_written_as_sentinel(self):
        records = [_record(0), _record(1, bad=True), _record(2)]
        update = propagate_chunk(_FakePropagator(), records, 0, 3, T0)
        np.testing.assert_array_equal(update.positions[1], SENTINEL_POSITION_KM)
        assert update.positions[2, 0] == 2.0

    def test_iter_updates_splits_request(self):
        records = tuple(_record(i) for i in range(1200))
        request = PositionsRequest(records, "2024-01-01T00:10:00Z", batch_size=500)
        updates = list(iter_position_updates(_FakePropagator(), request))
        assert [(u.start_index, u.count) for u in updates] == [(0, 500), (500, 500), (1000, 200)]
        assert updates[0].positions[0, 1] == pytest.approx(10.0)


class TestSampleTrajectory:

    def _request(self, record, samples=100):
        return TrajectoryRequest(
            index=3, record=record, start_time_iso="2024-01-01T00:00:00Z",
            sample_count=samples, slot=TrajectorySlot.HIGHLIGHTED, generation=9,
        )

    def test_samples_one_period_inclusive(self):
        reply = sample_trajectory(_FakePropagator(period_s=6000.0), self._request(_record(3)))
        assert reply.points.shape == (100, 3)
        assert reply.points[0, 1] == pytest.approx(0.0)
        assert reply.points[-1, 1] == pytest.approx(100.0)

    def test_reply_echoes_request_identity(self):
        reply = sample_trajectory(_FakePropagator(), self._request(_record(3)))
        assert reply.index == 3
        assert reply.slot is TrajectorySlot.HIGHLIGHTED
        assert reply.generation == 9

    def test_failed_samples_skipped(self):
        fake = _FakePropagator(period_s=6000.0, fail_after_s=3000.0)
        reply = sample_trajectory(fake, self._request(_record(3), samples=11))
        assert len(reply.points) == 6

    def test_period_failure_gives_empty_reply(self):
        reply = sample_trajectory(_FakePropagator(), self._request(_record(3, bad=True)))
        assert reply.points.shape == (0, 3)
        assert reply.generation == 9

    def test_start_time_respected(self):
        request = TrajectoryRequest(
            index=0, record=_record(1),
            start_time_iso=(T0 + timedelta(hours=1)).isoformat(), sample_count=2,
        )
        reply = sample_trajectory(_FakePropagator(period_s=600.0), request)
        np.testing.assert_allclose(reply.points[:, 1], [60.0, 70.0])


class _RaisingPropagator(_FakePropagator):
    """Fails with an arbitrary exception rather than PropagationError."""

    def propagate(self, line1, line2, when):
        if line1 == "1 1":
            raise ZeroDivisionError("float division by zero")
        return super().propagate(line1, line2, when)

    def orbital_period_s(self, line1, line2):
        if line1 == "1 2":
            raise KeyError("no_kozai")
        return super().orbital_period_s(line1, line2)


class TestUnexpectedPropagatorErrors:

    def test_record_written_as_sentinel(self):
        records = [_record(0), _record(1), _record(2)]
        update = propagate_chunk(_RaisingPropagator(), records, 0, 3, T0)
        assert update.count == 3
        np.testing.assert_array_equal(update.positions[1], SENTINEL_POSITION_KM)
        np.testing.assert_array_equal(update.positions[[0, 2], 0], [0.0, 2.0])

    def test_trajectory_samples_skipped(self):
        request = TrajectoryRequest(index=1, record=_record(1), start_time_iso="2024-01-01T00:00:00Z")
        reply = sample_trajectory(_RaisingPropagator(), request)
        assert reply.points.shape == (0, 3)

    def test_period_error_gives_empty_reply(self):
        request = TrajectoryRequest(
            index=2, record=_record(2), start_time_iso="2024-01-01T00:00:00Z",
            slot=TrajectorySlot.SELECTED, generation=3,
        )
        reply = sample_trajectory(_RaisingPropagator(), request)
        assert reply.points.shape == (0, 3)
        assert reply.generation == 3
