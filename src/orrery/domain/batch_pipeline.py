# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Batch position pipeline.

Control-thread side of bulk satellite propagation: submits a positions
request for the whole record set and merges the chunked replies into the
position buffer. Chunks may arrive in any order and may be re-delivered;
each write covers exactly its own rows.
"""
import logging
from datetime import datetime

import numpy as np

from orrery.domain.config import DEFAULT_BATCH_SIZE, DEFAULT_SCENE_UNITS_PER_KM
from orrery.domain.epochs import as_utc, format_time_iso
from orrery.domain.frames import native_to_display
from orrery.domain.messages import PositionsRequest, PositionsUpdate
from orrery.domain.position_buffer import PositionBuffer
from orrery.ports.worker import PropagationWorker

_log = logging.getLogger(__name__)


class BatchPositionPipeline:
    """
    Requests batch propagation and applies replies to a PositionBuffer.

    Args:
        buffer: Destination buffer (display coordinates).
        worker: PropagationWorker receiving PositionsRequest messages.
        batch_size: Records per reply chunk.
        scene_units_per_km: Scene scale applied to propagator output.
    """

    def __init__(
        self,
        buffer: PositionBuffer,
        worker: PropagationWorker,
        batch_size: int = DEFAULT_BATCH_SIZE,
        scene_units_per_km: float = DEFAULT_SCENE_UNITS_PER_KM,
    ):
        if batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {batch_size}")
        self._buffer = buffer
        self._worker = worker
        self._batch_size = batch_size
        self._scene_units_per_km = scene_units_per_km
        self._expected_count = 0
        self._written = np.zeros(0, dtype=bool)
        self._load_reported = False
        self.last_request_time: datetime | None = None

    @property
    def buffer(self) -> PositionBuffer:
        return self._buffer

    @property
    def expected_count(self) -> int:
        """Number of records in the most recent accepted request."""
        return self._expected_count

    @property
    def initial_load_complete(self) -> bool:
        """True once every row of a request has been written at least once."""
        return self._load_reported

    @property
    def written_count(self) -> int:
        """Rows of the current request written so far."""
        return int(np.count_nonzero(self._written))

    def request_batch_update(self, records, when: datetime) -> bool:
        """
        Submit every record for propagation to ``when``.

        Returns:
            True if the worker accepted the request, False if there is
            nothing to propagate or the worker refused it.
        """
        records = tuple(records)
        if not records:
            _log.debug("No tracked objects to propagate")
            return False

        request = PositionsRequest(
            records=records,
            time_iso=format_time_iso(when),
            batch_size=self._batch_size,
        )
        if not self._worker.submit(request):
            return False
        _log.info("Requested positions for %d objects at %s", len(records), request.time_iso)
        self._expected_count = len(records)
        self._written = np.zeros(len(records), dtype=bool)
        self.last_request_time = as_utc(when)
        return True

    def apply_update(
        self,
        update: PositionsUpdate,
        parent_absolute: np.ndarray,
        scene_offset: np.ndarray,
    ) -> bool:
        """
        Write one reply chunk into the buffer.

        Positions are rotated to the ecliptic, scaled to scene units and
        placed relative to the parent body's display position.

        Returns:
            True if the chunk was written, False if it was dropped.
        """
        start, count = update.start_index, update.count
        if start < 0 or count < 0 or count != len(update.positions):
            _log.warning(
                "Dropping malformed chunk (start=%d, count=%d, rows=%d)",
                start, count, len(update.positions),
            )
            return False
        end = start + count
        if end > self._buffer.capacity:
            _log.warning(
                "Dropping chunk [%d, %d): exceeds buffer capacity %d",
                start, end, self._buffer.capacity,
            )
            return False

        display = native_to_display(
            update.positions, parent_absolute, scene_offset, self._scene_units_per_km,
        )
        self._buffer.write(start, display)
        self._buffer.advance(end)
        self._written[start:end] = True

        if not self._load_reported and self._expected_count > 0 and self._written.all():
            self._load_reported = True
            _log.info("Initial load complete: %d objects positioned", self._expected_count)
        return True
