# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Fixed-capacity position buffer.

One row per tracked object in display coordinates. ``valid_count`` is the
high-water mark of written rows: it only grows (until reset), so a reader
never sees a row that has not been written.
"""
import numpy as np


class PositionBuffer:
    """(capacity, 3) array of display positions plus a valid-row count."""

    def __init__(self, capacity: int, dtype: str | np.dtype = "float32"):
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {capacity}")
        self._data = np.zeros((capacity, 3), dtype=np.dtype(dtype))
        self._valid_count = 0

    @property
    def capacity(self) -> int:
        return self._data.shape[0]

    @property
    def valid_count(self) -> int:
        return self._valid_count

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def write(self, start_index: int, rows) -> None:
        """Overwrite whole rows starting at start_index.

        Raises:
            IndexError: If the rows do not fit inside the capacity.
        """
        rows = np.asarray(rows, dtype=np.float64).reshape(-1, 3)
        end = start_index + len(rows)
        if start_index < 0 or end > self.capacity:
            raise IndexError(
                f"rows [{start_index}, {end}) outside capacity {self.capacity}"
            )
        self._data[start_index:end] = rows

    def advance(self, end_index: int) -> None:
        """Raise valid_count to end_index; never lowers it."""
        if end_index > self.capacity:
            raise IndexError(f"end_index {end_index} exceeds capacity {self.capacity}")
        self._valid_count = max(self._valid_count, end_index)

    def position(self, index: int) -> np.ndarray:
        if not 0 <= index < self._valid_count:
            raise IndexError(f"index {index} outside valid range [0, {self._valid_count})")
        return self._data[index].astype(np.float64)

    def valid_positions(self) -> np.ndarray:
        """Copy of the readable rows."""
        return self._data[:self._valid_count].copy()

    def shift(self, delta) -> None:
        """Translate every readable row by delta (floating-origin change)."""
        if self._valid_count:
            self._data[:self._valid_count] += np.asarray(delta, dtype=np.float64).astype(self._data.dtype)

    def reset(self) -> None:
        self._valid_count = 0
