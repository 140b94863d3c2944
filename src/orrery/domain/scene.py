# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Scene-held display positions: celestial bodies and named markers."""
import numpy as np

from orrery.domain.bodies import Body, resolve_body


class CelestialDisplay:
    """Display positions of the catalogue bodies (float64)."""

    def __init__(self):
        self._positions: dict[Body, np.ndarray] = {}

    def update(self, absolute: dict[Body, np.ndarray], offset: np.ndarray) -> None:
        offset = np.asarray(offset, dtype=np.float64)
        self._positions = {
            body: np.asarray(position, dtype=np.float64) + offset
            for body, position in absolute.items()
        }

    def position(self, body: Body | str) -> np.ndarray:
        body = resolve_body(body)
        try:
            return self._positions[body].copy()
        except KeyError:
            raise LookupError(f"No display position for {body.value} yet") from None

    def as_dict(self) -> dict[Body, np.ndarray]:
        return {body: position.copy() for body, position in self._positions.items()}

    def shift(self, delta) -> None:
        delta = np.asarray(delta, dtype=np.float64)
        for body in self._positions:
            self._positions[body] = self._positions[body] + delta


class MarkerSet:
    """Named static points kept in display coordinates."""

    def __init__(self):
        self._markers: dict[str, np.ndarray] = {}

    def add(self, name: str, display_position) -> None:
        self._markers[name] = np.asarray(display_position, dtype=np.float64).reshape(3).copy()

    def remove(self, name: str) -> None:
        self._markers.pop(name, None)

    def position(self, name: str) -> np.ndarray:
        return self._markers[name].copy()

    def names(self) -> list[str]:
        return list(self._markers)

    def __len__(self) -> int:
        return len(self._markers)

    def shift(self, delta) -> None:
        delta = np.asarray(delta, dtype=np.float64)
        for name in self._markers:
            self._markers[name] = self._markers[name] + delta
