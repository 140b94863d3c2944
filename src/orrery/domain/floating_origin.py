# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Floating origin.

Solar-system distances exceed what single-precision display coordinates
can hold near a small body. The scene is therefore kept translated so the
focused body sits at the origin: display = absolute + offset, with
offset = -absolute(focus). When the focus changes every scene-held
quantity is moved by the same delta in one pass.
"""
import logging
from typing import Callable, Protocol, runtime_checkable

import numpy as np

from orrery.domain.bodies import Body, resolve_body

_log = logging.getLogger(__name__)


@runtime_checkable
class Shiftable(Protocol):
    """Anything that holds display coordinates."""

    def shift(self, delta: np.ndarray) -> None:
        ...


class FloatingOrigin:
    """
    Owns the scene offset and the focused body.

    Args:
        absolute_position: Callable giving a body's pre-offset scene
            position (float64 3-vector).
        focus: Initial focus body or name.
    """

    def __init__(
        self,
        absolute_position: Callable[[Body], np.ndarray],
        focus: Body | str = Body.EARTH,
    ):
        self._absolute_position = absolute_position
        self._focus = resolve_body(focus)
        self._offset = -np.asarray(absolute_position(self._focus), dtype=np.float64)
        self._shiftables: list[Shiftable] = []

    @property
    def focus(self) -> Body:
        return self._focus

    @property
    def offset(self) -> np.ndarray:
        return self._offset.copy()

    def register(self, shiftable: Shiftable) -> None:
        if not isinstance(shiftable, Shiftable):
            raise TypeError(f"{type(shiftable).__name__} has no shift(delta) method")
        self._shiftables.append(shiftable)

    def to_display(self, absolute) -> np.ndarray:
        return np.asarray(absolute, dtype=np.float64) + self._offset

    def set_focus(self, body: Body | str) -> bool:
        """
        Recenter the scene on a body.

        Returns:
            False if the body is already the focus (nothing changes),
            True after the offset changed and all registered quantities
            were shifted.

        Raises:
            UnknownBodyError: If a body name is not in the catalogue.
        """
        body = resolve_body(body)
        if body is self._focus:
            return False

        new_offset = -np.asarray(self._absolute_position(body), dtype=np.float64)
        delta = new_offset - self._offset
        self._offset = new_offset
        self._focus = body
        for shiftable in self._shiftables:
            shiftable.shift(delta)
        _log.debug("Focus moved to %s (delta %s)", body.value, delta)
        return True

    def refocus(self) -> np.ndarray:
        """Re-anchor on the current focus after its absolute position moved.

        Returns the applied delta.
        """
        new_offset = -np.asarray(self._absolute_position(self._focus), dtype=np.float64)
        delta = new_offset - self._offset
        self._offset = new_offset
        for shiftable in self._shiftables:
            shiftable.shift(delta)
        return delta
