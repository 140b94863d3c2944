# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the floating origin and the scene-held quantities it shifts."""
import numpy as np
import pytest

from orrery.domain.bodies import Body
from orrery.domain.errors import UnknownBodyError
from orrery.domain.floating_origin import FloatingOrigin, Shiftable
from orrery.domain.position_buffer import PositionBuffer
from orrery.domain.scene import CelestialDisplay, MarkerSet

ABSOLUTE = {
    Body.SUN: np.zeros(3),
    Body.EARTH: np.array([23_000.0, 1_000.0, 0.5]),
    Body.MOON: np.array([23_060.0, 1_010.0, 3.0]),
    Body.MARS: np.array([-30_000.0, 12_000.0, -400.0]),
}


def _absolute(body: Body) -> np.ndarray:
    return ABSOLUTE[body]


class _CountingShiftable:
    def __init__(self):
        self.deltas = []

    def shift(self, delta):
        self.deltas.append(np.array(delta))


class TestFloatingOrigin:

    def test_initial_focus_at_origin(self):
        origin = FloatingOrigin(_absolute, focus=Body.EARTH)
        np.testing.assert_allclose(origin.to_display(ABSOLUTE[Body.EARTH]), np.zeros(3))

    def test_set_focus_moves_body_to_origin(self):
        origin = FloatingOrigin(_absolute)
        assert origin.set_focus(Body.MARS) is True
        assert origin.focus is Body.MARS
        np.testing.assert_allclose(origin.to_display(ABSOLUTE[Body.MARS]), np.zeros(3), atol=1e-9)

    def test_marker_shifted_by_offset_difference(self):
        """After A then B: marker display = previous display + (offset_B - offset_A)."""
        origin = FloatingOrigin(_absolute, focus=Body.EARTH)
        markers = MarkerSet()
        origin.register(markers)

        origin.set_focus(Body.MOON)
        offset_a = origin.offset
        static = np.array([500.0, -200.0, 7.0])
        markers.add("probe", origin.to_display(static))
        before = markers.position("probe")

        origin.set_focus(Body.MARS)
        offset_b = origin.offset
        np.testing.assert_allclose(origin.to_display(ABSOLUTE[Body.MARS]), np.zeros(3), atol=1e-9)
        np.testing.assert_allclose(markers.position("probe"), before + (offset_b - offset_a))
        np.testing.assert_allclose(markers.position("probe"), origin.to_display(static))

    def test_same_focus_is_noop(self):
        origin = FloatingOrigin(_absolute, focus=Body.EARTH)
        counter = _CountingShiftable()
        origin.register(counter)
        offset = origin.offset
        assert origin.set_focus("earth") is False
        assert counter.deltas == []
        np.testing.assert_array_equal(origin.offset, offset)

    def test_every_registered_quantity_shifted_once(self):
        origin = FloatingOrigin(_absolute)
        counters = [_CountingShiftable() for _ in range(3)]
        for c in counters:
            origin.register(c)
        origin.set_focus(Body.SUN)
        for c in counters:
            assert len(c.deltas) == 1
            np.testing.assert_allclose(c.deltas[0], ABSOLUTE[Body.EARTH])

    def test_unknown_body(self):
        origin = FloatingOrigin(_absolute)
        with pytest.raises(UnknownBodyError):
            origin.set_focus("krypton")
        assert origin.focus is Body.EARTH

    def test_register_requires_shift(self):
        origin = FloatingOrigin(_absolute)
        with pytest.raises(TypeError):
            origin.register(object())

    def test_offset_is_copy(self):
        origin = FloatingOrigin(_absolute)
        origin.offset[0] = 99.0
        assert origin.offset[0] == -ABSOLUTE[Body.EARTH][0]

    def test_refocus_follows_moving_body(self):
        positions = dict(ABSOLUTE)
        origin = FloatingOrigin(lambda body: positions[body])
        counter = _CountingShiftable()
        origin.register(counter)
        positions[Body.EARTH] = positions[Body.EARTH] + np.array([10.0, 0.0, 0.0])
        delta = origin.refocus()
        np.testing.assert_allclose(delta, [-10.0, 0.0, 0.0])
        np.testing.assert_allclose(origin.to_display(positions[Body.EARTH]), np.zeros(3))
        assert len(counter.deltas) == 1


class TestSceneQuantities:

    def test_scene_holders_are_shiftable(self):
        assert isinstance(CelestialDisplay(), Shiftable)
        assert isinstance(MarkerSet(), Shiftable)
        assert isinstance(PositionBuffer(1), Shiftable)

    def test_celestial_display_follows_focus(self):
        origin = FloatingOrigin(_absolute)
        display = CelestialDisplay()
        display.update(ABSOLUTE, origin.offset)
        origin.register(display)
        origin.set_focus(Body.MOON)
        np.testing.assert_allclose(display.position(Body.MOON), np.zeros(3), atol=1e-9)
        np.testing.assert_allclose(
            display.position(Body.SUN), origin.to_display(ABSOLUTE[Body.SUN]),
        )

    def test_celestial_display_missing_body(self):
        with pytest.raises(LookupError):
            CelestialDisplay().position(Body.PLUTO)

    def test_buffer_rows_follow_focus(self):
        origin = FloatingOrigin(_absolute)
        buffer = PositionBuffer(4, dtype="float64")
        buffer.write(0, [[1.0, 1.0, 1.0]])
        buffer.advance(1)
        origin.register(buffer)
        origin.set_focus(Body.MARS)
        expected = np.array([1.0, 1.0, 1.0]) + (-ABSOLUTE[Body.MARS] + ABSOLUTE[Body.EARTH])
        np.testing.assert_allclose(buffer.position(0), expected)

    def test_marker_set_basics(self):
        markers = MarkerSet()
        markers.add("a", [1.0, 2.0, 3.0])
        assert len(markers) == 1
        assert markers.names() == ["a"]
        markers.remove("a")
        markers.remove("a")
        assert len(markers) == 0
