# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
SGP4 propagator adapter.

Implements the Propagator port with the sgp4 library. TLE mean elements
are SGP4-specific, not Keplerian; the library gives TEME state vectors.
sgp4 is imported lazily so the rest of the package works without it.

Each call parses its own Satrec, so one instance can be shared by all
threads of the propagation worker.
"""
import logging
import math
from datetime import datetime

from orrery.domain.epochs import as_utc
from orrery.domain.errors import PropagationError
from orrery.domain.messages import PositionVelocity

_log = logging.getLogger(__name__)

_TLE_LINE_LENGTH = 69


def _require_sgp4():
    """Import sgp4 lazily; raise clear error if not installed."""
    try:
        from sgp4.api import Satrec, jday
    except ImportError:
        raise ImportError(
            "sgp4 is required for satellite propagation. "
            "Install with: pip install orrery"
        ) from None
    return Satrec, jday


def _datetime_to_jd(jday_fn, dt: datetime) -> tuple[float, float]:
    dt = as_utc(dt)
    return jday_fn(dt.year, dt.month, dt.day, dt.hour, dt.minute,
                   dt.second + dt.microsecond / 1e6)


def _check_lines(line1, line2) -> tuple[str, str]:
    if not isinstance(line1, str) or not isinstance(line2, str):
        raise PropagationError("TLE lines must be strings")
    line1, line2 = line1.rstrip(), line2.rstrip()
    if not line1.startswith("1 ") or not line2.startswith("2 "):
        raise PropagationError("TLE lines must start with '1 ' and '2 '")
    if len(line1) < _TLE_LINE_LENGTH or len(line2) < _TLE_LINE_LENGTH:
        raise PropagationError(
            f"TLE lines must be {_TLE_LINE_LENGTH} columns, "
            f"got {len(line1)} and {len(line2)}"
        )
    return line1, line2


class Sgp4Propagator:
    """Propagator backed by sgp4.api.Satrec."""

    def __init__(self):
        self._Satrec, self._jday = _require_sgp4()

    def _satrec(self, line1: str, line2: str):
        line1, line2 = _check_lines(line1, line2)
        try:
            return self._Satrec.twoline2rv(line1, line2)
        except (ValueError, IndexError) as e:
            raise PropagationError(f"Unparsable element set: {e}") from e

    def propagate(self, line1: str, line2: str, when: datetime) -> PositionVelocity:
        """
        TEME state at ``when``.

        Raises:
            PropagationError: Malformed lines, a non-zero SGP4 error code
                (e.g. decayed orbit) or a non-finite result.
        """
        sat = self._satrec(line1, line2)
        jd, fr = _datetime_to_jd(self._jday, when)
        error_code, position_km, velocity_km_s = sat.sgp4(jd, fr)
        if error_code != 0:
            raise PropagationError(f"SGP4 propagation error {error_code}")
        if not all(math.isfinite(c) for c in (*position_km, *velocity_km_s)):
            raise PropagationError("SGP4 returned a non-finite state")
        return PositionVelocity(
            position_km=(float(position_km[0]), float(position_km[1]), float(position_km[2])),
            velocity_km_s=(float(velocity_km_s[0]), float(velocity_km_s[1]), float(velocity_km_s[2])),
        )

    def orbital_period_s(self, line1: str, line2: str) -> float:
        """Period from the Kozai mean motion (rad/min) of the element set."""
        sat = self._satrec(line1, line2)
        n_rad_per_min = sat.no_kozai
        if not n_rad_per_min > 0:
            raise PropagationError(f"Mean motion must be > 0, got {n_rad_per_min}")
        return 2.0 * math.pi / n_rad_per_min * 60.0
