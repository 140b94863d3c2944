# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbital mechanics functions.

Kepler's equation, anomaly conversions and the perifocal-to-ecliptic
rotation used by the ephemeris engine. Pure math on floats and numpy
arrays; distances in km, times in seconds.
"""
import logging
import math
from dataclasses import dataclass

import numpy as np

_log = logging.getLogger(__name__)

_TWO_PI = 2.0 * math.pi

KEPLER_TOLERANCE = 1e-8
KEPLER_MAX_ITERATIONS = 100


@dataclass(frozen=True)
class _OrbitalConstants:
    """Astronomical constants in km/s units (IAU 2009 / DE430 values)."""
    AU_KM: float = 149_597_870.0             # km, astronomical unit
    GM_SUN: float = 1.32712440018e11         # km³/s²
    GM_EARTH: float = 3.986004418e5          # km³/s²
    GM_MOON: float = 4.9028e3                # km³/s²
    R_EARTH_KM: float = 6371.0               # km, mean radius
    OBLIQUITY_J2000_DEG: float = 23.4392911  # deg, mean obliquity of the ecliptic
    SECONDS_PER_DAY: float = 86_400.0
    SECONDS_PER_JULIAN_CENTURY: float = 36_525.0 * 86_400.0


OrbitalConstants: _OrbitalConstants = _OrbitalConstants()


def solve_kepler(
    mean_anomaly_rad: float,
    eccentricity: float,
    tol: float = KEPLER_TOLERANCE,
    max_iter: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """
    Solve Kepler's equation M = E - e·sin(E) for the eccentric anomaly.

    Newton-Raphson seeded with E0 = M. The iterate is kept inside the
    bracket [M, M + e] (after reducing M to [0, π] by symmetry), where the
    equation is convex, so the iteration converges for every e < 1
    including near-parabolic orbits.

    Args:
        mean_anomaly_rad: Mean anomaly (radians), any real value.
        eccentricity: Eccentricity in [0, 1).
        tol: Stop when the Newton step is smaller than this (radians).
        max_iter: Iteration cap. On exhaustion the best estimate is returned.

    Returns:
        Eccentric anomaly (radians), on the same revolution as the input.

    Raises:
        ValueError: If eccentricity is outside [0, 1).
    """
    e = eccentricity
    if not 0.0 <= e < 1.0:
        raise ValueError(f"eccentricity must be in [0, 1), got {e}")

    # Reduce to m in [0, π] and solve there.
    wrapped = math.fmod(mean_anomaly_rad, _TWO_PI)
    if wrapped > math.pi:
        wrapped -= _TWO_PI
    elif wrapped < -math.pi:
        wrapped += _TWO_PI
    revolutions = mean_anomaly_rad - wrapped
    sign = -1.0 if wrapped < 0.0 else 1.0
    m = abs(wrapped)

    upper = min(m + e, math.pi)
    ecc_anomaly = m
    for _ in range(max_iter):
        f = ecc_anomaly - e * math.sin(ecc_anomaly) - m
        f_prime = 1.0 - e * math.cos(ecc_anomaly)
        candidate = ecc_anomaly - f / f_prime
        candidate = min(max(candidate, m), upper)
        step = candidate - ecc_anomaly
        ecc_anomaly = candidate
        if abs(step) < tol:
            break
    else:
        _log.debug(
            "Kepler solver hit %d iterations (M=%.6f, e=%.6f)",
            max_iter, mean_anomaly_rad, e,
        )

    return revolutions + sign * ecc_anomaly


def true_anomaly_from_eccentric(eccentric_anomaly_rad: float, eccentricity: float) -> float:
    """True anomaly from eccentric anomaly (half-angle atan2 form)."""
    e = eccentricity
    half = eccentric_anomaly_rad / 2.0
    return 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(half),
        math.sqrt(1.0 - e) * math.cos(half),
    )


def mean_motion(semi_major_axis_km: float, gm_km3_s2: float) -> float:
    """
    Mean motion n = sqrt(GM / a³).

    Returns:
        Mean motion in rad/s.

    Raises:
        ValueError: If semi-major axis or GM is not positive.
    """
    if semi_major_axis_km <= 0:
        raise ValueError(f"semi_major_axis_km must be > 0, got {semi_major_axis_km}")
    if gm_km3_s2 <= 0:
        raise ValueError(f"gm_km3_s2 must be > 0, got {gm_km3_s2}")
    return math.sqrt(gm_km3_s2 / semi_major_axis_km ** 3)


def orbital_period_s(semi_major_axis_km: float, gm_km3_s2: float) -> float:
    """Orbital period in seconds, 2π / n."""
    return _TWO_PI / mean_motion(semi_major_axis_km, gm_km3_s2)


def perifocal_rotation(
    arg_periapsis_rad: float,
    inclination_rad: float,
    node_rad: float,
) -> np.ndarray:
    """
    Rotation matrix from the perifocal (PQW) frame to the reference frame.

    R = Rz(Ω) · Rx(I) · Rz(ω)

    Returns:
        3x3 numpy array.
    """
    cO = math.cos(node_rad)
    sO = math.sin(node_rad)
    co = math.cos(arg_periapsis_rad)
    so = math.sin(arg_periapsis_rad)
    ci = math.cos(inclination_rad)
    si = math.sin(inclination_rad)

    return np.array([
        [cO * co - sO * so * ci, -cO * so - sO * co * ci, sO * si],
        [sO * co + cO * so * ci, -sO * so + cO * co * ci, -cO * si],
        [so * si, co * si, ci],
    ])


def perifocal_to_ecliptic(
    radius_km: float,
    true_anomaly_rad: float,
    arg_periapsis_rad: float,
    inclination_rad: float,
    node_rad: float,
) -> np.ndarray:
    """
    Place a point of the orbit in the ecliptic frame.

    The point (r·cos ν, r·sin ν, 0) in the orbital plane is rotated by the
    argument of periapsis, the inclination and the ascending node.

    Args:
        radius_km: Distance from the central body (km).
        true_anomaly_rad: True anomaly ν (radians).
        arg_periapsis_rad: Argument of periapsis ω (radians).
        inclination_rad: Inclination I (radians).
        node_rad: Longitude of the ascending node Ω (radians).

    Returns:
        Position [x, y, z] in km as a float64 numpy array.
    """
    pos_pqw = np.array([
        radius_km * math.cos(true_anomaly_rad),
        radius_km * math.sin(true_anomaly_rad),
        0.0,
    ])
    rotation = perifocal_rotation(arg_periapsis_rad, inclination_rad, node_rad)
    return rotation @ pos_pqw
