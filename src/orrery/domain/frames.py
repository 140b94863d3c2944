# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Frame conversions between propagator output and the display scene.

Propagator output is TEME (Earth equatorial, km). The scene is ecliptic
J2000 in scene units, translated by the floating-origin offset. The
TEME-to-J2000 precession/nutation difference (arcseconds) is ignored.
"""
import math

import numpy as np

from orrery.domain.orbital_mechanics import OrbitalConstants

OBLIQUITY_J2000_RAD = math.radians(OrbitalConstants.OBLIQUITY_J2000_DEG)


def _equatorial_to_ecliptic_matrix(obliquity_rad: float) -> np.ndarray:
    """Rotation about +X by the obliquity.

    [x_ecl]   [1     0       0   ] [x_eq]
    [y_ecl] = [0   cos ε   sin ε ] [y_eq]
    [z_ecl]   [0  -sin ε   cos ε ] [z_eq]
    """
    c = math.cos(obliquity_rad)
    s = math.sin(obliquity_rad)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, c, s],
        [0.0, -s, c],
    ])


_EQ_TO_ECL = _equatorial_to_ecliptic_matrix(OBLIQUITY_J2000_RAD)


def equatorial_to_ecliptic(vectors) -> np.ndarray:
    """Rotate one vector (3,) or a stack (n, 3) from equatorial to ecliptic axes."""
    arr = np.asarray(vectors, dtype=np.float64)
    return arr @ _EQ_TO_ECL.T


def ecliptic_to_equatorial(vectors) -> np.ndarray:
    arr = np.asarray(vectors, dtype=np.float64)
    return arr @ _EQ_TO_ECL


def native_to_display(
    points_km,
    parent_absolute: np.ndarray,
    scene_offset: np.ndarray,
    scene_units_per_km: float,
) -> np.ndarray:
    """
    Convert geocentric TEME points to display coordinates.

    display = R_eq→ecl · p · scale + parent_absolute + scene_offset

    Args:
        points_km: (n, 3) positions in km, TEME frame.
        parent_absolute: Absolute scene position of the parent body (Earth).
        scene_offset: Current floating-origin offset.
        scene_units_per_km: Scene scale.

    Returns:
        (n, 3) float64 array.
    """
    points = np.asarray(points_km, dtype=np.float64).reshape(-1, 3)
    ecliptic = equatorial_to_ecliptic(points) * scene_units_per_km
    base = np.asarray(parent_absolute, dtype=np.float64) + np.asarray(scene_offset, dtype=np.float64)
    return ecliptic + base
