# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Analytic orbital position engine.

Positions of the planets and the Moon from fixed J2000 Keplerian elements:
mean anomaly advanced at the two-body mean motion, Kepler's equation solved
for the eccentric anomaly, then the orbital-plane point rotated into the
ecliptic J2000 frame. Planets are heliocentric, the Moon geocentric.

Accuracy is that of unperturbed two-body motion: a fraction of a degree for
the inner planets over a few decades, a few degrees in lunar longitude
(evection, variation and the annual equation are not modelled).
"""
import math
from dataclasses import dataclass
from datetime import datetime

import numpy as np

from orrery.domain.bodies import Body, resolve_body
from orrery.domain.epochs import J2000, as_utc, seconds_since
from orrery.domain.orbital_mechanics import (
    OrbitalConstants,
    mean_motion,
    perifocal_to_ecliptic,
    solve_kepler,
    true_anomaly_from_eccentric,
)

_TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class EphemerisState:
    """Orbital state of one body at one epoch, relative to its central body."""
    body: Body
    epoch: datetime
    mean_anomaly_rad: float
    eccentric_anomaly_rad: float
    true_anomaly_rad: float
    radius_km: float
    position_km: tuple[float, float, float]  # ecliptic J2000


def compute_ephemeris(
    body: Body | str,
    epoch: datetime,
    reference_epoch: datetime = J2000,
) -> EphemerisState:
    """Keplerian position of a body relative to its central body.

    Args:
        body: Body or body name.
        epoch: Time of interest (naive datetimes are taken as UTC).
        reference_epoch: Epoch of the orbital elements.

    Returns:
        EphemerisState with the position in km, ecliptic J2000 frame.

    Raises:
        UnknownBodyError: If a body name is not in the catalogue.
        ValueError: For the Sun, which has no orbital elements.
    """
    body = resolve_body(body)
    constants = body.constants
    elements = constants.elements
    if elements is None:
        raise ValueError(f"{body.display_name} has no orbital elements")

    dt_s = seconds_since(epoch, reference_epoch)
    centuries = dt_s / OrbitalConstants.SECONDS_PER_JULIAN_CENTURY

    a_km = elements.semi_major_axis_km
    e = elements.e
    n = mean_motion(a_km, constants.central_gm_km3_s2)

    node_rad = math.radians(
        elements.node_longitude_deg + elements.node_rate_deg_per_century * centuries
    )
    peri_drift_rad = math.radians(elements.peri_rate_deg_per_century * centuries)
    node_drift_rad = node_rad - math.radians(elements.node_longitude_deg)
    arg_periapsis_rad = elements.arg_periapsis_rad + peri_drift_rad - node_drift_rad

    # Mean longitude advances at n; the drifting perihelion is subtracted.
    mean_anomaly = (
        elements.mean_anomaly_at_epoch_rad + n * dt_s - peri_drift_rad
    ) % _TWO_PI

    ecc_anomaly = solve_kepler(mean_anomaly, e)
    true_anomaly = true_anomaly_from_eccentric(ecc_anomaly, e)
    radius = a_km * (1.0 - e * math.cos(ecc_anomaly))

    position = perifocal_to_ecliptic(
        radius,
        true_anomaly,
        arg_periapsis_rad,
        math.radians(elements.inclination_deg),
        node_rad,
    )

    return EphemerisState(
        body=body,
        epoch=as_utc(epoch),
        mean_anomaly_rad=mean_anomaly,
        eccentric_anomaly_rad=ecc_anomaly,
        true_anomaly_rad=true_anomaly,
        radius_km=radius,
        position_km=(float(position[0]), float(position[1]), float(position[2])),
    )


def body_position_km(body: Body | str, epoch: datetime) -> np.ndarray:
    """Position relative to the central body (km). Zero vector for the Sun."""
    body = resolve_body(body)
    if body is Body.SUN:
        return np.zeros(3)
    return np.array(compute_ephemeris(body, epoch).position_km)


def heliocentric_position_km(body: Body | str, epoch: datetime) -> np.ndarray:
    """Heliocentric ecliptic position (km); moons include their planet's position."""
    body = resolve_body(body)
    position = body_position_km(body, epoch)
    central = body.constants.central_body
    if central is not None and central is not Body.SUN:
        position = position + heliocentric_position_km(central, epoch)
    return position


def solar_system_positions_km(epoch: datetime) -> dict[Body, np.ndarray]:
    """Heliocentric positions of every catalogue body at one epoch."""
    relative = {body: body_position_km(body, epoch) for body in Body}
    positions: dict[Body, np.ndarray] = {}
    for body in Body:
        central = body.constants.central_body
        if central is None or central is Body.SUN:
            positions[body] = relative[body]
        else:
            positions[body] = relative[body] + relative[central]
    return positions
