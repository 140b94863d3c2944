# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Body catalogue.

Closed enumeration of the Sun, planets and Moon with their physical
constants and J2000 mean orbital elements. Planet elements are the
Standish (JPL) approximate elements referred to the mean ecliptic and
equinox of J2000; the Moon uses mean lunar elements with secular drift of
node and perigee.
"""
import math
from dataclasses import dataclass
from enum import Enum

from orrery.domain.errors import UnknownBodyError
from orrery.domain.orbital_mechanics import OrbitalConstants


@dataclass(frozen=True)
class OrbitalElements:
    """Keplerian elements at J2000.

    Angles in degrees. ``a`` is in AU when ``a_in_au`` is set (planets),
    otherwise in km (Moon).
    """
    a: float
    e: float
    inclination_deg: float
    mean_longitude_deg: float
    perihelion_longitude_deg: float
    node_longitude_deg: float
    a_in_au: bool = True
    node_rate_deg_per_century: float = 0.0
    peri_rate_deg_per_century: float = 0.0

    @property
    def semi_major_axis_km(self) -> float:
        if self.a_in_au:
            return self.a * OrbitalConstants.AU_KM
        return self.a

    @property
    def mean_anomaly_at_epoch_rad(self) -> float:
        return math.radians(self.mean_longitude_deg - self.perihelion_longitude_deg)

    @property
    def arg_periapsis_rad(self) -> float:
        return math.radians(self.perihelion_longitude_deg - self.node_longitude_deg)


@dataclass(frozen=True)
class BodyConstants:
    """Physical data for one body."""
    radius_km: float
    axial_tilt_deg: float
    central_body: "Body | None" = None
    central_gm_km3_s2: float = 0.0
    elements: OrbitalElements | None = None


class Body(Enum):
    SUN = "sun"
    MERCURY = "mercury"
    VENUS = "venus"
    EARTH = "earth"
    MOON = "moon"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    PLUTO = "pluto"

    @classmethod
    def from_name(cls, name: str) -> "Body":
        """Resolve a case-insensitive body name.

        Raises:
            UnknownBodyError: If the name is not in the catalogue.
        """
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            known = ", ".join(b.value for b in cls)
            raise UnknownBodyError(f"Unknown body {name!r} (known: {known})") from None

    @property
    def constants(self) -> BodyConstants:
        return _BODY_CONSTANTS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


def resolve_body(body: "Body | str") -> Body:
    """Accept a Body or a body name."""
    if isinstance(body, Body):
        return body
    return Body.from_name(body)


_GM_SUN = OrbitalConstants.GM_SUN

_BODY_CONSTANTS: dict[Body, BodyConstants] = {
    Body.SUN: BodyConstants(radius_km=696_340.0, axial_tilt_deg=7.25),
    Body.MERCURY: BodyConstants(
        radius_km=2440.0, axial_tilt_deg=0.03,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            0.38709893, 0.20563069, 7.00487, 252.25084, 77.45645, 48.33167,
        ),
    ),
    Body.VENUS: BodyConstants(
        radius_km=6052.0, axial_tilt_deg=177.4,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            0.72333199, 0.00677323, 3.39471, 181.97973, 131.53298, 76.68069,
        ),
    ),
    Body.EARTH: BodyConstants(
        radius_km=OrbitalConstants.R_EARTH_KM, axial_tilt_deg=23.44,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            1.00000011, 0.01671022, 0.00005, 100.46435, 102.94719, -11.26064,
        ),
    ),
    Body.MOON: BodyConstants(
        radius_km=1737.4, axial_tilt_deg=6.68,
        central_body=Body.EARTH,
        central_gm_km3_s2=OrbitalConstants.GM_EARTH + OrbitalConstants.GM_MOON,
        elements=OrbitalElements(
            384_400.0, 0.0549, 5.145, 218.3165, 83.3532, 125.0445,
            a_in_au=False,
            node_rate_deg_per_century=-1934.136,
            peri_rate_deg_per_century=4069.014,
        ),
    ),
    Body.MARS: BodyConstants(
        radius_km=3390.0, axial_tilt_deg=25.19,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            1.52366231, 0.09341233, 1.85061, -4.553432, -23.943629, 49.57854,
        ),
    ),
    Body.JUPITER: BodyConstants(
        radius_km=69_911.0, axial_tilt_deg=3.13,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            5.20336301, 0.04839266, 1.30530, 34.396441, 14.75385, 100.55615,
        ),
    ),
    Body.SATURN: BodyConstants(
        radius_km=58_232.0, axial_tilt_deg=26.73,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            9.53707032, 0.05415060, 2.48446, 49.944322, 92.43194, 113.71504,
        ),
    ),
    Body.URANUS: BodyConstants(
        radius_km=25_362.0, axial_tilt_deg=97.77,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            19.19126393, 0.04716771, 0.76986, 313.23218, 170.96424, 74.22988,
        ),
    ),
    Body.NEPTUNE: BodyConstants(
        radius_km=24_622.0, axial_tilt_deg=28.32,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            30.06896348, 0.00858587, 1.76917, -55.120029, 44.97135, 131.72169,
        ),
    ),
    Body.PLUTO: BodyConstants(
        radius_km=1188.0, axial_tilt_deg=122.53,
        central_body=Body.SUN, central_gm_km3_s2=_GM_SUN,
        elements=OrbitalElements(
            39.48168677, 0.24880766, 17.14175, 238.92881, 224.06676, 110.30347,
        ),
    ),
}
