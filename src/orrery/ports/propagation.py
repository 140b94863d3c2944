# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for orbit propagation.

Adapters implement this to turn an element set into a state vector at a
given time (e.g. SGP4 via the sgp4 library).
"""
from datetime import datetime
from typing import Protocol, runtime_checkable

from orrery.domain.messages import PositionVelocity


@runtime_checkable
class Propagator(Protocol):
    """Propagates two-line element sets."""

    def propagate(self, line1: str, line2: str, when: datetime) -> PositionVelocity:
        """
        State of the object at ``when`` in the TEME frame (km, km/s).

        Raises:
            PropagationError: If the element set is malformed or the
                propagation fails (decay, divergence).
        """
        ...

    def orbital_period_s(self, line1: str, line2: str) -> float:
        """
        Orbital period in seconds from the element set's mean motion.

        Raises:
            PropagationError: If the element set is malformed.
        """
        ...
