# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orrery

Solar-system and satellite position engine for interactive scenes.
Keplerian ephemerides for the Sun, planets and Moon, batched SGP4
propagation of tens of thousands of tracked objects on a worker pool,
a floating origin that keeps display coordinates small near the focused
body, and staleness-checked trajectory requests for hovered and selected
objects.
"""

__version__ = "0.1.0"

from orrery.domain.orbital_mechanics import (
    OrbitalConstants,
    solve_kepler,
    true_anomaly_from_eccentric,
    mean_motion,
    perifocal_to_ecliptic,
)
from orrery.domain.errors import (
    OrreryError,
    UnknownBodyError,
    PropagationError,
)
from orrery.domain.bodies import (
    Body,
    BodyConstants,
    OrbitalElements,
)
from orrery.domain.ephemeris import (
    EphemerisState,
    compute_ephemeris,
    body_position_km,
    heliocentric_position_km,
    solar_system_positions_km,
)
from orrery.domain.tracked_objects import (
    TrackedObjectRecord,
    limit_records,
    parse_tle_text,
)
from orrery.domain.messages import (
    PositionVelocity,
    PositionsRequest,
    PositionsUpdate,
    TrajectoryRequest,
    TrajectoryData,
    message_from_dict,
)
from orrery.domain.batching import chunk_ranges
from orrery.domain.config import (
    SimulationConfig,
    validate_config,
)
from orrery.domain.position_buffer import PositionBuffer
from orrery.domain.batch_pipeline import BatchPositionPipeline
from orrery.domain.floating_origin import FloatingOrigin
from orrery.domain.selection import SelectionState, TrajectorySlot
from orrery.domain.trajectory import SlotState, TrajectoryRequestManager
from orrery.domain.simulation import Simulation, SimulationState
