# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters: propagation, workers, TLE sources and JSON I/O.

sgp4 is imported lazily by Sgp4Propagator.
"""
from orrery.adapters.celestrak import CelesTrakTleSource
from orrery.adapters.json_io import load_config, write_snapshot
from orrery.adapters.propagation_worker import (
    SequentialPropagationWorker,
    ThreadedPropagationWorker,
)
from orrery.adapters.sgp4_propagator import Sgp4Propagator
from orrery.adapters.tle_file import read_tle_file

__all__ = [
    "CelesTrakTleSource",
    "SequentialPropagationWorker",
    "Sgp4Propagator",
    "ThreadedPropagationWorker",
    "load_config",
    "read_tle_file",
    "write_snapshot",
]
