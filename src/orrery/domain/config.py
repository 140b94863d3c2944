# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Simulation configuration.

Immutable settings object plus a validating function. Loading from JSON
lives in the json_io adapter.
"""
from dataclasses import dataclass, fields

from orrery.domain.bodies import Body

DEFAULT_MAX_OBJECTS = 20_000
DEFAULT_BATCH_SIZE = 500
DEFAULT_TRAJECTORY_SAMPLES = 100
DEFAULT_TIME_STEP_S = 60.0
DEFAULT_SCENE_UNITS_PER_KM = 1.0 / 6371.0

_POSITION_DTYPES = ("float32", "float64")


@dataclass(frozen=True)
class SimulationConfig:
    """Tunable parameters of a simulation session."""
    max_objects: int = DEFAULT_MAX_OBJECTS
    batch_size: int = DEFAULT_BATCH_SIZE
    trajectory_sample_count: int = DEFAULT_TRAJECTORY_SAMPLES
    time_step_s: float = DEFAULT_TIME_STEP_S
    realtime_update_interval_s: float = 1.0
    scene_units_per_km: float = DEFAULT_SCENE_UNITS_PER_KM
    initial_focus: str = "earth"
    worker_threads: int = 1
    request_queue_size: int = 64
    position_dtype: str = "float32"


def config_field_names() -> tuple[str, ...]:
    return tuple(f.name for f in fields(SimulationConfig))


def validate_config(config: SimulationConfig) -> SimulationConfig:
    """Check a configuration and return it unchanged.

    Raises:
        ValueError: Naming the first invalid field.
        UnknownBodyError: If initial_focus is not a catalogue body.
    """
    if config.max_objects <= 0:
        raise ValueError(f"max_objects must be > 0, got {config.max_objects}")
    if config.batch_size <= 0:
        raise ValueError(f"batch_size must be > 0, got {config.batch_size}")
    if config.trajectory_sample_count < 2:
        raise ValueError(
            f"trajectory_sample_count must be >= 2, got {config.trajectory_sample_count}"
        )
    if config.time_step_s <= 0:
        raise ValueError(f"time_step_s must be > 0, got {config.time_step_s}")
    if config.realtime_update_interval_s <= 0:
        raise ValueError(
            f"realtime_update_interval_s must be > 0, got {config.realtime_update_interval_s}"
        )
    if config.scene_units_per_km <= 0:
        raise ValueError(f"scene_units_per_km must be > 0, got {config.scene_units_per_km}")
    if config.worker_threads <= 0:
        raise ValueError(f"worker_threads must be > 0, got {config.worker_threads}")
    if config.request_queue_size <= 0:
        raise ValueError(f"request_queue_size must be > 0, got {config.request_queue_size}")
    if config.position_dtype not in _POSITION_DTYPES:
        raise ValueError(
            f"position_dtype must be one of {_POSITION_DTYPES}, got {config.position_dtype!r}"
        )
    Body.from_name(config.initial_focus)
    return config
