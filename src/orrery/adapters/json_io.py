# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JSON I/O adapter.

Reads simulation configuration and writes scene snapshots.
"""
import json
from typing import Any

from orrery.domain.config import SimulationConfig, config_field_names, validate_config


def load_config(path: str) -> SimulationConfig:
    """
    Read a SimulationConfig from a JSON object of field overrides.

    Raises:
        ValueError: If the file is not a JSON object, has unknown keys or
            holds invalid values.
    """
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a JSON object, got {type(data).__name__}")
    unknown = sorted(set(data) - set(config_field_names()))
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    return validate_config(SimulationConfig(**data))


def write_snapshot(path: str, snapshot: dict[str, Any]) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(snapshot, f, indent=2, ensure_ascii=False)
