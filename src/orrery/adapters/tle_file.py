# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""TLE file reader."""
from orrery.domain.tracked_objects import TrackedObjectRecord, parse_tle_text


def read_tle_file(path: str) -> list[TrackedObjectRecord]:
    """Read a 2-line or 3-line TLE file into records."""
    with open(path, encoding='utf-8') as f:
        return parse_tle_text(f.read())
