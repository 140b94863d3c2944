# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Tracked object records and TLE text parsing.

A record is the immutable unit sent to the propagation worker: catalogue
number, name and the two element lines.
"""
import logging
import re
from dataclasses import dataclass

_log = logging.getLogger(__name__)

_CATALOG_RE = re.compile(r"^1\s+(\d+)")


@dataclass(frozen=True)
class TrackedObjectRecord:
    """One Earth-orbiting object as a two-line element set."""
    object_id: int
    name: str
    line1: str
    line2: str

    def to_dict(self) -> dict:
        return {
            "id": self.object_id,
            "name": self.name,
            "line1": self.line1,
            "line2": self.line2,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TrackedObjectRecord":
        return cls(
            object_id=int(data["id"]),
            name=str(data["name"]),
            line1=str(data["line1"]),
            line2=str(data["line2"]),
        )


def catalog_number(line1: str) -> int:
    """
    Extract the NORAD catalogue number from element line 1.

    Raises:
        ValueError: If the line does not start with '1' followed by digits.
    """
    match = _CATALOG_RE.match(line1)
    if match is None:
        raise ValueError(f"Not a TLE line 1: {line1[:20]!r}")
    return int(match.group(1))


def limit_records(records, max_objects: int) -> tuple[TrackedObjectRecord, ...]:
    """Truncate a record set to the buffer capacity, logging what is dropped."""
    if max_objects < 0:
        raise ValueError(f"max_objects must be >= 0, got {max_objects}")
    records = tuple(records)
    if len(records) > max_objects:
        _log.warning(
            "Truncating %d tracked objects to capacity %d",
            len(records), max_objects,
        )
        return records[:max_objects]
    return records


def parse_tle_text(text: str) -> list[TrackedObjectRecord]:
    """
    Parse TLE text into records.

    Accepts 3-line blocks (name, line 1, line 2), bare 2-line pairs and the
    '0 NAME' 3LE variant. Entries whose line 1 has no numeric catalogue
    number are skipped with a warning.

    Args:
        text: Raw TLE text, any line endings.

    Returns:
        Records in file order.
    """
    lines = [line.rstrip() for line in text.splitlines() if line.strip()]
    records: list[TrackedObjectRecord] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        name = None
        if not line.startswith("1 "):
            name = line[2:].strip() if line.startswith("0 ") else line.strip()
            i += 1
            if i >= len(lines):
                _log.warning("Skipping trailing name without element lines: %s", name)
                break
            line = lines[i]

        if i + 1 >= len(lines) or not line.startswith("1 ") or not lines[i + 1].startswith("2 "):
            _log.warning("Skipping malformed TLE entry near line %d", i + 1)
            if line.startswith("1 "):
                i += 1
            continue

        line1, line2 = line, lines[i + 1]
        i += 2
        try:
            object_id = catalog_number(line1)
        except ValueError as e:
            _log.warning("Skipping %s: %s", name or "unnamed entry", e)
            continue
        records.append(TrackedObjectRecord(
            object_id=object_id,
            name=name or f"NORAD {object_id}",
            line1=line1,
            line2=line2,
        ))
    return records
