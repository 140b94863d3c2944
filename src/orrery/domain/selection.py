# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Hover/selection state shared by the coordinator and the trajectory manager."""
from dataclasses import dataclass
from enum import Enum


class TrajectorySlot(Enum):
    HIGHLIGHTED = "highlighted"
    SELECTED = "selected"


@dataclass
class SelectionState:
    """Live hovered/selected object indices.

    Each slot carries a generation counter that changes whenever the slot's
    index is set or cleared, so a reply tagged with an older generation can
    be recognised as stale even if the same index was chosen again.
    """
    highlighted_index: int | None = None
    selected_index: int | None = None
    highlighted_generation: int = 0
    selected_generation: int = 0

    def index_of(self, slot: TrajectorySlot) -> int | None:
        if slot is TrajectorySlot.HIGHLIGHTED:
            return self.highlighted_index
        return self.selected_index

    def generation_of(self, slot: TrajectorySlot) -> int:
        if slot is TrajectorySlot.HIGHLIGHTED:
            return self.highlighted_generation
        return self.selected_generation

    def begin(self, slot: TrajectorySlot, index: int | None) -> int:
        """Set the slot's index and return its new generation."""
        if slot is TrajectorySlot.HIGHLIGHTED:
            self.highlighted_index = index
            self.highlighted_generation += 1
            return self.highlighted_generation
        self.selected_index = index
        self.selected_generation += 1
        return self.selected_generation

    def clear(self, slot: TrajectorySlot) -> None:
        self.begin(slot, None)

    def matches(self, slot: TrajectorySlot, index: int, generation: int) -> bool:
        """True when a reply for (index, generation) still describes the live slot."""
        live = self.index_of(slot)
        return live is not None and live == index and self.generation_of(slot) == generation
