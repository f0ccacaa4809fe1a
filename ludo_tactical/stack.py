"""
Stack classification: the combat posture of whatever stands on one square.

Descriptors are derived from live token positions on every call and are
never stored in the match state.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Sequence

from .board import Occupant, are_allied, square_occupants
from .types import Color, StackKind

INVINCIBLE_KINDS = frozenset({StackKind.TRIPLE, StackKind.QUAD, StackKind.ALLIED})


@dataclass(frozen=True, slots=True)
class StackDescriptor:
    kind: StackKind
    occupants: List[Occupant] = field(default_factory=list)
    invincible: bool = False
    is_pair: bool = False

    @property
    def colors(self) -> set[Color]:
        return {o.color for o in self.occupants}

    def __len__(self) -> int:
        return len(self.occupants)


def classify_stack(occupants: Sequence[Occupant], position: int) -> StackDescriptor:
    occupants = list(occupants)
    if not occupants:
        return StackDescriptor(StackKind.EMPTY)
    if len(occupants) == 1:
        return StackDescriptor(StackKind.SINGLE, occupants)

    by_color = Counter(o.color for o in occupants)

    if len(by_color) == 1:
        count = len(occupants)
        if count == 2:
            return StackDescriptor(StackKind.HEAVY_PAIR, occupants, is_pair=True)
        if count == 3:
            return StackDescriptor(StackKind.TRIPLE, occupants, invincible=True)
        return StackDescriptor(StackKind.QUAD, occupants, invincible=True)

    if len(by_color) == 2:
        first, second = by_color
        if are_allied(first, second):
            return StackDescriptor(StackKind.ALLIED, occupants, invincible=True)
        # a single sitting on an enemy heavy pair, or any other two-color mix
        return StackDescriptor(StackKind.MIXED_ENEMY, occupants)

    return StackDescriptor(StackKind.MIXED_ENEMY, occupants)


def classify_square(players: Sequence, position: int) -> StackDescriptor:
    return classify_stack(square_occupants(players, position), position)
