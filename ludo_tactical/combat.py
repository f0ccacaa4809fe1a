"""
Combat matrix.

Precedence when an attacking posture lands on a defended square:
own color > safe square > invincible defender > mixed-enemy defender >
posture table.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .board import is_safe_square
from .errors import InternalInvariantViolation
from .stack import StackDescriptor
from .types import Color, Landing, StackKind

# Triples, quads and allied stacks behave alike when attacking
_HEAVY = "heavy"

_ATTACKER_GROUP: Dict[StackKind, str] = {
    StackKind.SINGLE: StackKind.SINGLE.value,
    StackKind.HEAVY_PAIR: StackKind.HEAVY_PAIR.value,
    StackKind.TRIPLE: _HEAVY,
    StackKind.QUAD: _HEAVY,
    StackKind.ALLIED: _HEAVY,
}

_DEFENDER_GROUP: Dict[StackKind, str] = dict(_ATTACKER_GROUP)

LANDING_TABLE: Dict[Tuple[str, str], Landing] = {
    ("single", "single"): Landing.CAPTURE,
    ("single", "heavy_pair"): Landing.COEXIST,
    ("single", _HEAVY): Landing.BLOCKED,
    ("heavy_pair", "single"): Landing.CAPTURE,
    ("heavy_pair", "heavy_pair"): Landing.CAPTURE,
    ("heavy_pair", _HEAVY): Landing.BLOCKED,
    (_HEAVY, "single"): Landing.CAPTURE,
    (_HEAVY, "heavy_pair"): Landing.CAPTURE,
    (_HEAVY, _HEAVY): Landing.BLOCKED,
}


def resolve_landing(
    attacker: StackDescriptor,
    defender: StackDescriptor,
    position: int,
    attacker_color: Color,
) -> Landing:
    if attacker.kind not in _ATTACKER_GROUP:
        raise InternalInvariantViolation(
            "unknown_posture", f"{attacker.kind.value} cannot attack"
        )

    if defender.kind == StackKind.EMPTY:
        return Landing.NORMAL
    if all(o.color == attacker_color for o in defender.occupants):
        return Landing.NORMAL
    if is_safe_square(position):
        return Landing.NORMAL
    if defender.invincible:
        return Landing.BLOCKED
    if defender.kind == StackKind.MIXED_ENEMY:
        return Landing.NORMAL

    try:
        key = (_ATTACKER_GROUP[attacker.kind], _DEFENDER_GROUP[defender.kind])
        return LANDING_TABLE[key]
    except KeyError as e:
        raise InternalInvariantViolation(
            "unknown_posture",
            f"No rule for {attacker.kind.value} vs {defender.kind.value}",
        ) from e


def can_capture(
    attacker: StackDescriptor,
    defender: StackDescriptor,
    position: int,
    attacker_color: Color,
) -> bool:
    return resolve_landing(attacker, defender, position, attacker_color) == Landing.CAPTURE
