"""
Strict exact-sum rule for players whose active tokens are all in their lane.

Lane movement never triggers arrows, captures or bonuses, so the question
reduces to whether some assignment of every banked die to a lane token
advances tokens without passing the finished cell.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence, Tuple

from .board import is_lane
from .config import config
from .state import BankEntry

_FINISHED = config.HOME_INDEX


def lane_positions(player) -> list[int]:
    return [p.position for p in player.pieces if is_lane(p.position)]


def is_lane_only(player) -> bool:
    """True when every unfinished token is in the lane and at least one is there.

    A token on the shared track or still in the yard disables the rule.
    """
    for piece in player.pieces:
        if piece.is_finished():
            continue
        if not piece.is_in_lane():
            return False
    return any(piece.is_in_lane() for piece in player.pieces)


def required_steps(player) -> int:
    return sum(_FINISHED - pos for pos in lane_positions(player))


def can_exhaust_bank(
    positions: Sequence[int],
    values: Sequence[int],
    memo: Optional[Dict[Tuple[Tuple[int, ...], Tuple[int, ...]], bool]] = None,
) -> bool:
    """Whether every die in ``values`` can be spent exactly on the lane tokens."""
    if not values:
        return True
    if memo is None:
        memo = {}
    active = tuple(sorted(p for p in positions if is_lane(p)))
    key = (active, tuple(sorted(values)))
    if key in memo:
        return memo[key]

    result = False
    for vi, value in enumerate(values):
        # identical faces lead to identical subtrees
        if value in values[:vi]:
            continue
        rest = tuple(values[:vi]) + tuple(values[vi + 1:])
        for pi, pos in enumerate(active):
            if pos in active[:pi]:
                continue
            new_pos = pos + value
            if new_pos > _FINISHED:
                continue
            moved = active[:pi] + ((new_pos,) if new_pos < _FINISHED else ()) + active[pi + 1:]
            if can_exhaust_bank(moved, rest, memo):
                result = True
                break
        if result:
            break

    memo[key] = result
    return result


def should_discard_bank(player, bank: Iterable[BankEntry]) -> bool:
    bank = list(bank)
    if not bank or not is_lane_only(player):
        return False
    return not can_exhaust_bank(lane_positions(player), [e.value for e in bank])
