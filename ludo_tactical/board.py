"""
Static board topology for the tactical edition.

Positions are absolute: 0..51 is the shared ring, 52..57 the private lane of
whichever color owns the token, 58 the finished cell and -1 the yard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from .config import config
from .types import Color

START_INDICES: Dict[Color, int] = {
    Color.RED: 0,
    Color.GREEN: 13,
    Color.YELLOW: 26,
    Color.BLUE: 39,
}

# Last shared cell before the color turns into its lane
LANE_ENTRY_INDICES: Dict[Color, int] = {
    Color.RED: 51,
    Color.GREEN: 12,
    Color.YELLOW: 25,
    Color.BLUE: 38,
}

START_BOX_SQUARES: FrozenSet[int] = frozenset(START_INDICES.values())
SAFE_RHOMBUS_SQUARES: FrozenSet[int] = frozenset({8, 21, 34, 47})
SAFE_SQUARES: FrozenSet[int] = START_BOX_SQUARES | SAFE_RHOMBUS_SQUARES

# tail -> head, any color may glide
OUTER_ARROWS: Dict[int, int] = {4: 9, 17: 22, 30: 35, 43: 48}

# tail -> (head, eligible color); head is the first lane cell of that color
INNER_ARROWS: Dict[int, Tuple[int, Color]] = {
    11: (52, Color.GREEN),
    24: (52, Color.YELLOW),
    37: (52, Color.BLUE),
    50: (52, Color.RED),
}

ALLIES: Dict[Color, Color] = {
    Color.RED: Color.YELLOW,
    Color.YELLOW: Color.RED,
    Color.GREEN: Color.BLUE,
    Color.BLUE: Color.GREEN,
}


@dataclass(frozen=True, slots=True)
class Occupant:
    player_id: str
    color: Color
    piece_index: int


def are_allied(a: Color, b: Color) -> bool:
    return ALLIES[a] == b


def is_safe_square(position: int) -> bool:
    return position in SAFE_SQUARES


def is_pair_split_safe(position: int) -> bool:
    """A heavy pair standing here may also move its tokens one at a time."""
    return position in START_BOX_SQUARES or position in SAFE_RHOMBUS_SQUARES


def is_track(position: int) -> bool:
    return 0 <= position < config.TRACK_LENGTH


def is_lane(position: int) -> bool:
    return config.HOME_LANE_START <= position < config.HOME_INDEX


def compute_path(color: Color, start: int, steps: int) -> List[int]:
    """Cells visited when a ``color`` token at ``start`` walks ``steps`` cells.

    Returns an empty list when the move is impossible: leaving the yard with
    anything but a 6, moving a finished token, or overshooting the finished
    cell.
    """
    path: List[int] = []
    cur = start
    for _ in range(steps):
        if cur == config.YARD:
            if steps == config.EXIT_ROLL:
                return [START_INDICES[color]]
            return []
        if cur < config.TRACK_LENGTH:
            if cur == LANE_ENTRY_INDICES[color]:
                cur = config.HOME_LANE_START
            else:
                cur = (cur + 1) % config.TRACK_LENGTH
        elif cur < config.HOME_INDEX:
            cur += 1
        else:
            return []
        if cur > config.HOME_INDEX:
            return []
        path.append(cur)
    return path


def destination(color: Color, start: int, steps: int) -> Optional[int]:
    """Final cell of :func:`compute_path`, or None when the walk is illegal."""
    path = compute_path(color, start, steps)
    if not path:
        return None
    if start != config.YARD and len(path) != steps:
        return None
    return path[-1]


def progress(color: Color, position: int) -> int:
    """Cells walked from the yard: 0 in yard, 1 on the start cell, 59 finished."""
    if position == config.YARD:
        return 0
    if position >= config.HOME_LANE_START:
        return position - config.HOME_LANE_START + config.TRACK_LENGTH + 1
    return (position - START_INDICES[color]) % config.TRACK_LENGTH + 1


def square_occupants(players: Sequence, position: int) -> List[Occupant]:
    """Every token standing on ``position``.

    Lane cells are private, so callers only ask about shared-track squares;
    lane and finished cells return an empty list.
    """
    if not is_track(position):
        return []
    out: List[Occupant] = []
    for player in players:
        for piece in player.pieces:
            if piece.position == position:
                out.append(Occupant(player.player_id, player.color, piece.piece_id))
    return out


def find_pair_partner(player, piece_index: int) -> Optional[int]:
    """Index of another same-square token of ``player`` on the shared track."""
    pos = player.pieces[piece_index].position
    if not is_track(pos):
        return None
    for i, piece in enumerate(player.pieces):
        if i != piece_index and piece.position == pos:
            return i
    return None


def find_pairs(player) -> List[Tuple[int, int]]:
    pairs: List[Tuple[int, int]] = []
    seen: set[int] = set()
    for i, piece in enumerate(player.pieces):
        if i in seen or not is_track(piece.position):
            continue
        for j in range(i + 1, len(player.pieces)):
            if j not in seen and player.pieces[j].position == piece.position:
                pairs.append((i, j))
                seen.update((i, j))
                break
    return pairs


def track_counts(player) -> np.ndarray:
    """(TRACK_LENGTH,) count of ``player``'s tokens per shared-track square."""
    on_track = [p.position for p in player.pieces if is_track(p.position)]
    return np.bincount(
        np.asarray(on_track, dtype=np.int64), minlength=config.TRACK_LENGTH
    )
