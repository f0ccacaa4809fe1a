"""
Legal-action generation.

For each banked die and each of the player's tokens the generator works out
the destination, applies any arrow glide and tests the resulting landing
against the live stack on that square.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .arrows import resolve_arrow
from .board import (
    Occupant,
    destination,
    find_pair_partner,
    is_lane,
    is_pair_split_safe,
    is_track,
    square_occupants,
)
from .combat import resolve_landing
from .config import config
from .stack import classify_stack
from .state import BankEntry, MatchState, Player
from .types import Action, Landing


def _landing_allowed(
    state: MatchState, player: Player, movers: List[int], landing: int
) -> bool:
    if not is_track(landing):
        return True
    attacker = classify_stack(
        [Occupant(player.player_id, player.color, idx) for idx in movers], landing
    )
    defender = classify_stack(square_occupants(state.players, landing), landing)
    return resolve_landing(attacker, defender, landing, player.color) != Landing.BLOCKED


def _track_action(
    state: MatchState,
    player: Player,
    entry: BankEntry,
    piece_index: int,
    steps: int,
    partner: Optional[int] = None,
) -> Optional[Action]:
    start = player.pieces[piece_index].position
    target = destination(player.color, start, steps)
    if target is None:
        return None
    arrow = resolve_arrow(target, player.color)
    landing = arrow.head if arrow else target
    movers = [piece_index] if partner is None else [piece_index, partner]
    if not _landing_allowed(state, player, movers, landing):
        return None
    return Action(
        bank_entry_id=entry.entry_id,
        die_value=entry.value,
        piece_index=piece_index,
        target=target,
        is_pair_move=partner is not None,
        partner_index=partner,
        glide_head=arrow.head if arrow else None,
    )


def legal_actions_for_entry(
    state: MatchState, player_id: str, entry: BankEntry
) -> List[Action]:
    player = state.find_player(player_id)
    if player is None:
        return []

    actions: List[Action] = []
    for piece_index, piece in enumerate(player.pieces):
        pos = piece.position
        if piece.is_finished():
            continue

        if piece.is_in_yard():
            if entry.value != config.EXIT_ROLL:
                continue
            action = _track_action(state, player, entry, piece_index, entry.value)
            if action is not None:
                actions.append(action)
            continue

        if is_track(pos):
            partner = find_pair_partner(player, piece_index)
            if partner is None:
                action = _track_action(state, player, entry, piece_index, entry.value)
                if action is not None:
                    actions.append(action)
                continue

            if entry.value % 2 == 0:
                action = _track_action(
                    state, player, entry, piece_index, entry.value // 2, partner
                )
                if action is not None:
                    actions.append(action)
            if is_pair_split_safe(pos):
                action = _track_action(state, player, entry, piece_index, entry.value)
                if action is not None:
                    actions.append(action)
            continue

        if is_lane(pos):
            target = pos + entry.value
            if target <= config.HOME_INDEX:
                actions.append(
                    Action(
                        bank_entry_id=entry.entry_id,
                        die_value=entry.value,
                        piece_index=piece_index,
                        target=target,
                    )
                )

    return deduplicate(actions)


def legal_actions(state: MatchState, player_id: str) -> List[Action]:
    if state.find_player(player_id) is None:
        return []
    actions: List[Action] = []
    for entry in state.turn.bank:
        actions.extend(legal_actions_for_entry(state, player_id, entry))
    return deduplicate(actions)


def deduplicate(actions: Iterable[Action]) -> List[Action]:
    seen: set = set()
    out: List[Action] = []
    for action in actions:
        if action.key in seen:
            continue
        seen.add(action.key)
        out.append(action)
    return out


def find_legal(state: MatchState, player_id: str, action: Action) -> Optional[Action]:
    """The generated action matching ``action`` by key and destination, if any."""
    entry = next((e for e in state.turn.bank if e.entry_id == action.bank_entry_id), None)
    if entry is None:
        return None
    for candidate in legal_actions_for_entry(state, player_id, entry):
        if candidate.key == action.key and candidate.target == action.target:
            return candidate
    return None


def is_legal_action(
    state: MatchState, player_id: str, bank_entry_id: str, piece_index: int
) -> bool:
    entry = next((e for e in state.turn.bank if e.entry_id == bank_entry_id), None)
    if entry is None:
        return False
    return any(
        a.piece_index == piece_index for a in legal_actions_for_entry(state, player_id, entry)
    )


def auto_pick_bank_entry(state: MatchState, player_id: str, piece_index: int) -> Optional[str]:
    """First bank entry (bank order) that moves ``piece_index`` legally."""
    for entry in state.turn.bank:
        if any(
            a.piece_index == piece_index
            for a in legal_actions_for_entry(state, player_id, entry)
        ):
            return entry.entry_id
    return None
