"""
Public surface of the rules engine.

The caller (request handling, persistence, fan-out) drives a match through
``roll`` and ``move``; ``legal_actions`` and ``best_bot_action`` are pure
queries. Randomness for dice and turn nonces is injectable.
"""

from __future__ import annotations

from typing import List, Optional

from loguru import logger

from . import ai
from . import moves as _moves
from .errors import InvalidAction, LudoTacticalError
from .resolver import MoveResult, RollResult, apply_move, apply_roll
from .state import MatchState
from .types import Action, Difficulty, NonceFn, RollFn, TurnPhase


def roll(
    state: MatchState,
    player_id: str,
    roll_fn: Optional[RollFn] = None,
    nonce_factory: Optional[NonceFn] = None,
    turn_nonce: Optional[str] = None,
) -> RollResult:
    try:
        return apply_roll(state, player_id, roll_fn, nonce_factory, turn_nonce)
    except LudoTacticalError as e:
        logger.debug(f"[{state.code}] roll by {player_id} rejected: {e.reason}")
        raise


def move(
    state: MatchState,
    player_id: str,
    action: Action,
    roll_fn: Optional[RollFn] = None,
    nonce_factory: Optional[NonceFn] = None,
    turn_nonce: Optional[str] = None,
) -> MoveResult:
    try:
        return apply_move(state, player_id, action, roll_fn, nonce_factory, turn_nonce)
    except LudoTacticalError as e:
        logger.debug(f"[{state.code}] move by {player_id} rejected: {e.reason}")
        raise


def legal_actions(state: MatchState, player_id: str) -> List[Action]:
    return _moves.legal_actions(state, player_id)


def best_bot_action(
    state: MatchState, player_id: str, difficulty: Optional[Difficulty | str] = None
) -> Optional[Action]:
    return ai.best_bot_action(state, player_id, difficulty)


def is_legal_action(
    state: MatchState, player_id: str, bank_entry_id: str, piece_index: int
) -> bool:
    return _moves.is_legal_action(state, player_id, bank_entry_id, piece_index)


def auto_pick_bank_entry(state: MatchState, player_id: str, piece_index: int) -> Optional[str]:
    return _moves.auto_pick_bank_entry(state, player_id, piece_index)


def move_piece(
    state: MatchState,
    player_id: str,
    piece_index: int,
    bank_entry_id: Optional[str] = None,
    prefer_pair: Optional[bool] = None,
    roll_fn: Optional[RollFn] = None,
    nonce_factory: Optional[NonceFn] = None,
    turn_nonce: Optional[str] = None,
) -> MoveResult:
    """Move a token by index, picking the die when the caller omits it."""
    entry_id = bank_entry_id or _moves.auto_pick_bank_entry(state, player_id, piece_index)
    if entry_id is None:
        raise InvalidAction("action_not_legal", f"No bank die moves piece {piece_index}")

    candidates = [
        a
        for a in _moves.legal_actions(state, player_id)
        if a.bank_entry_id == entry_id and a.piece_index == piece_index
    ]
    chosen = None
    if prefer_pair is not None:
        chosen = next((a for a in candidates if a.is_pair_move == prefer_pair), None)
    if chosen is None and candidates:
        chosen = candidates[0]
    if chosen is None:
        # let move() report the precise failure (stale entry, wrong turn, ...)
        chosen = Action(
            bank_entry_id=entry_id, die_value=0, piece_index=piece_index, target=-1
        )
    return move(state, player_id, chosen, roll_fn, nonce_factory, turn_nonce)


def bot_step(
    state: MatchState,
    player_id: str,
    roll_fn: Optional[RollFn] = None,
    nonce_factory: Optional[NonceFn] = None,
) -> RollResult | MoveResult:
    """Advance a bot-controlled turn by exactly one verb."""
    if state.turn.phase == TurnPhase.AWAITING_ROLL:
        return roll(state, player_id, roll_fn, nonce_factory)
    action = best_bot_action(state, player_id)
    if action is None:
        raise InvalidAction("action_not_legal", f"No bot action for {player_id}")
    return move(state, player_id, action, roll_fn, nonce_factory)
