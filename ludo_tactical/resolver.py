"""
Authoritative state transitions for the two verbs of a turn: roll and move.

Both functions validate against the incoming state, then work on a deep copy
and return it; a rejected call leaves the caller's state untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from .arrows import resolve_arrow
from .board import Occupant, compute_path, is_safe_square, is_track, square_occupants
from .combat import resolve_landing
from .config import config
from .dice import append_bonus, find_entry, remove_entry, roll_chain
from .errors import InvalidAction, InvalidTurn, StaleBankEntry
from .home_stretch import should_discard_bank
from .moves import find_legal, legal_actions
from .stack import classify_stack
from .state import BankEntry, MatchEvent, MatchState, random_nonce
from .types import (
    Action,
    ArrowKind,
    BankSource,
    BonusTrigger,
    EventKind,
    Landing,
    MatchStatus,
    NonceFn,
    RollFn,
    TriggerKind,
    TurnPhase,
)

DISCARD_EXACT_SUM = "home_stretch_exact_sum"
DISCARD_NO_ACTIONS = "no_legal_actions"


@dataclass(slots=True)
class RollResult:
    state: MatchState
    rolls_added: List[BankEntry]
    discarded: bool = False


@dataclass(slots=True)
class MoveResult:
    state: MatchState
    bonus_triggers: List[BonusTrigger] = field(default_factory=list)
    discarded: bool = False


def check_turn(
    state: MatchState,
    player_id: str,
    phase: TurnPhase,
    turn_nonce: Optional[str] = None,
) -> None:
    if state.status != MatchStatus.RUNNING:
        raise InvalidTurn("match_not_running", f"Match {state.code} is {state.status.value}")
    state.get_player(player_id)
    if state.active_player_id != player_id:
        raise InvalidTurn("not_active_player", f"It is {state.active_player_id}'s turn")
    if state.turn.phase != phase:
        raise InvalidTurn(
            "wrong_phase", f"Expected {phase.value}, turn is {state.turn.phase.value}"
        )
    if turn_nonce is not None and turn_nonce != state.turn.turn_nonce:
        raise InvalidTurn("stale_turn_nonce", "Turn nonce does not match")


def _pass_turn(state: MatchState, player_id: str) -> None:
    state.turn.bank = []
    state.turn.phase = TurnPhase.AWAITING_ROLL
    state.turn.bonus_turn_chain = 0
    state.turn.last_roll = None
    state.active_player_id = state.next_player_id(player_id)
    logger.debug(f"[{state.code}] turn passes to {state.active_player_id}")


def _discard(state: MatchState, player_id: str, reason: str) -> None:
    forfeited = [e.value for e in state.turn.bank]
    logger.debug(f"[{state.code}] {player_id} forfeits bank {forfeited} ({reason})")
    state.turn.bank = []
    state.last_event = MatchEvent(
        kind=EventKind.BANK_DISCARDED,
        player_id=player_id,
        payload={"reason": reason, "forfeited": forfeited},
    )


def apply_roll(
    state: MatchState,
    player_id: str,
    roll_fn: Optional[RollFn] = None,
    nonce_factory: Optional[NonceFn] = None,
    turn_nonce: Optional[str] = None,
) -> RollResult:
    check_turn(state, player_id, TurnPhase.AWAITING_ROLL, turn_nonce)
    nonce_factory = nonce_factory or random_nonce

    new_state = state.clone()
    player = new_state.get_player(player_id)
    added = roll_chain(new_state.code, new_state.turn, roll_fn)
    values = [e.value for e in added]
    logger.debug(f"[{new_state.code}] {player_id} rolled {values}")

    reason: Optional[str] = None
    if should_discard_bank(player, new_state.turn.bank):
        reason = DISCARD_EXACT_SUM
    elif not legal_actions(new_state, player_id):
        reason = DISCARD_NO_ACTIONS

    new_state.last_event = MatchEvent(
        kind=EventKind.DICE_ROLL,
        player_id=player_id,
        payload={
            "values": values,
            "bank": [e.entry_id for e in new_state.turn.bank],
            "discarded": reason is not None,
            "reason": reason,
        },
    )

    if reason is not None:
        logger.debug(f"[{new_state.code}] {player_id} cannot use {values} ({reason})")
        _pass_turn(new_state, player_id)
    else:
        new_state.turn.phase = TurnPhase.AWAITING_MOVE

    new_state.turn.turn_nonce = nonce_factory()
    return RollResult(state=new_state, rolls_added=added, discarded=reason is not None)


def apply_move(
    state: MatchState,
    player_id: str,
    action: Action,
    roll_fn: Optional[RollFn] = None,
    nonce_factory: Optional[NonceFn] = None,
    turn_nonce: Optional[str] = None,
) -> MoveResult:
    check_turn(state, player_id, TurnPhase.AWAITING_MOVE, turn_nonce)
    if find_entry(state.turn.bank, action.bank_entry_id) is None:
        raise StaleBankEntry(
            "bank_entry_not_found", f"Bank entry not found: {action.bank_entry_id}"
        )
    legal = find_legal(state, player_id, action)
    if legal is None:
        raise InvalidAction("action_not_legal", f"Action {action.key} is not legal")
    nonce_factory = nonce_factory or random_nonce

    new_state = state.clone()
    turn = new_state.turn
    player = new_state.get_player(player_id)
    movers = [legal.piece_index]
    if legal.is_pair_move and legal.partner_index is not None:
        movers.append(legal.partner_index)
    triggers: List[BonusTrigger] = []
    bonus_entries: List[BankEntry] = []

    remove_entry(turn, legal.bank_entry_id)

    origin = player.pieces[legal.piece_index].position
    landing = legal.target
    for idx in movers:
        player.pieces[idx].position = landing

    glide = None
    arrow = resolve_arrow(landing, player.color)
    if arrow is not None:
        glide = {"from": arrow.tail, "to": arrow.head}
        landing = arrow.head
        for idx in movers:
            player.pieces[idx].position = landing
        bonus = append_bonus(new_state.code, turn, BankSource.ARROW_BONUS, roll_fn)
        bonus_entries.append(bonus)
        kind = TriggerKind.ARROW_OUTER if arrow.kind == ArrowKind.OUTER else TriggerKind.ARROW_INNER
        triggers.append(BonusTrigger(kind, bonus.value))
        logger.debug(
            f"[{new_state.code}] {player_id} glides {arrow.tail}->{arrow.head}, bonus {bonus.value}"
        )

    captured: List[dict] = []
    if is_track(landing) and not is_safe_square(landing):
        attacker = classify_stack(
            [Occupant(player_id, player.color, idx) for idx in movers], landing
        )
        defenders = [
            o for o in square_occupants(new_state.players, landing) if o.player_id != player_id
        ]
        defender = classify_stack(defenders, landing)
        if resolve_landing(attacker, defender, landing, player.color) == Landing.CAPTURE:
            for occ in defenders:
                victim = new_state.get_player(occ.player_id)
                victim.pieces[occ.piece_index].send_to_yard()
                captured.append({"player_id": occ.player_id, "piece_index": occ.piece_index})
            bonus = append_bonus(new_state.code, turn, BankSource.KILL_BONUS, roll_fn)
            bonus_entries.append(bonus)
            triggers.append(BonusTrigger(TriggerKind.KILL, bonus.value))
            logger.debug(
                f"[{new_state.code}] {player_id} captures {len(captured)} at {landing}, bonus {bonus.value}"
            )

    if landing == config.HOME_INDEX:
        player.home_count += len(movers)

    steps = legal.die_value // 2 if legal.is_pair_move else legal.die_value
    new_state.last_event = MatchEvent(
        kind=EventKind.PIECE_MOVED,
        player_id=player_id,
        payload={
            "piece_index": legal.piece_index,
            "from": origin,
            "to": landing,
            "path": compute_path(player.color, origin, steps),
            "is_pair_move": legal.is_pair_move,
            "partner_index": legal.partner_index,
            "glide": glide,
            "captured": captured,
            "bonus_entries": [e.entry_id for e in bonus_entries],
            "bank_entry_id": legal.bank_entry_id,
        },
    )

    if player.home_count >= config.TOKENS_PER_PLAYER:
        new_state.status = MatchStatus.FINISHED
        new_state.winner_id = player_id
        turn.bank = []
        turn.phase = TurnPhase.AWAITING_ROLL
        new_state.last_event = MatchEvent(
            kind=EventKind.GAME_FINISHED,
            player_id=player_id,
            payload={"winner_id": player_id},
        )
        turn.turn_nonce = nonce_factory()
        logger.debug(f"[{new_state.code}] {player_id} wins")
        return MoveResult(state=new_state, bonus_triggers=triggers, discarded=False)

    discarded = False
    if turn.bank and should_discard_bank(player, turn.bank):
        _discard(new_state, player_id, DISCARD_EXACT_SUM)
        discarded = True
    elif turn.bank and not legal_actions(new_state, player_id):
        _discard(new_state, player_id, DISCARD_NO_ACTIONS)
        discarded = True

    if not turn.bank:
        _pass_turn(new_state, player_id)
    else:
        turn.phase = TurnPhase.AWAITING_MOVE
        if bonus_entries:
            turn.bonus_turn_chain += 1

    turn.turn_nonce = nonce_factory()
    return MoveResult(state=new_state, bonus_triggers=triggers, discarded=discarded)
