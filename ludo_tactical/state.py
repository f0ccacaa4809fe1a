"""
Match state aggregate for the tactical rules engine.

Every transition deep-copies the incoming state and returns a new one; the
objects defined here are never shared between two states.
"""

from __future__ import annotations

import copy
import random
import string
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import config
from .errors import InternalInvariantViolation, InvalidTurn
from .types import (
    BankSource,
    Color,
    Difficulty,
    EventKind,
    MatchStatus,
    NonceFn,
    PlayerKind,
    TurnPhase,
)


def random_nonce() -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choices(alphabet, k=config.NONCE_LENGTH))


@dataclass(slots=True)
class Piece:
    """One token. -1 yard; 0..51 shared track; 52..57 lane; 58 finished."""

    piece_id: int
    position: int = -1

    def is_in_yard(self) -> bool:
        return self.position == config.YARD

    def is_on_track(self) -> bool:
        return 0 <= self.position < config.TRACK_LENGTH

    def is_in_lane(self) -> bool:
        return config.HOME_LANE_START <= self.position < config.HOME_INDEX

    def is_finished(self) -> bool:
        return self.position == config.HOME_INDEX

    def send_to_yard(self) -> None:
        self.position = config.YARD


@dataclass(slots=True)
class Player:
    player_id: str
    color: Color
    name: str = ""
    kind: PlayerKind = PlayerKind.HUMAN
    difficulty: Optional[Difficulty] = None
    connected: bool = True
    pieces: List[Piece] = field(default_factory=list)
    home_count: int = 0

    def __post_init__(self) -> None:
        if not self.pieces:
            self.pieces = [Piece(piece_id=i) for i in range(config.TOKENS_PER_PLAYER)]
        if not self.name:
            self.name = self.color.value.title()

    @property
    def is_bot(self) -> bool:
        return self.kind == PlayerKind.BOT

    def positions(self) -> List[int]:
        return [p.position for p in self.pieces]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "color": self.color.value,
            "name": self.name,
            "kind": self.kind.value,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "connected": self.connected,
            "pieces": [p.position for p in self.pieces],
            "home_count": self.home_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        difficulty = data.get("difficulty")
        return cls(
            player_id=data["player_id"],
            color=Color(data["color"]),
            name=data.get("name", ""),
            kind=PlayerKind(data.get("kind", PlayerKind.HUMAN.value)),
            difficulty=Difficulty(difficulty) if difficulty else None,
            connected=bool(data.get("connected", True)),
            pieces=[
                Piece(piece_id=i, position=int(pos))
                for i, pos in enumerate(data["pieces"])
            ],
            home_count=int(data.get("home_count", 0)),
        )


@dataclass(slots=True)
class BankEntry:
    entry_id: str
    value: int
    source: BankSource
    sequence: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "value": self.value,
            "source": self.source.value,
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BankEntry":
        return cls(
            entry_id=data["entry_id"],
            value=int(data["value"]),
            source=BankSource(data["source"]),
            sequence=int(data["sequence"]),
        )


@dataclass(slots=True)
class TurnRecord:
    phase: TurnPhase = TurnPhase.AWAITING_ROLL
    bank: List[BankEntry] = field(default_factory=list)
    bank_sequence: int = 0  # monotonic for the whole match, never reset
    turn_nonce: str = ""
    bonus_turn_chain: int = 0
    last_roll: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "bank": [e.to_dict() for e in self.bank],
            "bank_sequence": self.bank_sequence,
            "turn_nonce": self.turn_nonce,
            "bonus_turn_chain": self.bonus_turn_chain,
            "last_roll": self.last_roll,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TurnRecord":
        return cls(
            phase=TurnPhase(data["phase"]),
            bank=[BankEntry.from_dict(e) for e in data.get("bank", [])],
            bank_sequence=int(data.get("bank_sequence", 0)),
            turn_nonce=data.get("turn_nonce", ""),
            bonus_turn_chain=int(data.get("bonus_turn_chain", 0)),
            last_roll=data.get("last_roll"),
        )


@dataclass(slots=True)
class MatchEvent:
    kind: EventKind
    player_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "player_id": self.player_id,
            "payload": copy.deepcopy(self.payload),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchEvent":
        return cls(
            kind=EventKind(data["kind"]),
            player_id=data.get("player_id"),
            payload=copy.deepcopy(data.get("payload", {})),
        )


@dataclass(slots=True)
class MatchState:
    code: str
    players: List[Player]
    active_player_id: str
    status: MatchStatus = MatchStatus.RUNNING
    turn: TurnRecord = field(default_factory=TurnRecord)
    winner_id: Optional[str] = None
    last_event: Optional[MatchEvent] = None

    # --- Lookups ---
    def get_player(self, player_id: str) -> Player:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise InvalidTurn("unknown_player", f"No player '{player_id}' in match {self.code}")

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    @property
    def active_player(self) -> Player:
        return self.get_player(self.active_player_id)

    def next_player_id(self, player_id: str) -> str:
        ids = [p.player_id for p in self.players]
        idx = ids.index(player_id)
        return ids[(idx + 1) % len(ids)]

    def clone(self) -> "MatchState":
        return copy.deepcopy(self)

    # --- Persisted blob ---
    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "status": self.status.value,
            "players": [p.to_dict() for p in self.players],
            "active_player_id": self.active_player_id,
            "turn": self.turn.to_dict(),
            "winner_id": self.winner_id,
            "last_event": self.last_event.to_dict() if self.last_event else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchState":
        last_event = data.get("last_event")
        return cls(
            code=data["code"],
            status=MatchStatus(data["status"]),
            players=[Player.from_dict(p) for p in data["players"]],
            active_player_id=data["active_player_id"],
            turn=TurnRecord.from_dict(data["turn"]),
            winner_id=data.get("winner_id"),
            last_event=MatchEvent.from_dict(last_event) if last_event else None,
        )


def check_invariants(state: MatchState) -> None:
    """Raise InternalInvariantViolation if ``state`` breaks a data-model invariant."""
    for player in state.players:
        if len(player.pieces) != config.TOKENS_PER_PLAYER:
            raise InternalInvariantViolation(
                "invalid_position",
                f"{player.player_id} holds {len(player.pieces)} pieces",
            )
        for piece in player.pieces:
            if not (piece.position == config.YARD or 0 <= piece.position <= config.HOME_INDEX):
                raise InternalInvariantViolation(
                    "invalid_position",
                    f"{player.player_id} piece {piece.piece_id} at {piece.position}",
                )
        finished = sum(1 for p in player.pieces if p.is_finished())
        if finished != player.home_count:
            raise InternalInvariantViolation(
                "home_count_mismatch",
                f"{player.player_id} home_count={player.home_count} finished={finished}",
            )

    if state.find_player(state.active_player_id) is None:
        raise InternalInvariantViolation(
            "unknown_player", f"Active player '{state.active_player_id}' not in match"
        )

    if state.turn.phase == TurnPhase.AWAITING_MOVE and not state.turn.bank:
        raise InternalInvariantViolation(
            "invalid_phase_bank", "awaiting_move with an empty bank"
        )

    ids = [e.entry_id for e in state.turn.bank]
    if len(ids) != len(set(ids)):
        raise InternalInvariantViolation("invalid_phase_bank", "duplicate bank entry ids")
    for entry in state.turn.bank:
        if not 1 <= entry.value <= 6:
            raise InternalInvariantViolation(
                "invalid_phase_bank", f"bank entry {entry.entry_id} has value {entry.value}"
            )


def new_match(
    code: str,
    players: Sequence[Player],
    nonce_factory: Optional[NonceFn] = None,
) -> MatchState:
    """Create a running match: all tokens in the yard, first seat to roll."""
    if not 2 <= len(players) <= 4:
        raise ValueError("A match needs between 2 and 4 players")
    colors = [p.color for p in players]
    if len(set(colors)) != len(colors):
        raise ValueError("Each player needs a distinct color")
    nonce_factory = nonce_factory or random_nonce
    seats = [copy.deepcopy(p) for p in players]
    return MatchState(
        code=code,
        players=seats,
        active_player_id=seats[0].player_id,
        status=MatchStatus.RUNNING,
        turn=TurnRecord(turn_nonce=nonce_factory()),
    )
