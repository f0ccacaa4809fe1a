"""
Ludo Tactical Edition rules engine.

A pure, deterministic core: (match state, action) -> (new state, effects).
"""

from .board import compute_path
from .config import config
from .engine import (
    auto_pick_bank_entry,
    best_bot_action,
    bot_step,
    is_legal_action,
    legal_actions,
    move,
    move_piece,
    roll,
)
from .errors import (
    InternalInvariantViolation,
    InvalidAction,
    InvalidTurn,
    LudoTacticalError,
    StaleBankEntry,
)
from .resolver import MoveResult, RollResult
from .state import (
    BankEntry,
    MatchEvent,
    MatchState,
    Piece,
    Player,
    TurnRecord,
    check_invariants,
    new_match,
)
from .types import (
    Action,
    BankSource,
    BonusTrigger,
    Color,
    Difficulty,
    EventKind,
    MatchStatus,
    PlayerKind,
    TurnPhase,
)

__all__ = [
    "Action",
    "BankEntry",
    "BankSource",
    "BonusTrigger",
    "Color",
    "Difficulty",
    "EventKind",
    "InternalInvariantViolation",
    "InvalidAction",
    "InvalidTurn",
    "LudoTacticalError",
    "MatchEvent",
    "MatchState",
    "MatchStatus",
    "MoveResult",
    "Piece",
    "Player",
    "PlayerKind",
    "RollResult",
    "StaleBankEntry",
    "TurnPhase",
    "TurnRecord",
    "auto_pick_bank_entry",
    "best_bot_action",
    "bot_step",
    "check_invariants",
    "compute_path",
    "config",
    "is_legal_action",
    "legal_actions",
    "move",
    "move_piece",
    "new_match",
    "roll",
]
