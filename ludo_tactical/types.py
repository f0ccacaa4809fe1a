from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple


class Color(str, Enum):
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"


class MatchStatus(str, Enum):
    LOBBY = "lobby"
    RUNNING = "running"
    FINISHED = "finished"


class PlayerKind(str, Enum):
    HUMAN = "human"
    BOT = "bot"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TurnPhase(str, Enum):
    AWAITING_ROLL = "awaiting_roll"
    AWAITING_MOVE = "awaiting_move"


class BankSource(str, Enum):
    BASE = "base"
    CHAIN_BONUS = "chain_bonus"
    ARROW_BONUS = "arrow_bonus"
    KILL_BONUS = "kill_bonus"


class StackKind(str, Enum):
    EMPTY = "empty"
    SINGLE = "single"
    HEAVY_PAIR = "heavy_pair"
    TRIPLE = "triple"
    QUAD = "quad"
    ALLIED = "allied"
    MIXED_ENEMY = "mixed_enemy"


class Landing(str, Enum):
    NORMAL = "normal_land"
    CAPTURE = "capture"
    COEXIST = "coexist_no_capture"
    BLOCKED = "blocked"


class ArrowKind(str, Enum):
    OUTER = "outer"
    INNER = "inner"


class EventKind(str, Enum):
    DICE_ROLL = "dice_roll"
    PIECE_MOVED = "piece_moved"
    BANK_DISCARDED = "bank_discarded"
    GAME_FINISHED = "game_finished"


class TriggerKind(str, Enum):
    ARROW_OUTER = "arrow_outer"
    ARROW_INNER = "arrow_inner"
    KILL = "kill"


# Injectable sources of non-determinism
RollFn = Callable[[], int]
NonceFn = Callable[[], str]


@dataclass(frozen=True, slots=True)
class Action:
    """A concrete legal move: one bank die spent on one token (or a heavy pair)."""

    bank_entry_id: str
    die_value: int
    piece_index: int
    target: int  # pre-glide destination
    is_pair_move: bool = False
    partner_index: Optional[int] = None
    glide_head: Optional[int] = None  # post-glide square when the target is an arrow tail

    @property
    def key(self) -> Tuple[str, int, bool]:
        return (self.bank_entry_id, self.piece_index, self.is_pair_move)

    @property
    def landing(self) -> int:
        return self.glide_head if self.glide_head is not None else self.target

    def to_dict(self) -> dict:
        return {
            "bank_entry_id": self.bank_entry_id,
            "die_value": self.die_value,
            "piece_index": self.piece_index,
            "target": self.target,
            "is_pair_move": self.is_pair_move,
            "partner_index": self.partner_index,
            "glide_head": self.glide_head,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        return cls(
            bank_entry_id=data["bank_entry_id"],
            die_value=int(data["die_value"]),
            piece_index=int(data["piece_index"]),
            target=int(data["target"]),
            is_pair_move=bool(data.get("is_pair_move", False)),
            partner_index=data.get("partner_index"),
            glide_head=data.get("glide_head"),
        )


@dataclass(frozen=True, slots=True)
class BonusTrigger:
    kind: TriggerKind
    value: int
