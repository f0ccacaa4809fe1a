"""
Dice bank: the pool of unspent die values for the active player.

Entry ids are derived from the match code and the per-match sequence counter
carried in the turn record, so they stay unique for the match lifetime.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .config import config
from .errors import StaleBankEntry
from .state import BankEntry, TurnRecord
from .types import BankSource, RollFn


def roll_d6() -> int:
    return random.randint(1, 6)


@dataclass(slots=True)
class SeededRoller:
    """Reproducible d6 backed by its own ``random.Random``."""

    seed: Optional[int] = None
    rng: random.Random = field(init=False)

    def __post_init__(self) -> None:
        self.rng = random.Random(self.seed)

    def __call__(self) -> int:
        return self.rng.randint(1, 6)


@dataclass(slots=True)
class ScriptedRoller:
    """Replays a fixed sequence of faces; raises once exhausted."""

    faces: List[int]
    _cursor: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        for face in self.faces:
            if not 1 <= face <= 6:
                raise ValueError(f"Invalid die face {face}")

    def __call__(self) -> int:
        if self._cursor >= len(self.faces):
            raise IndexError("ScriptedRoller ran out of faces")
        face = self.faces[self._cursor]
        self._cursor += 1
        return face

    @property
    def remaining(self) -> int:
        return len(self.faces) - self._cursor


def _new_entry(code: str, turn: TurnRecord, value: int, source: BankSource) -> BankEntry:
    turn.bank_sequence += 1
    return BankEntry(
        entry_id=f"{code}-{turn.bank_sequence}",
        value=value,
        source=source,
        sequence=turn.bank_sequence,
    )


def roll_chain(code: str, turn: TurnRecord, roll_fn: Optional[RollFn] = None) -> List[BankEntry]:
    """Roll a base die and keep chaining on 6 up to ``CHAIN_CAP`` extra dice.

    The new entries are appended to ``turn.bank`` and returned.
    """
    roll_fn = roll_fn or roll_d6
    added: List[BankEntry] = []
    source = BankSource.BASE
    chained = 0
    while True:
        value = roll_fn()
        entry = _new_entry(code, turn, value, source)
        turn.bank.append(entry)
        added.append(entry)
        if value == 6 and chained < config.CHAIN_CAP:
            source = BankSource.CHAIN_BONUS
            chained += 1
            continue
        break
    turn.last_roll = added[0].value
    return added


def append_bonus(
    code: str, turn: TurnRecord, source: BankSource, roll_fn: Optional[RollFn] = None
) -> BankEntry:
    if source not in (BankSource.ARROW_BONUS, BankSource.KILL_BONUS):
        raise ValueError(f"{source.value} is not a bonus source")
    roll_fn = roll_fn or roll_d6
    entry = _new_entry(code, turn, roll_fn(), source)
    turn.bank.append(entry)
    return entry


def find_entry(bank: Iterable[BankEntry], entry_id: str) -> Optional[BankEntry]:
    for entry in bank:
        if entry.entry_id == entry_id:
            return entry
    return None


def remove_entry(turn: TurnRecord, entry_id: str) -> BankEntry:
    for idx, entry in enumerate(turn.bank):
        if entry.entry_id == entry_id:
            return turn.bank.pop(idx)
    raise StaleBankEntry("bank_entry_not_found", f"Bank entry not found: {entry_id}")


def bank_total(bank: Iterable[BankEntry]) -> int:
    return sum(e.value for e in bank)
