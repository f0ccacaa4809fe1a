"""
Bot tiers - three difficulty levels sharing the generator/resolver contract.
"""

from __future__ import annotations

from typing import Dict, Optional, Type

from ..state import MatchState
from ..types import Action, Difficulty
from .base import BotStrategy
from .easy import EasyStrategy
from .hard import HardStrategy
from .medium import MediumStrategy

STRATEGIES: Dict[Difficulty, Type[BotStrategy]] = {
    Difficulty.EASY: EasyStrategy,
    Difficulty.MEDIUM: MediumStrategy,
    Difficulty.HARD: HardStrategy,
}


def create(difficulty: Difficulty | str) -> BotStrategy:
    try:
        key = Difficulty(difficulty)
    except ValueError as e:
        available = [d.value for d in STRATEGIES]
        raise ValueError(f"Unknown difficulty '{difficulty}'. Available: {available}") from e
    return STRATEGIES[key]()


def best_bot_action(
    state: MatchState, player_id: str, difficulty: Optional[Difficulty | str] = None
) -> Optional[Action]:
    """Pick an action for ``player_id``; None when the bank is empty or nothing is legal."""
    if not state.turn.bank:
        return None
    if difficulty is None:
        player = state.get_player(player_id)
        difficulty = player.difficulty or Difficulty.MEDIUM
    return create(difficulty).choose(state, player_id)


__all__ = [
    "BotStrategy",
    "EasyStrategy",
    "MediumStrategy",
    "HardStrategy",
    "STRATEGIES",
    "create",
    "best_bot_action",
]
