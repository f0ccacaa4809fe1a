from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..state import MatchState
from ..types import Action
from .base import BotStrategy


@dataclass(slots=True)
class EasyStrategy(BotStrategy):
    """Spends dice in roll order on the token nearest the yard."""

    name: ClassVar[str] = "easy"
    description: ClassVar[str] = "Moves the least advanced token with the oldest die"

    def choose(self, state: MatchState, player_id: str) -> Optional[Action]:
        actions = self.first_entry_actions(state, player_id)
        if not actions:
            return None
        player = state.get_player(player_id)
        # min() keeps the first action on ties, i.e. generator order
        return min(actions, key=lambda a: player.pieces[a.piece_index].position)
