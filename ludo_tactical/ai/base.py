from __future__ import annotations

from typing import ClassVar, List, Optional

from ..moves import legal_actions_for_entry
from ..state import MatchState
from ..types import Action


class BotStrategy:
    """Base class for bot tiers.

    Strategies only read the state they are given; any lookahead runs on
    copies produced by the resolver.
    """

    name: ClassVar[str] = "base"
    description: ClassVar[str] = ""

    def choose(self, state: MatchState, player_id: str) -> Optional[Action]:
        raise NotImplementedError

    @staticmethod
    def first_entry_actions(state: MatchState, player_id: str) -> List[Action]:
        """Legal actions for the oldest usable die in the bank (roll order)."""
        for entry in state.turn.bank:
            actions = legal_actions_for_entry(state, player_id, entry)
            if actions:
                return actions
        return []
