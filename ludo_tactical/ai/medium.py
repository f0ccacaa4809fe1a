from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from ..board import Occupant, is_safe_square, is_track, progress, square_occupants
from ..combat import can_capture
from ..config import MediumWeights, config, medium_weights
from ..stack import classify_stack
from ..state import MatchState, Player
from ..types import Action
from .base import BotStrategy


@dataclass(slots=True)
class MediumStrategy(BotStrategy):
    """Greedy one-die scorer: kills, arrows, finishing and safety."""

    name: ClassVar[str] = "medium"
    description: ClassVar[str] = "Scores each move of the oldest die with fixed weights"

    weights: MediumWeights = field(default_factory=lambda: medium_weights)

    def choose(self, state: MatchState, player_id: str) -> Optional[Action]:
        actions = self.first_entry_actions(state, player_id)
        if not actions:
            return None
        player = state.get_player(player_id)
        best = actions[0]
        best_score = float("-inf")
        for action in actions:
            score = self.score_action(state, player, action)
            if score > best_score:
                best, best_score = action, score
        return best

    def _captures(self, state: MatchState, player: Player, action: Action) -> bool:
        landing = action.landing
        if not is_track(landing) or is_safe_square(landing):
            return False
        movers = [action.piece_index]
        if action.is_pair_move and action.partner_index is not None:
            movers.append(action.partner_index)
        attacker = classify_stack(
            [Occupant(player.player_id, player.color, i) for i in movers], landing
        )
        defenders = [
            o for o in square_occupants(state.players, landing)
            if o.player_id != player.player_id
        ]
        if not defenders:
            return False
        return can_capture(attacker, classify_stack(defenders, landing), landing, player.color)

    def score_action(self, state: MatchState, player: Player, action: Action) -> float:
        w = self.weights
        landing = action.landing
        current = player.pieces[action.piece_index].position
        score = 0.0

        if self._captures(state, player, action):
            score += w.capture
        if action.glide_head is not None:
            score += w.arrow
        if landing == config.HOME_INDEX:
            score += w.finish
        if landing >= config.HOME_LANE_START and 0 <= current < config.HOME_LANE_START:
            score += w.enter_lane
        if is_safe_square(landing):
            score += w.safe
        elif is_track(landing):
            score += w.exposed

        score += progress(player.color, landing) * w.progress
        return score
