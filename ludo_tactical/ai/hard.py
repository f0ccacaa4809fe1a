"""
Hard tier: bounded lookahead over the whole bank.

Each candidate is applied through the real resolver on a copy. While the
mover keeps the turn with dice left, the search recurses (up to
``AI_MAX_DEPTH`` plies) and the candidate is valued by the best line it
opens. Bonus dice rolled during simulation come from a roller seeded by the
bank sequence, so the choice is reproducible for a given state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple

from loguru import logger

from ..board import is_lane, is_safe_square, is_track, progress, track_counts
from ..config import HardWeights, config, hard_weights
from ..dice import SeededRoller
from ..errors import LudoTacticalError
from ..home_stretch import should_discard_bank
from ..moves import legal_actions
from ..resolver import apply_move
from ..state import MatchState
from ..types import Action
from .base import BotStrategy


def _sim_nonce() -> str:
    return "sim"


@dataclass(slots=True)
class HardStrategy(BotStrategy):
    """Searches bank sequencing, stacking and bonus chains."""

    name: ClassVar[str] = "hard"
    description: ClassVar[str] = "Bounded lookahead over the entire bank"

    weights: HardWeights = field(default_factory=lambda: hard_weights)
    max_depth: int = field(default_factory=lambda: config.AI_MAX_DEPTH)

    def choose(self, state: MatchState, player_id: str) -> Optional[Action]:
        if not state.turn.bank:
            return None
        actions = legal_actions(state, player_id)
        if not actions:
            return None
        roller = SeededRoller(seed=state.turn.bank_sequence)
        _, best = self._search(state, player_id, 0, roller)
        if best is None:
            logger.warning(f"[{state.code}] hard AI found no line, using first legal action")
            return actions[0]
        return best

    def _search(
        self, state: MatchState, player_id: str, depth: int, roller: SeededRoller
    ) -> Tuple[float, Optional[Action]]:
        best_score = float("-inf")
        best_action: Optional[Action] = None
        for action in legal_actions(state, player_id):
            try:
                # resolver log lines from search carry extra["simulated"]
                with logger.contextualize(simulated=True):
                    result = apply_move(
                        state, player_id, action, roll_fn=roller, nonce_factory=_sim_nonce
                    )
            except LudoTacticalError as e:
                logger.warning(f"[{state.code}] skipping simulated action {action.key}: {e}")
                continue

            after = result.state
            if (
                after.active_player_id == player_id
                and after.turn.bank
                and after.winner_id is None
                and depth + 1 < self.max_depth
            ):
                score, _ = self._search(after, player_id, depth + 1, roller)
                if score == float("-inf"):
                    score = self.score_state(after, player_id)
            else:
                score = self.score_state(after, player_id)
            if result.discarded:
                score += self.weights.discarded

            if score > best_score:
                best_score, best_action = score, action
        return best_score, best_action

    def score_state(self, state: MatchState, player_id: str) -> float:
        w = self.weights
        if state.winner_id == player_id:
            return w.win
        if state.winner_id is not None:
            return w.lose
        player = state.get_player(player_id)

        score = player.home_count * w.home_count
        for piece in player.pieces:
            pos = piece.position
            if piece.is_finished():
                score += w.finished_token
            elif piece.is_in_yard():
                score += w.yard_token
            else:
                score += progress(player.color, pos) * w.progress
                if is_lane(pos):
                    score += w.lane_token
                if is_track(pos) and is_safe_square(pos):
                    score += w.safe_token

        counts = track_counts(player)
        score += int((counts == 2).sum()) * w.pair
        score += int((counts >= 3).sum()) * w.triple

        for other in state.players:
            if other.player_id != player_id:
                score += other.home_count * w.opponent_home_count

        if should_discard_bank(player, state.turn.bank):
            score += w.discard_risk
        return score
