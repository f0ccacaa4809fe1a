from __future__ import annotations

import unittest
from typing import Sequence

from loguru import logger

from ludo_tactical.ai import (
    EasyStrategy,
    HardStrategy,
    MediumStrategy,
    best_bot_action,
    create,
)
from ludo_tactical.config import config
from ludo_tactical.state import BankEntry, MatchState, Player, new_match
from ludo_tactical.types import BankSource, Color, Difficulty, TurnPhase


def make_state(
    red: Sequence[int] = (-1, -1, -1, -1),
    green: Sequence[int] = (-1, -1, -1, -1),
    bank: Sequence[int] = (),
) -> MatchState:
    players = [Player("p1", Color.RED), Player("p2", Color.GREEN)]
    for player, positions in zip(players, (red, green)):
        for piece, pos in zip(player.pieces, positions):
            piece.position = pos
        player.home_count = sum(1 for pos in positions if pos == config.HOME_INDEX)
    state = new_match("AI", players, nonce_factory=lambda: "n0")
    for seq, value in enumerate(bank, start=1):
        state.turn.bank.append(BankEntry(f"AI-{seq}", value, BankSource.BASE, seq))
    state.turn.bank_sequence = len(bank)
    if bank:
        state.turn.phase = TurnPhase.AWAITING_MOVE
    return state


class RegistryTests(unittest.TestCase):
    def test_create_by_name_or_enum(self) -> None:
        self.assertIsInstance(create("easy"), EasyStrategy)
        self.assertIsInstance(create(Difficulty.HARD), HardStrategy)
        with self.assertRaises(ValueError):
            create("impossible")

    def test_default_difficulty_is_medium(self) -> None:
        state = make_state(red=(10, 20, -1, -1), green=(23, -1, -1, -1), bank=(3,))
        action = best_bot_action(state, "p1")
        self.assertEqual(action.piece_index, 1)


class EasyTests(unittest.TestCase):
    def test_moves_least_advanced_token(self) -> None:
        state = make_state(red=(10, 20, -1, -1), bank=(2,))
        self.assertEqual(EasyStrategy().choose(state, "p1").piece_index, 0)

    def test_skips_oldest_die_when_unusable(self) -> None:
        state = make_state(red=(57, 58, 58, 58), bank=(6, 1))
        action = EasyStrategy().choose(state, "p1")
        self.assertEqual(action.bank_entry_id, "AI-2")

    def test_empty_bank(self) -> None:
        self.assertIsNone(EasyStrategy().choose(make_state(), "p1"))


class MediumTests(unittest.TestCase):
    def test_prefers_capture(self) -> None:
        state = make_state(red=(10, 20, -1, -1), green=(23, -1, -1, -1), bank=(3,))
        self.assertEqual(MediumStrategy().choose(state, "p1").piece_index, 1)

    def test_prefers_arrow_over_plain_step(self) -> None:
        state = make_state(red=(1, 30, -1, -1), bank=(3,))
        action = MediumStrategy().choose(state, "p1")
        self.assertEqual(action.piece_index, 0)
        self.assertEqual(action.glide_head, 9)

    def test_finish_scores_highest_in_lane(self) -> None:
        strategy = MediumStrategy()
        state = make_state(red=(56, 54, -1, -1), bank=(2,))
        self.assertEqual(strategy.choose(state, "p1").piece_index, 0)


class HardTests(unittest.TestCase):
    def test_finishes_a_token_over_plain_progress(self) -> None:
        state = make_state(red=(10, 56, 58, 58), bank=(2,))
        self.assertEqual(HardStrategy().choose(state, "p1").piece_index, 1)

    def test_looks_ahead_to_a_winning_order(self) -> None:
        state = make_state(red=(55, 56, 58, 58), bank=(3, 2))
        action = HardStrategy().choose(state, "p1")
        # spending the 2 on the token at 55 strands the 3
        self.assertIn((action.bank_entry_id, action.piece_index), {("AI-1", 0), ("AI-2", 1)})

    def test_search_log_lines_are_marked(self) -> None:
        state = make_state(red=(10, 56, 58, 58), bank=(2,))
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            HardStrategy().choose(state, "p1")
        finally:
            logger.remove(handler_id)
        resolver_records = [r for r in records if r["name"] == "ludo_tactical.resolver"]
        self.assertTrue(resolver_records)
        self.assertTrue(all(r["extra"].get("simulated") for r in resolver_records))

    def test_choice_is_reproducible(self) -> None:
        state = make_state(red=(1, 14, 14, -1), green=(9, 18, -1, -1), bank=(6, 3))
        first = HardStrategy().choose(state, "p1")
        second = HardStrategy().choose(state, "p1")
        self.assertEqual(first, second)

    def test_state_is_not_mutated_by_search(self) -> None:
        state = make_state(red=(1, 14, 14, -1), green=(9, 18, -1, -1), bank=(6, 3))
        before = state.to_dict()
        HardStrategy(max_depth=2).choose(state, "p1")
        self.assertEqual(state.to_dict(), before)

    def test_score_state_rewards_stacks(self) -> None:
        strategy = HardStrategy()
        apart = make_state(red=(20, 24, -1, -1))
        stacked = make_state(red=(22, 22, -1, -1))
        self.assertGreater(
            strategy.score_state(stacked, "p1"), strategy.score_state(apart, "p1")
        )


if __name__ == "__main__":
    unittest.main()
