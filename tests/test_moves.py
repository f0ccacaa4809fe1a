from __future__ import annotations

import unittest
from typing import Sequence

from ludo_tactical.config import config
from ludo_tactical.moves import (
    auto_pick_bank_entry,
    is_legal_action,
    legal_actions,
    legal_actions_for_entry,
)
from ludo_tactical.state import BankEntry, MatchState, Player, new_match
from ludo_tactical.types import BankSource, Color, TurnPhase


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
    state = new_match("T", players, nonce_factory=lambda: "n0")
    for seq, value in enumerate(bank, start=1):
        state.turn.bank.append(BankEntry(f"T-{seq}", value, BankSource.BASE, seq))
    state.turn.bank_sequence = len(bank)
    if bank:
        state.turn.phase = TurnPhase.AWAITING_MOVE
    return state


class YardAndTrackTests(unittest.TestCase):
    def test_every_yard_token_can_exit_on_six(self) -> None:
        state = make_state(bank=(6, 3))
        actions = legal_actions(state, "p1")
        self.assertEqual(sorted(a.piece_index for a in actions), [0, 1, 2, 3])
        self.assertTrue(all(a.target == 0 and a.bank_entry_id == "T-1" for a in actions))

    def test_no_exit_without_six(self) -> None:
        self.assertEqual(legal_actions(make_state(bank=(5,)), "p1"), [])

    def test_unknown_player_has_no_actions(self) -> None:
        self.assertEqual(legal_actions(make_state(bank=(6,)), "ghost"), [])

    def test_keys_are_unique(self) -> None:
        state = make_state(red=(8, 8, 20, -1), bank=(4, 6, 2))
        keys = [a.key for a in legal_actions(state, "p1")]
        self.assertEqual(len(keys), len(set(keys)))


class StackMoveTests(unittest.TestCase):
    def test_pair_off_safe_square_moves_together_on_even_die(self) -> None:
        state = make_state(red=(14, 14, -1, -1), bank=(4,))
        actions = legal_actions(state, "p1")
        self.assertEqual(len(actions), 2)
        for action in actions:
            self.assertTrue(action.is_pair_move)
            self.assertEqual(action.target, 16)
        self.assertEqual({(a.piece_index, a.partner_index) for a in actions}, {(0, 1), (1, 0)})

    def test_pair_off_safe_square_cannot_use_odd_die(self) -> None:
        self.assertEqual(legal_actions(make_state(red=(14, 14, -1, -1), bank=(3,)), "p1"), [])

    def test_pair_on_safe_square_may_split(self) -> None:
        state = make_state(red=(8, 8, -1, -1), bank=(4,))
        piece0 = [a for a in legal_actions(state, "p1") if a.piece_index == 0]
        self.assertEqual({(a.is_pair_move, a.target) for a in piece0}, {(True, 10), (False, 12)})

    def test_single_blocked_by_enemy_triple(self) -> None:
        state = make_state(red=(18, -1, -1, -1), green=(20, 20, 20, -1), bank=(2,))
        self.assertEqual(legal_actions(state, "p1"), [])

    def test_single_may_join_enemy_pair(self) -> None:
        state = make_state(red=(18, -1, -1, -1), green=(20, 20, -1, -1), bank=(2,))
        self.assertEqual([a.target for a in legal_actions(state, "p1")], [20])

    def test_triple_on_safe_square_does_not_block(self) -> None:
        # start cells are safe, so a green triple on 13 does not block red
        state = make_state(red=(10, -1, -1, -1), green=(13, 13, 13, -1), bank=(3,))
        self.assertEqual([a.target for a in legal_actions(state, "p1")], [13])


class GlideAndLaneTests(unittest.TestCase):
    def test_outer_arrow_reports_head(self) -> None:
        state = make_state(red=(1, -1, -1, -1), bank=(3,))
        (action,) = legal_actions(state, "p1")
        self.assertEqual((action.target, action.glide_head, action.landing), (4, 9, 9))

    def test_blocked_arrow_head_rejects_move(self) -> None:
        state = make_state(red=(1, -1, -1, -1), green=(9, 9, 9, -1), bank=(3,))
        self.assertEqual(legal_actions(state, "p1"), [])

    def test_inner_arrow_only_for_owner(self) -> None:
        red = make_state(red=(49, -1, -1, -1), bank=(1,))
        self.assertEqual(legal_actions(red, "p1")[0].landing, 52)
        green = make_state(green=(49, -1, -1, -1), bank=(1,))
        self.assertEqual(legal_actions(green, "p2")[0].landing, 50)

    def test_lane_overshoot_is_illegal(self) -> None:
        self.assertEqual(legal_actions(make_state(red=(56, 58, 58, 58), bank=(3,)), "p1"), [])
        (action,) = legal_actions(make_state(red=(56, 58, 58, 58), bank=(2,)), "p1")
        self.assertEqual(action.target, config.HOME_INDEX)

    def test_finished_tokens_never_move(self) -> None:
        state = make_state(red=(58, 58, 58, 20), bank=(1,))
        self.assertEqual([a.piece_index for a in legal_actions(state, "p1")], [3])


class HelperQueryTests(unittest.TestCase):
    def test_auto_pick_and_is_legal(self) -> None:
        state = make_state(bank=(3, 6))
        self.assertEqual(auto_pick_bank_entry(state, "p1", 0), "T-2")
        self.assertFalse(is_legal_action(state, "p1", "T-1", 0))
        self.assertTrue(is_legal_action(state, "p1", "T-2", 0))
        self.assertFalse(is_legal_action(state, "p1", "T-9", 0))
        self.assertIsNone(auto_pick_bank_entry(make_state(bank=(3,)), "p1", 0))

    def test_per_entry_generation(self) -> None:
        state = make_state(red=(20, -1, -1, -1), bank=(6, 2))
        by_entry = legal_actions_for_entry(state, "p1", state.turn.bank[1])
        self.assertEqual([(a.piece_index, a.target) for a in by_entry], [(0, 22)])


if __name__ == "__main__":
    unittest.main()
