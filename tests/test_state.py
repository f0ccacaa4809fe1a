from __future__ import annotations

import unittest

from ludo_tactical.errors import InternalInvariantViolation, InvalidTurn
from ludo_tactical.state import (
    BankEntry,
    MatchEvent,
    MatchState,
    Player,
    check_invariants,
    new_match,
)
from ludo_tactical.types import (
    Action,
    BankSource,
    Color,
    Difficulty,
    EventKind,
    PlayerKind,
    TurnPhase,
)


def two_players() -> list[Player]:
    return [
        Player("p1", Color.RED),
        Player("p2", Color.YELLOW, kind=PlayerKind.BOT, difficulty=Difficulty.HARD),
    ]


class NewMatchTests(unittest.TestCase):
    def test_defaults(self) -> None:
        state = new_match("M1", two_players(), nonce_factory=lambda: "abc")
        self.assertEqual(state.active_player_id, "p1")
        self.assertEqual(state.turn.phase, TurnPhase.AWAITING_ROLL)
        self.assertEqual(state.turn.turn_nonce, "abc")
        self.assertEqual(state.players[0].name, "Red")
        self.assertTrue(state.players[1].is_bot)
        self.assertEqual(state.players[0].positions(), [-1, -1, -1, -1])
        check_invariants(state)

    def test_seat_validation(self) -> None:
        with self.assertRaises(ValueError):
            new_match("M1", [Player("p1", Color.RED)])
        with self.assertRaises(ValueError):
            new_match("M1", [Player("p1", Color.RED), Player("p2", Color.RED)])

    def test_players_are_copied(self) -> None:
        players = two_players()
        state = new_match("M1", players)
        state.players[0].pieces[0].position = 5
        self.assertEqual(players[0].pieces[0].position, -1)

    def test_lookups(self) -> None:
        state = new_match("M1", two_players())
        self.assertEqual(state.next_player_id("p2"), "p1")
        self.assertIsNone(state.find_player("nobody"))
        with self.assertRaises(InvalidTurn):
            state.get_player("nobody")


class SerializationTests(unittest.TestCase):
    def test_state_blob_survives_reload(self) -> None:
        state = new_match("M1", two_players(), nonce_factory=lambda: "abc")
        state.players[0].pieces[2].position = 53
        state.turn.bank = [BankEntry("M1-1", 6, BankSource.BASE, 1)]
        state.turn.bank_sequence = 1
        state.turn.phase = TurnPhase.AWAITING_MOVE
        state.last_event = MatchEvent(EventKind.DICE_ROLL, "p1", {"values": [6]})

        blob = state.to_dict()
        self.assertEqual(MatchState.from_dict(blob).to_dict(), blob)
        self.assertEqual(blob["players"][1]["difficulty"], "hard")

    def test_action_dict(self) -> None:
        action = Action("M1-3", 4, 1, 16, is_pair_move=True, partner_index=0)
        self.assertEqual(Action.from_dict(action.to_dict()), action)
        self.assertEqual(action.key, ("M1-3", 1, True))
        self.assertEqual(action.landing, 16)


class InvariantTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = new_match("M1", two_players())

    def assert_violation(self, reason: str) -> None:
        with self.assertRaises(InternalInvariantViolation) as ctx:
            check_invariants(self.state)
        self.assertEqual(ctx.exception.reason, reason)

    def test_home_count_must_match(self) -> None:
        self.state.players[0].pieces[0].position = 58
        self.assert_violation("home_count_mismatch")

    def test_position_range(self) -> None:
        self.state.players[0].pieces[0].position = 59
        self.assert_violation("invalid_position")

    def test_awaiting_move_needs_bank(self) -> None:
        self.state.turn.phase = TurnPhase.AWAITING_MOVE
        self.assert_violation("invalid_phase_bank")

    def test_duplicate_entry_ids(self) -> None:
        entry = BankEntry("M1-1", 3, BankSource.BASE, 1)
        self.state.turn.bank = [entry, entry]
        self.assert_violation("invalid_phase_bank")


if __name__ == "__main__":
    unittest.main()
