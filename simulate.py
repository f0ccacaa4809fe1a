import argparse
import sys
import time

from loguru import logger

from ludo_tactical import (
    Color,
    Difficulty,
    MatchStatus,
    Player,
    bot_step,
    check_invariants,
    new_match,
)
from ludo_tactical.config import config
from ludo_tactical.dice import SeededRoller
from ludo_tactical.types import PlayerKind

COLOR_ORDER = [Color.RED, Color.GREEN, Color.YELLOW, Color.BLUE]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a bot-vs-bot tactical Ludo match")
    parser.add_argument("--seed", type=int, default=42, help="Dice seed")
    parser.add_argument(
        "--players", type=int, default=4, choices=[2, 3, 4], help="Number of seats"
    )
    parser.add_argument(
        "--difficulty",
        type=str,
        nargs="+",
        default=[Difficulty.MEDIUM.value],
        choices=[d.value for d in Difficulty],
        help="Bot tier per seat (last value repeats for the remaining seats)",
    )
    parser.add_argument("--max-steps", type=int, default=config.MAX_TURNS)
    return parser.parse_args()


def make_players(count: int, difficulties: list[str]) -> list[Player]:
    players = []
    for idx in range(count):
        tier = difficulties[min(idx, len(difficulties) - 1)]
        color = COLOR_ORDER[idx]
        players.append(
            Player(
                player_id=f"bot-{color.value}",
                color=color,
                name=f"{color.value.title()} ({tier})",
                kind=PlayerKind.BOT,
                difficulty=Difficulty(tier),
            )
        )
    return players


def real_play_only(record) -> bool:
    """Drop resolver lines produced by the hard bot's lookahead."""
    return not record["extra"].get("simulated", False)


def main() -> None:
    args = parse_args()
    logger.remove()
    logger.add(sys.stderr, level=config.LOG_LEVEL, filter=real_play_only)

    roller = SeededRoller(seed=args.seed)
    counter = iter(range(1, 10**9))

    def nonce() -> str:
        return f"n{next(counter)}"

    state = new_match("SIM", make_players(args.players, args.difficulty), nonce)
    for player in state.players:
        logger.info(f"Seat {player.player_id}: {player.name}")

    start_time = time.time()
    steps = 0
    while state.status == MatchStatus.RUNNING and steps < args.max_steps:
        steps += 1
        result = bot_step(state, state.active_player_id, roll_fn=roller, nonce_factory=nonce)
        state = result.state
        check_invariants(state)

    elapsed = time.time() - start_time
    if state.winner_id:
        logger.info(f"Winner: {state.winner_id} after {steps} steps ({elapsed:.2f}s)")
    else:
        logger.warning(f"No winner after {steps} steps ({elapsed:.2f}s)")
    for player in state.players:
        logger.info(f"{player.player_id}: home={player.home_count} positions={player.positions()}")


if __name__ == "__main__":
    main()
