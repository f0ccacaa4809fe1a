import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(slots=True)
class Config:
    # --- Board geometry ---
    TRACK_LENGTH: int = 52  # shared ring 0..51 (absolute indices)
    HOME_LANE_LENGTH: int = 6  # private lane 52..57
    TOKENS_PER_PLAYER: int = 4
    YARD: int = -1
    EXIT_ROLL: int = 6

    # --- Dice bank ---
    CHAIN_CAP: int = int(os.getenv("CHAIN_CAP", 5))

    # --- AI ---
    AI_MAX_DEPTH: int = int(os.getenv("AI_MAX_DEPTH", 3))

    # --- Turn nonce / simulation ---
    NONCE_LENGTH: int = int(os.getenv("NONCE_LENGTH", 10))
    MAX_TURNS: int = int(os.getenv("MAX_TURNS", 2000))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Derived (populated in __post_init__ due to slots)
    HOME_LANE_START: int = 0
    HOME_INDEX: int = 0

    def __post_init__(self):
        self.HOME_LANE_START = self.TRACK_LENGTH
        # finished cell sits right after the last lane cell
        self.HOME_INDEX = self.TRACK_LENGTH + self.HOME_LANE_LENGTH

        if self.CHAIN_CAP < 0:
            raise ValueError("CHAIN_CAP must be >= 0")
        if self.AI_MAX_DEPTH < 0:
            raise ValueError("AI_MAX_DEPTH must be >= 0")


@dataclass(slots=True)
class MediumWeights:
    capture: float = 100.0
    arrow: float = 50.0
    finish: float = 80.0
    enter_lane: float = 40.0
    safe: float = 30.0
    exposed: float = -10.0
    progress: float = 0.1


@dataclass(slots=True)
class HardWeights:
    win: float = 10_000.0
    lose: float = -1_000.0
    home_count: float = 500.0
    finished_token: float = 100.0
    yard_token: float = -50.0
    progress: float = 2.0
    lane_token: float = 100.0
    safe_token: float = 20.0
    pair: float = 40.0
    triple: float = 150.0
    opponent_home_count: float = -400.0
    discard_risk: float = -300.0
    discarded: float = -200.0


config = Config()
medium_weights = MediumWeights()
hard_weights = HardWeights()
