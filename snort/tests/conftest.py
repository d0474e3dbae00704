"""
Pytest fixtures for Snort tests.
"""

import pytest

from ..config import GameConfig, PlayerConfig, PALETTE
from ..engine_core.board import Board
from ..engine_core.legality import LegalityTracker
from ..engine_core.state import PlayerID, PlayerState, PlayerType
from ..engine_core.turn_engine import TurnEngine, start_game
from ..session import SessionManager


def make_tracker(rows: int, cols: int) -> LegalityTracker:
    """Tracker over a fresh board with two human players."""
    players = [
        PlayerState(player_id=PlayerID.PLAYER_1, color=PALETTE["red"]),
        PlayerState(player_id=PlayerID.PLAYER_2, color=PALETTE["blue"]),
    ]
    return LegalityTracker(Board(rows, cols), players)


def cpu_config(policy: str = "symmetry", color: str = "blue") -> PlayerConfig:
    return PlayerConfig(player_type=PlayerType.CPU, color=color, policy=policy)


def human_config(color: str = "red") -> PlayerConfig:
    return PlayerConfig(player_type=PlayerType.HUMAN, color=color)


@pytest.fixture
def board_3x3() -> Board:
    return Board(3, 3)


@pytest.fixture
def board_5x5() -> Board:
    return Board(5, 5)


@pytest.fixture
def tracker_3x3() -> LegalityTracker:
    return make_tracker(3, 3)


@pytest.fixture
def engine_3x3() -> TurnEngine:
    """3x3 game, Player 1 to move."""
    return start_game(3, 3)


@pytest.fixture
def engine_5x5() -> TurnEngine:
    """5x5 game, Player 1 (human) vs Player 2 (CPU), Player 1 to move."""
    return start_game(5, 5)


@pytest.fixture
def human_vs_cpu_config() -> GameConfig:
    return GameConfig(
        rows=5,
        cols=5,
        players={
            PlayerID.PLAYER_1: human_config(),
            PlayerID.PLAYER_2: cpu_config(),
        },
        random_seed=42,
    )


@pytest.fixture
def cpu_vs_cpu_config() -> GameConfig:
    return GameConfig(
        rows=4,
        cols=5,
        players={
            PlayerID.PLAYER_1: cpu_config(policy="random", color="red"),
            PlayerID.PLAYER_2: cpu_config(policy="symmetry", color="blue"),
        },
        random_seed=7,
    )


@pytest.fixture
def manager() -> SessionManager:
    return SessionManager()



def assert_complement(tracker: LegalityTracker):
    """
    Check each player's valid and invalid sets against the board.

    The two sets are disjoint and together cover exactly the empty cells.
    """
    empty = tracker.board.empty_cells()
    for player_id in tracker.players:
        valid = tracker.valid_spots_of(player_id)
        invalid = tracker.invalid_spots_of(player_id)
        assert not valid & invalid, f"{player_id.value}: cells both valid and invalid"
        assert valid | invalid == empty, f"{player_id.value}: tracked cells != empty cells"
