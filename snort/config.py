"""
Game configuration.

Board dimensions are clamped into [BOARD_SIZE_MIN, BOARD_SIZE_MAX] rather
than rejected. Players pick colors from a fixed five-color palette and
may not share one.
"""

from __future__ import annotations
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .engine_core.state import PlayerID, PlayerType


BOARD_SIZE_MIN = 1
BOARD_SIZE_MAX = 10
DEFAULT_BOARD_SIZE = 3

# Display colors players can choose from
PALETTE: dict[str, str] = {
    "red": "#E94F37",
    "blue": "#3F88C5",
    "green": "#44BBA4",
    "yellow": "#F6AE2D",
    "purple": "#7D5BA6",
}
PALETTE_ORDER = list(PALETTE.values())


def clamp_board_size(value: int) -> int:
    return max(BOARD_SIZE_MIN, min(BOARD_SIZE_MAX, int(value)))


class PlayerConfig(BaseModel):
    """How one seat is played."""
    player_type: PlayerType = PlayerType.HUMAN
    color: str = Field(PALETTE_ORDER[0], description="Hex color from the palette")
    name: str = ""
    policy: Literal["symmetry", "random"] = Field(
        "symmetry", description="Bot policy, only used for CPU players"
    )

    @field_validator("color", mode="before")
    @classmethod
    def _resolve_color(cls, value: str) -> str:
        # Accept palette names as well as hex codes
        if isinstance(value, str) and value.lower() in PALETTE:
            return PALETTE[value.lower()]
        if isinstance(value, str) and value.upper() in PALETTE_ORDER:
            return value.upper()
        raise ValueError(f"Color must be one of {sorted(PALETTE)} or {PALETTE_ORDER}")


def default_player_configs() -> dict[PlayerID, PlayerConfig]:
    """Player 1 is human, Player 2 is a CPU, first two palette colors."""
    return {
        PlayerID.PLAYER_1: PlayerConfig(
            player_type=PlayerType.HUMAN, color=PALETTE_ORDER[0], name="Player 1",
        ),
        PlayerID.PLAYER_2: PlayerConfig(
            player_type=PlayerType.CPU, color=PALETTE_ORDER[1], name="Player 2",
        ),
    }


class GameConfig(BaseModel):
    """Everything needed to start a game."""
    rows: int = DEFAULT_BOARD_SIZE
    cols: int = DEFAULT_BOARD_SIZE
    players: dict[PlayerID, PlayerConfig] = Field(default_factory=default_player_configs)
    starting_player: PlayerID = PlayerID.PLAYER_1
    random_seed: Optional[int] = None
    cpu_delay: float = Field(0.0, ge=0.0, description="Cosmetic CPU pause in seconds")

    @field_validator("rows", "cols", mode="before")
    @classmethod
    def _clamp_size(cls, value) -> int:
        return clamp_board_size(value)

    @model_validator(mode="after")
    def _check_players(self) -> GameConfig:
        missing = set(PlayerID) - set(self.players)
        if missing:
            raise ValueError(f"Missing player config for: {sorted(p.value for p in missing)}")
        colors = [self.players[p].color for p in PlayerID]
        if len(set(colors)) != len(colors):
            raise ValueError("Players must choose different colors")
        for player_id, player in self.players.items():
            if not player.name:
                player.name = player_id.label
        return self

    @property
    def size(self) -> tuple[int, int]:
        return self.rows, self.cols
