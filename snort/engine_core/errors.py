"""
Engine errors.

User-facing move failures are NOT raised: TurnEngine.submit_move
reports them through MoveResult. The exceptions here signal either a
bad coordinate handed to the board, or a caller that skipped a check it
was required to make.
"""

from __future__ import annotations


class SnortError(Exception):
    """Base class for engine errors."""


class OutOfBoundsError(SnortError, IndexError):
    """A cell lies outside the board."""

    def __init__(self, cell, rows: int, cols: int):
        self.cell = cell
        self.rows = rows
        self.cols = cols
        super().__init__(f"Cell {cell} is outside a {rows}x{cols} board")


class IllegalMoveError(SnortError):
    """
    LegalityTracker.apply_move was called with a move it must never see.

    Callers validate with is_valid_move first, so this is a logic error.
    """


class StrategyPreconditionError(SnortError, RuntimeError):
    """A bot policy was asked to move for a player with no valid cells."""
