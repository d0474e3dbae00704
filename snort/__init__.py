"""
Snort - Rules engine for the game of Snort.

Snort is played on a grid: two players alternately claim empty cells,
and no player may claim a cell orthogonally adjacent to a cell held by
the opponent. A player with no legal move on their turn loses.

The package provides:
- Board and per-player move legality bookkeeping
- A turn engine that validates and applies moves
- CPU opponents (symmetry strategy with a random fallback)
- Human/CPU player sessions and a cooperative game loop
- An optional HTTP/WebSocket adapter for a presentation client
"""

__version__ = "0.1.0"
