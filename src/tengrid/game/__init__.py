"""Game module for TenGrid.

Exports the pure block-placement engine:
- Board: immutable 10x10 grid with explicit Empty / Occupied cells
- PieceShape, Piece, PieceCatalog: shape templates, hand entries and the sampler
- can_place, place, clear_complete_lines: placement and line clearing
- ScoringRules: points per placement
- attempt_placement, reset_round, BlockPuzzleGame: round control
"""

from .errors import MalformedPieceError, OutOfBoundsError, TenGridError
from .grid import EMPTY, Board, Cell, Empty, Occupied
from .pieces import CATALOG, DEFAULT_CATALOG, Piece, PieceCatalog, PieceShape, PieceType
from .placement import (
    ClearOrder,
    ClearResult,
    can_place,
    clear_complete_lines,
    fits_anywhere,
    place,
    valid_placements,
)
from .rules import ScoringRules
from .core import (
    BlockPuzzleGame,
    GameConfig,
    PlacementOutcome,
    PlacementStatus,
    RoundState,
    attempt_placement,
    is_game_over,
    new_round,
    reset_round,
)

__all__ = [
    "TenGridError",
    "OutOfBoundsError",
    "MalformedPieceError",
    "Board",
    "Cell",
    "Empty",
    "Occupied",
    "EMPTY",
    "PieceType",
    "PieceShape",
    "Piece",
    "PieceCatalog",
    "CATALOG",
    "DEFAULT_CATALOG",
    "ClearOrder",
    "ClearResult",
    "can_place",
    "place",
    "clear_complete_lines",
    "valid_placements",
    "fits_anywhere",
    "ScoringRules",
    "GameConfig",
    "PlacementStatus",
    "PlacementOutcome",
    "RoundState",
    "new_round",
    "attempt_placement",
    "is_game_over",
    "reset_round",
    "BlockPuzzleGame",
]
