"""Placement legality, placement and full-line clearing.

All functions are pure: boards come in and new boards go out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from .grid import Board, Coordinate
from .pieces import Piece, PieceShape


logger = logging.getLogger(__name__)

PieceLike = Union[Piece, PieceShape]


class ClearOrder(str, Enum):
    # Rows and columns both read the board as it was before any clearing.
    SIMULTANEOUS = "simultaneous"
    # Rows cleared first; columns are checked on the row-cleared board.
    ROWS_THEN_COLUMNS = "rows_then_columns"


@dataclass(frozen=True)
class ClearResult:
    board: Board
    rows: Tuple[int, ...] = ()
    cols: Tuple[int, ...] = ()

    @property
    def cleared_count(self) -> int:
        return len(self.rows) + len(self.cols)


def _shape_of(piece: PieceLike) -> PieceShape:
    return piece.shape if isinstance(piece, Piece) else piece


def cells_for(piece: PieceLike, row: int, col: int) -> List[Coordinate]:
    """Board coordinates covered by `piece` with its top-left corner at (row, col)."""
    return [(row + dr, col + dc) for dr, dc in _shape_of(piece).offsets]


def can_place(board: Board, piece: PieceLike, row: int, col: int) -> bool:
    """Check if every filled cell of `piece` lands inside the board on an empty cell."""
    grid = board.grid
    for r, c in cells_for(piece, row, col):
        if not board.is_inside(r, c):
            return False
        if grid[r, c] != 0:
            return False
    return True


def place(board: Board, piece: PieceLike, row: int, col: int) -> Board:
    """Stamp `piece`'s marker onto the board.

    Assumes the position was already validated with `can_place`; occupied
    cells are overwritten without complaint.
    """
    shape = _shape_of(piece)
    logger.debug("placing %s at (%d, %d)", shape.name, row, col)
    return board.with_cells(cells_for(shape, row, col), shape.marker)


def clear_complete_lines(board: Board, order: ClearOrder = ClearOrder.SIMULTANEOUS) -> ClearResult:
    """Clear every full row and column.

    A cell shared by a cleared row and a cleared column counts towards both,
    so `cleared_count` is simply rows + columns.
    """
    rows = tuple(board.full_rows())
    if order is ClearOrder.ROWS_THEN_COLUMNS:
        after_rows = board.with_cleared(rows=rows) if rows else board
        cols = tuple(after_rows.full_cols())
    else:
        cols = tuple(board.full_cols())
    if not rows and not cols:
        return ClearResult(board)
    logger.debug("clearing rows %s and columns %s", rows, cols)
    return ClearResult(board.with_cleared(rows=rows, cols=cols), rows, cols)


def valid_placements(board: Board, piece: PieceLike) -> List[Coordinate]:
    """All (row, col) origins where `piece` fits."""
    positions: List[Coordinate] = []
    for row in range(board.size):
        for col in range(board.size):
            if can_place(board, piece, row, col):
                positions.append((row, col))
    return positions


def fits_anywhere(board: Board, piece: PieceLike) -> bool:
    for row in range(board.size):
        for col in range(board.size):
            if can_place(board, piece, row, col):
                return True
    return False
