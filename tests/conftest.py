import numpy as np
import pytest

from tengrid.game import DEFAULT_CATALOG, Board, Piece, PieceType


def piece(kind):
    return Piece(DEFAULT_CATALOG.get(kind))


def board_with(filled=(), empty=None, size=10, marker=1):
    """Board with `filled` cells set, or every cell except `empty` when given."""
    grid = np.zeros((size, size), dtype=np.int8)
    if empty is not None:
        grid[:, :] = marker
        for r, c in empty:
            grid[r, c] = 0
    for r, c in filled:
        grid[r, c] = marker
    return Board(grid)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
