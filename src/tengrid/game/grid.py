from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from .errors import OutOfBoundsError


Coordinate = Tuple[int, int]  # (row, col)


@dataclass(frozen=True)
class Empty:
    def __repr__(self) -> str:
        return "EMPTY"


@dataclass(frozen=True)
class Occupied:
    marker: int


Cell = Union[Empty, Occupied]

EMPTY = Empty()


class Board:
    """Fixed-size square grid of placed blocks.

    The grid is a read-only int8 array: 0 for empty cells and the positive
    marker of the piece that filled it otherwise. Boards never change in
    place; `with_cells` and `with_cleared` return new boards.
    """

    __slots__ = ("size", "grid")

    def __init__(self, grid: np.ndarray) -> None:
        data = np.array(grid, dtype=np.int8)
        if data.ndim != 2 or data.shape[0] != data.shape[1] or data.shape[0] < 1:
            raise ValueError(f"board must be a non-empty square grid, got shape {data.shape}")
        if np.any(data < 0):
            raise ValueError("board markers must be non-negative")
        data.setflags(write=False)
        self.size = int(data.shape[0])
        self.grid = data

    @classmethod
    def create(cls, size: int = 10) -> "Board":
        if size < 1:
            raise ValueError(f"board size must be positive, got {size}")
        return cls(np.zeros((size, size), dtype=np.int8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        return cls(np.asarray(rows, dtype=np.int8))

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def _check(self, row: int, col: int) -> None:
        if not self.is_inside(row, col):
            raise OutOfBoundsError(row, col, self.size)

    def cell_at(self, row: int, col: int) -> Cell:
        self._check(row, col)
        value = int(self.grid[row, col])
        return EMPTY if value == 0 else Occupied(value)

    def is_empty_at(self, row: int, col: int) -> bool:
        self._check(row, col)
        return self.grid[row, col] == 0

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.flatnonzero(np.all(self.grid != 0, axis=1))]

    def full_cols(self) -> List[int]:
        return [int(c) for c in np.flatnonzero(np.all(self.grid != 0, axis=0))]

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def fill_ratio(self) -> float:
        return self.filled_count() / float(self.size * self.size)

    def occupancy(self) -> np.ndarray:
        """Writable boolean copy of the grid, True where a cell is filled."""
        return self.grid != 0

    def markers(self) -> np.ndarray:
        return self.grid.copy()

    def with_cells(self, cells: Iterable[Coordinate], marker: int) -> "Board":
        """Return a copy with `cells` set to `marker`.

        Coordinates are not bounds-checked here; callers validate first.
        """
        data = self.grid.copy()
        for row, col in cells:
            data[row, col] = marker
        return Board(data)

    def with_cleared(self, rows: Iterable[int] = (), cols: Iterable[int] = ()) -> "Board":
        data = self.grid.copy()
        for row in rows:
            data[row, :] = 0
        for col in cols:
            data[:, col] = 0
        return Board(data)

    def render(self) -> str:
        return "\n".join("".join("█" if cell else "·" for cell in row) for row in self.grid)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self.grid, other.grid))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board(size={self.size}, filled={self.filled_count()})"
