from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import IntEnum
from functools import cached_property
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import MalformedPieceError


class PieceType(IntEnum):
    """Catalog shape variants. The value doubles as the board marker."""

    SINGLE = 1
    LINE2 = 2
    LINE3 = 3
    LINE4 = 4
    LINE5 = 5
    VLINE2 = 6
    VLINE3 = 7
    VLINE4 = 8
    VLINE5 = 9
    SQUARE2 = 10
    SQUARE3 = 11
    L1 = 12
    L2 = 13
    T1 = 14
    T2 = 15


MAX_MARKER = int(np.iinfo(np.int8).max)


def _as_pattern(rows: Sequence[Sequence[int]]) -> np.ndarray:
    if len(rows) == 0:
        raise MalformedPieceError("pattern has no rows")
    width = len(rows[0])
    if width == 0:
        raise MalformedPieceError("pattern has no columns")
    for i, row in enumerate(rows):
        if len(row) != width:
            raise MalformedPieceError(f"pattern row {i} has {len(row)} cells, expected {width}")
    pattern = np.asarray(rows, dtype=np.bool_)
    if not pattern.any():
        raise MalformedPieceError("pattern has no filled cells")
    pattern.setflags(write=False)
    return pattern


@dataclass(frozen=True, eq=False)
class PieceShape:
    """Immutable shape template: pattern, board marker and display color."""

    kind: int
    pattern: np.ndarray
    color: str
    name: str = ""

    def __post_init__(self) -> None:
        marker = int(self.kind)
        if not 1 <= marker <= MAX_MARKER:
            raise MalformedPieceError(f"marker must be in [1, {MAX_MARKER}], got {marker}")
        rows = self.pattern
        if isinstance(rows, np.ndarray):
            if rows.ndim != 2:
                raise MalformedPieceError(f"pattern must be two-dimensional, got {rows.ndim} dimensions")
            rows = rows.tolist()
        object.__setattr__(self, "pattern", _as_pattern(rows))
        if not self.name:
            label = self.kind.name if isinstance(self.kind, PieceType) else f"shape{marker}"
            object.__setattr__(self, "name", label.lower())

    @property
    def marker(self) -> int:
        return int(self.kind)

    @property
    def height(self) -> int:
        return int(self.pattern.shape[0])

    @property
    def width(self) -> int:
        return int(self.pattern.shape[1])

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self.pattern))

    @cached_property
    def offsets(self) -> Tuple[Tuple[int, int], ...]:
        """(row, col) offsets of filled cells relative to the top-left corner."""
        return tuple((int(r), int(c)) for r, c in np.argwhere(self.pattern))

    def render(self) -> str:
        return "\n".join("".join("█" if cell else "·" for cell in row) for row in self.pattern)

    def __repr__(self) -> str:
        return f"PieceShape({self.name}, {self.height}x{self.width})"


_instance_ids = itertools.count(1)


@dataclass(frozen=True)
class Piece:
    """A shape offered in a hand, identified by its instance id."""

    shape: PieceShape
    instance_id: int = field(default_factory=lambda: next(_instance_ids))

    @property
    def kind(self) -> int:
        return self.shape.kind

    @property
    def pattern(self) -> np.ndarray:
        return self.shape.pattern

    @property
    def color(self) -> str:
        return self.shape.color

    @property
    def cell_count(self) -> int:
        return self.shape.cell_count


_DEFINITIONS = [
    (PieceType.SINGLE, [[1]], "#FF6B6B"),
    (PieceType.LINE2, [[1, 1]], "#4ECDC4"),
    (PieceType.LINE3, [[1, 1, 1]], "#45B7D1"),
    (PieceType.LINE4, [[1, 1, 1, 1]], "#96CEB4"),
    (PieceType.LINE5, [[1, 1, 1, 1, 1]], "#FFEAA7"),
    (PieceType.VLINE2, [[1], [1]], "#DDA0DD"),
    (PieceType.VLINE3, [[1], [1], [1]], "#98D8C8"),
    (PieceType.VLINE4, [[1], [1], [1], [1]], "#F7DC6F"),
    (PieceType.VLINE5, [[1], [1], [1], [1], [1]], "#BB8FCE"),
    (PieceType.SQUARE2, [[1, 1], [1, 1]], "#F39C12"),
    (PieceType.SQUARE3, [[1, 1, 1], [1, 1, 1], [1, 1, 1]], "#E74C3C"),
    (PieceType.L1, [[1, 0], [1, 0], [1, 1]], "#9B59B6"),
    (PieceType.L2, [[0, 1], [0, 1], [1, 1]], "#3498DB"),
    (PieceType.T1, [[1, 1, 1], [0, 1, 0]], "#2ECC71"),
    (PieceType.T2, [[0, 1, 0], [1, 1, 1]], "#E67E22"),
]

# Validated once at import; a malformed entry fails here.
CATALOG: Tuple[PieceShape, ...] = tuple(
    PieceShape(kind, rows, color) for kind, rows, color in _DEFINITIONS
)


class PieceCatalog:
    """Read-only shape table plus a uniform sampler for hands."""

    def __init__(self, shapes: Sequence[PieceShape] = CATALOG) -> None:
        if len(shapes) == 0:
            raise ValueError("catalog needs at least one shape")
        self._shapes: Tuple[PieceShape, ...] = tuple(shapes)
        self._by_kind: Dict[int, PieceShape] = {int(s.kind): s for s in self._shapes}
        if len(self._by_kind) != len(self._shapes):
            raise MalformedPieceError("catalog markers must be unique")

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[PieceShape]:
        return iter(self._shapes)

    def get(self, kind: int) -> PieceShape:
        return self._by_kind[int(kind)]

    def color_for(self, marker: int) -> Optional[str]:
        shape = self._by_kind.get(int(marker))
        return shape.color if shape is not None else None

    def sample(self, k: int, rng: Optional[np.random.Generator] = None) -> List[Piece]:
        """Draw `k` pieces i.i.d. uniformly, with replacement."""
        if k < 0:
            raise ValueError(f"cannot sample a negative number of pieces: {k}")
        rng = rng if rng is not None else np.random.default_rng()
        picks = rng.integers(0, len(self._shapes), size=k)
        return [Piece(self._shapes[int(i)]) for i in picks]


DEFAULT_CATALOG = PieceCatalog()
