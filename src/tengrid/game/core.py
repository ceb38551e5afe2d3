from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .grid import Board
from .pieces import DEFAULT_CATALOG, Piece, PieceCatalog
from .placement import ClearOrder, can_place, clear_complete_lines, fits_anywhere, place
from .rules import ScoringRules


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    board_size: int = 10
    hand_size: int = 3
    clear_order: ClearOrder = ClearOrder.SIMULTANEOUS
    random_seed: Optional[int] = None
    max_episode_steps: int = 10000


class PlacementStatus(str, Enum):
    PLACED = "placed"
    REJECTED = "rejected"
    GAME_OVER = "game_over"
    UNKNOWN_PIECE = "unknown_piece"


@dataclass(frozen=True)
class RoundState:
    """Immutable snapshot of one round. Produced only by the controller functions."""

    board: Board
    hand: Tuple[Piece, ...]
    score: int = 0
    best_score: int = 0
    game_over: bool = False
    pieces_placed: int = 0
    lines_cleared: int = 0

    def find(self, instance_id: int) -> Optional[Piece]:
        for piece in self.hand:
            if piece.instance_id == instance_id:
                return piece
        return None


@dataclass(frozen=True)
class PlacementOutcome:
    state: RoundState
    status: PlacementStatus
    earned: int = 0
    cleared: int = 0

    @property
    def accepted(self) -> bool:
        return self.status is PlacementStatus.PLACED


def is_game_over(board: Board, hand: Sequence[Piece]) -> bool:
    """True when no piece in `hand` fits anywhere on `board`."""
    return not any(fits_anywhere(board, piece) for piece in hand)


def _draw_hand(config: GameConfig, catalog: PieceCatalog, rng: Optional[np.random.Generator]) -> Tuple[Piece, ...]:
    return tuple(catalog.sample(config.hand_size, rng))


def new_round(
    config: Optional[GameConfig] = None,
    catalog: PieceCatalog = DEFAULT_CATALOG,
    rng: Optional[np.random.Generator] = None,
    best_score: int = 0,
) -> RoundState:
    config = config or GameConfig()
    board = Board.create(config.board_size)
    hand = _draw_hand(config, catalog, rng)
    return RoundState(board=board, hand=hand, best_score=best_score, game_over=is_game_over(board, hand))


def reset_round(
    state: RoundState,
    config: Optional[GameConfig] = None,
    catalog: PieceCatalog = DEFAULT_CATALOG,
    rng: Optional[np.random.Generator] = None,
) -> RoundState:
    """Fresh board and hand; the best score carries over."""
    return new_round(config, catalog, rng, best_score=max(state.best_score, state.score))


def attempt_placement(
    state: RoundState,
    piece: Union[Piece, int],
    row: int,
    col: int,
    *,
    config: Optional[GameConfig] = None,
    rules: Optional[ScoringRules] = None,
    catalog: PieceCatalog = DEFAULT_CATALOG,
    rng: Optional[np.random.Generator] = None,
) -> PlacementOutcome:
    """Try to place a hand piece with its top-left corner at (row, col).

    Anything other than a successful placement leaves `state` untouched and
    is reported through the outcome status rather than an exception.
    """
    if state.game_over:
        return PlacementOutcome(state, PlacementStatus.GAME_OVER)

    instance_id = piece.instance_id if isinstance(piece, Piece) else int(piece)
    chosen = state.find(instance_id)
    if chosen is None:
        return PlacementOutcome(state, PlacementStatus.UNKNOWN_PIECE)
    if not can_place(state.board, chosen, row, col):
        return PlacementOutcome(state, PlacementStatus.REJECTED)

    config = config or GameConfig()
    rules = rules or ScoringRules()

    result = clear_complete_lines(place(state.board, chosen, row, col), config.clear_order)
    earned = rules.score_for(chosen.cell_count, result.cleared_count)
    score = state.score + earned

    hand = tuple(p for p in state.hand if p.instance_id != instance_id)
    if not hand:
        hand = _draw_hand(config, catalog, rng)
        logger.debug("hand exhausted, drew %s", [p.shape.name for p in hand])

    game_over = is_game_over(result.board, hand)
    if game_over:
        logger.debug("no piece in hand fits, round over with score %d", score)

    new_state = replace(
        state,
        board=result.board,
        hand=hand,
        score=score,
        best_score=max(state.best_score, score),
        game_over=game_over,
        pieces_placed=state.pieces_placed + 1,
        lines_cleared=state.lines_cleared + result.cleared_count,
    )
    return PlacementOutcome(new_state, PlacementStatus.PLACED, earned, result.cleared_count)


BestScoreListener = Callable[[int], None]


class BlockPuzzleGame:
    """Stateful wrapper around the round functions for one player.

    Not thread-safe: callers serialize calls against one instance.
    `on_best_score` is called with the new value whenever the best score rises.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[PieceCatalog] = None,
        best_score: int = 0,
        on_best_score: Optional[BestScoreListener] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.catalog = catalog or DEFAULT_CATALOG
        self.rng = np.random.default_rng(self.config.random_seed)
        self.on_best_score = on_best_score
        self.step_count = 0
        self.state = new_round(self.config, self.catalog, self.rng, best_score=best_score)

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def hand(self) -> Tuple[Piece, ...]:
        return self.state.hand

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def best_score(self) -> int:
        return self.state.best_score

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    def snapshot(self) -> RoundState:
        return self.state

    def place(self, piece: Union[Piece, int], row: int, col: int) -> PlacementOutcome:
        outcome = attempt_placement(
            self.state, piece, row, col,
            config=self.config, rules=self.rules, catalog=self.catalog, rng=self.rng,
        )
        if outcome.accepted:
            previous_best = self.state.best_score
            self.state = outcome.state
            self.step_count += 1
            if self.state.best_score > previous_best and self.on_best_score is not None:
                self.on_best_score(self.state.best_score)
        return outcome

    def place_index(self, hand_index: int, row: int, col: int) -> PlacementOutcome:
        if self.state.game_over:
            return PlacementOutcome(self.state, PlacementStatus.GAME_OVER)
        if not 0 <= hand_index < len(self.state.hand):
            return PlacementOutcome(self.state, PlacementStatus.UNKNOWN_PIECE)
        return self.place(self.state.hand[hand_index], row, col)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        self.state = reset_round(self.state, self.config, self.catalog, self.rng)
        self.step_count = 0

    def valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (hand_index, row, col) placements that would be accepted."""
        if self.state.game_over:
            return []
        board = self.state.board
        actions: List[Tuple[int, int, int]] = []
        for idx, piece in enumerate(self.state.hand):
            for row in range(board.size):
                for col in range(board.size):
                    if can_place(board, piece, row, col):
                        actions.append((idx, row, col))
        return actions

    def get_state(self) -> Dict[str, Any]:
        state = self.state
        return {
            "grid": state.board.markers(),
            "hand": [int(p.kind) for p in state.hand],
            "pieces_remaining": len(state.hand),
            "score": state.score,
            "best_score": state.best_score,
            "game_over": state.game_over,
            "pieces_placed": state.pieces_placed,
            "lines_cleared": state.lines_cleared,
            "step_count": self.step_count,
            "fill_ratio": state.board.fill_ratio(),
        }
