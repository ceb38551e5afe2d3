from tengrid.game import (
    BlockPuzzleGame,
    Board,
    ClearOrder,
    GameConfig,
    PlacementStatus,
    PieceType,
    RoundState,
    attempt_placement,
    is_game_over,
    new_round,
    reset_round,
)

from conftest import board_with, piece


# Two empty cells per row and per column, so no placement of a small piece completes a line.
def staircase_board():
    empty = [(i, i) for i in range(10)] + [(i, (i + 1) % 10) for i in range(10)]
    return board_with(empty=empty)


def state_of(board, *kinds, score=0, best=0):
    return RoundState(board=board, hand=tuple(piece(k) for k in kinds), score=score, best_score=best)


def test_new_round_starts_active(rng):
    state = new_round(rng=rng, best_score=120)
    assert state.board == Board.create(10)
    assert len(state.hand) == 3
    assert state.score == 0
    assert state.best_score == 120
    assert not state.game_over


def test_four_cell_piece_without_clears_scores_40(rng):
    state = state_of(Board.create(10), PieceType.SQUARE2, PieceType.SINGLE)
    outcome = attempt_placement(state, state.hand[0], 0, 0, rng=rng)
    assert outcome.status is PlacementStatus.PLACED
    assert outcome.earned == 40
    assert outcome.cleared == 0
    assert outcome.state.score == 40
    assert outcome.state.board.filled_count() == 4


def test_completing_one_line_adds_100(rng):
    board = board_with(filled=[(9, c) for c in range(2, 10)])
    state = state_of(board, PieceType.LINE2, PieceType.SINGLE)
    outcome = attempt_placement(state, state.hand[0].instance_id, 9, 0, rng=rng)
    assert outcome.cleared == 1
    assert outcome.earned == 20 + 100
    assert outcome.state.board.filled_count() == 0


def test_completing_two_lines_adds_250(rng):
    board = board_with(filled=[(r, c) for r in (8, 9) for c in range(2, 10)])
    state = state_of(board, PieceType.SQUARE2, PieceType.SINGLE, score=500, best=500)
    outcome = attempt_placement(state, state.hand[0], 8, 0, rng=rng)
    assert outcome.cleared == 2
    assert outcome.earned == 40 + 250
    assert outcome.state.score == 790
    assert outcome.state.best_score == 790
    assert outcome.state.lines_cleared == 2
    assert outcome.state.pieces_placed == 1


def test_crossing_clear_respects_configured_order(rng):
    board = board_with(filled=[(0, c) for c in range(1, 10)] + [(r, 0) for r in range(1, 10)])
    state = state_of(board, PieceType.SINGLE, PieceType.LINE2)
    simultaneous = attempt_placement(state, state.hand[0], 0, 0, rng=rng)
    assert simultaneous.cleared == 2
    assert simultaneous.earned == 10 + 250
    legacy = attempt_placement(
        state, state.hand[0], 0, 0, rng=rng, config=GameConfig(clear_order=ClearOrder.ROWS_THEN_COLUMNS)
    )
    assert legacy.cleared == 1
    assert legacy.earned == 110


def test_rejected_placement_leaves_state_untouched(rng):
    board = board_with(filled=[(0, 1)])
    state = state_of(board, PieceType.LINE2)
    outcome = attempt_placement(state, state.hand[0], 0, 0, rng=rng)
    assert outcome.status is PlacementStatus.REJECTED
    assert not outcome.accepted
    assert outcome.state is state
    assert outcome.earned == 0

    off_board = attempt_placement(state, state.hand[0], 0, 9, rng=rng)
    assert off_board.status is PlacementStatus.REJECTED


def test_unknown_instance_is_reported(rng):
    state = state_of(Board.create(10), PieceType.SINGLE)
    outcome = attempt_placement(state, piece(PieceType.SINGLE), 0, 0, rng=rng)
    assert outcome.status is PlacementStatus.UNKNOWN_PIECE
    assert outcome.state is state


def test_consumed_piece_leaves_hand(rng):
    state = state_of(Board.create(10), PieceType.SINGLE, PieceType.SINGLE, PieceType.LINE3)
    first = state.hand[0]
    outcome = attempt_placement(state, first, 5, 5, rng=rng)
    assert [p.instance_id for p in outcome.state.hand] == [p.instance_id for p in state.hand[1:]]


def test_hand_is_replenished_when_emptied(rng):
    state = state_of(Board.create(10), PieceType.SQUARE2)
    last = state.hand[0]
    outcome = attempt_placement(state, last, 0, 0, rng=rng)
    assert len(outcome.state.hand) == 3
    assert last.instance_id not in {p.instance_id for p in outcome.state.hand}


def test_terminal_detection():
    board = board_with(empty=[(6, 3)])
    assert is_game_over(board, (piece(PieceType.LINE2),))
    assert not is_game_over(board, (piece(PieceType.SINGLE),))
    assert not is_game_over(board, (piece(PieceType.LINE2), piece(PieceType.SINGLE)))
    assert is_game_over(board, ())


def test_placement_can_end_the_round(rng):
    state = state_of(staircase_board(), PieceType.SINGLE, PieceType.SQUARE3)
    outcome = attempt_placement(state, state.hand[0], 0, 0, rng=rng)
    assert outcome.accepted
    assert outcome.cleared == 0
    assert outcome.state.game_over
    assert outcome.state.score == 10


def test_placement_keeps_round_alive_while_a_piece_fits(rng):
    state = state_of(staircase_board(), PieceType.SINGLE, PieceType.LINE2)
    outcome = attempt_placement(state, state.hand[0], 0, 0, rng=rng)
    assert not outcome.state.game_over


def test_game_over_absorbs_placements(rng):
    state = state_of(staircase_board(), PieceType.SINGLE, PieceType.SQUARE3)
    over = attempt_placement(state, state.hand[0], 0, 0, rng=rng).state
    again = attempt_placement(over, over.hand[0], 0, 0, rng=rng)
    assert again.status is PlacementStatus.GAME_OVER
    assert again.state is over


def test_reset_round(rng):
    state = RoundState(board=staircase_board(), hand=(piece(PieceType.SQUARE3),), score=300, best_score=300, game_over=True)
    fresh = reset_round(state, rng=rng)
    assert fresh.board.filled_count() == 0
    assert fresh.score == 0
    assert not fresh.game_over
    assert len(fresh.hand) == 3
    assert fresh.best_score >= state.best_score


def test_reset_round_takes_max_of_best_and_score(rng):
    state = RoundState(board=Board.create(10), hand=(), score=90, best_score=40)
    assert reset_round(state, rng=rng).best_score == 90


def test_game_plays_through_valid_actions():
    game = BlockPuzzleGame(GameConfig(random_seed=3))
    for _ in range(12):
        if game.game_over:
            break
        hand_index, row, col = game.valid_actions()[0]
        outcome = game.place_index(hand_index, row, col)
        assert outcome.accepted
    assert game.score > 0
    assert game.step_count > 0
    assert game.best_score == game.score
    assert len(game.hand) in (1, 2, 3)


def test_game_is_deterministic_for_a_seed():
    a = BlockPuzzleGame(GameConfig(random_seed=11))
    b = BlockPuzzleGame(GameConfig(random_seed=11))
    assert [p.kind for p in a.hand] == [p.kind for p in b.hand]
    for _ in range(6):
        action = a.valid_actions()[0]
        assert action == b.valid_actions()[0]
        a.place_index(*action)
        b.place_index(*action)
    assert a.board == b.board
    assert [p.kind for p in a.hand] == [p.kind for p in b.hand]


def test_best_score_listener_fires_on_increase():
    seen = []
    game = BlockPuzzleGame(GameConfig(random_seed=5), best_score=0, on_best_score=seen.append)
    game.place_index(*game.valid_actions()[0])
    assert seen == [game.score]


def test_best_score_listener_silent_below_stored_best():
    seen = []
    game = BlockPuzzleGame(GameConfig(random_seed=5), best_score=10**6, on_best_score=seen.append)
    game.place_index(*game.valid_actions()[0])
    assert seen == []
    assert game.best_score == 10**6


def test_rejected_and_out_of_range_moves_on_game():
    game = BlockPuzzleGame(GameConfig(random_seed=2))
    before = game.snapshot()
    assert game.place_index(7, 0, 0).status is PlacementStatus.UNKNOWN_PIECE
    assert game.place_index(0, -1, 0).status is PlacementStatus.REJECTED
    assert game.snapshot() is before
    assert game.step_count == 0


def test_game_reset_keeps_best_and_clears_board():
    game = BlockPuzzleGame(GameConfig(random_seed=8))
    game.place_index(*game.valid_actions()[0])
    best = game.best_score
    game.reset(seed=8)
    assert game.board.filled_count() == 0
    assert game.score == 0
    assert not game.game_over
    assert game.best_score == best
    assert game.step_count == 0


def test_get_state_is_a_plain_snapshot():
    game = BlockPuzzleGame(GameConfig(random_seed=4))
    state = game.get_state()
    assert state["grid"].shape == (10, 10)
    state["grid"][0, 0] = 9
    assert game.board.grid[0, 0] == 0
    assert state["pieces_remaining"] == 3
    assert len(state["hand"]) == 3
    assert state["game_over"] is False
