# tests/test_sessions.py
import json
import threading
import random

import pytest

from conftest import drain
from engine.sessions import (
    SortingSession,
    PathfindingSession,
    SudokuSession,
    STATUS_IDLE,
    STATUS_RUNNING,
    STATUS_COMPLETED,
    STATUS_STOPPED,
    STATUS_NO_PATH,
    STATUS_NO_SOLUTION,
    STATUS_INVALID,
)
from engine.playback import EVENT_STEP
from grid import is_solved, NodeType
from services import GridRecognizer, Narrator

SORTING_REPLY = (
    "Performance Analysis: Good for this size.\n"
    "Algorithm Recommendations: Try merge sort.\n"
    "Theoretical vs Actual: As expected."
)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
@pytest.fixture
def sorting(config, scheduler):
    return SortingSession(config, scheduler, rng=random.Random(1))


def test_sorting_run_completes_with_metrics(sorting, clock):
    original = list(sorting.array)
    assert sorting.start()
    assert sorting.status == STATUS_RUNNING
    drain(sorting, clock)

    assert sorting.status == STATUS_COMPLETED
    assert sorting.array == sorted(original)
    assert sorting.metrics.algorithm == "bubble"
    assert sorting.metrics.array_size == 8
    assert sorting.metrics.total_steps == sorting.driver.steps_applied


def test_sorting_edits_refused_while_running(sorting):
    sorting.start()
    before = list(sorting.array)
    assert sorting.start() is False
    assert sorting.new_array() is False
    assert sorting.set_array([3, 2, 1]) is False
    assert sorting.array == before
    assert sorting.running


def test_changing_algorithm_mid_run_is_implicit_stop(sorting, clock):
    sorting.start()
    clock.advance(1)
    sorting.tick()
    sorting.set_algorithm("merge")

    assert not sorting.running
    assert sorting.status == STATUS_IDLE
    assert sorting.algorithm == "merge"
    assert sorting.current_step is None
    assert len(sorting.array) == 8

    clock.advance(10000)
    sorting.tick()
    assert sorting.current_step is None


def test_unknown_or_wrong_kind_algorithm_is_rejected(sorting):
    with pytest.raises(ValueError):
        sorting.set_algorithm("astar")
    with pytest.raises(ValueError):
        sorting.set_algorithm("bogo")


def test_size_is_clamped(sorting):
    sorting.set_size(1)
    assert len(sorting.array) == 5
    sorting.set_size(1000)
    assert len(sorting.array) == 100


def test_sorting_stop(sorting, clock):
    sorting.start()
    clock.advance(1)
    sorting.tick()
    assert sorting.stop()
    assert sorting.status == STATUS_STOPPED
    assert sorting.message == "Sorting stopped"
    assert sorting.stop() is False


def test_analysis_needs_a_completed_run(config, scheduler, clock, gemini, fake_models):
    fake_models.reply = SORTING_REPLY
    narrator = Narrator(gemini, timeout=5)
    session = SortingSession(config, scheduler, narrator, rng=random.Random(2))

    early = session.analyze()
    assert early.degraded
    assert fake_models.calls == []

    session.start()
    drain(session, clock)
    narration = session.analyze()
    assert not narration.degraded
    assert narration.summary_text == "Good for this size."
    assert session.to_dict()["analysis"]["detail_sections"][1]["heading"] == "Algorithm Recommendations"


def test_analysis_without_narrator(sorting, clock):
    sorting.start()
    drain(sorting, clock)
    assert sorting.analyze().detail_sections[0][1] == "AI features are disabled."


def test_analysis_dropped_when_a_new_run_replaced_the_metrics(config, scheduler, clock, gemini, fake_models):
    fake_models.reply = SORTING_REPLY
    session = SortingSession(config, scheduler, Narrator(gemini, timeout=5), rng=random.Random(2))
    session.start()
    drain(session, clock)

    pending = session.begin_analysis()
    narration = pending.run()
    session.start()

    assert session.finish_analysis(pending, narration) is narration
    assert session.analysis is None


# ---------------------------------------------------------------------------
# Pathfinding
# ---------------------------------------------------------------------------
@pytest.fixture
def pathfinding(config, scheduler):
    return PathfindingSession(config, scheduler, rng=random.Random(1))


def test_pathfinding_requires_both_endpoints(pathfinding):
    pathfinding.click(0, 0)
    assert pathfinding.start() is False
    assert pathfinding.message == "Please set both source and target nodes first."


def test_pathfinding_run(pathfinding, clock):
    pathfinding.click(0, 0)
    pathfinding.click(4, 4)
    assert pathfinding.start()
    assert pathfinding.click(2, 2) is False
    assert not pathfinding.grid.node(2, 2).is_wall
    drain(pathfinding, clock)

    assert pathfinding.status == STATUS_COMPLETED
    assert pathfinding.metrics.path_length == 9
    assert pathfinding.metrics.path_found
    assert pathfinding.metrics.total_nodes == 25
    path_cells = [n for n in pathfinding.grid.all_nodes() if n.type is NodeType.PATH]
    assert len(path_cells) == 7


def test_step_events_carry_the_grid_snapshot(pathfinding, clock):
    events = []
    pathfinding.driver.subscribe(lambda e: events.append(e) if e.kind == EVENT_STEP else None)
    pathfinding.click(0, 0)
    pathfinding.click(4, 4)
    pathfinding.start()
    drain(pathfinding, clock)

    first, last = events[0], events[-1]
    assert first.snapshot["cells"][0][0] == "source"
    assert sum(row.count("path") for row in last.snapshot["cells"]) == 7
    assert last.snapshot == pathfinding.grid.to_dict()


def test_sorting_step_events_carry_the_array(sorting, clock):
    events = []
    sorting.driver.subscribe(lambda e: events.append(e) if e.kind == EVENT_STEP else None)
    sorting.start()
    drain(sorting, clock)
    assert all(e.snapshot == list(e.step.array) for e in events)


def test_pathfinding_no_path(pathfinding, clock):
    pathfinding.click(0, 0)
    pathfinding.click(4, 4)
    for r, c in [(3, 4), (4, 3), (3, 3)]:
        pathfinding.click(r, c)
    pathfinding.start()
    drain(pathfinding, clock)

    assert pathfinding.status == STATUS_NO_PATH
    assert pathfinding.metrics.path_found is False
    assert pathfinding.metrics.wall_nodes == 3


def test_reset_grid_mid_run_stops(pathfinding, clock):
    pathfinding.click(0, 0)
    pathfinding.click(4, 4)
    pathfinding.start()
    pathfinding.reset_grid()
    assert not pathfinding.running
    assert pathfinding.grid.source is None
    clock.advance(10000)
    pathfinding.tick()
    assert not any(n.type is NodeType.VISITED for n in pathfinding.grid.all_nodes())


def test_clear_path_keeps_walls(pathfinding, clock):
    pathfinding.click(0, 0)
    pathfinding.click(4, 4)
    pathfinding.click(2, 2)
    pathfinding.start()
    drain(pathfinding, clock)
    assert pathfinding.clear_path()
    assert pathfinding.grid.node(2, 2).is_wall
    assert not any(n.type is NodeType.PATH for n in pathfinding.grid.all_nodes())
    assert pathfinding.status == STATUS_IDLE


# ---------------------------------------------------------------------------
# Sudoku
# ---------------------------------------------------------------------------
@pytest.fixture
def sudoku(config, scheduler):
    return SudokuSession(config, scheduler, rng=random.Random(1))


def test_sudoku_solve_run(sudoku, clock, puzzle, solution):
    sudoku.load_puzzle(puzzle)
    assert sudoku.start()
    assert sudoku.message == "Starting visualization..."
    drain(sudoku, clock)

    assert sudoku.status == STATUS_COMPLETED
    assert sudoku.message == "Puzzle solved successfully!"
    assert sudoku.board.cells == solution
    assert is_solved(sudoku.board.cells)
    assert sudoku.metrics.solved
    assert sudoku.metrics.empty_cells == 51
    assert sudoku.highlight is None


def test_sudoku_stop_freezes_the_board(sudoku, clock, puzzle):
    sudoku.load_puzzle(puzzle)
    sudoku.start()
    clock.advance(200)
    sudoku.tick()
    assert sudoku.stop()
    frozen = [list(r) for r in sudoku.board.cells]

    clock.advance(100000)
    sudoku.tick()
    assert sudoku.board.cells == frozen
    assert sudoku.status == STATUS_STOPPED
    assert sudoku.message == "Visualization stopped"
    assert not sudoku.solver.solving


def test_sudoku_invalid_board_refuses_to_start(sudoku, puzzle):
    sudoku.load_puzzle(puzzle)
    sudoku.enter(5, 0, 2)  # 5 already in row 0
    assert sudoku.start() is False
    assert sudoku.status == STATUS_INVALID
    assert sudoku.message.startswith("Invalid puzzle:")


def test_sudoku_unsolvable_board(sudoku, clock):
    grid = [[0] * 9 for _ in range(9)]
    grid[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
    grid[1][8] = 9
    sudoku.load_puzzle(grid)
    sudoku.start()
    drain(sudoku, clock)
    assert sudoku.status == STATUS_NO_SOLUTION
    assert sudoku.message == "No solution exists for this puzzle"


def test_sudoku_player_input(sudoku, puzzle):
    sudoku.load_puzzle(puzzle)
    assert sudoku.enter(4) is False
    assert sudoku.message == "Please select a cell first."
    assert sudoku.select(0, 2)
    assert sudoku.enter(4)
    assert sudoku.board.value(0, 2) == 4
    assert sudoku.enter(1, 0, 0) is False
    assert sudoku.candidates(0, 3) == [2, 6]


def test_sudoku_generate(sudoku):
    sudoku.set_difficulty("easy")
    assert sudoku.generate()
    assert sudoku.board.empty_count() == 40
    assert sudoku.board.given_count() == 41
    with pytest.raises(ValueError):
        sudoku.set_difficulty("impossible")


def test_sudoku_edits_refused_while_running(sudoku, puzzle):
    sudoku.load_puzzle(puzzle)
    sudoku.start()
    assert sudoku.generate() is False
    assert sudoku.select(0, 2) is False
    assert sudoku.enter(4, 0, 2) is False
    assert sudoku.load_puzzle(puzzle) is False


def test_recognition_failure_leaves_board_untouched(config, scheduler, gemini, fake_models, puzzle):
    fake_models.reply = "I could not read that image, sorry."
    session = SudokuSession(config, scheduler, recognizer=GridRecognizer(gemini))
    session.load_puzzle(puzzle)
    before = session.board.to_dict()

    assert session.recognize(b"\x89PNG...", "image/png") is False
    assert session.board.to_dict() == before
    assert session.message.startswith("Failed to parse")


def test_recognition_success_loads_givens(config, scheduler, gemini, fake_models, puzzle):
    fake_models.reply = "```json\n" + json.dumps(puzzle) + "\n```"
    session = SudokuSession(config, scheduler, recognizer=GridRecognizer(gemini))

    assert session.recognize(b"jpegbytes", "image/jpeg")
    assert session.board.cells == puzzle
    assert session.board.is_given(0, 0)
    assert session.message == "Puzzle loaded from image."


def test_recognition_timeout_leaves_board_untouched(config, scheduler, gemini, fake_models, puzzle):
    release = threading.Event()
    fake_models.reply = lambda contents: release.wait(5) and json.dumps(puzzle)
    session = SudokuSession(config, scheduler, recognizer=GridRecognizer(gemini, timeout=0.05))
    try:
        assert session.recognize(b"jpegbytes") is False
    finally:
        release.set()
    assert session.board.empty_count() == 81
    assert "timed out" in session.message


def test_recognition_result_dropped_when_board_was_replaced(config, scheduler, gemini, fake_models, puzzle):
    fake_models.reply = json.dumps(puzzle)
    session = SudokuSession(config, scheduler, recognizer=GridRecognizer(gemini))
    pending = session.begin_recognize(b"jpegbytes")
    outcome = pending.run()
    session.clear()

    assert session.finish_recognize(pending, outcome) is False
    assert session.board.empty_count() == 81


def test_hint_messages(config, scheduler, gemini, fake_models, puzzle):
    fake_models.reply = "Only 1, 2 or 4 fit here."
    session = SudokuSession(config, scheduler, Narrator(gemini, timeout=5))
    session.load_puzzle(puzzle)

    assert session.hint() is None
    assert session.message == "Please select a cell first to get a hint."

    session.select(0, 0)
    assert session.hint() is None
    assert session.message == "This is an original number - no hint needed!"

    session.select(0, 2)
    hint = session.hint()
    assert hint.summary_text == "Only 1, 2 or 4 fit here."
    assert "row 1, column 3" in fake_models.calls[-1]["contents"]
