from __future__ import annotations

import random
from datetime import datetime, timezone

from proofread_engine.tasks import (
    ActiveTask,
    SelectionTracker,
    TextSelection,
    rebase_selection,
    selections_overlap,
)


def make_selection(
    start_line: int,
    start_character: int,
    end_line: int,
    end_character: int,
    *,
    uri: str = "file:///doc.txt",
) -> TextSelection:
    return TextSelection(
        document_uri=uri,
        start_line=start_line,
        start_character=start_character,
        end_line=end_line,
        end_character=end_character,
    )


def make_task(task_id: str, selection: TextSelection) -> ActiveTask:
    return ActiveTask(
        id=task_id, selection=selection, start_time=datetime.now(timezone.utc)
    )


def random_selection(rng: random.Random) -> TextSelection:
    start = (rng.randint(0, 5), rng.randint(0, 10))
    end = (rng.randint(0, 5), rng.randint(0, 10))
    uri = rng.choice(["file:///a.txt", "file:///b.txt"])
    return TextSelection.from_cursors(uri, start, end)


def test_touching_boundaries_do_not_overlap() -> None:
    left = make_selection(0, 0, 0, 5)
    right = make_selection(0, 5, 0, 10)

    assert selections_overlap(left, right) is False
    assert selections_overlap(right, left) is False


def test_partial_overlap_on_one_line() -> None:
    assert selections_overlap(make_selection(0, 0, 0, 10), make_selection(0, 5, 0, 15))


def test_multi_line_selection_contains_inner_range() -> None:
    outer = make_selection(0, 0, 2, 0)
    inner = make_selection(1, 5, 1, 10)

    assert selections_overlap(outer, inner)
    assert selections_overlap(inner, outer)


def test_touching_across_lines_does_not_overlap() -> None:
    assert not selections_overlap(make_selection(0, 0, 1, 4), make_selection(1, 4, 3, 0))


def test_different_documents_never_overlap() -> None:
    left = make_selection(0, 0, 0, 10, uri="file:///one.txt")
    right = make_selection(0, 0, 0, 10, uri="file:///two.txt")

    assert selections_overlap(left, right) is False


def test_empty_selection_formula_is_applied_literally() -> None:
    cursor = make_selection(0, 5, 0, 5)

    assert selections_overlap(cursor, make_selection(0, 0, 0, 10))
    assert not selections_overlap(cursor, make_selection(0, 5, 0, 10))
    assert not selections_overlap(cursor, cursor)


def test_overlap_is_symmetric_for_random_selections() -> None:
    rng = random.Random(1234)
    for _ in range(500):
        left = random_selection(rng)
        right = random_selection(rng)
        assert selections_overlap(left, right) == selections_overlap(right, left)


def test_from_cursors_orders_start_before_end() -> None:
    selection = TextSelection.from_cursors("file:///doc.txt", (3, 1), (1, 7))

    assert selection.start == (1, 7)
    assert selection.end == (3, 1)
    assert selection.is_empty is False


def test_tracker_add_remove_and_snapshot() -> None:
    tracker = SelectionTracker()
    task = make_task("task_1", make_selection(0, 0, 0, 5))

    tracker.add_task(task)
    snapshot = tracker.get_active_tasks()
    snapshot.clear()

    assert tracker.get_active_tasks() == [task]
    assert "task_1" in tracker
    assert tracker.remove_task("task_1") == task
    assert len(tracker) == 0


def test_tracker_remove_unknown_id_is_noop() -> None:
    tracker = SelectionTracker()
    kept = make_task("kept", make_selection(0, 0, 0, 5))
    tracker.add_task(kept)

    assert tracker.remove_task("missing") is None
    assert tracker.get_active_tasks() == [kept]


def test_tracker_overlapping_queries() -> None:
    tracker = SelectionTracker()
    first = make_task("first", make_selection(0, 0, 0, 10))
    second = make_task("second", make_selection(2, 0, 2, 10))
    other_doc = make_task("other", make_selection(0, 0, 0, 10, uri="file:///x.txt"))
    for task in (first, second, other_doc):
        tracker.add_task(task)

    probe = make_selection(0, 5, 2, 1)

    assert {task.id for task in tracker.get_overlapping_tasks(probe)} == {
        "first",
        "second",
    }
    assert tracker.has_overlapping_tasks(probe)
    assert not tracker.has_overlapping_tasks(make_selection(1, 0, 1, 3))


def test_tracker_add_does_not_revalidate_overlap() -> None:
    tracker = SelectionTracker()
    tracker.add_task(make_task("a", make_selection(0, 0, 0, 10)))
    tracker.add_task(make_task("b", make_selection(0, 0, 0, 10)))

    assert len(tracker) == 2


def test_tracker_clear() -> None:
    tracker = SelectionTracker()
    tracker.add_task(make_task("a", make_selection(0, 0, 0, 10)))

    tracker.clear()

    assert tracker.get_active_tasks() == []


def test_rebase_moves_selection_after_shorter_edit() -> None:
    selection = make_selection(0, 6, 0, 11)

    moved = rebase_selection(selection, make_selection(0, 0, 0, 5), "he")

    assert moved == make_selection(0, 3, 0, 8)


def test_rebase_follows_inserted_lines() -> None:
    selection = make_selection(0, 6, 1, 4)

    moved = rebase_selection(selection, make_selection(0, 0, 0, 5), "hi\nthere")

    assert moved == make_selection(1, 6, 2, 4)


def test_rebase_keeps_lines_below_multi_line_edit_columns() -> None:
    selection = make_selection(3, 2, 3, 7)

    moved = rebase_selection(selection, make_selection(0, 0, 1, 4), "one")

    assert moved == make_selection(2, 2, 2, 7)


def test_rebase_leaves_selection_before_edit_alone() -> None:
    selection = make_selection(0, 0, 0, 5)

    assert rebase_selection(selection, make_selection(0, 5, 0, 11), "x") == selection
    assert (
        rebase_selection(selection, make_selection(0, 0, 0, 5, uri="file:///b"), "")
        == selection
    )


def test_rebase_reports_edit_inside_selection() -> None:
    selection = make_selection(0, 2, 0, 8)

    assert rebase_selection(selection, make_selection(0, 4, 0, 5), "zz") is None
    assert rebase_selection(selection, make_selection(0, 0, 0, 3), "") is None


def test_move_task_replaces_selection() -> None:
    tracker = SelectionTracker()
    tracker.add_task(make_task("task_1", make_selection(0, 6, 0, 11)))

    moved = tracker.move_task("task_1", make_selection(0, 3, 0, 8))

    assert moved is not None and moved.selection == make_selection(0, 3, 0, 8)
    assert tracker.get_task("task_1") == moved
    assert tracker.move_task("task_missing", make_selection(0, 0, 0, 1)) is None
