"""Tests for the bounded undo/redo history."""
from sagascribe.core.annotations import (
    ActionType,
    HistoryAction,
    UndoRedoStack,
    create_lemma_annotation,
)


def make_action(word_index: int) -> HistoryAction:
    return HistoryAction(ActionType.ADD, create_lemma_annotation(word_index, "maðr", "xNC"))


class TestInitialState:

    def test_nothing_to_undo_or_redo(self, history) -> None:
        assert not history.can_undo()
        assert not history.can_redo()
        assert history.max_history == 50

    def test_undo_and_redo_on_empty_stacks_return_none(self, history) -> None:
        assert history.undo() is None
        assert history.redo() is None
        assert history.undo_stack == []
        assert history.redo_stack == []


class TestPushAction:

    def test_push_enables_undo(self, history) -> None:
        history.push_action(make_action(0))
        assert history.can_undo()
        assert not history.can_redo()

    def test_push_clears_redo_stack(self, history) -> None:
        history.push_action(make_action(0))
        history.undo()
        assert history.can_redo()

        history.push_action(make_action(1))
        assert not history.can_redo()
        assert history.redo_stack == []

    def test_bounded_history_keeps_most_recent(self) -> None:
        history = UndoRedoStack(max_history=5)
        actions = [make_action(i) for i in range(8)]
        for action in actions:
            history.push_action(action)

        assert len(history.undo_stack) == 5
        assert history.undo_stack == actions[-5:]


class TestUndoRedo:

    def test_round_trip_returns_same_action(self, history) -> None:
        first, second = make_action(0), make_action(1)
        history.push_action(first)
        history.push_action(second)
        undo_len, redo_len = len(history.undo_stack), len(history.redo_stack)

        assert history.undo() is second
        assert history.redo_stack == [second]
        assert history.redo() is second

        assert len(history.undo_stack) == undo_len
        assert len(history.redo_stack) == redo_len

    def test_undo_is_lifo(self, history) -> None:
        actions = [make_action(i) for i in range(3)]
        for action in actions:
            history.push_action(action)

        assert [history.undo() for _ in range(3)] == list(reversed(actions))
        assert history.undo() is None
        assert [history.redo() for _ in range(3)] == actions

    def test_all_four_states_reachable(self, history) -> None:
        history.push_action(make_action(0))
        history.push_action(make_action(1))
        assert (history.can_undo(), history.can_redo()) == (True, False)
        history.undo()
        assert (history.can_undo(), history.can_redo()) == (True, True)
        history.undo()
        assert (history.can_undo(), history.can_redo()) == (False, True)


class TestClearAndResize:

    def test_clear_empties_both_stacks(self, history) -> None:
        history.push_action(make_action(0))
        history.push_action(make_action(1))
        history.undo()
        history.clear()
        assert not history.can_undo()
        assert not history.can_redo()

    def test_clear_redo_keeps_undo_stack(self, history) -> None:
        history.push_action(make_action(0))
        history.push_action(make_action(1))
        history.undo()

        history.clear_redo()

        assert not history.can_redo()
        assert len(history.undo_stack) == 1

    def test_shrinking_keeps_most_recent(self, history) -> None:
        actions = [make_action(i) for i in range(10)]
        for action in actions:
            history.push_action(action)

        history.set_max_history(3)
        assert history.max_history == 3
        assert history.undo_stack == actions[-3:]

        history.push_action(make_action(10))
        assert len(history.undo_stack) == 3

    def test_growing_keeps_everything(self, history) -> None:
        for i in range(4):
            history.push_action(make_action(i))
        history.set_max_history(100)
        assert len(history.undo_stack) == 4

    def test_snapshots_are_copies(self, history) -> None:
        history.push_action(make_action(0))
        history.undo_stack.clear()
        assert history.can_undo()
