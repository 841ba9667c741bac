import pytest

from cad_engine.undo import CompositeAction, UndoAction, UndoRedoLog


class Counter:
    def __init__(self):
        self.value = 0

    def action(self, step, label="step"):
        def undo():
            self.value -= step

        def redo():
            self.value += step

        return UndoAction(label, undo, redo)


def test_undo_then_redo_restores_state():
    counter = Counter()
    log = UndoRedoLog()
    counter.value += 5
    log.record(counter.action(5))

    assert log.undo() is not None
    assert counter.value == 0
    assert log.redo() is not None
    assert counter.value == 5


def test_empty_stacks_are_no_ops():
    log = UndoRedoLog()
    assert log.undo() is None
    assert log.redo() is None
    assert not log.can_undo()
    assert not log.can_redo()


def test_recording_discards_redo_entries():
    counter = Counter()
    log = UndoRedoLog()
    log.record(counter.action(1))
    log.undo()
    assert log.can_redo()

    log.record(counter.action(2))
    assert not log.can_redo()
    assert log.redo() is None


def test_recording_is_ignored_while_applying_history():
    log = UndoRedoLog()

    def undo():
        log.record(UndoAction("nested", lambda: None, lambda: None))

    log.record(UndoAction("outer", undo, lambda: None))
    log.undo()
    assert log.undo_stack == []
    assert [a.label for a in log.redo_stack] == ["outer"]


def test_max_depth_drops_oldest():
    counter = Counter()
    log = UndoRedoLog(max_depth=2)
    for step in (1, 2, 3):
        log.record(counter.action(step, label=str(step)))
    assert [a.label for a in log.undo_stack] == ["2", "3"]


def test_failed_undo_stays_on_the_stack():
    log = UndoRedoLog()

    def broken():
        raise RuntimeError("boom")

    log.record(UndoAction("broken", broken, lambda: None))
    with pytest.raises(RuntimeError):
        log.undo()
    assert len(log.undo_stack) == 1
    assert not log.applying_history


def test_composite_order():
    calls = []
    first = UndoAction("a", lambda: calls.append("undo a"), lambda: calls.append("redo a"))
    second = UndoAction("b", lambda: calls.append("undo b"), lambda: calls.append("redo b"))
    composite = CompositeAction("both", [first, second])

    composite.undo()
    composite.redo()
    assert calls == ["undo b", "undo a", "redo a", "redo b"]


def test_composite_is_all_or_nothing():
    counter = Counter()

    def broken():
        raise RuntimeError("boom")

    composite = CompositeAction("mixed", [
        counter.action(1),
        counter.action(10),
        UndoAction("broken", lambda: None, broken),
    ])

    with pytest.raises(RuntimeError):
        composite.redo()
    # The first two children were applied and then rolled back
    assert counter.value == 0
