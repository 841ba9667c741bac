import pytest

from cad_engine import CADDocument, DocumentBusyError, Line, Point2D, Polyline


def _line(x):
    return Line(start=Point2D(x, 0), end=Point2D(x, 10))


def test_handles_are_unique_and_never_reused(document):
    first = document.add_entity(_line(0))
    document.delete_entity(first)
    second = document.add_entity(_line(1))
    assert first.handle
    assert second.handle != first.handle
    assert document.get_entity(second.handle) is second


def test_duplicate_handle_is_rejected(document):
    document.add_entity(Line(handle="ABC"))
    with pytest.raises(ValueError):
        document.add_entity(Line(handle="ABC"))


def test_clone_gets_new_handle(document):
    original = document.add_entity(_line(0))
    clone = document.clone_entity(original)
    assert clone is not original
    assert clone.handle != original.handle
    assert clone.start == original.start
    assert document.entities == [original, clone]


def test_delete_restores_at_original_indices(document):
    a, b, c, d = (document.add_entity(_line(x)) for x in range(4))
    document.delete_entities([b, d])
    assert document.entities == [a, c]

    document.undo()
    assert document.entities == [a, b, c, d]

    document.redo()
    assert document.entities == [a, c]


def test_add_action_undo_redo(document):
    a = document.add_entity(_line(0))
    b = document.add_entity(_line(1))
    document.record_add_action([a, b])

    document.undo()
    assert document.entities == []
    document.redo()
    assert document.entities == [a, b]


def test_move_action(document):
    line = document.add_entity(_line(0))
    line.translate(5, 5)
    document.record_move_action([line], 5, 5)

    document.undo()
    assert line.start == Point2D(0, 0)
    document.redo()
    assert line.start == Point2D(5, 5)


def test_polyline_modify_action(document):
    polyline = document.add_entity(Polyline(vertices=[Point2D(0, 0), Point2D(1, 0)]))
    old = list(polyline.vertices)
    polyline.vertices.append(Point2D(1, 1))
    polyline.closed = True
    document.record_polyline_modify_action(polyline, old, False, polyline.vertices, True)

    document.undo()
    assert polyline.vertices == old
    assert not polyline.closed
    document.redo()
    assert len(polyline.vertices) == 3
    assert polyline.closed


def test_undo_group_is_one_step(document):
    a = document.add_entity(_line(0))
    b = document.add_entity(_line(1))
    with document.undo_group("Both"):
        document.record_move_action([a], 1, 0)
        document.delete_entities([b])
    a.translate(1, 0)

    assert len(document.history.undo_stack) == 1
    document.undo()
    assert document.entities == [a, b]
    assert a.start == Point2D(0, 0)


def test_undo_group_reverts_on_error(document):
    a = document.add_entity(_line(0))
    b = document.add_entity(_line(1))
    with pytest.raises(RuntimeError):
        with document.undo_group("Broken"):
            document.delete_entities([a])
            raise RuntimeError("join failed")

    assert document.entities == [a, b]
    assert document.history.undo_stack == []
    # A later action is recorded on its own again
    document.delete_entities([b])
    assert len(document.history.undo_stack) == 1


def test_selection(document):
    a = document.add_entity(_line(0))
    b = document.add_entity(_line(50))
    document.select_object(a.handle)
    document.toggle_selection(b.handle)
    assert document.get_selected_entities() == [a, b]
    assert a.selected

    document.delete_entity(a)
    assert document.selected_count == 1
    assert not a.selected

    document.clear_selection()
    assert document.selected_count == 0
    assert not b.selected


def test_locked_entities_survive_delete_selected(document):
    document.layer_manager.add_layer("Frozen", locked=True)
    free = document.add_entity(_line(0))
    locked = document.add_entity(Line(layer="Frozen"))
    document.select_all()

    assert document.delete_selected_entities() == (1, 1)
    assert document.entities == [locked]
    assert free not in document.entities


def test_exclusive_access(document):
    owner = object()
    with document.exclusive_access(owner):
        with pytest.raises(DocumentBusyError):
            with document.exclusive_access(object()):
                pass
        document.add_entity(_line(0))
        document.record_add_action(document.entities)
        # Only the owner may run history while it holds the document
        assert document.undo() is None
        assert document.undo(owner=owner) is not None
    assert document.active_writer is None


def test_pick_and_bounding_box(document):
    document.add_line(0, 0, 100, 0)
    document.add_point(50, 50)
    assert [e.dxftype() for e in document.get_geometries_at_point(50, 2)] == ["LINE"]
    assert document.get_bounding_box() == (0, 0, 100, 50)

    document.layer_manager.add_layer("Hidden", visible=False)
    document.add_entity(Line(start=Point2D(0, 0), end=Point2D(500, 500), layer="Hidden"))
    assert document.get_bounding_box() == (0, 0, 100, 50)


def test_listeners_are_notified(document):
    calls = []
    document.add_listener(lambda: calls.append(1))
    document.add_line(0, 0, 1, 1)
    assert calls
