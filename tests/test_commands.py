"""Command scripts driven through the runner"""
import math

import pytest

from cad_engine import Arc, Circle, Dimension, Line, Point2D, Polyline
from editor import MessageType


def _xy(point):
    return (pytest.approx(point.x), pytest.approx(point.y))


# ---------------------------------------------------------------------------
# LINE / PLINE
# ---------------------------------------------------------------------------

def test_line_close(session):
    session.run("LINE", "0,0", "10,0", "@0,10", "c")
    doc = session.document

    assert not session.runner.running
    assert [type(e) for e in doc.entities] == [Line, Line, Line]
    assert doc.entities[1].end == Point2D(10, 10)
    assert doc.entities[2].start == Point2D(10, 10)
    assert doc.entities[2].end == Point2D(0, 0)
    assert len(doc.history.undo_stack) == 1

    doc.undo()
    assert doc.entities == []
    doc.redo()
    assert len(doc.entities) == 3


def test_line_undo_removes_last_segment(session):
    session.run("LINE", "0,0", "10,0", "20,0", "u", "")
    entities = session.document.entities
    assert len(entities) == 1
    assert entities[0].end == Point2D(10, 0)


def test_line_undo_back_to_nothing(session):
    session.run("LINE", "0,0", "u")
    assert not session.runner.running
    assert session.document.entities == []
    assert session.document.history.undo_stack == []


def test_line_close_not_offered_with_one_point(session):
    session.run("LINE", "0,0", "c")
    assert session.runner.running
    assert session.errors()


def test_polyline_is_one_entity(session):
    session.run("PLINE", "0,0", (10, 0), "10,10", "close")
    doc = session.document
    assert len(doc.entities) == 1
    polyline = doc.entities[0]
    assert isinstance(polyline, Polyline)
    assert polyline.vertices == [Point2D(0, 0), Point2D(10, 0), Point2D(10, 10)]
    assert polyline.closed

    doc.undo()
    assert doc.entities == []


def test_polyline_undo_vertices(session):
    session.run("PLINE", "0,0", "10,0", "10,10", "u", "")
    polyline = session.document.entities[0]
    assert polyline.vertices == [Point2D(0, 0), Point2D(10, 0)]

    session.run("PLINE", "50,50", "60,50", "u", "")
    assert len(session.document.entities) == 1


def test_polyline_needs_three_vertices_to_close(session):
    session.run("PLINE", "0,0", "10,0")
    assert session.command_line.prompt == "Specify next point [Undo]:"
    session.feed("c")
    assert session.runner.running
    assert session.errors()

    session.feed("10,10")
    assert session.command_line.prompt == "Specify next point [Close/Undo]:"
    session.feed("c")
    assert not session.runner.running
    assert session.document.entities[0].closed


# ---------------------------------------------------------------------------
# CIRCLE / ARC / RECTANGLE
# ---------------------------------------------------------------------------

def test_circle_center_radius(session):
    session.run("CIRCLE", "5,5", "2.5", "")
    circle = session.document.entities[0]
    assert isinstance(circle, Circle)
    assert circle.center == Point2D(5, 5)
    assert circle.radius == 2.5


def test_circle_radius_by_click_and_diameter(session):
    session.run("CIRCLE", "0,0", (3, 4), "0,0", "d", "10", "")
    radii = [c.radius for c in session.document.entities]
    assert radii == [pytest.approx(5), pytest.approx(5)]
    assert len(session.document.history.undo_stack) == 2


def test_circle_three_points(session):
    session.run("CIRCLE", "3p", "0,0", "2,0", "0,2", "")
    circle = session.document.entities[0]
    assert _xy(circle.center) == (1, 1)
    assert circle.radius == pytest.approx(math.sqrt(2))


def test_circle_three_collinear_points_keeps_looping(session):
    session.run("CIRCLE", "3p", "0,0", "1,1", "2,2")
    assert session.runner.running
    assert "Points are collinear - cannot create circle" in session.errors()
    assert session.document.entities == []


def test_circle_two_points(session):
    session.run("CIRCLE", "2p", "0,0", "10,0", "")
    circle = session.document.entities[0]
    assert _xy(circle.center) == (5, 0)
    assert circle.radius == pytest.approx(5)


def test_circle_ttr_not_implemented(session):
    session.run("CIRCLE", "t")
    assert session.runner.running
    assert session.errors()


def test_arc_three_points(session):
    session.run("ARC", "1,0", "0,1", "-1,0", "")
    arc = session.document.entities[0]
    assert isinstance(arc, Arc)
    assert arc.radius == pytest.approx(1)
    assert (arc.start_angle, arc.end_angle) == (pytest.approx(0), pytest.approx(180))


def test_arc_center_start_end(session):
    session.run("ARC", "c", "0,0", "5,0", "0,5", "")
    arc = session.document.entities[0]
    assert arc.radius == pytest.approx(5)
    assert (arc.start_angle, arc.end_angle) == (pytest.approx(0), pytest.approx(90))


def test_rectangle(session):
    session.run("REC", "0,0", "@20,10", "")
    rectangle = session.document.entities[0]
    assert rectangle.closed
    assert rectangle.vertices == [Point2D(0, 0), Point2D(20, 0), Point2D(20, 10), Point2D(0, 10)]


def test_degenerate_rectangle(session):
    session.run("REC", "0,0", "0,10", "")
    assert session.document.entities == []
    assert session.errors() == ["Rectangle has zero width or height"]


# ---------------------------------------------------------------------------
# MOVE / COPY / ERASE
# ---------------------------------------------------------------------------

def test_move_selected(session):
    doc = session.document
    line = doc.add_line(0, 0, 100, 0)
    doc.select_object(line.handle)

    session.run("MOVE", "0,0", "@5,5")
    assert line.start == Point2D(5, 5)
    assert line.end == Point2D(105, 5)
    assert doc.selected_count == 0

    doc.undo()
    assert line.start == Point2D(0, 0)


def test_move_prompts_for_selection(session):
    doc = session.document
    line = doc.add_line(0, 0, 100, 0)
    session.run("MOVE", (50, 1), "", "0,0", "0,-10")
    assert line.start == Point2D(0, -10)


def test_move_without_selection(session):
    session.run("MOVE", "")
    assert not session.runner.running
    assert "No objects selected. Select objects first." in session.output()


def test_move_skips_locked_layers(session):
    doc = session.document
    doc.layer_manager.add_layer("Locked", locked=True)
    free = doc.add_line(0, 0, 100, 0)
    locked = doc.add_line(0, 50, 100, 50, layer="Locked")
    doc.select_all()

    session.run("MOVE", "0,0", "10,0")
    assert free.start == Point2D(10, 0)
    assert locked.start == Point2D(0, 50)


def test_copy_multiple_with_undo(session):
    doc = session.document
    line = doc.add_line(0, 0, 100, 0)
    doc.select_object(line.handle)

    session.run("COPY", "0,0", "0,10", "0,20", "u", "0,30", "")
    assert [e.start.y for e in doc.entities] == [0, 10, 30]
    assert len({e.handle for e in doc.entities}) == 3
    assert len(doc.history.undo_stack) == 1

    doc.undo()
    assert [e.start.y for e in doc.entities] == [0]
    doc.redo()
    assert [e.start.y for e in doc.entities] == [0, 10, 30]


def test_copy_undone_placement_cannot_be_redone(session):
    doc = session.document
    line = doc.add_line(0, 0, 100, 0)
    doc.select_object(line.handle)

    session.run("COPY", "0,0", "0,10", "u", "")
    assert doc.entities == [line]
    assert doc.history.undo_stack == []

    session.run("REDO")
    assert doc.entities == [line]
    assert "Nothing to redo" in session.output()


def test_erase_restores_at_original_index(session):
    doc = session.document
    a = doc.add_line(0, 0, 100, 0)
    b = doc.add_line(0, 50, 100, 50)
    c = doc.add_line(0, 100, 100, 100)
    doc.select_object(b.handle)

    session.run("ERASE")
    assert doc.entities == [a, c]
    assert "1 object erased" in session.output()

    session.run("UNDO")
    assert doc.entities == [a, b, c]
    session.run("REDO")
    assert doc.entities == [a, c]


def test_erase_skips_locked(session):
    doc = session.document
    doc.layer_manager.add_layer("Locked", locked=True)
    doc.add_line(0, 0, 100, 0, layer="Locked")
    doc.select_all()

    session.run("E")
    assert len(doc.entities) == 1
    assert "1 object on locked layer(s) - skipped" in session.output()


# ---------------------------------------------------------------------------
# OFFSET
# ---------------------------------------------------------------------------

def test_offset_line_by_distance(session):
    doc = session.document
    doc.add_line(0, 0, 100, 0)
    session.run("OFFSET", "5", (50, 0), (50, 20), "")

    assert len(doc.entities) == 2
    assert doc.entities[1].start == Point2D(0, 5)
    assert session.runner.variables["OFFSETDIST"] == 5
    assert "1 offset created" in session.output()


def test_offset_default_distance_persists(session):
    doc = session.document
    doc.add_line(0, 0, 100, 0)
    session.run("OFFSET", "7", "")
    session.run("OFFSET", "", (50, 0), (50, -20), "")
    assert doc.entities[1].start.y == pytest.approx(-7)


def test_offset_through_point(session):
    doc = session.document
    circle = doc.add_entity(Circle(center=Point2D(0, 0), radius=50))
    session.run("OFFSET", "t", (50, 0), (0, 80), "")
    assert doc.entities[1].radius == pytest.approx(80)
    assert circle.radius == 50


def test_offset_rejects_locked_layer(session):
    doc = session.document
    doc.layer_manager.add_layer("Walls", locked=True)
    doc.add_line(0, 0, 100, 0, layer="Walls")
    session.run("OFFSET", "5", (50, 0))

    assert session.runner.running
    assert session.errors() == ['Object is on locked layer "Walls"']
    session.feed("")
    assert len(doc.entities) == 1


def test_offset_rejects_unsupported_type(session):
    doc = session.document
    doc.add_point(10, 10)
    session.run("OFFSET", "5", (10, 10), "")
    assert session.errors() == ["Cannot offset POINT"]


def test_offset_circle_too_small(session):
    doc = session.document
    doc.add_entity(Circle(center=Point2D(0, 0), radius=50))
    session.run("OFFSET", "60", (50, 0), (0, 0), "")
    assert session.errors() == ["Cannot create offset"]
    assert len(doc.entities) == 1


# ---------------------------------------------------------------------------
# PEDIT
# ---------------------------------------------------------------------------

def _open_polyline(doc):
    return doc.add_entity(Polyline(vertices=[Point2D(0, 0), Point2D(100, 0)]))


def test_pedit_join_then_undo_redo(session):
    doc = session.document
    polyline = _open_polyline(doc)
    right = doc.add_line(100, 0, 100, 100)
    top = doc.add_line(100, 100, 0, 100)

    session.run("PEDIT", (50, 0), "j", (100, 50), (50, 100), "", "")
    assert not session.runner.running
    assert doc.entities == [polyline]
    assert polyline.vertices == [Point2D(0, 0), Point2D(100, 0), Point2D(100, 100), Point2D(0, 100)]
    assert "2 objects joined" in session.output()

    doc.undo()
    assert doc.entities == [polyline, right, top]
    assert polyline.vertices == [Point2D(0, 0), Point2D(100, 0)]

    doc.redo()
    assert doc.entities == [polyline]
    assert len(polyline.vertices) == 4


def test_pedit_join_out_of_order_chain(session):
    doc = session.document
    polyline = _open_polyline(doc)
    doc.add_line(100, 100, 0, 100)
    doc.add_line(100, 0, 100, 100)

    session.run("PEDIT", (50, 0), "j", (50, 100), (100, 50), "", "")
    assert doc.entities == [polyline]
    assert polyline.vertices[-1] == Point2D(0, 100)


def test_pedit_close_open_reverse(session):
    doc = session.document
    polyline = doc.add_entity(Polyline(vertices=[Point2D(0, 0), Point2D(100, 0), Point2D(100, 100)]))

    session.run("PEDIT", (50, 0), "c", "r", "")
    assert polyline.closed
    assert polyline.vertices[0] == Point2D(100, 100)
    assert len(doc.history.undo_stack) == 2

    doc.undo()
    assert polyline.vertices[0] == Point2D(0, 0)
    doc.undo()
    assert not polyline.closed


def test_pedit_converts_line(session):
    doc = session.document
    first = doc.add_line(0, 50, 100, 50)
    line = doc.add_line(0, 0, 100, 0)

    session.run("PEDIT", (50, 0), "", "")
    assert isinstance(doc.entities[1], Polyline)
    assert doc.entities[0] is first

    doc.undo()
    assert doc.entities == [first, line]


def test_pedit_declined_conversion(session):
    doc = session.document
    line = doc.add_line(0, 0, 100, 0)
    session.run("PEDIT", (50, 0), "n")
    assert doc.entities == [line]
    assert not session.runner.running


def test_pedit_edit_vertices(session):
    doc = session.document
    polyline = doc.add_entity(Polyline(vertices=[Point2D(0, 0), Point2D(100, 0), Point2D(100, 100)]))

    session.run("PEDIT", (50, 0), "e", "i", "50,-10", "m", "50,-20", "n", "b", "x", "")
    assert not session.runner.running
    # Inserted (50,-10), moved it to (50,-20), then deleted the vertex after it
    assert polyline.vertices == [Point2D(0, 0), Point2D(50, -20), Point2D(100, 100)]
    assert session.document.drawing_points == []

    doc.undo()
    doc.undo()
    doc.undo()
    assert polyline.vertices == [Point2D(0, 0), Point2D(100, 0), Point2D(100, 100)]


def test_pedit_break_keeps_two_vertices(session):
    doc = session.document
    polyline = _open_polyline(doc)
    session.run("PEDIT", (50, 0), "e", "b")
    assert len(polyline.vertices) == 2
    assert "Cannot delete - polyline needs at least 2 vertices" in session.errors()


def test_pedit_rejects_other_types(session):
    doc = session.document
    doc.add_entity(Circle(center=Point2D(0, 0), radius=50))
    session.run("PEDIT", (50, 0))
    assert session.runner.running
    assert session.errors() == ["Object selected is not a polyline or line"]


# ---------------------------------------------------------------------------
# DIM
# ---------------------------------------------------------------------------

def test_dim_picks_horizontal_from_cursor(session):
    session.run("DIM", "0,0", "10,0")
    assert session.command_line.prompt == \
        "Specify dimension line location [Aligned/Horizontal/Vertical]:"
    session.move(5, 8)
    assert isinstance(session.document.preview[0], Dimension)
    session.feed("5,8")

    doc = session.document
    assert not session.runner.running
    assert len(doc.entities) == 1
    dimension = doc.entities[0]
    assert isinstance(dimension, Dimension)
    assert dimension.dim_type == "horizontal"
    assert dimension.measurement == pytest.approx(10)
    assert dimension.definition_point == Point2D(10, 8)
    assert dimension.text_midpoint == Point2D(5, 8)
    assert "Dimension text = 10.0000" in session.output()

    session.run("UNDO")
    assert doc.entities == []


def test_dim_vertical_and_aligned(session):
    session.run("DIMLIN", "0,0", "3,4", "-10,2")
    vertical = session.document.entities[-1]
    assert vertical.dim_type == "vertical"
    assert vertical.measurement == pytest.approx(4)

    session.run("DLI", "0,0", "3,4", "a", "-4,3")
    aligned = session.document.entities[-1]
    assert aligned.dim_type == "aligned"
    assert aligned.measurement == pytest.approx(5)
    assert _xy(aligned.text_midpoint) == (-2.5, 5)


def test_dim_too_short_is_rejected(session):
    session.run("DIM", "0,0", "0,10", "h", "5,5")
    assert session.errors() == ["Extension line origins are too close"]
    assert session.document.entities == []
    assert not session.runner.running


# ---------------------------------------------------------------------------
# DIST / UNDO / REDO
# ---------------------------------------------------------------------------

def test_dist(session):
    session.run("DI", "0,0", "@3,4")
    output = session.output()
    assert "Distance = 5.0000" in output
    assert "Delta X = 3.0000, Delta Y = 4.0000" in output
    assert session.document.entities == []


def test_undo_and_redo_commands(session):
    session.run("LINE", "0,0", "10,0", "")
    session.run("U")
    assert session.document.entities == []
    assert "Undo Line" in session.command_line.messages(MessageType.SUCCESS)

    session.run("REDO")
    assert len(session.document.entities) == 1

    session.run("REDO")
    assert "Nothing to redo" in session.output()
