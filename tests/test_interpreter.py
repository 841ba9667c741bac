import pytest

from cad_engine import Line, Point2D
from editor.events import CancelInput, PointerClick, PointerMove, TextInput
from editor.interpreter import InputInterpreter
from editor.prompts import (DistanceOptions, EntityOptions, Keyword, KeywordOptions,
                            PointOptions, PromptStatus, SelectionOptions)

CLOSE = Keyword("Close", "CLOSE", "C")


@pytest.fixture
def interpreter(document):
    return InputInterpreter(document)


def test_cancel_is_terminal(interpreter):
    outcome = interpreter.interpret_point(CancelInput(), PointOptions("Point"))
    assert outcome.result.status == PromptStatus.CANCEL


def test_empty_input(interpreter):
    outcome = interpreter.interpret_point(TextInput(""), PointOptions("Point", allow_none=True))
    assert outcome.result.status == PromptStatus.NONE

    outcome = interpreter.interpret_point(TextInput(""), PointOptions("Point"))
    assert not outcome.terminal


def test_keyword_before_parsing(interpreter):
    options = PointOptions("Point", keywords=[CLOSE])
    outcome = interpreter.interpret_point(TextInput("c"), options)
    assert outcome.result.keyword == "CLOSE"


def test_point_parse_failure_reprompts(interpreter):
    outcome = interpreter.interpret_point(TextInput("abc"), PointOptions("Point"))
    assert not outcome.terminal
    assert outcome.message


def test_point_relative_to_base(interpreter):
    options = PointOptions("Point", base_point=Point2D(1, 1))
    outcome = interpreter.interpret_point(TextInput("@2,3"), options)
    assert outcome.result.value == Point2D(3, 4)


def test_pointer_move_updates_preview_only(interpreter):
    outcome = interpreter.interpret_point(PointerMove(Point2D(4, 4)), PointOptions("Point"))
    assert not outcome.terminal
    assert outcome.preview == Point2D(4, 4)


def test_distance_from_number_click_and_point(interpreter):
    options = DistanceOptions("Radius", base_point=Point2D(0, 0))
    assert interpreter.interpret_distance(TextInput("2.5"), options).result.value == 2.5
    assert interpreter.interpret_distance(
        PointerClick(Point2D(3, 4)), options).result.value == pytest.approx(5)
    assert interpreter.interpret_distance(TextInput("@0,7"), options).result.value == 7
    assert interpreter.interpret_distance(
        PointerMove(Point2D(0, 2)), options).preview == pytest.approx(2)


def test_distance_rejects_non_positive(interpreter):
    outcome = interpreter.interpret_distance(TextInput("0"), DistanceOptions("Radius"))
    assert not outcome.terminal
    assert "positive" in outcome.message


def test_distance_default_on_enter(interpreter):
    outcome = interpreter.interpret_distance(TextInput(""), DistanceOptions("D", default_value=4.0))
    assert outcome.result.value == 4.0


def test_distance_click_without_base_is_ignored(interpreter):
    outcome = interpreter.interpret_distance(PointerClick(Point2D(1, 1)), DistanceOptions("D"))
    assert not outcome.terminal


def test_entity_pick(document, interpreter):
    line = document.add_entity(Line(start=Point2D(0, 0), end=Point2D(100, 0)))
    options = EntityOptions("Select")

    outcome = interpreter.interpret_entity(PointerClick(Point2D(50, 1)), options)
    assert outcome.result.value is line

    outcome = interpreter.interpret_entity(PointerClick(Point2D(50, 80)), options)
    assert outcome.message == "Nothing selected"

    outcome = interpreter.interpret_entity(PointerClick(Point2D(50, 80), line.handle), options)
    assert outcome.result.value is line


def test_entity_type_filter(document, interpreter):
    document.add_entity(Line(start=Point2D(0, 0), end=Point2D(100, 0)))
    options = EntityOptions("Select", allowed_types=("LWPOLYLINE",), reject_message="No")
    outcome = interpreter.interpret_entity(PointerClick(Point2D(50, 0)), options)
    assert not outcome.terminal
    assert outcome.message == "No"


def test_selection_toggles_and_finishes(document, interpreter):
    line = document.add_entity(Line(start=Point2D(0, 0), end=Point2D(100, 0)))
    options = SelectionOptions("Select objects")

    outcome = interpreter.interpret_selection(PointerClick(Point2D(50, 0)), options)
    assert outcome.message == "1 object selected"
    assert line.selected

    outcome = interpreter.interpret_selection(TextInput(""), options)
    assert outcome.result.value == [line]


def test_empty_selection_is_none(interpreter):
    outcome = interpreter.interpret_selection(TextInput(""), SelectionOptions("Select objects"))
    assert outcome.result.status == PromptStatus.NONE


def test_keyword_prompt(interpreter):
    yes = Keyword("Yes", "YES", "Y")
    no = Keyword("No", "NO", "N")
    options = KeywordOptions("Convert?", keywords=[yes, no], default_keyword="YES")
    assert interpreter.interpret_keywords(TextInput("n"), options).result.keyword == "NO"
    assert interpreter.interpret_keywords(TextInput(""), options).result.keyword == "YES"
    assert not interpreter.interpret_keywords(TextInput("maybe"), options).terminal
    assert not interpreter.interpret_keywords(PointerClick(Point2D(0, 0)), options).terminal
