from cad_engine import Point2D
from editor import (CancelInput, CommandRegistry, CommandRunner, CommandSpec, MessageType,
                    TextInput)
from editor.prompts import PointOptions

from .conftest import RecordingCommandLine


def _runner_with(document, *specs):
    registry = CommandRegistry()
    for spec in specs:
        registry.register(spec)
    command_line = RecordingCommandLine()
    return CommandRunner(document, command_line, registry), command_line


def test_command_name_is_printed_first(session):
    session.run("L")
    assert session.command_line.lines[0] == (MessageType.COMMAND, "LINE")
    assert session.command_line.prompt == "Specify first point:"


def test_unknown_command(session):
    assert not session.runner.start("FOO")
    assert session.errors() == ['Unknown command "FOO"']


def test_prompt_shows_keywords(session):
    session.run("LINE", "0,0", "10,0")
    assert session.command_line.prompt == "Specify next point [Close/Undo]:"


def test_jig_follows_pointer(session):
    session.run("LINE", "0,0")
    session.move(5, 5)
    preview = session.document.preview
    assert len(preview) == 1
    assert preview[0].end == Point2D(5, 5)
    assert session.document.entities == []


def test_distance_jig_gets_radius(session):
    session.run("CIRCLE", "0,0")
    session.move(3, 4)
    assert session.document.preview[0].radius == 5


def test_cancel_runs_cleanup(session):
    doc = session.document
    line = doc.add_line(0, 0, 100, 0)
    doc.select_object(line.handle)
    session.run("MOVE", "0,0")
    session.move(10, 10)
    assert doc.preview
    assert doc.highlighted == [line.handle]

    session.runner.cancel()

    assert not session.runner.running
    assert "*Cancel*" in session.output()
    assert doc.preview == []
    assert doc.highlighted == []
    assert doc.selected_count == 0
    assert doc.active_writer is None
    assert line.start == Point2D(0, 0)


def test_escape_event_cancels(session):
    session.run("LINE", "0,0", "10,0", CancelInput())
    assert not session.runner.running
    assert session.document.drawing_points == []
    # The segment drawn before cancelling stays and can be undone
    assert len(session.document.entities) == 1
    session.run("UNDO")
    assert session.document.entities == []


def test_cancel_flag_stops_loops(document):
    seen = []

    def stubborn(ctx):
        while True:
            ctx.editor.check_cancelled()
            result = yield from ctx.editor.get_point(PointOptions("Point"))
            seen.append(result.status)

    runner, _ = _runner_with(document, CommandSpec("STUBBORN", "ST", "", "Test", stubborn))
    runner.start("ST")
    runner.cancel()
    assert not runner.running
    assert len(seen) == 1


def test_unexpected_error_is_reported(document):
    def broken(ctx):
        yield from ctx.editor.get_point(PointOptions("Point"))
        raise ValueError("boom")

    runner, command_line = _runner_with(document, CommandSpec("BROKEN", "BR", "", "Test", broken))
    runner.start("BROKEN")
    runner.send(TextInput("1,1"))

    assert not runner.running
    assert command_line.messages(MessageType.ERROR) == ["Error: boom"]
    assert document.active_writer is None
    assert command_line.prompt == "Command:"


def test_one_command_at_a_time(session):
    session.run("LINE")
    assert not session.runner.start("CIRCLE")

    other = CommandRunner(session.document, RecordingCommandLine(), session.registry)
    assert not other.start("CIRCLE")
    assert session.document.undo() is None


def test_events_without_command_are_ignored(session):
    assert not session.runner.send(TextInput("0,0"))
