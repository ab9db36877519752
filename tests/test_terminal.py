"""Test the blessed/curtsies terminal surface."""

import io
from unittest.mock import MagicMock, patch

import pytest
from curtsies.events import PasteEvent

from scrollpad.constants import EditorConstants
from scrollpad.terminal import TerminalInterface


def fake_blessed(width=80, height=24):
    """A blessed.Terminal stand-in that renders sequences as readable tags."""
    term = MagicMock()
    term.width = width
    term.height = height
    term.home = "<home>"
    term.clear = "<clear>"
    term.normal = "<normal>"
    term.reverse = "<reverse>"
    term.enter_fullscreen = "<fullscreen>"
    term.exit_fullscreen = "</fullscreen>"
    term.normal_cursor = "<cursor>"
    term.move_xy.side_effect = lambda x, y: f"<{x},{y}>"
    term.move_left.side_effect = lambda n: f"<left {n}>"
    term.move_right.side_effect = lambda n: f"<right {n}>"
    return term


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def terminal(stream):
    return TerminalInterface(terminal=fake_blessed(), stream=stream)


def test_output_is_buffered_until_flush(terminal, stream):
    terminal.write("abc")
    terminal.move_to(3, 1)
    assert stream.getvalue() == ""

    terminal.flush()

    assert stream.getvalue() == "abc<3,1>"


def test_move_to_next_line_follows_last_row(terminal, stream):
    terminal.move_to(5, 2)
    terminal.move_to_next_line()
    terminal.move_to_next_line()
    terminal.flush()
    assert stream.getvalue() == "<5,2><0,3><0,4>"


def test_clear_resets_row_tracking(terminal, stream):
    terminal.move_to(0, 7)
    terminal.clear()
    terminal.move_to_next_line()
    terminal.flush()
    assert stream.getvalue().endswith("<home><clear><0,1>")


def test_zero_relative_moves_emit_nothing(terminal, stream):
    terminal.move_left(0)
    terminal.move_right(0)
    terminal.move_left(2)
    terminal.flush()
    assert stream.getvalue() == "<left 2>"


def test_height_excludes_status_line(terminal):
    assert terminal.width == 80
    assert terminal.height == 24 - EditorConstants.STATUS_ROWS


def test_status_line_is_padded_on_last_row(stream):
    terminal = TerminalInterface(terminal=fake_blessed(width=10, height=5), stream=stream)
    terminal.draw_status(" hi")
    terminal.flush()
    assert stream.getvalue() == "<0,4><reverse> hi       <normal>"


def test_status_line_is_cut_to_width(stream):
    terminal = TerminalInterface(terminal=fake_blessed(width=4, height=5), stream=stream)
    terminal.draw_status("abcdefgh")
    terminal.flush()
    assert "abcd<normal>" in stream.getvalue()


def test_cursor_shape_sequences(terminal, stream):
    terminal.set_cursor_shape('block')
    terminal.reset_cursor_shape()
    terminal.flush()
    assert stream.getvalue() == "\x1b[1 q\x1b[0 q"


@patch('scrollpad.terminal.Input')
def test_context_manager_enters_and_restores(mock_input, terminal, stream):
    with terminal as t:
        assert t is terminal
        assert terminal.is_fullscreen
        mock_input.assert_called_once_with(keynames='curtsies', disable_terminal_start_stop=True)
        mock_input.return_value.__enter__.assert_called_once()

    assert not terminal.is_fullscreen
    mock_input.return_value.__exit__.assert_called_once()
    output = stream.getvalue()
    assert output.startswith("<fullscreen>")
    assert output.endswith(EditorConstants.CURSOR_SHAPE_RESET + "<normal></fullscreen><cursor>")


@patch('scrollpad.terminal.Input')
def test_terminal_restored_when_body_raises(mock_input, terminal, stream):
    with pytest.raises(RuntimeError):
        with terminal:
            terminal.write("half a frame")
            raise RuntimeError("boom")

    mock_input.return_value.__exit__.assert_called_once()
    # Pending output from the failed frame is dropped
    assert "half a frame" not in stream.getvalue()
    assert stream.getvalue().endswith("</fullscreen><cursor>")


def test_get_key_without_input_returns_none(terminal):
    assert terminal.get_key(0) is None


@patch('scrollpad.terminal.Input')
def test_get_key_returns_curtsies_names(mock_input, terminal):
    mock_input.return_value.send.side_effect = ['<UP>', None]
    with terminal:
        assert terminal.get_key(0) == '<UP>'
        assert terminal.get_key(0) is None
    mock_input.return_value.send.assert_called_with(0)


@patch('scrollpad.terminal.Input')
def test_paste_is_split_into_keys(mock_input, terminal):
    paste = PasteEvent()
    paste.events.extend(['a', 'b', 'c'])
    mock_input.return_value.send.return_value = paste

    with terminal:
        assert terminal.get_key(0) == 'a'
        assert terminal.get_key(0) == 'b'
        assert terminal.get_key(0) == 'c'
    # Queued keys are served before the input layer is asked again
    assert mock_input.return_value.send.call_count == 1
