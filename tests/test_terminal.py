import io

import pytest

from scanmap.acquisition import Acquisition
from ui.terminal import TerminalUI, format_network_table


def _result(scripted, networks):
    return Acquisition(scripted(["1 2 3", ""]), lambda: networks, clock=lambda: 0,
                       report=lambda msg: None).run()


def test_read_line_shows_prompt_and_strips_newline():
    ui = TerminalUI(stdin=io.StringIO("1 2 3\r\n"), stdout=io.StringIO())

    assert ui.read_line("x y z: ") == "1 2 3"
    assert ui.stdout.getvalue() == "x y z: "


def test_read_line_raises_on_closed_input():
    ui = TerminalUI(stdin=io.StringIO(""), stdout=io.StringIO())

    with pytest.raises(EOFError):
        ui.read_line("name: ")


def test_network_table_is_aligned(scripted, visible_networks):
    lines = format_network_table(_result(scripted, visible_networks))

    width = len("Office WiFi")
    start = 4 + 17 + 2 + width + 2

    assert len(lines) == 4
    assert [line[start:start + 4].strip() for line in lines] == ["CH", "36", "6", "11"]
    assert "Guest      " in lines[2]


def test_network_table_without_networks(scripted):
    assert format_network_table(_result(scripted, [])) == []


def test_show_recorded_prints_summary_and_warning(scripted):
    ui = TerminalUI(stdin=io.StringIO(""), stdout=io.StringIO())

    ui.show_recorded(_result(scripted, []))

    assert ui.stdout.getvalue() == "added node at (1.0, 2.0, 3.0) with 0 networks\n[!] no networks found\n"
