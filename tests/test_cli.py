import io

import pytest

import scanmap.cli as cli
from scanmap.errors import ScanFailure
from scanmap.json_utils import load_scan_map, save_scan_map
from ui.terminal import TerminalUI


def _ui(text=""):
    return TerminalUI(stdin=io.StringIO(text), stdout=io.StringIO())


@pytest.fixture
def fake_scan(monkeypatch, visible_networks):
    calls = []

    def scan(interface=None):
        calls.append(interface)
        return visible_networks

    monkeypatch.setattr(cli, "scan_networks", scan)
    return calls


def test_record_creates_new_map(tmp_path, fake_scan):
    path = tmp_path / "survey.json"
    ui = _ui("\nOffice\nfirst floor\n1 2\n1 2 3\nhall\n")

    assert cli.main(["-f", str(path), "record"], ui=ui) == 0

    scan_map = load_scan_map(path)
    assert scan_map.name == "Office"
    assert scan_map.notes == "first floor"
    assert len(scan_map.nodes) == 1
    assert [net.mac for net in scan_map.nodes[0].networks] == ["a2", "b1", "c3"]

    output = ui.stdout.getvalue()
    assert 'creating new scan map "' in output
    assert "name cannot be empty" in output
    assert "must be in format: x y z" in output
    assert "added node at (1.0, 2.0, 3.0) with 3 networks" in output
    assert fake_scan == [None]


def test_record_appends_to_existing_map(tmp_path, fake_scan, sample_map):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)
    ui = _ui("4 5 6\n\n")

    assert cli.main(["-f", str(path), "record", "--interface", "wlan1"], ui=ui) == 0

    scan_map = load_scan_map(path)
    assert len(scan_map.nodes) == 4
    assert scan_map.nodes[:3] == sample_map.nodes
    assert "loaded existing scan map" in ui.stdout.getvalue()
    assert "# nodes: 3" in ui.stdout.getvalue()
    assert fake_scan == ["wlan1"]


def test_record_loop_ends_when_input_closes(tmp_path, fake_scan, sample_map):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)
    ui = _ui("1 1 1\na\n2 2 2\nb\n")

    assert cli.main(["-f", str(path), "record", "--loop"], ui=ui) == 1

    assert len(load_scan_map(path).nodes) == 5


def test_scan_failure_exits_non_zero_and_saves_nothing(tmp_path, monkeypatch, capsys):
    def failing_scan(interface=None):
        raise ScanFailure("Operation not permitted")

    monkeypatch.setattr(cli, "scan_networks", failing_scan)
    path = tmp_path / "survey.json"

    assert cli.main(["-f", str(path), "record"], ui=_ui("Office\n\n1 2 3\n\n")) == 1

    assert not path.exists()
    assert "error: Operation not permitted" in capsys.readouterr().err


def test_empty_scan_warns(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "scan_networks", lambda interface=None: [])
    path = tmp_path / "survey.json"
    ui = _ui("Office\n\n1 2 3\n\n")

    assert cli.main(["-f", str(path), "record"], ui=ui) == 0

    assert "[!] no networks found" in ui.stdout.getvalue()
    assert load_scan_map(path).nodes[0].networks == ()


def test_default_command_creates_and_saves(tmp_path):
    path = tmp_path / "survey.json"

    assert cli.main(["-f", str(path)], ui=_ui("Office\nnotes\n")) == 0

    assert load_scan_map(path).name == "Office"


def test_overview(tmp_path, sample_map):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)
    ui = _ui()

    assert cli.main(["-f", str(path), "overview"], ui=ui) == 0

    assert ui.stdout.getvalue() == sample_map.overview() + "\n"


def test_export_csv(tmp_path, sample_map):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)
    out = tmp_path / "csv"

    assert cli.main(["-f", str(path), "export-csv", str(out)], ui=_ui()) == 0

    assert (out / "nodes.csv").exists()
    assert (out / "networks.csv").exists()


def test_export_of_missing_map_fails(tmp_path, capsys):
    code = cli.main(["-f", str(tmp_path / "missing.json"), "export-csv", str(tmp_path)], ui=_ui())

    assert code == 1
    assert "not found" in capsys.readouterr().err


def test_export_to_file_fails(tmp_path, sample_map, capsys):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)

    assert cli.main(["-f", str(path), "export-csv", str(path)], ui=_ui()) == 1
    assert "not a directory" in capsys.readouterr().err


def test_corrupt_map_fails(tmp_path, capsys):
    path = tmp_path / "survey.json"
    path.write_text("{", encoding="utf-8")

    assert cli.main(["-f", str(path), "overview"], ui=_ui()) == 1
    assert "not valid JSON" in capsys.readouterr().err


def test_map_file_is_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["record"], ui=_ui())

    assert excinfo.value.code == 2


def test_unwritable_log_file_fails(tmp_path, sample_map, capsys):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)
    log_file = tmp_path / "missing" / "scan.log"

    code = cli.main(["-f", str(path), "--log-file", str(log_file), "overview"], ui=_ui())

    assert code == 1
    assert "error: cannot open log file" in capsys.readouterr().err
    assert not log_file.exists()


def test_log_file_receives_debug_output(tmp_path, sample_map):
    path = tmp_path / "survey.json"
    save_scan_map(sample_map, path)
    log_file = tmp_path / "scan.log"

    assert cli.main(["-f", str(path), "-v", "--log-file", str(log_file), "overview"], ui=_ui()) == 0
    assert "Loaded 3 nodes" in log_file.read_text(encoding="utf-8")
