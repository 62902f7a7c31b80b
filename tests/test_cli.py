"""CLI tests driven through click's CliRunner against a temporary state file."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from lyrichord.cli import main


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "state.json"


def _run(state_file: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(main, ["--state", str(state_file), *args])


def _build_dmaj7(state_file: Path) -> None:
    assert _run(state_file, "chord", "add", "Dmaj7").exit_code == 0
    for fret, string in [(5, 5), (7, 4), (6, 3), (7, 2)]:
        result = _run(state_file, "chord", "toggle", "1", str(fret), str(string))
        assert result.exit_code == 0, result.output


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "lyrichord" in result.output


def test_chord_add_persists(state_file: Path) -> None:
    result = _run(state_file, "chord", "add", "Am")
    assert result.exit_code == 0
    assert "id 1" in result.output
    data = json.loads(state_file.read_text(encoding="utf-8"))
    assert data["chords"] == [{"id": 1, "name": "Am", "notes": []}]
    assert data["selected_chord"] == "Am"


def test_toggle_and_show_text(state_file: Path) -> None:
    _build_dmaj7(state_file)
    result = _run(state_file, "chord", "show", "1")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "Dmaj7"
    assert "VII" in lines[1]


def test_toggle_conflict_replaces_by_default(state_file: Path) -> None:
    _run(state_file, "chord", "add", "C")
    _run(state_file, "chord", "toggle", "1", "2", "3")
    result = _run(state_file, "chord", "toggle", "1", "4", "3")
    assert result.exit_code == 0
    data = json.loads(state_file.read_text(encoding="utf-8"))
    assert data["chords"][0]["notes"] == [[4, 3]]


def test_toggle_conflict_rejected_by_config(state_file: Path, tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.yml"
    cfg.write_text("editor:\n  conflict_policy: reject\n", encoding="utf-8")
    runner = CliRunner()
    base = ["--config", str(cfg), "--state", str(state_file)]
    runner.invoke(main, [*base, "chord", "add", "C"])
    runner.invoke(main, [*base, "chord", "toggle", "1", "2", "3"])
    result = runner.invoke(main, [*base, "chord", "toggle", "1", "4", "3"])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_toggle_fret_past_limit_fails(state_file: Path) -> None:
    _run(state_file, "chord", "add", "C")
    result = _run(state_file, "chord", "toggle", "1", "40", "3")
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_show_svg_to_file(state_file: Path, tmp_path: Path) -> None:
    _build_dmaj7(state_file)
    out = tmp_path / "dmaj7.svg"
    result = _run(state_file, "chord", "show", "1", "--format", "svg", "-o", str(out))
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").startswith("<svg")


def test_click_toggles_note(state_file: Path) -> None:
    _run(state_file, "chord", "add", "E")
    # first fret cell centre on string 1 with the default geometry
    result = _run(state_file, "chord", "click", "1", "58", "15")
    assert result.exit_code == 0
    assert "fret 1 on string 1" in result.output


def test_shift_down_blocked_on_first_fret(state_file: Path) -> None:
    _run(state_file, "chord", "add", "F")
    _run(state_file, "chord", "toggle", "1", "1", "6")
    result = _run(state_file, "chord", "shift", "1", "down")
    assert result.exit_code == 0
    assert "Nothing changed." in result.output


def test_shift_up(state_file: Path) -> None:
    _run(state_file, "chord", "add", "F")
    _run(state_file, "chord", "toggle", "1", "1", "6")
    _run(state_file, "chord", "shift", "1", "up")
    data = json.loads(state_file.read_text(encoding="utf-8"))
    assert data["chords"][0]["notes"] == [[2, 6]]


def test_delete_chord(state_file: Path) -> None:
    _run(state_file, "chord", "add", "Am")
    result = _run(state_file, "chord", "delete", "1")
    assert result.exit_code == 0
    assert json.loads(state_file.read_text(encoding="utf-8"))["chords"] == []


def test_unknown_chord_fails(state_file: Path) -> None:
    result = _run(state_file, "chord", "show", "99")
    assert result.exit_code == 1
    assert "No chord with id 99" in result.output


def test_song_lookup_and_cycle(state_file: Path) -> None:
    _build_dmaj7(state_file)
    _run(state_file, "chord", "add", "Dmaj7")
    _run(state_file, "song", "add", "Ballad")
    _run(state_file, "song", "edit", "Ballad", "--text", "sing Dmaj7 softly")

    result = _run(state_file, "song", "lookup", "Ballad", "7")
    assert result.exit_code == 0
    assert result.output.startswith("Dmaj7")
    assert "2 variants" in result.output

    result = _run(state_file, "song", "cycle", "Ballad", "7")
    assert result.exit_code == 0
    assert "variant 2" in result.output
    data = json.loads(state_file.read_text(encoding="utf-8"))
    assert data["songs"][0]["preferences"] == {"Dmaj7": 2}


def test_song_lookup_offers_and_creates_chord(state_file: Path) -> None:
    _run(state_file, "song", "add", "Ballad")
    _run(state_file, "song", "edit", "Ballad", "--text", "then Am")
    result = _run(state_file, "song", "lookup", "Ballad", "6")
    assert "--create" in result.output

    result = _run(state_file, "song", "lookup", "Ballad", "6", "--create")
    assert "Created chord 'Am'" in result.output


def test_song_lookup_plain_word(state_file: Path) -> None:
    _run(state_file, "song", "add", "Ballad")
    _run(state_file, "song", "edit", "Ballad", "--text", "hello there")
    result = _run(state_file, "song", "lookup", "Ballad", "2")
    assert "'hello' is not a chord." in result.output


def test_song_add_duplicate_fails(state_file: Path) -> None:
    _run(state_file, "song", "add", "Ballad")
    result = _run(state_file, "song", "add", "Ballad")
    assert result.exit_code == 1


def test_song_list_marks_selection(state_file: Path) -> None:
    _run(state_file, "song", "add", "B-side")
    _run(state_file, "song", "add", "A-side")
    result = _run(state_file, "song", "list")
    assert result.output.splitlines() == ["* A-side", "  B-side"]


def test_corrupt_state_file_fails(state_file: Path) -> None:
    state_file.write_text('{"chords": [{"id": 1, "name": "A", "notes": [[1, 9]]}]}', encoding="utf-8")
    result = _run(state_file, "chord", "list")
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_subcommand_help_ignores_corrupt_state_file(state_file: Path) -> None:
    state_file.write_text("{not json", encoding="utf-8")
    result = _run(state_file, "chord", "--help")
    assert result.exit_code == 0
    assert "ERROR" not in result.output
    assert "toggle" in result.output


def test_click_and_show_at_last_fret(state_file: Path) -> None:
    _run(state_file, "chord", "add", "X")
    _run(state_file, "chord", "toggle", "1", "34", "2")
    result = _run(state_file, "chord", "click", "1", "209", "15")
    assert result.exit_code == 0, result.output
    assert "fret 35 on string 1" in result.output
    result = _run(state_file, "chord", "show", "1")
    assert result.exit_code == 0, result.output
    assert "XXXV" in result.output


def test_click_with_aligned_hit_mode(state_file: Path, tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.yml"
    cfg.write_text("editor:\n  hit_mode: aligned\n", encoding="utf-8")
    base = ["--config", str(cfg), "--state", str(state_file)]
    runner = CliRunner()
    runner.invoke(main, [*base, "chord", "add", "E"])
    # eight pixels below string 2 snaps back up to it
    result = runner.invoke(main, [*base, "chord", "click", "1", "26", "46"])
    assert result.exit_code == 0
    assert "fret 0 on string 2" in result.output
