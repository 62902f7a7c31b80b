"""Unit tests for chord diagram primitives and renderers."""

from lyrichord.chord_models import Chord, NotePos
from lyrichord.diagram_editor import shift_frets
from lyrichord.diagram_models import Circle, Label, Line
from lyrichord.diagram_renderers import SvgDiagramRenderer, TextDiagramRenderer, render_chord


def _dmaj7() -> Chord:
    return Chord(
        id=1,
        name="Dmaj7",
        notes=[NotePos(5, 5), NotePos(7, 4), NotePos(6, 3), NotePos(7, 2)],
    )


def _roles(primitives: list, kind: type) -> list[str]:
    return [p.role for p in primitives if isinstance(p, kind)]


def test_render_chord_draws_six_strings_and_fret_lines() -> None:
    primitives = render_chord(_dmaj7())
    lines = _roles(primitives, Line)
    assert lines.count("string") == 6
    assert lines.count("fret") == 4


def test_render_chord_marks_muted_strings_with_crosses() -> None:
    primitives = render_chord(_dmaj7())
    # strings 1 and 6 are muted, two strokes each
    assert _roles(primitives, Line).count("mute") == 4


def test_render_chord_labels_fretted_notes() -> None:
    primitives = render_chord(_dmaj7())
    note_labels = sorted(p.text for p in primitives if isinstance(p, Label) and p.role == "note-label")
    assert note_labels == ["A", "C#", "D", "F#"]
    assert _roles(primitives, Circle).count("note") == 4


def test_render_chord_open_string_marker() -> None:
    chord = Chord(id=2, name="Em", notes=[NotePos(0, 1), NotePos(2, 5)])
    primitives = render_chord(chord)
    open_labels = [p.text for p in primitives if isinstance(p, Label) and p.role == "open-label"]
    assert open_labels == ["E"]
    assert _roles(primitives, Line).count("mute") == 8


def test_render_chord_fret_numbers_are_roman() -> None:
    primitives = render_chord(_dmaj7())
    numbers = [p.text for p in primitives if isinstance(p, Label) and p.role == "fret-number"]
    assert numbers == ["V", "VI", "VII"]


def test_empty_chord_renders_first_three_frets() -> None:
    primitives = render_chord(Chord.empty(3, "C"))
    numbers = [p.text for p in primitives if isinstance(p, Label) and p.role == "fret-number"]
    assert numbers == ["I", "II", "III"]


def test_svg_renderer_document() -> None:
    content = SvgDiagramRenderer().render(_dmaj7())
    assert content.startswith("<svg")
    assert content.rstrip().endswith("</svg>")
    assert "<title>Dmaj7</title>" in content
    assert content.count('class="note"') == 4
    assert ">C#</text>" in content


def test_svg_renderer_escapes_chord_name() -> None:
    content = SvgDiagramRenderer().render(Chord.empty(4, "A<7>&"))
    assert "<title>A&lt;7&gt;&amp;</title>" in content


def test_svg_renderer_extension() -> None:
    assert SvgDiagramRenderer().default_extension == ".svg"
    assert TextDiagramRenderer().default_extension == ".txt"


def test_text_renderer_rows() -> None:
    lines = TextDiagramRenderer().render(_dmaj7()).splitlines()
    assert lines[0] == "Dmaj7"
    assert "V" in lines[1] and "VII" in lines[1]
    assert len(lines) == 8
    assert lines[2].startswith("E x |")
    assert lines[7].startswith("E x |")
    assert "-D" in lines[6]
    assert "-F#" in lines[3]


def test_text_renderer_open_marker() -> None:
    chord = Chord(id=2, name="Em", notes=[NotePos(0, 1)])
    lines = TextDiagramRenderer().render(chord).splitlines()
    assert lines[2].startswith("E o |")


def test_chord_on_last_fret_renders() -> None:
    chord = Chord(id=5, name="High", notes=[NotePos(35, 2)])
    primitives = render_chord(chord)
    numbers = [p.text for p in primitives if isinstance(p, Label) and p.role == "fret-number"]
    assert numbers == ["XXXIII", "XXXIV", "XXXV"]

    lines = TextDiagramRenderer().render(chord).splitlines()
    assert "XXXV" in lines[1]
    assert "A#" in lines[3]


def test_chord_shifted_to_last_frets_renders() -> None:
    chord = Chord(id=6, name="High", notes=[NotePos(33, 2)])
    shift_frets(chord, 1)
    content = SvgDiagramRenderer().render(chord)
    assert ">XXXV</text>" in content
    assert ">A</text>" in content
