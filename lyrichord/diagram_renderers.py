"""Chord diagram rendering: drawing primitives and output formats built on them."""

from __future__ import annotations

from abc import ABC, abstractmethod

from lyrichord.chord_models import Chord
from lyrichord.diagram_layout import DiagramGeometry, DiagramLayout
from lyrichord.diagram_models import Circle, Label, Line, Primitive
from lyrichord.theory import STRINGS, fret_label, note_at

MUTE_CROSS_HALF = 5.0
NOTE_FONT_SIZE = 12.0
FRET_NUMBER_FONT_SIZE = 14.0


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _note_marker(x: float, y: float, label: str, radius: float, role: str) -> list[Primitive]:
    return [
        Circle(cx=x, cy=y, r=radius, role=role),
        Label(x=x, y=y, text=label, size=NOTE_FONT_SIZE, role=f"{role}-label"),
    ]


def render_chord(chord: Chord, geometry: DiagramGeometry | None = None) -> list[Primitive]:
    """
    Turn a chord into the primitives a rendering layer needs to draw it.

    Output order is back to front: fret lines, string lines with their
    open/mute markers, fretted notes, then the fret numbers under the last
    string.
    """
    layout = DiagramLayout.for_chord(chord, geometry)
    g = layout.geometry
    primitives: list[Primitive] = []

    for column in layout.columns:
        x = layout.column_x(column)
        primitives.append(Line(x1=x, y1=g.top_padding, x2=x, y2=g.grid_bottom, role="fret"))

    for string in STRINGS:
        y = layout.string_y(string)
        if chord.is_muted(string):
            gx = layout.gutter_x
            h = MUTE_CROSS_HALF
            primitives.append(Line(x1=gx - h, y1=y - h, x2=gx + h, y2=y + h, role="mute"))
            primitives.append(Line(x1=gx + h, y1=y - h, x2=gx - h, y2=y + h, role="mute"))
        elif chord.is_open(string):
            primitives.extend(_note_marker(layout.gutter_x, y, note_at(string, 0), g.note_radius, "open"))
        primitives.append(Line(x1=g.grid_left, y1=y, x2=g.grid_right, y2=y, role="string"))

    for pos in chord.fretted():
        primitives.extend(
            _note_marker(
                layout.cell_center_x(pos.fret),
                layout.string_y(pos.string),
                note_at(pos.string, pos.fret),
                g.note_radius,
                "note",
            )
        )

    # the last column only closes the grid
    for column in layout.columns[:-1]:
        fret = layout.fret_for_column(column)
        primitives.append(
            Label(
                x=layout.cell_center_x(fret),
                y=layout.fret_number_y(),
                text=fret_label(fret),
                size=FRET_NUMBER_FONT_SIZE,
                role="fret-number",
            )
        )

    return primitives


class DiagramRenderer(ABC):
    """Abstract chord diagram renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, chord: Chord, *, geometry: DiagramGeometry | None = None) -> str:
        """Render a chord into a file content string."""


class SvgDiagramRenderer(DiagramRenderer):
    """Render a chord as a self-contained SVG document."""

    _STROKE = "#222"
    _FILL = "#fff"

    @property
    def default_extension(self) -> str:
        return ".svg"

    def render(self, chord: Chord, *, geometry: DiagramGeometry | None = None) -> str:
        g = geometry or DiagramGeometry()
        body = "\n".join(self._element(p) for p in render_chord(chord, g))
        title = _escape_html(chord.name)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{g.width:g}" height="{g.height:g}" '
            f'viewBox="0 0 {g.width:g} {g.height:g}" data-chord-id="{chord.id}">\n'
            f"<title>{title}</title>\n"
            f'<rect width="100%" height="100%" fill="{self._FILL}" />\n'
            f"{body}\n"
            "</svg>\n"
        )

    def _element(self, primitive: Primitive) -> str:
        if isinstance(primitive, Line):
            return (
                f'<line class="{primitive.role}" x1="{primitive.x1:g}" y1="{primitive.y1:g}" '
                f'x2="{primitive.x2:g}" y2="{primitive.y2:g}" stroke="{self._STROKE}" stroke-width="1" />'
            )
        if isinstance(primitive, Circle):
            return (
                f'<circle class="{primitive.role}" cx="{primitive.cx:g}" cy="{primitive.cy:g}" '
                f'r="{primitive.r:g}" fill="{self._FILL}" stroke="{self._STROKE}" stroke-width="1" />'
            )
        return (
            f'<text class="{primitive.role}" x="{primitive.x:g}" y="{primitive.y:g}" '
            f'font-size="{primitive.size:g}" text-anchor="middle" dominant-baseline="central" '
            f'fill="{self._STROKE}">{_escape_html(primitive.text)}</text>'
        )


class TextDiagramRenderer(DiagramRenderer):
    """
    Render a chord as a plain-text chart for terminals.

    One row per string, high E on top. The marker column shows ``x`` for a
    muted string and ``o`` for an open one; fretted notes are printed in
    their fret cell.

    Example (``Dmaj7`` at the fifth fret)::

        Dmaj7
               V     VI    VII
        E x |-----|-----|-----|
        B   |-----|-----|-F#--|
        G   |-----|-C#--|-----|
        D   |-----|-----|-A---|
        A   |-D---|-----|-----|
        E x |-----|-----|-----|
    """

    _CELL = 5

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render(self, chord: Chord, *, geometry: DiagramGeometry | None = None) -> str:
        layout = DiagramLayout.for_chord(chord, geometry)
        frets = layout.window.frets

        header = " " * 5 + "".join(fret_label(f).center(self._CELL + 1) for f in frets)
        rows = [chord.name, header.rstrip()]
        for string in STRINGS:
            if chord.is_muted(string):
                marker = "x"
            elif chord.is_open(string):
                marker = "o"
            else:
                marker = " "
            cells = []
            for fret in frets:
                pos = chord.note_on_string(string)
                if pos is not None and pos.fret == fret:
                    cells.append(f"-{note_at(string, fret)}".ljust(self._CELL, "-"))
                else:
                    cells.append("-" * self._CELL)
            rows.append(f"{note_at(string, 0)} {marker} |" + "|".join(cells) + "|")
        return "\n".join(rows) + "\n"
