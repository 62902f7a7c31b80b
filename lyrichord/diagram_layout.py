"""Diagram layout: the visible fret window and its coordinate grid."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from lyrichord.chord_models import Chord
from lyrichord.theory import FRET_LIMIT, STRING_COUNT

#: A diagram always shows at least this many frets.
MIN_VISIBLE_FRETS = 3


@dataclass(frozen=True)
class FretWindow:
    """
    The contiguous fret range shown in a diagram.

    Attributes:
        min_fret:     Lowest fret drawn (first grid column).
        max_fret:     Highest fret drawn.
        column_count: Number of vertical fret lines, one more than the number
                      of visible frets.
    """

    min_fret: int
    max_fret: int
    column_count: int

    @property
    def frets(self) -> range:
        return range(self.min_fret, self.max_fret + 1)


def compute_window(frets: Iterable[int]) -> FretWindow:
    """
    Compute the fret window for a set of fretted (non-open) fret numbers.

    An empty set shows frets 1..3. Otherwise the window starts at the lowest
    fret and ends at the highest, widened to span at least three frets. A
    window that would run past the last fret on the board slides back so it
    ends on that fret.

    Examples:
        compute_window([])        -> FretWindow(1, 3, 4)
        compute_window([3])       -> FretWindow(3, 5, 4)
        compute_window([5, 7, 8]) -> FretWindow(5, 8, 5)
        compute_window([35])      -> FretWindow(33, 35, 4)
    """
    fretted = [fret for fret in frets if fret != 0]
    if not fretted:
        min_fret, max_fret = 1, MIN_VISIBLE_FRETS
    else:
        min_fret = min(fretted)
        max_fret = max(fretted)
        if max_fret - min_fret < MIN_VISIBLE_FRETS:
            max_fret = min_fret + MIN_VISIBLE_FRETS - 1
        if max_fret > FRET_LIMIT - 1:
            max_fret = FRET_LIMIT - 1
            min_fret = min(min_fret, max_fret - MIN_VISIBLE_FRETS + 1)
    return FretWindow(min_fret=min_fret, max_fret=max_fret, column_count=max_fret - min_fret + 2)


def window_for_chord(chord: Chord) -> FretWindow:
    return compute_window(pos.fret for pos in chord.fretted())


@dataclass(frozen=True)
class DiagramGeometry:
    """Pixel dimensions of a chord diagram drawing area."""

    width: float = 220.0
    height: float = 160.0
    left_padding: float = 10.0
    right_padding: float = 10.0
    top_padding: float = 15.0
    bottom_padding: float = 30.0
    gutter_width: float = 17.5  # open/mute markers left of the nut
    note_radius: float = 10.0

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> DiagramGeometry:
        """Build geometry from the ``diagram`` section of a validated config."""
        diagram = cfg.get("diagram", {})
        fields = cls.__dataclass_fields__
        return cls(**{key: float(value) for key, value in diagram.items() if key in fields})

    @property
    def string_spacing(self) -> float:
        return (self.height - self.top_padding - self.bottom_padding) / (STRING_COUNT - 1)

    @property
    def grid_left(self) -> float:
        """X of the first fret line; everything left of it is the gutter."""
        return self.left_padding + self.gutter_width

    @property
    def grid_right(self) -> float:
        return self.width - self.right_padding

    @property
    def grid_bottom(self) -> float:
        return self.height - self.bottom_padding


class DiagramLayout:
    """
    Coordinates of every element of one chord diagram.

    Columns are 1-based: column ``i`` is the fret line on the left edge of the
    cell for fret ``i + min_fret - 1``. A layout is derived from the chord's
    current notes and has no state of its own.
    """

    def __init__(self, window: FretWindow, geometry: DiagramGeometry | None = None) -> None:
        self.window = window
        self.geometry = geometry or DiagramGeometry()

    @classmethod
    def for_chord(cls, chord: Chord, geometry: DiagramGeometry | None = None) -> DiagramLayout:
        return cls(window_for_chord(chord), geometry)

    @property
    def column_width(self) -> float:
        g = self.geometry
        return (g.grid_right - g.grid_left) / (self.window.column_count - 1)

    @property
    def columns(self) -> range:
        return range(1, self.window.column_count + 1)

    @property
    def gutter_x(self) -> float:
        """Centre x of the open/mute markers."""
        return self.geometry.left_padding + 2.5

    def fret_for_column(self, column: int) -> int:
        return column + self.window.min_fret - 1

    def column_x(self, column: int) -> float:
        return self.geometry.grid_left + (column - 1) * self.column_width

    def cell_center_x(self, fret: int) -> float:
        """Centre x of the cell in which a note on *fret* is drawn."""
        column = fret - self.window.min_fret + 1
        return self.column_x(column) + self.column_width / 2

    def string_y(self, string: int) -> float:
        return self.geometry.top_padding + (string - 1) * self.geometry.string_spacing

    def fret_number_y(self) -> float:
        return self.geometry.height - 7.5
