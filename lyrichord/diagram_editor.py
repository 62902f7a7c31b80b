"""Chord editing: pointer hit-testing, note toggling and fret shifting."""

from __future__ import annotations

import logging
from enum import Enum

from lyrichord.chord_models import Chord, NotePos
from lyrichord.diagram_layout import DiagramGeometry, DiagramLayout
from lyrichord.errors import ConflictingPositionError, FretShiftError, LyrichordError
from lyrichord.theory import FRET_LIMIT, STRING_COUNT

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class MenuAction(str, Enum):
    SHIFT_UP = "shift-up"
    SHIFT_DOWN = "shift-down"
    DELETE = "delete"


class EditResult(Enum):
    """What the host must do after an edit; removal is never done in place."""

    NOTHING = "nothing"
    REMOVE = "remove"


class HitMode(str, Enum):
    """
    How a pointer position maps to a fret.

    ``offset`` divides the raw offsets by the string spacing and column width,
    with a fixed open/mute gutter. ``aligned`` measures from the first fret
    line and picks the nearest string, so clicks match the drawn cells.
    """

    OFFSET = "offset"
    ALIGNED = "aligned"


#: Horizontal offsets up to this value fall in the open/mute gutter.
OPEN_GUTTER_THRESHOLD = 30.0


def hit_test(point: Point, layout: DiagramLayout, mode: HitMode | str = HitMode.OFFSET) -> NotePos | None:
    """
    Map a point inside the diagram drawing area to a fretboard position.

    In ``offset`` mode the string is ``y // spacing + 1``. Points at or left of
    ``OPEN_GUTTER_THRESHOLD`` give fret 0; other points give
    ``x // column_width + min_fret``, which can land one fret past the window
    near the right edge. Offsets are truncated to whole pixels first.

    In ``aligned`` mode the string is the nearest string line, points left of
    the first fret line give fret 0 and other points give the fret of the cell
    they land in, clamped to the window.

    Strings are clamped to 1..6 and frets to the last fret on the board.

    Args:
        point:  ``(x, y)`` relative to the top-left of the drawing area.
        layout: Layout of the chord as currently drawn.
        mode:   Hit-test mode.

    Returns:
        The position under the point, or None if the point is outside the area.
    """
    x, y = point
    g = layout.geometry
    if not (0 <= x <= g.width and 0 <= y <= g.height):
        return None

    window = layout.window
    spacing = g.string_spacing
    if HitMode(mode) is HitMode.ALIGNED:
        string = int((y - g.top_padding + spacing / 2) // spacing) + 1
        if x < g.grid_left:
            fret = 0
        else:
            fret = int((x - g.grid_left) // layout.column_width) + window.min_fret
            fret = min(max(fret, window.min_fret), window.max_fret)
    else:
        string = int(y) // max(int(spacing), 1) + 1
        if x <= OPEN_GUTTER_THRESHOLD:
            fret = 0
        else:
            fret = int(x) // max(int(layout.column_width), 1) + window.min_fret

    string = min(max(string, 1), STRING_COUNT)
    return NotePos(fret=min(fret, FRET_LIMIT - 1), string=string)


def toggle_note(chord: Chord, pos: NotePos, replace_conflicting: bool = False) -> bool:
    """
    Add *pos* to the chord, or remove it if already present.

    Args:
        chord:               Chord to edit in place.
        pos:                 Position to toggle.
        replace_conflicting: When the string already holds a different
                             position, replace it instead of raising.

    Returns:
        True if the note was set, False if it was cleared.

    Raises:
        ConflictingPositionError: The string is occupied and replacing is off.
    """
    if pos in chord.notes:
        chord.notes.remove(pos)
        logger.debug("Chord %s: cleared %s", chord.id, pos)
        return False

    existing = chord.note_on_string(pos.string)
    if existing is not None:
        if not replace_conflicting:
            raise ConflictingPositionError(pos.string, existing.fret, pos.fret)
        chord.notes[chord.notes.index(existing)] = pos
        logger.debug("Chord %s: moved string %s from fret %s to %s", chord.id, pos.string, existing.fret, pos.fret)
        return True

    chord.notes.append(pos)
    logger.debug("Chord %s: set %s", chord.id, pos)
    return True


def shift_frets(chord: Chord, delta: int) -> None:
    """
    Move every fretted note of the chord up or down by one fret.

    Open strings stay where they are. The chord is left untouched when the
    shift is refused.

    Raises:
        ValueError:     If *delta* is not +1 or -1.
        FretShiftError: A down-shift while a note sits on fret 1, or an
                        up-shift past the last fret.
    """
    if delta not in (1, -1):
        raise ValueError(f"Fret shift must be +1 or -1, got {delta}.")

    fretted = chord.fretted()
    if delta < 0 and any(pos.fret == 1 for pos in fretted):
        raise FretShiftError("Cannot shift down: a note already sits on the first fret.")
    if delta > 0 and any(pos.fret + 1 >= FRET_LIMIT for pos in fretted):
        raise FretShiftError(f"Cannot shift up: fret {FRET_LIMIT - 1} is the last fret.")

    chord.notes = [
        NotePos(fret=pos.fret + delta, string=pos.string) if pos.fret > 0 else pos
        for pos in chord.notes
    ]
    logger.debug("Chord %s: shifted %+d fret", chord.id, delta)


# ------------------------------------------------------------------
# Host entry points
# ------------------------------------------------------------------


def handle_pointer_click(
    chord: Chord,
    point: Point,
    geometry: DiagramGeometry | None = None,
    conflict_policy: str = "replace",
    hit_mode: HitMode | str = HitMode.OFFSET,
) -> NotePos | None:
    """
    Toggle the note under a completed click.

    Returns:
        The toggled position, or None when the click changed nothing.
    """
    layout = DiagramLayout.for_chord(chord, geometry)
    try:
        pos = hit_test(point, layout, hit_mode)
        if pos is None:
            return None
        toggle_note(chord, pos, replace_conflicting=conflict_policy == "replace")
    except LyrichordError as exc:
        logger.info("Ignored click on chord %s: %s", chord.id, exc)
        return None
    return pos


def handle_menu_action(chord: Chord, action: MenuAction | str) -> EditResult:
    """Apply a context-menu action; a refused shift is reported and ignored."""
    action = MenuAction(action)
    if action is MenuAction.DELETE:
        return EditResult.REMOVE
    try:
        shift_frets(chord, 1 if action is MenuAction.SHIFT_UP else -1)
    except FretShiftError as exc:
        logger.info("Ignored %s on chord %s: %s", action.value, chord.id, exc)
    return EditResult.NOTHING
