"""Note theory: the natural-note cycle and the standard-tuned fretboard."""

from enum import Enum
from functools import lru_cache

from lyrichord.errors import FretOutOfRangeError, InvalidStringError

# ── Instrument constants ────────────────────────────────────────────────────
STRING_COUNT = 6
#: String numbers in drawing order, high E first.
STRINGS: range = range(1, STRING_COUNT + 1)
SEMITONES_PER_OCTAVE = 12
#: Three octaves of frets; fret 35 is the highest valid position.
FRET_LIMIT = 3 * SEMITONES_PER_OCTAVE


class Note(Enum):
    """One of the seven natural pitch names, in cycle order A → G."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"

    def __str__(self) -> str:
        return self.value


#: Naturals with no sharp before the next letter (E–F and B–C are semitones).
NATURALS_WITHOUT_SHARP: frozenset[Note] = frozenset({Note.E, Note.B})

#: Open-string note per string number, 1 = high E ... 6 = low E.
STANDARD_TUNING: dict[int, Note] = {
    1: Note.E,
    2: Note.B,
    3: Note.G,
    4: Note.D,
    5: Note.A,
    6: Note.E,
}

_ROMAN_NUMERALS: list[tuple[int, str]] = [
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]


def open_note(string: int) -> Note:
    """
    Return the open-string note for a string number.

    Raises:
        InvalidStringError: If *string* is outside 1..6.
    """
    try:
        return STANDARD_TUNING[string]
    except KeyError:
        raise InvalidStringError(string) from None


def rotate_cycle(start: Note) -> list[Note]:
    """Return the seven naturals in cycle order, beginning at *start*."""
    notes = list(Note)
    idx = notes.index(start)
    return notes[idx:] + notes[:idx]


@lru_cache(maxsize=None)
def chromatic_octave(start: Note) -> tuple[str, ...]:
    """
    Build the 12 note labels of one octave, starting on a natural note.

    Each natural expands to itself plus its sharp, except E and B, which have
    no sharp before the following natural.

    Example:
        chromatic_octave(Note.A) -> ("A", "A#", "B", "C", "C#", ..., "G#")
    """
    labels: list[str] = []
    for note in rotate_cycle(start):
        labels.append(note.value)
        if note not in NATURALS_WITHOUT_SHARP:
            labels.append(f"{note.value}#")
    return tuple(labels)


def check_fret(fret: int) -> int:
    """Return *fret* unchanged, or raise FretOutOfRangeError if it is off the board."""
    if not 0 <= fret < FRET_LIMIT:
        raise FretOutOfRangeError(fret, FRET_LIMIT)
    return fret


def note_at(string: int, fret: int) -> str:
    """
    Return the note label sounded at a fretboard position.

    Args:
        string: String number, 1 (high E) to 6 (low E).
        fret:   Fret number, 0 for the open string, up to FRET_LIMIT - 1.

    Returns:
        A label such as ``"D"`` or ``"F#"``.

    Raises:
        InvalidStringError:  If *string* is outside 1..6.
        FretOutOfRangeError: If *fret* is negative or >= FRET_LIMIT.
    """
    octave = chromatic_octave(open_note(string))
    check_fret(fret)
    return octave[fret % SEMITONES_PER_OCTAVE]


def fret_label(fret: int) -> str:
    """
    Render a fret number as an upper-case Roman numeral (``7`` -> ``"VII"``).

    Raises:
        FretOutOfRangeError: For fret 0 (has no numeral) or frets off the board.
    """
    if fret < 1:
        raise FretOutOfRangeError(fret, FRET_LIMIT)
    check_fret(fret)

    parts: list[str] = []
    remaining = fret
    for value, numeral in _ROMAN_NUMERALS:
        while remaining >= value:
            parts.append(numeral)
            remaining -= value
    return "".join(parts)


def is_chord_like(token: str) -> bool:
    """True when *token* starts with one of the seven natural note letters."""
    return bool(token) and token[0] in {note.value for note in Note}
