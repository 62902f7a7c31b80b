"""Data models for chords, songs and the application state that owns them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from lyrichord.theory import check_fret, open_note


@dataclass(frozen=True, order=True)
class NotePos:
    """
    A single fretboard position.

    Attributes:
        fret:   0 for an open string, otherwise the fretted position.
        string: String number, 1 (high E) to 6 (low E).
    """

    fret: int
    string: int

    def __post_init__(self) -> None:
        open_note(self.string)
        check_fret(self.fret)

    @property
    def is_open(self) -> bool:
        return self.fret == 0


@dataclass
class Chord:
    """
    A named chord diagram.

    Several chords may share a name; each is a variant (voicing) of that chord.
    A string with no NotePos is muted.
    """

    id: int
    name: str
    notes: list[NotePos] = field(default_factory=list)

    @classmethod
    def empty(cls, chord_id: int, name: str) -> Chord:
        return cls(id=chord_id, name=name, notes=[])

    def fretted(self) -> list[NotePos]:
        """Positions that are not open strings."""
        return [pos for pos in self.notes if pos.fret > 0]

    def note_on_string(self, string: int) -> NotePos | None:
        return next((pos for pos in self.notes if pos.string == string), None)

    def is_muted(self, string: int) -> bool:
        return self.note_on_string(string) is None

    def is_open(self, string: int) -> bool:
        return NotePos(0, string) in self.notes


@dataclass
class Song:
    """
    Song lyrics plus the chord variant each chord name should display as.

    Attributes:
        preferences: Chord name -> chord id. A lookup key, never an owning
                     reference; the id may point at a deleted chord.
    """

    name: str
    text: str = ""
    preferences: dict[str, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, name: str) -> Song:
        return cls(name=name)


class Tab(str, Enum):
    CHORDS = "chords"
    SONGS = "songs"


@dataclass
class AppState:
    """Full in-memory model: chord and song collections plus UI selection."""

    chords: list[Chord] = field(default_factory=list)
    songs: list[Song] = field(default_factory=list)
    next_chord_id: int = 1

    selected_tab: Tab = Tab.CHORDS
    selected_chord: str = ""
    chord_search_input: str = ""
    selected_song: str = ""
    song_search_input: str = ""

    def allocate_chord_id(self) -> int:
        """
        Hand out a fresh chord id.

        Ids come from a monotonic counter and are never reused, even after the
        chord holding the highest id is deleted.
        """
        highest = max((chord.id for chord in self.chords), default=0)
        chord_id = max(self.next_chord_id, highest + 1)
        self.next_chord_id = chord_id + 1
        return chord_id

    def find_chord(self, chord_id: int) -> Chord | None:
        return next((chord for chord in self.chords if chord.id == chord_id), None)

    def find_song(self, name: str) -> Song | None:
        return next((song for song in self.songs if song.name == name), None)

