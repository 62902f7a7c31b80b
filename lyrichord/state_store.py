"""JSON persistence for the application state, validated with Pydantic.

File layout::

    {
      "chords": [{"id": 1, "name": "Dmaj7", "notes": [[5, 5], [7, 4]]}],
      "songs": [{"name": "Song", "text": "...", "preferences": {"Dmaj7": 1}}],
      "next_chord_id": 2,
      "selected_tab": "chords",
      "selected_chord": "", "chord_search_input": "",
      "selected_song": "", "song_search_input": ""
    }

Unknown fields are ignored and missing ones default to empty values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lyrichord.chord_models import AppState, Chord, NotePos, Song, Tab
from lyrichord.errors import StateFileError

logger = logging.getLogger(__name__)


class ChordRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    notes: list[tuple[int, int]] = Field(default_factory=list)

    @field_validator("notes")
    @classmethod
    def _valid_positions(cls, v: list[tuple[int, int]]) -> list[tuple[int, int]]:
        for fret, string in v:
            NotePos(fret=fret, string=string)  # raises a ValueError subclass
        return v


class SongRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    text: str = ""
    preferences: dict[str, int] = Field(default_factory=dict)


class StateRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    chords: list[ChordRecord] = Field(default_factory=list)
    songs: list[SongRecord] = Field(default_factory=list)
    next_chord_id: int = Field(default=1, ge=1)
    selected_tab: Literal["chords", "songs"] = "chords"
    selected_chord: str = ""
    chord_search_input: str = ""
    selected_song: str = ""
    song_search_input: str = ""

    @field_validator("selected_tab", mode="before")
    @classmethod
    def _lower_tab(cls, v: object) -> object:
        # older files store the tab as "Chords" / "Songs"
        return v.lower() if isinstance(v, str) else v


def _chord_from_record(record: ChordRecord) -> Chord:
    chord = Chord.empty(record.id, record.name)
    for fret, string in record.notes:
        pos = NotePos(fret=fret, string=string)
        existing = chord.note_on_string(string)
        if existing is not None:
            logger.warning(
                "Chord %s (%s): dropped fret %s on string %s, already fretted at %s",
                record.id, record.name, fret, string, existing.fret,
            )
            continue
        chord.notes.append(pos)
    return chord


def state_from_record(record: StateRecord) -> AppState:
    chords = [_chord_from_record(c) for c in record.chords]
    highest = max((chord.id for chord in chords), default=0)
    return AppState(
        chords=chords,
        songs=[Song(name=s.name, text=s.text, preferences=dict(s.preferences)) for s in record.songs],
        next_chord_id=max(record.next_chord_id, highest + 1),
        selected_tab=Tab(record.selected_tab),
        selected_chord=record.selected_chord,
        chord_search_input=record.chord_search_input,
        selected_song=record.selected_song,
        song_search_input=record.song_search_input,
    )


def state_to_record(state: AppState) -> StateRecord:
    return StateRecord(
        chords=[
            ChordRecord(id=c.id, name=c.name, notes=[(pos.fret, pos.string) for pos in c.notes])
            for c in state.chords
        ],
        songs=[SongRecord(name=s.name, text=s.text, preferences=dict(s.preferences)) for s in state.songs],
        next_chord_id=state.next_chord_id,
        selected_tab=state.selected_tab.value,
        selected_chord=state.selected_chord,
        chord_search_input=state.chord_search_input,
        selected_song=state.selected_song,
        song_search_input=state.song_search_input,
    )


def parse_state(raw: str) -> AppState:
    """
    Parse a serialized state document.

    Raises:
        StateFileError: If the document is not JSON or fails validation.
    """
    try:
        record = StateRecord.model_validate_json(raw or "{}")
    except ValidationError as exc:
        raise StateFileError(f"Invalid state document: {exc}") from exc
    return state_from_record(record)


def dump_state(state: AppState) -> str:
    return state_to_record(state).model_dump_json(indent=2)


def load_state(path: Path) -> AppState:
    """Load state from *path*; a missing file yields an empty default state."""
    path = Path(path)
    if not path.exists():
        logger.info("No state file at %s, starting empty", path)
        return AppState()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StateFileError(f"Could not read state file {path}: {exc}") from exc
    return parse_state(raw)


def save_state(state: AppState, path: Path) -> None:
    """Write state to *path*, replacing the previous file only once fully written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(dump_state(state), encoding="utf-8")
    os.replace(tmp, path)
    logger.debug("Saved %d chord(s), %d song(s) to %s", len(state.chords), len(state.songs), path)
