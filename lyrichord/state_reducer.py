"""Ordered command reducer: the only way the host mutates chord and song collections."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from lyrichord.chord_models import AppState, Chord, Song

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteChord:
    chord_id: int


@dataclass(frozen=True)
class AddEmptyChord:
    name: str


@dataclass(frozen=True)
class AddEmptySong:
    name: str


@dataclass(frozen=True)
class SelectChord:
    name: str


@dataclass(frozen=True)
class SelectSong:
    name: str


@dataclass(frozen=True)
class InsertPreference:
    """Make *song_name* display chord *chord_id* wherever *chord_name* appears."""

    song_name: str
    chord_name: str
    chord_id: int

    @classmethod
    def for_chord(cls, song_name: str, chord: Chord) -> InsertPreference:
        return cls(song_name=song_name, chord_name=chord.name, chord_id=chord.id)


Command = Union[DeleteChord, AddEmptyChord, AddEmptySong, SelectChord, SelectSong, InsertPreference]


def run_command(state: AppState, command: Command) -> None:
    """Apply a single command to the state in place."""
    if isinstance(command, DeleteChord):
        before = len(state.chords)
        state.chords = [chord for chord in state.chords if chord.id != command.chord_id]
        if len(state.chords) == before:
            logger.debug("DeleteChord: no chord with id %s", command.chord_id)
        for song in state.songs:
            stale = [name for name, chord_id in song.preferences.items() if chord_id == command.chord_id]
            for name in stale:
                del song.preferences[name]

    elif isinstance(command, AddEmptyChord):
        chord = Chord.empty(state.allocate_chord_id(), command.name)
        state.chords.append(chord)
        logger.debug("AddEmptyChord: created %r with id %s", chord.name, chord.id)

    elif isinstance(command, AddEmptySong):
        if not command.name:
            logger.warning("AddEmptySong: ignored blank song name")
            return
        state.songs.append(Song.empty(command.name))

    elif isinstance(command, SelectChord):
        state.selected_chord = command.name

    elif isinstance(command, SelectSong):
        state.selected_song = command.name

    elif isinstance(command, InsertPreference):
        song = state.find_song(command.song_name)
        if song is None:
            logger.debug("InsertPreference: no song named %r", command.song_name)
            return
        song.preferences[command.chord_name] = command.chord_id

    else:
        raise TypeError(f"Unknown command: {command!r}")


def run_commands(state: AppState, commands: Iterable[Command]) -> None:
    """Apply commands strictly in emission order."""
    for command in commands:
        run_command(state, command)
