"""Chord variant resolution for words found in song lyrics."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Union

from lyrichord.chord_models import AppState, Chord, Song
from lyrichord.lyrics import word_under_cursor
from lyrichord.state_reducer import InsertPreference
from lyrichord.theory import is_chord_like


@dataclass(frozen=True)
class ChordPopup:
    """Show *chord*; a next-variant control is offered when there are several."""

    chord: Chord
    variant_count: int

    @property
    def can_cycle(self) -> bool:
        return self.variant_count > 1


@dataclass(frozen=True)
class CreateOffer:
    """The word looks like a chord name that has no diagram yet."""

    name: str


@dataclass(frozen=True)
class NoMatch:
    word: str


CursorLookup = Union[ChordPopup, CreateOffer, NoMatch]


def variants_named(chords: Iterable[Chord], name: str) -> list[Chord]:
    """All chords called *name*, in ascending id order."""
    return sorted((chord for chord in chords if chord.name == name), key=lambda chord: chord.id)


def resolve_variant(name: str, candidates: Sequence[Chord], preference: int | None) -> Chord | None:
    """
    Pick the variant of *name* to display.

    Args:
        name:       Chord name being resolved.
        candidates: Chords called *name*, ascending by id.
        preference: Chord id the song prefers, if any.

    Returns:
        The preferred candidate when it still exists, otherwise the one with
        the lowest id; None when there are no candidates.
    """
    matching = [chord for chord in candidates if chord.name == name]
    if not matching:
        return None
    if preference is not None:
        for chord in matching:
            if chord.id == preference:
                return chord
    return min(matching, key=lambda chord: chord.id)


def cycle_next(candidates: Sequence[Chord], current_id: int) -> int | None:
    """
    Return the id of the variant after *current_id*, wrapping to the lowest.

    Example:
        ids [2, 5, 9]: 5 -> 9, 9 -> 2
    """
    ids = sorted(chord.id for chord in candidates)
    if not ids:
        return None
    return next((chord_id for chord_id in ids if chord_id > current_id), ids[0])


def lookup_at_cursor(state: AppState, song: Song, cursor: int) -> CursorLookup:
    """Decide what the lyrics editor should show for the word under the cursor."""
    word = word_under_cursor(song.text, cursor)
    candidates = variants_named(state.chords, word)
    chord = resolve_variant(word, candidates, song.preferences.get(word))
    if chord is not None:
        return ChordPopup(chord=chord, variant_count=len(candidates))
    if is_chord_like(word):
        return CreateOffer(name=word)
    return NoMatch(word=word)


def cycle_commands(song: Song, candidates: Sequence[Chord], current: Chord) -> list[InsertPreference]:
    """Commands that make *song* display the variant following *current*."""
    next_id = cycle_next(candidates, current.id)
    if next_id is None or next_id == current.id:
        return []
    chosen = next(chord for chord in candidates if chord.id == next_id)
    return [InsertPreference.for_chord(song.name, chosen)]
