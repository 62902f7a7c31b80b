"""lyrichord CLI entry point."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NoReturn

import click

from lyrichord import __version__
from lyrichord.chord_models import AppState, Chord, NotePos, Song, Tab
from lyrichord.config import get_config
from lyrichord.diagram_editor import EditResult, MenuAction, handle_menu_action, handle_pointer_click, toggle_note
from lyrichord.diagram_layout import DiagramGeometry, window_for_chord
from lyrichord.diagram_renderers import DiagramRenderer, SvgDiagramRenderer, TextDiagramRenderer
from lyrichord.errors import LyrichordError
from lyrichord.state_reducer import (
    AddEmptyChord,
    AddEmptySong,
    Command,
    DeleteChord,
    SelectChord,
    SelectSong,
    run_commands,
)
from lyrichord.state_store import load_state, save_state
from lyrichord.variant_resolver import (
    ChordPopup,
    CreateOffer,
    cycle_commands,
    lookup_at_cursor,
    variants_named,
)

logger = logging.getLogger(__name__)

RENDERERS: dict[str, type[DiagramRenderer]] = {
    "text": TextDiagramRenderer,
    "svg": SvgDiagramRenderer,
}


@dataclass
class Session:
    """One CLI invocation: the state file, loaded on first use, and the config."""

    state_path: Path
    config: dict[str, Any]
    _state: AppState | None = field(default=None, repr=False)

    @property
    def state(self) -> AppState:
        if self._state is None:
            try:
                self._state = load_state(self.state_path)
            except LyrichordError as exc:
                _fail(str(exc))
            logger.debug(
                "Loaded %d chord(s), %d song(s) from %s",
                len(self._state.chords), len(self._state.songs), self.state_path,
            )
        return self._state

    @property
    def geometry(self) -> DiagramGeometry:
        return DiagramGeometry.from_config(self.config)

    @property
    def conflict_policy(self) -> str:
        return self.config["editor"]["conflict_policy"]

    @property
    def hit_mode(self) -> str:
        return self.config["editor"]["hit_mode"]

    def apply(self, commands: list[Command]) -> None:
        run_commands(self.state, commands)
        self.save()

    def save(self) -> None:
        try:
            save_state(self.state, self.state_path)
        except OSError as exc:
            _fail(f"Could not write state file — {exc}")


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _require_chord(session: Session, chord_id: int) -> Chord:
    chord = session.state.find_chord(chord_id)
    if chord is None:
        _fail(f"No chord with id {chord_id}.")
    return chord


def _require_song(session: Session, name: str) -> Song:
    song = session.state.find_song(name)
    if song is None:
        _fail(f"No song named '{name}'.")
    return song


def _describe(chord: Chord) -> str:
    notes = ", ".join(f"{pos.fret}/{pos.string}" for pos in chord.notes) or "empty"
    window = window_for_chord(chord)
    return f"#{chord.id:<4} {chord.name:<10} frets {window.min_fret}-{window.max_fret}  [{notes}]"


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="lyrichord")
@click.option("--config", "config_path", default=None, metavar="PATH", help="YAML config file.")
@click.option(
    "--state",
    "state_path",
    default=None,
    metavar="PATH",
    help="State JSON file. Defaults to storage.state_path from the config.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override logging.level from the config.",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, state_path: str | None, log_level: str | None) -> None:
    """lyrichord — guitar chord diagrams for song lyrics."""
    try:
        config = get_config(config_path)
    except LyrichordError as exc:
        _fail(str(exc))

    logging.basicConfig(
        level=(log_level or config["logging"]["level"]).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    ctx.obj = Session(state_path=Path(state_path or config["storage"]["state_path"]), config=config)


# ── chord subcommands ──────────────────────────────────────────────────────────

@main.group()
def chord() -> None:
    """Create, edit and draw chord diagrams."""


@chord.command("add")
@click.argument("name")
@click.pass_obj
def chord_add(session: Session, name: str) -> None:
    """Create an empty chord called NAME (a new variant if NAME exists)."""
    session.apply([AddEmptyChord(name), SelectChord(name)])
    created = session.state.chords[-1]
    click.echo(f"Created chord '{created.name}' with id {created.id}.")


@chord.command("list")
@click.option("--name", default=None, help="Only list variants of this chord name.")
@click.pass_obj
def chord_list(session: Session, name: str | None) -> None:
    """List chords, grouped by name in id order."""
    names = sorted({c.name for c in session.state.chords}) if name is None else [name]
    for chord_name in names:
        for variant in variants_named(session.state.chords, chord_name):
            click.echo(_describe(variant))


@chord.command("toggle")
@click.argument("chord_id", type=int)
@click.argument("fret", type=click.IntRange(min=0))
@click.argument("string", type=click.IntRange(1, 6))
@click.pass_obj
def chord_toggle(session: Session, chord_id: int, fret: int, string: int) -> None:
    """
    Set or clear the note at FRET on STRING.

    \b
    Examples:
      lyrichord chord toggle 1 5 5    # D on the A string
      lyrichord chord toggle 1 0 4    # open D string
    """
    target = _require_chord(session, chord_id)
    try:
        is_set = toggle_note(
            target,
            NotePos(fret=fret, string=string),
            replace_conflicting=session.conflict_policy == "replace",
        )
    except LyrichordError as exc:
        _fail(str(exc))
    session.save()
    click.echo(f"{'Set' if is_set else 'Cleared'} fret {fret} on string {string}.")
    click.echo(_describe(target))


@chord.command("click")
@click.argument("chord_id", type=int)
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.pass_obj
def chord_click(session: Session, chord_id: int, x: float, y: float) -> None:
    """Toggle the note under the point (X, Y) of the drawn diagram."""
    target = _require_chord(session, chord_id)
    pos = handle_pointer_click(
        target, (x, y), session.geometry, session.conflict_policy, session.hit_mode
    )
    if pos is None:
        click.echo("Nothing changed.")
        return
    session.save()
    click.echo(f"Toggled fret {pos.fret} on string {pos.string}.")
    click.echo(_describe(target))


@chord.command("shift")
@click.argument("chord_id", type=int)
@click.argument("direction", type=click.Choice(["up", "down"]))
@click.pass_obj
def chord_shift(session: Session, chord_id: int, direction: str) -> None:
    """Move every fretted note one fret up or down."""
    target = _require_chord(session, chord_id)
    before = list(target.notes)
    action = MenuAction.SHIFT_UP if direction == "up" else MenuAction.SHIFT_DOWN
    handle_menu_action(target, action)
    if target.notes == before:
        click.echo("Nothing changed.")
        return
    session.save()
    click.echo(_describe(target))


@chord.command("delete")
@click.argument("chord_id", type=int)
@click.pass_obj
def chord_delete(session: Session, chord_id: int) -> None:
    """Delete the chord with CHORD_ID."""
    target = _require_chord(session, chord_id)
    if handle_menu_action(target, MenuAction.DELETE) is EditResult.REMOVE:
        session.apply([DeleteChord(target.id)])
        click.echo(f"Deleted chord {chord_id}.")


@chord.command("show")
@click.argument("chord_id", type=int)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(RENDERERS), case_sensitive=False),
    default="text",
    show_default=True,
    help="Diagram format.",
)
@click.option("--output", "-o", default=None, metavar="PATH", help="Write to a file instead of stdout.")
@click.pass_obj
def chord_show(session: Session, chord_id: int, output_format: str, output: str | None) -> None:
    """Draw the chord with CHORD_ID."""
    target = _require_chord(session, chord_id)
    renderer = RENDERERS[output_format.lower()]()
    try:
        content = renderer.render(target, geometry=session.geometry)
    except LyrichordError as exc:
        _fail(f"Could not render chord — {exc}")

    if output is None:
        click.echo(content, nl=False)
        return
    try:
        Path(output).write_text(content, encoding="utf-8")
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")
    click.echo(f"Wrote '{output}'.")


# ── song subcommands ───────────────────────────────────────────────────────────

@main.group()
def song() -> None:
    """Manage songs and look up chords in their lyrics."""


@song.command("add")
@click.argument("name")
@click.pass_obj
def song_add(session: Session, name: str) -> None:
    """Create an empty song called NAME."""
    if not name.strip():
        _fail("Song name must not be blank.")
    if session.state.find_song(name) is not None:
        _fail(f"A song named '{name}' already exists.")
    session.state.selected_tab = Tab.SONGS
    session.apply([AddEmptySong(name), SelectSong(name)])
    click.echo(f"Created song '{name}'.")


@song.command("list")
@click.pass_obj
def song_list(session: Session) -> None:
    """List song names."""
    for name in sorted(s.name for s in session.state.songs):
        marker = "*" if name == session.state.selected_song else " "
        click.echo(f"{marker} {name}")


@song.command("edit")
@click.argument("name")
@click.option("--text", default=None, help="New lyrics text.")
@click.option(
    "--file",
    "text_file",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    default=None,
    help="Read the lyrics from a file.",
)
@click.pass_obj
def song_edit(session: Session, name: str, text: str | None, text_file: str | None) -> None:
    """Replace the lyrics of song NAME."""
    target = _require_song(session, name)
    if text_file is not None:
        text = Path(text_file).read_text(encoding="utf-8")
    if text is None:
        _fail("Give the lyrics with --text or --file.")
    target.text = text
    session.save()
    click.echo(f"Updated '{name}' ({len(text)} characters).")


@song.command("select")
@click.argument("name")
@click.pass_obj
def song_select(session: Session, name: str) -> None:
    """Mark song NAME as the selected song."""
    _require_song(session, name)
    session.state.selected_tab = Tab.SONGS
    session.apply([SelectSong(name)])
    click.echo(f"Selected '{name}'.")


@song.command("lookup")
@click.argument("name")
@click.argument("cursor", type=click.IntRange(min=0))
@click.option("--create", is_flag=True, help="Create the chord if the word looks like one.")
@click.pass_obj
def song_lookup(session: Session, name: str, cursor: int, create: bool) -> None:
    """Show the chord for the word at character offset CURSOR in song NAME."""
    target = _require_song(session, name)
    result = lookup_at_cursor(session.state, target, cursor)

    if isinstance(result, ChordPopup):
        click.echo(TextDiagramRenderer().render(result.chord, geometry=session.geometry), nl=False)
        if result.can_cycle:
            click.echo(f"(variant {result.chord.id}; {result.variant_count} variants, use `song cycle`)")
    elif isinstance(result, CreateOffer):
        if create:
            session.apply([AddEmptyChord(result.name)])
            click.echo(f"Created chord '{result.name}' with id {session.state.chords[-1].id}.")
        else:
            click.echo(f"No chord named '{result.name}'. Re-run with --create to add one.")
    else:
        click.echo(f"'{result.word}' is not a chord.")


@song.command("cycle")
@click.argument("name")
@click.argument("cursor", type=click.IntRange(min=0))
@click.pass_obj
def song_cycle(session: Session, name: str, cursor: int) -> None:
    """Show the next variant of the chord at CURSOR in song NAME."""
    target = _require_song(session, name)
    result = lookup_at_cursor(session.state, target, cursor)
    if not isinstance(result, ChordPopup):
        _fail("There is no chord under the cursor.")

    candidates = variants_named(session.state.chords, result.chord.name)
    commands = cycle_commands(target, candidates, result.chord)
    if not commands:
        click.echo(f"'{result.chord.name}' has a single variant.")
        return
    session.apply(commands)
    chosen = session.state.find_chord(commands[0].chord_id) or result.chord
    click.echo(f"'{name}' now shows variant {chosen.id} of '{chosen.name}'.")
    click.echo(TextDiagramRenderer().render(chosen, geometry=session.geometry), nl=False)
