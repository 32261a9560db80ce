"""Command-line interface for keyscope.

Provides commands for:
- chord: Name the chord a set of notes forms
- key: Rank keys for a pitch-class histogram
- evaluate: Score a played note set against a target chord
- replay: Follow key guesses through a MIDI file
- library: List the chord archetypes
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.errors import KeyscopeError
from .core.notes import NoteDisplayContext
from .inference import (
    ChordDetector,
    KeyDetector,
    LikelyKey,
    PerformanceEvaluator,
)
from .input import MidiFileReader, events_from_notes, replay as replay_events
from .session import KeyTracker
from .theory import CHORD_DEFINITIONS, Chord, triads_for

app = typer.Typer(
    name="keyscope",
    help="Chord and key inference for played notes",
    rich_markup_mode="markdown",
)
console = Console()


def _parse_int_or_note(value: str):
    """Accept MIDI numbers as well as note names on the command line."""
    return int(value) if value.lstrip("-").isdigit() else value


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Show debug logging"
    ),
):
    """Chord and key inference for played notes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def chord(
    notes: List[str] = typer.Argument(..., help="Notes with octaves, e.g. C4 E4 G4, or MIDI numbers"),
    top: int = typer.Option(5, "--top", "-n", help="How many candidates to show"),
    key: Optional[str] = typer.Option(
        None, "--key", "-k", help="Key for spelling and roman numerals, e.g. 'F major'"
    ),
):
    """Detect the chord formed by a set of notes.

    Examples:
        keyscope chord C4 E4 G4
        keyscope chord E3 C4 G4 --key "C major"
    """
    try:
        candidates = ChordDetector().detect_chords([_parse_int_or_note(n) for n in notes])
        if not candidates:
            console.print("[yellow]No chord detected[/yellow]")
            return

        context = NoteDisplayContext(key_name=key)
        table = Table(title="Detected Chords")
        table.add_column("Chord", style="cyan")
        if key:
            table.add_column("Roman", style="green")
        table.add_column("Accidentals", style="yellow")
        table.add_column("Score", style="magenta")

        detector = ChordDetector()
        for candidate in candidates[:top]:
            row = [candidate.for_display(context)]
            if key:
                row.append(candidate.roman_numeral(key))
            row.append(", ".join(f"+{x}" for x in candidate.accidentals) or "-")
            row.append(f"{detector.score(candidate):.0f}")
            table.add_row(*row)
        console.print(table)
    except KeyscopeError as e:
        _fail(str(e))


@app.command()
def key(
    histogram: List[float] = typer.Argument(..., help="12 pitch-class weights, starting at C"),
    top: int = typer.Option(5, "--top", "-n", help="How many keys to show"),
    min_score: Optional[float] = typer.Option(
        None, "--min-score", help="Drop keys scoring below this before normalizing"
    ),
):
    """Rank the keys a pitch-class histogram suggests.

    Example:
        keyscope key 3 0 1 0 2 1 0 2 0 1 0 1
    """
    try:
        guesses = KeyDetector(min_internal_score=min_score).detect(histogram)
    except KeyscopeError as e:
        _fail(str(e))

    if not guesses:
        console.print("[yellow]No key detected[/yellow]")
        return
    _show_keys_table(guesses[:top])


@app.command()
def evaluate(
    target: str = typer.Argument(..., help="Target chord, e.g. 'C maj7' or 'Am'"),
    notes: List[str] = typer.Argument(..., help="Played notes with octaves"),
    strict: bool = typer.Option(
        False, "--strict", help="Do not tolerate extra notes above the octave"
    ),
):
    """Score a played note set against a target chord.

    Example:
        keyscope evaluate "C maj7" C4 E4 G4 B4
    """
    try:
        target_chord = Chord.lookup(target)
        evaluator = PerformanceEvaluator(allow_additional_extensions=not strict)
        performed, correct = evaluator.evaluate([_parse_int_or_note(n) for n in notes], target_chord)
        feedback = evaluator.feedback(performed, target_chord)
        goal = evaluator.get_goal_notes(performed, target_chord)
    except KeyscopeError as e:
        _fail(str(e))

    console.print(f"[bold]Target:[/bold] {target_chord.for_display()}")
    if correct:
        console.print("[green]Correct![/green]")
    else:
        console.print("[red]Incorrect[/red]")
        for line in feedback.messages():
            console.print(f"  {line}")
        console.print(f"  Try: {' '.join(goal)}")


@app.command()
def replay(
    input_file: Path = typer.Argument(..., help="MIDI file (.mid, .midi)"),
    refresh_ms: float = typer.Option(
        1000.0, "--refresh-ms", help="How often to recompute key guesses (ms)"
    ),
    top: int = typer.Option(5, "--top", "-n", help="How many final keys to show"),
    include_drums: bool = typer.Option(
        False, "--drums", help="Include drum tracks"
    ),
):
    """Follow key guesses through a MIDI file.

    Example:
        keyscope replay song.mid --refresh-ms 500
    """
    if not input_file.exists():
        _fail(f"File not found: {input_file}")

    try:
        notes = MidiFileReader(include_drums=include_drums).read(str(input_file))
    except ValueError as e:
        _fail(str(e))

    console.print(f"[blue]Replaying:[/blue] {input_file} ({len(notes)} notes)")
    if not notes:
        console.print("[yellow]No notes found![/yellow]")
        return

    tracker = KeyTracker()
    current = None
    guesses: List[LikelyKey] = []
    try:
        for timestamp_ms, guesses in replay_events(events_from_notes(notes), tracker, refresh_ms):
            best = guesses[0] if guesses else None
            if best is not None and (current is None or not best.same_key(current)):
                console.print(f"  {timestamp_ms / 1000.0:7.2f}s  {best.for_display()}")
                current = best
    except KeyscopeError as e:
        _fail(str(e))

    if guesses:
        _show_keys_table(guesses[:top])


@app.command()
def library():
    """List the chord archetypes."""
    table = Table(title="Chord Library")
    table.add_column("Names", style="cyan")
    table.add_column("Triad", style="green")
    table.add_column("Shape", style="yellow")
    table.add_column("Extensions", style="magenta")

    for names, triad_name, extensions in CHORD_DEFINITIONS:
        table.add_row(
            ", ".join(repr(n) if n == "" else n for n in names),
            triad_name.value,
            " ".join(str(g) for g in triads_for(triad_name)[0]),
            " ".join(str(x) for x in extensions) or "-",
        )

    console.print(table)


def _show_keys_table(keys: List[LikelyKey]):
    """Display likely keys in a table."""
    table = Table(title="Likely Keys")
    table.add_column("Key", style="cyan")
    table.add_column("Score", style="magenta")

    for likely in keys:
        table.add_row(likely.for_display(), f"{likely.score:.3f}")

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
