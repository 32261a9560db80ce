"""Note primitives - naming, enharmonic normalization and MIDI conversion.

Notes travel through the engine in two interchangeable forms:
- strings such as "C#4", "Eb" or "F" (octave optional)
- MIDI integers, where 60 is C4

Octave-bearing notes convert losslessly between the two. The pitch class
(``note_identity``) ignores octave and spelling, so "C#4", "Db" and 61 all
share identity 1.
"""

import re
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Union

from .constants import MIDI_MIN, NATURAL_PITCHES, OCTAVE_SIZE, PITCH_NAMES
from .errors import InvalidNoteError

# e.g. C, E2, D#, Eb4
Note = str
MidiNote = int
NoteLike = Union[str, int]

# Uppercase letter, optional single accidental, optional (possibly negative) octave
NOTE_REGEX = re.compile(r"^([A-G][#b]?)(-?\d+)?$")

ACCIDENTAL_OFFSETS = {"": 0, "#": 1, "b": -1}


class ExplodedNote(NamedTuple):
    """A note split into its name and (optional) octave."""

    name: str
    octave: Optional[int] = None


@dataclass
class NoteDisplayContext:
    """How to spell notes for a user.

    Attributes:
        key_name: Key to spell accidentals for, e.g. "F major"
        scale: Explicit scale spelling to pick enharmonics from
        show_octave: Append the octave when the note has one
        compact: Prefer the shortest chord name
    """

    key_name: Optional[str] = None
    scale: Optional[List[str]] = None
    show_octave: bool = False
    compact: bool = False


def display_accidentals(s: str) -> str:
    """Replace # and b with the unicode sharp and flat signs."""
    return s.replace("#", "♯").replace("b", "♭")


def untransform_accidentals(s: str) -> str:
    """Replace unicode sharp and flat signs with # and b."""
    return s.replace("♯", "#").replace("♭", "b")


def explode_note(note: Union[Note, ExplodedNote]) -> ExplodedNote:
    """Split a note into name and octave, e.g. "Eb4" -> ("Eb", 4)."""
    if isinstance(note, ExplodedNote):
        return note
    if not isinstance(note, str):
        raise InvalidNoteError(f"Unrecognized note: {note!r}")

    match = NOTE_REGEX.match(untransform_accidentals(note.strip()))
    if not match:
        raise InvalidNoteError(f"Unrecognized note: {note!r}")

    name, octave = match.groups()
    return ExplodedNote(name, int(octave) if octave is not None else None)


def combine_note(note: ExplodedNote) -> Note:
    octave = "" if note.octave is None else str(note.octave)
    return f"{note.name}{octave}"


def with_octave(note: Union[Note, ExplodedNote], octave: int) -> Note:
    return combine_note(explode_note(note)._replace(octave=octave))


def strip_octave(note: Union[Note, ExplodedNote]) -> Note:
    return explode_note(note).name


def has_octave(note: NoteLike) -> bool:
    if isinstance(note, int):
        return True
    return explode_note(note).octave is not None


def _pitch_offset(name: str) -> int:
    """Semitones above C of a note name; may fall outside 0-11 (Cb, B#)."""
    return NATURAL_PITCHES[name[0]] + ACCIDENTAL_OFFSETS[name[1:]]


def note_to_midi(note: NoteLike) -> MidiNote:
    """Convert an octave-bearing note to its MIDI number."""
    if isinstance(note, int):
        return note

    name, octave = explode_note(note)
    if octave is None:
        raise InvalidNoteError(f"Could not convert note {note!r} to MIDI; it has no octave")
    return (octave + 1) * OCTAVE_SIZE + _pitch_offset(name)


def note_from_midi(midi_note: MidiNote) -> Note:
    """Convert a MIDI number to a sharp-spelled note name with octave."""
    if midi_note < MIDI_MIN:
        raise InvalidNoteError(f"MIDI note out of range: {midi_note}")
    octave = midi_note // OCTAVE_SIZE - 1
    return f"{PITCH_NAMES[midi_note % OCTAVE_SIZE]}{octave}"


def to_midi(note: NoteLike) -> MidiNote:
    """Accept either representation and return the MIDI number."""
    return note_to_midi(note)


def note_identity(note: NoteLike) -> int:
    """Returns [0, 12) for each note, the pitch class ignoring octave."""
    if isinstance(note, int):
        return note % OCTAVE_SIZE
    return _pitch_offset(strip_octave(note)) % OCTAVE_SIZE


def midi_identity(midi_note: MidiNote) -> int:
    return midi_note % OCTAVE_SIZE


def note_from_identity(identity: int) -> Note:
    """The (octaveless, sharp-spelled) note for a pitch class."""
    return PITCH_NAMES[identity % OCTAVE_SIZE]


def normalized_note_name(note: NoteLike) -> Note:
    """Give every enharmonic the same name so string comparison works.

    Flats become sharps and B#, Cb, E#, Fb are simplified; the octave moves
    with the pitch, so "B#3" becomes "C4".
    """
    if isinstance(note, int):
        return note_from_midi(note)
    name, octave = explode_note(note)
    if octave is None:
        return note_from_identity(note_identity(name))
    return note_from_midi(note_to_midi(note))


def note_name_equals(a: NoteLike, b: NoteLike, ignore_octave: bool = True) -> bool:
    if ignore_octave:
        return note_identity(a) == note_identity(b)
    return normalized_note_name(a) == normalized_note_name(b)


def transpose(note: NoteLike, semitones: int) -> Note:
    """Move a note by some semitones. Octaveless notes wrap within the octave."""
    if isinstance(note, int):
        return note_from_midi(note + semitones)
    name, octave = explode_note(note)
    if octave is None:
        return note_from_identity(note_identity(name) + semitones)
    return note_from_midi(note_to_midi(note) + semitones)


def note_below(note: NoteLike, must_be_below: NoteLike) -> Note:
    """The highest note of the given identity strictly lower than a benchmark."""
    if not has_octave(must_be_below):
        raise InvalidNoteError(
            f"Cannot place note below an octaveless note: {must_be_below!r}"
        )
    benchmark = note_to_midi(must_be_below)
    distance = (benchmark - note_identity(note)) % OCTAVE_SIZE or OCTAVE_SIZE
    return note_from_midi(benchmark - distance)
