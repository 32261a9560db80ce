"""Core types, constants and note primitives for keyscope."""

from .note import TimedNote
from .constants import (
    PITCH_NAMES,
    OCTAVE_SIZE,
    NUM_DEGREES,
    DEFAULT_REFRESH_MS,
    DEFAULT_SETTLE_MS,
)
from .errors import (
    KeyscopeError,
    ChordNotFoundError,
    KeyNotFoundError,
    InvalidInputError,
    InvalidNoteError,
    TooFewNotesError,
    HistogramStateError,
    DuplicateChordNameError,
)
from .notes import (
    Note,
    MidiNote,
    NoteLike,
    ExplodedNote,
    NoteDisplayContext,
    explode_note,
    combine_note,
    with_octave,
    strip_octave,
    has_octave,
    note_to_midi,
    note_from_midi,
    to_midi,
    note_identity,
    midi_identity,
    note_from_identity,
    normalized_note_name,
    note_name_equals,
    transpose,
    note_below,
    display_accidentals,
    untransform_accidentals,
)
from .intervals import INTERVAL_NAMES, name_interval

__all__ = [
    "TimedNote",
    "PITCH_NAMES",
    "OCTAVE_SIZE",
    "NUM_DEGREES",
    "DEFAULT_REFRESH_MS",
    "DEFAULT_SETTLE_MS",
    # Errors
    "KeyscopeError",
    "ChordNotFoundError",
    "KeyNotFoundError",
    "InvalidInputError",
    "InvalidNoteError",
    "TooFewNotesError",
    "HistogramStateError",
    "DuplicateChordNameError",
    # Note primitives
    "Note",
    "MidiNote",
    "NoteLike",
    "ExplodedNote",
    "NoteDisplayContext",
    "explode_note",
    "combine_note",
    "with_octave",
    "strip_octave",
    "has_octave",
    "note_to_midi",
    "note_from_midi",
    "to_midi",
    "note_identity",
    "midi_identity",
    "note_from_identity",
    "normalized_note_name",
    "note_name_equals",
    "transpose",
    "note_below",
    "display_accidentals",
    "untransform_accidentals",
    # Intervals
    "INTERVAL_NAMES",
    "name_interval",
]
