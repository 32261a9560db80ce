"""keyscope - Chord and key inference for played notes.

Architecture Layers:
    1. core/       - Note primitives, intervals, error types
    2. theory/     - Triad, chord and key tables
    3. inference/  - Chord detection, key detection, note histogram, performance scoring
    4. session/    - Held notes, key tracking, practice rounds
    5. input/      - Note events and MIDI file replay
"""

__version__ = "0.1.0"

# Core types
from .core import (
    TimedNote,
    KeyscopeError,
    ChordNotFoundError,
    KeyNotFoundError,
    InvalidInputError,
    InvalidNoteError,
    TooFewNotesError,
    HistogramStateError,
    DuplicateChordNameError,
    NoteDisplayContext,
    note_to_midi,
    note_from_midi,
    note_identity,
    name_interval,
)

# Theory layer
from .theory import Chord, ChordArchetype, Mode, TriadName, lookup_archetype, triads_for

# Inference layer
from .inference import (
    ChordDetector,
    KeyDetector,
    LikelyKey,
    NoteHistogram,
    HistogramConfig,
    PerformanceEvaluator,
    PerformanceConfig,
    PerformedChord,
    detect_chords,
    detect_chord,
    detect_key,
)

# Session layer
from .session import NoteSet, KeyTracker, PracticeRound

# Input layer
from .input import NoteEvent, EventKind, MidiFileReader, events_from_notes, replay

__all__ = [
    # Core
    "TimedNote",
    "KeyscopeError",
    "ChordNotFoundError",
    "KeyNotFoundError",
    "InvalidInputError",
    "InvalidNoteError",
    "TooFewNotesError",
    "HistogramStateError",
    "DuplicateChordNameError",
    "NoteDisplayContext",
    "note_to_midi",
    "note_from_midi",
    "note_identity",
    "name_interval",
    # Theory
    "Chord",
    "ChordArchetype",
    "Mode",
    "TriadName",
    "lookup_archetype",
    "triads_for",
    # Inference
    "ChordDetector",
    "KeyDetector",
    "LikelyKey",
    "NoteHistogram",
    "HistogramConfig",
    "PerformanceEvaluator",
    "PerformanceConfig",
    "PerformedChord",
    "detect_chords",
    "detect_chord",
    "detect_key",
    # Session
    "NoteSet",
    "KeyTracker",
    "PracticeRound",
    # Input
    "NoteEvent",
    "EventKind",
    "MidiFileReader",
    "events_from_notes",
    "replay",
]
