"""Inference layer - Musical judgments from played notes.

This layer turns notes into musical understanding:
- Chord detection (which chord is sounding)
- Note histogram (decaying pitch-class weights over time)
- Key detection (which key the performer is in)
- Performance evaluation (did the performer play the target chord)

Pipeline: Note events → Histogram → Key; Held notes → Chord / Performance
"""

from .chords import ChordDetector, detect_chords, detect_chord
from .key import KeyDetector, LikelyKey, detect_key
from .histogram import (
    NoteHistogram,
    HistogramConfig,
    HistogramDatum,
    HistogramStats,
    DuplicateNotePolicy,
)
from .performance import (
    PerformanceEvaluator,
    PerformanceConfig,
    PerformanceFeedback,
    PerformedChord,
    interpret_performance,
    is_correct,
    get_goal_notes,
)

__all__ = [
    # Chord detection
    "ChordDetector",
    "detect_chords",
    "detect_chord",
    # Key detection
    "KeyDetector",
    "LikelyKey",
    "detect_key",
    # Histogram
    "NoteHistogram",
    "HistogramConfig",
    "HistogramDatum",
    "HistogramStats",
    "DuplicateNotePolicy",
    # Performance
    "PerformanceEvaluator",
    "PerformanceConfig",
    "PerformanceFeedback",
    "PerformedChord",
    "interpret_performance",
    "is_correct",
    "get_goal_notes",
]
