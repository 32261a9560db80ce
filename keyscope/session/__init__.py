"""Session layer - Caller-side state around the inference engine.

- Held-note set
- Key tracker (histogram + key detector, with lock)
- Practice rounds and play history
"""

from .note_set import NoteSet
from .key_tracker import KeyTracker
from .practice import PracticeRound, PlayRecord, PlayHistory

__all__ = [
    "NoteSet",
    "KeyTracker",
    "PracticeRound",
    "PlayRecord",
    "PlayHistory",
]
