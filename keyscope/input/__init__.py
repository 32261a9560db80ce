"""Input layer - Note event sources.

- Note events (note-on/note-off with timestamps)
- Standard MIDI File reading via pretty_midi
- Replay of an event stream into a key tracker
"""

from .events import EventKind, NoteEvent, events_from_notes
from .midi_file import MidiFileReader, MidiFileWriter
from .replay import replay

__all__ = [
    "EventKind",
    "NoteEvent",
    "events_from_notes",
    "MidiFileReader",
    "MidiFileWriter",
    "replay",
]
