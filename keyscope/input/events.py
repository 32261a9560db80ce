"""Note events - The note-on/note-off stream the engine consumes."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from ..core.note import TimedNote
from ..core.notes import NoteLike

logger = logging.getLogger(__name__)


class EventKind(Enum):
    NOTE_ON = "note_on"
    NOTE_OFF = "note_off"


@dataclass(frozen=True)
class NoteEvent:
    """A single keyboard event."""
    kind: EventKind
    note: NoteLike  # Note name or MIDI number
    timestamp_ms: float


def events_from_notes(notes: Iterable[TimedNote]) -> List[NoteEvent]:
    """
    Turn timed notes into a time-ordered event stream.

    At equal timestamps note-offs come first, so a note re-struck right as
    it is released closes before it reopens. A zero-length note still opens
    before it closes. Notes that end before they start are dropped.
    """
    ranked = []
    for note in notes:
        if note.offset_ms < note.onset_ms:
            logger.debug("Skipping note %d that ends before its onset", note.pitch)
            continue
        # Same timestamp: offs, then ons, then offs of zero-length notes
        off_rank = 2 if note.offset_ms == note.onset_ms else 0
        ranked.append((note.onset_ms, 1, NoteEvent(EventKind.NOTE_ON, note.pitch, note.onset_ms)))
        ranked.append((note.offset_ms, off_rank, NoteEvent(EventKind.NOTE_OFF, note.pitch, note.offset_ms)))
    ranked.sort(key=lambda r: (r[0], r[1]))
    return [event for _, _, event in ranked]
