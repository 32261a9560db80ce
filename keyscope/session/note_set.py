"""Held-note set - The notes currently pressed, with press times."""

from typing import Dict, Iterator, List, Optional

from ..core.notes import Note, NoteLike, normalized_note_name, note_to_midi


class NoteSet:
    """Track which notes are held.

    Notes are stored under their normalized name, so "Db4" and "C#4" are
    the same key.
    """

    def __init__(self):
        self.timestamp_by_note: Dict[Note, float] = {}

    def include_note(self, note: NoteLike, timestamp_ms: float) -> None:
        self.timestamp_by_note[normalized_note_name(note)] = timestamp_ms

    def exclude_note(self, note: NoteLike) -> None:
        self.timestamp_by_note.pop(normalized_note_name(note), None)

    def reset(self) -> None:
        self.timestamp_by_note.clear()

    @property
    def sorted_notes(self) -> List[Note]:
        """Held notes, lowest first."""
        return sorted(self.timestamp_by_note, key=note_to_midi)

    @property
    def last_change_ms(self) -> Optional[float]:
        """When the most recent held note was pressed."""
        return max(self.timestamp_by_note.values(), default=None)

    def __len__(self) -> int:
        return len(self.timestamp_by_note)

    def __contains__(self, note: object) -> bool:
        if not isinstance(note, (str, int)):
            return False
        return normalized_note_name(note) in self.timestamp_by_note

    def __iter__(self) -> Iterator[Note]:
        return iter(self.sorted_notes)
