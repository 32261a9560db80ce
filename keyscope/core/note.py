"""TimedNote data class - a sounded note with onset and offset."""

from dataclasses import dataclass
from typing import Optional

from .constants import PITCH_NAMES


@dataclass
class TimedNote:
    """Represents a note that was played for some span of time."""

    pitch: int  # MIDI pitch (0-127)
    onset_ms: float  # Start time in milliseconds
    offset_ms: float  # End time in milliseconds
    velocity: int = 64  # MIDI velocity (0-127)
    instrument: Optional[str] = None

    @property
    def duration_ms(self) -> float:
        """Note duration in milliseconds."""
        return self.offset_ms - self.onset_ms

    @property
    def pitch_name(self) -> str:
        """Get note name (e.g., 'C4', 'A#3')."""
        octave = (self.pitch // 12) - 1
        name = PITCH_NAMES[self.pitch % 12]
        return f"{name}{octave}"

    @property
    def pitch_class(self) -> int:
        """Get pitch class (0-11, where 0=C)."""
        return self.pitch % 12
