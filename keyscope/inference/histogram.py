"""Note histogram - A decaying, time-weighted pitch-class distribution.

Recent and long-held notes carry the most weight. Notes are tracked
individually (short context) until they have been closed for a while, then
their weight is frozen into a 12-bucket accumulator (long context) that
decays towards zero. This keeps each recalculation cheap no matter how long
the performance runs.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from ..core.constants import OCTAVE_SIZE
from ..core.errors import HistogramStateError
from ..core.notes import NoteLike, has_octave, note_identity, to_midi

logger = logging.getLogger(__name__)


class DuplicateNotePolicy(Enum):
    """What to do with a note-on for a pitch class that is already sounding."""
    RAISE = "raise"  # HistogramStateError
    RESTART = "restart"  # implicit note-off, then note-on


@dataclass
class HistogramConfig:
    """Tuning constants for the note histogram.

    Attributes:
        time_scale: Scale applied to elapsed time before the exponent (default: 0.0003)
        time_exponent: How fast a note's weight fades with age (default: 0.3)
        length_exponent: How much held length adds weight (default: 0.6)
        min_time_delta_ms: Floor on elapsed time, avoids blowing up near 0 (default: 500)
        min_length_ms: Notes shorter than this count as this long (default: 200)
        long_context_ms: Closed notes older than this move to long context (default: 45000)
        decay_per_second: Long-context decay factor per second (default: 0.993)
        epsilon: Long-context buckets below this are zeroed (default: 0.0006)
        duplicate_policy: Handling of a second note-on per pitch class (default: RAISE)
    """

    time_scale: float = 0.0003
    time_exponent: float = 0.3
    length_exponent: float = 0.6
    min_time_delta_ms: float = 500.0
    min_length_ms: float = 200.0
    long_context_ms: float = 45000.0
    decay_per_second: float = 0.993
    epsilon: float = 0.0006
    duplicate_policy: DuplicateNotePolicy = DuplicateNotePolicy.RAISE


@dataclass
class HistogramDatum:
    """One played note: pitch class plus on/off times (end_ms None while held)."""
    pitch_class: int
    start_ms: float
    end_ms: Optional[float] = None
    midi: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end_ms is None


@dataclass
class HistogramStats:
    """Bookkeeping from the most recent calculate() call."""
    short_context_size: int = 0
    moved_to_long_context: int = 0
    last_calculated_ms: Optional[float] = None
    zeroed_buckets: List[int] = field(default_factory=list)


class NoteHistogram:
    """Accumulate note events into a 12-bucket histogram.

    Mutating methods must not be called concurrently.
    """

    def __init__(self, config: Optional[HistogramConfig] = None, **kwargs):
        """
        Initialize NoteHistogram.

        Args:
            config: HistogramConfig instance
            **kwargs: Override individual config values
        """
        self.config = replace(config or HistogramConfig(), **kwargs)
        self.reset()

    def reset(self) -> None:
        """Forget every note and all accumulated weight."""
        self._open: Dict[int, HistogramDatum] = {}
        self.short_context: List[HistogramDatum] = []
        self.long_context = np.zeros(OCTAVE_SIZE)
        self.computed = np.zeros(OCTAVE_SIZE)
        self.magnitude = 0.0
        self.maximum = 0.0
        self.last_calculated_ms: Optional[float] = None
        self.stats = HistogramStats()

    @property
    def open_pitch_classes(self) -> List[int]:
        return sorted(self._open)

    def note_on(self, note: NoteLike, timestamp_ms: float) -> None:
        """
        Start a held note.

        Raises:
            HistogramStateError: If the pitch class is already open and the
                duplicate policy is RAISE
        """
        pitch_class = note_identity(note)
        if pitch_class in self._open:
            if self.config.duplicate_policy is DuplicateNotePolicy.RAISE:
                raise HistogramStateError(
                    f"Cannot add note {note!r}; pitch class {pitch_class} already open"
                )
            logger.debug("Restarting open pitch class %d at %.0f ms", pitch_class, timestamp_ms)
            self.note_off(note, timestamp_ms)

        datum = HistogramDatum(pitch_class, timestamp_ms, None, self._midi_or_none(note))
        self._open[pitch_class] = datum
        self.short_context.append(datum)

    def note_off(self, note: NoteLike, timestamp_ms: float) -> None:
        """
        Release a held note.

        Raises:
            HistogramStateError: If no note of that pitch class is open
        """
        pitch_class = note_identity(note)
        datum = self._open.pop(pitch_class, None)
        if datum is None:
            raise HistogramStateError(f"Cannot close note {note!r}; not open")
        datum.end_ms = timestamp_ms

    def note_instant(self, note: NoteLike, timestamp_ms: float, length_ms: float) -> None:
        """Add a note that is already closed, e.g. from a recording."""
        self.short_context.append(HistogramDatum(
            note_identity(note),
            timestamp_ms,
            timestamp_ms + length_ms,
            self._midi_or_none(note),
        ))

    def weight(self, datum: HistogramDatum, timestamp_ms: float) -> float:
        """Contribution of one datum to its bucket at a point in time."""
        cfg = self.config
        dt = max(timestamp_ms - datum.start_ms, cfg.min_time_delta_ms)
        length = dt if datum.end_ms is None else datum.end_ms - datum.start_ms
        length = max(length, cfg.min_length_ms)
        return length ** cfg.length_exponent / (cfg.time_scale * dt) ** cfg.time_exponent

    def calculate(self, timestamp_ms: float) -> np.ndarray:
        """
        Recompute the histogram as of a timestamp.

        Returns:
            The computed 12-bucket histogram (also kept on self.computed)
        """
        cfg = self.config

        # Long context decays since the previous call
        if self.last_calculated_ms is not None:
            elapsed_s = (timestamp_ms - self.last_calculated_ms) / 1000.0
            long_context = self.long_context * cfg.decay_per_second ** elapsed_s
        else:
            long_context = self.long_context.copy()
        zeroed = np.flatnonzero((long_context > 0) & (long_context < cfg.epsilon))
        long_context[long_context < cfg.epsilon] = 0.0

        computed = long_context.copy()

        still_short: List[HistogramDatum] = []
        moved = 0
        for datum in self.short_context:
            w = self.weight(datum, timestamp_ms)
            computed[datum.pitch_class] += w
            if datum.is_open or datum.end_ms + cfg.long_context_ms > timestamp_ms:
                still_short.append(datum)
            else:
                long_context[datum.pitch_class] += w
                moved += 1

        if moved:
            logger.debug("Moved %d note(s) to long context at %.0f ms", moved, timestamp_ms)

        self.short_context = still_short
        self.long_context = long_context
        self.computed = computed
        self.magnitude = float(computed.sum())
        self.maximum = float(computed.max())
        self.last_calculated_ms = timestamp_ms
        self.stats = HistogramStats(
            short_context_size=len(still_short),
            moved_to_long_context=moved,
            last_calculated_ms=timestamp_ms,
            zeroed_buckets=zeroed.tolist(),
        )
        return computed

    @staticmethod
    def _midi_or_none(note: NoteLike) -> Optional[int]:
        # Octaveless notes only carry a pitch class
        return to_midi(note) if has_octave(note) else None
