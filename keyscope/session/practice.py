"""Practice rounds - Ask for a chord, wait for the answer, score it.

Implements the chord-playing exercise with:
- A settle window so near-simultaneous key presses count as one answer
- Scoring through the performance evaluator
- Play records for a session history
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core.constants import DEFAULT_SETTLE_MS
from ..core.notes import Note, NoteLike
from ..inference.performance import PerformanceEvaluator, PerformanceFeedback, PerformedChord
from ..theory.chords import Chord
from .note_set import NoteSet

logger = logging.getLogger(__name__)


@dataclass
class PlayRecord:
    """One answered round."""
    chord: str  # Display name of the target chord
    performed_notes: List[Note]
    correct: bool
    time_delta_ms: float  # From round start to answer

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PlayHistory:
    """Answered rounds of a session."""
    records: List[PlayRecord] = field(default_factory=list)

    def add(self, record: PlayRecord) -> None:
        self.records.append(record)

    @property
    def accuracy(self) -> float:
        """Share of correct answers (0.0 with no answers)."""
        if not self.records:
            return 0.0
        return sum(r.correct for r in self.records) / len(self.records)

    @property
    def average_time_ms(self) -> float:
        if not self.records:
            return 0.0
        return sum(r.time_delta_ms for r in self.records) / len(self.records)


class PracticeRound:
    """A single "play this chord" round.

    Only timestamps drive the round; the caller decides when to check
    is_ready and submit.
    """

    def __init__(
        self,
        target: Chord,
        started_ms: float = 0.0,
        settle_ms: float = DEFAULT_SETTLE_MS,
        evaluator: Optional[PerformanceEvaluator] = None,
    ):
        self.target = target
        self.started_ms = started_ms
        self.settle_ms = settle_ms
        self.evaluator = evaluator or PerformanceEvaluator()
        self.notes = NoteSet()
        self.expected_count = len(target.get_basic_notes())

    def include_note(self, note: NoteLike, timestamp_ms: float) -> None:
        self.notes.include_note(note, timestamp_ms)

    def exclude_note(self, note: NoteLike) -> None:
        self.notes.exclude_note(note)

    def is_ready(self, timestamp_ms: float) -> bool:
        """Enough notes held, and nothing pressed within the settle window."""
        if len(self.notes) < self.expected_count:
            return False
        return timestamp_ms - self.notes.last_change_ms >= self.settle_ms

    def submit(self, timestamp_ms: float) -> Tuple[PlayRecord, PerformanceFeedback]:
        """
        Score the held notes.

        Raises:
            TooFewNotesError: If fewer than two notes are held
        """
        played = self.notes.sorted_notes
        performed: PerformedChord = self.evaluator.interpret_performance(played, self.target)
        correct = self.evaluator.is_correct(performed, self.target)
        feedback = self.evaluator.feedback(performed, self.target)

        record = PlayRecord(
            chord=self.target.for_display(),
            performed_notes=played,
            correct=correct,
            time_delta_ms=timestamp_ms - self.started_ms,
        )
        logger.info("Round %s: %s", record.chord, "correct" if correct else "incorrect")
        return record, feedback
