"""Key detection - Guess which key a performer is playing in.

Implements key detection over a pitch-class histogram with:
- All 84 diatonic keys (12 major scales x 7 modes)
- A degree-weight template slid across each scale to pick the mode
- A penalty for energy outside the scale
- Scores normalized into a probability-like distribution
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..core.constants import NUM_DEGREES, OCTAVE_SIZE
from ..core.errors import InvalidInputError
from ..core.note import TimedNote
from ..core.notes import Note, NoteDisplayContext, note_identity
from ..theory.keys import MAJOR_MODES_BY_DEGREE, MAJOR_SCALES, note_for_display

logger = logging.getLogger(__name__)


@dataclass
class LikelyKey:
    """A candidate key with its normalized score."""
    note: Note  # Tonic, e.g. "Eb"
    mode: str  # One of the seven mode names
    score: float  # Share of the total score; sums to 1 across a result list

    @property
    def key_name(self) -> str:
        return f"{self.note} {self.mode}"

    def for_display(self, context: Optional[NoteDisplayContext] = None) -> str:
        return f"{note_for_display(self.note, context)} {self.mode}"

    def same_key(self, other: "LikelyKey") -> bool:
        """Same tonic pitch class and mode, regardless of score."""
        return self.mode == other.mode and note_identity(self.note) == note_identity(other.note)


class KeyDetector:
    """Detect the key from a 12-bucket pitch-class histogram.

    Each major scale is sampled at its seven degrees; a weight template is
    rotated so that the hypothesized tonic lines up with its first entry.
    """

    # Weight of each degree relative to the tonic (for the major mode)
    SCORE_MODIFIER_BY_RELATIVE_DEGREE = np.array([4.0, 0.2, 2.0, -0.2, 2.5, -1.0, -0.3])

    # Multiplier on histogram energy outside the scale
    NON_SCALE_MODIFIER = -4.0

    def __init__(self, min_internal_score: Optional[float] = None):
        """
        Initialize KeyDetector.

        Args:
            min_internal_score: Drop keys scoring below this before normalizing
        """
        self.min_internal_score = min_internal_score

        # Pitch classes of each major scale's degrees, circle-of-fifths order
        self._scales = [
            (notes, np.array([note_identity(n) for n in notes]))
            for notes in MAJOR_SCALES.values()
        ]
        # Row d is the template rotated so degree d is the tonic
        self._weights = np.stack([
            np.roll(self.SCORE_MODIFIER_BY_RELATIVE_DEGREE, degree)
            for degree in range(NUM_DEGREES)
        ])

    def detect(self, histogram: Sequence[float]) -> List[LikelyKey]:
        """
        Rank the keys a histogram suggests.

        Args:
            histogram: 12 non-negative weights, index 0 = C

        Returns:
            Likely keys, best first, scores summing to 1; empty when no key
            scores above zero

        Raises:
            InvalidInputError: If the histogram does not have 12 buckets
        """
        buckets = np.asarray(histogram, dtype=float)
        if buckets.shape != (OCTAVE_SIZE,):
            raise InvalidInputError(
                f"Histogram must have {OCTAVE_SIZE} buckets, got shape {buckets.shape}"
            )

        total_energy = buckets.sum()
        result: List[LikelyKey] = []
        for scale_notes, degree_buckets in self._scales:
            scale_frequencies = buckets[degree_buckets]
            out_of_scale_penalty = self.NON_SCALE_MODIFIER * (total_energy - scale_frequencies.sum())
            scores = self._weights @ scale_frequencies + out_of_scale_penalty

            for degree, score in enumerate(scores):
                if score <= 0:
                    continue
                if self.min_internal_score is not None and score < self.min_internal_score:
                    continue
                result.append(LikelyKey(
                    note=scale_notes[degree],
                    mode=MAJOR_MODES_BY_DEGREE[degree].value,
                    score=float(score),
                ))

        if not result:
            return []

        grand_total = sum(k.score for k in result)
        for k in result:
            k.score /= grand_total
        result.sort(key=lambda k: k.score, reverse=True)

        logger.debug("Best key %s (%.3f) of %d", result[0].key_name, result[0].score, len(result))
        return result

    def detect_from_notes(self, notes: List[TimedNote], weighted: bool = True) -> List[LikelyKey]:
        """
        Rank keys from a list of timed notes.

        Args:
            notes: Notes with onset/offset
            weighted: Weight each note by duration and velocity
        """
        histogram = self.build_histogram(notes, weighted)
        return self.detect(histogram)

    @staticmethod
    def build_histogram(notes: List[TimedNote], weighted: bool = True) -> np.ndarray:
        """Pitch-class histogram of timed notes."""
        pitch_classes = np.zeros(OCTAVE_SIZE)
        for note in notes:
            if weighted:
                weight = max(note.duration_ms, 0.0) / 1000.0 * (note.velocity / 127.0)
            else:
                weight = 1.0
            pitch_classes[note.pitch_class] += weight
        return pitch_classes


_default_detector = KeyDetector()


def detect_key(histogram: Sequence[float], min_internal_score: Optional[float] = None) -> List[LikelyKey]:
    """Rank the keys a histogram suggests."""
    if min_internal_score is None:
        return _default_detector.detect(histogram)
    return KeyDetector(min_internal_score=min_internal_score).detect(histogram)
