"""Performance evaluation - Score a played note set against a target chord.

Implements chord-exercise scoring with:
- Detached bass detection (over chords)
- Matching played notes to the target's basic notes
- Tolerance for extra notes well above the root (creative extensions)
- Corrective "goal notes" and user-facing feedback
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from ..core.constants import OCTAVE_SIZE
from ..core.errors import TooFewNotesError
from ..core.notes import (
    Note,
    NoteDisplayContext,
    NoteLike,
    note_below,
    note_from_midi,
    note_identity,
    note_to_midi,
    with_octave,
)
from ..theory.chords import Chord
from ..theory.keys import note_for_display

logger = logging.getLogger(__name__)


@dataclass
class PerformedChord:
    """A played note set interpreted against a target chord."""
    root: Note  # Note (with octave) extensions are measured from
    basic_notes: List[Optional[Note]]  # Parallel to the target's basic notes; None = not played
    accidentals: List[Note] = field(default_factory=list)  # Played notes the target cannot explain
    missing: List[Note] = field(default_factory=list)  # Octaveless target notes never played
    bass: Optional[Note] = None


@dataclass
class PerformanceConfig:
    """Configuration for performance evaluation.

    Attributes:
        allow_additional_extensions: Tolerate extra notes far above the root (default: True)
        extension_threshold_semitones: How far above the root an extra note must be
            to be tolerated (default: 12, one octave)
        goal_octave_range: Octaves searched when placing missing notes, end exclusive
            (default: (0, 8))
    """

    allow_additional_extensions: bool = True
    extension_threshold_semitones: int = OCTAVE_SIZE
    goal_octave_range: Tuple[int, int] = (0, 8)


@dataclass
class PerformanceFeedback:
    """What to tell a performer who missed."""
    wrong_notes: List[Note] = field(default_factory=list)
    missing_notes: List[Note] = field(default_factory=list)
    wrong_bass: Optional[Note] = None

    @property
    def is_empty(self) -> bool:
        return not (self.wrong_notes or self.missing_notes or self.wrong_bass)

    def messages(self, context: Optional[NoteDisplayContext] = None) -> List[str]:
        """One line per problem, wrong notes first."""
        lines = []
        if self.wrong_bass:
            lines.append(f"❌ {note_for_display(self.wrong_bass, context)} is not the bass note.")
        for note in self.wrong_notes:
            lines.append(f"❌ {note_for_display(note, context)} is not in chord.")
        for note in self.missing_notes:
            lines.append(f"❓ {note_for_display(note, context)} missing.")
        return lines


class PerformanceEvaluator:
    """Decide whether a performance is an instance of a target chord."""

    # Below this many notes there is no chord to interpret
    MIN_NOTES = 2

    def __init__(self, config: Optional[PerformanceConfig] = None, **kwargs):
        """
        Initialize PerformanceEvaluator.

        Args:
            config: PerformanceConfig instance
            **kwargs: Override individual config values
        """
        self.config = replace(config or PerformanceConfig(), **kwargs)

    def interpret_performance(self, notes: Sequence[NoteLike], target: Chord) -> PerformedChord:
        """
        Interpret played notes as an attempt at a target chord.

        Args:
            notes: Played notes with octaves
            target: The chord the performer was asked for

        Returns:
            PerformedChord

        Raises:
            TooFewNotesError: If fewer than two distinct notes were played
        """
        midi_notes = sorted({note_to_midi(n) for n in notes})
        if len(midi_notes) < self.MIN_NOTES:
            raise TooFewNotesError(
                f"Cannot interpret a chord performance of fewer than {self.MIN_NOTES} notes"
            )
        played = [note_from_midi(n) for n in midi_notes]

        triad_size = len(target.base_triad) + 1
        target_basic = target.get_basic_notes(include_bass=False)
        triad_identities = [note_identity(n) for n in target_basic[:triad_size]]

        bass = None
        if len(played) > len(target_basic) and (
            # First note is not in the triad, or sits an octave or more below the rest
            note_identity(played[0]) not in triad_identities
            or midi_notes[1] >= midi_notes[0] + OCTAVE_SIZE
        ):
            bass = played[0]

        non_bass = played[1:] if bass else played
        basic_notes: List[Optional[Note]] = [
            next((p for p in non_bass if note_identity(p) == note_identity(t)), None)
            for t in target_basic
        ]
        root = basic_notes[0] if basic_notes[0] is not None else non_bass[0]
        missing = [t for t, b in zip(target_basic, basic_notes) if b is None]
        accidentals = [p for p in non_bass if p not in basic_notes]

        return PerformedChord(
            root=root,
            basic_notes=basic_notes,
            accidentals=accidentals,
            missing=missing,
            bass=bass,
        )

    def tolerated_accidentals(self, performed: PerformedChord) -> List[Note]:
        """Accidentals high enough above the root to pass as extensions."""
        if not self.config.allow_additional_extensions:
            return []
        threshold = note_to_midi(performed.root) + self.config.extension_threshold_semitones
        return [n for n in performed.accidentals if note_to_midi(n) >= threshold]

    def is_correct(self, performed: PerformedChord, target: Chord) -> bool:
        """Can this performance count as an instance of the target chord?"""
        if note_identity(performed.root) != note_identity(target.root):
            return False
        if performed.bass and note_identity(performed.bass) != note_identity(target.bass or target.root):
            return False
        if any(n is None for n in performed.basic_notes):
            return False

        tolerated = self.tolerated_accidentals(performed)
        remaining = [n for n in performed.accidentals if n not in tolerated]
        return not remaining

    def get_goal_notes(self, performed: PerformedChord, target: Chord) -> List[Note]:
        """
        The smallest change to the performance that makes it correct.

        Matched notes are kept; each missing note is placed in the octave
        closest to what was played; the target's bass goes just below the
        root.

        Returns:
            Notes ascending by pitch
        """
        notes = [note_to_midi(n) for n in performed.basic_notes if n is not None]

        # Without accidentals, each placed note also pulls the next one
        approach = [note_to_midi(n) for n in performed.accidentals] if performed.accidentals else notes

        low, high = self.config.goal_octave_range
        for missing_note in performed.missing:
            best_note, best_distance = None, float("inf")
            for octave in range(low, high):
                candidate = note_to_midi(with_octave(missing_note, octave))
                distance = sum(abs(n - candidate) for n in approach)
                if distance < best_distance:
                    best_note, best_distance = candidate, distance
            notes.append(best_note)

        if target.bass:
            notes.append(note_to_midi(note_below(target.bass, performed.root)))

        return [note_from_midi(n) for n in sorted(notes)]

    def feedback(self, performed: PerformedChord, target: Chord) -> PerformanceFeedback:
        """Wrong and missing notes, for showing the performer."""
        wrong_bass = None
        if performed.bass and note_identity(performed.bass) != note_identity(target.bass or target.root):
            wrong_bass = performed.bass

        tolerated = self.tolerated_accidentals(performed)
        wrong = [n for n in performed.accidentals if n not in tolerated]
        return PerformanceFeedback(
            wrong_notes=wrong,
            missing_notes=list(performed.missing),
            wrong_bass=wrong_bass,
        )

    def evaluate(self, notes: Sequence[NoteLike], target: Chord) -> Tuple[PerformedChord, bool]:
        """Interpret and score in one step."""
        performed = self.interpret_performance(notes, target)
        correct = self.is_correct(performed, target)
        logger.debug("Performance %s vs %s: correct=%s", performed, target.symbol, correct)
        return performed, correct


_default_evaluator = PerformanceEvaluator()


def interpret_performance(notes: Sequence[NoteLike], target: Chord) -> PerformedChord:
    return _default_evaluator.interpret_performance(notes, target)


def is_correct(performed: PerformedChord, target: Chord) -> bool:
    return _default_evaluator.is_correct(performed, target)


def get_goal_notes(performed: PerformedChord, target: Chord) -> List[Note]:
    return _default_evaluator.get_goal_notes(performed, target)
