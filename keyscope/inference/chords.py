"""Chord detection - Name the chord a set of sounding notes represents.

Implements chord detection with:
- Exact triad matching across every triad shape and inversion
- Over-chord handling (lowest note as a detached bass)
- Extension matching against the chord archetype library
- Leftover notes kept as accidentals and penalized in the ranking
"""

import logging
from typing import Iterable, List, Optional, Tuple

from ..core.constants import OCTAVE_SIZE
from ..core.notes import NoteLike, note_from_identity, note_from_midi, to_midi
from ..theory.chords import CHORDS_BY_TRIAD, Chord
from ..theory.triads import TRIAD_LIBRARY, cumulative

logger = logging.getLogger(__name__)


class ChordDetector:
    """Detect chords from notes with octaves.

    Features:
    - Two hypotheses per note set: with and without a detached bass
    - Every matching archetype is a candidate; candidates are ranked
    - Accidentals close to the root cost more than high ones
    """

    # Each accidental costs (ACCIDENTAL_PENALTY_BASE - semitones above root)
    ACCIDENTAL_PENALTY_BASE = 100

    # Fewer notes than this cannot form note relationships
    MIN_BODY_NOTES = 2

    # Notes of the chord body that make up the triad seed
    SEED_SIZE = 3

    def score(self, chord: Chord) -> float:
        """Higher is better. Zero means every note is explained."""
        return -sum(self.ACCIDENTAL_PENALTY_BASE - x for x in chord.accidentals)

    def detect_chords(self, notes: Iterable[NoteLike]) -> List[Chord]:
        """
        Figure out which chords a set of notes might represent.

        Args:
            notes: Notes with octaves (names or MIDI numbers), any order

        Returns:
            Candidate chords, best first; empty if no triad matches

        Raises:
            InvalidNoteError: If a note has no octave
        """
        sorted_notes = sorted({to_midi(n) for n in notes})

        candidates: List[Chord] = []
        # Lowest note inside the chord body, then as a detached bass
        hypotheses: List[Tuple[Optional[int], List[int]]] = [(None, sorted_notes)]
        if sorted_notes:
            hypotheses.append((sorted_notes[0], sorted_notes[1:]))

        for bass, body in hypotheses:
            candidates.extend(self._match_body(body, bass))

        ranked = sorted(candidates, key=self.score, reverse=True)
        if ranked:
            logger.debug(
                "Detected %d candidate(s) for %s, best %r",
                len(ranked), [note_from_midi(n) for n in sorted_notes], ranked[0],
            )
        return ranked

    def detect_chord(self, notes: Iterable[NoteLike]) -> Optional[Chord]:
        """Return the best matching chord, or None."""
        chords = self.detect_chords(notes)
        return chords[0] if chords else None

    def _match_body(self, body: List[int], bass: Optional[int]) -> List[Chord]:
        """Find every chord whose triad exactly matches the body's seed."""
        if len(body) < self.MIN_BODY_NOTES:
            return []

        seed = self._seed(body)
        if len(seed) < 2:
            # Octaves of a single note
            return []
        core_intervals = [(pc - seed[0]) % OCTAVE_SIZE for pc in seed[1:]]

        results = []
        max_inversions = max(len(triads) for triads in TRIAD_LIBRARY.values())
        for inversion in range(max_inversions):
            for triad_name, triads in TRIAD_LIBRARY.items():
                if inversion >= len(triads):
                    continue
                triad = triads[inversion]
                if cumulative(triad) != core_intervals:
                    continue

                root_identity = seed[self._root_index(inversion, len(triad))]
                root_midi = next(n for n in body if n % OCTAVE_SIZE == root_identity)

                extra_intervals = [n - root_midi for n in body if n % OCTAVE_SIZE not in seed]

                for archetype in CHORDS_BY_TRIAD[triad_name]:
                    if all(x in extra_intervals for x in archetype.extensions):
                        accidentals = [x for x in extra_intervals if x not in archetype.extensions]
                        results.append(Chord(
                            archetype,
                            note_from_identity(root_identity),
                            note_from_midi(bass) if bass is not None else None,
                            accidentals,
                        ))
        return results

    def _seed(self, body: List[int]) -> List[int]:
        """
        Pitch classes of the first unique notes, ordered upward from the
        lowest sounding one.
        """
        seen: List[int] = []
        for note in body:
            pc = note % OCTAVE_SIZE
            if pc not in seen:
                seen.append(pc)
            if len(seen) == self.SEED_SIZE:
                break
        lowest = seen[0]
        return sorted(seen, key=lambda pc: (pc - lowest) % OCTAVE_SIZE)

    @staticmethod
    def _root_index(inversion: int, triad_length: int) -> int:
        """Which seed member is the root for an inversion."""
        if triad_length == 2:
            return {0: 0, 1: 2, 2: 1}[inversion]
        # Power chord shapes
        return inversion


_default_detector = ChordDetector()


def detect_chords(notes: Iterable[NoteLike]) -> List[Chord]:
    """Rank the chords a set of notes might represent."""
    return _default_detector.detect_chords(notes)


def detect_chord(notes: Iterable[NoteLike]) -> Optional[Chord]:
    """The single best chord for a set of notes, or None."""
    return _default_detector.detect_chord(notes)
