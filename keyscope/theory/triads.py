"""Triad library - the stacked-interval shapes every chord is built on.

A triad is stored as the number of semitones in the two non-overlapping
sub-intervals above its root, e.g. major is (4, 3). The power chord is the
single-gap shape (7,); it is not a triad, but it is detected like one.
"""

from enum import Enum
from typing import Dict, List, Sequence, Tuple

from ..core.constants import OCTAVE_SIZE
from ..core.errors import ChordNotFoundError
from ..core.notes import NoteLike, transpose

Triad = Tuple[int, ...]


class TriadName(Enum):
    """Names of the triad shapes, in library order."""
    POWER = "5"
    SUS2 = "sus2"
    SUS4 = "sus4"
    MINOR = "min"
    MAJOR = "maj"
    MAJOR_FLAT_FIVE = "b5"  # e.g. 7b5
    DIMINISHED = "dim"
    AUGMENTED = "aug"


POWER_TRIAD: Triad = (7,)
SUS2_TRIAD: Triad = (2, 5)
SUS4_TRIAD: Triad = (5, 2)
MINOR_TRIAD: Triad = (3, 4)
MAJOR_TRIAD: Triad = (4, 3)
MAJOR_DIM_TRIAD: Triad = (4, 2)
DIMINISHED_TRIAD: Triad = (3, 3)
AUGMENTED_TRIAD: Triad = (4, 4)


def invert(triad: Triad, inversion: int) -> Triad:
    """Return the first or second inversion of a triad."""
    a, b = triad
    top = OCTAVE_SIZE - (a + b)
    if inversion == 1:
        return (b, top)
    if inversion == 2:
        return (top, a)
    raise ValueError(f"Inversion must be 1 or 2, got {inversion}")


def _with_inversions(triad: Triad) -> Tuple[Triad, ...]:
    return (triad, invert(triad, 1), invert(triad, 2))


# Each entry lists root position first, then its inversions
TRIAD_LIBRARY: Dict[TriadName, Tuple[Triad, ...]] = {
    TriadName.POWER: (POWER_TRIAD, (5,)),
    TriadName.SUS2: _with_inversions(SUS2_TRIAD),
    TriadName.SUS4: _with_inversions(SUS4_TRIAD),
    TriadName.MINOR: _with_inversions(MINOR_TRIAD),
    TriadName.MAJOR: _with_inversions(MAJOR_TRIAD),
    TriadName.MAJOR_FLAT_FIVE: _with_inversions(MAJOR_DIM_TRIAD),
    TriadName.DIMINISHED: _with_inversions(DIMINISHED_TRIAD),
    # Symmetric, so every inversion looks the same
    TriadName.AUGMENTED: (AUGMENTED_TRIAD,),
}

DIMINISHED_TRIADS = (TriadName.DIMINISHED, TriadName.MAJOR_FLAT_FIVE)


def triads_for(name) -> Tuple[Triad, ...]:
    """
    Get a triad and its inversions.

    Args:
        name: TriadName or its string value (e.g. "maj")

    Returns:
        Tuple of (root position, 1st inversion, 2nd inversion); fewer
        entries for the power chord and augmented triad
    """
    try:
        triad_name = name if isinstance(name, TriadName) else TriadName(name)
    except ValueError:
        raise ChordNotFoundError(f"Unknown triad: {name}") from None
    return TRIAD_LIBRARY[triad_name]


def cumulative(triad: Sequence[int]) -> List[int]:
    """Offsets of each triad note above the root, e.g. (4, 3) -> [4, 7]."""
    offsets = []
    total = 0
    for gap in triad:
        total += gap
        offsets.append(total)
    return offsets


def build_triad(root: NoteLike, triad: Triad) -> List[str]:
    """Return the notes of a triad starting at a root (with or without octave)."""
    return [transpose(root, 0)] + [transpose(root, offset) for offset in cumulative(triad)]
