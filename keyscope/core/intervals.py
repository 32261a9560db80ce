"""Interval naming."""

INTERVAL_NAMES = [
    "perfect unison",
    "minor second",
    "major second",
    "minor third",
    "major third",
    "perfect fourth",
    "tritone",
    "perfect fifth",
    "minor sixth",
    "major sixth",
    "minor seventh",
    "major seventh",
    "perfect octave",
    "minor ninth",
    "major ninth",
    "minor tenth",
    "major tenth",
    "perfect eleventh",
    "diminished twelfth",
    "perfect twelfth",
    "minor thirteenth",
    "major thirteenth",
    "minor fourteenth",
    "major fourteenth",
]

TWO_OCTAVES = len(INTERVAL_NAMES)


def name_interval(semitones: int) -> str:
    """
    Name the interval spanning some number of semitones.

    Direction is ignored. Intervals wider than two octaves are named by
    their remainder plus the number of whole octaves folded away, e.g.
    ``name_interval(28) == "major third +2oct"``.
    """
    dist = abs(semitones)
    double_octaves = dist // TWO_OCTAVES
    if double_octaves == 0:
        return INTERVAL_NAMES[dist]
    return f"{INTERVAL_NAMES[dist % TWO_OCTAVES]} +{double_octaves * 2}oct"
