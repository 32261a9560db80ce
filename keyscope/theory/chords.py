"""Chord library - archetypes, chord instances and chord naming.

A chord archetype is a named chord type (e.g. "maj7") made of a base triad
plus extensions, fixed semitone offsets above the root that are intrinsic
to the name. A Chord places an archetype on a root, optionally over a bass
note, and remembers any accidentals (extra offsets found in a performance).
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from ..core.errors import ChordNotFoundError, DuplicateChordNameError, InvalidNoteError
from ..core.notes import (
    Note,
    NoteDisplayContext,
    NoteLike,
    display_accidentals,
    explode_note,
    note_identity,
    strip_octave,
    transpose,
    untransform_accidentals,
    with_octave,
)
from .keys import CONSIDERED_NOTE_NAMES, note_for_display, parse_key_name
from .triads import DIMINISHED_TRIADS, TRIAD_LIBRARY, Triad, TriadName, cumulative


@dataclass(frozen=True)
class ChordArchetype:
    """A named chord type.

    Attributes:
        names: Synonyms for this chord type; the first is the primary name
        triad_name: Triad this chord is built from
        base_triad: Root-position gaps of that triad
        extensions: Semitones above the root intrinsic to the chord name
    """

    names: Tuple[str, ...]
    triad_name: TriadName
    base_triad: Triad
    extensions: Tuple[int, ...] = ()

    @property
    def name(self) -> str:
        return self.names[0]


# (names, triad, extensions)
CHORD_DEFINITIONS = [
    (("aug",), TriadName.AUGMENTED, ()),
    (("aug7",), TriadName.AUGMENTED, (11,)),
    (("maj7#11", "#11"), TriadName.AUGMENTED, (11, 18)),  # lydian chord

    (("", "maj", "major"), TriadName.MAJOR, ()),
    (("6",), TriadName.MAJOR, (9,)),
    (("6add9",), TriadName.MAJOR, (9, 14)),
    (("7", "majm7"), TriadName.MAJOR, (10,)),
    (("7#9",), TriadName.MAJOR, (10, 15)),  # hendrix chord
    (("maj7",), TriadName.MAJOR, (11,)),
    (("maj9", "9"), TriadName.MAJOR, (11, 14)),
    (("add9",), TriadName.MAJOR, (14,)),
    (("11",), TriadName.MAJOR, (10, 14, 17)),
    (("add11",), TriadName.MAJOR, (17,)),
    (("maj11",), TriadName.MAJOR, (11, 14, 17)),
    (("maj13",), TriadName.MAJOR, (11, 14, 18, 21)),

    (("7b5", "maj7b5", "M7b5"), TriadName.MAJOR_FLAT_FIVE, (11,)),

    (("m", "min", "minor"), TriadName.MINOR, ()),
    (("m6", "mmaj6"), TriadName.MINOR, (9,)),
    (("m6/9", "m69"), TriadName.MINOR, (9, 14)),
    (("m7",), TriadName.MINOR, (10,)),
    (("mmaj7", "madd11"), TriadName.MINOR, (11,)),
    (("m11",), TriadName.MINOR, (10, 14, 17)),

    (("°", "dim", "m♭5"), TriadName.DIMINISHED, ()),
    (("°7", "dim7"), TriadName.DIMINISHED, (9,)),
    (("ø7", "m7b5"), TriadName.DIMINISHED, (10,)),  # half-diminished
    (("°M7", "dimM7", "m♭5add11"), TriadName.DIMINISHED, (11,)),

    (("5",), TriadName.POWER, ()),

    (("sus2",), TriadName.SUS2, ()),
    (("7sus2",), TriadName.SUS2, (11,)),

    (("sus4",), TriadName.SUS4, ()),
    (("7sus4",), TriadName.SUS4, (11,)),
    (("9sus4",), TriadName.SUS4, (10, 14)),
]


def build_chord_library(
    definitions: Iterable[Tuple[Iterable[str], TriadName, Iterable[int]]],
) -> Tuple[Dict[str, ChordArchetype], Dict[TriadName, List[ChordArchetype]]]:
    """
    Build the suffix lookup table and the per-triad archetype lists.

    Raises:
        DuplicateChordNameError: If two archetypes share a name
    """
    library: Dict[str, ChordArchetype] = {}
    by_triad: Dict[TriadName, List[ChordArchetype]] = {}
    for names, triad_name, extensions in definitions:
        archetype = ChordArchetype(
            names=tuple(names),
            triad_name=triad_name,
            base_triad=TRIAD_LIBRARY[triad_name][0],
            extensions=tuple(extensions),
        )
        for name in archetype.names:
            if name in library:
                raise DuplicateChordNameError(f"Duplicate chord type name: {name!r}")
            library[name] = archetype
        by_triad.setdefault(triad_name, []).append(archetype)
    return library, by_triad


CHORD_LIBRARY, CHORDS_BY_TRIAD = build_chord_library(CHORD_DEFINITIONS)


def lookup_archetype(suffix: str) -> ChordArchetype:
    """Find a chord archetype by any of its names."""
    try:
        return CHORD_LIBRARY[suffix.strip()]
    except KeyError:
        raise ChordNotFoundError(f"Could not find {suffix!r} in chord library") from None


class RootAndSuffix(NamedTuple):
    """A chord name split into root note and suffix, e.g. ("C", "maj7")."""

    root: Note
    suffix: str


# An over chord: anything, a slash, then a note (so "m6/9" is not one)
SUFFIX_WITH_BASS_NOTE = re.compile(r"^(.*)/([^\d]+)$")

# Chord names start with a note: uppercase letter and an optional accidental
CHORD_ROOT_REGEX = re.compile(r"^([A-G][#b]?)")


def explode_chord(chord_name: str) -> RootAndSuffix:
    """
    Split a chord name into root and suffix.

    Accepts "C maj7", "Cmaj7" and "C/E". Without a space, a name like
    "Bb5" could be either a Bb power chord or B with a flatted fifth, so
    that form is rejected.
    """
    parts = chord_name.split(" ")
    if len(parts) > 2:
        raise ChordNotFoundError(f"Unknown chord format: {chord_name!r}")
    if len(parts) == 2:
        return RootAndSuffix(parts[0], parts[1])

    if chord_name[1:3] == "b5":
        raise ChordNotFoundError(f"Ambiguous chord: {chord_name!r}")

    match = CHORD_ROOT_REGEX.match(untransform_accidentals(chord_name[:2]))
    if not match:
        raise ChordNotFoundError(f"Chord does not start with a note: {chord_name!r}")
    root = match.group(1)
    return RootAndSuffix(root, chord_name[len(root):].strip())


class Chord:
    """A chord archetype placed on a root note.

    Attributes:
        archetype: The chord type
        root: Octaveless root note
        bass: Octaveless bass note, only when it differs from the root
        accidentals: Semitones above the root of extra notes that the
            chord name does not account for
    """

    def __init__(
        self,
        archetype: ChordArchetype,
        root: Note,
        bass: Optional[Note] = None,
        accidentals: Optional[List[int]] = None,
    ):
        self.archetype = archetype
        self.root = strip_octave(root)
        if bass is not None and note_identity(bass) != note_identity(self.root):
            self.bass: Optional[Note] = strip_octave(bass)
        else:
            # A bass equal to the root carries no information
            self.bass = None
        self.accidentals = list(accidentals or [])

    @property
    def names(self) -> Tuple[str, ...]:
        return self.archetype.names

    @property
    def triad_name(self) -> TriadName:
        return self.archetype.triad_name

    @property
    def base_triad(self) -> Triad:
        return self.archetype.base_triad

    @property
    def extensions(self) -> Tuple[int, ...]:
        return self.archetype.extensions

    @classmethod
    def lookup(cls, name: Union["Chord", str, RootAndSuffix]) -> "Chord":
        """Look up a chord by name, e.g. "C maj7", "Am7" or "D m7/G"."""
        if isinstance(name, Chord):
            return name

        root, suffix = explode_chord(name) if isinstance(name, str) else name
        match = SUFFIX_WITH_BASS_NOTE.match(suffix)
        base_suffix = match.group(1) if match else suffix
        bass = match.group(2) if match else None

        if bass is not None:
            try:
                explode_note(bass)
            except InvalidNoteError:
                raise ChordNotFoundError(
                    f"Bad bass note {bass!r} (from: {root} {suffix})"
                ) from None

        lookup_key = base_suffix.strip()
        if lookup_key not in CHORD_LIBRARY:
            raise ChordNotFoundError(
                f"Could not find {lookup_key!r} in chord library (from: {root} {suffix})"
            )
        return cls(CHORD_LIBRARY[lookup_key], root, bass)

    def with_accidentals(self, accidentals: Optional[List[int]] = None) -> "Chord":
        """A copy of this chord with different accidentals."""
        return Chord(self.archetype, self.root, self.bass, accidentals)

    def get_basic_notes(self, octave: Optional[int] = None, include_bass: bool = True) -> List[Note]:
        """
        Get the notes that make up this chord.

        Args:
            octave: If given, root the chord in this octave so that the notes
                keep their real distances from each other
            include_bass: Put the bass note (if any) below the root

        Returns:
            Bass (optional), root, triad notes and extensions, in that order
        """
        root_note = with_octave(self.root, octave) if octave is not None else self.root

        intervals: List[int] = []
        if include_bass and self.bass is not None:
            # Bass sits in the octave below the root
            below = (note_identity(self.root) - note_identity(self.bass)) % 12
            intervals.append(-below)
        intervals.append(0)
        intervals.extend(cumulative(self.base_triad))
        intervals.extend(self.extensions)

        unique_intervals = list(dict.fromkeys(intervals))
        return [transpose(root_note, semitones) for semitones in unique_intervals]

    def contains_note(self, note: NoteLike, include_bass: bool = False) -> bool:
        """True if the note is in the base triad or extensions (and optionally bass)."""
        identity = note_identity(note)
        return any(
            note_identity(n) == identity
            for n in self.get_basic_notes(include_bass=include_bass)
        )

    def get_basic_name(self) -> str:
        """Root and primary name; drops accidentals and bass."""
        return f"{self.root} {self.names[0]}"

    def get_root_and_suffix(self) -> RootAndSuffix:
        return RootAndSuffix(self.root, self.names[0])

    @property
    def symbol(self) -> str:
        """Plain-text chord symbol including the bass, e.g. "C m7/G"."""
        over = f"/{self.bass}" if self.bass else ""
        return f"{self.root} {self.names[0]}".rstrip() + over

    def for_display(self, context: Optional[NoteDisplayContext] = None) -> str:
        """Chord name suitable for showing a user."""
        context = context or NoteDisplayContext()
        name = min(self.names, key=len) if context.compact else self.names[0]
        root = note_for_display(self.root, context)
        over = f"/{note_for_display(self.bass, context)}" if self.bass else ""
        space = " " if context.compact else ""
        return f"{root}{space}{display_accidentals(name)}{over}"

    def roman_numeral(self, key_name: str) -> str:
        """Name this chord by its scale degree in a key, e.g. "ⅱ" or "♭Ⅶ"."""
        return roman_numeral(key_name, self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "suffix": self.names[0],
            "bass": self.bass,
            "accidentals": list(self.accidentals),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chord":
        chord = cls(lookup_archetype(data["suffix"]), data["root"], data.get("bass"))
        return chord.with_accidentals(data.get("accidentals"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chord):
            return NotImplemented
        return (
            self.archetype == other.archetype
            and note_identity(self.root) == note_identity(other.root)
            and (self.bass is None) == (other.bass is None)
            and (self.bass is None or note_identity(self.bass) == note_identity(other.bass))
            and self.accidentals == other.accidentals
        )

    def __hash__(self) -> int:
        bass = note_identity(self.bass) if self.bass else None
        return hash((self.archetype, note_identity(self.root), bass, tuple(self.accidentals)))

    def __repr__(self) -> str:
        extra = f", accidentals={self.accidentals}" if self.accidentals else ""
        return f"Chord({self.symbol!r}{extra})"


# Every root a user might type, paired with every chord name
ALL_CHORD_NAMES: List[str] = [
    f"{note} {name}".rstrip()
    for names, _, _ in CHORD_DEFINITIONS
    for name in names
    for note in CONSIDERED_NOTE_NAMES
]

ALL_CHORDS: List[Chord] = [Chord.lookup(name) for name in ALL_CHORD_NAMES]


def is_valid_chord(name: Union[str, RootAndSuffix]) -> bool:
    try:
        Chord.lookup(name)
    except ChordNotFoundError:
        return False
    return True


def chord_name_for_display(chord_name: str, context: Optional[NoteDisplayContext] = None) -> str:
    root, suffix = explode_chord(chord_name)
    space = "" if suffix.startswith("/") else " "
    return f"{note_for_display(root, context)}{space}{display_accidentals(suffix)}".rstrip()


NUMERALS = ["Ⅰ", "Ⅱ", "Ⅲ", "Ⅳ", "Ⅴ", "Ⅵ", "Ⅶ"]
LOWER_NUMERALS = ["ⅰ", "ⅱ", "ⅲ", "ⅳ", "ⅴ", "ⅵ", "ⅶ"]

# Semitones above the tonic -> (accidental, scale degree index)
DEGREE_BY_OFFSET = {
    0: ("", 0),
    1: ("b", 1),
    2: ("", 1),
    3: ("b", 2),
    4: ("", 2),
    5: ("", 3),
    6: ("#", 3),
    7: ("", 4),
    8: ("b", 5),
    9: ("", 5),
    10: ("b", 6),
    11: ("", 6),
}


def roman_numeral(key_name: str, chord: Union[Chord, str, RootAndSuffix]) -> str:
    """
    Roman numeral of a chord relative to the tonic of a key.

    Minor and diminished chords get lowercase numerals; diminished chords
    are marked °, augmented ⁺ and suspended ₛᵤₛ.
    """
    chord = Chord.lookup(chord)
    tonic = parse_key_name(key_name).tonic
    accidental, degree = DEGREE_BY_OFFSET[(note_identity(chord.root) - note_identity(tonic)) % 12]

    if chord.triad_name in DIMINISHED_TRIADS:
        symbol = "°"
    elif chord.triad_name is TriadName.AUGMENTED:
        symbol = "⁺"
    elif "sus" in chord.names[0]:
        symbol = "ₛᵤₛ"
    else:
        symbol = ""

    lowercase = chord.triad_name in (TriadName.MINOR, TriadName.DIMINISHED)
    numeral = (LOWER_NUMERALS if lowercase else NUMERALS)[degree]
    return f"{display_accidentals(accidental)}{numeral}{symbol}"
