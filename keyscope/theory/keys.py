"""Keys and modes - scale spelling and key-aware note display.

Every key handled here is a mode of one of the twelve major scales. The
tables below are built once at import:
- MAJOR_SCALES: spelled notes of each major scale, circle-of-fifths order
- KEY_NAMES_BASED_ON_MAJOR: the 84 key names, e.g. "D dorian"
- ENHARMONIC_DISPLAY_FOR_KEYNAME: per key, how to spell each note name
"""

from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

from ..core.constants import FLAT_PITCH_NAMES, LETTERS, NATURAL_PITCHES, NUM_DEGREES, PITCH_NAMES
from ..core.errors import InvalidNoteError, KeyNotFoundError
from ..core.notes import (
    Note,
    NoteDisplayContext,
    NoteLike,
    display_accidentals,
    explode_note,
    note_identity,
    untransform_accidentals,
)
from .triads import build_triad


class Mode(Enum):
    """Modes of the major scale, in scale-degree order."""
    MAJOR = "major"
    DORIAN = "dorian"
    PHRYGIAN = "phrygian"
    LYDIAN = "lydian"
    MIXOLYDIAN = "mixolydian"
    MINOR = "minor"
    LOCRIAN = "locrian"

    @property
    def degree(self) -> int:
        return MAJOR_MODES_BY_DEGREE.index(self)


MAJOR_MODES_BY_DEGREE: List[Mode] = list(Mode)

# Semitones above the tonic for each degree of the major scale
MAJOR_SCALE_STEPS = (0, 2, 4, 5, 7, 9, 11)

DEFAULT_RESTRICTED_MODES = (Mode.LOCRIAN,)

# Circle of fifths. Gb is preferred over F# for the six-accidental key.
MAJOR_KEY_NAMES = [
    "C major",
    "G major",
    "D major",
    "A major",
    "E major",
    "B major",
    "Gb major",
    "Db major",
    "Ab major",
    "Eb major",
    "Bb major",
    "F major",
]

# Note names a user is likely to type; the enharmonic display tables cover these
CONSIDERED_NOTE_NAMES = [
    "Ab", "A", "A#", "Bb", "B",
    "C", "C#", "Db", "D", "D#", "Eb", "E",
    "F", "F#", "Gb", "G", "G#",
]


class KeySignature(NamedTuple):
    """A parsed key name."""

    tonic: Note
    mode: Mode

    @property
    def name(self) -> str:
        return f"{self.tonic} {self.mode.value}"


def _simplify(letter: str, shift: int) -> Note:
    """Spell a letter plus shift, collapsing B#, Cb, E#, Fb and doubles."""
    pitch_class = (NATURAL_PITCHES[letter] + shift) % 12
    if shift == 0:
        return letter
    name = letter + ("#" if shift > 0 else "b") * abs(shift)
    if abs(shift) > 1 or name in ("B#", "Cb", "E#", "Fb"):
        return (PITCH_NAMES if shift > 0 else FLAT_PITCH_NAMES)[pitch_class]
    return name


def spell_scale(tonic: NoteLike, mode: Mode = Mode.MAJOR) -> List[Note]:
    """
    Spell the seven notes of a mode starting on a tonic.

    Each degree gets its own letter, then awkward spellings are simplified
    (so Gb major ends up with B rather than Cb).
    """
    if isinstance(tonic, int):
        tonic = PITCH_NAMES[tonic % 12]
    name = explode_note(tonic).name
    tonic_pc = note_identity(name)
    letter_index = LETTERS.index(name[0])

    degree = mode.degree
    steps = [
        (MAJOR_SCALE_STEPS[(degree + i) % NUM_DEGREES] - MAJOR_SCALE_STEPS[degree]) % 12
        for i in range(NUM_DEGREES)
    ]

    notes = []
    for i, step in enumerate(steps):
        letter = LETTERS[(letter_index + i) % NUM_DEGREES]
        target = (tonic_pc + step) % 12
        shift = (target - NATURAL_PITCHES[letter] + 6) % 12 - 6
        notes.append(_simplify(letter, shift))
    return notes


def parse_key_name(key_name: str) -> KeySignature:
    """Split a key name such as "F# lydian" into tonic and mode."""
    parts = untransform_accidentals(key_name).split()
    if len(parts) != 2:
        raise KeyNotFoundError(f"Unknown key format: {key_name!r}")
    tonic, mode_name = parts
    try:
        explode_note(tonic)
        mode = Mode(mode_name.lower())
    except (InvalidNoteError, ValueError):
        raise KeyNotFoundError(f"Unknown key: {key_name!r}") from None
    return KeySignature(tonic, mode)


def key_name_to_notes(key_name: str) -> List[Note]:
    """Spelled notes of a key, tonic first."""
    signature = parse_key_name(key_name)
    return spell_scale(signature.tonic, signature.mode)


# e.g. MAJOR_SCALES["C"] == ["C", "D", "E", "F", "G", "A", "B"]
MAJOR_SCALES: Dict[Note, List[Note]] = {}
KEY_NAMES_BASED_ON_MAJOR: List[str] = []
_CANONICAL_KEY_NAMES: Dict[tuple, str] = {}

for _major_key in MAJOR_KEY_NAMES:
    _tonic = _major_key.split(" ")[0]
    MAJOR_SCALES[_tonic] = spell_scale(_tonic)
    for _degree, _note in enumerate(MAJOR_SCALES[_tonic]):
        _mode = MAJOR_MODES_BY_DEGREE[_degree]
        _key_name = f"{_note} {_mode.value}"
        KEY_NAMES_BASED_ON_MAJOR.append(_key_name)
        _CANONICAL_KEY_NAMES[(note_identity(_note), _mode)] = _key_name


def canonical_key_name(tonic: NoteLike, mode: Mode) -> str:
    """The key name used in the tables for a tonic pitch class and mode."""
    return _CANONICAL_KEY_NAMES[(note_identity(tonic), mode)]


def _build_display_table(key_name: str) -> Dict[Note, Note]:
    key_notes = key_name_to_notes(key_name)
    key_identities = [note_identity(n) for n in key_notes]
    mapping = {}
    for note_name in CONSIDERED_NOTE_NAMES:
        identity = note_identity(note_name)
        if identity in key_identities:
            mapping[note_name] = key_notes[key_identities.index(identity)]
        else:
            # Out of key; pass through as typed
            mapping[note_name] = note_name
    return mapping


ENHARMONIC_DISPLAY_FOR_KEYNAME: Dict[str, Dict[Note, Note]] = {
    key_name: _build_display_table(key_name) for key_name in KEY_NAMES_BASED_ON_MAJOR
}


def display_table_for(key_name: str) -> Dict[Note, Note]:
    """Enharmonic display table for a key, resolving non-canonical spellings."""
    table = ENHARMONIC_DISPLAY_FOR_KEYNAME.get(key_name)
    if table is None:
        signature = parse_key_name(key_name)
        table = ENHARMONIC_DISPLAY_FOR_KEYNAME[
            canonical_key_name(signature.tonic, signature.mode)
        ]
    return table


def note_for_display(note: NoteLike, context: Optional[NoteDisplayContext] = None) -> str:
    """
    Spell a note for a user, in the context of a key or scale if given.

    Args:
        note: Note name (octave optional)
        context: Display options; with key_name the key's spelling is used,
            with scale the scale's enharmonic of the note is used

    Returns:
        Note name with unicode accidentals
    """
    context = context or NoteDisplayContext()
    if isinstance(note, int):
        note = f"{PITCH_NAMES[note % 12]}{note // 12 - 1}"
    name, octave = explode_note(note)

    if context.key_name:
        table = display_table_for(context.key_name)
        in_context = table.get(name) or table.get(PITCH_NAMES[note_identity(name)], name)
    elif context.scale:
        matches = [s for s in context.scale if note_identity(s) == note_identity(name)]
        if not matches:
            raise InvalidNoteError(
                f"Bad scale; cannot find enharmonic of {name} in {context.scale}"
            )
        in_context = matches[0]
    else:
        in_context = name

    shown_octave = str(octave) if context.show_octave and octave is not None else ""
    return f"{display_accidentals(in_context)}{shown_octave}"


def in_key_predicate(key_name: str) -> Callable[[NoteLike], bool]:
    """Return a function telling whether a note belongs to a key."""
    identities = frozenset(note_identity(n) for n in key_name_to_notes(key_name))

    def in_key(note: NoteLike) -> bool:
        return note_identity(note) in identities

    return in_key


def keys_including_chord(
    chord,
    notes: Optional[Sequence[NoteLike]] = None,
    max_accidentals: int = 0,
    only_base_triad: bool = True,
    restricted_modes: Sequence[Mode] = DEFAULT_RESTRICTED_MODES,
) -> List[str]:
    """
    Find the keys a chord fits in.

    Args:
        chord: Chord to place (anything with root, base_triad, get_basic_notes)
        notes: Notes to consider instead of the chord's basic notes
        max_accidentals: How many considered notes may fall outside the key
        only_base_triad: Only consider the chord's triad, ignoring extensions
        restricted_modes: Modes never suggested

    Returns:
        Key names, circle-of-fifths order, modes in degree order
    """
    if only_base_triad:
        considered = build_triad(chord.root, chord.base_triad)
    else:
        considered = list(notes) if notes is not None else chord.get_basic_notes()
    considered_identities = [note_identity(n) for n in considered]

    matching = []
    for scale in MAJOR_SCALES.values():
        scale_identities = {note_identity(n) for n in scale}
        outside = sum(1 for i in considered_identities if i not in scale_identities)
        if outside > max_accidentals:
            continue
        for degree, note in enumerate(scale):
            mode = MAJOR_MODES_BY_DEGREE[degree]
            if mode not in restricted_modes:
                matching.append(f"{note} {mode.value}")
    return matching
