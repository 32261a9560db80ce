"""Theory layer - static music-theory tables.

This layer holds the lookup tables the inference engine matches against:
- Triad shapes and their inversions
- Chord archetypes (triad + extensions) and chord instances
- Major-scale modes, key spelling and key-aware note display

All tables are built once at import and never mutated.
"""

from .triads import (
    Triad,
    TriadName,
    TRIAD_LIBRARY,
    triads_for,
    invert,
    cumulative,
    build_triad,
)
from .keys import (
    Mode,
    KeySignature,
    MAJOR_MODES_BY_DEGREE,
    MAJOR_KEY_NAMES,
    MAJOR_SCALES,
    KEY_NAMES_BASED_ON_MAJOR,
    CONSIDERED_NOTE_NAMES,
    ENHARMONIC_DISPLAY_FOR_KEYNAME,
    DEFAULT_RESTRICTED_MODES,
    spell_scale,
    parse_key_name,
    key_name_to_notes,
    canonical_key_name,
    note_for_display,
    in_key_predicate,
    keys_including_chord,
)
from .chords import (
    ChordArchetype,
    Chord,
    RootAndSuffix,
    CHORD_DEFINITIONS,
    CHORD_LIBRARY,
    CHORDS_BY_TRIAD,
    ALL_CHORD_NAMES,
    ALL_CHORDS,
    build_chord_library,
    lookup_archetype,
    explode_chord,
    is_valid_chord,
    chord_name_for_display,
    roman_numeral,
)

__all__ = [
    # Triads
    "Triad",
    "TriadName",
    "TRIAD_LIBRARY",
    "triads_for",
    "invert",
    "cumulative",
    "build_triad",
    # Keys
    "Mode",
    "KeySignature",
    "MAJOR_MODES_BY_DEGREE",
    "MAJOR_KEY_NAMES",
    "MAJOR_SCALES",
    "KEY_NAMES_BASED_ON_MAJOR",
    "CONSIDERED_NOTE_NAMES",
    "ENHARMONIC_DISPLAY_FOR_KEYNAME",
    "DEFAULT_RESTRICTED_MODES",
    "spell_scale",
    "parse_key_name",
    "key_name_to_notes",
    "canonical_key_name",
    "note_for_display",
    "in_key_predicate",
    "keys_including_chord",
    # Chords
    "ChordArchetype",
    "Chord",
    "RootAndSuffix",
    "CHORD_DEFINITIONS",
    "CHORD_LIBRARY",
    "CHORDS_BY_TRIAD",
    "ALL_CHORD_NAMES",
    "ALL_CHORDS",
    "build_chord_library",
    "lookup_archetype",
    "explode_chord",
    "is_valid_chord",
    "chord_name_for_display",
    "roman_numeral",
]
