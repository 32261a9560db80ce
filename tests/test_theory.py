"""Tests for the music-theory tables.

Tests cover:
- Triad shapes, inversions and construction
- Chord archetype library and chord name parsing
- Chord notes, display and roman numerals
- Key spelling, display tables and keys containing a chord
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from keyscope.core import (
    ChordNotFoundError,
    DuplicateChordNameError,
    InvalidNoteError,
    KeyNotFoundError,
    NoteDisplayContext,
    note_identity,
    note_to_midi,
)
from keyscope.theory import (
    ALL_CHORD_NAMES,
    ALL_CHORDS,
    CHORD_DEFINITIONS,
    CONSIDERED_NOTE_NAMES,
    KEY_NAMES_BASED_ON_MAJOR,
    MAJOR_SCALES,
    Chord,
    KeySignature,
    Mode,
    TriadName,
    build_chord_library,
    build_triad,
    canonical_key_name,
    chord_name_for_display,
    cumulative,
    explode_chord,
    in_key_predicate,
    invert,
    is_valid_chord,
    key_name_to_notes,
    keys_including_chord,
    lookup_archetype,
    note_for_display,
    parse_key_name,
    spell_scale,
    triads_for,
)


# ============================================================================
# Triad Tests
# ============================================================================

class TestTriads:
    """Tests for the triad library."""

    def test_major_and_inversions(self):
        assert triads_for("maj") == ((4, 3), (3, 5), (5, 4))

    def test_lookup_by_enum(self):
        assert triads_for(TriadName.MINOR)[1] == (4, 5)

    def test_power_chord_has_two_shapes(self):
        assert triads_for("5") == ((7,), (5,))

    def test_augmented_is_symmetric(self):
        assert triads_for("aug") == ((4, 4),)

    def test_unknown_triad(self):
        with pytest.raises(ChordNotFoundError):
            triads_for("foo")

    def test_inversions_span_an_octave(self):
        """Root position and inversions of a triad all fit in one octave."""
        for name in TriadName:
            for triad in triads_for(name):
                if len(triad) == 2:
                    assert sum(triad) < 12

    def test_invert_rejects_bad_inversion(self):
        with pytest.raises(ValueError):
            invert((4, 3), 3)

    def test_cumulative(self):
        assert cumulative((4, 3)) == [4, 7]
        assert cumulative((7,)) == [7]

    def test_build_triad(self):
        assert build_triad("C4", (4, 3)) == ["C4", "E4", "G4"]
        assert build_triad("A", (3, 4)) == ["A", "C", "E"]

    def test_build_triad_gaps_match_shape(self):
        for name in TriadName:
            for triad in triads_for(name):
                notes = [note_to_midi(n) for n in build_triad("D4", triad)]
                gaps = tuple(b - a for a, b in zip(notes, notes[1:]))
                assert gaps == triad


# ============================================================================
# Chord Library Tests
# ============================================================================

class TestChordLibrary:
    """Tests for chord archetypes and name parsing."""

    def test_lookup_archetype_by_any_name(self):
        assert lookup_archetype("m7").extensions == (10,)
        assert lookup_archetype("dim7") is lookup_archetype("°7")
        assert lookup_archetype("major").name == ""

    def test_unknown_archetype(self):
        with pytest.raises(ChordNotFoundError):
            lookup_archetype("xyz")

    def test_chord_not_found_is_key_error(self):
        with pytest.raises(KeyError):
            lookup_archetype("xyz")

    def test_duplicate_names_rejected(self):
        definitions = [
            (("x",), TriadName.MAJOR, ()),
            (("x",), TriadName.MINOR, ()),
        ]
        with pytest.raises(DuplicateChordNameError):
            build_chord_library(definitions)

    def test_extensions_above_triad(self):
        """Every extension lies above the triad's top note."""
        for names, triad_name, extensions in CHORD_DEFINITIONS:
            top = cumulative(triads_for(triad_name)[0])[-1]
            assert all(x > top for x in extensions), names

    def test_all_chord_names(self):
        name_count = sum(len(names) for names, _, _ in CHORD_DEFINITIONS)
        assert len(ALL_CHORD_NAMES) == name_count * len(CONSIDERED_NOTE_NAMES)
        assert len(ALL_CHORDS) == len(ALL_CHORD_NAMES)
        assert "C" in ALL_CHORD_NAMES
        assert "Bb m7" in ALL_CHORD_NAMES

    @pytest.mark.parametrize("name,expected", [
        ("C maj7", ("C", "maj7")),
        ("Cmaj7", ("C", "maj7")),
        ("C#m", ("C#", "m")),
        ("C/E", ("C", "/E")),
        ("Bb", ("Bb", "")),
    ])
    def test_explode_chord(self, name, expected):
        assert explode_chord(name) == expected

    @pytest.mark.parametrize("name", ["Bb5", "C maj 7", "X", "h7"])
    def test_explode_chord_rejects(self, name):
        with pytest.raises(ChordNotFoundError):
            explode_chord(name)

    def test_is_valid_chord(self):
        assert is_valid_chord("C maj7")
        assert is_valid_chord("Am7")
        assert not is_valid_chord("C blah")
        assert not is_valid_chord("H")


class TestChord:
    """Tests for chord instances."""

    def test_lookup_over_chord(self):
        chord = Chord.lookup("D m7/G")
        assert chord.root == "D"
        assert chord.bass == "G"
        assert chord.names[0] == "m7"
        assert chord.triad_name is TriadName.MINOR

    def test_slash_in_name_is_not_a_bass(self):
        chord = Chord.lookup("C m6/9")
        assert chord.bass is None
        assert chord.names[0] == "m6/9"

    def test_bass_equal_to_root_is_dropped(self):
        assert Chord.lookup("C/C").bass is None
        assert Chord.lookup("C#/Db").bass is None

    def test_bad_bass_note(self):
        with pytest.raises(ChordNotFoundError):
            Chord.lookup("C maj7/X")

    def test_unknown_suffix(self):
        with pytest.raises(ChordNotFoundError):
            Chord.lookup("C blah")

    def test_basic_notes_with_octave(self):
        assert Chord.lookup("C maj7").get_basic_notes(4) == ["C4", "E4", "G4", "B4"]
        assert Chord.lookup("C").get_basic_notes(0) == ["C0", "E0", "G0"]

    def test_basic_notes_without_octave(self):
        assert Chord.lookup("A m").get_basic_notes() == ["A", "C", "E"]

    def test_power_chord_notes(self):
        assert Chord.lookup("C 5").get_basic_notes(4) == ["C4", "G4"]

    def test_bass_goes_below_root(self):
        chord = Chord.lookup("C/E")
        assert chord.get_basic_notes(4) == ["E3", "C4", "E4", "G4"]
        assert chord.get_basic_notes(4, include_bass=False) == ["C4", "E4", "G4"]

    def test_contains_note(self):
        chord = Chord.lookup("C maj7")
        assert chord.contains_note("B")
        assert chord.contains_note("E5")
        assert not chord.contains_note("F")

    def test_contains_note_bass(self):
        chord = Chord.lookup("D m7/G")
        assert not chord.contains_note("G")
        assert chord.contains_note("G", include_bass=True)

    def test_basic_name_and_suffix(self):
        chord = Chord.lookup("D m7/G").with_accidentals([14])
        assert chord.get_basic_name() == "D m7"
        assert chord.get_root_and_suffix() == ("D", "m7")

    def test_symbol(self):
        assert Chord.lookup("D m7/G").symbol == "D m7/G"
        assert Chord.lookup("C/E").symbol == "C/E"
        assert Chord.lookup("C").symbol == "C"

    def test_equality_uses_identity(self):
        assert Chord.lookup("C#") == Chord.lookup("Db")
        assert hash(Chord.lookup("C# m")) == hash(Chord.lookup("Db m"))
        assert Chord.lookup("C") != Chord.lookup("C m")

    def test_dict_round_trip(self):
        chord = Chord.lookup("D m7/G").with_accidentals([14])
        data = chord.to_dict()
        assert data == {"root": "D", "suffix": "m7", "bass": "G", "accidentals": [14]}
        assert Chord.from_dict(data) == chord

    def test_for_display(self):
        assert Chord.lookup("Bb m7").for_display() == "B♭m7"
        assert Chord.lookup("C").for_display() == "C"

    def test_for_display_in_key(self):
        context = NoteDisplayContext(key_name="F major")
        assert Chord.lookup("A# m").for_display(context) == "B♭m"

    def test_for_display_compact(self):
        context = NoteDisplayContext(compact=True)
        assert Chord.lookup("C min").for_display(context) == "C m"

    def test_chord_name_for_display(self):
        assert chord_name_for_display("Bb m7") == "B♭ m7"
        assert chord_name_for_display("C/E") == "C/E"


class TestRomanNumerals:
    """Tests for roman numeral naming."""

    @pytest.mark.parametrize("chord,expected", [
        ("C", "Ⅰ"),
        ("D m", "ⅱ"),
        ("G 7", "Ⅴ"),
        ("B dim", "ⅶ°"),
        ("Bb", "♭Ⅶ"),
        ("C aug", "Ⅰ⁺"),
        ("F sus4", "Ⅳₛᵤₛ"),
        ("F# m7b5", "♯ⅳ°"),
        ("Eb m", "♭ⅲ"),
    ])
    def test_in_c_major(self, chord, expected):
        assert Chord.lookup(chord).roman_numeral("C major") == expected

    def test_relative_to_tonic(self):
        assert Chord.lookup("E m").roman_numeral("A minor") == "ⅴ"


# ============================================================================
# Key Tests
# ============================================================================

class TestKeys:
    """Tests for key spelling and key tables."""

    def test_major_scales(self):
        assert MAJOR_SCALES["C"] == ["C", "D", "E", "F", "G", "A", "B"]
        assert MAJOR_SCALES["F"] == ["F", "G", "A", "Bb", "C", "D", "E"]
        assert MAJOR_SCALES["B"] == ["B", "C#", "D#", "E", "F#", "G#", "A#"]

    def test_gb_major_simplifies_cb(self):
        assert MAJOR_SCALES["Gb"] == ["Gb", "Ab", "Bb", "B", "Db", "Eb", "F"]

    def test_84_key_names(self):
        assert len(KEY_NAMES_BASED_ON_MAJOR) == 84
        assert len(set(KEY_NAMES_BASED_ON_MAJOR)) == 84
        assert "D dorian" in KEY_NAMES_BASED_ON_MAJOR
        assert "Eb minor" in KEY_NAMES_BASED_ON_MAJOR

    def test_circle_of_fifths_order(self):
        assert list(MAJOR_SCALES)[:3] == ["C", "G", "D"]
        assert list(MAJOR_SCALES)[-1] == "F"

    def test_key_name_to_notes(self):
        assert key_name_to_notes("A minor") == ["A", "B", "C", "D", "E", "F", "G"]
        assert key_name_to_notes("D dorian") == ["D", "E", "F", "G", "A", "B", "C"]

    def test_parse_key_name(self):
        assert parse_key_name("C lydian") == KeySignature("C", Mode.LYDIAN)
        assert parse_key_name("B♭ major").name == "Bb major"

    @pytest.mark.parametrize("bad", ["C blah", "C", "H major", "C major extra"])
    def test_parse_key_name_rejects(self, bad):
        with pytest.raises(KeyNotFoundError):
            parse_key_name(bad)

    def test_canonical_key_name(self):
        assert canonical_key_name("F#", Mode.MAJOR) == "Gb major"
        assert canonical_key_name("A", Mode.MINOR) == "A minor"

    def test_spell_scale(self):
        assert spell_scale("F#", Mode.LYDIAN) == ["F#", "G#", "A#", "C", "C#", "D#", "F"]
        assert spell_scale(2, Mode.DORIAN) == ["D", "E", "F", "G", "A", "B", "C"]

    def test_mode_degree(self):
        assert Mode.MAJOR.degree == 0
        assert Mode.MINOR.degree == 5


class TestNoteDisplay:
    """Tests for key-aware note spelling."""

    def test_plain(self):
        assert note_for_display("Bb") == "B♭"

    def test_in_key(self):
        context = NoteDisplayContext(key_name="F major")
        assert note_for_display("A#", context) == "B♭"

    def test_outside_key_passes_through(self):
        context = NoteDisplayContext(key_name="C major")
        assert note_for_display("F#", context) == "F♯"

    def test_non_canonical_key_name(self):
        context = NoteDisplayContext(key_name="F# major")
        assert note_for_display("A#", context) == "B♭"

    def test_scale_with_octave(self):
        context = NoteDisplayContext(scale=["Bb"], show_octave=True)
        assert note_for_display("A#4", context) == "B♭4"

    def test_octave_hidden_by_default(self):
        assert note_for_display("D3") == "D"

    def test_bad_scale(self):
        with pytest.raises(InvalidNoteError):
            note_for_display("C", NoteDisplayContext(scale=["D", "E"]))


class TestKeysIncludingChord:
    """Tests for finding keys a chord fits in."""

    def test_c_major_chord(self):
        keys = keys_including_chord(Chord.lookup("C"))
        # C, G and F major scales, six modes each
        assert len(keys) == 18
        assert keys[0] == "C major"
        assert "C lydian" in keys
        assert "C mixolydian" in keys
        assert "E minor" in keys
        assert "B locrian" not in keys

    def test_restricted_modes(self):
        keys = keys_including_chord(Chord.lookup("C"), restricted_modes=())
        assert "B locrian" in keys
        assert len(keys) == 21

    def test_extensions_considered(self):
        keys = keys_including_chord(Chord.lookup("C maj7"), only_base_triad=False)
        # The major seventh rules out the F major scale
        assert len(keys) == 12
        assert "C lydian" in keys
        assert "C mixolydian" not in keys

    def test_accidentals_allowed(self):
        strict = keys_including_chord(Chord.lookup("C"))
        loose = keys_including_chord(Chord.lookup("C"), max_accidentals=1)
        assert len(loose) > len(strict)

    def test_in_key_predicate(self):
        in_g = in_key_predicate("G major")
        assert in_g("F#4")
        assert in_g("Gb")
        assert not in_g("F")

    def test_every_considered_root_has_keys(self):
        for root in CONSIDERED_NOTE_NAMES:
            keys = keys_including_chord(Chord.lookup(root))
            assert keys
            assert all(k in KEY_NAMES_BASED_ON_MAJOR for k in keys)
            assert any(
                k.endswith("major") and note_identity(k.split()[0]) == note_identity(root)
                for k in keys
            )
