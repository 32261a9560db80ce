"""Tests for the input layer.

Tests cover:
- Event streams built from timed notes
- MIDI file reading and writing via pretty_midi
- Replaying events into a key tracker
"""

import pytest
import pretty_midi
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from keyscope.core import TimedNote, note_identity
from keyscope.input import (
    EventKind,
    MidiFileReader,
    MidiFileWriter,
    NoteEvent,
    events_from_notes,
    replay,
)
from keyscope.session import KeyTracker


def arpeggio(pitches, step_ms=500, length_ms=400):
    """One note per step, each released before the next starts."""
    return [
        TimedNote(pitch=p, onset_ms=i * step_ms, offset_ms=i * step_ms + length_ms, velocity=100)
        for i, p in enumerate(pitches)
    ]


# ============================================================================
# Event Tests
# ============================================================================

class TestEvents:
    """Tests for events_from_notes."""

    def test_on_and_off_per_note(self):
        events = events_from_notes(arpeggio([60, 64]))
        assert [(e.kind, e.note, e.timestamp_ms) for e in events] == [
            (EventKind.NOTE_ON, 60, 0),
            (EventKind.NOTE_OFF, 60, 400),
            (EventKind.NOTE_ON, 64, 500),
            (EventKind.NOTE_OFF, 64, 900),
        ]

    def test_off_before_on_at_same_time(self):
        notes = [
            TimedNote(pitch=60, onset_ms=500, offset_ms=1000),
            TimedNote(pitch=60, onset_ms=0, offset_ms=500),
        ]
        kinds = [e.kind for e in events_from_notes(notes)]
        assert kinds == [EventKind.NOTE_ON, EventKind.NOTE_OFF, EventKind.NOTE_ON, EventKind.NOTE_OFF]

    def test_zero_length_note_opens_before_it_closes(self):
        notes = [
            TimedNote(pitch=60, onset_ms=1000, offset_ms=1000),
            TimedNote(pitch=64, onset_ms=500, offset_ms=1000),
        ]
        assert [(e.kind, e.note) for e in events_from_notes(notes)] == [
            (EventKind.NOTE_ON, 64),
            (EventKind.NOTE_OFF, 64),
            (EventKind.NOTE_ON, 60),
            (EventKind.NOTE_OFF, 60),
        ]

    def test_backwards_note_dropped(self):
        notes = [TimedNote(pitch=60, onset_ms=1000, offset_ms=900)] + arpeggio([64])
        assert [e.note for e in events_from_notes(notes)] == [64, 64]

    def test_events_are_frozen(self):
        event = NoteEvent(EventKind.NOTE_ON, "C4", 0)
        with pytest.raises(AttributeError):
            event.note = "D4"


# ============================================================================
# MIDI File Tests
# ============================================================================

class TestMidiFiles:
    """Tests for MidiFileReader and MidiFileWriter."""

    def test_write_then_read(self, tmp_path):
        path = tmp_path / "arpeggio.mid"
        MidiFileWriter().write(arpeggio([67, 60, 64]), str(path))

        notes = MidiFileReader().read(str(path))
        assert [n.pitch for n in notes] == [67, 60, 64]
        assert notes[1].onset_ms == pytest.approx(500, abs=1)
        assert notes[1].offset_ms == pytest.approx(900, abs=1)
        assert notes[0].velocity == 100
        assert notes[0].instrument == "Acoustic Grand Piano"

    def test_chords_sorted_by_pitch(self, tmp_path):
        path = tmp_path / "chord.mid"
        chord = [TimedNote(pitch=p, onset_ms=0, offset_ms=1000) for p in (67, 60, 64)]
        MidiFileWriter().write(chord, str(path))
        assert [n.pitch for n in MidiFileReader().read(str(path))] == [60, 64, 67]

    def test_writer_creates_directories(self, tmp_path):
        path = tmp_path / "nested" / "out.mid"
        MidiFileWriter().write(arpeggio([60]), str(path))
        assert path.exists()

    def test_drums_skipped_by_default(self, tmp_path):
        midi = pretty_midi.PrettyMIDI()
        piano = pretty_midi.Instrument(program=0, name="Piano")
        piano.notes.append(pretty_midi.Note(velocity=90, pitch=60, start=0.0, end=0.5))
        drums = pretty_midi.Instrument(program=0, is_drum=True, name="Drums")
        drums.notes.append(pretty_midi.Note(velocity=90, pitch=36, start=0.0, end=0.1))
        midi.instruments.extend([piano, drums])
        path = tmp_path / "band.mid"
        midi.write(str(path))

        assert [n.pitch for n in MidiFileReader().read(str(path))] == [60]
        with_drums = MidiFileReader(include_drums=True).read(str(path))
        assert sorted(n.pitch for n in with_drums) == [36, 60]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            MidiFileReader().read(str(tmp_path / "missing.mid"))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("C4 E4 G4")
        with pytest.raises(ValueError):
            MidiFileReader().read(str(path))

    def test_garbage_file_is_value_error(self, tmp_path):
        path = tmp_path / "bad.mid"
        path.write_bytes(b"not a midi file")
        with pytest.raises(ValueError, match="Could not parse"):
            MidiFileReader().read(str(path))

    def test_writer_keeps_instrument_tracks(self, tmp_path):
        notes = [
            TimedNote(pitch=48, onset_ms=0, offset_ms=500, instrument="Acoustic Bass"),
            TimedNote(pitch=60, onset_ms=0, offset_ms=500),
            TimedNote(pitch=64, onset_ms=500, offset_ms=1000, instrument="Lead Synth"),
        ]
        midi = MidiFileWriter().to_pretty_midi(notes)
        assert [(i.name, i.program) for i in midi.instruments] == [
            ("Acoustic Bass", 32),
            ("Acoustic Grand Piano", 0),
            ("Lead Synth", 0),
        ]

        path = tmp_path / "band.mid"
        MidiFileWriter().write(notes, str(path))
        read = MidiFileReader().read(str(path))
        assert {(n.pitch, n.instrument) for n in read} == {
            (48, "Acoustic Bass"),
            (60, "Acoustic Grand Piano"),
            (64, "Lead Synth"),
        }

    def test_writer_rejects_backwards_note(self, tmp_path):
        with pytest.raises(ValueError):
            MidiFileWriter().write([TimedNote(pitch=60, onset_ms=500, offset_ms=100)], str(tmp_path / "x.mid"))


# ============================================================================
# Replay Tests
# ============================================================================

class TestReplay:
    """Tests for replaying events into a key tracker."""

    def test_refresh_schedule(self):
        events = events_from_notes(arpeggio([60, 64, 67, 72]))
        snapshots = list(replay(events, KeyTracker(), refresh_ms=1000))
        # One refresh a second from the first event, then one at the last event
        assert [t for t, _ in snapshots] == [1000, 1900]

    def test_final_guess(self):
        events = events_from_notes(arpeggio([60, 64, 67, 72]))
        tracker = KeyTracker()
        _, guesses = list(replay(events, tracker))[-1]
        assert guesses is tracker.guessed_keys
        assert note_identity(guesses[0].note) == 0
        assert guesses[0].mode in ("major", "lydian", "mixolydian")

    def test_overlapping_octaves(self):
        """The same pitch class held in two octaves is one histogram note."""
        notes = [
            TimedNote(pitch=60, onset_ms=0, offset_ms=1000),
            TimedNote(pitch=72, onset_ms=200, offset_ms=800),
            TimedNote(pitch=64, onset_ms=0, offset_ms=1000),
        ]
        tracker = KeyTracker()
        list(replay(events_from_notes(notes), tracker, refresh_ms=250))
        assert tracker.histogram.open_pitch_classes == []
        assert len(tracker.histogram.short_context) == 2

    def test_held_note_stays_open_until_last_octave_released(self):
        notes = [
            TimedNote(pitch=60, onset_ms=0, offset_ms=500),
            TimedNote(pitch=72, onset_ms=200, offset_ms=2000),
        ]
        events = [e for e in events_from_notes(notes) if e.timestamp_ms <= 1000]
        tracker = KeyTracker()
        list(replay(events, tracker))
        assert tracker.histogram.open_pitch_classes == [0]

    def test_zero_length_note_is_closed(self):
        notes = [
            TimedNote(pitch=60, onset_ms=1000, offset_ms=1000),
            TimedNote(pitch=64, onset_ms=1000, offset_ms=1500),
            TimedNote(pitch=67, onset_ms=2000, offset_ms=2500),
        ]
        tracker = KeyTracker()
        list(replay(events_from_notes(notes), tracker))
        assert tracker.histogram.open_pitch_classes == []
        assert [d.pitch_class for d in tracker.histogram.short_context] == [0, 4, 7]

    def test_empty_stream(self):
        assert list(replay([], KeyTracker())) == []

    def test_bad_refresh(self):
        with pytest.raises(ValueError):
            list(replay([], KeyTracker(), refresh_ms=0))
