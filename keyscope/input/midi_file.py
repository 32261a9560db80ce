"""MIDI file input and output."""

import logging
from pathlib import Path
from typing import Dict, Iterable, List

import pretty_midi

from ..core.note import TimedNote

logger = logging.getLogger(__name__)


class MidiFileReader:
    """Read the notes of a Standard MIDI File."""

    SUPPORTED_FORMATS = {".mid", ".midi"}

    def __init__(self, include_drums: bool = False):
        """
        Initialize MidiFileReader.

        Args:
            include_drums: Keep notes from drum tracks (unpitched) if True
        """
        self.include_drums = include_drums

    def read(self, path: str) -> List[TimedNote]:
        """
        Load every note of a MIDI file.

        Args:
            path: Path to the MIDI file

        Returns:
            Notes sorted by onset, then pitch

        Raises:
            ValueError: If file format not supported or the file is not valid MIDI
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"MIDI file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        try:
            midi = pretty_midi.PrettyMIDI(str(path))
        except (OSError, EOFError) as e:
            raise ValueError(f"Could not parse MIDI file {path}: {e}") from e

        notes = []
        for instrument in midi.instruments:
            if instrument.is_drum and not self.include_drums:
                continue
            for note in instrument.notes:
                notes.append(TimedNote(
                    pitch=note.pitch,
                    onset_ms=note.start * 1000.0,
                    offset_ms=note.end * 1000.0,
                    velocity=note.velocity,
                    instrument=instrument.name or None,
                ))

        notes.sort(key=lambda n: (n.onset_ms, n.pitch))
        logger.debug("Read %d notes from %s", len(notes), path)
        return notes


class MidiFileWriter:
    """Write timed notes to a MIDI file, one track per instrument.

    Notes without an instrument go to the default track. Track programs come
    from the General MIDI name when pretty_midi knows it, else program 0.
    """

    def __init__(self, tempo: float = 120.0, default_instrument: str = "Acoustic Grand Piano"):
        self.tempo = tempo
        self.default_instrument = default_instrument

    def to_pretty_midi(self, notes: Iterable[TimedNote]) -> pretty_midi.PrettyMIDI:
        """
        Build a PrettyMIDI object from timed notes.

        Raises:
            ValueError: If a note ends before it starts
        """
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)
        tracks: Dict[str, pretty_midi.Instrument] = {}

        for note in notes:
            if note.offset_ms < note.onset_ms:
                raise ValueError(
                    f"Note {note.pitch_name} ends at {note.offset_ms} ms, "
                    f"before its onset at {note.onset_ms} ms"
                )
            name = note.instrument or self.default_instrument
            if name not in tracks:
                tracks[name] = pretty_midi.Instrument(program=self._program_for(name), name=name)
                midi.instruments.append(tracks[name])
            tracks[name].notes.append(pretty_midi.Note(
                velocity=note.velocity,
                pitch=note.pitch,
                start=note.onset_ms / 1000.0,
                end=note.offset_ms / 1000.0,
            ))

        return midi

    def write(self, notes: Iterable[TimedNote], output_path: str) -> None:
        midi = self.to_pretty_midi(notes)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        midi.write(str(output_path))
        logger.debug("Wrote %d tracks to %s", len(midi.instruments), output_path)

    @staticmethod
    def _program_for(name: str) -> int:
        try:
            return pretty_midi.instrument_name_to_program(name)
        except ValueError:
            return 0
