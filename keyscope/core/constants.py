"""Global constants for keyscope."""

# Pitch names, normalized to sharps
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_PITCH_NAMES = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Semitone offset of each natural note above C
NATURAL_PITCHES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
LETTERS = "CDEFGAB"

# Distinct (enharmonic) notes inside an octave
OCTAVE_SIZE = 12

# Notes per diatonic scale, and modes of the major scale
NUM_DEGREES = 7

# Lowest MIDI note number
MIDI_MIN = 0

# Caller-side timing defaults (milliseconds)
DEFAULT_REFRESH_MS = 1000
DEFAULT_SETTLE_MS = 300
