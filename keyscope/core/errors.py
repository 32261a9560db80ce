"""Error types raised by the inference engine.

Absence of a detection (no chord, no key) is never an error; it is returned
as an empty result. The errors here cover unknown names, malformed input and
misuse of stateful components.
"""


class KeyscopeError(Exception):
    """Base class for all keyscope errors."""


class ChordNotFoundError(KeyscopeError, KeyError):
    """A chord suffix, chord name or triad name is not in the library."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable
        return str(self.args[0]) if self.args else ""


class KeyNotFoundError(KeyscopeError, KeyError):
    """A key name such as "C lydian" could not be resolved."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InvalidInputError(KeyscopeError, ValueError):
    """Input the engine cannot work with."""


class InvalidNoteError(InvalidInputError):
    """A note name could not be parsed, or lacks a required octave."""


class TooFewNotesError(InvalidInputError):
    """Not enough notes to interpret a chord performance."""


class HistogramStateError(KeyscopeError, RuntimeError):
    """Note-on/note-off events arrived out of sequence."""


class DuplicateChordNameError(KeyscopeError, ValueError):
    """Two chord archetypes claim the same name."""
