"""Key tracker - Keeps a running key guess from live note events."""

import logging
from typing import List, Optional

from ..core.notes import NoteLike
from ..inference.histogram import HistogramConfig, NoteHistogram
from ..inference.key import KeyDetector, LikelyKey

logger = logging.getLogger(__name__)


class KeyTracker:
    """Feed note events into a histogram and keep the best key guesses.

    While locked, the histogram keeps accumulating but the guesses and the
    chosen key stay as they were.
    """

    def __init__(
        self,
        histogram: Optional[NoteHistogram] = None,
        detector: Optional[KeyDetector] = None,
        config: Optional[HistogramConfig] = None,
    ):
        """
        Initialize KeyTracker.

        Args:
            histogram: Histogram to feed; a fresh one is built if omitted
            detector: KeyDetector used to rank keys
            config: HistogramConfig for the fresh histogram

        Raises:
            ValueError: If both histogram and config are given
        """
        if histogram is not None and config is not None:
            raise ValueError("Pass either a histogram or a config, not both")
        self.histogram = histogram or NoteHistogram(config)
        self.detector = detector or KeyDetector()
        self.guessed_keys: List[LikelyKey] = []
        self.chosen_key: Optional[LikelyKey] = None
        self.is_locked = False

    def note_on(self, note: NoteLike, timestamp_ms: float) -> None:
        self.histogram.note_on(note, timestamp_ms)

    def note_off(self, note: NoteLike, timestamp_ms: float) -> None:
        self.histogram.note_off(note, timestamp_ms)

    def note_instant(self, note: NoteLike, timestamp_ms: float, length_ms: float) -> None:
        self.histogram.note_instant(note, timestamp_ms, length_ms)

    def update(self, timestamp_ms: float) -> List[LikelyKey]:
        """
        Recalculate the histogram and, unless locked, the key guesses.

        Returns:
            Current guesses, best first
        """
        self.histogram.calculate(timestamp_ms)
        if self.is_locked:
            return self.guessed_keys

        self.guessed_keys = self.detector.detect(self.histogram.computed)
        best = self.guessed_keys[0] if self.guessed_keys else None
        if best is not None and (self.chosen_key is None or not best.same_key(self.chosen_key)):
            logger.debug("Key changed to %s at %.0f ms", best.key_name, timestamp_ms)
        self.chosen_key = best
        return self.guessed_keys

    def lock(self) -> None:
        self.is_locked = True

    def unlock(self) -> None:
        self.is_locked = False

    def reset(self) -> None:
        self.histogram.reset()
        self.guessed_keys = []
        self.chosen_key = None
        self.is_locked = False
