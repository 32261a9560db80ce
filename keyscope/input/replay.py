"""Replay - Drive a key tracker from a recorded event stream."""

import logging
from collections import Counter
from typing import Iterable, Iterator, List, Tuple

from ..core.constants import DEFAULT_REFRESH_MS
from ..core.notes import note_identity
from ..inference.key import LikelyKey
from ..session.key_tracker import KeyTracker
from .events import EventKind, NoteEvent

logger = logging.getLogger(__name__)

Snapshot = Tuple[float, List[LikelyKey]]


def replay(
    events: Iterable[NoteEvent],
    tracker: KeyTracker,
    refresh_ms: float = DEFAULT_REFRESH_MS,
) -> Iterator[Snapshot]:
    """
    Feed events to a tracker, recomputing keys on a fixed refresh clock.

    Refreshes fall every refresh_ms counted from the first event, each one
    before any later event is applied, plus a final one at the last event.

    Yields:
        (timestamp_ms, guesses) after each refresh
    """
    if refresh_ms <= 0:
        raise ValueError(f"refresh_ms must be positive, got {refresh_ms}")

    held: Counter = Counter()
    next_refresh = None
    last_timestamp = None
    for event in events:
        if next_refresh is None:
            next_refresh = event.timestamp_ms + refresh_ms
        while event.timestamp_ms >= next_refresh:
            yield next_refresh, tracker.update(next_refresh)
            next_refresh += refresh_ms

        # Pitch classes are tracked once however many octaves hold them
        pitch_class = note_identity(event.note)
        if event.kind is EventKind.NOTE_ON:
            held[pitch_class] += 1
            if held[pitch_class] == 1:
                tracker.note_on(event.note, event.timestamp_ms)
        elif held[pitch_class] > 0:
            held[pitch_class] -= 1
            if held[pitch_class] == 0:
                tracker.note_off(event.note, event.timestamp_ms)
        last_timestamp = event.timestamp_ms

    if last_timestamp is not None:
        logger.debug("Replay finished at %.0f ms", last_timestamp)
        yield last_timestamp, tracker.update(last_timestamp)
