from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .moods import MoodLabel

NO_TREND_TEXT = "No trend data available"


@dataclass(frozen=True)
class MoodTrend:
    mood: MoodLabel
    count: int

    def describe(self) -> str:
        times = "time" if self.count == 1 else "times"
        return f"{self.mood.value} (appears {self.count} {times})"


def mood_counts(history: Sequence[MoodLabel]) -> dict[MoodLabel, int]:
    """Occurrences per label, keyed in ascending order of label name."""
    counts: dict[MoodLabel, int] = {}
    for mood in history:
        counts[mood] = counts.get(mood, 0) + 1
    return {m: counts[m] for m in sorted(counts, key=lambda m: m.value)}


def dominant_mood(history: Sequence[MoodLabel]) -> MoodTrend | None:
    """
    Most frequent label. Ties go to the label whose name sorts first.
    Empty history -> None.
    """
    counts = mood_counts(history)
    if not counts:
        return None
    best = min(counts, key=lambda m: (-counts[m], m.value))
    return MoodTrend(best, counts[best])


def describe_trend(history: Sequence[MoodLabel]) -> str:
    trend = dominant_mood(history)
    return trend.describe() if trend else NO_TREND_TEXT


def recent_moods(history: Sequence[MoodLabel], n: int = 3) -> tuple[MoodLabel, ...]:
    """Last min(n, len(history)) entries, oldest first."""
    if n <= 0:
        return ()
    count = min(n, len(history))
    return tuple(history[len(history) - count :])
