from __future__ import annotations

import random
from types import MappingProxyType
from typing import Mapping, Sequence

from .moods import MoodLabel

MOOD_QUOTES: Mapping[MoodLabel, tuple[str, ...]] = MappingProxyType(
    {
        MoodLabel.HAPPY: (
            "Joy is the simplest form of gratitude. - Karl Barth",
            "Happiness is not something ready made. It comes from your own actions. - Dalai Lama",
            "The happiest people don't have the best of everything, they make the best of everything.",
        ),
        MoodLabel.SAD: (
            "This feeling will pass. The fear is real but the danger is not.",
            "You're allowed to feel messed up and inside out. It doesn't mean you're defective - it means you're human.",
            "Tears water our growth. - William Shakespeare",
        ),
        MoodLabel.ANXIOUS: (
            "You don't have to control your thoughts. You just have to stop letting them control you.",
            "Anxiety is a thin stream of fear trickling through the mind. "
            "If encouraged, it cuts a channel into which all other thoughts are drained.",
            "Breathe. It's just a bad day, not a bad life.",
        ),
        MoodLabel.STRESSED: (
            "You can't stop the waves, but you can learn to surf. - Jon Kabat-Zinn",
            "It's not the load that breaks you down, it's the way you carry it. - Lou Holtz",
            "Stress is caused by being 'here' but wanting to be 'there'.",
        ),
        MoodLabel.ANGRY: (
            "For every minute you remain angry, you give up sixty seconds of peace of mind. - Ralph Waldo Emerson",
            "Anger is an acid that can do more harm to the vessel in which it is stored "
            "than to anything on which it is poured.",
            "Speak when you are angry and you will make the best speech you will ever regret.",
        ),
    }
)

GENERIC_QUOTES: tuple[str, ...] = (
    "Believe you can and you're halfway there. - Theodore Roosevelt",
    "You are never too old to set another goal or to dream a new dream. - C.S. Lewis",
    "Progress, not perfection.",
    "You've survived 100% of your bad days so far.",
)


class QuoteSelector:
    """
    Picks a quote for a mood. The generator is created once; pass `seed` or an
    `rng` for repeatable draws.
    """

    def __init__(
        self,
        seed: int | None = None,
        rng: random.Random | None = None,
        mood_quotes: Mapping[MoodLabel, Sequence[str]] | None = None,
        generic_quotes: Sequence[str] | None = None,
    ):
        self._rng = rng if rng is not None else random.Random(seed)
        table = MOOD_QUOTES if mood_quotes is None else mood_quotes
        self.mood_quotes: Mapping[MoodLabel, tuple[str, ...]] = MappingProxyType(
            {MoodLabel.parse(k): tuple(v) for k, v in table.items()}
        )
        self.generic_quotes: tuple[str, ...] = tuple(GENERIC_QUOTES if generic_quotes is None else generic_quotes)
        if not self.generic_quotes:
            raise ValueError("Generic quote list cannot be empty")

    def quotes_for(self, mood: MoodLabel | str | None = None) -> tuple[str, ...]:
        label = MoodLabel.try_parse(mood)
        if label is not None:
            quotes = self.mood_quotes.get(label, ())
            if quotes:
                return quotes
        return self.generic_quotes

    def select_quote(self, mood: MoodLabel | str | None = None) -> str:
        return self._rng.choice(self.quotes_for(mood))
