from __future__ import annotations

from enum import Enum


class UnknownMood(ValueError):
    """Raised when a token is not one of the ten mood labels."""


class MoodLabel(Enum):
    HAPPY = "Happy"
    SAD = "Sad"
    ANXIOUS = "Anxious"
    STRESSED = "Stressed"
    ANGRY = "Angry"
    EXCITED = "Excited"
    TIRED = "Tired"
    PEACEFUL = "Peaceful"
    CONFUSED = "Confused"
    HOPEFUL = "Hopeful"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: MoodLabel | str) -> MoodLabel:
        """
        Accepts a MoodLabel or its display name (case-insensitive, surrounding
        whitespace ignored). Raises UnknownMood for anything else.
        """
        if isinstance(token, cls):
            return token
        key = str(token).strip().lower()
        for mood in cls:
            if mood.value.lower() == key:
                return mood
        raise UnknownMood(f"Unknown mood {token!r}. Expected one of: {', '.join(m.value for m in cls)}")

    @classmethod
    def try_parse(cls, token: object) -> MoodLabel | None:
        if token is None:
            return None
        try:
            return cls.parse(token)  # type: ignore[arg-type]
        except UnknownMood:
            return None


# Order shown to the user in the check-in form.
MOOD_OPTIONS: tuple[MoodLabel, ...] = tuple(MoodLabel)
