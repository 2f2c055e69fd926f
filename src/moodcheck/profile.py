from __future__ import annotations

import logging
from pathlib import Path

from .moods import MoodLabel, UnknownMood
from .paths import mood_log_path, normalize_user_name
from .storage import StorageUnavailable, append_line, read_lines

logger = logging.getLogger(__name__)


class UserProfile:
    """
    One user's append-only mood log.

    The in-memory history only grows after the line has been written to disk,
    so a failed append never leaves memory ahead of the file.
    """

    def __init__(self, name: str, log_path: Path, history: list[MoodLabel] | None = None):
        self.name = normalize_user_name(name)
        self.log_path = Path(log_path)
        self._history: list[MoodLabel] = list(history or [])
        self.skipped_lines: list[int] = []

    @classmethod
    def load(cls, name: str, data_dir: Path) -> UserProfile:
        path = mood_log_path(name, data_dir)
        profile = cls(name, path)

        try:
            lines = read_lines(path)
        except StorageUnavailable as e:
            logger.warning("Mood log unavailable, starting with empty history: %s", e)
            return profile

        for lineno, raw in enumerate(lines, start=1):
            token = raw.strip()
            if not token:
                continue
            try:
                profile._history.append(MoodLabel.parse(token))
            except UnknownMood:
                profile.skipped_lines.append(lineno)

        if profile.skipped_lines:
            logger.warning(
                "Skipped %d unknown mood token(s) in %s (lines %s)",
                len(profile.skipped_lines),
                path,
                ", ".join(str(n) for n in profile.skipped_lines),
            )
        logger.debug("Loaded %d mood entries for %s", len(profile._history), profile.name)
        return profile

    @property
    def history(self) -> tuple[MoodLabel, ...]:
        return tuple(self._history)

    def add_mood(self, mood: MoodLabel | str) -> MoodLabel:
        """Persist one mood, then record it in memory. Raises StorageWriteFailed."""
        label = MoodLabel.parse(mood)
        append_line(self.log_path, label.value)
        self._history.append(label)
        logger.info("Logged mood %s for %s (%d total)", label.value, self.name, len(self._history))
        return label

    def __len__(self) -> int:
        return len(self._history)


class MoodStore:
    """Name-keyed access to mood logs under one data directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._profiles: dict[str, UserProfile] = {}

    def load(self, name: str) -> tuple[MoodLabel, ...]:
        return self.profile(name).history

    def profile(self, name: str) -> UserProfile:
        key = normalize_user_name(name)
        if key not in self._profiles:
            self._profiles[key] = UserProfile.load(key, self.data_dir)
        return self._profiles[key]

    def append(self, name: str, mood: MoodLabel | str) -> MoodLabel:
        return self.profile(name).add_mood(mood)

    def history(self, name: str) -> tuple[MoodLabel, ...]:
        return self.profile(name).history
