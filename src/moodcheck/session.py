from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .exercises import ExerciseKind, ExercisePanel, ExerciseView
from .moods import MOOD_OPTIONS, MoodLabel
from .profile import UserProfile
from .quotes import QuoteSelector
from .storage import StorageWriteFailed
from .trends import describe_trend, mood_counts, recent_moods

logger = logging.getLogger(__name__)

RECENT_COUNT = 3


@dataclass(frozen=True)
class SessionSnapshot:
    user_name: str
    mood_options: tuple[str, ...]
    selected_index: int | None
    show_history: bool
    trend_text: str
    recent_moods: tuple[str, ...]
    full_history: tuple[str, ...]
    mood_counts: tuple[tuple[str, int], ...]
    current_mood: str | None
    current_quote: str | None
    exercises: tuple[ExerciseView, ...]
    last_error: str | None
    exit_requested: bool


class CheckInSession:
    """
    Host-facing check-in state.

    The host calls the on_* methods for each user event or frame and renders
    snapshot(). Nothing here touches the window.
    """

    def __init__(
        self,
        profile: UserProfile,
        quotes: QuoteSelector | None = None,
        exercises: ExercisePanel | None = None,
    ):
        self.profile = profile
        self.quotes = quotes or QuoteSelector()
        self.exercises = exercises or ExercisePanel()

        self._selected: int | None = None
        self._show_history = False
        self._current_mood: MoodLabel | None = None
        self._current_quote: str | None = None
        self._last_error: str | None = None
        self._exit_requested = False

    @classmethod
    def open(
        cls,
        name: str,
        data_dir: Path,
        quote_seed: int | None = None,
        breathing_cycles: int = 1,
    ) -> CheckInSession:
        return cls(
            UserProfile.load(name, data_dir),
            quotes=QuoteSelector(seed=quote_seed),
            exercises=ExercisePanel(breathing_cycles=breathing_cycles),
        )

    # -------------------------
    # Events
    # -------------------------

    def on_mood_option_chosen(self, index: int) -> None:
        if not (0 <= index < len(MOOD_OPTIONS)):
            raise IndexError(f"Mood option index out of range: {index}")
        self._selected = index

    def on_submit_mood(self) -> MoodLabel | None:
        """
        Log the selected mood and pick a quote for it.
        Nothing selected -> None. A failed write raises StorageWriteFailed after
        recording last_error; the selection is kept so the user can retry.
        """
        if self._selected is None:
            return None

        mood = MOOD_OPTIONS[self._selected]
        try:
            self.profile.add_mood(mood)
        except StorageWriteFailed as e:
            self._last_error = f"Could not save your mood: {e}"
            logger.warning("Mood submit failed: %s", e)
            raise

        self._selected = None
        self._last_error = None
        self._current_mood = mood
        self._current_quote = self.quotes.select_quote(mood)
        return mood

    def on_start_exercise(self, kind: ExerciseKind) -> None:
        self.exercises.start(kind)

    def on_stop_exercise(self, kind: ExerciseKind) -> None:
        self.exercises.stop(kind)

    def on_tick(self, dt: float) -> list[ExerciseKind]:
        return self.exercises.tick(dt)

    def on_request_history_view(self) -> None:
        self._show_history = True

    def on_close_history(self) -> None:
        self._show_history = False

    def on_dismiss_quote(self) -> None:
        self._current_mood = None
        self._current_quote = None

    def on_dismiss_error(self) -> None:
        self._last_error = None

    def on_exit(self) -> None:
        self.exercises.stop_all()
        self._exit_requested = True
        logger.info("Exit requested by %s", self.profile.name)

    # -------------------------
    # Read view
    # -------------------------

    @property
    def exit_requested(self) -> bool:
        return self._exit_requested

    def snapshot(self) -> SessionSnapshot:
        history = self.profile.history
        return SessionSnapshot(
            user_name=self.profile.name,
            mood_options=tuple(m.value for m in MOOD_OPTIONS),
            selected_index=self._selected,
            show_history=self._show_history,
            trend_text=describe_trend(history),
            recent_moods=tuple(m.value for m in recent_moods(history, RECENT_COUNT)),
            full_history=tuple(m.value for m in history),
            mood_counts=tuple((m.value, c) for m, c in mood_counts(history).items()),
            current_mood=self._current_mood.value if self._current_mood else None,
            current_quote=self._current_quote,
            exercises=tuple(self.exercises.views()),
            last_error=self._last_error,
            exit_requested=self._exit_requested,
        )
