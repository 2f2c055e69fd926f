"""Tests for the host-facing CheckInSession."""

from __future__ import annotations

import random

import pytest

from moodcheck import profile as profile_mod
from moodcheck.exercises import ExerciseKind
from moodcheck.moods import MOOD_OPTIONS, MoodLabel
from moodcheck.quotes import GENERIC_QUOTES, MOOD_QUOTES, QuoteSelector
from moodcheck.session import CheckInSession
from moodcheck.storage import StorageWriteFailed


@pytest.fixture()
def session(tmp_path) -> CheckInSession:
    return CheckInSession.open("User", tmp_path, quote_seed=123)


def _index(mood: MoodLabel) -> int:
    return MOOD_OPTIONS.index(mood)


# ---- initial snapshot ----


def test_initial_snapshot(session):
    snap = session.snapshot()
    assert snap.user_name == "User"
    assert snap.mood_options == (
        "Happy", "Sad", "Anxious", "Stressed", "Angry",
        "Excited", "Tired", "Peaceful", "Confused", "Hopeful",
    )
    assert snap.selected_index is None
    assert snap.trend_text == "No trend data available"
    assert snap.recent_moods == ()
    assert snap.full_history == ()
    assert snap.current_quote is None
    assert snap.exercises == ()
    assert snap.exit_requested is False


# ---- mood submission ----


def test_submit_without_selection_is_noop(session):
    assert session.on_submit_mood() is None
    assert session.snapshot().full_history == ()


def test_choose_out_of_range_raises(session):
    with pytest.raises(IndexError):
        session.on_mood_option_chosen(10)
    with pytest.raises(IndexError):
        session.on_mood_option_chosen(-1)


def test_submit_logs_mood_and_shows_quote(session, tmp_path):
    session.on_mood_option_chosen(_index(MoodLabel.SAD))
    assert session.snapshot().selected_index == _index(MoodLabel.SAD)

    assert session.on_submit_mood() is MoodLabel.SAD
    snap = session.snapshot()
    assert snap.selected_index is None
    assert snap.current_mood == "Sad"
    assert snap.current_quote in MOOD_QUOTES[MoodLabel.SAD]
    assert snap.full_history == ("Sad",)
    assert (tmp_path / "mood_history_User.txt").read_text(encoding="utf-8") == "Sad\n"


def test_submit_mood_without_quotes_gets_generic(session):
    session.on_mood_option_chosen(_index(MoodLabel.PEACEFUL))
    session.on_submit_mood()
    assert session.snapshot().current_quote in GENERIC_QUOTES


def test_dismiss_quote(session):
    session.on_mood_option_chosen(0)
    session.on_submit_mood()
    session.on_dismiss_quote()
    snap = session.snapshot()
    assert snap.current_quote is None
    assert snap.current_mood is None


def test_history_views(session):
    for mood in (MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.TIRED, MoodLabel.SAD):
        session.on_mood_option_chosen(_index(mood))
        session.on_submit_mood()

    session.on_request_history_view()
    snap = session.snapshot()
    assert snap.show_history is True
    assert snap.trend_text == "Sad (appears 2 times)"
    assert snap.recent_moods == ("Sad", "Tired", "Sad")
    assert snap.full_history == ("Happy", "Sad", "Tired", "Sad")
    assert snap.mood_counts == (("Happy", 1), ("Sad", 2), ("Tired", 1))

    session.on_close_history()
    assert session.snapshot().show_history is False


def test_write_failure_surfaces_and_keeps_selection(session, monkeypatch):
    def boom(path, line):
        raise StorageWriteFailed("read-only file system")

    monkeypatch.setattr(profile_mod, "append_line", boom)
    session.on_mood_option_chosen(_index(MoodLabel.ANGRY))
    with pytest.raises(StorageWriteFailed):
        session.on_submit_mood()

    snap = session.snapshot()
    assert snap.full_history == ()
    assert snap.current_quote is None
    assert snap.selected_index == _index(MoodLabel.ANGRY)
    assert "read-only file system" in snap.last_error

    session.on_dismiss_error()
    assert session.snapshot().last_error is None


def test_reopen_session_sees_previous_moods(tmp_path):
    first = CheckInSession.open("User", tmp_path)
    first.on_mood_option_chosen(_index(MoodLabel.HOPEFUL))
    first.on_submit_mood()

    second = CheckInSession.open("User", tmp_path)
    assert second.snapshot().full_history == ("Hopeful",)


def test_injected_quote_rng(tmp_path):
    from moodcheck.profile import UserProfile

    s = CheckInSession(UserProfile.load("User", tmp_path), quotes=QuoteSelector(rng=random.Random(9)))
    s.on_mood_option_chosen(_index(MoodLabel.HAPPY))
    s.on_submit_mood()
    assert s.snapshot().current_quote == random.Random(9).choice(MOOD_QUOTES[MoodLabel.HAPPY])


# ---- exercises ----


def test_exercise_events_flow_into_snapshot(session):
    session.on_start_exercise(ExerciseKind.BREATHING)
    session.on_tick(2.0)
    (view,) = session.snapshot().exercises
    assert view.kind is ExerciseKind.BREATHING
    assert view.step_index == 0
    assert view.progress == pytest.approx(0.5)

    session.on_stop_exercise(ExerciseKind.BREATHING)
    assert session.snapshot().exercises == ()


def test_tick_returns_completed(session):
    session.on_start_exercise(ExerciseKind.BREATHING)
    assert session.on_tick(4.0) == []
    assert session.on_tick(7.0) == []
    assert session.on_tick(8.0) == [ExerciseKind.BREATHING]


# ---- exit ----


def test_exit_stops_exercises_and_flags(session):
    session.on_start_exercise(ExerciseKind.GROUNDING)
    session.on_exit()
    snap = session.snapshot()
    assert snap.exit_requested is True
    assert session.exit_requested is True
    assert snap.exercises == ()
