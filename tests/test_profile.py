"""Tests for the per-user mood log (UserProfile / MoodStore)."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from moodcheck import profile as profile_mod
from moodcheck.moods import MoodLabel, UnknownMood
from moodcheck.profile import MoodStore, UserProfile
from moodcheck.storage import StorageWriteFailed


# ---- load ----


def test_load_missing_log_is_empty(tmp_path):
    p = UserProfile.load("User", tmp_path)
    assert p.history == ()
    assert p.log_path == tmp_path / "mood_history_User.txt"


def test_load_reads_tokens_in_order(tmp_path):
    (tmp_path / "mood_history_Sam.txt").write_text("Happy\nSad\nTired\n", encoding="utf-8")
    p = UserProfile.load("Sam", tmp_path)
    assert p.history == (MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.TIRED)


def test_load_skips_blank_lines(tmp_path):
    (tmp_path / "mood_history_Sam.txt").write_text("\nHappy\n\n  \nSad\n", encoding="utf-8")
    p = UserProfile.load("Sam", tmp_path)
    assert p.history == (MoodLabel.HAPPY, MoodLabel.SAD)
    assert p.skipped_lines == []


def test_load_skips_unknown_tokens_and_warns(tmp_path, caplog):
    (tmp_path / "mood_history_Sam.txt").write_text("Happy\nGrumpy\nsad\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="moodcheck.profile"):
        p = UserProfile.load("Sam", tmp_path)
    assert p.history == (MoodLabel.HAPPY, MoodLabel.SAD)
    assert p.skipped_lines == [2]
    assert "unknown mood" in caplog.text


def test_load_unreadable_log_recovers_empty(tmp_path, caplog):
    (tmp_path / "mood_history_Sam.txt").mkdir()
    with caplog.at_level(logging.WARNING, logger="moodcheck.profile"):
        p = UserProfile.load("Sam", tmp_path)
    assert p.history == ()
    assert "unavailable" in caplog.text


def test_load_rejects_bad_names(tmp_path):
    with pytest.raises(ValueError):
        UserProfile.load("", tmp_path)
    with pytest.raises(ValueError):
        UserProfile.load("../escape", tmp_path)


# ---- add_mood ----


def test_add_mood_appends_in_order(tmp_path):
    p = UserProfile.load("User", tmp_path)
    moods = [MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.HAPPY, MoodLabel.HOPEFUL, MoodLabel.ANGRY]
    for m in moods:
        p.add_mood(m)
    assert p.history == tuple(moods)
    assert len(p) == 5


def test_add_mood_accepts_label_names(tmp_path):
    p = UserProfile.load("User", tmp_path)
    assert p.add_mood("peaceful") is MoodLabel.PEACEFUL
    assert p.log_path.read_text(encoding="utf-8") == "Peaceful\n"


def test_add_mood_rejects_unknown(tmp_path):
    p = UserProfile.load("User", tmp_path)
    with pytest.raises(UnknownMood):
        p.add_mood("Grumpy")
    assert p.history == ()
    assert not p.log_path.exists()


def test_add_mood_write_failure_keeps_memory_unchanged(tmp_path, monkeypatch):
    p = UserProfile.load("User", tmp_path)
    p.add_mood(MoodLabel.HAPPY)

    def boom(path, line):
        raise StorageWriteFailed("disk full")

    monkeypatch.setattr(profile_mod, "append_line", boom)
    with pytest.raises(StorageWriteFailed):
        p.add_mood(MoodLabel.SAD)
    assert p.history == (MoodLabel.HAPPY,)


def test_history_is_read_only_view(tmp_path):
    p = UserProfile.load("User", tmp_path)
    p.add_mood(MoodLabel.HAPPY)
    h = p.history
    assert isinstance(h, tuple)
    p.add_mood(MoodLabel.SAD)
    assert h == (MoodLabel.HAPPY,)


# ---- round-trip across restarts ----


def test_reload_reproduces_history(tmp_path):
    moods = [MoodLabel.ANXIOUS, MoodLabel.CONFUSED, MoodLabel.ANXIOUS, MoodLabel.EXCITED]
    p = UserProfile.load("Alex", tmp_path)
    for m in moods:
        p.add_mood(m)

    fresh = UserProfile.load("Alex", tmp_path)
    assert fresh.history == tuple(moods)


def test_profiles_are_separate_per_name(tmp_path):
    UserProfile.load("A", tmp_path).add_mood(MoodLabel.HAPPY)
    UserProfile.load("B", tmp_path).add_mood(MoodLabel.SAD)
    assert UserProfile.load("A", tmp_path).history == (MoodLabel.HAPPY,)
    assert UserProfile.load("B", tmp_path).history == (MoodLabel.SAD,)


# ---- MoodStore ----


def test_store_load_append_history(tmp_path: Path):
    store = MoodStore(tmp_path)
    assert store.load("User") == ()
    store.append("User", MoodLabel.TIRED)
    store.append("User", "Hopeful")
    assert store.history("User") == (MoodLabel.TIRED, MoodLabel.HOPEFUL)
    assert MoodStore(tmp_path).load("User") == (MoodLabel.TIRED, MoodLabel.HOPEFUL)


def test_store_reuses_profile(tmp_path):
    store = MoodStore(tmp_path)
    assert store.profile("User") is store.profile(" User ")


# ---- damaged logs ----


def test_append_after_unterminated_line_survives_reload(tmp_path):
    (tmp_path / "mood_history_Sam.txt").write_text("Happy", encoding="utf-8")
    p = UserProfile.load("Sam", tmp_path)
    p.add_mood(MoodLabel.SAD)

    fresh = UserProfile.load("Sam", tmp_path)
    assert fresh.history == p.history == (MoodLabel.HAPPY, MoodLabel.SAD)
    assert fresh.skipped_lines == []


def test_load_skips_undecodable_line_only(tmp_path):
    (tmp_path / "mood_history_Sam.txt").write_bytes(b"Happy\nSad\n\xff\nTired\n")
    p = UserProfile.load("Sam", tmp_path)
    assert p.history == (MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.TIRED)
    assert p.skipped_lines == [3]

    p.add_mood(MoodLabel.HOPEFUL)
    assert UserProfile.load("Sam", tmp_path).history == p.history
