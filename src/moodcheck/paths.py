from __future__ import annotations

from pathlib import Path

LOG_PREFIX = "mood_history_"
LOG_SUFFIX = ".txt"


def default_data_dir(profile: str | None = None) -> Path:
    base = Path.home() / ".config" / "moodcheck"
    return base / profile if profile else base


def resolve_data_dir(data_arg: str | None, profile: str | None) -> Path:
    if data_arg:
        return Path(data_arg).expanduser().resolve()
    return default_data_dir(profile).expanduser().resolve()


def normalize_user_name(name: str) -> str:
    cleaned = str(name or "").strip()
    if not cleaned:
        raise ValueError("User name cannot be empty")
    if any(sep in cleaned for sep in ("/", "\\")) or cleaned in (".", ".."):
        raise ValueError(f"User name cannot be used as a file name: {name!r}")
    return cleaned


def mood_log_path(name: str, data_dir: Path) -> Path:
    return Path(data_dir) / f"{LOG_PREFIX}{normalize_user_name(name)}{LOG_SUFFIX}"
