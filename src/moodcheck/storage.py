from __future__ import annotations

import os
from pathlib import Path


class StorageError(Exception):
    """Base class for mood log I/O failures."""


class StorageUnavailable(StorageError):
    """The log exists but could not be opened for reading."""


class StorageWriteFailed(StorageError):
    """A line could not be durably appended to the log."""


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def read_lines(path: Path) -> list[str]:
    """
    Tolerant read:
    - missing file -> []
    - returns raw lines without trailing newlines (blank lines included)
    - undecodable bytes become U+FFFD so only their own line is affected
    - any other OS error -> StorageUnavailable
    """
    path = Path(path)
    if not path.exists():
        return []

    try:
        txt = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise StorageUnavailable(f"Could not read {path}: {e}") from e

    return txt.splitlines()


def append_line(path: Path, line: str) -> None:
    """
    Durable append:
    - creates parent dirs
    - terminates an unterminated last line first, so the new line stays separate
    - writes exactly one line, flush + fsync before returning
    - chmod 0600 best-effort
    Raises StorageWriteFailed if any of the write steps fail.
    """
    path = Path(path)
    if "\n" in line or "\r" in line:
        raise ValueError(f"Log lines cannot contain newlines: {line!r}")

    payload = (line + "\n").encode("utf-8")
    try:
        _ensure_parent(path)
        with open(path, "a+b") as f:
            if f.seek(0, os.SEEK_END) > 0:
                f.seek(-1, os.SEEK_END)
                if f.read(1) not in (b"\n", b"\r"):
                    payload = b"\n" + payload
            # append mode: the write lands at the end whatever the read position
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        raise StorageWriteFailed(f"Could not append to {path}: {e}") from e

    try:
        os.chmod(path, 0o600)
    except OSError:
        pass
