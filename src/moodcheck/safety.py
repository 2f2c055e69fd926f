from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def repo_root_for(path: Path) -> Path | None:
    """Closest ancestor of `path` (or `path` itself) holding a .git entry."""
    path = Path(path).expanduser().resolve()
    for candidate in (path, *path.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def files_inside_repos(paths: Iterable[Path]) -> list[tuple[Path, Path]]:
    """(file, repo_root) for every file that would be written inside a git working tree."""
    hits: list[tuple[Path, Path]] = []
    for p in paths:
        root = repo_root_for(Path(p).parent)
        if root is not None:
            hits.append((Path(p), root))
    return hits


def ensure_private_files(paths: Iterable[Path], allow_repo_data_path: bool) -> None:
    """
    Refuse to start when the mood log or the app log would land in a git
    checkout, where a stray `git add` could publish them. Exits with status 2.
    """
    hits = files_inside_repos(paths)
    if not hits:
        return
    if allow_repo_data_path:
        for path, root in hits:
            logger.warning("Writing %s inside git repo %s (override active)", path, root)
        return

    print("🚫 Refusing to write personal mood data inside a git repo:", file=sys.stderr)
    for path, root in hits:
        print(f"   {path}  (repo: {root})", file=sys.stderr)
    print(
        "   Fix: use ~/.config/moodcheck (the default), move --log-file, or pass --allow-repo-data-path",
        file=sys.stderr,
    )
    raise SystemExit(2)
