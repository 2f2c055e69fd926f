from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path

from .paths import normalize_user_name, resolve_data_dir

DEFAULT_USER = "User"


@dataclass
class Settings:
    """Launcher settings for one check-in window."""

    user_name: str
    data_dir: Path
    quote_seed: int | None = None
    breathing_cycles: int = 1
    frame_interval_ms: int = 33
    log_file: Path | None = None
    log_level: int = logging.INFO
    allow_repo_data_path: bool = False

    def __post_init__(self) -> None:
        self.user_name = normalize_user_name(self.user_name)
        self.data_dir = Path(self.data_dir)
        if self.breathing_cycles < 1:
            raise ValueError("breathing_cycles must be >= 1")
        if self.frame_interval_ms < 1:
            raise ValueError("frame_interval_ms must be >= 1")
        if self.log_file is None:
            self.log_file = self.data_dir / "moodcheck.log"

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Settings:
        return cls(
            user_name=args.name,
            data_dir=resolve_data_dir(args.data_dir, args.profile),
            quote_seed=args.seed,
            breathing_cycles=args.breathing_cycles,
            log_file=Path(args.log_file).expanduser().resolve() if args.log_file else None,
            log_level=logging.DEBUG if args.verbose else logging.INFO,
            allow_repo_data_path=args.allow_repo_data_path,
        )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="moodcheck", description="Mental health check-in")
    p.add_argument("--name", default=DEFAULT_USER, help="Whose mood log to open (default: User)")
    p.add_argument("--data-dir", dest="data_dir", default=None, help="Directory holding mood logs")
    p.add_argument("--profile", default=None, help="Profile subdirectory (e.g. dev/test)")
    p.add_argument("--seed", type=int, default=None, help="Seed the quote picker (repeatable quotes)")
    p.add_argument("--breathing-cycles", dest="breathing_cycles", type=int, default=1,
                   help="How many 4-7-8 rounds to run before stopping (default 1)")
    p.add_argument("--log-file", dest="log_file", default=None, help="Log file (default: <data-dir>/moodcheck.log)")
    p.add_argument("--verbose", action="store_true", help="Debug-level logging")
    p.add_argument("--allow-repo-data-path", action="store_true", help="Override safety guard (not recommended)")
    return p


def parse_settings(argv=None) -> Settings:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        return Settings.from_args(args)
    except ValueError as e:
        p.error(str(e))
