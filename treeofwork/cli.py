"""Command-line front door for tree-of-work.

Validates the bare-repository argument, optionally enables diagnostic
logging, locates git, and starts the interactive session.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .errors import SetupError
from .git_store import GitStore
from .logging_config import debug_log_path, setup_logging, teardown_logging
from .runtime import run_session

logger = logging.getLogger(__name__)

USAGE = "tow <path-to-bare-repo>"


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="tow",
        usage=USAGE,
        description="List, select and remove the worktrees of a bare git repository.",
    )
    parser.add_argument("repo", help="Path to the bare repository the worktrees belong to.")
    return parser


def _start(repo: Path) -> None:
    if not repo.is_dir():
        raise SetupError(f"not a directory: {repo}")
    git = shutil.which("git")
    if git is None:
        raise SetupError("git not found on PATH")
    logger.debug("using %s against %s", git, repo)
    run_session(GitStore(git, repo))


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the session; exits 1 on setup failures."""
    args = _build_parser().parse_args(argv)

    handler = None
    try:
        log_file = debug_log_path()
        if log_file is not None:
            handler = setup_logging(log_file)
        _start(Path(args.repo))
    except SetupError as exc:
        logger.debug("setup failed: %s", exc)
        print(f"fatal: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    finally:
        if handler is not None:
            teardown_logging(handler)


if __name__ == "__main__":
    main()
