"""Git gateway for the shared bare repository.

Every operation runs ``git -C <bare repo> ...`` and either returns stdout or
raises ``StoreError`` carrying git's own error text.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import StoreError

logger = logging.getLogger(__name__)


class GitStore:
    """Read and mutate the worktrees attached to one bare repository."""

    def __init__(self, git: str, repo_path: Path) -> None:
        self.git = git
        self.repo_path = repo_path

    def _run(self, args: list[str]) -> str:
        command = [self.git, "-C", str(self.repo_path), *args]
        logger.debug("running %s", command)
        try:
            proc = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            logger.debug("could not start %s: %s", command, exc)
            raise StoreError(command, f"cannot run {self.git}: {exc}") from exc

        if proc.returncode != 0:
            message = proc.stderr.strip() or f"git {' '.join(args)} exited with status {proc.returncode}"
            logger.debug("git failed (%d): %s", proc.returncode, message)
            raise StoreError(command, message)
        return proc.stdout

    def list_worktrees(self) -> str:
        """Return the raw ``git worktree list`` report."""
        return self._run(["worktree", "list"])

    def remove_worktree(self, name: str, force: bool = False) -> None:
        """Remove a worktree by name; ``force`` overrides dirty/locked checks."""
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(name)
        self._run(args)

    def delete_branch(self, name: str) -> None:
        # Never forced: unmerged branch history is kept.
        self._run(["branch", "-d", name])
