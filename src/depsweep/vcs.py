from __future__ import annotations

from pathlib import Path

from .errors import DirtyWorkspaceError, RollbackError, ToolNotFoundError
from .runner import CommandRunner


class Repository:
    """Git operations: the clean-tree precondition and per-candidate rollback."""

    def __init__(self, runner: CommandRunner, git: str = "git"):
        self.runner = runner
        self.git = git

    def ensure_available(self) -> None:
        if self.runner.which(self.git) is None:
            raise ToolNotFoundError(f"'{self.git}' not found on PATH")

    def ensure_clean(self, root: Path) -> None:
        result = self.runner.call([self.git, "status", "--porcelain"], cwd=root)
        if not result.ok or result.output.strip():
            raise DirtyWorkspaceError(
                "Repository is not clean. This tool will only work on a fresh checkout.\n"
                + result.tail()
            )

    def reset(self, module_dir: Path) -> None:
        """Discard every uncommitted change under ``module_dir``'s repository."""
        result = self.runner.call([self.git, "reset", "--hard"], cwd=module_dir)
        if not result.ok:
            raise RollbackError(
                f"git reset --hard failed in {module_dir}; cannot go on\n" + result.tail()
            )
