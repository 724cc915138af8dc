from __future__ import annotations

from pathlib import Path
from typing import List

from .errors import ToolNotFoundError
from .runner import CommandRunner


def usage_pattern(dependency: str) -> str:
    """``foo-bar`` is referenced in Rust source as ``foo_bar::``."""
    return r"\b" + dependency.replace("-", "_") + "::"


class UsageOracle:
    """Textual "is this crate referenced?" check backed by ripgrep.

    Over-approximates: the whole module subtree is searched, nested crates
    included, and an rg error counts as "used".
    """

    def __init__(self, runner: CommandRunner, rg: str = "rg"):
        self.runner = runner
        self.rg = rg

    def ensure_available(self) -> None:
        if self.runner.which(self.rg) is None:
            raise ToolNotFoundError(
                f"'{self.rg}' (ripgrep) not found on PATH; it is required to pre-filter candidates"
            )

    def command(self, module_dir: Path, dependency: str) -> List[str]:
        return [
            self.rg,
            "--type",
            "rust",
            "-q",
            "-e",
            usage_pattern(dependency),
            str(module_dir),
        ]

    def is_used(self, module_dir: Path, dependency: str) -> bool:
        result = self.runner.call(self.command(module_dir, dependency))
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        print(
            f"⚠ rg failed for {dependency} in {module_dir} (exit {result.returncode}); treating as used"
        )
        return True
