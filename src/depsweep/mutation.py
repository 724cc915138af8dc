from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .errors import ToolNotFoundError
from .groups import DependencyGroup, removal_flag
from .outcome import OutcomeKind, VerificationOutcome
from .runner import CommandRunner


def removal_args(cargo: str, dependency: str, group: DependencyGroup) -> List[str]:
    args = [cargo, "rm"]
    flag = removal_flag(group)
    if flag:
        args.append(flag)
    args.append(dependency)
    return args


class MutationApplier:
    """Speculatively removes one dependency from one module via ``cargo rm``.

    The module tree is left altered; the caller must reset it afterwards.
    """

    def __init__(self, runner: CommandRunner, cargo: str = "cargo"):
        self.runner = runner
        self.cargo = cargo

    def ensure_available(self) -> None:
        if self.runner.which(self.cargo) is None:
            raise ToolNotFoundError(f"'{self.cargo}' not found on PATH")
        probe = self.runner.call([self.cargo, "rm", "--help"])
        if not probe.ok:
            raise ToolNotFoundError(
                "'cargo rm' is unavailable (install cargo-edit or use cargo >= 1.66)"
            )

    def remove(
        self, module_dir: Path, dependency: str, group: DependencyGroup
    ) -> Optional[VerificationOutcome]:
        """Return None on success, a TOOLING_ERROR outcome otherwise."""
        result = self.runner.call(
            removal_args(self.cargo, dependency, group), cwd=module_dir
        )
        if result.ok:
            return None
        return VerificationOutcome(
            OutcomeKind.TOOLING_ERROR,
            f"couldn't cargo rm {dependency} in {module_dir} (exit {result.returncode})\n"
            + result.tail(),
        )
