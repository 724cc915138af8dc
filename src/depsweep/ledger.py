from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple

from .groups import DependencyGroup
from .mutation import removal_args

SCRIPT_HEADER = (
    "#!/bin/sh\n"
    "# Dependencies that could be removed while every module still checked,\n"
    "# built in release mode and compiled its doc examples.\n"
    "# Replay from a checkout matching the one the sweep ran against.\n"
    "set -e\n"
)


@dataclass(frozen=True)
class LedgerEntry:
    module_path: Path
    dependency: str
    group: DependencyGroup
    cargo: str = "cargo"

    @property
    def replay_command(self) -> str:
        rm = " ".join(shlex.quote(a) for a in removal_args(self.cargo, self.dependency, self.group))
        return f"(cd {shlex.quote(str(self.module_path))} && {rm})"


class Ledger:
    """Append-only record of confirmed-safe removals for the session."""

    def __init__(self, cargo: str = "cargo") -> None:
        self.cargo = cargo
        self._entries: List[LedgerEntry] = []

    def record(self, module_path: Path, dependency: str, group: DependencyGroup) -> LedgerEntry:
        entry = LedgerEntry(Path(module_path), dependency, group, self.cargo)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> Tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries)

    def render(self) -> str:
        lines = [SCRIPT_HEADER]
        lines += [e.replay_command + "\n" for e in self._entries]
        return "".join(lines)

    def write(self, path: Path) -> Path:
        p = Path(path)
        p.write_text(self.render(), encoding="utf-8")
        os.chmod(p, 0o755)
        return p
