from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

# Exit status reported when the executable could not be spawned at all
EXEC_ERROR = 127


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    output: str
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def spawn_failed(self) -> bool:
        return self.returncode == EXEC_ERROR and self.output.startswith("EXEC ERROR")

    def tail(self, lines: int = 20) -> str:
        return "\n".join(self.output.splitlines()[-lines:])


class CommandRunner:
    """Blocking subprocess wrapper.

    Output (stdout + stderr) is captured, never streamed. When ``log_dir`` is
    set every invocation is persisted as ``<log_dir>/<NNNN>-<tool>.log``.
    """

    def __init__(self, log_dir: Optional[Path] = None):
        self.log_dir = Path(log_dir) if log_dir else None
        self._seq = 0

    def which(self, executable: str) -> Optional[str]:
        return shutil.which(executable)

    def call(self, args: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        argv = [str(a) for a in args]
        try:
            proc = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
            )
            out = (proc.stdout or "") + (proc.stderr or "")
            result = CommandResult(tuple(argv), proc.returncode, out, proc.stdout or "")
        except (FileNotFoundError, PermissionError) as e:
            result = CommandResult(
                tuple(argv),
                EXEC_ERROR,
                f"EXEC ERROR: {e} while running: {' '.join(argv)}\n",
            )
        self._write_log(result, cwd)
        return result

    def _write_log(self, result: CommandResult, cwd: Optional[Path]) -> None:
        if self.log_dir is None:
            return
        self._seq += 1
        self.log_dir.mkdir(parents=True, exist_ok=True)
        tool = Path(result.args[0]).name if result.args else "cmd"
        header: List[str] = [
            f"$ {' '.join(result.args)}",
            f"# cwd: {cwd or Path.cwd()}",
            f"# exit: {result.returncode}",
            "",
        ]
        path = self.log_dir / f"{self._seq:04d}-{tool}.log"
        path.write_text("\n".join(header) + result.output, encoding="utf-8")
