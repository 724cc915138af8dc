from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .errors import WorkspaceError
from .runner import CommandRunner


@dataclass(frozen=True)
class Module:
    path: Path
    name: str = ""


@dataclass
class Workspace:
    root: Path
    modules: List[Module] = field(default_factory=list)


def metadata_args(cargo: str = "cargo") -> List[str]:
    return [cargo, "metadata", "--format-version", "1", "--no-deps"]


def parse_metadata(text: str) -> Workspace:
    """Build a Workspace from ``cargo metadata`` JSON.

    Modules follow ``workspace_members`` order.
    """
    try:
        data: Dict[str, Any] = json.loads(text)
    except json.JSONDecodeError as e:
        raise WorkspaceError(f"cargo metadata returned malformed JSON: {e}") from e
    try:
        root = Path(data["workspace_root"])
        members = list(data["workspace_members"])
        by_id = {p["id"]: p for p in data["packages"]}
        modules = [
            Module(Path(by_id[m]["manifest_path"]).resolve().parent, by_id[m]["name"])
            for m in members
        ]
    except (KeyError, TypeError) as e:
        raise WorkspaceError(f"cargo metadata output is missing {e}") from e
    return Workspace(root=root.resolve(), modules=modules)


def discover(runner: CommandRunner, root: Path, cargo: str = "cargo") -> Workspace:
    result = runner.call(metadata_args(cargo), cwd=root)
    if not result.ok:
        raise WorkspaceError(f"cargo metadata failed in {root}\n" + result.tail())
    return parse_metadata(result.stdout)
