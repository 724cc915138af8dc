"""
Read dependency declarations out of a module's ``Cargo.toml``.

Only reading happens here; removals go through ``cargo rm`` so that the
manifest's formatting is preserved by the tool that owns it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

try:  # py3.11+
    import tomllib as tomli
except ImportError:
    import tomli

from .errors import ManifestError
from .groups import DependencyGroup, ignore_key, manifest_table

MANIFEST_NAME = "Cargo.toml"
# Same location cargo-udeps reads, so existing ignore lists keep working
IGNORE_METADATA_PATH = ("package", "metadata", "cargo-udeps", "ignore")


@dataclass(frozen=True)
class DependencyEntry:
    name: str
    group: DependencyGroup
    optional: bool = False


@dataclass
class GroupDeclarations:
    entries: List[DependencyEntry] = field(default_factory=list)
    ignored: Tuple[str, ...] = ()

    def names(self) -> List[str]:
        return [e.name for e in self.entries]


def load_manifest(module_dir: Path) -> Dict[str, Any]:
    path = Path(module_dir) / MANIFEST_NAME
    if not path.is_file():
        raise ManifestError(f"manifest not found: {path}")
    try:
        with path.open("rb") as f:
            return tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ManifestError(f"invalid manifest {path}: {e}") from e
    except OSError as e:
        raise ManifestError(f"cannot read manifest {path}: {e}") from e


def read_group(module_dir: Path, group: DependencyGroup) -> GroupDeclarations:
    """Declared dependencies of one group, in manifest order, plus the
    module-local ignore list for that group."""
    data = load_manifest(module_dir)
    return GroupDeclarations(
        entries=_entries(data, group, module_dir),
        ignored=_ignored(data, group, module_dir),
    )


def lookup(
    module_dir: Path, group: DependencyGroup, name: str
) -> Optional[DependencyEntry]:
    """Re-read the current manifest and return ``name`` if still declared."""
    for entry in _entries(load_manifest(module_dir), group, module_dir):
        if entry.name == name:
            return entry
    return None


def _entries(
    data: Dict[str, Any], group: DependencyGroup, module_dir: Path
) -> List[DependencyEntry]:
    table = data.get(manifest_table(group))
    if table is None:
        return []
    if not isinstance(table, dict):
        raise ManifestError(
            f"[{manifest_table(group)}] in {module_dir} is not a table"
        )
    out: List[DependencyEntry] = []
    # dicts keep the manifest's insertion order
    for name, spec in table.items():
        optional = False
        if isinstance(spec, dict):
            flag = spec.get("optional", False)
            if not isinstance(flag, bool):
                raise ManifestError(
                    f"{module_dir}: 'optional' of {name} must be a boolean"
                )
            optional = flag
        out.append(DependencyEntry(name=name, group=group, optional=optional))
    return out


def _ignored(
    data: Dict[str, Any], group: DependencyGroup, module_dir: Path
) -> Tuple[str, ...]:
    node: Any = data
    for key in IGNORE_METADATA_PATH:
        if not isinstance(node, dict):
            return ()
        node = node.get(key)
        if node is None:
            return ()
    if not isinstance(node, dict):
        raise ManifestError(
            f"{module_dir}: {'.'.join(IGNORE_METADATA_PATH)} must be a table"
        )
    names = node.get(ignore_key(group), [])
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise ManifestError(
            f"{module_dir}: ignore list '{ignore_key(group)}' must be an array of strings"
        )
    return tuple(names)
