from __future__ import annotations

from enum import Enum
from typing import Optional


class DependencyGroup(Enum):
    NORMAL = "normal"
    DEVELOPMENT = "development"
    BUILD = "build"


# Processing order within a module
ALL_GROUPS = (DependencyGroup.NORMAL, DependencyGroup.DEVELOPMENT, DependencyGroup.BUILD)


_MANIFEST_TABLES = {
    DependencyGroup.NORMAL: "dependencies",
    DependencyGroup.DEVELOPMENT: "dev-dependencies",
    DependencyGroup.BUILD: "build-dependencies",
}

# Sub-keys of [package.metadata.cargo-udeps.ignore]
_IGNORE_KEYS = {
    DependencyGroup.NORMAL: "normal",
    DependencyGroup.DEVELOPMENT: "development",
    DependencyGroup.BUILD: "build",
}

_REMOVAL_FLAGS: dict[DependencyGroup, Optional[str]] = {
    DependencyGroup.NORMAL: None,
    DependencyGroup.DEVELOPMENT: "--dev",
    DependencyGroup.BUILD: "--build",
}


def _lookup(table: dict, group: DependencyGroup):
    try:
        return table[group]
    except KeyError:
        raise ValueError(f"unknown dependency group: {group!r}") from None


def manifest_table(group: DependencyGroup) -> str:
    """Name of the manifest table holding the group's declarations."""
    return _lookup(_MANIFEST_TABLES, group)


def ignore_key(group: DependencyGroup) -> str:
    """Sub-key of the module-local ignore table for the group."""
    return _lookup(_IGNORE_KEYS, group)


def removal_flag(group: DependencyGroup) -> Optional[str]:
    """Flag passed to ``cargo rm`` for the group (None for normal deps)."""
    return _lookup(_REMOVAL_FLAGS, group)
