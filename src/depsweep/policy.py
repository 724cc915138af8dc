from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from .manifest import DependencyEntry

# Crates whose use is typically behind cfg(...) or a platform/target gate that
# a textual search cannot attribute reliably.
GLOBAL_IGNORES: FrozenSet[str] = frozenset(
    {
        "libc",
        "winapi",
        "windows-sys",
        "wasm-bindgen",
        "js-sys",
        "web-sys",
        "getrandom",
        "console_error_panic_hook",
    }
)

REASON_GLOBAL = "globally ignored"
REASON_OPTIONAL = "optional"
REASON_LOCAL = "ignored by module metadata"


class IgnorePolicy:
    """Decides which candidates are never attempted. Pure, no I/O."""

    def __init__(self, global_ignores: Iterable[str] = GLOBAL_IGNORES):
        self.global_ignores: FrozenSet[str] = frozenset(global_ignores)

    def skip_reason(
        self, entry: DependencyEntry, local_ignores: Iterable[str] = ()
    ) -> Optional[str]:
        if entry.name in self.global_ignores:
            return REASON_GLOBAL
        if entry.optional:
            return REASON_OPTIONAL
        if entry.name in set(local_ignores):
            return REASON_LOCAL
        return None

    def should_skip(
        self, entry: DependencyEntry, local_ignores: Iterable[str] = ()
    ) -> bool:
        return self.skip_reason(entry, local_ignores) is not None
