#!/usr/bin/env python3
"""
depsweep entrypoint

Run with no arguments from the root of a clean Cargo workspace checkout:

    depsweep

Any argument prints the version banner and usage hint and does nothing else.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import load_config
from .errors import SweepError
from .session import Session

USAGE_EXIT_CODE = 2


def banner() -> str:
    return f"depsweep {__version__}: take away dependencies and see if it still builds"


def usage() -> str:
    return "usage: depsweep   (no arguments; run from the workspace root of a clean checkout)"


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args:
        print(banner())
        print(usage())
        return USAGE_EXIT_CODE

    root = Path.cwd()
    try:
        cfg = load_config(root)
        Session.from_config(root, cfg).run()
    except SweepError as e:
        print(f"❌ {e}", file=sys.stderr)
        return e.exit_code
    return 0
