from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .config_schema import validate_config
from .errors import ConfigError
from .verify import DEFAULT_DOC_FILTER

CONFIG_NAME = "depsweep.yaml"


@dataclass
class ToolsCfg:
    cargo: str = "cargo"
    rg: str = "rg"
    git: str = "git"


@dataclass
class SweepConfig:
    output: str = "unused_deps.sh"  # ledger script, relative to the invocation dir
    log_dir: Optional[str] = None  # per-command logs; off by default
    doc_filter: str = DEFAULT_DOC_FILTER
    tools: ToolsCfg = field(default_factory=ToolsCfg)


def load_config(base_dir: Path) -> SweepConfig:
    """Defaults, overridden by ``depsweep.yaml`` in ``base_dir`` when present."""
    cfg = SweepConfig()
    p = Path(base_dir) / CONFIG_NAME
    if not p.exists():
        return cfg
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{p}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: top level must be a mapping")
    try:
        model = validate_config(data)
    except ValidationError as e:
        raise ConfigError(f"{p}: {e}") from e

    cfg.output = model.output
    cfg.log_dir = model.log_dir
    cfg.doc_filter = model.doc_filter
    cfg.tools.cargo = model.tools.cargo
    cfg.tools.rg = model.tools.rg
    cfg.tools.git = model.tools.git
    return cfg
