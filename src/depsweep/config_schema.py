"""
Pydantic schema for ``depsweep.yaml``.

Catches unknown or misspelled keys and wrong types before the values are
merged into the dataclass defaults in ``config``.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    cargo: str = "cargo"
    rg: str = "rg"
    git: str = "git"


class SweepModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    output: str = "unused_deps.sh"
    log_dir: Optional[str] = None
    doc_filter: str = Field(default="__depsweep_no_test_matches_this__", min_length=1)
    tools: ToolsModel = ToolsModel()


def validate_config(data: dict) -> SweepModel:
    """Validate loaded YAML.

    Raises:
        pydantic.ValidationError if validation fails.
    """
    return SweepModel.model_validate(data)
