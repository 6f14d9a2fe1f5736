"""Render configuration.

Schema (all keys optional in YAML):
- open / close: expression markers
- evaluator: registered evaluator name ("python", "jinja")
- separator: joins multi-valued results
- na: text rendered for missing values
- trim: strip first/last blank lines and common indentation
- nested: count nested markers inside expression blocks
- recycle: "cycle" or "strict" line recycling policy
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from interpol.coerce import DEFAULT_NA
from interpol.evaluator import Evaluator, available_evaluators
from interpol.scanner import DEFAULT_CLOSE, DEFAULT_OPEN


class RenderConfig(BaseModel):
    """Options threaded through every render call."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    open: str = Field(default=DEFAULT_OPEN, description="Open marker")
    close: str = Field(default=DEFAULT_CLOSE, description="Close marker")
    transformer: Callable[[str, Mapping[str, Any]], Any] | None = Field(
        default=None,
        description="Transformer for expression code; defaults to plain evaluation",
    )
    evaluator: Any = Field(
        default="python",
        description="Evaluator name or instance used by the default transformer",
    )
    separator: str = Field(default="", description="Joins multi-valued results")
    na: str = Field(default=DEFAULT_NA, description="Rendered for None/NaN values")
    trim: bool = Field(default=False, description="Trim template indentation")
    nested: bool = Field(default=False, description="Allow nested markers in blocks")
    recycle: Literal["cycle", "strict"] = Field(
        default="cycle", description="Line recycling policy for unequal lengths"
    )

    @field_validator("evaluator")
    @classmethod
    def check_evaluator(cls, value: Any) -> Any:
        if isinstance(value, str):
            if value not in available_evaluators():
                known = ", ".join(available_evaluators())
                raise ValueError(f"unknown evaluator {value!r} (known: {known})")
        elif not isinstance(value, Evaluator):
            raise ValueError("evaluator must be a name or implement evaluate()")
        return value

    @model_validator(mode="after")
    def check_markers(self) -> "RenderConfig":
        if not self.open or not self.close:
            raise ValueError("open and close markers must be non-empty")
        if self.nested and self.open == self.close:
            raise ValueError("nested scanning needs distinct open and close markers")
        return self

    def merged(self, **overrides: Any) -> "RenderConfig":
        """Return a validated copy with `overrides` applied."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(overrides)
        return type(self)(**data)


def load_render_config(path: Path) -> RenderConfig:
    """Load a RenderConfig from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return RenderConfig(**data)
