# File: contextcounter/config/config_counting.py
# Version: v0.2.1
"""
Counting parameters (pydantic model) and their JSON loader.

Example parameters JSON (every key optional):

{
  "widths": [3, 5],
  "excludedContigs": ["chrX", "chrY", "chrM"],
  "workers": 4
}

snake_case keys (`excluded_contigs`, `included_contigs`) are accepted too.

v0.2.1:
- The constructor itself raises ConfigError, so models built directly and
  models built from JSON fail the same way.
v0.2.0:
- `includedContigs` whitelist; mutually exclusive with `excludedContigs`.
- Validation failures surface as ConfigError instead of pydantic's ValidationError.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, FrozenSet, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, conint, field_validator, model_validator

from contextcounter.core.contexts.canonical import SUPPORTED_WIDTHS
from contextcounter.core.contexts.contig_filter import ContigFilter
from contextcounter.core.errors import ConfigError, InputError


class CountingParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    widths: FrozenSet[int] = Field(
        default=frozenset(SUPPORTED_WIDTHS), description="Context widths to count (subset of 2, 3, 5)"
    )
    excluded_contigs: FrozenSet[str] = Field(
        default_factory=frozenset, alias="excludedContigs", description="Contigs read through but not counted"
    )
    included_contigs: FrozenSet[str] = Field(
        default_factory=frozenset, alias="includedContigs", description="If set, the only contigs counted"
    )
    workers: conint(ge=0) = Field(1, description="Parallel contig workers; 0 = auto, 1 = single streaming pass")

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid counting parameters: {_summarise(e)}") from e

    @field_validator("widths")
    @classmethod
    def _known_widths(cls, v: FrozenSet[int]) -> FrozenSet[int]:
        if not v:
            raise ValueError("at least one context width is required")
        bad = sorted(w for w in v if w not in SUPPORTED_WIDTHS)
        if bad:
            raise ValueError(f"unsupported width(s) {bad}; expected a subset of {list(SUPPORTED_WIDTHS)}")
        return v

    @model_validator(mode="after")
    def _one_contig_list(self) -> "CountingParameters":
        if self.excluded_contigs and self.included_contigs:
            raise ValueError("set either excluded or included contigs, not both")
        return self

    def contig_filter(self) -> ContigFilter:
        return ContigFilter(excluded=self.excluded_contigs, included=self.included_contigs)


def _summarise(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        loc = ".".join(str(x) for x in item.get("loc", ())) or "parameters"
        parts.append(f"{loc}: {item.get('msg')}")
    return "; ".join(parts)


def load_counting_parameters(
    path: Optional[Path] = None,
    *,
    defaults: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> CountingParameters:
    """
    Load CountingParameters from JSON, then apply keyword overrides.

    `defaults` sit below the file: they fill only keys the file leaves out
    (under either their field name or alias).

    Overrides that are None are ignored, so CLI flags left unset fall back to
    the file, then to `defaults`, then to the model defaults.
    """
    data: dict = {}
    if path is not None:
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise InputError(f"Cannot read parameters file {path}: {e.strerror or e}") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Parameters file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Parameters file {path} must hold a JSON object")

    for key, value in (defaults or {}).items():
        field_info = CountingParameters.model_fields.get(key)
        alias = field_info.alias if field_info is not None else None
        if key not in data and (alias is None or alias not in data):
            data[key] = value

    for key, value in overrides.items():
        if value is None:
            continue
        field_info = CountingParameters.model_fields.get(key)
        if field_info is not None and field_info.alias:
            data.pop(field_info.alias, None)
        data[key] = value
    return CountingParameters(**data)
