# File: contextcounter/core/contexts/report.py
# Version: v0.2.0
"""
Finalised context counts.

A CountReport holds, for every requested width, the count of every canonical
context of that width. Unseen contexts are present with a count of 0, so
downstream renormalisation can divide by any key without special cases.
Keys are the canonical strings produced by canonical.canonicalize() and rows
come out in canonical.canonical_contexts() order; writers only project them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from contextcounter.core.contexts.canonical import canonical_contexts, context_label
from contextcounter.core.contexts.counter import ContextCounter
from contextcounter.core.errors import ConfigError, ContextCounterError


@dataclass(frozen=True)
class CountReport:
    tables: Mapping[int, Mapping[str, int]]
    sources: Tuple[str, ...] = ()
    ambiguous_skipped: Mapping[int, int] = field(default_factory=dict)
    contigs_counted: int = 0

    def __post_init__(self) -> None:
        frozen = {}
        for width, table in self.tables.items():
            expected = canonical_contexts(width)
            if set(table) != set(expected):
                missing = len(set(expected) - set(table))
                extra = len(set(table) - set(expected))
                raise ContextCounterError(
                    f"Incomplete {context_label(width)} table: {missing} missing, {extra} unexpected keys"
                )
            frozen[width] = MappingProxyType({k: int(table[k]) for k in expected})
        object.__setattr__(self, "tables", MappingProxyType(frozen))
        object.__setattr__(self, "ambiguous_skipped", MappingProxyType(dict(self.ambiguous_skipped)))

    @classmethod
    def from_counter(cls, counter: ContextCounter, sources: Sequence[str] = ()) -> "CountReport":
        return cls(
            tables={w: counter.counts(w) for w in counter.widths},
            sources=tuple(str(s) for s in sources),
            ambiguous_skipped={w: counter.ambiguous_skipped(w) for w in counter.widths},
            contigs_counted=counter.contigs_counted,
        )

    @property
    def widths(self) -> Tuple[int, ...]:
        return tuple(sorted(self.tables))

    def table(self, width: int) -> Mapping[str, int]:
        try:
            return self.tables[width]
        except KeyError:
            raise ConfigError(f"Width {width} was not counted (report widths: {self.widths})") from None

    def __getitem__(self, width: int) -> Mapping[str, int]:
        return self.table(width)

    def total(self, width: int) -> int:
        return sum(self.table(width).values())

    def rows(self, width: int) -> List[Tuple[str, int]]:
        return list(self.table(width).items())

    def merge(self, other: "CountReport") -> "CountReport":
        """Elementwise sum of two reports over the same widths."""
        if other.widths != self.widths:
            raise ConfigError(f"Cannot merge reports over widths {other.widths} and {self.widths}")
        return CountReport(
            tables={
                w: {k: n + other.tables[w][k] for k, n in self.tables[w].items()}
                for w in self.widths
            },
            sources=self.sources + other.sources,
            ambiguous_skipped={
                w: self.ambiguous_skipped.get(w, 0) + other.ambiguous_skipped.get(w, 0)
                for w in self.widths
            },
            contigs_counted=self.contigs_counted + other.contigs_counted,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sources": list(self.sources),
            "contigs_counted": self.contigs_counted,
            "widths": {
                str(w): {
                    "context_type": context_label(w),
                    "total": self.total(w),
                    "ambiguous_skipped": self.ambiguous_skipped.get(w, 0),
                    "counts": dict(self.tables[w]),
                }
                for w in self.widths
            },
        }
