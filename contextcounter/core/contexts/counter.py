# File: contextcounter/core/contexts/counter.py
# Version: v0.3.0
"""
Context counting tables, one per window width.

Two ways in:

- observe(width, window): one window, one increment (after canonicalisation);
- observe_chunk(bases) / end_contig(): a contig delivered in arbitrary pieces
  (e.g. FASTA lines). Every width carries its last `width - 1` bases over to
  the next chunk, so windows spanning a line break are counted, and drops them
  at end_contig(), so no window ever spans two contigs.

Raw windows are tallied as seen and folded onto their canonical form when the
table is read. The raw tally is bounded by the alphabet, not by genome length.

v0.3.0:
- merge() for per-contig partial counters.
v0.2.0:
- Ambiguous windows are tallied separately (ambiguous_skipped) for logging.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, Tuple

from contextcounter.core.contexts.canonical import (
    SUPPORTED_WIDTHS,
    canonical_contexts,
    canonicalize,
    check_width,
)
from contextcounter.core.errors import ConfigError

CountTable = Dict[str, int]


class ContextCounter:
    def __init__(self, widths: Iterable[int] = SUPPORTED_WIDTHS):
        ws = sorted({check_width(int(w)) for w in widths})
        if not ws:
            raise ConfigError("At least one context width is required")
        self.widths: Tuple[int, ...] = tuple(ws)
        self._raw: Dict[int, Counter] = {w: Counter() for w in self.widths}
        self._tails: Dict[int, str] = {w: "" for w in self.widths}
        self.contigs_counted = 0

    # --------------------- Counting ---------------------

    def observe(self, width: int, window: str) -> bool:
        """
        Count one window. Returns False when the window holds an ambiguity
        marker and therefore contributes to no context.
        """
        if width not in self._raw:
            raise ConfigError(f"Width {width} is not configured (configured: {self.widths})")
        if len(window) != width:
            raise ConfigError(f"Window {window!r} does not have width {width}")
        window = window.upper()
        self._raw[width][window] += 1
        return canonicalize(window) is not None

    def observe_chunk(self, bases: str) -> None:
        """Count every complete window of every width ending inside `bases`."""
        bases = bases.upper()
        for w in self.widths:
            seq = self._tails[w] + bases
            n = len(seq) - w + 1
            if n > 0:
                self._raw[w].update(seq[i : i + w] for i in range(n))
                self._tails[w] = seq[n:]
            else:
                self._tails[w] = seq

    def end_contig(self) -> None:
        for w in self.widths:
            self._tails[w] = ""
        self.contigs_counted += 1

    def count_sequence(self, seq: str) -> None:
        """Count a whole contig held in memory."""
        self.observe_chunk(seq)
        self.end_contig()

    def merge(self, other: "ContextCounter") -> "ContextCounter":
        """Add `other`'s tallies into this counter (in place) and return self."""
        if other.widths != self.widths:
            raise ConfigError(f"Cannot merge counters over widths {other.widths} into {self.widths}")
        for w in self.widths:
            self._raw[w].update(other._raw[w])
        self.contigs_counted += other.contigs_counted
        return self

    # --------------------- Reading ---------------------

    def counts(self, width: int) -> CountTable:
        """Canonical context -> count, covering the full context space for `width`."""
        if width not in self._raw:
            raise ConfigError(f"Width {width} is not configured (configured: {self.widths})")
        table = dict.fromkeys(canonical_contexts(width), 0)
        for window, n in self._raw[width].items():
            key = canonicalize(window)
            if key is not None:
                table[key] += n
        return table

    def positions_evaluated(self, width: int) -> int:
        """In-bounds windows seen at `width`, ambiguous or not."""
        return sum(self._raw[width].values())

    def ambiguous_skipped(self, width: int) -> int:
        return sum(n for window, n in self._raw[width].items() if canonicalize(window) is None)

    def __repr__(self) -> str:
        return f"ContextCounter(widths={self.widths}, contigs_counted={self.contigs_counted})"
