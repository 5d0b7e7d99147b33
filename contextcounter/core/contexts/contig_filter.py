# File: contextcounter/core/contexts/contig_filter.py
# Version: v0.1.1
"""
Per-contig inclusion/exclusion.

Names are matched exactly (case-sensitive) against the first token of the
FASTA header. A contig that is not counted is still read through, so window
extraction never joins the contigs on either side of it.

v0.1.1:
- Optional whitelist (`included`). Cannot be combined with a blacklist.
"""

from __future__ import annotations

from typing import Iterable, Optional

from contextcounter.core.errors import ConfigError


class ContigFilter:
    def __init__(self, excluded: Iterable[str] = (), included: Iterable[str] = ()):
        self.excluded = frozenset(excluded)
        self.included = frozenset(included)
        if self.excluded and self.included:
            raise ConfigError(
                "Both excluded and included contigs were given. A whitelist already "
                "excludes every contig it does not name; set only one of them."
            )

    def accepts(self, contig: str) -> bool:
        return self.skip_reason(contig) is None

    def skip_reason(self, contig: str) -> Optional[str]:
        """Why `contig` is not counted, or None when it is."""
        if contig in self.excluded:
            return "in blacklist"
        if self.included and contig not in self.included:
            return "not in whitelist"
        return None

    def __repr__(self) -> str:
        return f"ContigFilter(excluded={sorted(self.excluded)}, included={sorted(self.included)})"
