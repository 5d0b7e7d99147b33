# File: contextcounter/core/contexts/canonical.py
# Version: v0.2.0
"""
Strand canonicalisation of sequence contexts.

A context and its reverse complement describe the same opportunity on the two
strands, so they are folded onto one representative:

- odd widths (3, 5): the form whose centre base is a pyrimidine (C or T),
  the convention of SBS signature catalogs (e.g. A[C]G, not C[G]T);
- width 2: the lexicographically smaller of the pair (AC, not GT).

Windows holding an ambiguity marker (N or any other IUPAC ambiguity letter)
have no canonical form: canonicalize() returns None and the window is not
counted.

v0.2.0:
- Key space is precomputed per width and returned in catalog order
  (centre base, then 5' flank, then 3' flank).
"""

from __future__ import annotations

import itertools
from functools import lru_cache
from typing import Dict, Optional, Tuple

from Bio.Data.IUPACData import ambiguous_dna_letters, unambiguous_dna_letters

from contextcounter.core.errors import ConfigError

SUPPORTED_WIDTHS: Tuple[int, ...] = (2, 3, 5)

BASES = "ACGT"
PYRIMIDINES = frozenset("CT")
AMBIGUITY_MARKERS = frozenset(ambiguous_dna_letters) - frozenset(unambiguous_dna_letters)

CONTEXT_LABELS: Dict[int, str] = {
    2: "dinucleotide",
    3: "trinucleotide",
    5: "pentanucleotide",
}

# Letters outside ACGT translate to themselves.
_RC_MAP = str.maketrans("ACGTacgt", "TGCAtgca")


def check_width(width: int) -> int:
    if width not in SUPPORTED_WIDTHS:
        raise ConfigError(
            f"Unsupported context width {width!r}; expected one of {', '.join(map(str, SUPPORTED_WIDTHS))}"
        )
    return width


@lru_cache(maxsize=None)
def reverse_complement(window: str) -> str:
    """Reverse complement (cached). Ambiguity markers map to themselves."""
    return window.translate(_RC_MAP)[::-1]


def is_unambiguous(window: str) -> bool:
    return all(b in BASES for b in window)


@lru_cache(maxsize=None)
def canonicalize(window: str) -> Optional[str]:
    """
    Return the canonical representative of {window, reverse_complement(window)},
    or None if the window contains anything other than A, C, G, T.

    Input is expected upper-case; the reader normalises case before counting.
    """
    check_width(len(window))
    if not is_unambiguous(window):
        return None
    if len(window) % 2:
        if window[len(window) // 2] in PYRIMIDINES:
            return window
        return reverse_complement(window)
    return min(window, reverse_complement(window))


@lru_cache(maxsize=None)
def canonical_contexts(width: int) -> Tuple[str, ...]:
    """All canonical contexts for `width`, in report order."""
    check_width(width)
    if width % 2 == 0:
        raw = ("".join(p) for p in itertools.product(BASES, repeat=width))
        return tuple(sorted({canonicalize(w) for w in raw}))

    flank = width // 2
    flanks = ["".join(p) for p in itertools.product(BASES, repeat=flank)]
    return tuple(
        five + centre + three
        for centre in sorted(PYRIMIDINES)
        for five in flanks
        for three in flanks
    )


def context_label(width: int) -> str:
    return CONTEXT_LABELS[check_width(width)]
