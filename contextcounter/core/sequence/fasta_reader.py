# File: contextcounter/core/sequence/fasta_reader.py
# Version: v0.3.1
"""
Streaming FASTA reader.

Produces, in source order, one ContigStart per record, one SequenceChunk per
sequence line (upper-cased) and a closing ContigEnd. Only the current line is
held in memory, so whole-genome references can be scanned without loading a
chromosome at once.

Accepted sources: a path (str / Path; '.gz' is decompressed on the fly),
'-' for stdin, or an already open text stream.

Recognised sequence letters are A, C, G, T and the IUPAC ambiguity letters
(N, R, Y, ...), in either case. Anything else is a ParseError.

v0.3.1:
- Truncated or corrupt .gz input is a ParseError.
v0.3.0:
- iter_contigs() materialises one record at a time for the parallel counter.
v0.2.0:
- ';' comment lines are skipped; empty sources are rejected.
"""

from __future__ import annotations

import gzip
import logging
import sys
import zlib
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, Iterable, Iterator, List, Optional, Tuple, Union

from contextcounter.core.contexts.canonical import AMBIGUITY_MARKERS, BASES
from contextcounter.core.errors import InputError, ParseError

log = logging.getLogger(__name__)

FastaSource = Union[str, Path, IO[str]]

VALID_LETTERS = frozenset(BASES) | AMBIGUITY_MARKERS


@dataclass(frozen=True, slots=True)
class ContigStart:
    name: str


@dataclass(frozen=True, slots=True)
class SequenceChunk:
    contig: str
    bases: str


@dataclass(frozen=True, slots=True)
class ContigEnd:
    name: str
    length: int


FastaEvent = Union[ContigStart, SequenceChunk, ContigEnd]


def _is_stream(source: object) -> bool:
    return hasattr(source, "read")


@contextmanager
def _open_source(source: FastaSource) -> Iterator[Tuple[str, IO[str]]]:
    if _is_stream(source):
        yield str(getattr(source, "name", "<stream>")), source  # type: ignore[misc]
        return
    if str(source) == "-":
        yield "<stdin>", sys.stdin
        return

    path = Path(source)
    try:
        if path.suffix == ".gz":
            fh = gzip.open(path, "rt", encoding="utf-8")
        else:
            fh = path.open("r", encoding="utf-8")
    except OSError as e:
        raise InputError(f"Cannot open FASTA file {path}: {e.strerror or e}") from e
    with fh:
        yield str(path), fh


class FastaReader:
    """
    Lazy reader over one or more FASTA sources.

    Not restartable: streams are consumed as they are read. Paths may be
    re-read by iterating again.
    """

    def __init__(self, sources: Union[FastaSource, Iterable[FastaSource]]):
        if isinstance(sources, (str, Path)) or _is_stream(sources):
            sources = [sources]  # type: ignore[list-item]
        self.sources: List[FastaSource] = list(sources)  # type: ignore[arg-type]
        if not self.sources:
            raise InputError("No FASTA input given")

    # --------------------- Public API ---------------------

    def iter_events(self) -> Iterator[FastaEvent]:
        seen: set[str] = set()
        for source in self.sources:
            for ev in self._read_source(source):
                if isinstance(ev, ContigStart):
                    if ev.name in seen:
                        log.warning("Contig %s appears more than once; counts will be summed", ev.name)
                    seen.add(ev.name)
                yield ev

    def iter_bases(self) -> Iterator[Tuple[str, str]]:
        """(contig name, nucleotide) pairs, in file order."""
        for ev in self.iter_events():
            if isinstance(ev, SequenceChunk):
                for base in ev.bases:
                    yield ev.contig, base

    def iter_contigs(self, keep: Optional[Callable[[str], bool]] = None) -> Iterator[Tuple[str, str]]:
        """
        (contig name, full upper-case sequence), one record at a time.

        Records for which `keep(name)` is false are read through (and still
        validated) but neither buffered nor yielded.
        """
        parts: List[str] = []
        wanted = True
        for ev in self.iter_events():
            if isinstance(ev, ContigStart):
                parts = []
                wanted = keep is None or keep(ev.name)
            elif isinstance(ev, SequenceChunk):
                if wanted:
                    parts.append(ev.bases)
            elif wanted:
                yield ev.name, "".join(parts)

    def __iter__(self) -> Iterator[FastaEvent]:
        return self.iter_events()

    # --------------------- Internals ---------------------

    def _read_source(self, source: FastaSource) -> Iterator[FastaEvent]:
        with _open_source(source) as (label, fh):
            log.info("Reading FASTA: %s", label)
            contig: Optional[str] = None
            length = 0
            n_records = 0
            lineno = 0
            try:
                for lineno, raw in enumerate(fh, start=1):
                    line = raw.strip()
                    if not line or line.startswith(";"):
                        continue

                    if line.startswith(">"):
                        if contig is not None:
                            yield ContigEnd(contig, length)
                        fields = line[1:].split()
                        if not fields:
                            raise ParseError("FASTA header without a name", source=label, line=lineno)
                        contig = fields[0]
                        length = 0
                        n_records += 1
                        yield ContigStart(contig)
                        continue

                    if contig is None:
                        raise ParseError(
                            "Sequence data before the first FASTA header", source=label, line=lineno
                        )
                    bases = line.upper()
                    _check_letters(bases, source=label, contig=contig, lineno=lineno)
                    length += len(bases)
                    yield SequenceChunk(contig, bases)
            except UnicodeDecodeError as e:
                raise ParseError(
                    "Input is not a text FASTA file", source=label, contig=contig, line=lineno + 1
                ) from e
            except (EOFError, zlib.error) as e:
                raise ParseError(
                    f"Compressed input is truncated or corrupt: {e}", source=label, contig=contig, line=lineno + 1
                ) from e
            except OSError as e:
                raise InputError(f"Failed reading {label}: {e}") from e

            if contig is not None:
                yield ContigEnd(contig, length)
            if n_records == 0:
                raise ParseError("No FASTA records found", source=label)


def _check_letters(bases: str, *, source: str, contig: str, lineno: int) -> None:
    if VALID_LETTERS.issuperset(bases):
        return
    for col, b in enumerate(bases, start=1):
        if b not in VALID_LETTERS:
            raise ParseError(
                f"Unexpected character {b!r} in sequence",
                source=source, contig=contig, line=lineno, column=col,
            )
