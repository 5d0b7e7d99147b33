# File: contextcounter/core/contexts/batch_counter.py
# Version: v0.2.0
"""
Counting driver: FASTA sources + CountingParameters -> CountReport.

Goals:
- Single streaming pass by default (one FASTA line in memory at a time).
- Optional per-contig parallelism: windows never cross contigs and counting is
  commutative, so each worker fills its own ContextCounter and the partials
  are summed at the end. No shared state, no locks.
- All-or-nothing: any error propagates and no report is returned.

v0.2.0:
- Worker processes instead of threads (the window loop is pure Python and
  holds the GIL). At most `in_flight_per_worker * workers` contigs are
  buffered at once.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from dataclasses import dataclass
from typing import Iterable, Optional, Set, Tuple

from contextcounter.config.config_counting import CountingParameters
from contextcounter.core.contexts.canonical import context_label
from contextcounter.core.contexts.contig_filter import ContigFilter
from contextcounter.core.contexts.counter import ContextCounter
from contextcounter.core.contexts.report import CountReport
from contextcounter.core.sequence.fasta_reader import (
    ContigEnd,
    ContigStart,
    FastaReader,
    FastaSource,
    SequenceChunk,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchOptions:
    """Controls parallelism."""
    workers: int = 1               # 0/None → auto = min(32, os.cpu_count() or 1)
    in_flight_per_worker: int = 2  # contigs buffered per worker


def _auto_workers(workers: int | None) -> int:
    if workers and workers > 0:
        return workers
    return max(1, min(32, os.cpu_count() or 1))


def _source_label(source: FastaSource) -> str:
    return str(getattr(source, "name", source))


# ------------------------
# Serial (streaming) path
# ------------------------

def _count_streaming(reader: FastaReader, cfilter: ContigFilter, widths: Tuple[int, ...]) -> ContextCounter:
    counter = ContextCounter(widths)
    counting = False
    for ev in reader.iter_events():
        if isinstance(ev, SequenceChunk):
            if counting:
                counter.observe_chunk(ev.bases)
        elif isinstance(ev, ContigStart):
            reason = cfilter.skip_reason(ev.name)
            counting = reason is None
            if counting:
                log.info("Contig: %s", ev.name)
            else:
                log.info("Contig: %s (skipped: %s)", ev.name, reason)
        elif isinstance(ev, ContigEnd) and counting:
            counter.end_contig()
            log.debug("Contig %s done (%d bp)", ev.name, ev.length)
    return counter


# ------------------------
# Parallel (per-contig) path
# ------------------------

def _count_contig(seq: str, widths: Tuple[int, ...]) -> ContextCounter:
    counter = ContextCounter(widths)
    counter.count_sequence(seq)
    return counter


def _count_parallel(
    reader: FastaReader,
    cfilter: ContigFilter,
    widths: Tuple[int, ...],
    options: BatchOptions,
) -> ContextCounter:
    n_workers = _auto_workers(options.workers)
    max_pending = max(1, options.in_flight_per_worker) * n_workers
    total = ContextCounter(widths)

    def keep(name: str) -> bool:
        reason = cfilter.skip_reason(name)
        if reason is None:
            log.info("Contig: %s", name)
            return True
        log.info("Contig: %s (skipped: %s)", name, reason)
        return False

    log.info("Counting contigs with %d worker processes", n_workers)
    with ProcessPoolExecutor(max_workers=n_workers) as ex:
        pending: Set[Future] = set()
        for _name, seq in reader.iter_contigs(keep=keep):
            pending.add(ex.submit(_count_contig, seq, widths))
            if len(pending) >= max_pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for f in done:
                    total.merge(f.result())
        for f in pending:
            total.merge(f.result())
    return total


# ------------------------
# Public API
# ------------------------

def count_contexts(
    sources: Iterable[FastaSource] | FastaSource,
    parameters: Optional[CountingParameters] = None,
    *,
    options: BatchOptions | None = None,
) -> CountReport:
    """
    Count canonical contexts of every configured width across all sources.

    `options` overrides the worker count from `parameters` when given.
    """
    params = parameters or CountingParameters()
    opts = options or BatchOptions(workers=params.workers)
    reader = FastaReader(sources)
    cfilter = params.contig_filter()
    widths = tuple(sorted(params.widths))

    if _auto_workers(opts.workers) == 1:
        counter = _count_streaming(reader, cfilter, widths)
    else:
        counter = _count_parallel(reader, cfilter, widths, opts)

    report = CountReport.from_counter(counter, sources=[_source_label(s) for s in reader.sources])
    for w in report.widths:
        log.info(
            "%s contexts: %d counted, %d ambiguous windows skipped",
            context_label(w).capitalize(), report.total(w), report.ambiguous_skipped[w],
        )
    return report
