# File: contextcounter/cli/count_cli.py
# Version: v0.3.1
"""
CLI: count di/tri/pentanucleotide context opportunities in FASTA files.

Writes <prefix>_dinucleotide.tsv, <prefix>_trinucleotide.tsv and
<prefix>_pentanucleotide.tsv (only the requested widths) to --outdir, and with
--json also <prefix>_contexts.json. Nothing is written unless every input was
read and counted successfully.

Usage:
    python -m contextcounter.cli.count_cli hg38.fa \
        --outdir contexts --skip chrX,chrY,chrM [--widths 3,5] [--workers 4] \
        [--params-json counting.json] [--print-counts] [--json]

v0.3.1:
- TSV and JSON outputs are written as one unit.
- CONTEXTCOUNTER_WORKERS also applies under a --params-json without "workers".
v0.3.0:
- --workers for per-contig parallel counting.
v0.2.0:
- --include whitelist (mutually exclusive with --skip); --params-json.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from contextcounter.config.config_counting import load_counting_parameters
from contextcounter.core.config import settings
from contextcounter.core.contexts.batch_counter import count_contexts
from contextcounter.core.contexts.report import CountReport
from contextcounter.core.errors import ContextCounterError
from contextcounter.core.export.file_writer import write_text_files
from contextcounter.core.export.json_exporter import render_report_json
from contextcounter.core.export.tsv_exporter import format_table, render_report_tsv

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

# ---------- argument helpers ----------

def _csv_list(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _csv_ints(value: str) -> List[int]:
    try:
        return [int(v) for v in _csv_list(value)]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {value!r}") from None


def default_prefix(fasta: str) -> str:
    """File stem of the first input: 'refs/hg38.fa.gz' -> 'hg38'."""
    if fasta == "-":
        return "stdin"
    name = Path(fasta).name
    if name.endswith(".gz"):
        name = name[: -len(".gz")]
    return Path(name).stem or "contexts"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="contextcounter",
        description="Count frequency of di/tri/penta nucleotide contexts in FASTA files",
    )
    p.add_argument("fasta", nargs="+", help="Input FASTA file(s); '-' reads stdin, '.gz' is decompressed")
    p.add_argument("-o", "--outdir", type=Path, default=settings.OUTPUT_DIR,
                   help=f"Folder to write count files (default: {settings.OUTPUT_DIR})")
    p.add_argument("--prefix", default=None, help="Output file prefix (default: stem of the first FASTA)")
    p.add_argument("-p", "--print-counts", action="store_true", help="Also print count tables to stdout")
    p.add_argument("--json", action="store_true", help="Also write <prefix>_contexts.json")
    p.add_argument("--skip", metavar="CONTIG1,CONTIG2", type=_csv_list, action="extend", default=None,
                   help="Contigs to leave out of the counts (commonly chrX,chrY,chrM)")
    p.add_argument("--include", metavar="CONTIG1,CONTIG2", type=_csv_list, action="extend", default=None,
                   help="Only count these contigs (commonly the autosomes). Cannot be combined with --skip")
    p.add_argument("--widths", metavar="2,3,5", type=_csv_ints, default=None,
                   help="Context widths to count (default: 2,3,5)")
    p.add_argument("--workers", type=int, default=None,
                   help=f"Parallel contig workers; 0 = auto (default: {settings.WORKERS})")
    p.add_argument("--params-json", type=Path, default=None, help="Counting parameters JSON")
    p.add_argument("--log-level", dest="log_level", default=settings.LOG_LEVEL.upper(), choices=LOG_LEVELS,
                   help=f"Logging level (default: {settings.LOG_LEVEL.upper()})")
    return p


def run(args: argparse.Namespace, log: logging.Logger) -> CountReport:
    params = load_counting_parameters(
        args.params_json,
        defaults={"workers": settings.WORKERS},
        widths=args.widths,
        excluded_contigs=args.skip,
        included_contigs=args.include,
        workers=args.workers,
    )
    log.info(
        "Widths=%s | skip=%s | include=%s | workers=%d",
        ",".join(map(str, sorted(params.widths))),
        ",".join(sorted(params.excluded_contigs)) or "-",
        ",".join(sorted(params.included_contigs)) or "-",
        params.workers,
    )

    report = count_contexts(args.fasta, params)

    prefix = args.prefix or default_prefix(args.fasta[0])
    outdir = Path(args.outdir)
    log.info("Writing files to: %s", outdir.resolve())
    outputs = render_report_tsv(report, outdir, prefix)
    if args.json:
        outputs[outdir / f"{prefix}_contexts.json"] = render_report_json(report)
    for path in write_text_files(outputs):
        log.info("Wrote %s", path)

    if args.print_counts:
        for width in report.widths:
            sys.stdout.write(format_table(report, width))
            sys.stdout.write("\n")
    return report


def _describe(err: BaseException) -> str:
    causes = []
    cause = err.__cause__
    while cause is not None:
        causes.append(f"Caused by: {cause}")
        cause = cause.__cause__
    return " <= ".join([str(err)] + causes)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=settings.LOG_FORMAT)
    log = logging.getLogger("count_cli")

    log.info("=== contextcounter %s ===", settings.APP_VERSION)
    log.info("FASTA=%s | OUTDIR=%s | LOG=%s", ", ".join(args.fasta), str(args.outdir), args.log_level)

    try:
        run(args, log)
    except ContextCounterError as e:
        log.error("Fatal error: %s", _describe(e))
        raise SystemExit(1)
    raise SystemExit(0)


if __name__ == "__main__":
    main()
