# File: contextcounter/core/export/tsv_exporter.py
# Version: v0.3.0
"""
TSV exporters for context counts: one file per width, `context<TAB>count` rows
in canonical order.

v0.3.0:
- All width files are written as one unit (file_writer); a failed write leaves
  none of them on disk.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, List

from contextcounter.core.contexts.canonical import context_label
from contextcounter.core.contexts.report import CountReport
from contextcounter.core.export.file_writer import write_text_files

HEADERS = ["context", "count"]


def context_file_path(outdir: Path, prefix: str, width: int) -> Path:
    return outdir / f"{prefix}_{context_label(width)}.tsv"


def format_table(report: CountReport, width: int) -> str:
    """The TSV body for one width, as a string."""
    buf = io.StringIO()
    w = csv.writer(buf, delimiter="\t", lineterminator="\n")
    w.writerow(HEADERS)
    w.writerows(report.rows(width))
    return buf.getvalue()


def render_report_tsv(report: CountReport, outdir: Path, prefix: str) -> Dict[Path, str]:
    """{path: TSV text} for every width, nothing written yet."""
    return {context_file_path(outdir, prefix, width): format_table(report, width) for width in report.widths}


def export_report_tsv(report: CountReport, outdir: Path, prefix: str) -> List[Path]:
    """Write <prefix>_<dinucleotide|trinucleotide|pentanucleotide>.tsv for every width."""
    return write_text_files(render_report_tsv(report, outdir, prefix))
