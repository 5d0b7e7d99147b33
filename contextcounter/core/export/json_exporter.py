# File: contextcounter/core/export/json_exporter.py
# Version: v0.2.0

"""
Export a CountReport to a single JSON file (all widths, totals, sources).
"""

import json
from pathlib import Path

from contextcounter.core.contexts.report import CountReport
from contextcounter.core.export.file_writer import write_text_files


def render_report_json(report: CountReport) -> str:
    """
    {"sources": [...], "contigs_counted": n,
     "widths": {"3": {"context_type": "trinucleotide", "total": n, "ambiguous_skipped": n, "counts": {...}}}}
    """
    return json.dumps(report.to_dict(), indent=2)


def export_report_json(report: CountReport, json_path: Path) -> Path:
    write_text_files({json_path: render_report_json(report)})
    return json_path
