# File: contextcounter/tests/conftest.py
# Version: v0.2.0
"""
Test bootstrap: ensure project root is on sys.path so 'contextcounter.*' imports work
without an editable install, plus small FASTA-writing fixtures.
"""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]  # repo root (../.. from this file)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def write_fasta(tmp_path):
    """write_fasta({"chr1": "ACGT"}, name="x.fa", width=60) -> Path"""

    def _write(records, name="ref.fa", width=60):
        from Bio.Seq import Seq
        from Bio.SeqIO.FastaIO import FastaWriter
        from Bio.SeqRecord import SeqRecord

        path = tmp_path / name
        recs = [SeqRecord(Seq(seq), id=cid, description="") for cid, seq in records.items()]
        with path.open("w", encoding="utf-8") as fh:
            writer = FastaWriter(fh, wrap=width)
            writer.write_file(recs)
        return path

    return _write
