# File: contextcounter/tests/test_fasta_reader.py
# Version: v0.2.0
"""
Tests for the streaming FASTA reader: events, case folding, multiple sources,
gzip/stream inputs and every failure mode.
"""

from __future__ import annotations

import gzip
import io
import random

import pytest

from contextcounter.core.errors import InputError, ParseError
from contextcounter.core.sequence.fasta_reader import (
    ContigEnd,
    ContigStart,
    FastaReader,
    SequenceChunk,
)


def test_events_in_order(tmp_path):
    p = tmp_path / "a.fa"
    p.write_text(">chr1 some description\nACGT\nac\n\n>chr2\nNNGG\n", encoding="utf-8")
    events = list(FastaReader(p).iter_events())
    assert events == [
        ContigStart("chr1"),
        SequenceChunk("chr1", "ACGT"),
        SequenceChunk("chr1", "AC"),
        ContigEnd("chr1", 6),
        ContigStart("chr2"),
        SequenceChunk("chr2", "NNGG"),
        ContigEnd("chr2", 4),
    ]


def test_iter_bases_and_contigs(write_fasta):
    p = write_fasta({"chr1": "ACGTAC", "chrM": "GGa"}, width=4)
    bases = list(FastaReader(p).iter_bases())
    assert bases[0] == ("chr1", "A")
    assert bases[-1] == ("chrM", "A")
    assert len(bases) == 9
    assert list(FastaReader(p).iter_contigs()) == [("chr1", "ACGTAC"), ("chrM", "GGA")]
    assert list(FastaReader(p).iter_contigs(keep=lambda n: n != "chr1")) == [("chrM", "GGA")]


def test_multiple_sources_and_streams(write_fasta):
    a = write_fasta({"chr1": "ACGT"}, name="a.fa")
    stream = io.StringIO(">chr2\nTTTT\n")
    names = [ev.name for ev in FastaReader([a, stream]) if isinstance(ev, ContigStart)]
    assert names == ["chr1", "chr2"]


def test_gzip_source(tmp_path):
    p = tmp_path / "ref.fa.gz"
    with gzip.open(p, "wt", encoding="utf-8") as fh:
        fh.write(">chr1\nACGTN\n")
    assert list(FastaReader(p).iter_contigs()) == [("chr1", "ACGTN")]


def test_truncated_gzip_is_parse_error(tmp_path):
    rng = random.Random(7)
    seq = "".join(rng.choice("ACGT") for _ in range(6000))
    lines = "\n".join(seq[i : i + 60] for i in range(0, len(seq), 60))
    packed = gzip.compress(f">chr1\n{lines}\n".encode("utf-8"))
    p = tmp_path / "cut.fa.gz"
    p.write_bytes(packed[: len(packed) // 2])
    with pytest.raises(ParseError) as ei:
        list(FastaReader(p).iter_events())
    assert ei.value.source == str(p)
    assert "truncated or corrupt" in str(ei.value)


def test_comment_lines_are_ignored():
    src = io.StringIO(";legacy comment\n>chr1\nAC\n;another\nGT\n")
    assert list(FastaReader(src).iter_contigs()) == [("chr1", "ACGT")]


def test_iupac_ambiguity_letters_are_accepted():
    src = io.StringIO(">chr1\nACRYKMswbdhvnN\n")
    assert list(FastaReader(src).iter_contigs()) == [("chr1", "ACRYKMSWBDHVNN")]


def test_invalid_character_reports_location():
    src = io.StringIO(">chr1\nACGT\nACXT\n")
    with pytest.raises(ParseError) as ei:
        list(FastaReader(src).iter_events())
    err = ei.value
    assert err.contig == "chr1"
    assert err.line == 3
    assert err.column == 3
    assert "'X'" in str(err)


@pytest.mark.parametrize("text", ["ACGT\n>chr1\nACGT\n", ">\nACGT\n", "", "\n\n"])
def test_malformed_fasta(text):
    with pytest.raises(ParseError):
        list(FastaReader(io.StringIO(text)).iter_events())


def test_gap_characters_are_not_bases():
    with pytest.raises(ParseError):
        list(FastaReader(io.StringIO(">chr1\nAC-GT\n")).iter_events())


def test_missing_file_is_input_error(tmp_path):
    with pytest.raises(InputError):
        list(FastaReader(tmp_path / "nope.fa").iter_events())
    with pytest.raises(InputError):
        FastaReader([])


def test_reader_is_lazy():
    src = io.StringIO(">chr1\nACGT\nAC?T\n")
    it = FastaReader(src).iter_events()
    assert next(it) == ContigStart("chr1")
    assert next(it) == SequenceChunk("chr1", "ACGT")
    with pytest.raises(ParseError):
        next(it)
