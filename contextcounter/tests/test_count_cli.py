# File: contextcounter/tests/test_count_cli.py
# Version: v0.2.0
"""
CLI smoke tests: files written, exit codes, nothing written on failure.
"""

from __future__ import annotations

import gzip
import json
import random

import pytest

from contextcounter.cli import count_cli
from contextcounter.config.config_counting import CountingParameters


def _run(argv):
    with pytest.raises(SystemExit) as ei:
        count_cli.main(argv)
    return ei.value.code


def test_writes_one_tsv_per_width(tmp_path, write_fasta):
    fa = write_fasta({"chr1": "ACGTACGTAC", "chrM": "GGGCCC"}, name="genome.fa")
    out = tmp_path / "contexts"
    code = _run([str(fa), "--outdir", str(out), "--skip", "chrM", "--json"])
    assert code == 0
    names = sorted(p.name for p in out.iterdir())
    assert names == [
        "genome_contexts.json",
        "genome_dinucleotide.tsv",
        "genome_pentanucleotide.tsv",
        "genome_trinucleotide.tsv",
    ]
    data = json.loads((out / "genome_contexts.json").read_text(encoding="utf-8"))
    assert data["widths"]["2"]["total"] == 9
    assert data["contigs_counted"] == 1


def test_widths_and_prefix(tmp_path, write_fasta):
    fa = write_fasta({"chr1": "ACGTACGTAC"}, name="panel.fasta")
    out = tmp_path / "o"
    assert _run([str(fa), "-o", str(out), "--widths", "3", "--prefix", "exome"]) == 0
    assert [p.name for p in out.iterdir()] == ["exome_trinucleotide.tsv"]


def test_print_counts(tmp_path, write_fasta, capsys):
    fa = write_fasta({"chr1": "ACGTACGT"})
    assert _run([str(fa), "-o", str(tmp_path / "o"), "--widths", "2", "-p"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("context\tcount\n")
    assert "AC\t4" in out


def test_parse_error_exits_1_without_outputs(tmp_path):
    fa = tmp_path / "broken.fa"
    fa.write_text(">chr1\nACGT\nAC*T\n", encoding="utf-8")
    out = tmp_path / "o"
    assert _run([str(fa), "-o", str(out)]) == 1
    assert not out.exists()


def test_missing_input_exits_1(tmp_path):
    assert _run([str(tmp_path / "missing.fa"), "-o", str(tmp_path / "o")]) == 1


def test_skip_and_include_conflict(tmp_path, write_fasta):
    fa = write_fasta({"chr1": "ACGT"})
    assert _run([str(fa), "-o", str(tmp_path / "o"), "--skip", "chrM", "--include", "chr1"]) == 1


def test_bad_width_exits_1(tmp_path, write_fasta):
    fa = write_fasta({"chr1": "ACGT"})
    assert _run([str(fa), "-o", str(tmp_path / "o"), "--widths", "2,4"]) == 1


def test_usage_error_exits_2(tmp_path):
    assert _run(["--widths", "x,y", str(tmp_path / "a.fa")]) == 2


@pytest.mark.parametrize(
    "name,prefix",
    [("refs/hg38.fa.gz", "hg38"), ("panel.fasta", "panel"), ("-", "stdin"), ("chr21", "chr21")],
)
def test_default_prefix(name, prefix):
    assert count_cli.default_prefix(name) == prefix


def test_output_failure_writes_nothing(tmp_path, write_fasta):
    fa = write_fasta({"chr1": "ACGTACGTAC"}, name="g.fa")
    out = tmp_path / "o"
    (out / "g_trinucleotide.tsv").mkdir(parents=True)
    assert _run([str(fa), "-o", str(out), "--json"]) == 1
    assert [p.name for p in out.iterdir()] == ["g_trinucleotide.tsv"]


def test_truncated_gzip_exits_1(tmp_path):
    rng = random.Random(11)
    seq = "".join(rng.choice("ACGT") for _ in range(8000))
    packed = gzip.compress(f">chr1\n{seq}\n".encode("utf-8"))
    fa = tmp_path / "ref.fa.gz"
    fa.write_bytes(packed[: len(packed) // 2])
    out = tmp_path / "o"
    assert _run([str(fa), "-o", str(out)]) == 1
    assert not out.exists()


def test_env_workers_apply_under_params_file(tmp_path, write_fasta, monkeypatch):
    fa = write_fasta({"chr1": "ACGTACGT"})
    pj = tmp_path / "params.json"
    pj.write_text('{"widths": [3]}', encoding="utf-8")
    seen = {}

    def fake_count(sources, params):
        seen["params"] = params
        return real_count(sources, CountingParameters(widths=params.widths))

    real_count = count_cli.count_contexts
    monkeypatch.setattr(count_cli, "count_contexts", fake_count)
    monkeypatch.setattr(count_cli.settings, "WORKERS", 3)
    assert _run([str(fa), "-o", str(tmp_path / "o"), "--params-json", str(pj)]) == 0
    assert seen["params"].workers == 3
    assert seen["params"].widths == frozenset({3})
