import csv
import math

import pytest

import experiments as exp


def test_generators_are_seeded():
    assert exp.gen_uniform(256, seed=3) == exp.gen_uniform(256, seed=3)
    assert exp.gen_zipf_like(512, alphabet=64, seed=9) == exp.gen_zipf_like(512, alphabet=64, seed=9)
    assert exp.gen_english_like(300, seed=1) != exp.gen_english_like(300, seed=2)


def test_generators_respect_alphabet_and_size():
    data = exp.gen_zipf_like(1000, alphabet=16, seed=0)
    assert len(data) == 1000
    assert max(data) < 16
    assert len(exp.gen_repetitive(200, seed=5)) == 200


def test_generate_dataset_fallback():
    name, data = exp.generate_dataset("nope", 64, seed=1)
    assert name == "nope_fallback_uniform256"
    assert len(data) == 64
    name, data = exp.generate_dataset("single_symbol", 10, seed=1)
    assert name == "single_symbol"
    assert data == b"A" * 10


def test_registry_holds_only_compared_generators():
    assert set(exp.GENERATOR_REGISTRY) == {
        "uniform256", "zipf128", "repetitive90", "repetitive99", "single_symbol", "english_like",
    }
    name, _ = exp.generate_dataset("zipf64", 16, seed=1)
    assert name == "zipf64_fallback_uniform256"


def test_shannon_entropy():
    assert exp.shannon_entropy([5, 5]) == pytest.approx(1.0)
    assert exp.shannon_entropy([0, 7, 0]) == 0.0
    assert exp.shannon_entropy([]) == 0.0


@pytest.mark.parametrize("pipeline", exp.PIPELINES)
def test_run_one_is_correct(pipeline):
    data = exp.gen_english_like(4096, seed=11)
    row = exp.run_one(data, pipeline)
    assert row.correctness_ok == 1
    assert row.pipeline == pipeline
    assert row.file_size_bytes == 4096
    assert row.avg_code_length >= row.entropy_bits
    assert row.avg_code_length < row.entropy_bits + 1
    assert row.encoded_bits == pytest.approx(row.avg_code_length * 4096)


def test_packed_pipeline_sizes():
    data = exp.gen_zipf_like(3000, alphabet=32, seed=4)
    row = exp.run_one(data, "packed")
    assert row.compressed_bytes == math.ceil(row.encoded_bits / 8)
    assert row.compressed_bytes * 8 - row.pad_bits == row.encoded_bits
    assert row.compression_ratio < 1.0


def test_single_symbol_dataset_runs():
    row = exp.run_one(b"A" * 100, "packed")
    assert row.correctness_ok == 1
    assert row.encoded_bits == 100
    assert row.unique_symbols == 1


def test_run_one_bad_pipeline():
    with pytest.raises(ValueError):
        exp.run_one(b"abc", "zip")


def test_csv_and_summary(tmp_path):
    rows = []
    for run_id in (1, 2):
        for pipeline in exp.PIPELINES:
            row = exp.run_one(exp.gen_uniform(512, alphabet=32, seed=run_id), pipeline)
            row.exp_name = "exp1_distribution"
            row.dataset_name = "uniform32"
            row.run_id = run_id
            rows.append(row)

    metrics = tmp_path / "metrics.csv"
    summary = tmp_path / "summary.csv"
    exp.write_csv(metrics, rows)
    exp.group_summary(rows, summary)

    with metrics.open(newline="", encoding="utf-8") as f:
        assert len(list(csv.DictReader(f))) == 4
    with summary.open(newline="", encoding="utf-8") as f:
        grouped = list(csv.DictReader(f))
    assert len(grouped) == 2
    assert {g["pipeline"] for g in grouped} == set(exp.PIPELINES)
    for g in grouped:
        assert g["n_runs"] == "2"
        assert float(g["correctness_ok_rate"]) == 1.0


def test_plots_written(tmp_path):
    rows = []
    for size in (256, 512):
        for pipeline in exp.PIPELINES:
            row = exp.run_one(exp.gen_zipf_like(size, alphabet=16, seed=size), pipeline)
            row.exp_name = "exp2_size_scaling"
            row.dataset_name = "zipf16"
            rows.append(row)
            row = exp.run_one(exp.gen_repetitive(size, seed=size), pipeline)
            row.exp_name = "exp1_distribution"
            row.dataset_name = "repetitive90"
            rows.append(row)

    exp.plot_experiment_1(rows, tmp_path)
    exp.plot_experiment_2(rows, tmp_path)
    assert (tmp_path / "exp1_compression_ratio.png").exists()
    assert (tmp_path / "exp1_code_length.png").exists()
    assert (tmp_path / "exp1_total_time.png").exists()
    assert (tmp_path / "exp2_encode_time_zipf16.png").exists()
    assert (tmp_path / "exp2_build_time_zipf16.png").exists()


def test_main_small_run(tmp_path, capsys):
    outdir = tmp_path / "results"
    rc = exp.main([
        "--outdir", str(outdir),
        "--runs", "1",
        "--exp1_size_kb", "1",
        "--exp1_generators", "zipf128,single_symbol",
        "--no_exp2",
    ])
    assert rc == 0
    assert (outdir / "metrics.csv").exists()
    assert (outdir / "summary.csv").exists()
    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out
