"""Text, JSON, CSV and sample-file output."""
import csv
import json

import numpy as np
import pytest

from calibration_system.propagation import CalibrationConfig, run_monte_carlo, run_native
from calibration_system.report import (
    CSV_HEADER, CalibrationReport, benchmark_line, load_monte_carlo_samples,
    save_monte_carlo_samples, to_json, write_outputs_csv,
)


@pytest.fixture
def native_result(native_config):
    return run_native(native_config)


@pytest.fixture
def mc_result():
    return run_monte_carlo(CalibrationConfig(monte_carlo=True, iterations=100, seed=5))


class TestTextReport:

    def test_native_report(self, native_result):
        text = CalibrationReport.generate(native_result)
        assert "CALIBRATED MASS FLOW" in text
        assert "CALIBRATED DIFFERENTIAL PRESSURE" in text
        assert "UNCERTAINTY BUDGET" in text
        assert "Coverage factor" in text
        assert "sccm" in text and "Pa" in text

    def test_monte_carlo_report(self, mc_result):
        text = CalibrationReport.generate(mc_result)
        assert "monte-carlo, 100 iterations" in text
        assert "over 100 samples" in text
        assert "UNCERTAINTY BUDGET" not in text

    def test_timing(self, native_result):
        assert CalibrationReport.timing(native_result).startswith("CPU time used: ")


class TestBenchmarkLine:

    def test_format(self, mc_result):
        value, micros = benchmark_line(mc_result).split()
        assert float(value) == pytest.approx(mc_result.tracked_value, abs=1e-6)
        assert int(micros) == mc_result.cpu_time_us


class TestJson:

    def test_native(self, native_result):
        doc = json.loads(to_json(native_result))
        assert doc["mode"] == "native"
        assert doc["iterations"] == 1
        assert doc["cpu_time_seconds"] >= 0.0
        assert doc["output_select"] == 2
        assert [o["unit"] for o in doc["outputs"]] == ["sccm", "Pa"]
        assert "budget" in doc["outputs"][0]
        assert "samples" not in doc
        assert doc["tracked"] == "Calibrated Differential Pressure"

    def test_monte_carlo(self, mc_result):
        doc = json.loads(to_json(mc_result))
        assert doc["iterations"] == 100
        assert len(doc["samples"]) == 100
        out = doc["outputs"][1]
        assert out["variance"] == pytest.approx(out["std"] ** 2)
        assert out["min"] <= out["mean"] <= out["max"]


class TestFiles:

    def test_csv(self, native_result, tmp_path):
        path = tmp_path / "outputs.csv"
        write_outputs_csv(path, native_result)
        with open(path, newline="") as fh:
            rows = list(csv.reader(fh))
        assert tuple(rows[0]) == CSV_HEADER
        assert rows[1][0] == "Calibrated Mass Flow"
        assert float(rows[1][2]) == native_result.outputs[0].mean

    def test_samples_file(self, mc_result, tmp_path):
        path = tmp_path / "data.out"
        save_monte_carlo_samples(path, mc_result.tracked_samples, 1234)
        lines = path.read_text().splitlines()
        assert len(lines) == 101
        assert lines[-1] == "1234"
        samples, cpu_us = load_monte_carlo_samples(path)
        np.testing.assert_array_equal(samples, mc_result.tracked_samples)
        assert cpu_us == 1234

    def test_load_empty_samples_file(self, tmp_path):
        path = tmp_path / "empty.out"
        path.write_text("")
        with pytest.raises(ValueError):
            load_monte_carlo_samples(path)

    def test_csv_into_missing_directory(self, native_result, tmp_path):
        with pytest.raises(OSError):
            write_outputs_csv(tmp_path / "missing" / "out.csv", native_result)
