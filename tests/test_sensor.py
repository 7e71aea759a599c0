"""Calibration model: mass flow, differential pressure, output selection."""
import numpy as np
import pytest
import sympy as sp

from calibration_system.sensor import (
    INPUT_SYMBOLS, OutputSelect, as_output_select, calculate_sensor_output,
    differential_pressure, mass_flow, tracked_output,
)

READING = {"Hxfer": 0.03, "Tflow": 293.5, "T0": 273.25, "Pflow": 422500.0, "P0": 402500.0}


class TestMassFlow:

    def test_constant_term_at_zero_heat(self):
        assert mass_flow(0.0) == pytest.approx(2499.26)

    def test_known_value(self):
        # -314364·0.03³ + 117682.2·0.03² + 2499.26
        assert mass_flow(0.03) == pytest.approx(2596.686152, rel=1e-12)

    def test_vectorised(self):
        h = np.array([0.01, 0.03, 0.05])
        out = mass_flow(h)
        assert out.shape == (3,)
        assert out[1] == pytest.approx(mass_flow(0.03))

    def test_symbolic(self):
        h = sp.Symbol("Hxfer")
        expr = mass_flow(h)
        assert float(expr.subs(h, 0.03)) == pytest.approx(mass_flow(0.03))


class TestDifferentialPressure:

    def test_scaling(self):
        assert differential_pressure(100.0, 300.0, 150.0, 200.0, 400.0) == pytest.approx(400.0)

    def test_identity_at_reference_conditions(self):
        assert differential_pressure(2500.0, 290.0, 290.0, 4e5, 4e5) == pytest.approx(2500.0)


class TestCalculateSensorOutput:

    def test_all_outputs(self):
        out = calculate_sensor_output(READING, OutputSelect.ALL)
        assert set(out) == {OutputSelect.MASS_FLOW, OutputSelect.DIFFERENTIAL_PRESSURE}
        m = mass_flow(0.03)
        expected = m * (293.5 / 273.25) * (402500.0 / 422500.0)
        assert out[OutputSelect.DIFFERENTIAL_PRESSURE] == pytest.approx(expected)

    def test_mass_flow_only_needs_heat_transfer(self):
        out = calculate_sensor_output({"Hxfer": 0.03}, OutputSelect.MASS_FLOW)
        assert list(out) == [OutputSelect.MASS_FLOW]

    def test_pressure_only(self):
        out = calculate_sensor_output(READING, 1)
        assert list(out) == [OutputSelect.DIFFERENTIAL_PRESSURE]

    def test_mass_flow_independent_of_selection(self):
        a = calculate_sensor_output(READING, OutputSelect.MASS_FLOW)
        b = calculate_sensor_output(READING, OutputSelect.ALL)
        assert a[OutputSelect.MASS_FLOW] == b[OutputSelect.MASS_FLOW]

    def test_invalid_selection(self):
        with pytest.raises(ValueError):
            calculate_sensor_output(READING, 3)


class TestOutputSelect:

    def test_metadata(self):
        assert OutputSelect.MASS_FLOW.unit == "sccm"
        assert OutputSelect.DIFFERENTIAL_PRESSURE.unit == "Pa"
        assert OutputSelect.MASS_FLOW.output_name == "Calibrated Mass Flow"

    def test_tracked_output_for_all_is_last_computed(self):
        assert tracked_output(OutputSelect.ALL) is OutputSelect.DIFFERENTIAL_PRESSURE
        assert tracked_output(0) is OutputSelect.MASS_FLOW

    def test_as_output_select_rejects_garbage(self):
        with pytest.raises(ValueError):
            as_output_select("flow")

    def test_input_symbols_order(self):
        assert INPUT_SYMBOLS == ("Hxfer", "Tflow", "T0", "Pflow", "P0")
