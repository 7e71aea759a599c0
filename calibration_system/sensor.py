"""
Calibration model of the FLS110 thermal mass-flow sensor.

    m  = C3·h³ + C2·h² + C1
    dP = m · (Tflow / T0) · (P0 / Pflow)

The functions only use arithmetic operators, so the same code evaluates
plain floats, numpy arrays and sympy symbols.
"""

from enum import IntEnum
from typing import Mapping

from .constants import (
    OUTPUT_NAMES, OUTPUT_SYMBOLS, OUTPUT_UNITS,
    SENSOR_CALIBRATION_C1, SENSOR_CALIBRATION_C2, SENSOR_CALIBRATION_C3,
)

INPUT_SYMBOLS = ("Hxfer", "Tflow", "T0", "Pflow", "P0")


class OutputSelect(IntEnum):
    """Which calibrated output(s) to compute. ALL is one past the last index."""
    MASS_FLOW = 0
    DIFFERENTIAL_PRESSURE = 1
    ALL = 2

    @property
    def outputs(self) -> tuple:
        if self is OutputSelect.ALL:
            return (OutputSelect.MASS_FLOW, OutputSelect.DIFFERENTIAL_PRESSURE)
        return (self,)

    @property
    def output_name(self) -> str:
        return OUTPUT_NAMES[self]

    @property
    def symbol(self) -> str:
        return OUTPUT_SYMBOLS[self]

    @property
    def unit(self) -> str:
        return OUTPUT_UNITS[self]


def as_output_select(value) -> OutputSelect:
    try:
        return OutputSelect(int(value))
    except (TypeError, ValueError):
        raise ValueError(
            f"Unknown output select '{value}'. "
            f"Choose from: {[int(s) for s in OutputSelect]}"
        ) from None


def mass_flow(h):
    """Calibrated mass flow (sccm) from the heat power transfer h (W)."""
    return (SENSOR_CALIBRATION_C3 * h**3
            + SENSOR_CALIBRATION_C2 * h**2
            + SENSOR_CALIBRATION_C1)


def differential_pressure(m, t_flow, t_0, p_flow, p_0):
    """Calibrated differential pressure (Pa), scaled from the mass flow."""
    return m * (t_flow / t_0) * (p_0 / p_flow)


def calculate_sensor_output(inputs: Mapping, output_select=OutputSelect.ALL) -> dict:
    """
    Evaluate the calibration model.

    Parameters
    ----------
    inputs : Mapping
        Values keyed by input symbol ("Hxfer", "Tflow", "T0", "Pflow", "P0").
        Only "Hxfer" is needed when just the mass flow is selected.
    output_select : OutputSelect or int
        Output(s) to compute.

    Returns
    -------
    dict
        OutputSelect → calibrated value, holding the selected outputs only.
    """
    select = as_output_select(output_select)

    # Mass flow is needed by both outputs.
    m = mass_flow(inputs["Hxfer"])

    outputs = {}
    if OutputSelect.MASS_FLOW in select.outputs:
        outputs[OutputSelect.MASS_FLOW] = m
    if OutputSelect.DIFFERENTIAL_PRESSURE in select.outputs:
        outputs[OutputSelect.DIFFERENTIAL_PRESSURE] = differential_pressure(
            m, inputs["Tflow"], inputs["T0"], inputs["Pflow"], inputs["P0"]
        )
    return outputs


def tracked_output(output_select) -> OutputSelect:
    """
    The output reported when a run is summarised by a single value.
    With every output selected, that is the last one computed.
    """
    select = as_output_select(output_select)
    return select.outputs[-1]
