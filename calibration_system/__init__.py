"""
Calibrated sensor outputs (mass flow, differential pressure) with
uncertainty propagated either analytically or by Monte Carlo sampling.
"""

__version__ = "0.1.0"

from .inputs import InputDistribution, default_inputs
from .propagation import (
    CalibrationConfig, CalibrationResult, OutputEstimate, run, run_monte_carlo, run_native,
)
from .sensor import OutputSelect, calculate_sensor_output, differential_pressure, mass_flow
from .stats import RunningStats, mean_and_variance
from .uncertainty_engine import DerivedQuantity, MeasuredQuantity, UncertaintySource

__all__ = [
    'InputDistribution', 'default_inputs',
    'CalibrationConfig', 'CalibrationResult', 'OutputEstimate',
    'run', 'run_monte_carlo', 'run_native',
    'OutputSelect', 'calculate_sensor_output', 'differential_pressure', 'mass_flow',
    'RunningStats', 'mean_and_variance',
    'DerivedQuantity', 'MeasuredQuantity', 'UncertaintySource',
]
