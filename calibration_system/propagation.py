"""
Drivers that push the input uncertainty through the calibration model.

    native       analytical propagation (UncertaintyEngine): second-order
                 mean, first-order uncertainty
    monte-carlo  sampling loop with streaming aggregation
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import sympy as sp

from . import constants as C
from .inputs import default_inputs
from .sensor import (
    INPUT_SYMBOLS, OutputSelect, as_output_select, calculate_sensor_output, tracked_output,
)
from .stats import RunningStats
from .uncertainty_engine import DerivedQuantity

logger = logging.getLogger(__name__)

NATIVE = "native"
MONTE_CARLO = "monte-carlo"

# Inputs that appear as divisors in the differential pressure.
DIVISOR_INPUTS = ("T0", "Pflow")


# ═══════════════════════════════════════════════════════════════════════
# §1  CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class CalibrationConfig:
    """Everything a calibration run needs."""
    output_select: OutputSelect = OutputSelect.ALL
    monte_carlo: bool = False
    iterations: int = C.DEFAULT_MONTE_CARLO_ITERATIONS
    inputs: tuple = field(default_factory=default_inputs)
    coverage_p: float = C.DEFAULT_COVERAGE_PROBABILITY
    seed: Optional[int] = None

    def validate(self) -> "CalibrationConfig":
        self.output_select = as_output_select(self.output_select)
        if self.monte_carlo and self.iterations < 1:
            raise ValueError(f"Monte Carlo needs at least 1 iteration, got {self.iterations}")
        if not 0 < self.coverage_p < 1:
            raise ValueError(f"Coverage probability must be in (0, 1), got {self.coverage_p}")
        symbols = [d.symbol for d in self.inputs]
        missing = set(INPUT_SYMBOLS) - set(symbols)
        if missing:
            raise ValueError(f"Missing input distribution(s): {sorted(missing)}")
        for d in self.inputs:
            if d.symbol in DIVISOR_INPUTS and d.contains(0.0):
                raise ValueError(
                    f"Interval of {d.symbol} [{d.low:g}, {d.high:g}] contains 0 "
                    f"and {d.symbol} is a divisor of the calibration model."
                )
        return self

    @property
    def mode(self) -> str:
        return MONTE_CARLO if self.monte_carlo else NATIVE


# ═══════════════════════════════════════════════════════════════════════
# §2  RESULTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class OutputEstimate:
    """Uncertainty statement for one calibrated output."""
    output: OutputSelect
    mean: float
    std: float
    expanded: float                     # half-width of the coverage interval
    coverage_interval: tuple
    coverage_p: float
    k: Optional[float] = None           # coverage factor (native only)
    budget: Optional[list] = None       # native only
    samples: Optional[np.ndarray] = None  # monte-carlo only
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def name(self) -> str:
        return self.output.output_name

    @property
    def symbol(self) -> str:
        return self.output.symbol

    @property
    def unit(self) -> str:
        return self.output.unit

    @property
    def variance(self) -> float:
        return self.std**2

    @property
    def relative_uncertainty(self) -> float:
        if self.mean == 0:
            return float('inf')
        return self.std / abs(self.mean)


@dataclass
class CalibrationResult:
    mode: str
    config: CalibrationConfig
    outputs: dict
    cpu_time_seconds: float

    @property
    def tracked(self) -> OutputSelect:
        return tracked_output(self.config.output_select)

    @property
    def tracked_value(self) -> float:
        return self.outputs[self.tracked].mean

    @property
    def tracked_samples(self) -> Optional[np.ndarray]:
        return self.outputs[self.tracked].samples

    @property
    def cpu_time_us(self) -> int:
        return int(self.cpu_time_seconds * 1_000_000)


# ═══════════════════════════════════════════════════════════════════════
# §3  NATIVE (ANALYTICAL) PROPAGATION
# ═══════════════════════════════════════════════════════════════════════

def build_derived_quantities(config: CalibrationConfig) -> dict:
    """One DerivedQuantity per selected output, built from the shared model."""
    symbols = {d.symbol: sp.Symbol(d.symbol) for d in config.inputs}
    measured = {d.symbol: d.to_measured_quantity() for d in config.inputs}
    expressions = calculate_sensor_output(symbols, config.output_select)

    derived = {}
    for output, expr in expressions.items():
        used = sorted(str(s) for s in sp.sympify(expr).free_symbols)
        variables = {k: measured[k] for k in symbols if k in used}
        derived[output] = DerivedQuantity(
            output.output_name, output.symbol, output.unit, expr, variables,
        )
    return derived


def run_native(config: CalibrationConfig) -> CalibrationResult:
    config.validate()
    logger.info("native propagation, outputs=%s", config.output_select.name)

    start = time.process_time()
    outputs = {}
    for output, dq in build_derived_quantities(config).items():
        U, k = dq.expanded_uncertainty(config.coverage_p)
        mean = dq.expected_value
        outputs[output] = OutputEstimate(
            output=output,
            mean=mean,
            std=dq.combined_uncertainty,
            expanded=U,
            coverage_interval=(mean - U, mean + U),
            coverage_p=config.coverage_p,
            k=k,
            budget=dq.uncertainty_budget(),
        )
    cpu = time.process_time() - start

    for est in outputs.values():
        logger.debug("%s = %.6g ± %.4g %s", est.symbol, est.mean, est.std, est.unit)
    return CalibrationResult(NATIVE, config, outputs, cpu)


# ═══════════════════════════════════════════════════════════════════════
# §4  MONTE CARLO
# ═══════════════════════════════════════════════════════════════════════

def run_monte_carlo(config: CalibrationConfig,
                    rng: Optional[np.random.Generator] = None) -> CalibrationResult:
    """
    Sample every input afresh in each iteration, evaluate the model on plain
    floats, keep the samples of each computed output and aggregate them.
    """
    config.validate()
    if rng is None:
        rng = np.random.default_rng(config.seed)
    n = config.iterations
    logger.info("monte carlo propagation, outputs=%s, iterations=%d",
                config.output_select.name, n)

    selected = config.output_select.outputs
    samples = {output: np.empty(n, dtype=float) for output in selected}
    running = {output: RunningStats() for output in selected}

    start = time.process_time()
    for i in range(n):
        values = {d.symbol: float(d.sample(rng)) for d in config.inputs}
        for output, value in calculate_sensor_output(values, config.output_select).items():
            samples[output][i] = value

    # Post-processing is part of the timed Monte Carlo cost.
    for output in selected:
        running[output].extend(samples[output])
    cpu = time.process_time() - start

    lo_q, hi_q = (1 - config.coverage_p) / 2, (1 + config.coverage_p) / 2
    outputs = {}
    for output in selected:
        stats = running[output]
        lo, hi = (float(q) for q in np.quantile(samples[output], [lo_q, hi_q]))
        outputs[output] = OutputEstimate(
            output=output,
            mean=stats.mean,
            std=stats.std,
            expanded=(hi - lo) / 2,
            coverage_interval=(lo, hi),
            coverage_p=config.coverage_p,
            samples=samples[output],
            min=stats.min,
            max=stats.max,
        )
        logger.debug("%s: mean=%.6g std=%.4g over %d samples",
                     output.symbol, stats.mean, stats.std, stats.n)
    return CalibrationResult(MONTE_CARLO, config, outputs, cpu)


def run(config: CalibrationConfig, rng: Optional[np.random.Generator] = None) -> CalibrationResult:
    if config.monte_carlo:
        return run_monte_carlo(config, rng)
    return run_native(config)
