"""Uniform input distributions of the raw sensor readings."""

from dataclasses import dataclass

import numpy as np

from . import constants as C
from .uncertainty_engine import MeasuredQuantity


@dataclass(frozen=True)
class InputDistribution:
    """A raw reading known only to lie in [low, high], uniformly."""
    name: str
    symbol: str
    unit: str
    low: float
    high: float

    def __post_init__(self):
        if not (np.isfinite(self.low) and np.isfinite(self.high)):
            raise ValueError(f"Interval of {self.symbol} must be finite, got [{self.low}, {self.high}]")
        if self.low > self.high:
            raise ValueError(f"Interval of {self.symbol} is reversed: low={self.low} > high={self.high}")

    @property
    def center(self) -> float:
        return (self.low + self.high) / 2

    @property
    def half_width(self) -> float:
        return (self.high - self.low) / 2

    @property
    def standard_uncertainty(self) -> float:
        return self.half_width / np.sqrt(3)

    def contains(self, x: float) -> bool:
        return self.low <= x <= self.high

    def sample(self, rng: np.random.Generator, size=None):
        """Draw from Uniform(low, high)."""
        return rng.uniform(self.low, self.high, size=size)

    def to_measured_quantity(self) -> MeasuredQuantity:
        qty = MeasuredQuantity(
            name=self.name, symbol=self.symbol, unit=self.unit, best_value=self.center,
        )
        qty.add_type_b(
            self.half_width,
            description=f"Uniform over [{self.low:g}, {self.high:g}] {self.unit}",
            distribution="rectangular",
            is_half_width=True,
        )
        return qty

    def with_interval(self, low: float, high: float) -> "InputDistribution":
        return InputDistribution(self.name, self.symbol, self.unit, float(low), float(high))


def default_inputs() -> tuple:
    """The five sensor inputs in index order."""
    return (
        InputDistribution("Heat power transfer", "Hxfer", "W", C.HXFER_LOW, C.HXFER_HIGH),
        InputDistribution("Flow temperature", "Tflow", "K", C.TFLOW_LOW, C.TFLOW_HIGH),
        InputDistribution("Temperature at time 0", "T0", "K", C.T0_LOW, C.T0_HIGH),
        InputDistribution("Flow pressure", "Pflow", "Pa", C.PFLOW_LOW, C.PFLOW_HIGH),
        InputDistribution("Pressure at time 0", "P0", "Pa", C.P0_LOW, C.P0_HIGH),
    )


def parse_interval(text: str) -> tuple:
    """'low,high' → (low, high). A single number gives a zero-width interval."""
    parts = [p.strip() for p in text.split(",")]
    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise ValueError(f"Cannot parse interval '{text}', expected 'low,high'") from None
    if len(values) == 1:
        return values[0], values[0]
    if len(values) != 2:
        raise ValueError(f"Cannot parse interval '{text}', expected 'low,high'")
    return values[0], values[1]


def override_inputs(inputs, overrides: dict) -> tuple:
    """Replace intervals by symbol, e.g. {"T0": (273.0, 274.0)}."""
    by_symbol = {d.symbol: d for d in inputs}
    unknown = set(overrides) - set(by_symbol)
    if unknown:
        raise ValueError(f"Unknown input(s) {sorted(unknown)}. Choose from: {list(by_symbol)}")
    return tuple(
        d.with_interval(*overrides[d.symbol]) if d.symbol in overrides else d
        for d in inputs
    )
