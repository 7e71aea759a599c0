"""Streaming mean and variance of Monte Carlo samples (Welford's method)."""

from dataclasses import dataclass
from typing import Iterable, NamedTuple

import numpy as np


class MeanAndVariance(NamedTuple):
    mean: float
    variance: float


@dataclass
class RunningStats:
    """Accumulates mean, unbiased variance and range one sample at a time."""

    n: int = 0
    mean: float = 0.0
    m2: float = 0.0
    min: float = float('inf')
    max: float = float('-inf')

    def push(self, x: float) -> None:
        x = float(x)
        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        self.m2 += delta * (x - self.mean)
        if x < self.min:
            self.min = x
        if x > self.max:
            self.max = x

    def extend(self, xs: Iterable[float]) -> None:
        for x in xs:
            self.push(x)

    @property
    def variance(self) -> float:
        if self.n < 2:
            return 0.0
        return self.m2 / (self.n - 1)

    @property
    def std(self) -> float:
        return float(np.sqrt(max(0.0, self.variance)))


def mean_and_variance(samples: Iterable[float]) -> MeanAndVariance:
    stats = RunningStats()
    stats.extend(samples)
    if stats.n == 0:
        raise ValueError("Mean and variance need at least one sample.")
    return MeanAndVariance(stats.mean, stats.variance)
