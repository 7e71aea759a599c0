"""Shared fixtures for the calibration tests."""
import numpy as np
import pytest

from calibration_system.inputs import default_inputs
from calibration_system.propagation import CalibrationConfig


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def inputs():
    return default_inputs()


@pytest.fixture
def native_config():
    return CalibrationConfig()


@pytest.fixture
def mc_config():
    return CalibrationConfig(monte_carlo=True, iterations=2000, seed=7)


@pytest.fixture
def point_inputs():
    """Every input collapsed onto the centre of its default interval."""
    return tuple(d.with_interval(d.center, d.center) for d in default_inputs())
