"""
Sensor calibration constants and default input intervals.

The FLS110 coefficients C1, C2 and C3 are the example values published
on page 6 of FL-000986-TN-7 (2022-01-30).
"""

# ═══════════════════════════════════════════════════════════════════════
# §1  CALIBRATION POLYNOMIAL
# ═══════════════════════════════════════════════════════════════════════

SENSOR_CALIBRATION_C1 = 2499.26
SENSOR_CALIBRATION_C2 = 117682.20
SENSOR_CALIBRATION_C3 = -314364.00

# ═══════════════════════════════════════════════════════════════════════
# §2  DEFAULT INPUT INTERVALS  (uniform, low/high)
# ═══════════════════════════════════════════════════════════════════════

HXFER_LOW, HXFER_HIGH = 0.010, 0.050            # W
TFLOW_LOW, TFLOW_HIGH = 293.0, 294.0            # K
T0_LOW, T0_HIGH = 273.0, 273.5                  # K
PFLOW_LOW, PFLOW_HIGH = 420000.00, 425000.00    # Pa
P0_LOW, P0_HIGH = 400000.00, 405000.00          # Pa

# ═══════════════════════════════════════════════════════════════════════
# §3  OUTPUTS
# ═══════════════════════════════════════════════════════════════════════

OUTPUT_NAMES = (
    "Calibrated Mass Flow",
    "Calibrated Differential Pressure",
)
OUTPUT_SYMBOLS = ("m", "dP")
OUTPUT_UNITS = ("sccm", "Pa")

# ═══════════════════════════════════════════════════════════════════════
# §4  RUN DEFAULTS
# ═══════════════════════════════════════════════════════════════════════

DEFAULT_MONTE_CARLO_ITERATIONS = 1000
DEFAULT_SAMPLES_FILE = "data.out"
DEFAULT_COVERAGE_PROBABILITY = 0.95
