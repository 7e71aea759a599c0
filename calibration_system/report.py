"""
╔══════════════════════════════════════════════════════════════════════╗
║  Reports for calibration runs                                      ║
║    • Text summary per output (with budget in native mode)          ║
║    • JSON document                                                 ║
║    • Benchmark line                                                ║
║    • CSV of outputs and Monte Carlo sample dump                    ║
╚══════════════════════════════════════════════════════════════════════╝
"""

import csv
import json
import logging

import numpy as np

from .propagation import MONTE_CARLO, CalibrationResult, OutputEstimate

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# §1  TEXT REPORT
# ═══════════════════════════════════════════════════════════════════════

class CalibrationReport:
    """Generates formatted summaries of calibration results."""

    WIDTH = 72

    @staticmethod
    def _hline(width=WIDTH):
        return "─" * width

    @staticmethod
    def _dline(width=WIDTH):
        return "═" * width

    @classmethod
    def output_block(cls, est: OutputEstimate, mode: str) -> str:
        lines = []
        p_pct = est.coverage_p * 100
        lo, hi = est.coverage_interval

        lines.append(cls._dline())
        lines.append(f"  {est.name.upper()}  ({mode})")
        lines.append(cls._dline())
        lines.append(f"    Best estimate:            {est.symbol} = {est.mean:.6g} {est.unit}")
        lines.append(f"    Standard uncertainty:     u({est.symbol}) = {est.std:.4g} {est.unit}")
        lines.append(f"    Relative uncertainty:     u_rel = {est.relative_uncertainty*100:.3f}%")
        if est.k is not None:
            lines.append(f"    Coverage factor:          k = {est.k:.3f}")
        lines.append(f"    Expanded uncertainty:     U = {est.expanded:.4g} {est.unit} (p = {p_pct:.0f}%)")
        lines.append(f"    Coverage interval:        [{lo:.6g}, {hi:.6g}] {est.unit}")
        if est.samples is not None:
            lines.append(f"    Sample range:             [{est.min:.6g}, {est.max:.6g}] {est.unit}"
                         f" over {len(est.samples)} samples")

        if est.budget:
            lines.append("")
            lines.append("  UNCERTAINTY BUDGET")
            lines.append(cls._hline())
            lines.append(
                f"  {'Var':<6} {'Value':<12} {'Unit':<5} {'u(xᵢ)':<12} "
                f"{'|cᵢ|':<12} {'Contribution'}"
            )
            lines.append("  " + "-" * 68)
            for row in est.budget:
                pct_bar = "█" * int(row["pct_contribution"] / 5)
                lines.append(
                    f"  {row['variable']:<6} "
                    f"{row['best_value']:<12.6g} "
                    f"{row['unit']:<5} "
                    f"{row['u_input']:<12.4g} "
                    f"{abs(row['sensitivity_coeff']):<12.4g} "
                    f"{row['pct_contribution']:5.1f}%  {pct_bar}"
                )
        lines.append(cls._hline())
        return "\n".join(lines)

    @classmethod
    def generate(cls, result: CalibrationResult) -> str:
        mode = result.mode
        if mode == MONTE_CARLO:
            mode = f"{mode}, {result.config.iterations} iterations"
        return "\n\n".join(cls.output_block(est, mode) for est in result.outputs.values())

    @staticmethod
    def timing(result: CalibrationResult) -> str:
        return f"CPU time used: {result.cpu_time_seconds:f} seconds"


def benchmark_line(result: CalibrationResult) -> str:
    """'<tracked value> <cpu time in microseconds>'"""
    return f"{result.tracked_value:f} {result.cpu_time_us}"


# ═══════════════════════════════════════════════════════════════════════
# §2  JSON
# ═══════════════════════════════════════════════════════════════════════

def _output_dict(est: OutputEstimate) -> dict:
    out = {
        "name": est.name,
        "symbol": est.symbol,
        "unit": est.unit,
        "mean": est.mean,
        "std": est.std,
        "variance": est.variance,
        "expanded_uncertainty": est.expanded,
        "coverage_probability": est.coverage_p,
        "coverage_interval": list(est.coverage_interval),
    }
    if est.k is not None:
        out["coverage_factor"] = est.k
    if est.budget is not None:
        out["budget"] = [
            {
                "variable": row["variable"],
                "best_value": row["best_value"],
                "unit": row["unit"],
                "u_input": row["u_input"],
                "sensitivity_coeff": row["sensitivity_coeff"],
                "pct_contribution": row["pct_contribution"],
            }
            for row in est.budget
        ]
    if est.samples is not None:
        out["min"] = est.min
        out["max"] = est.max
    return out


def to_json_dict(result: CalibrationResult) -> dict:
    doc = {
        "mode": result.mode,
        "output_select": int(result.config.output_select),
        "outputs": [_output_dict(est) for est in result.outputs.values()],
        "tracked": result.tracked.output_name,
        "cpu_time_seconds": result.cpu_time_seconds,
        # native mode is a single pass through the model
        "iterations": result.config.iterations if result.mode == MONTE_CARLO else 1,
    }
    if result.mode == MONTE_CARLO:
        doc["samples"] = result.tracked_samples.tolist()
    return doc


def to_json(result: CalibrationResult, indent: int = 2) -> str:
    return json.dumps(to_json_dict(result), indent=indent)


# ═══════════════════════════════════════════════════════════════════════
# §3  FILES
# ═══════════════════════════════════════════════════════════════════════

CSV_HEADER = ("output", "unit", "mean", "std")


def write_outputs_csv(path, result: CalibrationResult) -> None:
    with open(path, "w", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(CSV_HEADER)
        for est in result.outputs.values():
            writer.writerow([est.name, est.unit, repr(float(est.mean)), repr(float(est.std))])
    logger.info("wrote %d output(s) to %s", len(result.outputs), path)


def save_monte_carlo_samples(path, samples, cpu_time_us: int) -> None:
    """One sample per line, then the CPU time in microseconds."""
    samples = np.asarray(samples, dtype=float)
    with open(path, "w") as fh:
        for x in samples:
            fh.write(f"{float(x)!r}\n")
        fh.write(f"{int(cpu_time_us)}\n")
    logger.info("saved %d monte carlo samples to %s", len(samples), path)


def load_monte_carlo_samples(path) -> tuple:
    """Inverse of save_monte_carlo_samples → (samples, cpu_time_us)."""
    with open(path) as fh:
        lines = [line.strip() for line in fh if line.strip()]
    if not lines:
        raise ValueError(f"{path} holds no Monte Carlo data")
    return np.array([float(x) for x in lines[:-1]]), int(lines[-1])
