"""
╔══════════════════════════════════════════════════════════════════════╗
║  UncertaintyEngine — analytical propagation for sensor calibration ║
║                                                                    ║
║  Supports:                                                         ║
║    • Type B uncertainty from interval or instrument specs          ║
║    • Propagation through a symbolic calibration model              ║
║    • Combined & expanded uncertainty (GUM linear method)           ║
║    • Per-input uncertainty budgets                                 ║
╚══════════════════════════════════════════════════════════════════════╝
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field

import numpy as np
import sympy as sp
from scipy.stats import norm

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════
# §1  DATA STRUCTURES
# ═══════════════════════════════════════════════════════════════════════

# Standard uncertainty = half-width / divisor
DISTRIBUTION_DIVISORS = {
    "normal": 2.0,              # half-width taken as 95% coverage → k=2
    "rectangular": np.sqrt(3),
    "triangular": np.sqrt(6),
    "u-shaped": np.sqrt(2),
}


@dataclass
class UncertaintySource:
    """A single Type B source of uncertainty."""
    name: str
    value: float                  # standard uncertainty u(x)
    description: str = ""
    distribution: str = "rectangular"

    def __repr__(self):
        return f"UncertaintySource({self.name}: u={self.value:.4g}, {self.distribution})"


@dataclass
class MeasuredQuantity:
    """A sensor reading with its uncertainty budget."""
    name: str
    symbol: str
    unit: str
    best_value: float
    sources: list = field(default_factory=list)

    @property
    def combined_uncertainty(self) -> float:
        """Root-sum-of-squares of all uncertainty sources."""
        return float(np.sqrt(sum(s.value**2 for s in self.sources)))

    @property
    def relative_uncertainty(self) -> float:
        if self.best_value == 0:
            return float('inf')
        return self.combined_uncertainty / abs(self.best_value)

    def add_type_b(self, uncertainty: float, name: str = "",
                   description: str = "", distribution: str = "rectangular",
                   is_half_width: bool = True):
        """
        Add Type B uncertainty from non-statistical knowledge.

        Parameters
        ----------
        uncertainty : float
            Half-width 'a' of the distribution when is_half_width=True,
            otherwise the standard uncertainty u(x) itself.
        distribution : str
            "normal"      → u = a / 2
            "rectangular" → u = a / √3
            "triangular"  → u = a / √6
            "u-shaped"    → u = a / √2
        """
        if distribution not in DISTRIBUTION_DIVISORS:
            raise ValueError(
                f"Unknown distribution '{distribution}'. "
                f"Choose from: {list(DISTRIBUTION_DIVISORS.keys())}"
            )
        if uncertainty < 0:
            raise ValueError(f"Uncertainty of {self.name} must be non-negative, got {uncertainty}")

        std_u = uncertainty / DISTRIBUTION_DIVISORS[distribution] if is_half_width else uncertainty

        source = UncertaintySource(
            name=name or f"{self.symbol}_typeB",
            value=float(std_u),
            description=description or f"Interval uncertainty ({distribution} distribution)",
            distribution=distribution,
        )
        self.sources.append(source)
        return source


# ═══════════════════════════════════════════════════════════════════════
# §2  UNCERTAINTY PROPAGATION ENGINE
# ═══════════════════════════════════════════════════════════════════════

class DerivedQuantity:
    """
    A calibrated output derived from measured quantities via a model.
    Uses symbolic differentiation for exact partial derivatives.
    """

    def __init__(self, name: str, symbol: str, unit: str, formula, variables: dict):
        """
        Parameters
        ----------
        formula : str or sympy.Expr
            Sympy-parseable string, e.g. "m * Tflow / T0", or an expression
            already built from sympy.Symbol objects named like the keys of
            `variables`.
        variables : dict
            Mapping of symbol string → MeasuredQuantity.
        """
        self.name = name
        self.symbol = symbol
        self.unit = unit
        self.variables = OrderedDict(variables)

        self.sym_vars = {k: sp.Symbol(k) for k in self.variables}
        if isinstance(formula, str):
            self.expr = sp.sympify(formula, locals=self.sym_vars)
        else:
            self.expr = sp.sympify(formula)
        self.formula_str = str(self.expr)

        unknown = {str(s) for s in self.expr.free_symbols} - set(self.variables)
        if unknown:
            raise ValueError(f"Formula for {name} uses undefined variables: {sorted(unknown)}")

        self.partials = {k: sp.diff(self.expr, sym) for k, sym in self.sym_vars.items()}
        logger.debug("built model %s = %s", symbol, self.formula_str)

    def _substitutions(self) -> dict:
        return {self.sym_vars[k]: v.best_value for k, v in self.variables.items()}

    @property
    def best_value(self) -> float:
        return float(self.expr.evalf(subs=self._substitutions()))

    @property
    def expected_value(self) -> float:
        """
        Second-order mean of the output distribution:
            E[f] ≈ f(μ) + ½ · Σᵢ ∂²f/∂xᵢ² · u(xᵢ)²
        Inputs are uncorrelated, so mixed partials drop out. Exact for a cubic
        in a single symmetrically distributed input.
        """
        subs = self._substitutions()
        curvature = sum(
            float(sp.diff(partial, self.sym_vars[k]).evalf(subs=subs))
            * self.variables[k].combined_uncertainty**2
            for k, partial in self.partials.items()
        )
        return self.best_value + 0.5 * curvature

    def sensitivity_coefficients(self) -> dict:
        """Evaluate ∂f/∂xᵢ at the best-estimate values."""
        subs = self._substitutions()
        return {k: float(partial.evalf(subs=subs)) for k, partial in self.partials.items()}

    @property
    def combined_uncertainty(self) -> float:
        """
        Combined standard uncertainty via linear propagation:
            u_c² = Σᵢ (∂f/∂xᵢ)² · u(xᵢ)²
        Inputs are taken as uncorrelated.
        """
        coeffs = self.sensitivity_coefficients()
        variance = sum(
            (coeffs[k] * qty.combined_uncertainty)**2 for k, qty in self.variables.items()
        )
        return float(np.sqrt(variance))

    @property
    def relative_uncertainty(self) -> float:
        bv = self.best_value
        if bv == 0:
            return float('inf')
        return self.combined_uncertainty / abs(bv)

    def uncertainty_budget(self) -> list:
        """Each input's contribution to the total uncertainty."""
        coeffs = self.sensitivity_coefficients()
        u_c_sq = self.combined_uncertainty**2
        budget = []
        for var_name, qty in self.variables.items():
            c_i = coeffs[var_name]
            u_i = qty.combined_uncertainty
            contribution = (c_i * u_i)**2
            budget.append({
                "variable": var_name,
                "quantity": qty.name,
                "best_value": qty.best_value,
                "unit": qty.unit,
                "u_input": u_i,
                "sensitivity_coeff": c_i,
                "variance_contribution": contribution,
                "pct_contribution": (contribution / u_c_sq * 100) if u_c_sq > 0 else 0.0,
            })
        return budget

    def expanded_uncertainty(self, coverage_p: float = 0.95) -> tuple:
        """
        U = k · u_c for the given coverage probability. Type B sources have
        infinite degrees of freedom, so k is the normal quantile.
        """
        if not 0 < coverage_p < 1:
            raise ValueError(f"Coverage probability must be in (0, 1), got {coverage_p}")
        k = float(norm.ppf((1 + coverage_p) / 2))
        return k * self.combined_uncertainty, k
