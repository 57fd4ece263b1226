"""Differentiable numerical routines for stock assessment models."""

from stock_assess.numerics.barrier import PosfunResult, as_tensor, cond_select, posfun, square
from stock_assess.numerics.composition import add_comp_noise, neg_log_logistic_normal
from stock_assess.numerics.mortality import (
    BaranovSolution,
    baranov_catch,
    cr_mort,
    solve_baranov_dd,
)
from stock_assess.numerics.synthetic import geometric_age_composition

__all__ = [
    # Barrier
    "PosfunResult",
    "as_tensor",
    "cond_select",
    "posfun",
    "square",
    # Composition
    "add_comp_noise",
    "neg_log_logistic_normal",
    # Mortality
    "BaranovSolution",
    "baranov_catch",
    "cr_mort",
    "solve_baranov_dd",
    # Synthetic data
    "geometric_age_composition",
]
