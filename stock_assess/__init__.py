"""stock_assess: differentiable numerical routines for fisheries stock assessment."""

__version__ = "0.1.0"

from stock_assess import numerics, config
from stock_assess.numerics import (
    add_comp_noise,
    cr_mort,
    neg_log_logistic_normal,
    posfun,
    solve_baranov_dd,
    square,
)

__all__ = [
    "numerics",
    "config",
    "posfun",
    "square",
    "add_comp_noise",
    "cr_mort",
    "solve_baranov_dd",
    "neg_log_logistic_normal",
    "__version__",
]
