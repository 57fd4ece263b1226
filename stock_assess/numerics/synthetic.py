"""Synthetic data with known analytical answers, used to validate estimators."""

import torch
from torch import Tensor


def geometric_age_composition(
    Z: float,
    n_ages: int,
    total: float = 1.0,
    dtype: torch.dtype = torch.float64,
) -> Tensor:
    """
    Age composition of an equilibrium population with constant mortality.

    Returns total * (1 - S) * S^a for a = 0..n_ages-1 with S = exp(-Z).
    For large n_ages and total, the Chapman-Robson estimator applied from
    the first age recovers Z.

    Example:
        >>> comp = geometric_age_composition(0.5, n_ages=4)
        >>> comp.shape
        torch.Size([4])
    """
    if n_ages < 1:
        raise ValueError(f"n_ages must be positive, got {n_ages}")

    survival = torch.exp(-torch.tensor(Z, dtype=dtype))
    ages = torch.arange(n_ages, dtype=dtype)
    return total * (1.0 - survival) * survival ** ages
