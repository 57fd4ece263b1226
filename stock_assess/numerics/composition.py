"""Logistic-normal utilities for compositional (simplex-valued) data.

Both routines work in log-ratio space and reduce over the last dimension,
so a batch of compositions can be passed as a (batch, n) tensor.
"""

import torch
from torch import Tensor

from stock_assess.numerics.barrier import as_tensor, square


def _check_same_length(a: Tensor, b: Tensor, names: str) -> None:
    if a.shape[-1] != b.shape[-1]:
        raise ValueError(
            f"{names} must have the same length, got {a.shape[-1]} and {b.shape[-1]}"
        )


def add_comp_noise(input_comp, noise) -> Tensor:
    """
    Perturb a composition with additive logistic-normal noise.

    Noise is added in log space and the unit-sum constraint is restored by
    dividing by the total.

    Args:
        input_comp: Strictly positive proportions, shape (..., n).
            Positivity is not checked.
        noise: Log-scale errors, shape (..., n).

    Returns:
        New composition of shape (..., n) summing to one.

    Example:
        >>> comp = torch.tensor([0.2, 0.3, 0.5])
        >>> add_comp_noise(comp, torch.zeros(3))
        tensor([0.2000, 0.3000, 0.5000])
    """
    input_comp = as_tensor(input_comp)
    noise = as_tensor(noise, like=input_comp)
    _check_same_length(input_comp, noise, "input_comp and noise")

    output_comp = torch.exp(torch.log(input_comp) + noise)
    return output_comp / output_comp.sum(dim=-1, keepdim=True)


def neg_log_logistic_normal(y, p, var) -> Tensor:
    """
    Negative log density of y under a logistic-normal centred at p.

    nld = (N-1)/2 * log(var) + sum_i (log(y_i/ytilde) - log(p_i/ptilde))^2 / (2 var)

    where ytilde and ptilde are geometric means. Constant terms that do not
    depend on y, p or var are omitted.

    Args:
        y: Observed proportions, shape (..., N), strictly positive.
        p: Predicted proportions, shape (..., N), strictly positive.
        var: Variance of the logistic-normal.

    Returns:
        Negative log density, shape (...).

    Reference:
        Schnute and Haigh (2007).
    """
    y = as_tensor(y)
    p = as_tensor(p, like=y)
    var = as_tensor(var, like=y)
    _check_same_length(y, p, "y and p")

    n = y.shape[-1]

    # log(y_i / ytilde) with ytilde = exp(mean(log y))
    log_y = torch.log(y)
    log_p = torch.log(p)
    y_ratio = log_y - log_y.mean(dim=-1, keepdim=True)
    p_ratio = log_p - log_p.mean(dim=-1, keepdim=True)

    nld = (n - 1) * torch.log(var) / 2
    nld = nld + square(y_ratio - p_ratio).sum(dim=-1) / 2 / var

    return nld
