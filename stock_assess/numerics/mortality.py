"""Total and fishing mortality estimators.

- Chapman-Robson closed-form estimate of Z from a truncated age composition
- Damped Newton-Raphson solution of the Baranov catch equation for a
  population without age structure (delay-difference models)
"""

import logging
from typing import NamedTuple
import torch
from torch import Tensor

from stock_assess.numerics.barrier import as_tensor


logger = logging.getLogger(__name__)


class BaranovSolution(NamedTuple):
    """Output of solve_baranov_dd.

    residual is C minus the catch implied by the returned F; it is reported
    for inspection only and never used to stop the iteration.
    """
    Z: Tensor
    F: Tensor
    residual: Tensor


def cr_mort(age_comp, kage: int, aplus: int, min_obs) -> Tensor:
    """
    Chapman-Robson estimate of total mortality Z.

    Ages are 1-indexed: age a lives at age_comp[a - 1]. Starting at the age
    of full recruitment kage and walking up to the plus group aplus, each
    observation is kept until the first one that is not >= min_obs (a NaN
    also stops the scan); the scan stops there even if older ages are large
    again.

    Args:
        age_comp: Age composition (proportions or counts), shape (A,).
        kage: Age of full selectivity/recruitment.
        aplus: Plus-group age.
        min_obs: Minimum observation kept before truncating.

    Returns:
        Scalar tensor Z = log((1 + abar - 1/N) / abar), or -1 when no
        observations are retained or the mean coded age is zero.

    Raises:
        ValueError: If the age window [kage, aplus] is not inside age_comp.

    References:
        Chapman and Robson (1960); Dunn et al. (2002).
    """
    age_comp = as_tensor(age_comp)
    n_ages = age_comp.shape[0]
    if kage < 1 or aplus < kage or aplus > n_ages:
        raise ValueError(
            f"Invalid age window kage={kage}, aplus={aplus} for {n_ages} age classes"
        )

    retained = []
    abar = torch.zeros((), dtype=age_comp.dtype, device=age_comp.device)

    for a in range(kage - 1, aplus):
        if not age_comp[a] >= min_obs:
            break
        retained.append(age_comp[a])
        abar = abar + (a - kage + 1) * age_comp[a]

    sentinel = torch.full((), -1.0, dtype=age_comp.dtype, device=age_comp.device)
    if not retained:
        logger.debug("cr_mort: no observations >= %s at age %d", min_obs, kage)
        return sentinel

    N = torch.stack(retained).sum()
    abar = abar / N

    if abar == 0:
        return sentinel

    return torch.log((1 + abar - 1 / N) / abar)


def baranov_catch(F, M, B) -> Tensor:
    """Catch predicted by the Baranov equation, B (1 - exp(-Z)) F / Z with Z = M + F."""
    F = as_tensor(F)
    Z = M + F
    return B * (1.0 - torch.exp(-Z)) * F / Z


def solve_baranov_dd(n_iter: int, b_step, C, M, B) -> BaranovSolution:
    """
    Solve the Baranov catch equation C = B (1 - e^-Z) F / Z for F.

    Runs exactly n_iter damped Newton-Raphson steps (none when n_iter <= 0)
    starting from F = C / (C + B). There is no tolerance check, which keeps
    the length of the autograd graph independent of the data. Nothing guards
    against a vanishing Jacobian or F drifting negative; inputs must keep the
    iteration well posed.

    Args:
        n_iter: Number of Newton-Raphson iterations.
        b_step: Fraction of the Newton step taken each iteration.
        C: Observed catch.
        M: Natural mortality.
        B: Biomass.

    Returns:
        BaranovSolution(Z, F, residual) with Z = M + F.

    Example:
        >>> sol = solve_baranov_dd(20, 1.0, C=50.0, M=0.2, B=1000.0)
        >>> float(sol.residual) < 1e-8
        True
    """
    C = as_tensor(C)
    M = as_tensor(M, like=C)
    B = as_tensor(B, like=C)
    b_step = as_tensor(b_step, like=C)

    # Initial approximation
    F = C / (C + B)
    Z = M + F

    for _ in range(n_iter):
        exp_z = torch.exp(-Z)

        # Observed minus predicted catch
        f = C - B * (1.0 - exp_z) * F / Z
        # d f / d F
        J = -B * ((1.0 - exp_z) * M / Z ** 2 + exp_z * F / Z)

        F = F - b_step * f / J
        Z = M + F

    residual = C - baranov_catch(F, M, B)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "solve_baranov_dd: %d iterations, max |residual| = %.3e",
            n_iter, residual.detach().abs().max().item(),
        )

    return BaranovSolution(Z, F, residual)
