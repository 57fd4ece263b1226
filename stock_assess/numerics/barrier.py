"""Branch-free selection and the smooth positivity barrier.

Every routine here evaluates all branches so that autograd sees a well
defined graph regardless of which side of a threshold the data falls on.
"""

from typing import NamedTuple, Optional, Union
import torch
from torch import Tensor


Scalar = Union[Tensor, float, int]


class PosfunResult(NamedTuple):
    """Barrier output together with the updated penalty."""
    value: Tensor
    penalty: Tensor


def as_tensor(x, like: Optional[Tensor] = None) -> Tensor:
    """
    Convert x to a tensor without breaking the autograd graph.

    Tensors are returned unchanged. Python numbers and sequences become
    float64 tensors, or take the dtype/device of `like` when given.
    """
    if isinstance(x, Tensor):
        return x
    if like is not None:
        return torch.as_tensor(x, dtype=like.dtype, device=like.device)
    return torch.as_tensor(x, dtype=torch.float64)


def cond_select(cond: Tensor, a: Scalar, b: Scalar) -> Tensor:
    """
    Branch-free conditional: a where cond holds, b elsewhere.

    Both a and b must already be evaluated; only the selection is
    data dependent.
    """
    a = as_tensor(a)
    b = as_tensor(b, like=a)
    return torch.where(cond, a, b)


def posfun(x: Scalar, eps: Scalar, pen: Scalar = 0.0) -> PosfunResult:
    """
    Keep a quantity above eps while preserving its gradient.

    For x >= eps the value passes through. Below the threshold the value
    is reflected to eps / (2 - eps/x) and the penalty grows by
    0.01 * (x - eps)^2.

    Args:
        x: Quantity to protect (any shape).
        eps: Threshold, broadcastable against x.
        pen: Current penalty, broadcastable against x.

    Returns:
        PosfunResult(value, penalty) with the new penalty = pen + increment.

    Note:
        The reflected value exceeds eps only for eps/2 < x < eps.
        The untaken branch is still evaluated, so x = 0 or x = eps/2 give
        non-finite gradients through torch.where.

    Example:
        >>> out = posfun(torch.tensor(0.8), torch.tensor(1.0))
        >>> out.value   # 1 / (2 - 1.25)
        tensor(1.3333)
        >>> out.penalty
        tensor(0.0004)
    """
    x = as_tensor(x)
    eps = as_tensor(eps, like=x)
    pen = as_tensor(pen, like=x)

    reflected = eps / (2.0 - eps / x)
    increment = 0.01 * (x - eps) ** 2

    value = cond_select(x >= eps, x, reflected)
    penalty = pen + cond_select(x < eps, increment, torch.zeros_like(increment))

    return PosfunResult(value, penalty)


def square(x) -> Tensor:
    """x ** 2, element-wise for sequences and tensors."""
    return as_tensor(x) ** 2
