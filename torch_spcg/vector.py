"""
Dense vector arithmetic used by the conjugate gradient loop.

A vector is a 1D ``torch.float64`` CPU tensor. Every operation allocates its
result, operands are never modified. Reductions accumulate strictly from
left to right so that repeated solves are bit-identical.
"""

import math
import torch
from torch import Tensor
from typing import Union, Sequence

from .check import DimensionMismatchError, check_vector

DEFAULT_DTYPE = torch.float64

VectorLike = Union[Tensor, Sequence[float]]


def as_vector(x: VectorLike) -> Tensor:
    """Copy ``x`` into a new 1D float64 tensor."""
    if isinstance(x, Tensor):
        v = x.detach().to(device="cpu", dtype=DEFAULT_DTYPE).clone()
    else:
        v = torch.tensor(x, dtype=DEFAULT_DTYPE)
    if v.ndim != 1:
        raise DimensionMismatchError("vector", tuple(v.shape), "[n]")
    return v


def zeros(n: int) -> Tensor:
    """New zero vector of length ``n``."""
    return torch.zeros(n, dtype=DEFAULT_DTYPE)


def _check_pair(x: Tensor, y: Tensor):
    if x.ndim != 1:
        raise DimensionMismatchError("x", tuple(x.shape), "[n]")
    check_vector("y", y, x.shape[0])


def sequential_sum(t: Tensor) -> float:
    """Sum of a 1D tensor, accumulated in index order."""
    if t.numel() == 0:
        return 0.0
    # cumsum on CPU is a running accumulation, its last element is the ordered sum
    return torch.cumsum(t, dim=0)[-1].item()


def dot(x: Tensor, y: Tensor) -> float:
    """Inner product ``sum_i x[i]*y[i]``."""
    _check_pair(x, y)
    return sequential_sum(x * y)


def add_scaled(x: Tensor, alpha: float, y: Tensor) -> Tensor:
    """Return ``x + alpha*y``."""
    _check_pair(x, y)
    return x + alpha * y


def sub(x: Tensor, y: Tensor) -> Tensor:
    """Return ``x - y``."""
    _check_pair(x, y)
    return x - y


def norm(x: Tensor) -> float:
    """Euclidean norm ``sqrt(dot(x, x))``."""
    return math.sqrt(dot(x, x))
