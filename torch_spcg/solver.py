"""
Preconditioned Conjugate Gradient solver.

Starts from the zero vector and stops as soon as the residual norm drops
below ``atol``. Breakdown (a collapsed search direction) and running out of
iterations are not errors: both are reported through
``SolverResult.completed == False`` together with the last iterate, and a
``ConvergenceWarning`` is emitted.
"""

import warnings
import torch
from torch import Tensor
from typing import Callable, NamedTuple, Optional, Union

from .check import check_vector, check_finite
from .csr import CompressedRowView
from .preconditioner import Preconditioner, get_preconditioner
from .symmetric import SymmetricSparseMatrix
from .vector import VectorLike, as_vector, zeros, dot, add_scaled, sub, norm

DEFAULT_ATOL = 1e-10


class ConvergenceWarning(UserWarning):
    """The solver stopped without meeting the tolerance."""


class SolverResult(NamedTuple):
    """Result of a PCG solve."""
    completed: bool
    iterations: int
    best_guess: Tensor
    residual: float


def _is_breakdown(denom: float, pp: float, scale: float, eps: float) -> bool:
    # p'Ap vanishing relative to |p|^2 |A| means A p carries no information
    return abs(denom) <= eps * pp * scale


def solve(
    A: Union[CompressedRowView, SymmetricSparseMatrix],
    b: VectorLike,
    preconditioner: Union[str, Preconditioner, Callable[[Tensor], Tensor], None] = None,
    atol: float = DEFAULT_ATOL,
    maxiter: Optional[int] = None,
    callback: Optional[Callable[[int, Tensor, float], None]] = None,
) -> SolverResult:
    """
    Solve ``A x = b`` for symmetric ``A`` with preconditioned conjugate gradient.

    Parameters
    ----------
    A : CompressedRowView or SymmetricSparseMatrix
        [n, n] system matrix, a matrix is converted to its compressed view first
    b : torch.Tensor
        [n] right-hand side
    preconditioner : str, Preconditioner, callable or None
        See :func:`torch_spcg.preconditioner.get_preconditioner`. Default identity.
    atol : float
        Stop once ``||r|| < atol``, must be positive
    maxiter : int, optional
        Iteration cap, defaults to n
    callback : callable, optional
        Called as ``callback(k, x, ||r||)`` after each completed step

    Returns
    -------
    SolverResult
        ``completed`` is True only when the tolerance was met. On breakdown
        ``iterations`` counts the steps completed before it, on exhaustion it
        equals ``maxiter``.

    Raises
    ------
    DimensionMismatchError
        ``b`` does not have length n
    NonFiniteValueError
        the matrix or ``b`` holds nan or inf
    SingularPreconditionerError
        the requested preconditioner cannot be built for ``A``
    """
    if isinstance(A, SymmetricSparseMatrix):
        A = CompressedRowView.from_matrix(A)
    n = A.n
    if maxiter is None:
        maxiter = n
    if not atol > 0:
        raise ValueError(f"atol must be positive, got {atol}")
    if maxiter < 0:
        raise ValueError(f"maxiter must be non-negative, got {maxiter}")

    b = as_vector(b)
    check_vector("b", b, n)
    check_finite("b", b)
    A.check_valid()
    M = get_preconditioner(A, preconditioner)

    eps = torch.finfo(A.dtype).eps
    scale = A.max_abs()

    x = zeros(n)
    r = sub(b, A.matvec(x))
    residual = norm(r)
    if residual < atol:
        return SolverResult(True, 0, x, residual)

    z = M.apply(r)
    p = z
    rz = dot(r, z)

    for k in range(maxiter):
        q = A.matvec(p)
        denom = dot(p, q)
        if rz == 0.0 or _is_breakdown(denom, dot(p, p), scale, eps):
            warnings.warn(f"PCG broke down after {k} iterations (p'Ap = {denom:.2e}, residual={residual:.2e})",
                          ConvergenceWarning)
            return SolverResult(False, k, x, residual)

        alpha = rz / denom
        x = add_scaled(x, alpha, p)
        r = sub(r, alpha * q)
        residual = norm(r)

        if callback is not None:
            callback(k + 1, x, residual)

        if residual < atol:
            return SolverResult(True, k + 1, x, residual)

        z = M.apply(r)
        rz_new = dot(r, z)
        beta = rz_new / rz
        p = add_scaled(z, beta, p)
        rz = rz_new

    warnings.warn(f"PCG did not converge in {maxiter} iterations (residual={residual:.2e})",
                  ConvergenceWarning)
    return SolverResult(False, maxiter, x, residual)
