"""
Preconditioners for the conjugate gradient solver.

A preconditioner approximately solves ``M z = r`` for an easily invertible
``M``. Every variant exposes a single ``apply(r) -> z`` method and is built
once per matrix, then reused across the iterations of one solve.

Available preconditioners:
- 'identity' (alias 'none'): ``M = I``, plain conjugate gradient
- 'jacobi' (alias 'diagonal'): ``M = diag(A)``
"""

import torch
from torch import Tensor
from typing import Callable, Dict, Protocol, Union, runtime_checkable

from .check import check_vector, check_finite, SingularPreconditionerError
from .csr import CompressedRowView
from .symmetric import SymmetricSparseMatrix

MatrixLike = Union[SymmetricSparseMatrix, CompressedRowView]


@runtime_checkable
class Preconditioner(Protocol):
    def apply(self, r: Tensor) -> Tensor:
        ...


class IdentityPreconditioner:
    """``M = I``, returns a copy of the residual."""

    def __init__(self, n: int):
        self.n = n

    @classmethod
    def from_matrix(cls, A: MatrixLike) -> "IdentityPreconditioner":
        return cls(A.n)

    def apply(self, r: Tensor) -> Tensor:
        check_vector("r", r, self.n)
        return r.clone()

    def __repr__(self) -> str:
        return f"IdentityPreconditioner(n={self.n})"


class JacobiPreconditioner:
    """
    Jacobi (diagonal) preconditioner: ``M^{-1} = diag(A)^{-1}``.

    The reciprocals are computed once at construction, a row whose diagonal
    coefficient is zero, not stored, or too small to invert in float64 is
    rejected.

    Parameters
    ----------
    inv_diag : torch.Tensor
        [n] reciprocal of each diagonal coefficient
    """

    def __init__(self, inv_diag: Tensor):
        self.inv_diag = inv_diag

    @classmethod
    def from_matrix(cls, A: MatrixLike) -> "JacobiPreconditioner":
        """
        Raises
        ------
        SingularPreconditionerError
            the diagonal coefficient of some row is zero, or so small that
            its reciprocal overflows
        NonFiniteValueError
            a diagonal coefficient is nan or inf
        """
        diag = A.diagonal()
        check_finite("diagonal", diag)
        inv_diag = 1.0 / diag
        singular = (~torch.isfinite(inv_diag)).nonzero()
        if singular.numel() > 0:
            row = int(singular[0, 0])
            raise SingularPreconditionerError(row, float(diag[row]))
        return cls(inv_diag)

    @property
    def n(self) -> int:
        return self.inv_diag.numel()

    def apply(self, r: Tensor) -> Tensor:
        check_vector("r", r, self.n)
        return self.inv_diag * r

    def __repr__(self) -> str:
        return f"JacobiPreconditioner(n={self.n})"


class _CallablePreconditioner:
    """Adapter for a bare ``r -> z`` function."""

    def __init__(self, fn: Callable[[Tensor], Tensor]):
        self.fn = fn

    def apply(self, r: Tensor) -> Tensor:
        return self.fn(r)


PRECONDITIONERS: Dict[str, Callable[[MatrixLike], Preconditioner]] = {
    'identity': IdentityPreconditioner.from_matrix,
    'none': IdentityPreconditioner.from_matrix,
    'jacobi': JacobiPreconditioner.from_matrix,
    'diagonal': JacobiPreconditioner.from_matrix,
}

DEFAULT_PRECONDITIONER = 'identity'


def get_preconditioner(
    A: MatrixLike,
    name: Union[str, Preconditioner, Callable[[Tensor], Tensor], None] = DEFAULT_PRECONDITIONER,
) -> Preconditioner:
    """
    Get preconditioner by name.

    Parameters
    ----------
    A : SymmetricSparseMatrix or CompressedRowView
        Sparse matrix the preconditioner approximates
    name : str, Preconditioner, callable or None
        A key of ``PRECONDITIONERS``, an object with an ``apply`` method
        (returned as is), a bare ``r -> z`` function, or None for identity.
    """
    if name is None:
        name = DEFAULT_PRECONDITIONER
    if isinstance(name, str):
        if name not in PRECONDITIONERS:
            raise ValueError(f"Unknown preconditioner: {name}. "
                             f"Available: {', '.join(PRECONDITIONERS)}")
        return PRECONDITIONERS[name](A)
    if isinstance(name, Preconditioner):
        return name
    if callable(name):
        return _CallablePreconditioner(name)
    raise TypeError(f"preconditioner must be a name, an object with apply() or a callable, got {type(name).__name__}")
