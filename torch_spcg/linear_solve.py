import warnings
import torch
from torch import Tensor
from typing import Callable, Iterable, Optional, Union

from .csr import CompressedRowView
from .preconditioner import Preconditioner, DEFAULT_PRECONDITIONER
from .solver import solve, SolverResult, DEFAULT_ATOL
from .symmetric import SymmetricSparseMatrix, EntryLike

PreconditionerLike = Union[str, Preconditioner, Callable[[Tensor], Tensor], None]


def _warn_precision(b):
    if isinstance(b, Tensor) and b.dtype != torch.float64:
        warnings.warn("You'd better use float64 to maintain good precision")


def spsolve(entries: Iterable[EntryLike],
            b: Tensor,
            preconditioner: PreconditionerLike = DEFAULT_PRECONDITIONER,
            atol: float = DEFAULT_ATOL,
            maxiter: Optional[int] = None) -> SolverResult:
    """Solve the sparse symmetric linear equation given as ``(row, col, value)`` entries

    .. math::
        Ax = b

    Parameters
    ----------
    entries : Iterable[Entry]
        [nnz] ``(row, col, value)`` contributions, mirrored and deduplicated
    b : torch.Tensor
        [n]
    preconditioner : str, optional
        {'identity', 'jacobi'}, by default "identity"
    atol : float, optional
        , by default 1e-10
    maxiter : int, optional
        , by default n

    Returns
    -------
    SolverResult
    """
    _warn_precision(b)
    A = CompressedRowView.from_matrix(SymmetricSparseMatrix.from_entries(entries))
    return solve(A, b, preconditioner=preconditioner, atol=atol, maxiter=maxiter)


def spsolve_coo(row: Tensor,
                col: Tensor,
                val: Tensor,
                b: Tensor,
                preconditioner: PreconditionerLike = DEFAULT_PRECONDITIONER,
                atol: float = DEFAULT_ATOL,
                maxiter: Optional[int] = None) -> SolverResult:
    """Solve the sparse symmetric linear equation represented in COO format

    Parameters
    ----------
    row : torch.Tensor
        [nnz]
    col : torch.Tensor
        [nnz]
    val : torch.Tensor
        [nnz]
    b : torch.Tensor
        [n]

    Returns
    -------
    SolverResult
    """
    _warn_precision(b)
    A = CompressedRowView.from_matrix(SymmetricSparseMatrix.from_coo(row, col, val))
    return solve(A, b, preconditioner=preconditioner, atol=atol, maxiter=maxiter)
