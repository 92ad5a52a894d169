import torch
from typing import Optional, Tuple

from .symmetric import SymmetricSparseMatrix
from .vector import DEFAULT_DTYPE

def coo(n:int,
        density:float=0.1,
        dominant:bool=True,
        generator:Optional[torch.Generator]=None,
        )->Tuple[torch.Tensor,
                 torch.Tensor,
                 torch.Tensor]:
    """
    random symmetric COO matrix generator

    Parameters
    ----------
    n : int
        dimension of the matrix
    density : float, optional
        Density of the off-diagonal part, by default 0.1
    dominant : bool, optional
        Add a diagonal ``2 * sum_j |a_ij| + 1`` making the matrix strictly
        diagonally dominant (hence SPD), by default True
    generator : torch.Generator, optional
        Source of randomness, for reproducible matrices

    Returns
    -------
    Tuple[torch.Tensor, torch.Tensor, torch.Tensor]
        row: torch.Tensor
            [nnz] row indices, both triangles
        col: torch.Tensor
            [nnz] column indices, both triangles
        val: torch.Tensor
            [nnz] values
    """

    assert n > 0, f"n must be positive, got {n}"
    assert 0.0 <= density <= 1.0, f"density must be in [0, 1], got {density}"

    nnz = int(n * n * density)
    row = torch.randint(0, n, (nnz,), generator=generator)
    col = torch.randint(0, n, (nnz,), generator=generator)
    val = torch.randn(nnz, generator=generator, dtype=DEFAULT_DTYPE)
    off = row != col
    A = SymmetricSparseMatrix.from_coo(row[off], col[off], val[off])

    if not dominant:
        return A.row, A.col, A.val

    rowsum = torch.zeros(n, dtype=DEFAULT_DTYPE)
    rowsum.index_add_(0, A.row, A.val.abs())
    diag_idx = torch.arange(n)
    return (torch.cat([A.row, diag_idx]),
            torch.cat([A.col, diag_idx]),
            torch.cat([A.val, 2 * rowsum + 1]))
