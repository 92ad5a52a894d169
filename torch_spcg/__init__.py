"""
torch-spcg: PyTorch Symmetric sparse Preconditioned Conjugate Gradient

Solves sparse symmetric linear systems ``Ax = b`` iteratively without ever
forming a dense matrix.

Pipeline
--------
- entries ``(row, col, value)`` -> SymmetricSparseMatrix (mirrored, sorted, deduplicated)
- SymmetricSparseMatrix -> CompressedRowView (CSR layout for matrix-vector products)
- CompressedRowView + right-hand side + preconditioner -> solve -> SolverResult

Results are deterministic: every reduction is accumulated in a fixed order,
so identical inputs give bit-identical results.

Usage
-----
>>> import torch
>>> from torch_spcg import Entry, SymmetricSparseMatrix, CompressedRowView, solve
>>>
>>> A = SymmetricSparseMatrix.from_entries([
...     Entry(0, 0, 4.0), Entry(0, 1, -1.0), Entry(1, 1, 4.0), Entry(1, 2, -1.0), Entry(2, 2, 4.0),
... ])
>>> view = CompressedRowView.from_matrix(A)
>>> b = torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64)
>>> result = solve(view, b, preconditioner='jacobi', atol=1e-10)
>>> result.completed, result.iterations
(True, 3)
>>>
>>> # One call from entries
>>> from torch_spcg import spsolve
>>> result = spsolve([(0, 0, 4.0), (0, 1, -1.0), (1, 1, 4.0)], b[:2])
"""

from .check import (
    ShapeException,
    DimensionMismatchError,
    InvalidIndexError,
    NonFiniteValueError,
    SingularPreconditionerError,
)

from .vector import (
    as_vector,
    dot,
    add_scaled,
    sub,
    norm,
    DEFAULT_DTYPE,
)

from .symmetric import (
    Entry,
    SymmetricSparseMatrix,
    construct_matrix,
)

from .csr import (
    CompressedRowView,
    build_compressed_view,
    apply,
)

from .preconditioner import (
    Preconditioner,
    IdentityPreconditioner,
    JacobiPreconditioner,
    get_preconditioner,
    PRECONDITIONERS,
    DEFAULT_PRECONDITIONER,
)

from .solver import (
    solve,
    SolverResult,
    ConvergenceWarning,
    DEFAULT_ATOL,
)

from .linear_solve import (
    spsolve,
    spsolve_coo,
)

from .export import (
    to_octave,
    vector_to_octave,
    to_scipy_csr,
    to_triplets,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ShapeException",
    "DimensionMismatchError",
    "InvalidIndexError",
    "NonFiniteValueError",
    "SingularPreconditionerError",
    # Vector arithmetic
    "as_vector",
    "dot",
    "add_scaled",
    "sub",
    "norm",
    "DEFAULT_DTYPE",
    # Storage
    "Entry",
    "SymmetricSparseMatrix",
    "construct_matrix",
    "CompressedRowView",
    "build_compressed_view",
    "apply",
    # Preconditioners
    "Preconditioner",
    "IdentityPreconditioner",
    "JacobiPreconditioner",
    "get_preconditioner",
    "PRECONDITIONERS",
    "DEFAULT_PRECONDITIONER",
    # Solve
    "solve",
    "SolverResult",
    "ConvergenceWarning",
    "DEFAULT_ATOL",
    "spsolve",
    "spsolve_coo",
    # Export
    "to_octave",
    "vector_to_octave",
    "to_scipy_csr",
    "to_triplets",
    # Version
    "__version__",
]
