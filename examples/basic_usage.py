#!/usr/bin/env python
"""
Basic Usage Examples for torch-spcg

This example demonstrates:
1. Building a symmetric sparse matrix from entries
2. Matrix-vector products on the compressed row view
3. Solving with plain and Jacobi preconditioned conjugate gradient
4. Exporting the system for a cross-check in Octave
"""

import warnings
import torch
from torch_spcg import (
    Entry,
    construct_matrix,
    build_compressed_view,
    apply,
    solve,
    spsolve,
    ConvergenceWarning,
    to_octave,
    vector_to_octave,
)


# =============================================================================
# 1. Construction
# =============================================================================

def example_1_construct():
    """Only one triangle needs to be given, the mirror is added automatically."""
    A = construct_matrix([
        Entry(0, 0, 1.0),
        Entry(0, 1, 5.0),
        Entry(0, 2, 6.0),
        Entry(1, 1, 2.0),
    ])
    print(f"Created: {A}")
    print(f"Dense form:\n{A.to_dense()}")
    for i in range(A.n):
        print(f"  row {i}: cols={A.indices(i).tolist()} vals={A.values(i).tolist()}")
    return A


# =============================================================================
# 2. Matrix-vector product
# =============================================================================

def example_2_matvec(A):
    view = build_compressed_view(A)
    x = torch.tensor([3.0, 2.0, 1.0], dtype=torch.float64)
    print(f"A @ {x.tolist()} = {apply(view, x).tolist()}")


# =============================================================================
# 3. Solve
# =============================================================================

def example_3_solve(A):
    view = build_compressed_view(A)
    b = torch.tensor([5.0, 6.0, 7.0], dtype=torch.float64)
    result = solve(view, b, preconditioner='identity', atol=1e-8)
    print(f"completed={result.completed} iterations={result.iterations}")
    print(f"x={result.best_guess.tolist()} residual={result.residual:.2e}")


def example_4_jacobi():
    """Jacobi pays off when the diagonal varies a lot."""
    n = 200
    entries = [(i, i, 1.0 + 100.0 * i) for i in range(n)]
    entries += [(i, i + 1, -0.5) for i in range(n - 1)]
    b = torch.ones(n, dtype=torch.float64)

    for name in ['identity', 'jacobi']:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            result = spsolve(entries, b, preconditioner=name, atol=1e-10)
        print(f"  {name:>8}: completed={result.completed} iterations={result.iterations}")


def example_5_breakdown():
    """Row 1 has no entries, so a residual there cannot be reduced."""
    A = construct_matrix([(0, 0, 2.0), (2, 2, 4.0)])
    b = torch.ones(3, dtype=torch.float64)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = solve(A, b)
    print(f"completed={result.completed} iterations={result.iterations} x={result.best_guess.tolist()}")
    for w in caught:
        print(f"  warning: {w.message}")


# =============================================================================
# 4. Export
# =============================================================================

def example_6_export(A):
    print(f"A = {to_octave(A)};")
    print(f"b = {vector_to_octave(torch.tensor([5.0, 6.0, 7.0], dtype=torch.float64))};")
    print("x = A \\ b")


if __name__ == '__main__':
    print("=" * 60)
    print("1. Construction")
    print("=" * 60)
    A = example_1_construct()

    print("\n2. Matrix-vector product")
    example_2_matvec(A)

    print("\n3. Solve")
    example_3_solve(A)

    print("\n4. Identity vs Jacobi")
    example_4_jacobi()

    print("\n5. Breakdown on an isolated row")
    example_5_breakdown()

    print("\n6. Octave export")
    example_6_export(A)
