"""
Tests for SymmetricSparseMatrix construction.

Tests cover:
- Canonical layout for full, shuffled, duplicated and very sparse entry lists
- Symmetry and dimension for random entry sets
- Keep-first policy for conflicting duplicates
- Input validation
"""

import pytest
import torch
from itertools import product
import sys

sys.path.insert(0, "..")
from torch_spcg import (
    Entry,
    SymmetricSparseMatrix,
    construct_matrix,
    InvalidIndexError,
    ShapeException,
)
from torch_spcg.random import coo as random_coo


def rows_of(A):
    return ([A.indices(i).tolist() for i in range(A.n)],
            [A.values(i).tolist() for i in range(A.n)])


EXPECTED_INDICES = [[0, 1, 2], [0, 1, 2], [0, 1, 2]]
EXPECTED_VALUES = [
    [1.0, 2.0, 3.0],
    [2.0, 5.0, 6.0],
    [3.0, 6.0, 9.0],
]


# ============================================================================
# Canonical layout
# ============================================================================

class TestConstruct:

    def test_construct(self):
        A = SymmetricSparseMatrix.from_entries([
            Entry(0, 0, 1.0),
            Entry(0, 1, 2.0),
            Entry(0, 2, 3.0),
            Entry(1, 1, 5.0),
            Entry(1, 2, 6.0),
            Entry(2, 2, 9.0),
        ])
        assert A.is_valid()
        assert A.n == 3
        assert A.shape == (3, 3)
        assert A.nnz == 9
        assert rows_of(A) == (EXPECTED_INDICES, EXPECTED_VALUES)

    def test_mixed_construct(self):
        A = SymmetricSparseMatrix.from_entries([
            Entry(2, 2, 9.0),
            Entry(0, 0, 1.0),
            Entry(0, 2, 3.0),
            Entry(1, 1, 5.0),
            Entry(1, 2, 6.0),
            Entry(0, 1, 2.0),
        ])
        assert A.is_valid()
        assert A.n == 3
        assert rows_of(A) == (EXPECTED_INDICES, EXPECTED_VALUES)

    def test_duplicate_construct(self):
        A = SymmetricSparseMatrix.from_entries([
            Entry(0, 1, 2.0),
            Entry(0, 0, 1.0),
            Entry(1, 1, 5.0),
            Entry(2, 1, 6.0),
            Entry(1, 1, 5.0),
            Entry(0, 2, 3.0),
            Entry(2, 2, 9.0),
            Entry(2, 2, 9.0),
            Entry(2, 0, 3.0),
        ])
        assert A.is_valid()
        assert A.n == 3
        assert A.nnz == 9
        assert rows_of(A) == (EXPECTED_INDICES, EXPECTED_VALUES)

    def test_sparse_construct(self):
        A = construct_matrix([
            Entry(10, 5, 10.0),
            Entry(2, 8, 9.0),
        ])
        assert A.is_valid()
        assert A.n == 11
        assert A.nnz == 4
        assert A.indices(2).tolist() == [8]
        assert A.indices(5).tolist() == [10]
        assert A.indices(8).tolist() == [2]
        assert A.indices(10).tolist() == [5]
        assert A.values(2).tolist() == [9.0]
        assert A.values(5).tolist() == [10.0]
        assert A.values(8).tolist() == [9.0]
        assert A.values(10).tolist() == [10.0]
        for i in [0, 1, 3, 4, 6, 7, 9]:
            assert A.indices(i).numel() == 0
            assert A.values(i).numel() == 0

    def test_plain_tuples(self):
        A = construct_matrix([(0, 1, 2.0), (1, 1, 3.0)])
        assert A.get(0, 1) == 2.0
        assert A.get(1, 0) == 2.0
        assert A.get(0, 0) == 0.0
        assert A.get(1, 1) == 3.0

    def test_from_coo_matches_from_entries(self):
        entries = [(2, 0, 1.5), (1, 1, 2.0), (0, 2, 7.0), (2, 2, -1.0)]
        A = SymmetricSparseMatrix.from_entries(entries)
        B = SymmetricSparseMatrix.from_coo(
            torch.tensor([e[0] for e in entries]),
            torch.tensor([e[1] for e in entries]),
            torch.tensor([e[2] for e in entries], dtype=torch.float64),
        )
        assert torch.equal(A.row, B.row)
        assert torch.equal(A.col, B.col)
        assert torch.equal(A.val, B.val)
        assert A.get(0, 2) == 1.5

    def test_empty(self):
        A = construct_matrix([])
        assert A.n == 0
        assert A.nnz == 0
        assert A.to_dense().shape == (0, 0)
        assert A.rowptr.tolist() == [0]

    def test_to_dense_and_diagonal(self):
        A = construct_matrix([(0, 0, 1.0), (0, 1, 5.0), (0, 2, 6.0), (1, 1, 2.0)])
        expected = torch.tensor([[1.0, 5.0, 6.0],
                                 [5.0, 2.0, 0.0],
                                 [6.0, 0.0, 0.0]], dtype=torch.float64)
        torch.testing.assert_close(A.to_dense(), expected)
        torch.testing.assert_close(A.diagonal(), torch.tensor([1.0, 2.0, 0.0], dtype=torch.float64))

    def test_rowptr(self):
        A = construct_matrix([(0, 0, 1.0), (0, 3, 2.0), (2, 2, 4.0)])
        assert A.rowptr.tolist() == [0, 2, 2, 3, 4]


# ============================================================================
# Duplicate policy
# ============================================================================

class TestDuplicates:

    def test_first_entry_wins(self):
        A = construct_matrix([(0, 1, 1.0), (1, 0, 2.0), (0, 1, 3.0)])
        assert A.get(0, 1) == 1.0
        assert A.get(1, 0) == 1.0
        assert A.nnz == 2

    def test_first_entry_wins_on_diagonal(self):
        A = construct_matrix([(1, 1, 4.0), (0, 0, 1.0), (1, 1, -4.0)])
        assert A.get(1, 1) == 4.0

    def test_mirror_orientation_counts_as_same_coordinate(self):
        A = construct_matrix([(3, 1, 7.0), (1, 3, 8.0)])
        assert A.indices(1).tolist() == [3]
        assert A.values(1).tolist() == [7.0]
        assert A.values(3).tolist() == [7.0]


# ============================================================================
# Properties on random entry sets
# ============================================================================

@pytest.mark.parametrize(
    ['n', 'density', 'seed'],
    product([1, 5, 32, 100],
            [0.05, 0.3],
            [0, 1, 2])
    )
def test_random_symmetry_and_dimension(n, density, seed):
    g = torch.Generator().manual_seed(seed)
    nnz = max(1, int(n * n * density))
    row = torch.randint(0, n, (nnz,), generator=g)
    col = torch.randint(0, n, (nnz,), generator=g)
    val = torch.randn(nnz, generator=g, dtype=torch.float64)

    A = SymmetricSparseMatrix.from_coo(row, col, val)

    assert A.n == int(torch.maximum(row, col).max()) + 1
    assert A.is_symmetric()
    dense = A.to_dense()
    torch.testing.assert_close(dense, dense.T, rtol=0, atol=0)
    for i in range(A.n):
        cols = A.indices(i)
        assert cols.numel() == A.values(i).numel()
        assert bool((cols[1:] > cols[:-1]).all())


@pytest.mark.parametrize(['n', 'seed'], product([4, 16, 64], [0, 1, 2]))
def test_order_independent_without_duplicates(n, seed):
    g = torch.Generator().manual_seed(seed)
    row, col, val = random_coo(n, density=0.2, generator=g)
    # keep one orientation so every coordinate appears once
    upper = row <= col
    row, col, val = row[upper], col[upper], val[upper]

    A = SymmetricSparseMatrix.from_coo(row, col, val)
    perm = torch.randperm(row.numel(), generator=g)
    flip = torch.rand(row.numel(), generator=g) < 0.5
    row_p = torch.where(flip, col, row)[perm]
    col_p = torch.where(flip, row, col)[perm]
    B = SymmetricSparseMatrix.from_coo(row_p, col_p, val[perm])

    assert torch.equal(A.row, B.row)
    assert torch.equal(A.col, B.col)
    assert torch.equal(A.val, B.val)


def test_repeated_construction_is_identical():
    entries = [(i % 7, (3 * i) % 11, float(i)) for i in range(50)]
    A = construct_matrix(entries)
    B = construct_matrix(entries)
    assert torch.equal(A.row, B.row)
    assert torch.equal(A.col, B.col)
    assert torch.equal(A.val, B.val)


# ============================================================================
# Validation
# ============================================================================

class TestValidation:

    def test_negative_index(self):
        with pytest.raises(InvalidIndexError):
            construct_matrix([(0, 0, 1.0), (-1, 2, 3.0)])

    def test_negative_column_index(self):
        with pytest.raises(InvalidIndexError):
            SymmetricSparseMatrix.from_coo(torch.tensor([0]), torch.tensor([-3]), torch.tensor([1.0]))

    @pytest.mark.parametrize('entry', [(0.5, 0, 1.0), (0, 1.0, 1.0), ("1", 0, 1.0)])
    def test_non_integer_index(self, entry):
        # same exception as a float index tensor given to from_coo
        with pytest.raises(ShapeException):
            construct_matrix([entry])

    def test_length_mismatch(self):
        with pytest.raises(ShapeException):
            SymmetricSparseMatrix.from_coo(torch.tensor([0, 1]), torch.tensor([0]), torch.tensor([1.0]))

    def test_float_index_tensor(self):
        with pytest.raises(ShapeException):
            SymmetricSparseMatrix.from_coo(torch.tensor([0.0]), torch.tensor([0]), torch.tensor([1.0]))

    def test_non_finite_is_stored_but_flagged(self):
        A = construct_matrix([(0, 0, float("nan")), (1, 1, 1.0)])
        assert not A.is_valid()

    def test_get_out_of_range(self):
        A = construct_matrix([(0, 0, 1.0)])
        with pytest.raises(IndexError):
            A.get(1, 0)
