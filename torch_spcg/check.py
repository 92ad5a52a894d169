import torch


class ShapeException(Exception):
    def __init__(self, name, shape, expected_shape):
        self.name = name
        self.shape = shape
        self.expected_shape = expected_shape
        super().__init__(f"{name} has shape {shape} expected {expected_shape}")


class DimensionMismatchError(ShapeException):
    """Operand lengths disagree (vector arithmetic, matvec, solve inputs)."""


class InvalidIndexError(ValueError):
    def __init__(self, name, index):
        self.name = name
        self.index = index
        super().__init__(f"{name} contains invalid index {index}, indices must be non-negative")


class NonFiniteValueError(ValueError):
    def __init__(self, name, count):
        self.name = name
        self.count = count
        super().__init__(f"{name} contains {count} non-finite value(s)")


class SingularPreconditionerError(ZeroDivisionError):
    def __init__(self, row, value=0.0):
        self.row = row
        self.value = value
        super().__init__(f"diagonal coefficient of row {row} is {value}, cannot invert")


def check_coo(val:torch.Tensor,
              row:torch.Tensor,
              col:torch.Tensor,
              ):
    """
    Check the COO triple of a symmetric sparse matrix

    Parameters
    ----------

    val: torch.Tensor
        [nnz] values of the sparse matrix
    row: torch.Tensor
        [nnz] row indices of the sparse matrix
    col: torch.Tensor
        [nnz] column indices of the sparse matrix

    """
    if not row.ndim == 1:
        raise ShapeException("row", tuple(row.shape), "[nnz]")
    if not col.ndim == 1:
        raise ShapeException("col", tuple(col.shape), "[nnz]")
    if not val.ndim == 1:
        raise ShapeException("val", tuple(val.shape), "[nnz]")
    if not val.shape[0] == row.shape[0]:
        raise ShapeException("val", tuple(val.shape), f"[{row.shape[0]}]")
    if not val.shape[0] == col.shape[0]:
        raise ShapeException("val", tuple(val.shape), f"[{col.shape[0]}]")
    if row.is_floating_point() or row.is_complex():
        raise ShapeException("row", row.dtype, "integer indices")
    if col.is_floating_point() or col.is_complex():
        raise ShapeException("col", col.dtype, "integer indices")
    if row.numel() > 0 and row.min() < 0:
        raise InvalidIndexError("row", int(row.min()))
    if col.numel() > 0 and col.min() < 0:
        raise InvalidIndexError("col", int(col.min()))

def check_csr(val:torch.Tensor,
              rowptr:torch.Tensor,
              col:torch.Tensor,
              shape:tuple):
    """
    Check the CSR format

    Parameters
    ----------
    val: torch.Tensor
        [nnz] values of the sparse matrix
    rowptr: torch.Tensor
        [m+1] rowptr of the sparse matrix
    col: torch.Tensor
        [nnz] column indices of the sparse matrix
    shape: tuple
        (m,n) shape of the sparse matrix
    """
    m, n = shape
    if not m == n:
        raise ShapeException("shape", shape, "(n,n)")
    if not (rowptr.ndim == 1 and rowptr.shape[0] == m+1):
        raise ShapeException("rowptr", tuple(rowptr.shape), f"[{m+1}]")
    if not col.ndim == 1:
        raise ShapeException("col", tuple(col.shape), "[nnz]")
    if not val.shape[0] == rowptr[-1]:
        raise ShapeException("val", tuple(val.shape), f"[{int(rowptr[-1])}]")
    if not val.shape[0] == col.shape[0]:
        raise ShapeException("val", tuple(val.shape), "[nnz]")
    if m > 0 and not bool((rowptr[1:] >= rowptr[:-1]).all()):
        raise ShapeException("rowptr", tuple(rowptr.shape), "non-decreasing offsets")

def check_vector(name:str, x:torch.Tensor, n:int):
    """
    Check that ``x`` is a vector of length ``n``

    Raises
    ------
    DimensionMismatchError
    """
    if not (x.ndim == 1 and x.shape[0] == n):
        raise DimensionMismatchError(name, tuple(x.shape), f"[{n}]")

def check_finite(name:str, val:torch.Tensor):
    """
    Check that every stored value is finite

    Raises
    ------
    NonFiniteValueError
    """
    bad = (~torch.isfinite(val)).sum().item()
    if bad:
        raise NonFiniteValueError(name, bad)
