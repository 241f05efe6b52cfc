"""
Dense Linear Algebra

This module contains the Vector and Matrix types the network is built from.
Both wrap a float64 numpy array; every product is vectorised per output
element, so no two output elements ever depend on each other.
"""

from typing import Iterator, List, Sequence, Tuple, Union

import numpy as np

from .activations import ActivationLike, get_activation
from .errors import ShapeError, ShapeMismatchError

ArrayLike = Union[np.ndarray, Sequence[float]]


def _check_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ShapeError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ShapeError(f"{name} must be greater than zero, got {value}")
    return int(value)


class Vector:
    """Fixed-length vector of real numbers."""

    __slots__ = ('values',)

    def __init__(self, length: int):
        """Create a zero-filled vector.

        Args:
            length: Number of elements, at least 1.
        """
        length = _check_dimension('Vector length', length)
        self.values = np.zeros(length, dtype=float)

    @classmethod
    def from_array(cls, values: ArrayLike) -> 'Vector':
        """Create a vector holding a copy of ``values``."""
        if values is None:
            raise ShapeError("Vector: array is None")

        data = np.array(values, dtype=float)
        if data.ndim != 1:
            raise ShapeError(f"Vector: expected a 1-D array, got shape {data.shape}")
        if data.size == 0:
            raise ShapeError("Vector: array is empty")

        vector = cls.__new__(cls)
        vector.values = data
        return vector

    @property
    def length(self) -> int:
        return self.values.shape[0]

    def __len__(self) -> int:
        return self.values.shape[0]

    def __getitem__(self, i: int) -> float:
        return float(self.values[i])

    def __setitem__(self, i: int, value: float):
        self.values[i] = value

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self.values)

    def __repr__(self) -> str:
        return f"Vector({self.to_list()})"

    def __str__(self) -> str:
        return "  ".join(repr(float(v)) for v in self.values)

    def __matmul__(self, matrix: 'Matrix') -> 'Vector':
        # v @ M is the transpose product M^T v
        if not isinstance(matrix, Matrix):
            return NotImplemented
        return matrix.transpose_dot(self)

    def copy(self) -> 'Vector':
        return Vector.from_array(self.values)

    def to_list(self) -> List[float]:
        return self.values.tolist()

    def activate(self, kind: ActivationLike) -> 'Vector':
        """Return a new vector with the activation applied to every element."""
        return Vector.from_array(get_activation(kind).function(self.values))

    def derivative(self, kind: ActivationLike) -> 'Vector':
        """Return a new vector with the activation derivative applied to every element."""
        return Vector.from_array(get_activation(kind).derivative(self.values))

    def norm(self) -> float:
        """Sum of the squared elements. No square root is taken."""
        return float(np.dot(self.values, self.values))


class Matrix:
    """Dense ``rows x columns`` matrix of real numbers."""

    __slots__ = ('values',)

    def __init__(self, rows: int, columns: int):
        rows = _check_dimension('Matrix rows', rows)
        columns = _check_dimension('Matrix columns', columns)
        self.values = np.zeros((rows, columns), dtype=float)

    @classmethod
    def from_rows(cls, rows: Sequence[ArrayLike]) -> 'Matrix':
        """Create a matrix from a non-empty rectangular sequence of rows."""
        if rows is None or len(rows) == 0:
            raise ShapeError("Matrix: rows are None or empty")

        try:
            data = np.array(rows, dtype=float)
        except ValueError as e:
            raise ShapeError(f"Matrix: rows are not rectangular: {e}") from e

        if data.ndim != 2 or data.shape[1] == 0:
            raise ShapeError(f"Matrix: expected a non-empty 2-D array, got shape {data.shape}")

        matrix = cls.__new__(cls)
        matrix.values = data
        return matrix

    @property
    def rows(self) -> int:
        return self.values.shape[0]

    @property
    def columns(self) -> int:
        return self.values.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    def __getitem__(self, index: Tuple[int, int]) -> float:
        i, j = index
        return float(self.values[i, j])

    def __setitem__(self, index: Tuple[int, int], value: float):
        i, j = index
        self.values[i, j] = value

    def __matmul__(self, vector: Vector) -> Vector:
        if not isinstance(vector, Vector):
            return NotImplemented
        return self.dot(vector)

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, columns={self.columns})"

    def __str__(self) -> str:
        lines = [f"Matrix: [{self.rows} x {self.columns}]"]
        for row in self.values:
            lines.append("  ".join(repr(float(v)) for v in row))
        return "\n".join(lines)

    def copy(self) -> 'Matrix':
        return Matrix.from_rows(self.values)

    def row(self, i: int) -> Vector:
        return Vector.from_array(self.values[i])

    def zero_row(self, i: int):
        self.values[i, :] = 0.0

    def set_random(self, rng: np.random.Generator, low: float = -0.5, high: float = 0.5):
        """Fill the matrix with uniform random values from ``[low, high)``."""
        self.values[:, :] = rng.uniform(low, high, size=self.values.shape)

    def set_he(self, rng: np.random.Generator):
        """Fill the matrix with zero-mean normal values scaled by sqrt(2 / columns)."""
        scale = np.sqrt(2.0 / self.columns)
        self.values[:, :] = rng.standard_normal(self.values.shape) * scale

    def dot(self, vector: Vector) -> Vector:
        """Matrix(n, m) x Vector(m) -> Vector(n)."""
        if len(vector) != self.columns:
            raise ShapeMismatchError(
                f"Matrix: cannot multiply [{self.rows} x {self.columns}] matrix "
                f"by vector of length {len(vector)}"
            )
        return Vector.from_array(self.values @ vector.values)

    def transpose_dot(self, vector: Vector) -> Vector:
        """Matrix(n, m)^T x Vector(n) -> Vector(m), without building the transpose."""
        if len(vector) != self.rows:
            raise ShapeMismatchError(
                f"Matrix: cannot multiply transposed [{self.rows} x {self.columns}] "
                f"matrix by vector of length {len(vector)}"
            )
        return Vector.from_array(vector.values @ self.values)
