"""Structured positive definite matrix classes used as metric representations.

Each class implements the matrix multiplication operator `@` with NumPy
arrays, and lazily constructs and caches the inverse and a square root factor,
so that repeated kinetic energy evaluations and momentum draws reuse the same
factorisations.
"""

import abc
import numpy as np
import scipy.linalg as sla
from kinetic.errors import LinAlgError


class Matrix(abc.ABC):
    """Base class for matrix-like objects.

    Implements overloads of the matrix multiplication operator `@` when the
    other operand is a NumPy array.
    """

    __array_priority__ = 1

    def __init__(self, shape):
        """
        Args:
           shape (Tuple[int, int]): Shape of matrix `(num_rows, num_columns)`.
        """
        self._shape = shape

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self.array
        return self.array.astype(dtype)

    def __matmul__(self, other):
        if isinstance(other, Matrix):
            return NotImplemented
        other = np.asarray(other)
        if other.shape[0] != self.shape[1]:
            raise ValueError(
                f'Inconsistent dimensions for matrix multiplication: '
                f'{self.shape} and {other.shape}.')
        return self._left_matrix_multiply(other)

    def __rmatmul__(self, other):
        if isinstance(other, Matrix):
            return NotImplemented
        other = np.asarray(other)
        if other.shape[-1] != self.shape[0]:
            raise ValueError(
                f'Inconsistent dimensions for matrix multiplication: '
                f'{other.shape} and {self.shape}.')
        return self._right_matrix_multiply(other)

    @property
    def shape(self):
        """Shape of matrix as a tuple `(num_rows, num_columns)`."""
        return self._shape

    @property
    @abc.abstractmethod
    def array(self):
        """Full dense representation of matrix as a 2D array."""

    @abc.abstractmethod
    def _left_matrix_multiply(self, other):
        """Compute `matrix @ other` for an array `other`."""

    @abc.abstractmethod
    def _right_matrix_multiply(self, other):
        """Compute `other @ matrix` for an array `other`."""

    @property
    def diagonal(self):
        """Diagonal of matrix as a 1D array."""
        return self.array.diagonal()

    def __str__(self):
        return f'(shape={self.shape})'

    def __repr__(self):
        return type(self).__name__ + str(self)


class PositiveDefiniteMatrix(Matrix):
    """Base class for symmetric positive definite matrices.

    The inverse and a square root are constructed when first accessed and then
    cached.
    """

    def __init__(self, shape):
        if shape[0] != shape[1]:
            raise ValueError(
                f'{shape} is not a valid shape for a square matrix.')
        super().__init__(shape)
        self._inv = None
        self._sqrt = None

    @property
    def inv(self):
        """Inverse of matrix as a `Matrix` object.

        This need not form an explicit array representation of the inverse and
        may instead solve the linear system defined by the matrix whenever it
        is multiplied with an array.
        """
        if self._inv is None:
            self._inv = self._construct_inv()
        return self._inv

    @property
    def sqrt(self):
        """Square-root of matrix satisfying `matrix == sqrt @ sqrt.T`.

        This will in general not be the symmetric square root.
        """
        if self._sqrt is None:
            self._sqrt = self._construct_sqrt()
        return self._sqrt

    @abc.abstractmethod
    def _construct_inv(self):
        """Construct inverse of matrix as a `Matrix` object."""

    @abc.abstractmethod
    def _construct_sqrt(self):
        """Construct square root of matrix as a `Matrix` object."""


class IdentityMatrix(PositiveDefiniteMatrix):
    """Matrix representing identity operator on a vector space."""

    def __init__(self, size):
        """
        Args:
            size (int): Number of rows / columns in matrix.
        """
        super().__init__((size, size))

    @property
    def array(self):
        return np.identity(self.shape[0])

    @property
    def diagonal(self):
        return np.ones(self.shape[0])

    def _left_matrix_multiply(self, other):
        return other

    def _right_matrix_multiply(self, other):
        return other

    def _construct_inv(self):
        return self

    def _construct_sqrt(self):
        return self


class PositiveDiagonalMatrix(PositiveDefiniteMatrix):
    """Matrix with strictly positive non-zero elements only along its diagonal.
    """

    def __init__(self, diagonal):
        """
        Args:
            diagonal (array): 1D array specifying diagonal elements of matrix.
                All values must be strictly positive. The values are copied.
        """
        diagonal = np.asarray_chkfinite(np.array(diagonal, dtype=np.float64))
        if diagonal.ndim != 1:
            raise ValueError('Specified diagonal must be a 1D array.')
        if not np.all(diagonal > 0):
            raise ValueError('Diagonal values must all be positive.')
        diagonal.flags.writeable = False
        super().__init__((diagonal.size, diagonal.size))
        self._diagonal = diagonal

    @property
    def array(self):
        return np.diag(self._diagonal)

    @property
    def diagonal(self):
        return self._diagonal

    def _left_matrix_multiply(self, other):
        if other.ndim == 2:
            return self._diagonal[:, None] * other
        elif other.ndim == 1:
            return self._diagonal * other
        else:
            raise ValueError(
                'Left matrix multiplication only defined for one or two '
                'dimensional right hand sides.')

    def _right_matrix_multiply(self, other):
        return self._diagonal * other

    def _construct_inv(self):
        return PositiveDiagonalMatrix(1. / self._diagonal)

    def _construct_sqrt(self):
        return PositiveDiagonalMatrix(self._diagonal**0.5)


class TriangularMatrix(Matrix):
    """Matrix with non-zero values only in lower or upper triangle elements."""

    def __init__(self, array, lower=True):
        """
        Args:
            array (array): 2D array containing lower / upper triangular element
                values of matrix. Values above (below) the diagonal are zeroed
                for lower (upper) triangular matrices.
            lower (bool): Whether the matrix is lower-triangular (`True`) or
                upper-triangular (`False`).
        """
        array = np.asarray_chkfinite(array)
        array = np.tril(array) if lower else np.triu(array)
        array.flags.writeable = False
        super().__init__(array.shape)
        self._array = array
        self._lower = lower

    @property
    def lower(self):
        return self._lower

    @property
    def array(self):
        return self._array

    def _left_matrix_multiply(self, other):
        return self._array @ other

    def _right_matrix_multiply(self, other):
        return other @ self._array

    def __str__(self):
        return f'(shape={self.shape}, lower={self.lower})'


class DensePositiveDefiniteMatrix(PositiveDefiniteMatrix):
    """Positive-definite matrix specified by a dense 2D array.

    A lower-triangular Cholesky factor `factor` with
    `matrix == factor @ factor.T` is computed when first required and used
    both as the matrix square root and to solve linear systems in the
    inverse.
    """

    def __init__(self, array):
        """
        Args:
            array (array): 2D array specifying matrix entries. Must be
                symmetric. Positive definiteness is checked when the Cholesky
                factor is first computed. The values are copied.
        """
        array = np.asarray_chkfinite(np.array(array, dtype=np.float64))
        if array.ndim != 2:
            raise ValueError('Specified array must be 2D.')
        if array.shape[0] != array.shape[1] or not np.allclose(array, array.T):
            raise ValueError('Specified array must be square and symmetric.')
        array.flags.writeable = False
        super().__init__(array.shape)
        self._array = array
        self._factor = None

    @property
    def array(self):
        return self._array

    @property
    def factor(self):
        """Lower-triangular Cholesky factor of matrix."""
        if self._factor is None:
            try:
                self._factor = TriangularMatrix(
                    sla.cholesky(self._array, lower=True), lower=True)
            except sla.LinAlgError as e:
                raise LinAlgError('Cholesky factorisation failed.') from e
        return self._factor

    def _left_matrix_multiply(self, other):
        return self._array @ other

    def _right_matrix_multiply(self, other):
        return other @ self._array

    def _construct_inv(self):
        return _CholeskyInverseMatrix(self)

    def _construct_sqrt(self):
        return self.factor


class _CholeskyInverseMatrix(Matrix):
    """Inverse of a dense positive definite matrix using its Cholesky factor.
    """

    def __init__(self, matrix):
        super().__init__(matrix.shape)
        self._matrix = matrix

    @property
    def array(self):
        return self @ np.identity(self.shape[0])

    def _left_matrix_multiply(self, other):
        return sla.cho_solve(
            (self._matrix.factor.array, True), other, check_finite=False)

    def _right_matrix_multiply(self, other):
        return self._left_matrix_multiply(other.T).T
