r"""Metrics defining the kinetic energy of Hamiltonian systems.

A metric combines a probability model with a kinetic energy function to define
the Hamiltonian

\[ H(q, p) = \tau(q, p) + \phi(q) \]

where \(q\) and \(p\) are the position and momentum variables respectively,
\(\phi(q) = -\log \pi(q)\) is the potential energy defined by the negative
logarithm of the model's unnormalized density \(\pi\) and \(\tau\) the kinetic
energy. The metric exposes the partial derivatives of both energy terms
required by a symplectic integrator and samples momenta from their
conditional distribution given a position.

Metrics hold no mutable state other than the mass matrix of the non-unit
variants, which is only changed between trajectories. All state which changes
during a trajectory lives in the `kinetic.points.PhaseSpacePoint` passed to
each method, so each chain should use its own metric, point and random number
generator while sharing the model.
"""

from abc import ABC, abstractmethod
from warnings import warn
import numpy as np
from kinetic.errors import (
    DimensionMismatchError, ModelEvaluationError, StaleCacheError)
import kinetic.matrices as matrices
from kinetic.points import PhaseSpacePoint


def _check_finite(value, operation, q):
    if not np.all(np.isfinite(value)):
        raise ModelEvaluationError(
            f'{operation} returned non-finite value {value} at q = {q}.',
            operation=operation, pos=q.copy())


class Metric(ABC):
    """Base class for metrics."""

    def __init__(self, model):
        """
        Args:
            model (kinetic.models.Model): Model defining the target
                distribution on the position space.
        """
        dim = model.dimension()
        if (not isinstance(dim, (int, np.integer)) or isinstance(dim, bool)
                or dim < 1):
            raise ValueError(
                f'Model dimension must be a positive integer, got {dim!r}.')
        self.model = model
        self._dim = int(dim)

    @property
    def dimension(self):
        """Dimension of position and momentum vectors."""
        return self._dim

    def _check_point(self, z):
        if z.q.shape != (self._dim,) or z.p.shape != (self._dim,):
            raise DimensionMismatchError(
                f'Point with position shape {z.q.shape} and momentum shape '
                f'{z.p.shape} inconsistent with metric dimension {self._dim}.')

    def _check_current(self, z):
        if not z.is_current:
            raise StaleCacheError(
                'Cached potential energy is not valid for current position. '
                '`update` must be called after changing `q`.')

    def create_point(self, q=None, p=None):
        """Create a point with dimension matching the metric.

        Args:
            q (None or array): Initial position, zero if `None`.
            p (None or array): Initial momentum, zero if `None`.

        Returns:
            kinetic.points.PhaseSpacePoint: New point. Its cached potential
                values are not valid until `update` is called.
        """
        return PhaseSpacePoint(self._dim, q=q, p=p)

    def update(self, z, writer=None):
        """Recompute cached potential energy and gradient at current position.

        `z` is modified in place with `z.V` set to the negative log density and
        `z.g` to the negative log density gradient evaluated at `z.q`. If the
        model evaluation fails `z` is not modified.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to update.
            writer (None or kinetic.writers.Writer): Sink for diagnostic
                messages. Not used by Euclidean metrics.

        Raises:
            kinetic.errors.ModelEvaluationError: If the log density or its
                gradient is undefined or non-finite at `z.q`.
            kinetic.errors.DimensionMismatchError: If `z` or the model
                gradient does not match the metric dimension.
        """
        self._check_point(z)
        q = z.q
        try:
            # Promote NumPy floating point warnings to exceptions so numerical
            # faults are reported as errors rather than printed
            with np.errstate(divide='raise', over='raise', invalid='raise'):
                log_dens, grad_log_dens = self.model.log_density_and_gradient(
                    q.copy())
        except DimensionMismatchError:
            raise
        except (ValueError, ArithmeticError) as e:
            raise ModelEvaluationError(
                f'Model evaluation failed at q = {q}: {e!s}',
                operation='log_density_and_gradient', pos=q.copy()) from e
        _check_finite(log_dens, 'log_density', q)
        grad_log_dens = np.asarray(grad_log_dens, dtype=np.float64)
        if grad_log_dens.shape != (self._dim,):
            raise DimensionMismatchError(
                f'Model gradient shape {grad_log_dens.shape} inconsistent with'
                f' metric dimension {self._dim}.')
        _check_finite(grad_log_dens, 'log_density_gradient', q)
        z.set_potential(-log_dens, -grad_log_dens)

    @abstractmethod
    def tau(self, z):
        """Kinetic energy.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to compute value at.

        Returns:
            float: Value of kinetic energy.
        """

    def phi(self, z):
        """Potential energy (negative log density) at current position.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to compute value at.
                `update` must have been called since `z.q` last changed.

        Returns:
            float: Value of potential energy.
        """
        self._check_point(z)
        self._check_current(z)
        return z.V

    @abstractmethod
    def dtau_dq(self, z):
        """Derivative of kinetic energy with respect to position.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to compute value at.

        Returns:
            array: Value of `tau(z)` derivative with respect to `z.q`.
        """

    @abstractmethod
    def dtau_dp(self, z):
        """Derivative of kinetic energy with respect to momentum.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to compute value at.

        Returns:
            array: Value of `tau(z)` derivative with respect to `z.p`.
        """

    def dphi_dq(self, z):
        """Derivative of potential energy with respect to position.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to compute value at.
                `update` must have been called since `z.q` last changed.

        Returns:
            array: Value of `phi(z)` derivative with respect to `z.q`.
        """
        self._check_point(z)
        self._check_current(z)
        return z.g.copy()

    @abstractmethod
    def sample_p(self, z, rng):
        """Sample a momentum from its conditional distribution given position.

        `z.p` is overwritten in place. No other attribute of `z` is read or
        modified.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to sample momentum for.
            rng (numpy.random.Generator): Numpy random number generator.
        """

    def h(self, z):
        """Hamiltonian function (total energy).

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to compute value at.

        Returns:
            float: Value of Hamiltonian.
        """
        return self.tau(z) + self.phi(z)

    def dh_dq(self, z):
        """Derivative of Hamiltonian with respect to position."""
        return self.dtau_dq(z) + self.dphi_dq(z)

    def dh_dp(self, z):
        """Derivative of Hamiltonian with respect to momentum."""
        return self.dtau_dp(z)


def _check_rng(rng):
    if isinstance(rng, np.random.RandomState):
        warn(
            'Use of numpy.random.RandomState random number generators is '
            'deprecated. Please use a numpy.random.Generator instance '
            'instead for example from a call to numpy.random.default_rng.',
            DeprecationWarning)
        rng = np.random.Generator(rng._bit_generator)
    return rng


class EuclideanMetric(Metric):
    r"""Metric with a fixed positive definite matrix representation.

    The momentum is taken to be independent of the position and to have a
    zero-mean Gaussian distribution with covariance given by the mass matrix
    \(M\), so that the kinetic energy is

    \[ \tau(p) = \frac{1}{2} p^T M^{-1} p \]

    and its derivative with respect to the position is identically zero.

    Using a non-identity mass matrix is equivalent to using an identity matrix
    with a linear reparameterisation of the target distribution, which can be
    used to rescale and decorrelate the position variables to improve mixing.
    The mass matrix is usually estimated by an adaptation procedure between
    trajectories and can be replaced by assigning to `matrix`.
    """

    def __init__(self, model, matrix=None):
        """
        Args:
            model (kinetic.models.Model): Model defining the target
                distribution on the position space.
            matrix (None or array or PositiveDefiniteMatrix): Mass matrix. If
                `None` is passed (the default), the identity matrix will be
                used. If a 1D array is passed then this is assumed to specify a
                positive diagonal matrix and the array the matrix diagonal. If a
                2D array is passed then this is assumed to specify a dense
                positive definite matrix. Otherwise if the value is a
                `kinetic.matrices.PositiveDefiniteMatrix` instance it directly
                specifies the mass matrix.
        """
        super().__init__(model)
        self.matrix = matrix

    @property
    def matrix(self):
        """Mass matrix as a `kinetic.matrices.PositiveDefiniteMatrix`."""
        return self._matrix

    @matrix.setter
    def matrix(self, matrix):
        if matrix is None:
            matrix = matrices.IdentityMatrix(self._dim)
        elif not isinstance(matrix, matrices.Matrix):
            matrix = np.asarray(matrix)
            if matrix.ndim == 1:
                matrix = matrices.PositiveDiagonalMatrix(matrix)
            elif matrix.ndim == 2:
                matrix = matrices.DensePositiveDefiniteMatrix(matrix)
            else:
                raise ValueError(
                    'If NumPy ndarray value is used for `matrix` must be '
                    'either 1D (diagonal matrix) or 2D (dense positive '
                    'definite matrix)')
        if not isinstance(matrix, matrices.PositiveDefiniteMatrix):
            raise ValueError('Mass matrix must be positive definite.')
        if matrix.shape != (self._dim, self._dim):
            raise DimensionMismatchError(
                f'Mass matrix shape {matrix.shape} inconsistent with model '
                f'dimension {self._dim}.')
        # Construct inverse and square root here so factorisation failures
        # are raised on assignment
        matrix.inv
        matrix.sqrt
        self._matrix = matrix

    def tau(self, z):
        return 0.5 * z.p @ self.dtau_dp(z)

    def dtau_dq(self, z):
        self._check_point(z)
        return np.zeros(self._dim)

    def dtau_dp(self, z):
        self._check_point(z)
        return np.array(self._matrix.inv @ z.p)

    def sample_p(self, z, rng):
        self._check_point(z)
        rng = _check_rng(rng)
        z.p[:] = self._matrix.sqrt @ rng.standard_normal(self._dim)


class UnitEMetric(EuclideanMetric):
    r"""Euclidean metric with an identity mass matrix.

    The kinetic energy is \(\tau(p) = \frac{1}{2} p^T p\) and momenta are
    sampled as vectors of independent standard normal variates.
    """

    def __init__(self, model):
        """
        Args:
            model (kinetic.models.Model): Model defining the target
                distribution on the position space.
        """
        super().__init__(model, None)

    @EuclideanMetric.matrix.setter
    def matrix(self, matrix):
        if matrix is not None and not isinstance(
                matrix, matrices.IdentityMatrix):
            raise ValueError('Unit metric mass matrix must be the identity.')
        EuclideanMetric.matrix.fset(self, matrix)

    def tau(self, z):
        self._check_point(z)
        return 0.5 * z.p @ z.p

    def dtau_dp(self, z):
        self._check_point(z)
        return z.p.copy()

    def sample_p(self, z, rng):
        self._check_point(z)
        rng = _check_rng(rng)
        z.p[:] = rng.standard_normal(self._dim)


class DiagEMetric(EuclideanMetric):
    r"""Euclidean metric with a positive diagonal mass matrix.

    The kinetic energy is \(\tau(p) = \frac{1}{2} \sum_i p_i^2 / m_i\) with
    \(m\) the mass matrix diagonal.
    """

    def __init__(self, model, diagonal=None):
        """
        Args:
            model (kinetic.models.Model): Model defining the target
                distribution on the position space.
            diagonal (None or array): 1D array of strictly positive values
                specifying the mass matrix diagonal. Defaults to all ones.
        """
        if diagonal is None:
            diagonal = np.ones(model.dimension())
        super().__init__(model, diagonal)

    @EuclideanMetric.matrix.setter
    def matrix(self, matrix):
        if not isinstance(matrix, matrices.Matrix):
            matrix = matrices.PositiveDiagonalMatrix(matrix)
        elif not isinstance(matrix, matrices.PositiveDiagonalMatrix):
            raise ValueError(
                'Diagonal metric mass matrix must be a PositiveDiagonalMatrix.')
        EuclideanMetric.matrix.fset(self, matrix)


class DenseEMetric(EuclideanMetric):
    """Euclidean metric with a dense positive definite mass matrix."""

    def __init__(self, model, matrix=None):
        """
        Args:
            model (kinetic.models.Model): Model defining the target
                distribution on the position space.
            matrix (None or array or DensePositiveDefiniteMatrix): 2D array or
                matrix object specifying the mass matrix. Defaults to the
                identity.
        """
        if matrix is None:
            matrix = np.identity(model.dimension())
        super().__init__(model, matrix)

    @EuclideanMetric.matrix.setter
    def matrix(self, matrix):
        if not isinstance(matrix, matrices.Matrix):
            matrix = matrices.DensePositiveDefiniteMatrix(matrix)
        elif not isinstance(matrix, matrices.DensePositiveDefiniteMatrix):
            raise ValueError(
                'Dense metric mass matrix must be a '
                'DensePositiveDefiniteMatrix.')
        EuclideanMetric.matrix.fset(self, matrix)
