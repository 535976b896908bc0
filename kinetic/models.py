"""Probability models defining target distributions on the position space.

A model supplies the dimension of the position space together with the
logarithm of an unnormalized probability density on it and the gradient of
this log density. Models are shared read-only between chains so evaluation
methods must not modify the model.
"""

from abc import ABC, abstractmethod
import numbers
import numpy as np
import kinetic.matrices as matrices
from kinetic.autodiff import autodiff_fallback


def _check_dimension(dim):
    if (not isinstance(dim, numbers.Integral) or isinstance(dim, bool)
            or dim < 1):
        raise ValueError(
            f'Model dimension must be a positive integer, got {dim!r}.')
    return int(dim)


class Model(ABC):
    """Base class for probability models.

    Either of the evaluation methods may raise an exception (for example a
    `ValueError` or `ArithmeticError`) if the log density is undefined at the
    position passed, such as when the position is outside the support of the
    distribution.
    """

    @abstractmethod
    def dimension(self):
        """Dimension of position space.

        Returns:
            int: Number of position variables.
        """

    @abstractmethod
    def log_density(self, q):
        """Logarithm of unnormalized density of target distribution.

        Args:
            q (array): Position to evaluate log density at.

        Returns:
            float: Value of log density.
        """

    @abstractmethod
    def log_density_gradient(self, q):
        """Derivative of log density with respect to position.

        Args:
            q (array): Position to evaluate gradient at.

        Returns:
            array: Value of `log_density(q)` derivative with respect to `q`.
        """

    def log_density_and_gradient(self, q):
        """Log density and its gradient at a position.

        Models which can compute the value of the log density as a by-product
        of computing its gradient should override this method.

        Args:
            q (array): Position to evaluate at.

        Returns:
            log_dens (float): Value of log density.
            grad_log_dens (array): Gradient of log density.
        """
        return self.log_density(q), self.log_density_gradient(q)


class DensityModel(Model):
    """Model defined by a log density function and optionally its gradient."""

    def __init__(self, log_dens, dim, grad_log_dens=None):
        """
        Args:
            log_dens (Callable[[array], float]): Function which given a
                position array returns the logarithm of an unnormalized
                probability density on the position space with respect to the
                Lebesgue measure.
            dim (int): Dimension of position space.
            grad_log_dens (
                    None or Callable[[array], array or Tuple[array, float]]):
                Function which given a position array returns the derivative of
                `log_dens` with respect to the position array argument.
                Optionally the function may instead return a 2-tuple of values
                with the first being the array corresponding to the derivative
                and the second being the value of the `log_dens` evaluated at
                the passed position array. If `None` is passed (the default)
                an automatic differentiation fallback will be used to attempt
                to construct the derivative of `log_dens` automatically.
        """
        self._dim = _check_dimension(dim)
        self._log_dens = log_dens
        self._grad_log_dens = autodiff_fallback(
            grad_log_dens, log_dens, 'grad_log_dens')

    def dimension(self):
        return self._dim

    def log_density(self, q):
        return self._log_dens(q)

    def log_density_gradient(self, q):
        grad = self._grad_log_dens(q)
        return grad[0] if isinstance(grad, tuple) else grad

    def log_density_and_gradient(self, q):
        grad = self._grad_log_dens(q)
        if isinstance(grad, tuple):
            return grad[1], grad[0]
        else:
            return self._log_dens(q), grad


class StandardNormalModel(Model):
    """Standard normal distribution with zero mean and identity covariance."""

    def __init__(self, dim):
        self._dim = _check_dimension(dim)

    def dimension(self):
        return self._dim

    def log_density(self, q):
        return -0.5 * q @ q

    def log_density_gradient(self, q):
        return -q


class GaussianModel(Model):
    """Normal distribution with given mean and covariance matrix."""

    def __init__(self, mean, covariance=None):
        """
        Args:
            mean (array): 1D array specifying distribution mean.
            covariance (None or array or PositiveDefiniteMatrix): Covariance
                matrix. If `None` (the default) the identity is used, if a 1D
                array the array specifies the diagonal of a diagonal
                covariance and if a 2D array a dense covariance.
        """
        mean = np.array(mean, dtype=np.float64)
        if mean.ndim != 1:
            raise ValueError('mean must be a 1D array.')
        self._dim = _check_dimension(mean.shape[0])
        self.mean = mean
        if covariance is None:
            covariance = matrices.IdentityMatrix(self._dim)
        elif not isinstance(covariance, matrices.PositiveDefiniteMatrix):
            covariance = np.asarray(covariance)
            if covariance.ndim == 1:
                covariance = matrices.PositiveDiagonalMatrix(covariance)
            else:
                covariance = matrices.DensePositiveDefiniteMatrix(covariance)
        if covariance.shape != (self._dim, self._dim):
            raise ValueError(
                f'covariance shape {covariance.shape} inconsistent with mean '
                f'shape {mean.shape}.')
        self.covariance = covariance

    def dimension(self):
        return self._dim

    def log_density(self, q):
        return self.log_density_and_gradient(q)[0]

    def log_density_gradient(self, q):
        return self.log_density_and_gradient(q)[1]

    def log_density_and_gradient(self, q):
        grad = -(self.covariance.inv @ (q - self.mean))
        return 0.5 * (q - self.mean) @ grad, grad


class FunnelModel(Model):
    r"""Neal's funnel distribution.

    The first position variable \(y\) has a normal distribution with zero mean
    and standard deviation 3, with the remaining variables \(x_i\)
    conditionally independent given \(y\) with zero-mean normal distributions
    of standard deviation \(\exp(y / 2)\). Unnormalized log density is

    \[
      -\frac{y^2}{18} - \frac{(D - 1) y}{2} - \frac{1}{2} e^{-y} \sum_i x_i^2
    \]

    with \(D\) the total dimension. The strongly varying scale makes this a
    standard test of numerical robustness.
    """

    def __init__(self, dim=11):
        """
        Args:
            dim (int): Total dimension of position space including the scale
                variable. Must be at least 2. Defaults to 11.
        """
        self._dim = _check_dimension(dim)
        if self._dim < 2:
            raise ValueError('Funnel model dimension must be at least 2.')

    def dimension(self):
        return self._dim

    def log_density(self, q):
        return self.log_density_and_gradient(q)[0]

    def log_density_gradient(self, q):
        return self.log_density_and_gradient(q)[1]

    def log_density_and_gradient(self, q):
        y, x = q[0], q[1:]
        exp_neg_y = np.exp(-y)
        sum_sq_x = x @ x
        log_dens = (
            -y**2 / 18 - 0.5 * (self._dim - 1) * y - 0.5 * exp_neg_y * sum_sq_x)
        grad = np.empty(self._dim)
        grad[0] = -y / 9 - 0.5 * (self._dim - 1) + 0.5 * exp_neg_y * sum_sq_x
        grad[1:] = -exp_neg_y * x
        return log_dens, grad
