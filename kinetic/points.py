"""Phase space points recording position, momentum and cached potential values.
"""

import copy
import numbers
import numpy as np
from kinetic.errors import DimensionMismatchError


def _as_vector(value, dim, name):
    """Copy value into a 1D float array checking it has length `dim`."""
    vector = np.array(value, dtype=np.float64)
    if vector.ndim != 1 or vector.shape[0] != dim:
        raise DimensionMismatchError(
            f'{name} must be a 1D array of length {dim}, got shape '
            f'{vector.shape}.')
    return vector


class PhaseSpacePoint(object):
    """Point in the phase space of a Hamiltonian system.

    As well as the position `q` and momentum `p` vectors, the point records the
    potential energy `V` (negative log density) at the position and its
    gradient `g` with respect to the position. These cached values are computed
    by `kinetic.metrics.Metric.update` and are only valid for the position
    `update` was last called with.

    The point keeps a snapshot of the position at the last `update` call so
    that it can detect when the cached values have become stale, whether this
    is due to `q` being reassigned or to the elements of `q` being modified in
    place. Reads of the potential via a metric's `phi` and `dphi_dq` methods
    check this and raise a `kinetic.errors.StaleCacheError` if the cache is
    out of date.

    Points are not safe for concurrent mutation and should not be shared
    between chains.
    """

    def __init__(self, dim, q=None, p=None):
        """
        Args:
            dim (int): Dimension of the position and momentum vectors. Must be
                a positive integer.
            q (None or array): Initial position. If `None` (the default) a
                zero vector is used. The values are copied.
            p (None or array): Initial momentum. If `None` (the default) a
                zero vector is used. The values are copied.
        """
        if (not isinstance(dim, numbers.Integral) or isinstance(dim, bool)
                or dim < 1):
            raise ValueError(
                f'Point dimension must be a positive integer, got {dim!r}.')
        self.__dict__['dim'] = int(dim)
        self.__dict__['q'] = (
            np.zeros(dim) if q is None else _as_vector(q, dim, 'q'))
        self.__dict__['p'] = (
            np.zeros(dim) if p is None else _as_vector(p, dim, 'p'))
        self.__dict__['V'] = 0.
        self.__dict__['g'] = np.zeros(dim)
        self.__dict__['_cached_q'] = None

    def __setattr__(self, name, value):
        if name == 'dim':
            raise AttributeError('Point dimension cannot be changed.')
        elif name in ('q', 'p', 'g'):
            value = _as_vector(value, self.dim, name)
            if name == 'q':
                self.__dict__['_cached_q'] = None
        super().__setattr__(name, value)

    @property
    def is_current(self):
        """Whether `V` and `g` correspond to the present value of `q`."""
        return (
            self._cached_q is not None and
            np.array_equal(self._cached_q, self.q))

    def set_potential(self, V, g):
        """Record potential energy and its gradient at the current position.

        Args:
            V (float): Potential energy (negative log density) at `q`.
            g (array): Gradient of potential energy with respect to `q`.
        """
        g = _as_vector(g, self.dim, 'g')
        self.__dict__['V'] = float(V)
        self.__dict__['g'] = g
        self.__dict__['_cached_q'] = self.q.copy()

    def invalidate(self):
        """Mark the cached potential energy and gradient as stale."""
        self.__dict__['_cached_q'] = None

    def copy(self):
        """Create a deep copy of the point.

        Returns:
            point_copy (PhaseSpacePoint): A copy of the point with vector
                attributes independent of those of the original point and the
                same cache validity.
        """
        return copy.deepcopy(self)

    def __str__(self):
        return (
            f'(\n q={self.q},\n p={self.p},\n V={self.V},\n g={self.g},\n'
            f' is_current={self.is_current})')

    def __repr__(self):
        return type(self).__name__ + str(self)
