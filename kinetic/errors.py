"""Exception types."""


class Error(RuntimeError):
    """Base class for errors."""


class DimensionMismatchError(Error, ValueError):
    """Error raised when point, metric and model dimensions disagree."""


class ModelEvaluationError(Error):
    """Error raised when the model log density or its gradient is undefined.

    Attributes:
        operation (str): Name of model operation which failed, for example
            `'log_density'` or `'log_density_gradient'`.
        pos (array or None): Position the model was being evaluated at.
    """

    def __init__(self, message, operation=None, pos=None):
        super().__init__(message)
        self.operation = operation
        self.pos = pos


class StaleCacheError(Error):
    """Error raised when reading cached potential values for an outdated point.
    """


class IntegratorError(Error):
    """Error raised when integrator step fails."""


class HamiltonianDivergenceError(IntegratorError):
    """Error raised when integration of Hamiltonian dynamics diverges."""


class LinAlgError(Error):
    """Error raised when a matrix operation raises a linear algebra error."""
