"""Automatic differentiation fallback for log density gradients.

If Autograd is installed it is used to construct the gradient of a log density
function for models which are not given one explicitly. The log density
function must then be written using `autograd.numpy` in place of `numpy`.
"""

AUTOGRAD_AVAILABLE = True
try:
    from autograd import value_and_grad
except ImportError:
    AUTOGRAD_AVAILABLE = False


def autodiff_fallback(grad_func, func, name):
    """Generate a gradient function automatically if not provided.

    Args:
        grad_func (None or Callable): Either a callable implementing the
            gradient of `func` or `None` if none was provided.
        func (Callable): Scalar-valued function to differentiate.
        name (str): Name of gradient function to use in error message.

    Returns:
        Callable: `grad_func` if not `None`, otherwise a function which
            returns a `(gradient, value)` tuple for `func`.

    Raises:
        ValueError: If `grad_func` is `None` and Autograd is not installed.
    """
    if grad_func is not None:
        return grad_func
    elif not AUTOGRAD_AVAILABLE:
        raise ValueError(
            f'Autograd not available therefore {name} must be provided.')
    value_and_grad_func = value_and_grad(func)

    def grad_and_value(q):
        value, grad = value_and_grad_func(q)
        return grad, value

    return grad_and_value
