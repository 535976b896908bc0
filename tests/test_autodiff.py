import numpy as np
import numpy.testing as npt
import pytest

from kinetic import autodiff, models

SEED = 3046987125
N_POINTS_TO_TEST = 5


def test_autodiff_fallback_returns_provided_function():
    def grad_func(q):
        return -q

    assert autodiff.autodiff_fallback(grad_func, None, "grad") is grad_func


@pytest.mark.skipif(autodiff.AUTOGRAD_AVAILABLE, reason="Autograd is available.")
def test_autodiff_fallback_no_autograd():
    with pytest.raises(ValueError, match="Autograd not available"):
        autodiff.autodiff_fallback(None, lambda q: q, "grad_func")


def test_autodiff_fallback_grad_and_value_order():
    anp = pytest.importorskip("autograd.numpy")
    grad_and_value = autodiff.autodiff_fallback(
        None, lambda q: -0.5 * anp.sum(q**2), "grad_func"
    )
    grad, value = grad_and_value(np.arange(3.0))
    npt.assert_allclose(grad, -np.arange(3.0))
    npt.assert_allclose(value, -2.5)


def test_density_model_autograd_gradient():
    anp = pytest.importorskip("autograd.numpy")

    def log_dens(q):
        return -0.25 * anp.sum(q**4) + anp.sum(anp.sin(q))

    model = models.DensityModel(log_dens, 3)
    rng = np.random.default_rng(SEED)
    for _ in range(N_POINTS_TO_TEST):
        q = rng.standard_normal(3)
        log_dens_val, grad = model.log_density_and_gradient(q)
        npt.assert_allclose(grad, -(q**3) + np.cos(q))
        npt.assert_allclose(log_dens_val, log_dens(q))
        npt.assert_allclose(model.log_density_gradient(q), grad)
