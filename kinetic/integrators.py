"""Symplectic integrator for simulation of Hamiltonian dynamics."""

import logging
from kinetic.errors import HamiltonianDivergenceError, ModelEvaluationError

logger = logging.getLogger(__name__)


class LeapfrogIntegrator(object):
    r"""Leapfrog integrator for Hamiltonian systems defined by a metric.

    Each step performs a half-step update of the momentum using the position
    derivative of the Hamiltonian, a full-step update of the position using
    the momentum derivative of the kinetic energy, and a second momentum
    half-step. For Euclidean metrics the kinetic energy does not depend on the
    position and this is the standard explicit Stormer-Verlet scheme.
    """

    def __init__(self, metric, step_size):
        """
        Args:
            metric (kinetic.metrics.Metric): Metric defining Hamiltonian.
            step_size (float): Integrator time step. Must be positive.
        """
        if not step_size > 0:
            raise ValueError('step_size must be positive.')
        self.metric = metric
        self.step_size = step_size

    def step(self, z, writer=None):
        """Perform a single integrator step.

        `z` is updated in place and has valid cached potential values on
        return.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to step from.
            writer (None or kinetic.writers.Writer): Diagnostic writer passed
                to `metric.update`.

        Raises:
            kinetic.errors.ModelEvaluationError: If the model log density is
                undefined at the new position.
        """
        if not z.is_current:
            self.metric.update(z, writer)
        dt = self.step_size
        z.p = z.p - 0.5 * dt * self.metric.dh_dq(z)
        z.q = z.q + dt * self.metric.dtau_dp(z)
        self.metric.update(z, writer)
        z.p = z.p - 0.5 * dt * self.metric.dh_dq(z)

    def integrate(self, z, n_step, writer=None, max_delta_h=1000):
        """Simulate Hamiltonian dynamics for a fixed number of steps.

        Args:
            z (kinetic.points.PhaseSpacePoint): Point to start from. Updated
                in place.
            n_step (int): Number of integrator steps to perform.
            writer (None or kinetic.writers.Writer): Diagnostic writer passed
                to `metric.update`.
            max_delta_h (float): Maximum increase to tolerate in the
                Hamiltonian before signalling a divergence.

        Raises:
            kinetic.errors.HamiltonianDivergenceError: If the Hamiltonian
                increases by more than `max_delta_h` or the model cannot be
                evaluated at a position visited.
        """
        if not z.is_current:
            self.metric.update(z, writer)
        h_init = self.metric.h(z)
        for s in range(n_step):
            try:
                self.step(z, writer)
            except ModelEvaluationError as e:
                logger.info(
                    f'Terminating trajectory at step {s} due to error:\n{e!s}')
                raise HamiltonianDivergenceError(
                    f'Model evaluation failed at step {s}') from e
            delta_h = self.metric.h(z) - h_init
            if not delta_h <= max_delta_h:
                logger.info(
                    f'Terminating trajectory at step {s} due to divergence: '
                    f'delta_h = {delta_h}')
                raise HamiltonianDivergenceError(f'delta_h = {delta_h}')
