import pickle

import numpy as np
import numpy.testing as npt
import pytest

from kinetic.errors import DimensionMismatchError
from kinetic.points import PhaseSpacePoint


@pytest.fixture(params={1, 2, 5})
def size(request):
    return request.param


@pytest.fixture
def point(size):
    return PhaseSpacePoint(size, q=np.arange(size), p=-np.arange(size))


def test_point_construction_zeros(size):
    point = PhaseSpacePoint(size)
    npt.assert_array_equal(point.q, np.zeros(size))
    npt.assert_array_equal(point.p, np.zeros(size))
    npt.assert_array_equal(point.g, np.zeros(size))
    assert point.V == 0
    assert point.dim == size
    assert not point.is_current


def test_point_construction_copies_vectors(size):
    q = np.ones(size)
    point = PhaseSpacePoint(size, q=q)
    q[0] = 2.0
    assert point.q[0] == 1.0


def test_point_construction_coerces_to_float():
    point = PhaseSpacePoint(2, q=[5, 1])
    assert point.q.dtype == np.float64


@pytest.mark.parametrize("dim", [0, -1, 1.5, True, None])
def test_point_invalid_dimension(dim):
    with pytest.raises(ValueError, match="positive integer"):
        PhaseSpacePoint(dim)


def test_point_construction_dimension_mismatch(size):
    with pytest.raises(DimensionMismatchError):
        PhaseSpacePoint(size, q=np.zeros(size + 1))
    with pytest.raises(DimensionMismatchError):
        PhaseSpacePoint(size, p=np.zeros((size, 1)))


def test_point_assignment_dimension_mismatch(point, size):
    with pytest.raises(DimensionMismatchError):
        point.q = np.zeros(size + 1)
    with pytest.raises(DimensionMismatchError):
        point.p = np.zeros(size + 1)


def test_point_dimension_read_only(point):
    with pytest.raises(AttributeError):
        point.dim = 3


def test_set_potential_marks_current(point, size):
    point.set_potential(1.5, np.ones(size))
    assert point.is_current
    assert point.V == 1.5
    npt.assert_array_equal(point.g, np.ones(size))


def test_set_potential_gradient_dimension_mismatch(point, size):
    with pytest.raises(DimensionMismatchError):
        point.set_potential(1.5, np.ones(size + 1))


def test_q_assignment_marks_stale(point, size):
    point.set_potential(1.5, np.ones(size))
    point.q = point.q + 1
    assert not point.is_current


def test_q_in_place_change_marks_stale(point, size):
    point.set_potential(1.5, np.ones(size))
    point.q[-1] += 1
    assert not point.is_current


def test_q_in_place_change_reverted_is_current(point, size):
    point.set_potential(1.5, np.ones(size))
    point.q[0] += 1
    point.q[0] -= 1
    assert point.is_current


def test_q_augmented_assignment_marks_stale(point, size):
    point.set_potential(1.5, np.ones(size))
    point.q += 1
    assert not point.is_current


def test_p_change_keeps_current(point, size):
    point.set_potential(1.5, np.ones(size))
    point.p = point.p + 1
    point.p[0] = 10.0
    assert point.is_current


def test_invalidate(point, size):
    point.set_potential(1.5, np.ones(size))
    point.invalidate()
    assert not point.is_current


def test_point_copy_independent(point, size):
    point.set_potential(1.5, np.ones(size))
    point_copy = point.copy()
    assert point_copy.is_current
    point_copy.q[0] += 1
    point_copy.p[0] += 1
    assert point.is_current
    npt.assert_array_equal(point.q, np.arange(size))
    npt.assert_array_equal(point.p, -np.arange(size))


def test_point_pickling(point, size):
    point.set_potential(1.5, np.ones(size))
    unpickled_point = pickle.loads(pickle.dumps(point))
    assert isinstance(unpickled_point, PhaseSpacePoint)
    npt.assert_array_equal(unpickled_point.q, point.q)
    npt.assert_array_equal(unpickled_point.p, point.p)
    assert unpickled_point.V == point.V
    assert unpickled_point.is_current


def test_point_to_string(point):
    assert isinstance(str(point), str)


def test_point_representation(point):
    assert repr(point).startswith("PhaseSpacePoint")
