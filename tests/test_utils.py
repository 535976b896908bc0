import numpy as np
import pytest

from kinetic import utils

SEED = 3046987125


@pytest.mark.parametrize("n_chain", [1, 2, 4])
def test_get_per_chain_rngs_independent(n_chain):
    rngs = utils.get_per_chain_rngs(np.random.default_rng(SEED), n_chain)
    assert len(rngs) == n_chain
    draws = [rng.standard_normal(5) for rng in rngs]
    for i in range(n_chain):
        for j in range(i + 1, n_chain):
            assert not np.array_equal(draws[i], draws[j])


def test_get_per_chain_rngs_reproducible():
    rngs_1 = utils.get_per_chain_rngs(np.random.default_rng(SEED), 3)
    rngs_2 = utils.get_per_chain_rngs(np.random.default_rng(SEED), 3)
    for rng_1, rng_2 in zip(rngs_1, rngs_2):
        assert np.array_equal(rng_1.standard_normal(5), rng_2.standard_normal(5))


def test_get_per_chain_rngs_seed_sequence():
    base_rng = np.random.Generator(np.random.SFC64(SEED))
    rngs = utils.get_per_chain_rngs(base_rng, 2)
    assert len(rngs) == 2


def test_get_per_chain_rngs_unsupported():
    with pytest.raises(ValueError, match="Unsupported"):
        utils.get_per_chain_rngs(object(), 2)

