"""Utility functions."""

from numpy.random import default_rng


def get_per_chain_rngs(base_rng, n_chain):
    """Construct random number generators (RNGs) for each of a set of chains.

    Each chain should own both its own metric and point objects and its own
    RNG, with only the model shared between chains.

    If the base RNG bit generator has a `jumped` method this is used to produce
    a sequence of independent random substreams. Otherwise if the base RNG bit
    generator has a `_seed_seq` attribute this is used to spawn a sequence of
    generators.

    Args:
        base_rng (numpy.random.Generator): Generator to derive streams from.
        n_chain (int): Number of independent generators to construct.

    Returns:
        List[numpy.random.Generator]: Independent generators, one per chain.
    """
    bit_generator = getattr(base_rng, 'bit_generator', None)
    if hasattr(bit_generator, 'jumped'):
        return [default_rng(bit_generator.jumped(i)) for i in range(n_chain)]
    elif hasattr(bit_generator, '_seed_seq'):
        seed_sequence = bit_generator._seed_seq
        return [default_rng(seed) for seed in seed_sequence.spawn(n_chain)]
    else:
        raise ValueError(
            f'Unsupported random number generator type {type(base_rng)}.')
