import numpy as np

from flatnet.core.layers import BasicLayer
from flatnet.core.network import BasicNetwork


def _recurrent_network(seed: int) -> BasicNetwork:
    network = BasicNetwork(
        [
            BasicLayer(3, has_bias=True, context_count=4),
            BasicLayer(4, has_bias=True, activation="tanh"),
            BasicLayer(2, has_bias=False, activation="softmax"),
        ]
    )
    network.finalize_structure()
    network.reset(seed=seed)
    return network


def test_compute_never_mutates_or_resizes_weights():
    network = _recurrent_network(0)
    weights = network.weights
    snapshot = weights.copy()
    sizes = (network.weights.shape, network.layer_output.shape, network.layer_sums.shape)

    rng = np.random.default_rng(1)
    for _ in range(5):
        network.compute(rng.standard_normal(3))
        network.clear_context()

    assert network.weights is weights
    assert np.array_equal(network.weights, snapshot)
    assert (network.weights.shape, network.layer_output.shape, network.layer_sums.shape) == sizes


def test_sequences_are_reproducible_after_clear_context():
    network = _recurrent_network(4)
    sequence = np.random.default_rng(2).standard_normal((6, 3))

    first = np.array([network.compute(x) for x in sequence])
    network.clear_context()
    second = np.array([network.compute(x) for x in sequence])

    assert np.array_equal(first, second)
    assert np.allclose(first.sum(axis=1), 1.0)
    # context makes repeated inputs history dependent
    repeat = np.array([network.compute(sequence[0]) for _ in range(2)])
    assert not np.array_equal(repeat[0], repeat[1])


def test_independent_instances_share_nothing():
    a = _recurrent_network(7)
    b = _recurrent_network(7)
    x = np.array([0.2, -0.4, 0.9])
    a.compute(x)
    a.compute(x)
    assert np.array_equal(a.weights, b.weights)
    assert not np.shares_memory(a.layer_output, b.layer_output)
    b.compute(x)
    a.clear_context()
    assert np.array_equal(a.compute(x), b.layer_output[:2])
