"""Weight initialisation strategies for flat networks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Protocol, Tuple

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .network import BasicNetwork


class Randomizer(Protocol):
    """Protocol implemented by weight initialisation strategies."""

    def randomize(self, network: "BasicNetwork") -> None:
        """Fill ``network.weights`` in place."""


def weight_blocks(network: "BasicNetwork") -> Iterator[Tuple[int, slice, int, int]]:
    """Yield ``(slot, block, fan_in, fan_out)`` for every weight block.

    ``block`` slices ``network.weights``; ``fan_in`` is the total neuron count
    of the feeding slot and ``fan_out`` the fed neuron count of ``slot``.
    """

    counts = network.layer_counts
    feed = network.layer_feed_counts
    index = network.weight_index
    for slot in range(network.layer_count - 1):
        fan_in = int(counts[slot + 1])
        fan_out = int(feed[slot])
        start = int(index[slot])
        yield slot, slice(start, start + fan_in * fan_out), fan_in, fan_out


@dataclass
class XavierRandomizer:
    """Glorot normal initialisation applied block by block."""

    rng: np.random.Generator

    def randomize(self, network: "BasicNetwork") -> None:
        weights = network.weights
        for _, block, fan_in, fan_out in weight_blocks(network):
            size = block.stop - block.start
            if size == 0:
                continue
            std = np.sqrt(2.0 / (fan_in + fan_out))
            weights[block] = self.rng.normal(0.0, std, size=size)


@dataclass
class RangeRandomizer:
    """Uniform initialisation in ``[low, high)``."""

    rng: np.random.Generator
    low: float = -1.0
    high: float = 1.0

    def __post_init__(self) -> None:
        if self.low >= self.high:
            raise ValueError(f"RangeRandomizer requires low < high, got {self.low} >= {self.high}")

    def randomize(self, network: "BasicNetwork") -> None:
        weights = network.weights
        weights[:] = self.rng.uniform(self.low, self.high, size=weights.shape[0])


@dataclass
class GaussianRandomizer:
    rng: np.random.Generator
    mean: float = 0.0
    std: float = 1.0

    def randomize(self, network: "BasicNetwork") -> None:
        weights = network.weights
        weights[:] = self.rng.normal(self.mean, self.std, size=weights.shape[0])


_OPTIONS = {
    "xavier": set(),
    "range": {"low", "high"},
    "gaussian": {"mean", "std"},
}


def make_randomizer(name: str, rng: np.random.Generator, **options: float) -> Randomizer:
    """Build a randomizer from its config name."""

    if name not in _OPTIONS:
        raise ValueError(f"Unknown randomizer: {name}")
    unexpected = set(options) - _OPTIONS[name]
    if unexpected:
        raise ValueError(
            f"Unexpected options for {name} randomizer: {', '.join(sorted(unexpected))}"
        )
    if name == "range":
        return RangeRandomizer(rng, **options)
    if name == "gaussian":
        return GaussianRandomizer(rng, **options)
    return XavierRandomizer(rng)


__all__ = [
    "Randomizer",
    "XavierRandomizer",
    "RangeRandomizer",
    "GaussianRandomizer",
    "make_randomizer",
    "weight_blocks",
]
