"""Layer descriptors and the per-layer forward computation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from .activations import Activation, ActivationLike, resolve

if TYPE_CHECKING:  # pragma: no cover
    from .network import BasicNetwork


@dataclass(frozen=True)
class BasicLayer:
    """User-declared layer: feed neurons plus optional bias and context units."""

    count: int
    has_bias: bool = True
    context_count: int = 0
    activation: ActivationLike = field(default="linear")

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Layer neuron count must be >= 0, got {self.count}")
        if self.context_count < 0:
            raise ValueError(f"Layer context count must be >= 0, got {self.context_count}")
        object.__setattr__(self, "activation", resolve(self.activation))

    @property
    def total_count(self) -> int:
        """Neuron count including the bias unit and context units."""

        return self.count + (1 if self.has_bias else 0) + self.context_count

    def get_activation(self) -> Activation:
        return self.activation  # type: ignore[return-value]


def compute_layer(network: "BasicNetwork", slot: int) -> None:
    """Compute the fed neurons of storage ``slot`` from the slot behind it.

    The weight block feeding ``slot`` stores, for each destination neuron,
    one contiguous run over every source neuron (feed, bias and context).
    """

    target = network.offsets[slot]
    source = network.offsets[target.source_slot]
    if target.feed_count == 0:
        return

    block = network.weights[
        target.weight_offset : target.weight_offset + target.feed_count * source.total_count
    ].reshape(target.feed_count, source.total_count)
    inputs = network.layer_output[
        source.neuron_offset : source.neuron_offset + source.total_count
    ]

    start = target.neuron_offset
    stop = start + target.feed_count
    sums = network.layer_sums[start:stop]
    np.dot(block, inputs, out=sums)
    network.layer_output[start:stop] = network.activation_functions[slot](sums)


__all__ = ["BasicLayer", "compute_layer"]
