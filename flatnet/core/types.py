"""Core typing contracts for flatnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

import numpy as np

Array = np.ndarray
ActivationFn = Callable[[Array], Array]


@dataclass(frozen=True)
class LayerOffsets:
    """Finalised placement of one layer inside the flat network arrays.

    ``slot`` is the storage position (0 = output layer) while ``layer`` is the
    declaration position (0 = input layer). ``source_slot`` names the slot
    feeding this one and is ``None`` for the input layer.
    """

    slot: int
    layer: int
    neuron_offset: int
    weight_offset: int
    total_count: int
    feed_count: int
    context_count: int
    source_slot: int | None = None

    @property
    def has_bias(self) -> bool:
        return self.total_count != self.feed_count + self.context_count

    @property
    def bias_position(self) -> int | None:
        """Flat index of the bias unit, or ``None`` for unbiased layers."""

        if not self.has_bias:
            return None
        return self.neuron_offset + self.feed_count

    @property
    def context_start(self) -> int:
        return self.neuron_offset + self.total_count - self.context_count


@dataclass(frozen=True)
class NetworkLayout:
    """Read-only snapshot of a finalised network's offset tables."""

    layer_counts: Tuple[int, ...]
    layer_feed_counts: Tuple[int, ...]
    layer_context_count: Tuple[int, ...]
    layer_index: Tuple[int, ...]
    weight_index: Tuple[int, ...]
    bias_activation: Tuple[float, ...]
    activations: Tuple[str, ...]
    input_count: int
    output_count: int
    neuron_count: int
    weight_count: int
