"""Flat-memory feed-forward network.

Every neuron output, weighted sum and connection weight lives in one of
three contiguous ``float64`` vectors. Layers are *stored* output-first (slot
0 is the output layer) but *addressed* input-first (layer 0 is the input
layer) by every public accessor; :meth:`BasicNetwork._storage_slot` is the
single place that converts between the two.
"""

from __future__ import annotations

import operator
import warnings
from typing import Iterable, List, Mapping, MutableSequence, Sequence, Tuple

import numpy as np

from .activations import Activation, ActivationLike, resolve
from .errors import (
    LayerConnectionError,
    NetworkStateError,
    NeuronRangeError,
    ShapeMismatchError,
)
from .layers import BasicLayer, compute_layer
from .randomize import Randomizer, XavierRandomizer
from .types import Array, LayerOffsets, NetworkLayout

DEFAULT_BIAS_ACTIVATION = 1.0
NO_BIAS_ACTIVATION = 0.0


def _as_index(value: int, what: str) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise NeuronRangeError(f"Invalid {what}: {value!r}") from None


class BasicNetwork:
    """Feed-forward network with optional bias and context units per layer."""

    def __init__(self, layers: Iterable[BasicLayer] | None = None) -> None:
        self._layers: List[BasicLayer] = []
        self._finalized = False
        self.input_count = 0
        self.output_count = 0
        for layer in layers or ():
            self.add_layer(layer)

    # ------------------------------------------------------------------
    # Structure

    def add_layer(self, layer: BasicLayer) -> None:
        """Append ``layer``; layers are declared from input to output."""

        if self._finalized:
            raise NetworkStateError("Cannot add layers after finalize_structure()")
        if not isinstance(layer, BasicLayer):
            raise TypeError(f"Expected BasicLayer, got {type(layer).__name__}")
        self._layers.append(layer)

    def finalize_structure(self) -> None:
        """Derive the flat layout from the declared layers.

        Visits layers from output to input so that the output layer lands in
        slot 0. ``weight_index[s]`` addresses the block connecting slot
        ``s + 1`` into slot ``s``.
        """

        if self._finalized:
            raise NetworkStateError("Network structure is already finalized")
        if not self._layers:
            raise NetworkStateError("Cannot finalize a network without layers")

        layer_count = len(self._layers)
        self.input_count = self._layers[0].count
        self.output_count = self._layers[-1].count

        counts: List[int] = []
        feed: List[int] = []
        context: List[int] = []
        layer_index: List[int] = []
        weight_index: List[int] = []
        bias: List[float] = []
        activations: List[Activation] = []
        offsets: List[LayerOffsets] = []

        neuron_count = 0
        weight_count = 0
        for index, declared in enumerate(range(layer_count - 1, -1, -1)):
            layer = self._layers[declared]
            next_layer = self._layers[declared - 1] if declared > 0 else None
            if layer.count == 0:
                warnings.warn(
                    f"Layer {declared} has no fed neurons",
                    RuntimeWarning,
                    stacklevel=2,
                )

            bias.append(DEFAULT_BIAS_ACTIVATION if layer.has_bias else NO_BIAS_ACTIVATION)
            counts.append(layer.total_count)
            feed.append(layer.count)
            context.append(layer.context_count)
            activations.append(layer.get_activation())

            neuron_count += layer.total_count
            if next_layer is not None:
                weight_count += layer.count * next_layer.total_count

            if index == 0:
                weight_index.append(0)
                layer_index.append(0)
            else:
                weight_index.append(weight_index[index - 1] + counts[index] * feed[index - 1])
                layer_index.append(layer_index[index - 1] + counts[index - 1])

            offsets.append(
                LayerOffsets(
                    slot=index,
                    layer=declared,
                    neuron_offset=layer_index[index],
                    weight_offset=weight_index[index],
                    total_count=layer.total_count,
                    feed_count=layer.count,
                    context_count=layer.context_count,
                    source_slot=index + 1 if next_layer is not None else None,
                )
            )

        self._layer_counts = np.asarray(counts, dtype=np.int64)
        self._layer_feed_counts = np.asarray(feed, dtype=np.int64)
        self._layer_context_count = np.asarray(context, dtype=np.int64)
        self._layer_index = np.asarray(layer_index, dtype=np.int64)
        self._weight_index = np.asarray(weight_index, dtype=np.int64)
        self._bias_activation = np.asarray(bias, dtype=np.float64)
        self._activation_functions = activations
        self._offsets = tuple(offsets)

        self._weights = np.zeros(weight_count, dtype=np.float64)
        self._layer_output = np.zeros(neuron_count, dtype=np.float64)
        self._layer_sums = np.zeros(neuron_count, dtype=np.float64)
        self._finalized = True

        self.clear_context()

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def _require_finalized(self) -> None:
        if not self._finalized:
            raise NetworkStateError("Call finalize_structure() before using the network")

    # ------------------------------------------------------------------
    # Forward computation

    def compute(
        self,
        input: Sequence[float],
        output: MutableSequence[float] | None = None,
    ) -> Array | MutableSequence[float]:
        """Propagate ``input`` through the network and return the output.

        ``output`` may be a preallocated buffer of length ``output_count``;
        it is filled and returned. ``layer_output``/``layer_sums`` are
        scratch state, so concurrent calls on one instance are unsafe.
        """

        self._require_finalized()
        values = np.asarray(input, dtype=np.float64)
        if values.ndim != 1 or values.shape[0] != self.input_count:
            raise ShapeMismatchError(
                f"Expected input of length {self.input_count}, got shape {values.shape}"
            )
        if output is not None and len(output) != self.output_count:
            raise ShapeMismatchError(
                f"Expected output buffer of length {self.output_count}, got {len(output)}"
            )

        source = self._layer_output.shape[0] - int(self._layer_counts[-1])
        self._layer_output[source : source + self.input_count] = values

        for slot in range(self.layer_count - 2, -1, -1):
            compute_layer(self, slot)

        self._feed_context()

        result = self._layer_output[: self.output_count]
        if output is None:
            return result.copy()
        output[:] = result
        return output

    def _feed_context(self) -> None:
        # Context units of a layer hold the latest outputs of the layer it feeds.
        for target in self._offsets[1:]:
            if target.context_count == 0:
                continue
            fed = self._offsets[target.slot - 1]
            n = min(target.context_count, fed.feed_count)
            start = target.context_start
            self._layer_output[start : start + n] = self._layer_output[
                fed.neuron_offset : fed.neuron_offset + n
            ]

    def compute_regression(self, input: Sequence[float]) -> Array:
        return self.compute(input)

    def clear_context(self) -> None:
        """Zero every neuron output, restoring bias units to their constant."""

        self._require_finalized()
        index = 0
        for slot in range(self.layer_count):
            feed = int(self._layer_feed_counts[slot])
            context = int(self._layer_context_count[slot])
            has_bias = context + feed != int(self._layer_counts[slot])

            self._layer_output[index : index + feed] = 0.0
            index += feed

            if has_bias:
                self._layer_output[index] = self._bias_activation[slot]
                index += 1

            self._layer_output[index : index + context] = 0.0
            index += context

    def reset(self, randomizer: Randomizer | None = None, seed: int | None = None) -> None:
        """Initialise the weights in place, Xavier-normal by default."""

        self._require_finalized()
        if randomizer is None:
            randomizer = XavierRandomizer(np.random.default_rng(seed))
        randomizer.randomize(self)

    # ------------------------------------------------------------------
    # Addressing

    def _storage_slot(self, layer: int) -> int:
        """Convert a declaration index (0 = input) to a storage slot (0 = output)."""

        self._require_finalized()
        layer = _as_index(layer, "layer")
        layer_count = self.layer_count
        if layer < 0 or layer >= layer_count:
            raise NeuronRangeError(f"Invalid layer: {layer}")
        return layer_count - layer - 1

    def _weight_position(self, from_layer: int, from_neuron: int, to_neuron: int) -> int:
        self.validate_neuron(from_layer, from_neuron)
        from_slot = self._storage_slot(from_layer)
        to_slot = from_slot - 1
        if to_slot < 0:
            raise LayerConnectionError(
                f"The specified layer is not connected to another layer: {from_layer}"
            )
        self.validate_neuron(from_layer + 1, to_neuron)
        if to_neuron >= self._layer_feed_counts[to_slot]:
            raise NeuronRangeError(
                f"Neuron {to_neuron} of layer {from_layer + 1} has no incoming weights"
            )
        return (
            int(self._weight_index[to_slot])
            + from_neuron
            + to_neuron * int(self._layer_counts[from_slot])
        )

    def get_weight(self, from_layer: int, from_neuron: int, to_neuron: int) -> float:
        """Return the weight from ``from_neuron`` of ``from_layer`` into the next layer."""

        return float(self._weights[self._weight_position(from_layer, from_neuron, to_neuron)])

    def set_weight(self, from_layer: int, from_neuron: int, to_neuron: int, value: float) -> None:
        """Set a weight; the bias neuron is the last fed position of a layer."""

        self._weights[self._weight_position(from_layer, from_neuron, to_neuron)] = value

    def validate_neuron(self, layer: int, neuron: int) -> None:
        total = self.layer_total_neuron_count(layer)
        neuron = _as_index(neuron, "neuron number")
        if neuron < 0 or neuron >= total:
            raise NeuronRangeError(f"Invalid neuron number: {neuron}")

    def layer_total_neuron_count(self, layer: int) -> int:
        """Neuron count of declared ``layer`` including bias and context units."""

        return int(self._layer_counts[self._storage_slot(layer)])

    def layer_neuron_count(self, layer: int) -> int:
        """Fed neuron count of declared ``layer``."""

        return int(self._layer_feed_counts[self._storage_slot(layer)])

    # ------------------------------------------------------------------
    # Activation and bias configuration

    def has_same_activation(self) -> str | None:
        """Return the activation name shared by every layer, else ``None``."""

        self._require_finalized()
        functions = {fn.fn for fn in self._activation_functions}
        if len(functions) != 1:
            return None
        return self._activation_functions[0].name

    def set_activation_functions(self, activations: Sequence[ActivationLike]) -> None:
        """Replace the per-slot activations (storage order, output first)."""

        self._require_finalized()
        if len(activations) != self.layer_count:
            raise ShapeMismatchError(
                f"Expected {self.layer_count} activations, got {len(activations)}"
            )
        self._activation_functions = [resolve(fn) for fn in activations]

    def set_bias_activation(self, values: Sequence[float]) -> None:
        """Replace the per-slot bias constants and refresh the bias units."""

        self._require_finalized()
        if len(values) != self.layer_count:
            raise ShapeMismatchError(
                f"Expected {self.layer_count} bias activations, got {len(values)}"
            )
        self._bias_activation[:] = np.asarray(values, dtype=np.float64)
        for offsets in self._offsets:
            position = offsets.bias_position
            if position is not None:
                self._layer_output[position] = self._bias_activation[offsets.slot]

    # ------------------------------------------------------------------
    # State

    def state_dict(self) -> Mapping[str, Array]:
        self._require_finalized()
        return {
            "weights": self._weights.copy(),
            "bias_activation": self._bias_activation.copy(),
        }

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        self._require_finalized()
        for key in ("weights", "bias_activation"):
            if key not in state:
                raise KeyError(f"Missing {key} in state dict")
        weights = np.asarray(state["weights"], dtype=np.float64)
        if weights.shape != self._weights.shape:
            raise ShapeMismatchError(
                f"Expected {self._weights.shape[0]} weights, got shape {weights.shape}"
            )
        bias = np.asarray(state["bias_activation"], dtype=np.float64)
        if bias.shape != self._bias_activation.shape:
            raise ShapeMismatchError(
                f"Expected {self.layer_count} bias activations, got shape {bias.shape}"
            )
        self._weights[:] = weights
        self.set_bias_activation(bias)

    def describe(self) -> NetworkLayout:
        self._require_finalized()
        return NetworkLayout(
            layer_counts=tuple(int(v) for v in self._layer_counts),
            layer_feed_counts=tuple(int(v) for v in self._layer_feed_counts),
            layer_context_count=tuple(int(v) for v in self._layer_context_count),
            layer_index=tuple(int(v) for v in self._layer_index),
            weight_index=tuple(int(v) for v in self._weight_index),
            bias_activation=tuple(float(v) for v in self._bias_activation),
            activations=tuple(fn.name for fn in self._activation_functions),
            input_count=self.input_count,
            output_count=self.output_count,
            neuron_count=self.neuron_count,
            weight_count=self.encode_length,
        )

    # ------------------------------------------------------------------
    # Accessors

    @property
    def layers(self) -> Tuple[BasicLayer, ...]:
        return tuple(self._layers)

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    @property
    def offsets(self) -> Tuple[LayerOffsets, ...]:
        self._require_finalized()
        return self._offsets

    @property
    def layer_counts(self) -> Array:
        self._require_finalized()
        return self._layer_counts

    @property
    def layer_feed_counts(self) -> Array:
        self._require_finalized()
        return self._layer_feed_counts

    @property
    def layer_context_count(self) -> Array:
        self._require_finalized()
        return self._layer_context_count

    @property
    def layer_index(self) -> Array:
        self._require_finalized()
        return self._layer_index

    @property
    def weight_index(self) -> Array:
        self._require_finalized()
        return self._weight_index

    @property
    def bias_activation(self) -> Array:
        self._require_finalized()
        return self._bias_activation

    @property
    def activation_functions(self) -> List[Activation]:
        self._require_finalized()
        return self._activation_functions

    @property
    def weights(self) -> Array:
        self._require_finalized()
        return self._weights

    @property
    def layer_output(self) -> Array:
        self._require_finalized()
        return self._layer_output

    @property
    def layer_sums(self) -> Array:
        self._require_finalized()
        return self._layer_sums

    @property
    def long_term_memory(self) -> Array:
        return self.weights

    @property
    def neuron_count(self) -> int:
        return int(self.layer_counts.sum())

    @property
    def encode_length(self) -> int:
        return int(self.weights.shape[0])


__all__ = [
    "BasicNetwork",
    "DEFAULT_BIAS_ACTIVATION",
    "NO_BIAS_ACTIVATION",
]
