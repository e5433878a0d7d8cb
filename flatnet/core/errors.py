"""Exception types raised by the flat network core."""

from __future__ import annotations


class FlatNetError(Exception):
    """Base class for every error raised by flatnet."""


class NetworkStateError(FlatNetError, RuntimeError):
    """The network structure is not in the state the call requires."""


class NeuronRangeError(FlatNetError, IndexError):
    """A layer or neuron index falls outside the declared structure."""


class LayerConnectionError(NeuronRangeError):
    """The requested layer has no downstream connection."""


class ShapeMismatchError(FlatNetError, ValueError):
    """A vector length disagrees with the network's input/output size."""


__all__ = [
    "FlatNetError",
    "NetworkStateError",
    "NeuronRangeError",
    "LayerConnectionError",
    "ShapeMismatchError",
]
