"""Core flat-memory network primitives for flatnet."""

from . import activations, errors, layers, network, randomize, regression, types
from .layers import BasicLayer, compute_layer
from .network import BasicNetwork

__all__ = [
    "activations",
    "errors",
    "layers",
    "network",
    "randomize",
    "regression",
    "types",
    "BasicLayer",
    "BasicNetwork",
    "compute_layer",
]
