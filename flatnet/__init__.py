"""flatnet public API."""

from .config import build_network, load_preset, presets
from .core import activations  # noqa: F401
from .core import randomize  # noqa: F401
from .core import types  # noqa: F401
from .core.errors import (
    FlatNetError,
    LayerConnectionError,
    NetworkStateError,
    NeuronRangeError,
    ShapeMismatchError,
)
from .core.layers import BasicLayer
from .core.network import BasicNetwork

__all__ = [
    "BasicLayer",
    "BasicNetwork",
    "FlatNetError",
    "LayerConnectionError",
    "NetworkStateError",
    "NeuronRangeError",
    "ShapeMismatchError",
    "activations",
    "randomize",
    "types",
    "build_network",
    "load_preset",
    "presets",
]
