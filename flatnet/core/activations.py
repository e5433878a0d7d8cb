"""Activation functions applied to a layer's weighted sums."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Union

import numpy as np

from .types import ActivationFn, Array


@dataclass(frozen=True)
class Activation:
    """Named, stateless activation applied elementwise to a sums vector."""

    name: str
    fn: ActivationFn

    def __call__(self, sums: Array) -> Array:
        return self.fn(sums)


class ActivationRegistry:
    """Central registry for activation functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Activation] = {}

    def register(self, name: str, fn: ActivationFn) -> None:
        self._registry[name] = Activation(name, fn)

    def get(self, name: str) -> Activation:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown activation {name!r}. Available activations: {available}")
        return self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = ActivationRegistry()

ActivationLike = Union[str, Activation, Callable[[Array], Array]]


def linear(x: Array) -> Array:
    """Return ``x`` unchanged."""

    return x


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid."""

    return 1.0 / (1.0 + np.exp(-x))


def tanh(x: Array) -> Array:
    return np.tanh(x)


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def softmax(x: Array) -> Array:
    """Normalise a layer's sums into a probability vector."""

    if x.size == 0:
        return x
    shifted = x - np.max(x)
    e = np.exp(shifted)
    return e / e.sum()


def step(x: Array) -> Array:
    return np.where(x >= 0.0, 1.0, 0.0)


REGISTRY.register("linear", linear)
REGISTRY.register("sigmoid", sigmoid)
REGISTRY.register("tanh", tanh)
REGISTRY.register("relu", relu)
REGISTRY.register("softmax", softmax)
REGISTRY.register("step", step)


def get_activation(name: str) -> Activation:
    return REGISTRY.get(name)


def resolve(activation: ActivationLike) -> Activation:
    """Coerce a name, :class:`Activation` or bare callable to an activation."""

    if isinstance(activation, Activation):
        return activation
    if isinstance(activation, str):
        return REGISTRY.get(activation)
    if callable(activation):
        name = getattr(activation, "__name__", type(activation).__name__)
        return Activation(name, activation)
    raise TypeError(f"Unsupported activation: {activation!r}")


__all__ = [
    "Activation",
    "ActivationLike",
    "ActivationRegistry",
    "REGISTRY",
    "get_activation",
    "resolve",
    "linear",
    "sigmoid",
    "tanh",
    "relu",
    "softmax",
    "step",
]
