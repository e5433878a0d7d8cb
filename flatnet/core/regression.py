"""Interface shared by models that map an input vector to an output vector."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from .types import Array


@runtime_checkable
class RegressionAlgorithm(Protocol):
    """Black-box regression model as seen by external optimisers."""

    def compute_regression(self, input: Sequence[float]) -> Array:
        """Return the model output for ``input``."""

    @property
    def long_term_memory(self) -> Array:
        """Tunable parameters, exposed as a live flat vector."""
