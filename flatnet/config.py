"""Network architecture configs and presets."""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Dict, Mapping

import numpy as np
import yaml

from .core.layers import BasicLayer
from .core.network import BasicNetwork
from .core.randomize import make_randomizer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "layers": [
            {"count": 2, "bias": True},
            {"count": 2, "bias": True, "activation": "sigmoid"},
            {"count": 1, "bias": False, "activation": "sigmoid"},
        ],
        "init": {"strategy": "xavier", "seed": 0},
    },
    "elman": {
        "layers": [
            {"count": 1, "bias": True, "context": 2},
            {"count": 2, "bias": True, "activation": "tanh"},
            {"count": 1, "bias": False, "activation": "linear"},
        ],
        "init": {"strategy": "range", "seed": 7, "options": {"low": -0.5, "high": 0.5}},
    },
    "linear-echo": {
        "layers": [{"count": 3, "bias": False}],
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[1] / "configs" / "presets"
_LAYER_KEYS = {"count", "bias", "context", "activation"}


def read_config(path: Path) -> Mapping[str, object]:
    """Load a JSON or YAML architecture file."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix == ".json":
        data = json.loads(text or "{}")
    else:
        data = yaml.safe_load(text) or {}

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    presets: Dict[str, Mapping[str, object]] = {}
    if _PRESET_DIR.exists():
        for file in sorted(_PRESET_DIR.iterdir()):
            if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                continue
            data = read_config(file)
            if "layers" not in data:
                raise KeyError(f"Preset {file.name} is missing required section: layers")
            presets[file.stem] = json.loads(json.dumps(data))
    return presets


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def merge(base: dict, override: Mapping[str, object]) -> dict:
    """Recursively merge ``override`` into ``base``."""

    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def make_layer(spec: Mapping[str, object]) -> BasicLayer:
    if not isinstance(spec, Mapping):
        raise TypeError(f"Layer config must be a mapping, got {type(spec).__name__}")
    unknown = set(spec) - _LAYER_KEYS
    if unknown:
        raise ValueError(f"Unknown layer keys: {', '.join(sorted(unknown))}")
    if "count" not in spec:
        raise KeyError("Layer config requires `count`")
    has_bias = spec.get("bias", True)
    if not isinstance(has_bias, bool):
        raise TypeError(f"Layer `bias` must be a boolean, got {has_bias!r}")
    return BasicLayer(
        count=int(spec["count"]),
        has_bias=has_bias,
        context_count=int(spec.get("context", 0)),
        activation=str(spec.get("activation", "linear")),
    )


def build_network(config: Mapping[str, object]) -> BasicNetwork:
    """Declare, finalize and optionally initialise a network from ``config``."""

    layers = config.get("layers")
    if layers is None:
        raise KeyError("Network config requires a `layers` section")
    if not isinstance(layers, list):
        raise TypeError("Network config `layers` must be a list")

    network = BasicNetwork(make_layer(spec) for spec in layers)
    network.finalize_structure()

    init = config.get("init")
    if init:
        if not isinstance(init, Mapping):
            raise TypeError("Network config `init` must be a mapping")
        rng = np.random.default_rng(init.get("seed"))
        options = {k: float(v) for k, v in dict(init.get("options", {})).items()}
        network.reset(make_randomizer(str(init.get("strategy", "xavier")), rng, **options))
    return network


__all__ = [
    "build_network",
    "load_preset",
    "make_layer",
    "merge",
    "presets",
    "read_config",
]
