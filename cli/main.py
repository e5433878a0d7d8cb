"""Command line entry point for flatnet networks."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable, List

import numpy as np

from flatnet import config as net_config
from flatnet.core.network import BasicNetwork
from flatnet.core.randomize import XavierRandomizer


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(net_config.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor",
        help="Preset architecture to build",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--input",
        action="append",
        default=[],
        help="Comma separated input vector; repeat for a sequence",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for weight initialisation (overrides the config)",
    )
    parser.add_argument(
        "--randomize",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force (or skip) Xavier initialisation of the weights",
    )
    parser.add_argument(
        "--clear-context-between",
        action="store_true",
        help="Reset context units before every input",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _parse_vector(text: str) -> List[float]:
    try:
        return [float(part) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise SystemExit(f"Invalid input vector: {text!r}") from exc


def _print_startup_summary(*, source: str, network: BasicNetwork) -> None:
    layout = network.describe()
    print("=== flatnet network ===")
    print(f"Source        : {source}")
    print(f"Layers        : {network.layer_count}")
    print(f"Layer counts  : {list(layout.layer_counts)} (output first)")
    print(f"Activations   : {list(layout.activations)}")
    print(f"Neurons       : {layout.neuron_count}")
    print(f"Weights       : {layout.weight_count}")
    print("=======================")


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(net_config.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = dict(net_config.load_preset(args.preset))
    source = f"preset:{args.preset}"
    if args.config:
        override = dict(net_config.read_config(args.config))
        if "layers" in override:
            config = override
            source = f"config:{args.config}"
        else:
            config = net_config.merge(config, override)
    config = json.loads(json.dumps(config))

    if args.seed is not None and config.get("init"):
        config["init"]["seed"] = int(args.seed)
    if args.randomize is False:
        config.pop("init", None)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2, sort_keys=True))

    network = net_config.build_network(config)
    if args.randomize and not config.get("init"):
        network.reset(XavierRandomizer(np.random.default_rng(args.seed)))

    _print_startup_summary(source=source, network=network)

    for text in args.input:
        if args.clear_context_between:
            network.clear_context()
        vector = _parse_vector(text)
        output = network.compute(vector)
        print(json.dumps({"input": vector, "output": [float(v) for v in output]}))


if __name__ == "__main__":  # pragma: no cover
    main()
