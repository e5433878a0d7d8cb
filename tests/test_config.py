import json

import numpy as np
import pytest

from flatnet import config as net_config


def test_builtin_and_file_presets():
    names = set(net_config.presets())
    assert {"xor", "elman", "linear-echo", "sine-regressor"} <= names

    sine = net_config.build_network(net_config.load_preset("sine-regressor"))
    assert list(sine.layer_counts) == [1, 9, 2]
    assert sine.encode_length == 1 * 9 + 8 * 2
    assert sine.weights.any()


def test_build_network_applies_seeded_init():
    first = net_config.build_network(net_config.load_preset("xor"))
    second = net_config.build_network(net_config.load_preset("xor"))
    assert list(first.layer_counts) == [1, 3, 3]
    assert first.encode_length == 9
    assert np.array_equal(first.weights, second.weights)

    elman = net_config.build_network(net_config.load_preset("elman"))
    assert list(elman.layer_context_count) == [0, 0, 2]
    assert np.all(np.abs(elman.weights) <= 0.5)


def test_preset_without_init_keeps_zero_weights():
    echo = net_config.build_network(net_config.load_preset("linear-echo"))
    assert echo.encode_length == 0
    assert echo.compute([1.0, 2.0, 3.0]).tolist() == [1.0, 2.0, 3.0]


def test_load_preset_unknown():
    with pytest.raises(KeyError, match="Unknown preset"):
        net_config.load_preset("does-not-exist")


def test_read_config_formats(tmp_path):
    json_path = tmp_path / "net.json"
    json_path.write_text(json.dumps({"layers": [{"count": 2}, {"count": 1, "bias": False}]}))
    network = net_config.build_network(net_config.read_config(json_path))
    assert list(network.layer_counts) == [1, 3]

    yaml_path = tmp_path / "net.yaml"
    yaml_path.write_text("layers:\n  - count: 3\n    bias: false\n")
    assert net_config.read_config(yaml_path)["layers"] == [{"count": 3, "bias": False}]

    with pytest.raises(ValueError):
        net_config.read_config(tmp_path / "net.toml")
    bad = tmp_path / "list.json"
    bad.write_text("[1, 2]")
    with pytest.raises(TypeError):
        net_config.read_config(bad)


def test_layer_and_network_config_errors():
    with pytest.raises(KeyError):
        net_config.make_layer({"bias": True})
    with pytest.raises(ValueError, match="Unknown layer keys"):
        net_config.make_layer({"count": 1, "dropout": 0.5})
    with pytest.raises(TypeError):
        net_config.make_layer([1])
    with pytest.raises(TypeError, match="boolean"):
        net_config.make_layer({"count": 1, "bias": "false"})
    assert net_config.make_layer({"count": 1, "bias": False}).has_bias is False
    with pytest.raises(KeyError):
        net_config.build_network({})
    with pytest.raises(TypeError):
        net_config.build_network({"layers": {"count": 1}})


def test_merge_is_recursive():
    base = {"init": {"strategy": "xavier", "seed": 0}, "layers": [{"count": 1}]}
    merged = net_config.merge(base, {"init": {"seed": 5}})
    assert merged["init"] == {"strategy": "xavier", "seed": 5}
    assert merged["layers"] == [{"count": 1}]


@pytest.mark.parametrize(
    "init",
    [
        {"strategy": "xavier", "options": {"low": -1.0}},
        {"strategy": "range", "options": {"mean": 0.0}},
        {"strategy": "gaussian", "options": {"high": 1.0}},
    ],
)
def test_unexpected_init_options_are_rejected(init):
    config = {"layers": [{"count": 2}, {"count": 1, "bias": False}], "init": init}
    with pytest.raises(ValueError, match="Unexpected options"):
        net_config.build_network(config)
