import json

import pytest

from cli.main import main


def _json_lines(text: str):
    return [json.loads(line) for line in text.splitlines() if line.startswith("{")]


def test_cli_echo_preset(capsys):
    main(["--preset", "linear-echo", "--input", "1,2,3", "--input=-1,0.5,0"])
    out = capsys.readouterr().out
    assert "=== flatnet network ===" in out
    results = _json_lines(out)
    assert [r["output"] for r in results] == [[1.0, 2.0, 3.0], [-1.0, 0.5, 0.0]]


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    names = capsys.readouterr().out.split()
    assert "xor" in names and "sine-regressor" in names


def test_cli_clear_context_between_inputs(capsys):
    main(["--preset", "elman", "--clear-context-between", "--input", "0.5", "--input", "0.5"])
    first, second = _json_lines(capsys.readouterr().out)
    assert first["output"] == second["output"]


def test_cli_config_override_and_dump(tmp_path, capsys):
    config_path = tmp_path / "net.yaml"
    config_path.write_text(
        "layers:\n"
        "  - count: 2\n"
        "  - count: 1\n"
        "    bias: false\n"
        "    activation: sigmoid\n"
    )
    dump = tmp_path / "out" / "resolved.json"
    main(["--config", str(config_path), "--dump-config", str(dump), "--input", "1,1"])
    out = capsys.readouterr().out
    assert f"config:{config_path}" in out
    # zero weights: sigmoid(0)
    assert _json_lines(out)[0]["output"] == [0.5]
    assert json.loads(dump.read_text())["layers"][1]["activation"] == "sigmoid"


def test_cli_seed_is_reproducible(capsys):
    main(["--preset", "xor", "--seed", "3", "--input", "1,0"])
    first = _json_lines(capsys.readouterr().out)
    main(["--preset", "xor", "--seed", "3", "--input", "1,0"])
    second = _json_lines(capsys.readouterr().out)
    assert first == second
