"""Tests for the command line interface."""

import json
import pytest

from wxpricer.cli import main

PRICE_ARGS = ["price", "--kind", "call", "--strike", "15", "--days", "30",
              "--underlying", "12", "--vol", "0.3", "--seed", "1", "--simulations", "2000"]


def test_price_json(capsys):
    assert main(PRICE_ARGS + ["--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["premium"] >= 0
    assert out["simulations"] == 2000
    assert set(out["greeks"]) == {"delta", "gamma", "theta", "vega"}


def test_price_text(capsys):
    assert main(PRICE_ARGS) == 0
    assert "premium" in capsys.readouterr().out


def test_invalid_terms_exit_code(capsys):
    args = list(PRICE_ARGS)
    args[args.index("--strike") + 1] = "-1"
    assert main(args) == 2
    assert "strike" in capsys.readouterr().err


def test_vol_default(capsys):
    assert main(["vol", "5"]) == 0
    assert capsys.readouterr().out.strip() == "0.300000"


def test_vol_from_file(tmp_path, capsys):
    f = tmp_path / "rain.txt"
    f.write_text("\n".join(["10"] * 12))
    assert main(["vol", "--file", str(f)]) == 0
    assert capsys.readouterr().out.strip() == "0.100000"


def test_stats_put(capsys):
    assert main(["stats", "--kind", "put", "--strike", "15", "--premium", "2"]) == 0
    out = capsys.readouterr().out
    assert "13.000000" in out
    assert "0.5000" in out


def test_bad_kind():
    with pytest.raises(SystemExit):
        main(["stats", "--kind", "swap", "--strike", "15", "--premium", "2"])


def test_vol_file_with_non_numeric_line(tmp_path, capsys):
    f = tmp_path / "rain.txt"
    f.write_text("10\nn/a\n12\n")
    assert main(["vol", "--file", str(f)]) == 2
    assert "wxpricer: error" in capsys.readouterr().err


def test_price_uses_env_rate(monkeypatch, capsys):
    monkeypatch.setenv("WXPRICER_RISK_FREE_RATE", "0.0")
    assert main(PRICE_ARGS + ["--json"]) == 0
    zero = json.loads(capsys.readouterr().out)
    monkeypatch.setenv("WXPRICER_RISK_FREE_RATE", "0.2")
    assert main(PRICE_ARGS + ["--json"]) == 0
    high = json.loads(capsys.readouterr().out)
    assert high["premium"] > zero["premium"]
