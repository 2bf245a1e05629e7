# tests/integration/test_cli_field.py
from __future__ import annotations

from pathlib import Path

import pytest

from contexp import cli
from contexp.errors import ContexpWarning
from contexp.precision import extended_available

requires_extended = pytest.mark.skipif(
    not extended_available(), reason="known grids were computed in extended precision",
)


def _grid_lines(out: str) -> list[str]:
    lines = out.splitlines()
    start = next(i for i, ln in enumerate(lines) if ln.startswith("d(Re)="))
    return lines[start + 1:]


@requires_extended
def test_small_grid_known_codes(capsys):
    code = cli.main(["-0.5", "0.5", "1.0", "2.0", "3", "3", "1e-15", "100"])
    captured = capsys.readouterr()
    assert code == 0
    assert "field [-0.500, 0.500][1.000, 2.000]" in captured.out
    assert "d(Re)=2.50000000e-01 d(Im)=2.50000000e-01" in captured.out
    rows = _grid_lines(captured.out)
    assert len(rows) == 3
    assert all(len(r.split()) == 4 for r in rows)
    assert rows == ["1 0 19 31", "1 1 1 1", "1 1 1 1"]
    # eight arguments stop at eps; the sequence length stays at its default
    assert "using vector of length 1900" in captured.out


@requires_extended
def test_single_point_known_codes(capsys):
    code = cli.main(["-2.5", "-2.4", "4.1", "4.2", "1", "1", "1e-16", "1900"])
    captured = capsys.readouterr()
    assert code == 0
    assert _grid_lines(captured.out) == ["14 14"]
    assert "d(Re)=5.00000000e-02" in captured.out


def test_inverted_region_is_rejected(capsys):
    with pytest.warns(ContexpWarning, match="unused"):
        code = cli.main(["1", "0", "0", "1", "2", "2"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Invalid area [1.000,0.000] ; [0.000,1.000]" in captured.out
    assert "field [" not in captured.out
    assert "d(Re)=" not in captured.out


def test_too_few_arguments_use_defaults(tmp_path: Path, capsys):
    # shrink the default field through a config file to keep the run short
    cfg = tmp_path / "small.toml"
    cfg.write_text("[scan]\nnum_re = 1\nnum_im = 1\nmax_iterations = 20\n", encoding="utf-8")
    code = cli.main(["--config", str(cfg), "--precision", "double", "1", "2"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Error parsing parameters: using default parameters" in captured.out
    assert "Input of parameters via arguments:" in captured.out
    assert "field [-1.000, 0.500][2.000, 3.000]" in captured.out
    assert len(_grid_lines(captured.out)) == 1


def test_four_arguments_keep_default_region(tmp_path: Path, capsys):
    cfg = tmp_path / "small.toml"
    cfg.write_text("[scan]\nnum_re = 1\nnum_im = 1\nmax_iterations = 20\n", encoding="utf-8")
    code = cli.main(["--config", str(cfg), "--precision", "double", "0", "0.1", "0", "0.1"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Error parsing parameters: using default parameters" in captured.out
    assert "Input of parameters via arguments:" in captured.out
    assert "field [-1.000, 0.500][2.000, 3.000]" in captured.out
    assert "using eps=" not in captured.out


def test_ninth_argument_sets_sequence_length(tmp_path: Path, capsys):
    cfg = tmp_path / "small.toml"
    cfg.write_text("[scan]\nmax_iterations = 20\n", encoding="utf-8")
    base = ["--config", str(cfg), "--precision", "double", "0", "0.1", "0", "0.1", "0", "1", "1e-15", "50"]
    assert cli.main(base) == 0
    assert "using vector of length 20" in capsys.readouterr().out
    assert cli.main(base + ["0"]) == 0
    assert "using vector of length 50" in capsys.readouterr().out


def test_no_arguments_prints_usage_without_error(tmp_path: Path, capsys):
    cfg = tmp_path / "small.toml"
    cfg.write_text("[scan]\nnum_re = 0\nnum_im = 1\nmax_iterations = 5\n", encoding="utf-8")
    code = cli.main(["--config", str(cfg)])
    captured = capsys.readouterr()
    assert code == 0
    assert "Error parsing" not in captured.out
    assert "Input of parameters via arguments:" in captured.out


def test_bounds_only_keep_other_defaults(tmp_path: Path, capsys):
    cfg = tmp_path / "small.toml"
    cfg.write_text("[scan]\nnum_re = 2\nnum_im = 1\nmax_iterations = 10\n", encoding="utf-8")
    code = cli.main(["--config", str(cfg), "--precision", "double", "-0.1", "0.1", "-0.1", "0.1", "7"])
    captured = capsys.readouterr()
    assert code == 0
    assert "ticks on real/imag axis: (2, 1)" in captured.out
    assert len(_grid_lines(captured.out)[0].split()) == 3


def test_show_z_lines(capsys):
    code = cli.main(["--precision", "double", "--show-z", "-0.05", "0.05", "-0.05", "0.05", "1", "1", "1e-15", "50"])
    captured = capsys.readouterr()
    assert code == 0
    rows = _grid_lines(captured.out)
    assert len(rows) == 2
    assert rows[0].startswith("1 at z=-0.050000000000000")
    assert rows[0].endswith("i")


def test_probe_and_info(capsys):
    cfg_args = ["--precision", "double", "--info", "--probe", "--probe-length", "5",
                "0", "0.1", "0", "0.1", "0", "1", "1e-15", "10"]
    code = cli.main(cfg_args)
    captured = capsys.readouterr()
    assert code == 0
    assert "F(n) = exp(z * F(n-1))" in captured.out
    assert "epsilon for float64" in captured.out
    assert "probe at z=-2.4754098360655" in captured.out
    assert "1: (" in captured.out


def test_probe_explicit_point(capsys):
    code = cli.main(["--precision", "double", "0", "0.1", "0", "0.1", "0", "1", "1e-15", "10", "--probe", "-50", "0"])
    captured = capsys.readouterr()
    assert code == 0
    assert "probe at z=-50.000000000000000+0.000000000000000i: 2" in captured.out


def test_bad_number_is_an_error(capsys):
    code = cli.main(["--precision", "double", "abc", "0", "0", "1", "0"])
    captured = capsys.readouterr()
    assert code == 1
    assert "Cannot parse" in captured.err


def test_tick_count_overflow_is_an_error(capsys):
    code = cli.main(["--precision", "double", "0", "1", "0", "1", "inf", "1", "0"])
    captured = capsys.readouterr()
    assert code == 1
    assert "Cannot parse numRe='inf'" in captured.err


def test_allocation_failure_writes_no_grid(capsys):
    code = cli.main(["--precision", "double", "0", "1", "0", "1", "1", "1", "1e-15", str(2**62), "0"])
    captured = capsys.readouterr()
    assert code == 1
    assert "allocate" in captured.err
    assert "field [" not in captured.out


def test_module_entry_point_exists():
    import importlib.util

    assert importlib.util.find_spec("contexp.__main__") is not None
