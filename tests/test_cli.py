# tests/test_cli.py
from __future__ import annotations

import math
import re
import sys
import threading

import pytest

from widenum import cli

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@pytest.fixture
def run(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("WIDENUM_HOME", str(tmp_path))
    # leave pytest's capture streams alone
    monkeypatch.setattr(cli, "colorama_init", lambda **kw: None)
    # --debug installs global hooks; restore them afterwards
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)

    def _run(*argv: str) -> tuple[int, str, str]:
        rc = cli.main(list(argv))
        out, err = capsys.readouterr()
        return rc, ANSI_RE.sub("", out), ANSI_RE.sub("", err)

    return _run


def test_factorial(run):
    rc, out, _ = run("factorial", "5")
    assert rc == 0
    assert "5! = 120" in out


def test_full_flag_prints_every_digit(run):
    rc, out, _ = run("--full", "factorial", "100")
    assert rc == 0
    assert str(math.factorial(100)) in out
    rc, out, _ = run("factorial", "100")
    assert "…" in out


def test_ncr_npr_gauss(run):
    assert "C(52, 5) = 2598960" in run("ncr", "52", "5")[1]
    assert "P(5, 2) = 20" in run("npr", "5", "2")[1]
    assert "gauss_sum(5) = 15" in run("gauss", "5")[1]


def test_divide(run):
    rc, out, _ = run("divide", "17", "5", "--max-iterations", "10")
    assert rc == 0
    assert "q = 3" in out and "r = 2" in out


def test_pmf_and_mean(run):
    rc, out, _ = run("pmf", "1,0,1,1,0", "--target", "1", "--trials", "4")
    assert rc == 0
    assert "0.025600000000" in out
    assert "0.129600000000" in out
    assert "mean = 2.400000000000" in out
    rc, out, _ = run("mean", "1,0,1,1,0", "--target", "1", "--trials", "4")
    assert "mean = 2.400000000000" in out


def test_float_width_must_be_a_float_format(run, capsys):
    with pytest.raises(SystemExit) as exc:
        run("mean", "1,0", "--target", "1", "--trials", "2", "--float-width", "100")
    assert exc.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
    rc, out, _ = run("mean", "1,0", "--target", "1", "--trials", "2", "--float-width", "64")
    assert rc == 0
    assert "mean = 1.000000000000" in out


@pytest.mark.parametrize(
    "argv, kind",
    [
        (("ncr", "3", "5"), "InvalidRange"),
        (("--width", "4", "factorial", "5"), "Overflow"),
        (("divide", "1", "0"), "DivisionByZero"),
        (("divide", "255", "1", "--max-iterations", "2"), "NonConvergence"),
        (("mean", ",", "--target", "1", "--trials", "3"), "EmptySample"),
    ],
)
def test_core_errors_exit_one(run, argv, kind):
    rc, _, err = run(*argv)
    assert rc == 1
    assert err.startswith("Error:")
    assert kind in err


def test_bad_integer_is_user_error(run):
    rc, _, err = run("factorial", "five")
    assert rc == 2
    assert "not an integer" in err


def test_unknown_profile(run):
    rc, _, err = run("--profile", "nope", "factorial", "3")
    assert rc == 2
    assert "nope" in err


def test_debug_trace_on_stderr(run):
    rc, _, err = run("--debug", "divide", "17", "5")
    assert rc == 0
    assert "[divide]" in err


def test_init_and_where(run, tmp_path):
    rc, out, _ = run("init")
    assert rc == 0
    assert (tmp_path / "profiles" / "default.toml").is_file()
    rc, out, _ = run("where")
    assert "default" in out


def test_verify(run):
    rc, out, _ = run("verify", "--n-max", "8")
    assert rc == 0
    assert "OK" in out
