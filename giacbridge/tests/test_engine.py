from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from giacbridge.engine import GiacProcess, check_errors, clean_output
from giacbridge.errors import GiacError, GiacTimeout

needs_cat = pytest.mark.skipif(shutil.which("cat") is None, reason="needs cat")
needs_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="needs sh")

STALLING_GIAC = """\
#!/bin/sh
read first
echo "$first"
while read line; do :; done
"""

EXITING_GIAC = """\
#!/bin/sh
read first
echo "$first"
read second
"""


def test_clean_output_drops_prompts_and_noise() -> None:
    raw = [
        "0>> ",
        "// Giac share root-directory:/usr/share/giac/",
        "Evaluation time: 0.001",
        "1>> (x-1)*(x+1)",
        "",
        '"__giacbridge_sync_3__"',
    ]
    assert clean_output(raw) == ["(x-1)*(x+1)"]


@pytest.mark.parametrize(
    ("line", "category"),
    [
        ("Syntax error line 1 at end of input", "parse"),
        ("parse error, unexpected ')'", "parse"),
        ("Error: Bad Argument Type", "eval"),
        ("Bad Argument Value", "eval"),
        ("Invalid dimension", "eval"),
    ],
)
def test_check_errors(line: str, category: str) -> None:
    with pytest.raises(GiacError) as excinfo:
        check_errors(["ok", line])
    assert excinfo.value.category == category
    assert excinfo.value.msg == line


def test_check_errors_prefers_parse_errors() -> None:
    with pytest.raises(GiacError) as excinfo:
        check_errors(["Error: Bad Argument Type", "Syntax error"])
    assert excinfo.value.category == "parse"


def test_check_errors_accepts_normal_output() -> None:
    check_errors(["(x-1)*(x+1)", "3*x^2"])


@needs_cat
def test_execute_round_trip_over_pipes() -> None:
    proc = GiacProcess(executable="cat", startup_timeout=5)
    try:
        assert proc.generation == 1
        assert proc.alive()
        assert proc.execute("x+1") == "x+1"
        assert proc.execute("factor(\nx^2-1)") == "factor( x^2-1)"
    finally:
        proc.close()


@needs_cat
def test_execute_raises_reported_errors() -> None:
    proc = GiacProcess(executable="cat", startup_timeout=5)
    try:
        with pytest.raises(GiacError) as excinfo:
            proc.execute("Syntax error near x")
        assert excinfo.value.category == "parse"
        assert proc.execute("y") == "y"
    finally:
        proc.close()


@needs_sh
def test_timeout_restarts_engine(tmp_path: Path) -> None:
    script = tmp_path / "giac"
    script.write_text(STALLING_GIAC, encoding="utf-8")
    script.chmod(0o755)
    proc = GiacProcess(executable=str(script), read_timeout=0.2, startup_timeout=5)
    try:
        with pytest.raises(GiacTimeout):
            proc.execute("1+1")
        assert proc.generation == 2
        assert proc.alive()
    finally:
        proc.close()


def test_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        GiacProcess(executable=str(tmp_path / "no-giac-here"))


@needs_sh
def test_unexpected_exit_restarts_engine(tmp_path: Path) -> None:
    script = tmp_path / "giac"
    script.write_text(EXITING_GIAC, encoding="utf-8")
    script.chmod(0o755)
    proc = GiacProcess(executable=str(script), read_timeout=5, startup_timeout=5)
    try:
        with pytest.raises(GiacError) as excinfo:
            proc.execute("1+1")
        assert excinfo.value.msg == "giac process exited unexpectedly"
        assert proc.generation == 2
        # the next call reaches the new process instead of a dead pipe
        with pytest.raises(GiacError) as excinfo:
            proc.execute("2+2")
        assert excinfo.value.msg == "giac process exited unexpectedly"
        assert proc.generation == 3
    finally:
        proc.close()
