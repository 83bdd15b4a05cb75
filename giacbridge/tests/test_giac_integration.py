"""End-to-end checks against a real giac binary."""

from __future__ import annotations

import shutil
from fractions import Fraction

import pytest

from giacbridge.commands import invoke_cmd
from giacbridge.config import BridgeConfig
from giacbridge.convert import to_python
from giacbridge.errors import GiacError
from giacbridge.gentypes import GenType
from giacbridge.session import Session

pytestmark = pytest.mark.skipif(shutil.which("giac") is None, reason="giac is not installed")


@pytest.fixture(scope="module")
def giac():
    session = Session(config=BridgeConfig.from_env())
    yield session
    session.close()


def test_factor(giac) -> None:
    assert invoke_cmd("factor", "x^2-1", session=giac).text == "(x-1)*(x+1)"


def test_diff(giac) -> None:
    assert invoke_cmd("diff", "x^3", "x", session=giac).text == "3*x^2"


def test_exact_arithmetic(giac) -> None:
    assert to_python(giac.evaluate("1/2+1/4")) == Fraction(3, 4)
    assert to_python(giac.evaluate("2^100")) == 2 ** 100
    assert giac.evaluate("2^100").gen_type == GenType.ZINT


def test_booleans(giac) -> None:
    assert to_python(giac.evaluate("1==1")) is True
    assert to_python(giac.evaluate("1")) == 1


def test_vectors(giac) -> None:
    assert to_python(giac.evaluate("[1,2,3]")) == [1, 2, 3]


def test_syntax_error(giac) -> None:
    with pytest.raises(GiacError) as excinfo:
        giac.evaluate("1+*")
    assert excinfo.value.category == "parse"
