from __future__ import annotations

import pytest

import giacbridge
from giacbridge import discovery


def test_listing_uses_default_session(default) -> None:
    names = discovery.list_commands()
    assert "factor" in names
    assert "+" in names
    assert "+" not in discovery.available_commands()
    assert discovery.is_valid_command("derive")
    assert not discovery.is_valid_command("factr")


def test_explicit_session_argument(session) -> None:
    assert discovery.search_commands("sin", session=session) == ["sin", "sinh"]
    assert discovery.search_commands_by_description("derivative", session=session) == ["diff"]
    assert "trigonometry" in discovery.list_categories(session=session)
    assert "sin" in discovery.commands_in_category("trigonometry", session=session)


def test_command_info_and_help(default) -> None:
    info = discovery.command_info("derive")
    assert info.name == "derive"
    assert info.category == "calculus"
    assert discovery.giac_help("factor").startswith("Description: Factors a polynomial.")
    assert discovery.giac_help("nosuch") == ""
    assert discovery.help("factor").examples[0] == "factor(x^4-1)"


def test_suggestions_follow_session_count(default) -> None:
    discovery.set_suggestion_count(1)
    assert discovery.get_suggestion_count() == 1
    assert discovery.suggest_commands("factr") == ["factor"]
    assert discovery.suggest_commands_with_distances("factr", n=2) == [("factor", 1), ("ifactor", 2)]
    discovery.set_suggestion_count(-1)
    assert discovery.get_suggestion_count() == 4


def test_unknown_category(default) -> None:
    with pytest.raises(ValueError):
        discovery.commands_in_category("alchemy")


def test_package_exports() -> None:
    for name in ("invoke_cmd", "Expr", "GiacError", "to_python", "to_sympy",
                 "to_mathjson", "GiacMatrix", "substitute", "suggest_commands"):
        assert hasattr(giacbridge, name)
