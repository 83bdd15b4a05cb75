from __future__ import annotations

from giacbridge.server import handle_request


def request(op, **params):
    return {"id": 7, "op": {"op": op, "params": params}}


def test_invoke(session, fake) -> None:
    fake.results["factor(x^2-1)"] = "(x-1)*(x+1)"
    resp = handle_request(session, request("invoke", cmd="factor", args=["x^2-1"]))
    assert resp["id"] == 7
    assert resp["status"] == "ok"
    assert resp["text"] == "(x-1)*(x+1)"
    assert resp["result"] == ["Multiply", ["Subtract", "x", 1], ["Add", "x", 1]]


def test_invoke_with_mathjson_arguments(session, fake) -> None:
    fake.results["diff(((x)^(3)),x)"] = "3*x^2"
    resp = handle_request(session, request("invoke", cmd="diff", args=[["Power", "x", 3], "x"]))
    assert resp["text"] == "3*x^2"


def test_handles_are_released_after_each_request(session, fake) -> None:
    handle_request(session, request("eval", expr="x+1"))
    assert fake.purged == ["_gb1"]


def test_unknown_command_reports_category(session) -> None:
    resp = handle_request(session, request("invoke", cmd="factr", args=["x"]))
    assert resp["status"] == "error"
    assert resp["category"] == "eval"
    assert "Did you mean: factor" in resp["error"]


def test_to_python(session) -> None:
    resp = handle_request(session, request("to_python", expr="[1,2,3]"))
    assert resp["value"] == [1, 2, 3]
    resp = handle_request(session, request("to_python", expr="3/4"))
    assert resp["value"] == ["Rational", 3, 4]
    resp = handle_request(session, request("to_python", expr="true"))
    assert resp["value"] is True


def test_latex(session, fake) -> None:
    fake.results["latex(x^2)"] = '"x^{2}"'
    resp = handle_request(session, request("latex", expr="x^2"))
    assert resp == {"id": 7, "status": "ok", "latex": "x^{2}"}


def test_help_suggest_and_search(session) -> None:
    resp = handle_request(session, request("help", cmd="factor"))
    assert resp["description"] == "Factors a polynomial."
    assert resp["related"] == ["ifactor", "cfactor"]
    resp = handle_request(session, request("suggest", name="factr", n=1))
    assert resp["suggestions"] == ["factor"]
    resp = handle_request(session, request("search", query="sine"))
    assert resp["commands"] == ["cos", "sin", "sinh"]
    resp = handle_request(session, request("search", query="hyperbolic"))
    assert resp["commands"] == ["sinh"]


def test_bad_requests(session) -> None:
    resp = handle_request(session, request("teleport"))
    assert resp == {"id": 7, "status": "error", "error": "unknown operation: teleport"}
    resp = handle_request(session, request("eval"))
    assert resp["status"] == "error"
    assert resp["error"].startswith("bad request")
    resp = handle_request(session, request("eval", expr=""))
    assert resp["category"] == "parse"
