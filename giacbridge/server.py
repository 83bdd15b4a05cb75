#!/usr/bin/env python3
"""
GIAC bridge, JSON-RPC over stdin/stdout.

Reads line-delimited JSON requests from stdin, evaluates them with GIAC,
and writes JSON responses to stdout. Expressions travel as MathJSON; a
plain string argument is passed to GIAC as source text.

    {"id": 1, "op": {"op": "invoke", "params": {"cmd": "factor", "args": ["x^2-1"]}}}
    {"id": 1, "status": "ok", "text": "(x-1)*(x+1)", "result": ["Multiply", ...]}
"""

import json
import logging
import sys
import traceback
from fractions import Fraction

from .commands import invoke_cmd
from .convert import to_python, to_str
from .errors import GiacError
from .expr import Expr
from .mathjson_bridge import mathjson_to_giac, to_mathjson
from .session import Session


def _argument(value):
    """A request argument: strings are GIAC source, anything else MathJSON."""
    if isinstance(value, str):
        return value
    return mathjson_to_giac(value)


def _result(req_id, expr):
    return {"id": req_id, "status": "ok", "text": expr.text, "result": to_mathjson(expr)}


def _jsonable(value):
    if isinstance(value, bool) or isinstance(value, (int, float, str)):
        return value
    if isinstance(value, Fraction):
        return ["Rational", value.numerator, value.denominator]
    if isinstance(value, complex):
        return ["Complex", value.real, value.imag]
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, Expr):
        return to_mathjson(value)
    return str(value)


def handle_request(session, req):
    """Process a single request and return a response dict."""
    req_id = req["id"]
    op_data = req["op"]
    op_name = op_data["op"]
    params = op_data.get("params", {})

    try:
        if op_name == "eval":
            with session.evaluate(_argument(params["expr"])) as expr:
                return _result(req_id, expr)

        elif op_name == "invoke":
            args = [_argument(a) for a in params.get("args", [])]
            with invoke_cmd(params["cmd"], *args, session=session) as expr:
                return _result(req_id, expr)

        elif op_name == "to_python":
            with session.evaluate(_argument(params["expr"])) as expr:
                return {"id": req_id, "status": "ok", "value": _jsonable(to_python(expr))}

        elif op_name == "latex":
            with invoke_cmd("latex", _argument(params["expr"]), session=session) as expr:
                latex_str = to_str(expr)
            return {"id": req_id, "status": "ok", "latex": latex_str}

        elif op_name == "help":
            result = session.registry.help(params["cmd"], session.suggestion_count)
            return {
                "id": req_id,
                "status": "ok",
                "command": result.command,
                "description": result.description,
                "related": list(result.related),
                "examples": list(result.examples),
            }

        elif op_name == "suggest":
            n = params.get("n", session.suggestion_count)
            return {"id": req_id, "status": "ok",
                    "suggestions": session.registry.suggest(params["name"], n)}

        elif op_name == "search":
            n = params.get("n", 20)
            return {"id": req_id, "status": "ok",
                    "commands": session.registry.search_by_description(params["query"], n)}

        else:
            return {"id": req_id, "status": "error",
                    "error": f"unknown operation: {op_name}"}

    except GiacError as e:
        return {"id": req_id, "status": "error", "error": e.msg, "category": e.category}
    except (KeyError, TypeError, ValueError) as e:
        return {"id": req_id, "status": "error", "error": f"bad request: {e}"}


def main():
    """Main loop: read JSON requests from stdin, write responses to stdout."""
    logging.basicConfig(stream=sys.stderr, level=logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    session = Session()
    try:
        session.engine
    except FileNotFoundError:
        sys.stderr.write(f"Error: {session.config.executable} not found in PATH\n")
        sys.exit(1)
    except (OSError, GiacError) as e:
        sys.stderr.write(f"Error starting giac: {e}\n")
        sys.exit(1)

    try:
        for line in sys.stdin:
            line = line.strip()
            if not line:
                continue
            try:
                req = json.loads(line)
                resp = handle_request(session, req)
            except json.JSONDecodeError as e:
                resp = {"id": 0, "status": "error", "error": f"invalid JSON: {e}"}
            except Exception as e:
                resp = {"id": 0, "status": "error",
                        "error": f"bridge error: {e}\n{traceback.format_exc()}"}

            sys.stdout.write(json.dumps(resp) + "\n")
            sys.stdout.flush()
    finally:
        session.close()


if __name__ == "__main__":
    main()
