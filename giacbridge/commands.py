"""
Calling GIAC commands by name.

Any command of the registry can be imported from this module::

    from giacbridge.commands import factor, diff
    factor("x^2-1")

``from giacbridge.commands import *`` brings in only the commands whose
names are safe in Python: valid identifiers that are neither keywords nor
builtins. The others stay reachable through ``invoke_cmd("sum", ...)``.
"""

import builtins
import keyword
import logging

from .errors import GiacError
from .formatting import build_command_string, to_giac_string
from .session import default_session
from .suggest import format_suggestions

logger = logging.getLogger(__name__)

PYTHON_KEYWORDS = frozenset(keyword.kwlist) | frozenset(getattr(keyword, "softkwlist", ()))
PYTHON_BUILTINS = frozenset(n for n in dir(builtins) if not n.startswith("_"))


def conflict_reason(name):
    """Why a command cannot be exported under its own name, or None."""
    if not name.isidentifier():
        return "identifier"
    if name in PYTHON_KEYWORDS:
        return "keyword"
    if name in PYTHON_BUILTINS:
        return "builtin"
    return None


def exportable_commands(session=None):
    session = session or default_session()
    return [name for name in session.registry.available_commands()
            if conflict_reason(name) is None]


def conflicting_commands(session=None):
    """Map of registry commands that shadow Python names to the reason."""
    session = session or default_session()
    conflicts = {}
    for name in session.registry.names():
        reason = conflict_reason(name)
        if reason in ("keyword", "builtin"):
            conflicts[name] = reason
    return conflicts


def giac_eval(text, session=None):
    """Evaluate a GIAC expression given as source text."""
    return (session or default_session()).evaluate(text)


def _unknown_command_hint(session, name):
    """Suggestion text when ``name`` is not a registry command, else None."""
    registry = session.registry
    if len(registry) and name not in registry:
        return format_suggestions(registry.suggest(name, session.suggestion_count))
    return None


def invoke_cmd(name, *args, session=None):
    """Call the GIAC command ``name`` with ``args``.

    Unknown names fail before anything reaches GIAC, with the closest
    registry names as suggestions. Every argument is formatted before
    the call, so an unsupported argument type fails fast too.
    """
    session = session or default_session()
    hint = _unknown_command_hint(session, name)
    if hint is not None:
        raise GiacError(f"Unknown command: {name}.{hint}", "eval")
    formatted = [to_giac_string(arg) for arg in args]
    return session.evaluate(build_command_string(name, formatted))


class Command:
    """A GIAC command bound to a name, callable like a function.

    The name is checked against the registry as soon as the command is created.
    """

    def __init__(self, name, session=None):
        self.name = name
        self._session = session
        hint = _unknown_command_hint(self.session, name)
        if hint is not None:
            raise GiacError(f"Unknown command: {name}.{hint}", "eval")

    @property
    def session(self):
        return self._session or default_session()

    def __call__(self, *args):
        return invoke_cmd(self.name, *args, session=self.session)

    def help(self):
        return self.session.registry.help(self.name, self.session.suggestion_count)

    def __repr__(self):
        return f"Command({self.name!r})"


def __getattr__(name):
    if name == "__all__":
        return exportable_commands()
    if name.startswith("_"):
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    session = default_session()
    hint = _unknown_command_hint(session, name)
    if hint is not None:
        raise AttributeError(f"Unknown GIAC command: {name}.{hint}")
    reason = conflict_reason(name)
    if reason is not None:
        session.warn_conflict(name, reason)
    return Command(name)


def __dir__():
    return sorted(set(globals()) | set(exportable_commands()))
