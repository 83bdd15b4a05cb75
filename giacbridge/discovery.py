"""Looking up GIAC commands: names, categories, help and suggestions.

Every function works on the default session unless ``session`` is given.
"""

from .session import default_session
from .suggest import suggest_with_distances


def _registry(session):
    return (session or default_session()).registry


def list_commands(session=None):
    return _registry(session).names()


def available_commands(session=None):
    """Command names that start with a letter (operators excluded)."""
    return _registry(session).available_commands()


def is_valid_command(name, session=None):
    return _registry(session).exists(name)


def search_commands(pattern, session=None):
    """Commands starting with ``pattern``, or matching it if it is a compiled regex."""
    return _registry(session).search(pattern)


def search_commands_by_description(query, n=20, session=None):
    return _registry(session).search_by_description(query, n)


def list_categories(session=None):
    return _registry(session).list_categories()


def commands_in_category(category, session=None):
    return _registry(session).commands_in_category(category)


def command_info(name, session=None):
    return _registry(session).info(name)


def giac_help(name, session=None):
    """Raw help text of a command, empty when GIAC has none."""
    return _registry(session).raw_help(name)


def help(name, session=None):
    session = session or default_session()
    return session.registry.help(name, session.suggestion_count)


def suggest_commands(name, n=None, session=None):
    session = session or default_session()
    return session.registry.suggest(name, n if n is not None else session.suggestion_count)


def suggest_commands_with_distances(name, n=None, session=None):
    session = session or default_session()
    n = n if n is not None else session.suggestion_count
    return suggest_with_distances(name, session.registry.names(), n)


def set_suggestion_count(n, session=None):
    (session or default_session()).set_suggestion_count(n)


def get_suggestion_count(session=None):
    return (session or default_session()).suggestion_count


def reset_conflict_warnings(session=None):
    (session or default_session()).reset_conflict_warnings()
