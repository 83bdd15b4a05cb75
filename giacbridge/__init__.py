"""Python bridge to the GIAC computer algebra system."""

from .commands import (
    Command,
    conflict_reason,
    conflicting_commands,
    exportable_commands,
    giac_eval,
    invoke_cmd,
)
from .config import BridgeConfig
from .constants import constant
from .convert import (
    to_bool,
    to_complex,
    to_float,
    to_fraction,
    to_int,
    to_list,
    to_python,
    to_str,
)
from .discovery import (
    available_commands,
    command_info,
    commands_in_category,
    get_suggestion_count,
    giac_help,
    help,
    is_valid_command,
    list_categories,
    list_commands,
    reset_conflict_warnings,
    search_commands,
    search_commands_by_description,
    set_suggestion_count,
    suggest_commands,
    suggest_commands_with_distances,
)
from .errors import GiacError, GiacTimeout
from .expr import Expr
from .gentypes import GenType
from .introspection import (
    denom,
    giac_type,
    imag_part,
    is_boolean,
    is_complex,
    is_fraction,
    is_identifier,
    is_integer,
    is_numeric,
    is_string,
    is_symbolic,
    is_vector,
    numer,
    real_part,
    subtype,
    symb_argument,
    symb_funcname,
)
from .mathjson_bridge import from_mathjson, to_mathjson
from .matrix import GiacMatrix
from .registry import CommandInfo, CommandRegistry, HelpResult
from .session import Session, default_session, set_default_session
from .shortcuts import (
    giac_diff,
    giac_expand,
    giac_factor,
    giac_gcd,
    giac_integrate,
    giac_limit,
    giac_series,
    giac_simplify,
    giac_solve,
)
from .substitute import substitute
from .symbols import indexed_symbols, symbols
from .sympy_bridge import from_sympy, to_sympy

__version__ = "0.1.0"
