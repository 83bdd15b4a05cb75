"""
Command registry built from GIAC's help database.

GIAC ships its command documentation as a plain text file (``aide_cas``).
Each entry starts with a ``#`` header naming the command and its synonyms,
followed by numbered lines (``0`` syntax, ``1`` French, ``2`` English, ...),
negative-numbered lines naming related commands, and example lines:

    # factor
    0 Expr
    1 Factorise un polynome.
    2 Factors a polynomial.
    -1 ifactor
    -2 cfactor
    factor(x^4-1)

The registry is read once and never changes afterwards.
"""

import logging
import os
import re
import shutil
from dataclasses import dataclass
from typing import Optional, Tuple

from .suggest import DEFAULT_SUGGESTION_COUNT, format_suggestions, suggest

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_RESULTS = 20

COMMAND_CATEGORIES = {
    "trigonometry": [
        "sin", "cos", "tan", "asin", "acos", "atan", "atan2",
        "sinh", "cosh", "tanh", "asinh", "acosh", "atanh",
        "cot", "sec", "csc", "acot", "asec", "acsc",
        "sinc", "sincos",
    ],
    "calculus": [
        "diff", "integrate", "int", "limit", "series", "taylor",
        "derivative", "antiderivative", "gradient", "divergence", "curl",
        "laplacian", "hessian", "jacobian",
    ],
    "algebra": [
        "factor", "expand", "simplify", "solve", "gcd", "lcm",
        "collect", "normal", "ratnormal", "horner", "canonical_form",
        "quo", "rem", "quorem", "proot", "cfactor",
    ],
    "number_theory": [
        "ifactor", "isprime", "nextprime", "prevprime", "euler", "phi",
        "gcd", "lcm", "mod", "irem", "iquo", "isqrt", "icrt",
        "chinese", "jacobi", "legendre", "divisors", "sigma",
    ],
    "linear_algebra": [
        "det", "inv", "trace", "transpose", "tran", "eigenvalues", "eigenvectors",
        "rank", "kernel", "image", "lu", "qr", "svd", "cholesky",
        "rref", "identity", "diag", "jordanblock",
    ],
    "special_functions": [
        "gamma", "Gamma", "beta", "erf", "erfc", "zeta", "Ai", "Bi",
        "Si", "Ci", "Ei", "li", "digamma", "polygamma",
        "BesselJ", "BesselY", "BesselI", "BesselK",
    ],
    "polynomials": [
        "degree", "coeff", "lcoeff", "tcoeff", "coeffs", "roots",
        "pcoeff", "poly2symb", "symb2poly", "resultant", "discriminant",
        "sturm", "sturmab", "realroot",
    ],
    "combinatorics": [
        "binomial", "factorial", "perm", "comb", "fib", "fibonacci",
        "lucas", "stirling1", "stirling2", "bell", "catalan",
        "partition", "compositions",
    ],
    "statistics": [
        "mean", "variance", "stddev", "median", "quartiles",
        "covariance", "correlation", "histogram", "boxwhisker",
        "normald", "binomial_cdf", "poisson",
    ],
    "logic": [
        "and", "or", "not", "xor", "implies", "equiv",
        "true", "false", "assume", "about",
    ],
    "geometry": [
        "point", "line", "circle", "polygon", "distance",
        "midpoint", "perpendicular", "parallel", "tangent",
        "inter", "area", "perimeter",
    ],
    "other": [],
}

# First category listing a command wins (gcd and lcm are algebra).
CATEGORY_LOOKUP = {}
for _category, _names in COMMAND_CATEGORIES.items():
    for _name in _names:
        CATEGORY_LOOKUP.setdefault(_name, _category)

HELP_FILE_LOCATIONS = (
    "/usr/share/giac/aide_cas",
    "/usr/share/giac/doc/aide_cas",
    "/usr/local/share/giac/aide_cas",
    "/usr/local/share/giac/doc/aide_cas",
    "/opt/homebrew/share/giac/aide_cas",
    "/opt/homebrew/share/giac/doc/aide_cas",
)

_NUMBERED_RE = re.compile(r"^(-?\d+)\s?(.*)$")


@dataclass(frozen=True)
class CommandEntry:
    name: str
    category: str = "other"
    aliases: Tuple[str, ...] = ()
    related: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()
    description: str = ""
    syntax: str = ""


@dataclass(frozen=True)
class CommandInfo:
    name: str
    category: str
    aliases: Tuple[str, ...]
    doc: str


@dataclass(frozen=True)
class HelpResult:
    """Structured help for one command."""

    command: str
    description: str = ""
    related: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()

    def __str__(self):
        lines = [self.command, "═" * len(self.command), "", "Description:"]
        lines.append("  " + (self.description or "[No description available]"))
        if self.related:
            lines += ["", "Related:", "  " + ", ".join(self.related)]
        if self.examples:
            lines += ["", "Examples:"]
            lines += [f"  • {ex}" for ex in self.examples]
        return "\n".join(lines)

    def __repr__(self):
        return (f"HelpResult({self.command!r}, {len(self.related)} related, "
                f"{len(self.examples)} examples)")


def parse_help_database(text):
    """Parse the contents of an ``aide_cas`` file into CommandEntry objects."""
    entries = []
    current = None

    def finish():
        if current is None:
            return
        name = current["names"][0]
        description = current["lang"].get(2) or current["lang"].get(1, "")
        entries.append(CommandEntry(
            name=name,
            category=CATEGORY_LOOKUP.get(name, "other"),
            aliases=tuple(current["names"][1:]),
            related=tuple(current["related"]),
            examples=tuple(current["examples"]),
            description=description,
            syntax=current["lang"].get(0, ""),
        ))

    for raw in text.splitlines():
        line = raw.rstrip()
        if line.startswith("#"):
            finish()
            names = line[1:].split()
            current = {"names": names, "lang": {}, "related": [], "examples": []} if names else None
            continue
        if current is None or not line.strip():
            continue
        m = _NUMBERED_RE.match(line)
        if m:
            number, body = int(m.group(1)), m.group(2).strip()
            if number < 0:
                current["related"].extend(n.strip() for n in body.split(",") if n.strip())
            else:
                current["lang"].setdefault(number, body)
        else:
            current["examples"].append(line.strip())
    finish()
    return entries


def locate_help_file(config):
    """Find GIAC's help database, or return None."""
    candidates = []
    if config.help_file:
        candidates.append(config.help_file)
    exe = shutil.which(config.executable)
    if exe:
        prefix = os.path.dirname(os.path.dirname(os.path.realpath(exe)))
        candidates.append(os.path.join(prefix, "share", "giac", "aide_cas"))
        candidates.append(os.path.join(prefix, "share", "giac", "doc", "aide_cas"))
    candidates.extend(HELP_FILE_LOCATIONS)
    for path in candidates:
        if os.path.isfile(path):
            return path
    return None


def parse_help(raw, command):
    """Parse the ``Description:/Related:/Examples:`` help text of a command."""
    description = ""
    related = ()
    examples = ()
    lines = raw.splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("Description:"):
            description = stripped[len("Description:"):].strip()
        elif stripped.startswith("Related:"):
            related = tuple(r.strip() for r in stripped[len("Related:"):].split(",") if r.strip())
        elif stripped.startswith("Examples:"):
            rest = ";".join([stripped[len("Examples:"):]] + lines[i + 1:])
            examples = tuple(ex.strip() for ex in rest.split(";") if ex.strip())
            break
    return HelpResult(command, description, related, examples)


class CommandRegistry:
    """Read-only table of GIAC command names and their documentation."""

    def __init__(self, entries=()):
        self._entries = {}
        self._aliases = {}
        for entry in entries:
            self._entries.setdefault(entry.name, entry)
        for entry in self._entries.values():
            for alias in entry.aliases:
                if alias not in self._entries:
                    self._aliases.setdefault(alias, entry.name)
        self._names = sorted(set(self._entries) | set(self._aliases))

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def from_text(cls, text):
        return cls(parse_help_database(text))

    @classmethod
    def from_help_file(cls, path):
        with open(path, encoding="utf-8", errors="replace") as f:
            return cls.from_text(f.read())

    @classmethod
    def from_config(cls, config):
        path = locate_help_file(config)
        if path is None:
            logger.warning("GIAC help database not found; command names will not be validated")
            return cls.empty()
        logger.debug("Loading GIAC help database from %s", path)
        return cls.from_help_file(path)

    def __len__(self):
        return len(self._names)

    def __contains__(self, name):
        return name in self._entries or name in self._aliases

    def exists(self, name):
        return name in self

    def names(self):
        return list(self._names)

    def entry(self, name):
        """CommandEntry for a name or synonym, or None."""
        if name in self._entries:
            return self._entries[name]
        primary = self._aliases.get(name)
        return self._entries.get(primary) if primary else None

    def category_of(self, name):
        if name in CATEGORY_LOOKUP:
            return CATEGORY_LOOKUP[name]
        entry = self.entry(name)
        return entry.category if entry else "other"

    def list_categories(self):
        return sorted(COMMAND_CATEGORIES)

    def commands_in_category(self, category):
        if category not in COMMAND_CATEGORIES:
            valid = ", ".join(self.list_categories())
            raise ValueError(f"Unknown category: {category}. Valid categories: {valid}")
        if category == "other":
            return [name for name in self._names if name not in CATEGORY_LOOKUP]
        return sorted(COMMAND_CATEGORIES[category])

    def search(self, pattern):
        """Names starting with ``pattern``; a compiled regex is searched instead."""
        if isinstance(pattern, re.Pattern):
            return [name for name in self._names if pattern.search(name)]
        return [name for name in self._names if name.startswith(pattern)]

    def search_by_description(self, query, n=DEFAULT_SEARCH_RESULTS):
        """Commands whose documentation mentions ``query``, best matches first.

        A description hit outranks a hit that only appears in an example.
        """
        query = query.strip().lower()
        if not query:
            return []
        if n <= 0:
            n = DEFAULT_SEARCH_RESULTS
        scored = []
        for name in self._names:
            if name in self._aliases:
                continue
            entry = self._entries[name]
            if query in entry.description.lower():
                scored.append((2, name))
            elif any(query in ex.lower() for ex in entry.examples):
                scored.append((1, name))
        scored.sort(key=lambda pair: (-pair[0], pair[1]))
        return [name for _, name in scored[:n]]

    def available_commands(self):
        return [name for name in self._names if name[:1].isalpha()]

    def suggest(self, name, n=DEFAULT_SUGGESTION_COUNT):
        return suggest(name, self._names, n)

    def info(self, name) -> Optional[CommandInfo]:
        entry = self.entry(name)
        if entry is None:
            return None
        return CommandInfo(name, self.category_of(name), entry.aliases, entry.description)

    def raw_help(self, name):
        """Help text in ``Description:/Related:/Examples:`` form, empty if unknown."""
        entry = self.entry(name)
        if entry is None:
            return ""
        parts = [f"Description: {entry.description}"]
        if entry.related:
            parts.append(f"Related: {', '.join(entry.related)}")
        if entry.examples:
            parts.append("Examples:")
            parts.append(";".join(entry.examples))
        return "\n".join(parts)

    def help(self, name, n=DEFAULT_SUGGESTION_COUNT):
        if name not in self:
            hint = format_suggestions(self.suggest(name, n))
            return HelpResult(name, f"[No help found for: {name}.{hint}]")
        return parse_help(self.raw_help(name), name)
