"""
A GIAC session: one engine process plus everything shared across calls.

GIAC is not safe for concurrent use, so every engine round trip goes
through ``Session.lock``. Values live in engine-side variables; an
``Expr`` only carries the variable name, so releasing a handle means
purging that variable.
"""

import atexit
import collections
import itertools
import logging
import threading

from .config import BridgeConfig
from .engine import GiacProcess
from .errors import GiacError
from .gentypes import INT_LIMIT, GenType, parse_type_name
from .registry import CommandRegistry
from .suggest import DEFAULT_SUGGESTION_COUNT

logger = logging.getLogger(__name__)

HANDLE_PREFIX = "_gb"


class Session:
    """Owns the GIAC process, the command registry and per-session state.

    ``engine`` and ``registry`` may be passed in; otherwise they are created
    from ``config`` on first use.
    """

    def __init__(self, config=None, registry=None, engine=None):
        self.config = config or BridgeConfig.from_env()
        self.lock = threading.RLock()
        self._registry = registry
        self._engine = engine
        self._counter = itertools.count(1)
        # (name, generation) pairs whose handles were garbage collected
        self._pending = collections.deque()
        self._warned_conflicts = set()
        self.suggestion_count = DEFAULT_SUGGESTION_COUNT
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def registry(self):
        if self._registry is None:
            self._registry = CommandRegistry.from_config(self.config)
        return self._registry

    @property
    def engine(self):
        if self.closed:
            raise GiacError("Session is closed", "memory")
        if self._engine is None:
            with self.lock:
                if self._engine is None:
                    self._engine = GiacProcess(
                        executable=self.config.executable,
                        read_timeout=self.config.read_timeout,
                        startup_timeout=self.config.startup_timeout,
                    )
        return self._engine

    @property
    def generation(self):
        return getattr(self._engine, "generation", 0)

    def set_suggestion_count(self, n):
        """Number of "did you mean" candidates; ``n <= 0`` restores the default."""
        self.suggestion_count = n if n > 0 else DEFAULT_SUGGESTION_COUNT

    def warn_conflict(self, name, reason):
        """Log a one-time warning that ``name`` collides with a Python name."""
        with self.lock:
            if name in self._warned_conflicts:
                return False
            self._warned_conflicts.add(name)
        logger.warning(
            "GIAC command '%s' conflicts with a Python %s; call it as invoke_cmd('%s', ...)",
            name, reason, name,
        )
        return True

    def reset_conflict_warnings(self):
        with self.lock:
            self._warned_conflicts.clear()

    def execute(self, text):
        """Send raw text to GIAC and return the printed answer."""
        with self.lock:
            self._drain_releases()
            return self.engine.execute(text)

    def evaluate(self, text):
        """Evaluate GIAC source text and return a handle to the result."""
        if not text or not text.strip():
            raise GiacError("Empty expression", "parse")
        from .expr import Expr

        with self.lock:
            self._drain_releases()
            name = f"{HANDLE_PREFIX}{next(self._counter)}"
            printed = self.engine.execute(f"{name}:=({text})")
            return Expr(self, name, printed, self.engine.generation)

    def type_of(self, expr):
        """GenType of the value behind a handle."""
        printed = self.execute(f"type({expr.name})")
        tag = parse_type_name(printed)
        if tag == GenType.INT:
            text = expr.text
            if text.lstrip("-").isdigit() and abs(int(text)) >= INT_LIMIT:
                return GenType.ZINT
        return tag

    def release(self, name, generation):
        """Purge one engine variable now."""
        with self.lock:
            if self.closed or generation != self.generation:
                return
            self._drain_releases()
            self.engine.execute(f"purge({name})")

    def queue_release(self, name, generation):
        # Called from finalizers; only records the name.
        self._pending.append((name, generation))

    def _drain_releases(self):
        names = []
        while self._pending:
            name, generation = self._pending.popleft()
            if generation == self.generation:
                names.append(name)
        if not names or self._engine is None:
            return
        try:
            self._engine.execute(f"purge({','.join(names)})")
        except GiacError as e:
            logger.debug("purge of %d handles failed: %s", len(names), e)

    def close(self):
        """Shut down the engine; every handle of this session becomes released."""
        with self.lock:
            if self.closed:
                return
            self.closed = True
            if self._engine is not None:
                self._engine.close()


_default = None
_default_lock = threading.Lock()


def default_session():
    """The process-wide session used when no session is passed explicitly."""
    global _default
    with _default_lock:
        if _default is None or _default.closed:
            _default = Session()
            atexit.register(_default.close)
        return _default


def set_default_session(session):
    """Install ``session`` as the default one and return the previous default."""
    global _default
    with _default_lock:
        previous, _default = _default, session
    return previous
