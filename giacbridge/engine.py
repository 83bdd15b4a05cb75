"""
GIAC subprocess driver.

Spawns the ``giac`` command line interpreter and talks to it over its
text interface: one request per line, answered by GIAC's printed form.

Prompts are unreliable on a pipe, so every request is followed by a string
literal marker; GIAC echoes the marker back as its own result, and
everything printed before it belongs to the request.
"""

import logging
import os
import re
import select
import subprocess

from .config import DEFAULT_EXECUTABLE, DEFAULT_STARTUP_TIMEOUT
from .errors import GiacError, GiacTimeout

logger = logging.getLogger(__name__)

MARKER_PREFIX = "__giacbridge_sync_"
MARKER_RE = re.compile(re.escape(MARKER_PREFIX) + r"\d+__")
PROMPT_RE = re.compile(r"^\s*\d+>>\s*")
SYNTAX_ERROR_RE = re.compile(r"(?i)\b(?:syntax|parse) error\b")
EVAL_ERROR_RE = re.compile(
    r"\bError\b\s*:|^\"?Error\b|Bad Argument (?:Type|Value)|Invalid dimension"
)
NOISE_RE = re.compile(r"^(?://|Evaluation time)")


def clean_output(lines):
    """Drop prompts, timing chatter, markers and blank lines."""
    cleaned = []
    for line in lines:
        line = PROMPT_RE.sub("", line).strip()
        if not line or NOISE_RE.match(line) or MARKER_RE.search(line):
            continue
        cleaned.append(line)
    return cleaned


def check_errors(lines):
    """Raise a GiacError if any output line reports a failure."""
    for line in lines:
        if SYNTAX_ERROR_RE.search(line):
            raise GiacError(line, "parse")
    for line in lines:
        if EVAL_ERROR_RE.search(line):
            raise GiacError(line, "eval")


class GiacProcess:
    """Manages a giac subprocess."""

    def __init__(self, executable=DEFAULT_EXECUTABLE, read_timeout=None,
                 startup_timeout=DEFAULT_STARTUP_TIMEOUT):
        self.executable = executable
        self.read_timeout = read_timeout
        self.startup_timeout = startup_timeout
        # Bumped on every (re)spawn; values stored by an older process are gone.
        self.generation = 0
        self._marker_count = 0
        self._spawn()

    def _spawn(self):
        """Spawn (or re-spawn) the giac process."""
        self.proc = subprocess.Popen(
            [self.executable],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        self._fd = self.proc.stdout.fileno()
        self._buffer = b""
        self.generation += 1
        # Swallow the startup banner
        self._sync(timeout=self.startup_timeout)
        logger.debug("giac process %s started (generation %d)",
                     self.proc.pid, self.generation)

    def _send_raw(self, cmd):
        """Send one line to giac."""
        self.proc.stdin.write((cmd + "\n").encode())
        self.proc.stdin.flush()

    def _read_line(self, timeout):
        """Read one line of giac output.

        Uses select() on the raw fd + os.read() so the timeout is not
        defeated by Python's own buffering. Returns None at EOF.
        """
        while b"\n" not in self._buffer:
            ready, _, _ = select.select([self._fd], [], [], timeout)
            if not ready:
                raise GiacTimeout()
            data = os.read(self._fd, 4096)
            if not data:
                if self._buffer:
                    line, self._buffer = self._buffer, b""
                    return line.decode("utf-8", errors="replace")
                return None
            self._buffer += data
        line, self._buffer = self._buffer.split(b"\n", 1)
        return line.decode("utf-8", errors="replace").rstrip("\r")

    def _sync(self, timeout):
        """Send a marker and collect every line printed before it comes back."""
        self._marker_count += 1
        marker = f"{MARKER_PREFIX}{self._marker_count}__"
        self._send_raw(f'"{marker}"')
        lines = []
        while True:
            line = self._read_line(timeout)
            if line is None:
                raise GiacError("giac process exited unexpectedly", "eval")
            if marker in line:
                return lines
            lines.append(line)

    def execute(self, cmd):
        """Send a command to giac and return its printed result.

        If giac stalls past the read timeout, kills and restarts the
        process, then raises GiacTimeout. If giac dies mid-request it is
        restarted too and the call fails with a GiacError.
        """
        cmd = " ".join(cmd.splitlines())
        logger.debug("giac << %s", cmd)
        try:
            self._send_raw(cmd)
            raw = self._sync(timeout=self.read_timeout)
        except GiacTimeout:
            self._restart("a timeout")
            raise
        except (BrokenPipeError, GiacError):
            self._restart("giac exited")
            raise GiacError("giac process exited unexpectedly", "eval") from None

        lines = clean_output(raw)
        logger.debug("giac >> %s", lines)
        check_errors(lines)
        return lines[-1] if lines else ""

    def alive(self):
        return self.proc.poll() is None

    def _restart(self, reason):
        """Kill the current giac process and start a fresh one."""
        logger.warning("Restarting giac after %s; stored values are lost", reason)
        try:
            self.proc.kill()
            self.proc.wait(timeout=3)
        except (OSError, subprocess.SubprocessError):
            pass
        for pipe in (self.proc.stdin, self.proc.stdout):
            try:
                pipe.close()
            except OSError:
                pass
        self._spawn()

    def close(self):
        """Shut down the giac process."""
        try:
            self.proc.stdin.close()
            self.proc.wait(timeout=5)
        except (OSError, subprocess.SubprocessError):
            self.proc.kill()
