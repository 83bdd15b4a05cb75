"""Exceptions raised by the GIAC bridge."""

ERROR_CATEGORIES = ("parse", "eval", "type", "memory")


class GiacError(Exception):
    """An error reported by GIAC or by the bridge around it.

    ``category`` is one of ``parse`` (malformed expression text), ``eval``
    (GIAC failed while evaluating, or the command is unknown), ``type`` (a
    value cannot be formatted or converted) and ``memory`` (the handle was
    released). Anything else falls back to ``eval``.
    """

    def __init__(self, msg, category="eval"):
        if category not in ERROR_CATEGORIES:
            category = "eval"
        super().__init__(msg)
        self.msg = msg
        self.category = category

    def __str__(self):
        return f"GiacError({self.category}): {self.msg}"


class GiacTimeout(GiacError):
    """Raised when GIAC does not answer within the configured read timeout."""

    def __init__(self, msg="GIAC did not respond in time"):
        super().__init__(msg, "eval")
