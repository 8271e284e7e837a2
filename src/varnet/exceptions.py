"""Exception types raised by varnet."""

from __future__ import annotations


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that should be unreachable.

    Reaching one means a caller broke a contract (for example a command
    payload that is not a JSON object); ``env`` keeps the offending context.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env = dict(env or {})


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""


class ProviderError(RuntimeError):
    """The document provider could not supply variables, collections or nodes."""


class DocumentFormatError(ProviderError):
    """A document export does not have the expected shape."""

    def __init__(self, message: str, *, path: str = ""):
        location = f"{path}: " if path else ""
        super().__init__(f"{location}{message}")
        self.path = path
