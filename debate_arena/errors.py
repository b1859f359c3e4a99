"""
errors.py

Error types for a debate run.

Nothing in the turn path recovers from these: any of them aborts the
whole debate and is surfaced to the operator.
"""


class DebateError(Exception):
    """Base class for everything raised by the debate engine."""


class BackendInvocationError(DebateError):
    """The model backend failed during invoke() or stream()."""


class MalformedVerdictError(DebateError):
    """The judge answered with something that is not a valid verdict."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class ConfigurationError(DebateError):
    """Missing credential, unknown provider, or a round with no phase prompt."""
