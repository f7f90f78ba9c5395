"""Exception types for Dough Formula.

Only ``InvalidParameters`` is meant to reach callers. Storage and
notification failures are raised by the adapters and absorbed by the
components that use them.
"""


class DoughFormulaError(Exception):
    """Base exception for Dough Formula errors."""


class InvalidParameters(DoughFormulaError):
    """Recipe parameters cannot produce a meaningful recipe."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class StorageUnavailable(DoughFormulaError):
    """The key-value store could not be read or written."""


class NotificationUnavailable(DoughFormulaError):
    """A completion notification could not be delivered."""
