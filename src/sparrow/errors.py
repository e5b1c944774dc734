"""Sparrow exception hierarchy.

Shared across the route table, dispatcher, app and response so every
module raises and catches the same types.
"""


class SparrowError(Exception):
    """Base for all sparrow-specific errors."""


class ConfigurationError(SparrowError):
    """Raised when the app is set up incorrectly.

    Unknown setting keys, non-callable handlers and unsupported path
    specs all land here, at registration time rather than per request.
    """


class ResponseTypeError(SparrowError, TypeError):
    """``Response.send()`` was given a value it cannot serialize."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Cannot send a value of type {type(value).__name__!r}; "
            "expected str, bytes, int, float, dict, list, tuple or None"
        )


class ResponseStateError(SparrowError):
    """A write was attempted on a response that can no longer take it."""
