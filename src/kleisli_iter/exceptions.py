"""
Kleisli Exception Hierarchy

Contains the exception classes raised when the library is misused.

Evaluating a composed arrow never raises one of these: whatever an arrow
raises while it runs reaches the consumer unchanged.
"""


class KleisliError(Exception):
    """
    Base exception for all kleisli_iter errors.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class NotAnArrowError(KleisliError, TypeError):
    """
    Raised when a non-callable is supplied where an arrow is expected.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class SourceError(KleisliError):
    """
    Exception for restartable-source problems.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class NotRestartableError(SourceError, TypeError):
    """
    Raised when a value cannot be turned into a restartable cursor.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class UnknownColumnError(SourceError, KeyError):
    """
    Raised when a table cursor is asked for a column the table lacks.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class ConfigError(KleisliError, ValueError):
    """
    Raised for an invalid configuration value.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


def ensure_arrow(arrow, name: str = "arrow"):
    """Return ``arrow`` unchanged, or raise NotAnArrowError if it is not callable."""
    if not callable(arrow):
        raise NotAnArrowError(
            f"{name} must be callable, got {type(arrow).__name__}"
        )
    return arrow


__all__ = [
    "KleisliError",
    "NotAnArrowError",
    "SourceError",
    "NotRestartableError",
    "UnknownColumnError",
    "ConfigError",
    "ensure_arrow",
]
