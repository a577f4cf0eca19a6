"""Exception hierarchy for Aleph.

Recoverable problems are modelled as ``Failure`` values; the exceptions here
signal misuse of the library (wrong-variant access) or invalid configuration.
"""

from __future__ import annotations


class AlephError(Exception):
    """Base exception for all Aleph errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class InvalidVariantAccessError(AlephError, LookupError):
    """An unchecked accessor was called on the wrong variant.

    This is a bug in the calling code, not a recoverable failure: check the
    variant first (``is_left()``, ``is_ok()``) or use the ``maybe_*`` accessors.
    """

    def __init__(
        self,
        message: str,
        *,
        variant: str,
        requested: str,
        safe_accessor: str,
    ) -> None:
        super().__init__(
            message,
            hint=f"Use {safe_accessor}() or check the variant before unwrapping.",
        )
        self.variant = variant
        self.requested = requested


class ConfigurationError(AlephError):
    """Configuration validation or resolution failed."""
