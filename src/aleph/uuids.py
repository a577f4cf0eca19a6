"""UUID parsing that reports problems as values."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from uuid import UUID

from aleph.failure import LeafFailure
from aleph.result import Err, Ok, Result

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UuidParseFailure(LeafFailure):
    """A string was not a valid UUID."""

    description: str
    error: ValueError
    input: str

    @property
    def throwable(self) -> BaseException | None:
        return self.error


def maybe_make_uuid(text: str) -> UUID | None:
    """Parse *text* as a UUID, or None if it is not one."""
    try:
        return UUID(text)
    except ValueError:
        return None


def try_make_uuid(text: str) -> Result[UUID]:
    """Parse *text* as a UUID, or a :class:`UuidParseFailure` explaining why not.

    Besides the canonical 8-4-4-4-12 form, :class:`uuid.UUID` also accepts
    braces, a ``urn:uuid:`` prefix, and 32 hex digits without hyphens.
    """
    try:
        return Ok(UUID(text))
    except ValueError as e:
        log.debug("UUID parse failed for %r: %s", text, e)
        return Err(
            UuidParseFailure(f'Failure parsing UUID String "{text}": {e}', e, text)
        )
