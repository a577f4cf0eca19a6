"""HTTP helpers for :mod:`httpx` responses and URLs."""

from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from aleph.either import Either, Left, Right
from aleph.failure import LeafFailure
from aleph.result import Err, Ok, Result

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HttpStatusFailure(LeafFailure):
    """A response arrived with a status other than the one expected."""

    description: str
    expected_code: int
    actual_code: int
    response: httpx.Response


def expect_status(
    response: httpx.Response, expected_code: int
) -> Either[httpx.Response, HttpStatusFailure]:
    """Left of *response* if its status is *expected_code*, else an :class:`HttpStatusFailure`."""
    expected_code = int(expected_code)
    actual = response.status_code
    if actual == expected_code:
        return Left(response)
    return Right(
        HttpStatusFailure(
            f"Expected status {expected_code} from HTTP response, got status {actual}.",
            expected_code,
            actual,
            response,
        )
    )


def expect_ok(response: httpx.Response) -> Either[httpx.Response, HttpStatusFailure]:
    """:func:`expect_status` with ``200 OK``."""
    return expect_status(response, httpx.codes.OK)


@dataclass(frozen=True, slots=True)
class UriParseFailure(LeafFailure):
    """A string could not be parsed as a URL."""

    description: str
    error: httpx.InvalidURL
    input: str

    @property
    def throwable(self) -> BaseException | None:
        return self.error


def try_make_uri(text: str) -> Result[httpx.URL]:
    """Parse *text* as an :class:`httpx.URL`, or a :class:`UriParseFailure`."""
    try:
        return Ok(httpx.URL(text))
    except httpx.InvalidURL as e:
        log.debug("URI parse failed for %r: %s", text, e)
        return Err(UriParseFailure(f'Failure parsing URI "{text}": {e}', e, text))
