"""Result: like :class:`~aleph.either.Either`, but the error side is always a Failure.

``then`` chains short-circuit on the first :class:`Err`, so a pipeline of
fallible steps reads top to bottom without ``try``/``except``::

    user = (
        parse(body)
        .then(lambda doc: doc.try_get_as(AJsonObject))
        .then(lambda obj: obj.try_get("user", AJsonObject))
        .then(lambda user: user.try_get("id", AJsonString))
        .then(lambda ident: try_make_uuid(ident.value))
    )
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from aleph.either import Either, Left, Right
from aleph.errors import InvalidVariantAccessError
from aleph.failure import Failure, collector

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _identity(x: Any) -> Any:
    return x


_DEFAULT_JOINER = collector()


class Result[E](ABC):
    """Base of the closed variant set :class:`Ok` | :class:`Err`."""

    __slots__ = ()

    # A field on one variant and a raising property on the other.
    value: E
    err: Failure

    # --- Constructors ---

    @staticmethod
    def of[E1](value: E1 | None, failure: Failure) -> Result[E1]:
        """``Ok(value)`` when *value* is not None, else ``Err(failure)``."""
        return Err(failure) if value is None else Ok(value)

    @staticmethod
    def of_lazy[E1](
        value: E1 | None, failure_factory: Callable[[], Failure]
    ) -> Result[E1]:
        """Like :meth:`of`, but the failure is only built when *value* is None."""
        return Err(failure_factory()) if value is None else Ok(value)

    @staticmethod
    def of_failure[E1](
        value_factory: Callable[[], E1], failure: Failure | None
    ) -> Result[E1]:
        """``Err(failure)`` when present; otherwise ``Ok`` of *value_factory*."""
        return Ok(value_factory()) if failure is None else Err(failure)

    @staticmethod
    def from_either[E1](either: Either[E1, Failure]) -> Result[E1]:
        return either.map(Ok, Err)

    # --- Combinators ---

    @staticmethod
    def verify[E1](
        result: Result[E1], check: Callable[[E1], Failure | None]
    ) -> Result[E1]:
        """Fail an Ok value when *check* returns a failure for it."""
        return result.then(
            lambda value: Result.of_failure(lambda: value, check(value))
        )

    @staticmethod
    def bubble_errors_up[E1](
        results: Sequence[Result[E1]],
        err_joiner: Callable[[list[Failure]], Failure] = _DEFAULT_JOINER,
    ) -> Result[list[E1]]:
        """``Ok`` of all values, or ``Err`` of every failure joined by *err_joiner*.

        The default joiner aggregates into a :class:`~aleph.failure.MultiFailure`.
        """
        return Result.from_either(
            Either.bubble_errors_up([r.to_either() for r in results], err_joiner)
        )

    @staticmethod
    def verify_list[E1](
        result: Result[Sequence[E1]],
        check: Callable[[E1], Failure | None],
        err_joiner: Callable[[list[Failure]], Failure] = _DEFAULT_JOINER,
    ) -> Result[list[E1]]:
        """Check every element of an Ok list, collecting all failures at once."""
        return result.flat_map_both(
            lambda values: Result.bubble_errors_up(
                [Result.verify(Ok(v), check) for v in values], err_joiner
            ),
            Err,
        )

    # --- Transformations ---

    @abstractmethod
    def to_either(self) -> Either[E, Failure]:
        """Ok becomes Left, Err becomes Right."""

    @abstractmethod
    def map_both[E1](
        self,
        value_fn: Callable[[E], E1],
        failure_fn: Callable[[Failure], Failure],
    ) -> Result[E1]: ...

    def map[E1](self, fn: Callable[[E], E1]) -> Result[E1]:
        return self.map_both(fn, _identity)

    def map_err(self, fn: Callable[[Failure], Failure]) -> Result[E]:
        return self.map_both(_identity, fn)

    @abstractmethod
    def flat_map_both[E1](
        self,
        value_fn: Callable[[E], Result[E1]],
        failure_fn: Callable[[Failure], Result[E1]],
    ) -> Result[E1]: ...

    def then[E1](self, fn: Callable[[E], Result[E1]]) -> Result[E1]:
        """Continue with *fn* on Ok; an Err is returned unchanged and *fn* is not called."""
        return self.flat_map_both(fn, Err)

    flat_map = then

    def flat_map_err(self, fn: Callable[[Failure], Result[E]]) -> Result[E]:
        """Recover from an Err; an Ok is returned unchanged."""
        return self.flat_map_both(Ok, fn)

    @abstractmethod
    def fold[T](
        self, value_fn: Callable[[E], T], failure_fn: Callable[[Failure], T]
    ) -> T:
        """Collapse to a single value of a common type."""

    @abstractmethod
    def consume(
        self,
        value_fn: Callable[[E], object],
        failure_fn: Callable[[Failure], object],
    ) -> None: ...

    # --- Inspection ---

    @abstractmethod
    def is_ok(self) -> bool: ...

    def is_err(self) -> bool:
        return not self.is_ok()

    @abstractmethod
    def maybe_value(self) -> E | None: ...

    @abstractmethod
    def maybe_err(self) -> Failure | None: ...


@dataclass(frozen=True, slots=True)
class Ok[E](Result[E]):
    """A successful result."""

    value: E

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError("Ok value must not be None")

    @property
    def err(self) -> Failure:
        raise InvalidVariantAccessError(
            "Tried to get failure value of a value Result",
            variant="ok",
            requested="err",
            safe_accessor="maybe_err",
        )

    def to_either(self) -> Either[E, Failure]:
        return Left(self.value)

    def map_both[E1](
        self,
        value_fn: Callable[[E], E1],
        failure_fn: Callable[[Failure], Failure],
    ) -> Result[E1]:
        return Ok(value_fn(self.value))

    def flat_map_both[E1](
        self,
        value_fn: Callable[[E], Result[E1]],
        failure_fn: Callable[[Failure], Result[E1]],
    ) -> Result[E1]:
        return value_fn(self.value)

    def fold[T](
        self, value_fn: Callable[[E], T], failure_fn: Callable[[Failure], T]
    ) -> T:
        return value_fn(self.value)

    def consume(
        self,
        value_fn: Callable[[E], object],
        failure_fn: Callable[[Failure], object],
    ) -> None:
        value_fn(self.value)

    def is_ok(self) -> bool:
        return True

    def maybe_value(self) -> E | None:
        return self.value

    def maybe_err(self) -> Failure | None:
        return None


@dataclass(frozen=True, slots=True)
class Err[E](Result[E]):
    """A failed result."""

    err: Failure

    def __post_init__(self) -> None:
        if not isinstance(self.err, Failure):
            raise TypeError(
                f"Err requires a Failure, got {type(self.err).__name__}"
            )

    @property
    def value(self) -> E:
        raise InvalidVariantAccessError(
            "Tried to get value of a failure Result",
            variant="err",
            requested="value",
            safe_accessor="maybe_value",
        )

    def to_either(self) -> Either[E, Failure]:
        return Right(self.err)

    def map_both[E1](
        self,
        value_fn: Callable[[E], E1],
        failure_fn: Callable[[Failure], Failure],
    ) -> Result[E1]:
        return Err(failure_fn(self.err))

    def flat_map_both[E1](
        self,
        value_fn: Callable[[E], Result[E1]],
        failure_fn: Callable[[Failure], Result[E1]],
    ) -> Result[E1]:
        return failure_fn(self.err)

    def fold[T](
        self, value_fn: Callable[[E], T], failure_fn: Callable[[Failure], T]
    ) -> T:
        return failure_fn(self.err)

    def consume(
        self,
        value_fn: Callable[[E], object],
        failure_fn: Callable[[Failure], object],
    ) -> None:
        failure_fn(self.err)

    def is_ok(self) -> bool:
        return False

    def maybe_value(self) -> E | None:
        return None

    def maybe_err(self) -> Failure | None:
        return self.err


def ok[E](value: E) -> Result[E]:
    """Create a successful Result."""
    return Ok(value)


def err[E](failure: Failure) -> Result[E]:
    """Create a failed Result."""
    return Err(failure)
