"""Either: a value of one of two types, designated 'left' and 'right'.

A little like ``T | None`` but with two payload types, exactly one of which is
present. Variants are frozen dataclasses, so they compare by value and work
with structural pattern matching::

    match parsed:
        case Left(value):
            use(value)
        case Right(problem):
            report(problem)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from aleph.errors import InvalidVariantAccessError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _identity(x: Any) -> Any:
    return x


class Either[L, R](ABC):
    """Base of the closed variant set :class:`Left` | :class:`Right`."""

    __slots__ = ()

    # --- Constructors ---

    @staticmethod
    def of[L1, R1](left: L1 | None, right: R1) -> Either[L1, R1]:
        """``Left(left)`` when *left* is not None, else ``Right(right)``."""
        return Right(right) if left is None else Left(left)

    @staticmethod
    def of_lazy[L1, R1](
        left: L1 | None, right_factory: Callable[[], R1]
    ) -> Either[L1, R1]:
        """Like :meth:`of`, but *right_factory* is only called when *left* is None."""
        return Right(right_factory()) if left is None else Left(left)

    @staticmethod
    def of_right[L1, R1](
        left_factory: Callable[[], L1], right: R1 | None
    ) -> Either[L1, R1]:
        """``Right(right)`` when present; otherwise call *left_factory*."""
        return Left(left_factory()) if right is None else Right(right)

    # --- Combinators ---

    @staticmethod
    def verify[L1, R1](
        either: Either[L1, R1], check: Callable[[L1], R1 | None]
    ) -> Either[L1, R1]:
        """Turn a left value into a right one when *check* reports a problem.

        *check* returns a right value for an invalid left value and None for a
        valid one. Right inputs pass through untouched and *check* is not called.
        """
        return either.flat_map_left(
            lambda value: Either.of_right(lambda: value, check(value))
        )

    @staticmethod
    def bubble_errors_up[L1, R1, R2](
        eithers: Sequence[Either[L1, R1]],
        err_joiner: Callable[[list[R1]], R2],
    ) -> Either[list[L1], R2]:
        """Collapse a sequence of Eithers into one.

        All left: ``Left`` of the left values, in order. Any right: ``Right`` of
        *err_joiner* applied to every right value in encounter order; the left
        values are dropped.
        """
        errors = [e.right() for e in eithers if e.is_right()]
        if errors:
            return Right(err_joiner(errors))
        return Left([e.left() for e in eithers])

    @staticmethod
    def verify_list[L1, R1, R2](
        either: Either[Sequence[L1], R2],
        check: Callable[[L1], R1 | None],
        err_joiner: Callable[[list[R1]], R2],
    ) -> Either[list[L1], R2]:
        """Verify every element of a left-held list, reporting all problems at once."""
        return either.flat_map_both(
            lambda values: Either.bubble_errors_up(
                [Either.verify(Left(v), check) for v in values], err_joiner
            ),
            Right,
        )

    # --- Transformations ---

    @abstractmethod
    def map_both[L1, R1](
        self, fn_left: Callable[[L], L1], fn_right: Callable[[R], R1]
    ) -> Either[L1, R1]:
        """Map whichever side is present; the other function is never called."""

    def map_left[L1](self, fn: Callable[[L], L1]) -> Either[L1, R]:
        return self.map_both(fn, _identity)

    def map_right[R1](self, fn: Callable[[R], R1]) -> Either[L, R1]:
        return self.map_both(_identity, fn)

    @abstractmethod
    def flat_map_both[L1, R1](
        self,
        fn_left: Callable[[L], Either[L1, R1]],
        fn_right: Callable[[R], Either[L1, R1]],
    ) -> Either[L1, R1]:
        """Replace this Either with the one returned for whichever side is present."""

    def flat_map_left[L1](self, fn: Callable[[L], Either[L1, R]]) -> Either[L1, R]:
        return self.flat_map_both(fn, Right)

    def flat_map_right[R1](self, fn: Callable[[R], Either[L, R1]]) -> Either[L, R1]:
        return self.flat_map_both(Left, fn)

    @abstractmethod
    def map[T](self, fn_left: Callable[[L], T], fn_right: Callable[[R], T]) -> T:
        """Collapse to a single value of a common type."""

    @abstractmethod
    def consume(
        self, fn_left: Callable[[L], object], fn_right: Callable[[R], object]
    ) -> None:
        """Run the side effect for whichever side is present."""

    # --- Inspection ---

    @abstractmethod
    def is_left(self) -> bool: ...

    def is_right(self) -> bool:
        return not self.is_left()

    @abstractmethod
    def left(self) -> L:
        """Return the left value, raising :class:`InvalidVariantAccessError` on a Right."""

    @abstractmethod
    def right(self) -> R:
        """Return the right value, raising :class:`InvalidVariantAccessError` on a Left."""

    @abstractmethod
    def maybe_l(self) -> L | None: ...

    @abstractmethod
    def maybe_r(self) -> R | None: ...


@dataclass(frozen=True, slots=True)
class Left[L, R](Either[L, R]):
    """The left variant."""

    value: L

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError("Left value must not be None")

    def map_both[L1, R1](
        self, fn_left: Callable[[L], L1], fn_right: Callable[[R], R1]
    ) -> Either[L1, R1]:
        return Left(fn_left(self.value))

    def flat_map_both[L1, R1](
        self,
        fn_left: Callable[[L], Either[L1, R1]],
        fn_right: Callable[[R], Either[L1, R1]],
    ) -> Either[L1, R1]:
        return fn_left(self.value)

    def map[T](self, fn_left: Callable[[L], T], fn_right: Callable[[R], T]) -> T:
        return fn_left(self.value)

    def consume(
        self, fn_left: Callable[[L], object], fn_right: Callable[[R], object]
    ) -> None:
        fn_left(self.value)

    def is_left(self) -> bool:
        return True

    def left(self) -> L:
        return self.value

    def right(self) -> R:
        raise InvalidVariantAccessError(
            "Tried to get right value of a left Either",
            variant="left",
            requested="right",
            safe_accessor="maybe_r",
        )

    def maybe_l(self) -> L | None:
        return self.value

    def maybe_r(self) -> R | None:
        return None


@dataclass(frozen=True, slots=True)
class Right[L, R](Either[L, R]):
    """The right variant."""

    value: R

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError("Right value must not be None")

    def map_both[L1, R1](
        self, fn_left: Callable[[L], L1], fn_right: Callable[[R], R1]
    ) -> Either[L1, R1]:
        return Right(fn_right(self.value))

    def flat_map_both[L1, R1](
        self,
        fn_left: Callable[[L], Either[L1, R1]],
        fn_right: Callable[[R], Either[L1, R1]],
    ) -> Either[L1, R1]:
        return fn_right(self.value)

    def map[T](self, fn_left: Callable[[L], T], fn_right: Callable[[R], T]) -> T:
        return fn_right(self.value)

    def consume(
        self, fn_left: Callable[[L], object], fn_right: Callable[[R], object]
    ) -> None:
        fn_right(self.value)

    def is_left(self) -> bool:
        return False

    def left(self) -> L:
        raise InvalidVariantAccessError(
            "Tried to get left value of a right Either",
            variant="right",
            requested="left",
            safe_accessor="maybe_l",
        )

    def right(self) -> R:
        return self.value

    def maybe_l(self) -> L | None:
        return None

    def maybe_r(self) -> R | None:
        return self.value


def left[L, R](value: L) -> Either[L, R]:
    """Create a left Either."""
    return Left(value)


def right[L, R](value: R) -> Either[L, R]:
    """Create a right Either."""
    return Right(value)
