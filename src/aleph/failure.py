"""Structured failure values.

A :class:`Failure` describes what went wrong without raising: it carries a
human-readable description, an optional causing failure, and optionally the
exception that triggered it (for tracebacks). Failures are immutable values
and travel on the error side of ``Result`` and ``Either``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from aleph.config import current_config

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence


@runtime_checkable
class Failure(Protocol):
    """Duck-typed protocol shared by every failure kind."""

    @property
    def description(self) -> str: ...  # noqa: D102

    @property
    def cause(self) -> Failure | None: ...  # noqa: D102

    @property
    def throwable(self) -> BaseException | None: ...  # noqa: D102


class LeafFailure:
    """Mixin for failures at the bottom of a chain: no cause, no exception.

    Subclasses that capture an exception override ``throwable`` with a
    property; dataclass fields named ``cause`` or ``throwable`` would pick up
    these properties as defaults.
    """

    __slots__ = ()

    @property
    def cause(self) -> Failure | None:
        return None

    @property
    def throwable(self) -> BaseException | None:
        return None


@dataclass(frozen=True, slots=True)
class GenericFailure:
    """A free-form failure."""

    description: str
    cause: Failure | None = None
    throwable: BaseException | None = None


def create(
    description: str,
    *,
    cause: Failure | None = None,
    throwable: BaseException | None = None,
) -> GenericFailure:
    """Build a :class:`GenericFailure`, optionally chained to a cause."""
    return GenericFailure(description, cause=cause, throwable=throwable)


def default_multi_description(failures: Sequence[Failure]) -> str:
    """Header line, then each child description on its own indented line."""
    cfg = current_config()
    lines = [cfg.multi_failure_header]
    lines.extend(f"{cfg.multi_failure_indent}{f.description}" for f in failures)
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class MultiFailure(LeafFailure):
    """Several failures reported together, in aggregation order.

    ``cause`` is always ``None`` even though the children are logically the
    causes; read :attr:`causes` for them.
    """

    description: str
    causes: tuple[Failure, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "causes", tuple(self.causes))

    @classmethod
    def of(
        cls,
        failures: Iterable[Failure],
        description_maker: Callable[[Sequence[Failure]], str] | None = None,
    ) -> MultiFailure:
        """Aggregate *failures*, describing them with *description_maker* if given."""
        children = tuple(failures)
        make = description_maker or default_multi_description
        return cls(make(children), children)


@dataclass(frozen=True, slots=True)
class FailureCollector:
    """Fold a sequence of failures into one :class:`MultiFailure`.

    The fold is spelled out as supplier/accumulate/combine/finish so partial
    reductions (e.g. per worker) can be merged; ``combine(a, b)`` keeps ``a``'s
    failures before ``b``'s. Calling the collector runs the whole fold, which
    lets it stand in wherever a ``list -> error`` reducer is accepted.
    """

    description_maker: Callable[[Sequence[Failure]], str] | None = None

    def supplier(self) -> list[Failure]:
        return []

    def accumulate(self, buffer: list[Failure], failure: Failure) -> list[Failure]:
        buffer.append(failure)
        return buffer

    def combine(self, left: list[Failure], right: list[Failure]) -> list[Failure]:
        left.extend(right)
        return left

    def finish(self, buffer: list[Failure]) -> MultiFailure:
        return MultiFailure.of(buffer, self.description_maker)

    def __call__(self, failures: Iterable[Failure]) -> MultiFailure:
        buffer = self.supplier()
        for failure in failures:
            buffer = self.accumulate(buffer, failure)
        return self.finish(buffer)


def collector(
    description_maker: Callable[[Sequence[Failure]], str] | None = None,
) -> FailureCollector:
    """Return a collector producing a :class:`MultiFailure`."""
    return FailureCollector(description_maker)


def iter_causes(failure: Failure) -> Iterator[Failure]:
    """Yield *failure* followed by its ``cause`` chain, root cause last."""
    current: Failure | None = failure
    while current is not None:
        yield current
        current = current.cause


def describe_chain(failure: Failure) -> str:
    """Render a failure and its causes as ``"a <- caused by: b"`` for logs."""
    return " <- caused by: ".join(f.description for f in iter_causes(failure))
