"""Pairwise iteration helpers. Both stop at the end of the shorter input."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


def zip_for_each[A, B](
    a: Iterable[A], b: Iterable[B], fn: Callable[[A, B], object]
) -> None:
    for x, y in zip(a, b):
        fn(x, y)


def zip_reduce[A, B, C](
    a: Iterable[A], b: Iterable[B], initial: C, fn: Callable[[A, B, C], C]
) -> C:
    """Fold pairs into an accumulator: ``acc = fn(a_i, b_i, acc)``."""
    acc = initial
    for x, y in zip(a, b):
        acc = fn(x, y, acc)
    return acc
