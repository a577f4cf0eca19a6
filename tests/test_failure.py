"""Failure values, MultiFailure descriptions, and the collector fold."""

from __future__ import annotations

import pytest

from aleph.config import config_scope
from aleph.failure import (
    Failure,
    FailureCollector,
    GenericFailure,
    MultiFailure,
    collector,
    create,
    describe_chain,
    iter_causes,
)

pytestmark = pytest.mark.unit


def test_create_variants() -> None:
    root = create("disk full")
    exc = OSError("ENOSPC")

    assert root == GenericFailure("disk full")
    assert root.cause is None and root.throwable is None

    chained = create("save failed", cause=root, throwable=exc)
    assert chained.cause is root
    assert chained.throwable is exc


def test_concrete_failures_satisfy_protocol() -> None:
    assert isinstance(create("x"), Failure)
    assert isinstance(MultiFailure.of([create("x")]), Failure)
    assert not isinstance("x", Failure)


def test_multi_failure_default_description(failure_a, failure_b) -> None:
    multi = MultiFailure.of([failure_a, failure_b])
    assert multi.description == "Multiple failures:\n a\n b"
    assert multi.causes == (failure_a, failure_b)


def test_multi_failure_custom_description(failure_a, failure_b) -> None:
    multi = MultiFailure.of(
        [failure_a, failure_b], lambda fs: "; ".join(f.description for f in fs)
    )
    assert multi.description == "a; b"


def test_multi_failure_cause_is_always_empty(failure_a) -> None:
    """Documented quirk: children are exposed via ``causes``, never ``cause``."""
    multi = MultiFailure.of([failure_a])
    assert multi.cause is None
    assert multi.throwable is None


def test_multi_failure_copies_input_sequence(failure_a, failure_b) -> None:
    source = [failure_a]
    multi = MultiFailure("custom", source)
    source.append(failure_b)
    assert multi.causes == (failure_a,)


def test_nested_multi_failure_description(failure_a, failure_b) -> None:
    inner = MultiFailure.of([failure_a])
    outer = MultiFailure.of([inner, failure_b])
    assert outer.description == "Multiple failures:\n Multiple failures:\n a\n b"


def test_multi_failure_description_follows_config(failure_a, failure_b) -> None:
    with config_scope(multi_failure_header="Validation failed:", multi_failure_indent="  "):
        multi = MultiFailure.of([failure_a, failure_b])
    assert multi.description == "Validation failed:\n  a\n  b"


class TestCollector:
    def test_collector_folds_in_encounter_order(self, failure_a, failure_b):
        result = collector()([failure_b, failure_a])
        assert result.causes == (failure_b, failure_a)
        assert result.description == "Multiple failures:\n b\n a"

    def test_collector_uses_description_maker(self, failure_a):
        result = collector(lambda fs: f"{len(fs)} failures")([failure_a, failure_a])
        assert result.description == "2 failures"

    def test_partial_reductions_merge_left_then_right(self, failure_a, failure_b):
        c = FailureCollector()
        first = c.accumulate(c.supplier(), failure_a)
        second = c.accumulate(c.supplier(), failure_b)
        merged = c.finish(c.combine(first, second))
        assert merged.causes == (failure_a, failure_b)

    def test_empty_fold(self):
        result = collector()([])
        assert result.causes == ()
        assert result.description == "Multiple failures:"


def test_iter_causes_and_describe_chain() -> None:
    root = create("connection refused")
    mid = create("fetch failed", cause=root)
    top = create("sync aborted", cause=mid)

    assert list(iter_causes(top)) == [top, mid, root]
    assert describe_chain(top) == (
        "sync aborted <- caused by: fetch failed <- caused by: connection refused"
    )


def test_default_description_ignores_environment(monkeypatch, failure_a, failure_b) -> None:
    monkeypatch.setenv("ALEPH_MULTI_FAILURE_HEADER", "Errors:")
    monkeypatch.setenv("ALEPH_MULTI_FAILURE_INDENT", "x")

    assert MultiFailure.of([failure_a, failure_b]).description == (
        "Multiple failures:\n a\n b"
    )
    assert collector()([failure_a]).description == "Multiple failures:\n a"
