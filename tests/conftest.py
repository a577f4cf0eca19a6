"""Pytest configuration and fixtures.

Provides environment isolation and shared failure doubles. The isolation
fixtures are autouse.
"""

from __future__ import annotations

from contextlib import suppress
import os

import pytest

from aleph import config as aleph_config
from aleph.failure import GenericFailure

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests."""
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_aleph_env(monkeypatch):
    """Clear ALEPH_* variables and the cached default config around each test."""
    for key in list(os.environ.keys()):
        if key.startswith(aleph_config.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    aleph_config._default_config.cache_clear()
    yield
    aleph_config._default_config.cache_clear()


# =============================================================================
# Failure doubles
# =============================================================================


@pytest.fixture
def failure_a() -> GenericFailure:
    return GenericFailure("a")


@pytest.fixture
def failure_b() -> GenericFailure:
    return GenericFailure("b")


class Sentinel:
    """Callable that fails the test if it is ever invoked."""

    def __init__(self, name: str = "sentinel") -> None:
        self.name = name

    def __call__(self, *args, **kwargs):
        raise AssertionError(f"{self.name} must not be called (got {args!r})")


@pytest.fixture
def never():
    return Sentinel()
