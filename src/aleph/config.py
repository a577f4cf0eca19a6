"""Configuration: Pydantic schema, frozen payload, and scoped overrides.

Resolution order is defaults < ``ALEPH_*`` environment variables < explicit
overrides. A resolved :class:`FrozenConfig` can be made ambient for a block of
code with :func:`config_scope`; library code reads it via
:func:`current_config`. Outside a scope the schema defaults apply, so the
process environment never changes what a value operation returns.

Example:
    with config_scope(resolve_config()):
        report = MultiFailure.of(failures)  # honours ALEPH_* settings
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from functools import cache
import logging
import os
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from aleph.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

log = logging.getLogger(__name__)

ENV_PREFIX = "ALEPH_"

# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic settings schema: the single source of truth for fields and defaults."""

    # MultiFailure default description layout
    multi_failure_header: str = Field(default="Multiple failures:", min_length=1)
    multi_failure_indent: str = Field(default=" ")

    # Accept NaN/Infinity literals and raw control characters in JSON strings
    json_lenient: bool = Field(default=True)

    model_config = {"extra": "forbid"}

    @field_validator("multi_failure_indent")
    @classmethod
    def validate_indent_is_whitespace(cls, v: str) -> str:
        """Keep aggregated descriptions readable: indentation must be blank."""
        if v.strip():
            raise ValueError("multi_failure_indent must contain only whitespace")
        return v


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration payload read by the library at call time."""

    multi_failure_header: str
    multi_failure_indent: str
    json_lenient: bool


# --- Loading ---


def _coerce_bool(v: str) -> bool:
    """Convert string to boolean using common conventions."""
    return v.strip().lower() in {"1", "true", "yes", "on"}


def load_env() -> dict[str, Any]:
    """Read ``ALEPH_*`` variables, coercing booleans using the schema's annotations."""
    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        info = Settings.model_fields.get(field_name)
        if info is None:
            log.debug("Ignoring unknown configuration variable %s", key)
            continue
        config[field_name] = _coerce_bool(value) if info.annotation is bool else value
    return config


_DOTENV_LOADED: bool = False


def _try_load_dotenv() -> None:
    """Load a project ``.env`` once so ``ALEPH_*`` entries there are visible."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


# --- Public resolution API ---


def resolve_config(overrides: Mapping[str, Any] | None = None) -> FrozenConfig:
    """Resolve configuration from defaults, environment, and overrides.

    Args:
        overrides: Programmatic values; these win over the environment.

    Returns:
        A validated, immutable configuration.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    _try_load_dotenv()
    merged = {**load_env(), **(overrides or {})}
    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        msg = err.get("msg") or "invalid value"
        # Remove "Value error, " prefix if present (Pydantic standard wrapper)
        if msg.startswith("Value error, "):
            msg = msg[13:]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        raise ConfigurationError(
            f"Configuration validation failed for {loc or 'config'}: {msg}",
            hint=f"Check the {ENV_PREFIX}{loc.upper()} environment variable or override.",
        ) from e
    return FrozenConfig(**settings.model_dump())


@cache
def _default_config() -> FrozenConfig:
    return FrozenConfig(**Settings().model_dump())


_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "aleph_config", default=None
)


def current_config() -> FrozenConfig:
    """Return the scoped configuration, or the schema defaults outside any scope.

    The environment and ``.env`` are only consulted by :func:`resolve_config`
    (and so by :func:`config_scope`); value operations never read them.
    """
    cfg = _AMBIENT.get()
    return cfg if cfg is not None else _default_config()


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    **overrides: object,
) -> Generator[FrozenConfig]:
    """Make a configuration ambient for the duration of a ``with`` block.

    Thread- and task-safe: the scope is stored in a ``ContextVar``.

    Example:
        with config_scope(multi_failure_header="Validation failed:"):
            report = MultiFailure.of(failures)
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        cfg = resolve_config({**(cfg_or_overrides or {}), **overrides})

    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)
