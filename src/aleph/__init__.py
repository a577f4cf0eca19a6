"""Aleph: union types and structured failures.

Public API:
    - Either / Left / Right: a value of one of two types
    - Result / Ok / Err: a value or a Failure
    - Failure, GenericFailure, MultiFailure: structured, chainable errors
    - collector(): fold many failures into one MultiFailure
    - config_scope / resolve_config: library configuration
"""

from __future__ import annotations

import logging

from aleph.config import FrozenConfig, config_scope, current_config, resolve_config
from aleph.either import Either, Left, Right, left, right
from aleph.errors import AlephError, ConfigurationError, InvalidVariantAccessError
from aleph.failure import (
    Failure,
    FailureCollector,
    GenericFailure,
    MultiFailure,
    collector,
    create,
)
from aleph.result import Err, Ok, Result, err, ok

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("aleph-result")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("aleph").addHandler(logging.NullHandler())

__all__ = [
    "AlephError",
    "ConfigurationError",
    "Either",
    "Err",
    "Failure",
    "FailureCollector",
    "FrozenConfig",
    "GenericFailure",
    "InvalidVariantAccessError",
    "Left",
    "MultiFailure",
    "Ok",
    "Result",
    "Right",
    "collector",
    "config_scope",
    "create",
    "current_config",
    "err",
    "left",
    "ok",
    "resolve_config",
    "right",
]
