"""Immutable JSON trees with Result-returning lookups.

Parsing is delegated to the standard :mod:`json` module; the tree mirrors its
output (``str``, ``int``/``float``, ``bool``, ``None``, ``list``, ``dict``) as
a closed set of frozen node types. Lookups return a
:class:`~aleph.result.Result` whose failures say which key or index was
missing or which type was found instead of the expected one.

Example:
    doc = parse('{"name": "aleph", "tags": ["a", "b"]}')
    first_tag = doc.then(lambda j: j.try_get_as(AJsonObject)).then(
        lambda obj: obj.try_get("tags", AJsonArray)
    ).then(lambda tags: tags.try_get(0, AJsonString))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
import json
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TextIO

from aleph.config import current_config
from aleph.failure import LeafFailure
from aleph.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

log = logging.getLogger(__name__)


class AJson(ABC):
    """Base of the closed node set."""

    __slots__ = ()

    @abstractmethod
    def to_external(self) -> Any:
        """Convert to the plain Python objects :func:`json.dumps` understands."""

    def dumps(self, *, indent: int | None = None) -> str:
        """Serialize to JSON text, preserving array and object key order."""
        return json.dumps(self.to_external(), indent=indent)

    def try_get_as[T: AJson](self, cls: type[T]) -> Result[T]:
        """Narrow this node to *cls*, or fail with :class:`WrongJsonTypeFailure`."""
        if isinstance(self, cls):
            return Ok(self)
        return Err(wrong_type("JSON", cls, type(self), self))


@dataclass(frozen=True, slots=True)
class AJsonString(AJson):
    value: str

    def to_external(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AJsonNumber(AJson):
    value: int | float

    def to_external(self) -> int | float:
        return self.value


@dataclass(frozen=True, slots=True)
class AJsonBoolean(AJson):
    value: bool

    def to_external(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class AJsonNull(AJson):
    def to_external(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class AJsonArray(AJson):
    values: tuple[AJson, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def to_external(self) -> list[Any]:
        return _container_to_external(self)

    def get(self, index: int) -> AJson | None:
        """Element at *index*, or None when out of range (negative indices included)."""
        return self.values[index] if 0 <= index < len(self.values) else None

    def maybe_get(self, index: int) -> AJson | None:
        return self.get(index)

    def try_get[T: AJson](
        self, index: int, cls: type[T] | None = None
    ) -> Result[AJson] | Result[T]:
        """Element at *index*, optionally narrowed to *cls*."""
        found = Result.of_lazy(self.get(index), lambda: no_element(index, self))
        if cls is None:
            return found
        return found.then(lambda j: _narrow(str(index), j, cls))


@dataclass(frozen=True, slots=True)
class AJsonObject(AJson):
    properties: Mapping[str, AJson]

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def to_external(self) -> dict[str, Any]:
        return _container_to_external(self)

    def get(self, key: str) -> AJson | None:
        return self.properties.get(key)

    def maybe_get(self, key: str) -> AJson | None:
        return self.get(key)

    def try_get[T: AJson](
        self, key: str, cls: type[T] | None = None
    ) -> Result[AJson] | Result[T]:
        """Property *key*, optionally narrowed to *cls*."""
        found = Result.of_lazy(self.get(key), lambda: no_property(key, self))
        if cls is None:
            return found
        return found.then(lambda j: _narrow(key, j, cls))


def _narrow[T: AJson](key: str, node: AJson, cls: type[T]) -> Result[T]:
    if isinstance(node, cls):
        return Ok(node)
    return Err(wrong_type(key, cls, type(node), node))


_TYPE_NAMES: dict[type[AJson], str] = {
    AJsonString: "String",
    AJsonNumber: "Number",
    AJsonBoolean: "Boolean",
    AJsonNull: "Null",
    AJsonArray: "Array",
    AJsonObject: "Object",
}


def type_name(cls: type[AJson]) -> str:
    """Human name of a node type; ``"JSON"`` for the base or unknown types."""
    return _TYPE_NAMES.get(cls, "JSON")


# --- Conversion ---


def _convert(
    root: Any,
    expand: Callable[[Any], Any],
    leaf: Callable[[Any], Any],
) -> Any:
    """Depth-first conversion with an explicit stack.

    *expand* returns ``(items, finish)`` for a container and None for a leaf;
    ``finish`` receives the converted children keyed by index or name. Nesting
    depth is bounded by memory, not by the interpreter's recursion limit.
    """
    opened = expand(root)
    if opened is None:
        return leaf(root)
    stack = [(None, *opened, {})]
    while True:
        key, items, finish, children = stack[-1]
        item = next(items, None)
        if item is None:
            stack.pop()
            built = finish(children)
            if not stack:
                return built
            stack[-1][3][key] = built
            continue
        child_key, child = item
        opened = expand(child)
        if opened is None:
            children[child_key] = leaf(child)
        else:
            stack.append((child_key, *opened, {}))


def _external_leaf(obj: Any) -> AJson:
    if obj is None:
        return AJsonNull()
    if isinstance(obj, str):
        return AJsonString(obj)
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return AJsonBoolean(obj)
    if isinstance(obj, int | float):
        return AJsonNumber(obj)
    raise TypeError(
        f"{type(obj).__name__} is not a string, number, boolean, null, array, or object"
    )


def _string_keyed(obj: Mapping[Any, Any]) -> Iterator[tuple[str, Any]]:
    for key, value in obj.items():
        if not isinstance(key, str):
            raise TypeError(f"JSON object keys must be str, got {type(key).__name__}")
        yield key, value


def _expand_external(obj: Any):
    if isinstance(obj, list | tuple):
        return enumerate(obj), lambda children: AJsonArray(tuple(children.values()))
    if isinstance(obj, Mapping):
        return _string_keyed(obj), AJsonObject
    return None


def _expand_node(node: AJson):
    if isinstance(node, AJsonArray):
        return enumerate(node.values), lambda children: list(children.values())
    if isinstance(node, AJsonObject):
        return iter(node.properties.items()), dict
    return None


def _container_to_external(node: AJsonArray | AJsonObject) -> Any:
    return _convert(node, _expand_node, lambda leaf: leaf.to_external())


def from_external(obj: Any) -> AJson:
    """Build a tree from plain Python JSON objects.

    Raises:
        TypeError: If *obj* (or a nested value) is not representable in JSON.
    """
    return _convert(obj, _expand_external, _external_leaf)


# --- Parsing ---


@dataclass(frozen=True, slots=True)
class JsonParseFailure(LeafFailure):
    """JSON text could not be parsed.

    ``error`` is the decoder's ``ValueError``, or a ``RecursionError`` when the
    input nests deeper than the decoder can follow.
    """

    description: str
    error: ValueError | RecursionError
    input: str | None = None

    @property
    def throwable(self) -> BaseException | None:
        return self.error


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name} not allowed in strict mode")


def _decode_kwargs() -> dict[str, Any]:
    if current_config().json_lenient:
        return {"strict": False}
    return {"strict": True, "parse_constant": _reject_constant}


def parse(text: str) -> Result[AJson]:
    """Parse JSON text into a tree, or a :class:`JsonParseFailure`."""
    try:
        return Ok(from_external(json.loads(text, **_decode_kwargs())))
    except (ValueError, RecursionError) as e:
        log.debug("JSON parse failed: %s", e)
        return Err(JsonParseFailure(str(e), e, text))


def parse_stream(fp: TextIO) -> Result[AJson]:
    """Parse JSON from a text stream; the failure does not retain the input."""
    try:
        return Ok(from_external(json.load(fp, **_decode_kwargs())))
    except (ValueError, RecursionError) as e:
        log.debug("JSON parse failed: %s", e)
        return Err(JsonParseFailure(str(e), e))


# --- Lookup failures ---


class JsonGetFailure(LeafFailure):
    """Base of the lookup failure family; every member carries the offending ``json`` node."""

    __slots__ = ()

    json: AJson


@dataclass(frozen=True, slots=True)
class GetObjectPropertyFailure(JsonGetFailure):
    description: str
    json: AJsonObject
    key: str


@dataclass(frozen=True, slots=True)
class GetArrayElementFailure(JsonGetFailure):
    description: str
    json: AJsonArray
    index: int


@dataclass(frozen=True, slots=True)
class WrongJsonTypeFailure(JsonGetFailure):
    description: str
    json: AJson
    expected: type[AJson]
    actual: type[AJson]


def no_property(key: str, obj: AJsonObject) -> GetObjectPropertyFailure:
    return GetObjectPropertyFailure(f"No such property {key} on object", obj, key)


def no_element(index: int, arr: AJsonArray) -> GetArrayElementFailure:
    return GetArrayElementFailure(f"No such element {index} in array", arr, index)


def wrong_type(
    key: str, expected: type[AJson], actual: type[AJson], node: AJson
) -> WrongJsonTypeFailure:
    return WrongJsonTypeFailure(
        f"Expected {key} to be a {type_name(expected)}, but was a {type_name(actual)}",
        node,
        expected,
        actual,
    )
