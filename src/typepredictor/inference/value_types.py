"""Runtime type tags for document values and printable union labels."""

from __future__ import annotations

import asyncio
import concurrent.futures
import datetime as dt
import inspect
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, NamedTuple

from typepredictor.core.types import TypeTag

NULL = "null"
UNDEFINED = "undefined"
ANY = "any"
STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
ARRAY = "array"
OBJECT = "object"

UNION_SEPARATOR = " | "
ENUM_PREFIX = "enum("

# Highest first. Only used to make union labels deterministic.
TAG_PRIORITY: dict[str, int] = {
    "date": 12,
    "regexp": 11,
    "error": 10,
    "map": 9,
    "set": 8,
    "deferred": 7,
    "buffer": 6,
    OBJECT: 5,
    ARRAY: 4,
    STRING: 3,
    NUMBER: 2,
    BOOLEAN: 1,
}


def is_list_like(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_keyed_map(value: Any) -> bool:
    return isinstance(value, dict)


def value_tag(value: Any) -> TypeTag:
    """Classify a document value into its runtime type tag."""
    if value is None:
        return NULL
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if is_list_like(value):
        return ARRAY
    if is_keyed_map(value):
        return OBJECT
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return "date"
    if isinstance(value, re.Pattern):
        return "regexp"
    if isinstance(value, BaseException):
        return "error"
    if isinstance(value, Mapping):
        return "map"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, (asyncio.Future, concurrent.futures.Future)) or inspect.isawaitable(value):
        return "deferred"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "buffer"
    return OBJECT


def sort_tags(tags: Iterable[TypeTag]) -> list[TypeTag]:
    """Order tags by descending priority; unknown tags go last, alphabetically."""
    return sorted(set(tags), key=lambda tag: (-TAG_PRIORITY.get(tag, 0), tag))


def enum_label(values: Iterable[str]) -> str:
    return f"{ENUM_PREFIX}{UNION_SEPARATOR.join(sorted(set(values)))})"


def render_label(
    tags: Iterable[TypeTag],
    *,
    enum_values: Iterable[str] | None = None,
    nullable: bool = False,
    optional: bool = False,
) -> str:
    """Render a printable union label such as ``string | number | null``.

    When ``enum_values`` is given, the ``string`` member is written as
    ``enum(a | b)`` instead.
    """
    members = [tag for tag in sort_tags(tags) if tag not in (NULL, UNDEFINED)]
    if enum_values is not None:
        members = [enum_label(enum_values) if tag == STRING else tag for tag in members]
    if not members:
        return NULL if nullable else UNDEFINED
    if nullable:
        members.append(NULL)
    if optional:
        members.append(UNDEFINED)
    return UNION_SEPARATOR.join(members)


def split_label(label: str) -> list[str]:
    """Split a union label into members, keeping ``enum(...)`` members intact."""
    members: list[str] = []
    depth = 0
    current = ""
    for part in label.split(UNION_SEPARATOR):
        current = f"{current}{UNION_SEPARATOR}{part}" if depth else part
        depth += part.count("(") - part.count(")")
        if depth <= 0:
            members.append(current.strip())
            current = ""
            depth = 0
    if current:
        members.append(current.strip())
    return members


def parse_enum_label(label: str) -> list[str] | None:
    if label.startswith(ENUM_PREFIX) and label.endswith(")") and len(split_label(label)) == 1:
        return [value.strip() for value in label[len(ENUM_PREFIX):-1].split(UNION_SEPARATOR)]
    return None


class ListShape(NamedTuple):
    depth: int  # a flat list has depth 1
    leaves: list[Any]  # non-list items at every nesting level, in order

    @property
    def tags(self) -> set[TypeTag]:
        return {value_tag(leaf) for leaf in self.leaves}


def list_shape(value: Any) -> ListShape:
    """Nesting depth and leaves of a list, gathered in one iterative pass."""
    deepest = 1
    leaves: list[Any] = []
    stack = [iter(value)]
    while stack:
        deepest = max(deepest, len(stack))
        for item in stack[-1]:
            if is_list_like(item):
                stack.append(iter(item))
                break
            leaves.append(item)
        else:
            stack.pop()
    return ListShape(deepest, leaves)
