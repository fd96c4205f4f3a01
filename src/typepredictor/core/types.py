"""Type aliases and path primitives used across the type predictor."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, NamedTuple

JsonValue = Any
TypeTag = str


class SegmentKind(StrEnum):
    KEY = "key"
    INDEX = "index"


class PathSegment(NamedTuple):
    """One step of an access path: a map key or a list index."""

    kind: SegmentKind
    value: str

    @classmethod
    def key(cls, name: Any) -> PathSegment:
        return cls(SegmentKind.KEY, str(name))

    @classmethod
    def index(cls, position: int) -> PathSegment:
        return cls(SegmentKind.INDEX, str(position))

    @property
    def is_wildcard(self) -> bool:
        return self.kind is SegmentKind.INDEX and self.value == WILDCARD_MARKER


WILDCARD_MARKER = "$"
WILDCARD = PathSegment(SegmentKind.INDEX, WILDCARD_MARKER)

# Concrete paths keep list indices; flattened paths replace them with WILDCARD.
AccessPath = tuple[PathSegment, ...]
FlatPath = tuple[PathSegment, ...]
ROOT: FlatPath = ()


def flatten_path(path: AccessPath) -> FlatPath:
    return tuple(WILDCARD if seg.kind is SegmentKind.INDEX else seg for seg in path)


def format_path(path: AccessPath) -> str:
    """Printable dotted form, e.g. ``users.$.name``. The root prints as ``""``."""
    return ".".join(seg.value for seg in path)
