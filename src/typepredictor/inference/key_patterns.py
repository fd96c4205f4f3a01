"""Key naming conventions and the record-versus-object decision."""

from __future__ import annotations

import re
from typing import Any, Sequence

from typepredictor.core.config import InferenceConfig
from typepredictor.core.types import FlatPath, PathSegment
from typepredictor.inference.value_types import (
    BOOLEAN,
    NULL,
    NUMBER,
    OBJECT,
    STRING,
    is_keyed_map,
    is_list_like,
    render_label,
    value_tag,
)
from typepredictor.models.samples import PathRelation
from typepredictor.models.structure import KeyPattern, RecordPrediction

# Checked in order; the first match names the key.
_KEY_CLASSIFIERS: tuple[tuple[KeyPattern, re.Pattern[str]], ...] = (
    (KeyPattern.WORD, re.compile(r"[a-z]+")),
    (KeyPattern.PASCAL_CASE, re.compile(r"[A-Z][a-z]+")),
    (KeyPattern.CAMEL_CASE, re.compile(r"[a-z]+(?:[A-Z][a-z]+)*")),
    (KeyPattern.SNAKE_CASE, re.compile(r"[a-z]+(?:_[a-z]+)*")),
)

KEY_REGEXES: dict[KeyPattern, str] = {
    KeyPattern.WORD: r"^[a-z]+$",
    KeyPattern.PASCAL_CASE: r"^[A-Z][a-z]+$",
    KeyPattern.CAMEL_CASE: r"^[a-z]+(?:[A-Z][a-z]+)*$",
    KeyPattern.SNAKE_CASE: r"^[a-z]+(?:_[a-z]+)*$",
}

# Weaker conventions (word, camelCase, PascalCase) stay objects.
RECORD_KEY_PATTERNS = frozenset({KeyPattern.PREFIXED, KeyPattern.SNAKE_CASE})
COMPATIBLE_VALUE_TAGS = frozenset({STRING, NUMBER, BOOLEAN, OBJECT})

_PREFIX_SEPARATOR = re.compile(r"[_.]")


def classify_key(segment: PathSegment) -> KeyPattern:
    if segment.is_wildcard:
        return KeyPattern.NUMERIC
    for pattern, regex in _KEY_CLASSIFIERS:
        if regex.fullmatch(segment.value):
            return pattern
    return KeyPattern.MIXED


def shared_prefix(keys: Sequence[str]) -> str | None:
    """The token before the first ``_`` or ``.`` when every key shares it."""
    prefixes = {_PREFIX_SEPARATOR.split(key, maxsplit=1)[0] for key in keys}
    if len(prefixes) != 1:
        return None
    return prefixes.pop() or None


def detect_key_pattern(segments: Sequence[PathSegment]) -> KeyPattern | None:
    """Classify a set of sibling keys; ``None`` when there are no keys."""
    if not segments:
        return None
    if all(segment.is_wildcard for segment in segments):
        return KeyPattern.NUMERIC

    patterns = {classify_key(segment) for segment in segments}
    if len(patterns) == 1 and KeyPattern.MIXED not in patterns:
        return patterns.pop()
    if shared_prefix([segment.value for segment in segments]) is not None:
        return KeyPattern.PREFIXED
    return KeyPattern.MIXED


def key_regex(pattern: KeyPattern | None, prefix: str | None = None) -> str | None:
    """Regex every key of a record must match; ``None`` means unconstrained."""
    if pattern is KeyPattern.PREFIXED and prefix:
        return rf"^{re.escape(prefix)}(?:[_.].*)?$"
    return KEY_REGEXES.get(pattern) if pattern is not None else None


def _distinct_key(tag: str, value: Any) -> Any:
    try:
        hash(value)
    except TypeError:
        return (tag, repr(value))
    return (tag, value)


def detect_record_pattern(
    relation: PathRelation,
    relations: dict[FlatPath, PathRelation],
    config: InferenceConfig,
) -> RecordPrediction | None:
    """Return a record prediction when the map at ``relation`` reads as an open dictionary."""
    named = relation.named_children
    if len(named) < config.record_min_keys:
        return None

    segments = [path[-1] for path in named]
    pattern = detect_key_pattern(segments)
    if pattern not in RECORD_KEY_PATTERNS:
        return None

    tags: set[str] = set()
    distinct: set[Any] = set()
    nullable = False
    for child_path in named:
        child = relations[child_path]
        # Record values must be leaves.
        if child.children or child.key_sets or any(is_list_like(v) or is_keyed_map(v) for v in child.samples):
            return None
        for value in child.samples:
            tag = value_tag(value)
            distinct.add(_distinct_key(tag, value))
            if tag == NULL:
                nullable = True
            else:
                tags.add(tag)

    if len(tags) > 1 and not tags <= COMPATIBLE_VALUE_TAGS:
        return None
    if len(distinct) <= 1:
        return None

    prefix = shared_prefix([segment.value for segment in segments]) if pattern is KeyPattern.PREFIXED else None
    return RecordPrediction(
        key_pattern=pattern,
        key_prefix=prefix,
        value_type=render_label(tags, nullable=nullable),
    )
