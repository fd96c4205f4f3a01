"""Sample collector: groups every observed value by its flattened path."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from typepredictor.core.config import InferenceConfig
from typepredictor.core.types import AccessPath, PathSegment, ROOT, flatten_path
from typepredictor.inference.value_types import is_keyed_map, is_list_like
from typepredictor.models.samples import SampleBucket, SampleCollection

logger = logging.getLogger(__name__)


def _record(collection: SampleCollection, path: AccessPath, value: Any) -> None:
    flat = flatten_path(path)
    bucket = collection.buckets.get(flat)
    if bucket is None:
        bucket = SampleBucket(access_key=path, flat_path=flat)
        collection.buckets[flat] = bucket
    bucket.sample_values.append(value)


def collect_samples(
    document: Any,
    collection: SampleCollection | None = None,
    config: InferenceConfig | None = None,
) -> SampleCollection:
    """Walk one document and append its values to ``collection``.

    Scalars and lists are recorded at their own path; lists are then
    descended with an index segment per element, maps with a key segment
    per entry. Maps are not samples themselves; their key sets are kept
    so the analyzer can tell absent keys from present ones.

    Values deeper than ``config.max_depth`` are recorded whole at the
    cutoff path and never descended, since inference degrades them to
    ``any`` anyway.
    """
    config = config or InferenceConfig()
    if collection is None:
        collection = SampleCollection()
    collection.document_count += 1

    # Explicit stack so arbitrarily deep documents cannot exhaust the interpreter stack.
    stack: list[tuple[AccessPath, Any]] = [(ROOT, document)]
    while stack:
        path, value = stack.pop()
        if len(path) > config.max_depth:
            _record(collection, path, value)
            collection.truncated += 1
            continue
        if is_keyed_map(value):
            collection.key_sets.setdefault(flatten_path(path), []).append(
                tuple(str(key) for key in value)
            )
            children = [(path + (PathSegment.key(key),), item) for key, item in value.items()]
        elif is_list_like(value):
            _record(collection, path, value)
            children = [(path + (PathSegment.index(i),), item) for i, item in enumerate(value)]
        else:
            _record(collection, path, value)
            continue
        stack.extend(reversed(children))

    return collection


def collect_documents(
    documents: Iterable[Any], config: InferenceConfig | None = None
) -> SampleCollection:
    """Collect several sample documents into one shared collection."""
    collection = SampleCollection()
    for document in documents:
        collect_samples(document, collection, config)
    logger.debug(
        "Collected %d documents into %d buckets (%d map positions, %d values cut at depth)",
        collection.document_count,
        len(collection.buckets),
        len(collection.key_sets),
        collection.truncated,
    )
    return collection
