"""Type predictor: per-path tag unions and enum detection."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from typepredictor.core.config import InferenceConfig
from typepredictor.core.types import FlatPath, SegmentKind
from typepredictor.inference.value_types import (
    ANY,
    ARRAY,
    NULL,
    OBJECT,
    STRING,
    list_shape,
    value_tag,
)
from typepredictor.models.samples import SampleCollection
from typepredictor.models.type_prediction import TypePrediction

logger = logging.getLogger(__name__)

_ENUM_CASINGS = (
    re.compile(r"[a-z]+"),
    re.compile(r"[A-Z]+"),
    re.compile(r"[A-Z][a-z]+"),
)


def detect_enum_pattern(
    values: Iterable[str], config: InferenceConfig | None = None
) -> tuple[str, ...] | None:
    """Return the sorted distinct values when they look like a closed set.

    Requires at least ``enum_min_values`` distinct values sharing one casing
    (all lower, all upper, or all PascalCase) whose lengths differ by at
    most ``enum_max_length_spread``.
    """
    config = config or InferenceConfig()
    distinct = list(dict.fromkeys(values))
    if len(distinct) < config.enum_min_values:
        return None
    if not any(all(casing.fullmatch(v) for v in distinct) for casing in _ENUM_CASINGS):
        return None
    lengths = [len(v) for v in distinct]
    if max(lengths) - min(lengths) > config.enum_max_length_spread:
        return None
    return tuple(sorted(distinct))


def _merged_enum(a: TypePrediction, b: TypePrediction) -> tuple[str, ...] | None:
    if STRING not in a.type_tags:
        return b.enum_values
    if STRING not in b.type_tags:
        return a.enum_values
    if a.enum_values and b.enum_values:
        return tuple(sorted({*a.enum_values, *b.enum_values}))
    return None


def merge_type_predictions(a: TypePrediction, b: TypePrediction) -> TypePrediction:
    """Union two predictions; array depth takes the larger of the two."""
    if a.element is not None and b.element is not None:
        element = merge_type_predictions(a.element, b.element)
    else:
        element = a.element or b.element
    return TypePrediction(
        type_tags=a.type_tags | b.type_tags,
        enum_values=_merged_enum(a, b),
        is_array=a.is_array or b.is_array,
        item_types=a.item_types | b.item_types,
        array_depth=max(a.array_depth, b.array_depth),
        element=element,
        nullable=a.nullable or b.nullable,
        optional=a.optional or b.optional,
    )


def predict_value_types(
    samples: Iterable[Any],
    config: InferenceConfig | None = None,
    *,
    optional: bool = False,
    is_map: bool = False,
    depth: int = 0,
) -> TypePrediction:
    """Summarize the runtime tags of ``samples``."""
    config = config or InferenceConfig()
    if depth > config.max_depth:
        return TypePrediction(type_tags=frozenset({ANY}))

    samples = list(samples)
    tags: set[str] = {OBJECT} if is_map else set()
    items: set[str] = set()
    nullable = False
    deepest = 0
    element: TypePrediction | None = None

    for value in samples:
        tag = value_tag(value)
        if tag == NULL:
            nullable = True
            continue
        tags.add(tag)
        if tag != ARRAY:
            continue
        shape = list_shape(value)
        deepest = max(deepest, shape.depth)
        leaves = shape.leaves
        if not leaves:
            continue
        items.update(value_tag(leaf) for leaf in leaves)
        prediction = predict_value_types(leaves, config, depth=depth + 1)
        element = prediction if element is None else merge_type_predictions(element, prediction)

    strings = [value for value in samples if isinstance(value, str)]
    return TypePrediction(
        type_tags=frozenset(tags),
        enum_values=detect_enum_pattern(strings, config),
        is_array=ARRAY in tags,
        item_types=frozenset(items),
        array_depth=deepest,
        element=element,
        nullable=nullable,
        optional=optional,
    )


def _is_optional(path: FlatPath, collection: SampleCollection) -> bool:
    if not path or path[-1].kind is not SegmentKind.KEY:
        return False
    siblings = collection.key_sets.get(path[:-1], [])
    return any(path[-1].value not in keys for keys in siblings)


def predict_types(
    collection: SampleCollection, config: InferenceConfig | None = None
) -> dict[FlatPath, TypePrediction]:
    """Predict a type for every flattened path of ``collection``."""
    config = config or InferenceConfig()
    predictions = {
        path: predict_value_types(
            collection.samples(path),
            config,
            optional=_is_optional(path, collection),
            is_map=path in collection.key_sets,
        )
        for path in collection.paths()
    }
    enums = sum(1 for prediction in predictions.values() if prediction.enum_values)
    logger.debug("Predicted types for %d paths (%d enums)", len(predictions), enums)
    return predictions
