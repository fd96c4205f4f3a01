"""Schema synthesizer: turns structural predictions into validators."""

from __future__ import annotations

import logging

from typepredictor.core.config import InferenceConfig
from typepredictor.core.types import ROOT, WILDCARD, FlatPath, PathSegment, format_path
from typepredictor.inference.key_patterns import key_regex
from typepredictor.inference.value_types import (
    ANY,
    NULL,
    UNDEFINED,
    parse_enum_label,
    render_label,
    sort_tags,
    split_label,
)
from typepredictor.models.structure import (
    ArrayPrediction,
    MixedPrediction,
    ObjectPrediction,
    PrimitivePrediction,
    RecordPrediction,
    StructuralPrediction,
)
from typepredictor.models.type_prediction import TypePrediction
from typepredictor.schema.nodes import (
    AnySchema,
    EnumSchema,
    ListSchema,
    ObjectField,
    ObjectSchema,
    RecordSchema,
    ScalarSchema,
    SchemaNode,
    any_of,
    nullable,
)

logger = logging.getLogger(__name__)


def build_primitive_schema(label: str) -> SchemaNode:
    """Resolve a tag, union label or ``enum(...)`` label to a validator."""
    label = label.strip()
    enum_values = parse_enum_label(label)
    if enum_values is not None:
        return EnumSchema(values=tuple(enum_values))
    members = split_label(label)
    if len(members) > 1:
        # Absence is enforced by the enclosing object, not by the value check.
        return any_of([build_primitive_schema(member) for member in members if member != UNDEFINED])
    if label in ("", ANY, UNDEFINED):
        return AnySchema()
    return ScalarSchema(tag=label)


class SchemaBuilder:
    """Recursively mirrors a structural prediction as a schema tree."""

    def __init__(
        self,
        predictions: dict[FlatPath, TypePrediction] | None = None,
        config: InferenceConfig | None = None,
    ) -> None:
        self._predictions = predictions or {}
        self._config = config or InferenceConfig()

    def build(self, structure: StructuralPrediction, path: FlatPath = ROOT, depth: int = 0) -> SchemaNode:
        if depth > self._config.max_depth:
            logger.debug("Depth cap %d reached at %r; accepting anything", self._config.max_depth, format_path(path))
            return AnySchema()
        schema = self._build_variant(structure, path, depth)
        if structure.nullable:
            schema = nullable(schema)
        return schema

    def _build_variant(self, structure: StructuralPrediction, path: FlatPath, depth: int) -> SchemaNode:
        if isinstance(structure, PrimitivePrediction):
            return build_primitive_schema(self._primitive_label(structure, path))
        if isinstance(structure, ArrayPrediction):
            return self._build_array(structure, path, depth)
        if isinstance(structure, RecordPrediction):
            return RecordSchema(
                key_pattern=str(structure.key_pattern),
                key_regex=key_regex(structure.key_pattern, structure.key_prefix),
                value=build_primitive_schema(structure.value_type),
            )
        if isinstance(structure, ObjectPrediction):
            return self._build_object(structure, path, depth)
        if isinstance(structure, MixedPrediction):
            return any_of([self.build(option, path, depth) for option in structure.options])
        raise TypeError(f"Unsupported structural prediction: {structure!r}")

    def _primitive_label(self, structure: PrimitivePrediction, path: FlatPath) -> str:
        prediction = self._predictions.get(path)
        if prediction is None or prediction.enum_values is None:
            return structure.value_type
        members = split_label(structure.value_type)
        return render_label(
            members,
            enum_values=prediction.enum_values,
            nullable=NULL in members,
            optional=UNDEFINED in members,
        )

    def _build_array(self, structure: ArrayPrediction, path: FlatPath, depth: int) -> SchemaNode:
        if structure.element is not None:
            element = self.build(structure.element, path + (WILDCARD,), depth + 1)
        elif structure.item_types:
            # Only hand-built predictions get here; the analyzer always sets an element
            # once a leaf was observed.
            element = any_of([build_primitive_schema(tag) for tag in sort_tags(structure.item_types)])
            for _ in range(structure.depth - 1):
                element = ListSchema(element=element)
        else:
            element = AnySchema()
        return ListSchema(element=element)

    def _build_object(self, structure: ObjectPrediction, path: FlatPath, depth: int) -> SchemaNode:
        shape = {
            name: ObjectField(
                node=self.build(child, path + (PathSegment.key(name),), depth + 1),
                optional=child.optional,
            )
            for name, child in structure.children.items()
        }
        return ObjectSchema(shape=shape, strict=self._config.strict_objects)


def build_schema(
    structure: StructuralPrediction,
    predictions: dict[FlatPath, TypePrediction] | None = None,
    config: InferenceConfig | None = None,
) -> SchemaNode:
    """Synthesize the validator for ``structure``."""
    return SchemaBuilder(predictions, config).build(structure)
