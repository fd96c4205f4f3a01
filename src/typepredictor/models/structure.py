"""Structural predictions: the recursive shape inferred for each path."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StructureKind(StrEnum):
    PRIMITIVE = "primitive"
    ARRAY = "array"
    RECORD = "record"
    OBJECT = "object"
    MIXED = "mixed"


class KeyPattern(StrEnum):
    """Naming convention shared by a set of sibling keys."""

    WORD = "word"
    PASCAL_CASE = "PascalCase"
    CAMEL_CASE = "camelCase"
    SNAKE_CASE = "snake_case"
    NUMERIC = "numeric"
    PREFIXED = "prefixed"
    MIXED = "mixed"


class _Prediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    nullable: bool = False  # some sample is an explicit null
    optional: bool = False  # some sibling map omits this key


class PrimitivePrediction(_Prediction):
    kind: Literal[StructureKind.PRIMITIVE] = StructureKind.PRIMITIVE
    value_type: str = "any"  # single tag or union label


class ArrayPrediction(_Prediction):
    kind: Literal[StructureKind.ARRAY] = StructureKind.ARRAY
    element: Optional[StructuralPrediction] = None  # None when no element was observed
    depth: int = 1
    item_types: frozenset[str] = frozenset()


class RecordPrediction(_Prediction):
    kind: Literal[StructureKind.RECORD] = StructureKind.RECORD
    key_pattern: KeyPattern
    key_prefix: Optional[str] = None
    value_type: str


class ObjectPrediction(_Prediction):
    kind: Literal[StructureKind.OBJECT] = StructureKind.OBJECT
    children: dict[str, StructuralPrediction] = Field(default_factory=dict)


class MixedPrediction(_Prediction):
    """One position observed with several shape kinds (scalar, list, map)."""

    kind: Literal[StructureKind.MIXED] = StructureKind.MIXED
    options: list[StructuralPrediction] = Field(default_factory=list)


StructuralPrediction = Annotated[
    Union[PrimitivePrediction, ArrayPrediction, RecordPrediction, ObjectPrediction, MixedPrediction],
    Field(discriminator="kind"),
]

for _model in (ArrayPrediction, ObjectPrediction, MixedPrediction):
    _model.model_rebuild()
