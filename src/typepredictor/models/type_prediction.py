"""Flat per-path type predictions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from typepredictor.inference.value_types import ARRAY, render_label


class TypePrediction(BaseModel):
    """Union of runtime tags observed at one flattened path."""

    model_config = ConfigDict(frozen=True)

    type_tags: frozenset[str] = frozenset()  # without null/undefined
    enum_values: Optional[tuple[str, ...]] = None  # replaces "string" when set
    is_array: bool = False
    item_types: frozenset[str] = frozenset()
    array_depth: int = 0
    element: Optional[TypePrediction] = None
    nullable: bool = False
    optional: bool = False

    @property
    def label(self) -> str:
        return render_label(
            self.type_tags,
            enum_values=self.enum_values,
            nullable=self.nullable,
            optional=self.optional,
        )

    @property
    def scalar_label(self) -> str:
        """Label of the non-array members only, as used for primitive checks."""
        return render_label(
            self.type_tags - {ARRAY},
            enum_values=self.enum_values,
            nullable=self.nullable,
        )


TypePrediction.model_rebuild()
