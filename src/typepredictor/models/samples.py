"""Sample collection models: what the collector observed at each path."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from typepredictor.core.types import AccessPath, FlatPath, PathSegment, format_path
from typepredictor.inference.value_types import NULL, STRING, value_tag


class SampleBucket(BaseModel):
    """Raw values observed at one flattened path."""

    access_key: AccessPath  # first concrete path that reached this position
    flat_path: FlatPath
    sample_values: list[Any] = Field(default_factory=list)

    def to_path_info(self) -> PathInfo:
        first = self.sample_values[0] if self.sample_values else None
        patterns = list(dict.fromkeys(v for v in self.sample_values if value_tag(v) == STRING))
        return PathInfo(
            path=format_path(self.flat_path),
            segments=list(self.access_key),
            value=first,
            type=value_tag(first),
            nullable=any(value_tag(v) == NULL for v in self.sample_values),
            occurrences=len(self.sample_values),
            patterns=patterns,
        )


class PathInfo(BaseModel):
    """Diagnostic summary of one flattened path."""

    path: str
    segments: list[PathSegment]
    value: Any = None
    type: str
    nullable: bool = False
    occurrences: int = 0
    patterns: list[str] = Field(default_factory=list)  # distinct string samples


class SampleCollection(BaseModel):
    """Collector output: per-path buckets plus the key sets of every map seen."""

    buckets: dict[FlatPath, SampleBucket] = Field(default_factory=dict)
    key_sets: dict[FlatPath, list[tuple[str, ...]]] = Field(default_factory=dict)
    document_count: int = 0
    truncated: int = 0  # values recorded whole at the depth cutoff

    def samples(self, path: FlatPath) -> list[Any]:
        bucket = self.buckets.get(path)
        return bucket.sample_values if bucket is not None else []

    def paths(self) -> list[FlatPath]:
        """Every observed position, buckets first, in discovery order."""
        return list(dict.fromkeys([*self.buckets, *self.key_sets]))

    def path_infos(self) -> list[PathInfo]:
        return [bucket.to_path_info() for bucket in self.buckets.values()]


class PathRelation(BaseModel):
    """One node of the flattened-path tree."""

    path: FlatPath
    parent: Optional[FlatPath] = None  # None only for the root
    key: Optional[PathSegment] = None
    children: list[FlatPath] = Field(default_factory=list)
    samples: list[Any] = Field(default_factory=list)
    key_sets: list[frozenset[str]] = Field(default_factory=list)

    @property
    def named_children(self) -> list[FlatPath]:
        return [child for child in self.children if not child[-1].is_wildcard]

    @property
    def element_child(self) -> FlatPath | None:
        for child in self.children:
            if child[-1].is_wildcard:
                return child
        return None
