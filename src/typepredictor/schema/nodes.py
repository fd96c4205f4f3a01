"""Schema nodes: the composable validators synthesized from predictions.

Nodes are immutable pydantic models discriminated by ``kind``. Each one can
check a document (``safe_validate`` / ``validate`` / ``is_valid``), print a
TypeScript-flavoured label, and export itself as a JSON Schema fragment.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from typepredictor.core.exceptions import SchemaValidationError
from typepredictor.inference.value_types import (
    ANY,
    BOOLEAN,
    NULL,
    NUMBER,
    STRING,
    UNION_SEPARATOR,
    enum_label,
    is_keyed_map,
    is_list_like,
    value_tag,
)

JSON_SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"

_JSON_TYPES = {NULL: "null", STRING: "string", NUMBER: "number", BOOLEAN: "boolean"}

IssuePath = tuple[Union[str, int], ...]


class SchemaKind(StrEnum):
    ANY = "any"
    SCALAR = "scalar"
    ENUM = "enum"
    NULLABLE = "nullable"
    UNION = "union"
    LIST = "list"
    RECORD = "record"
    OBJECT = "object"


class ValidationIssue(BaseModel):
    path: str = ""
    message: str
    expected: str = ""
    received: str = ""


class ValidationResult(BaseModel):
    success: bool
    issues: list[ValidationIssue] = Field(default_factory=list)


def format_issue_path(path: IssuePath) -> str:
    out = ""
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else part
    return out


class _SchemaNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        raise NotImplementedError

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        raise NotImplementedError

    def to_json_schema(self) -> dict[str, Any]:
        raise NotImplementedError

    def _mismatch(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        received = value_tag(value)
        issues.append(
            ValidationIssue(
                path=format_issue_path(path),
                message=f"Expected {self.label}, received {received}",
                expected=self.label,
                received=received,
            )
        )

    def safe_validate(self, value: Any) -> ValidationResult:
        """Check ``value``; never raises."""
        issues: list[ValidationIssue] = []
        self._check(value, (), issues)
        return ValidationResult(success=not issues, issues=issues)

    def validate(self, value: Any) -> Any:  # type: ignore[override]
        """Return ``value`` unchanged or raise :class:`SchemaValidationError`."""
        result = self.safe_validate(value)
        if not result.success:
            raise SchemaValidationError(result.issues)
        return value

    def is_valid(self, value: Any) -> bool:
        return self.safe_validate(value).success

    def __str__(self) -> str:
        return self.label


class AnySchema(_SchemaNode):
    kind: Literal[SchemaKind.ANY] = SchemaKind.ANY

    @property
    def label(self) -> str:
        return ANY

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        return None

    def to_json_schema(self) -> dict[str, Any]:
        return {}


class ScalarSchema(_SchemaNode):
    """Accepts values whose runtime tag equals ``tag``."""

    kind: Literal[SchemaKind.SCALAR] = SchemaKind.SCALAR
    tag: str

    @property
    def label(self) -> str:
        return self.tag

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        if value_tag(value) != self.tag:
            self._mismatch(value, path, issues)

    def to_json_schema(self) -> dict[str, Any]:
        if self.tag in _JSON_TYPES:
            return {"type": _JSON_TYPES[self.tag]}
        if self.tag == "date":
            return {"type": "string", "format": "date-time", "x-runtime-type": self.tag}
        return {"x-runtime-type": self.tag}


class EnumSchema(_SchemaNode):
    kind: Literal[SchemaKind.ENUM] = SchemaKind.ENUM
    values: tuple[str, ...]

    @property
    def label(self) -> str:
        return enum_label(self.values)

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        if not isinstance(value, str) or value not in self.values:
            self._mismatch(value, path, issues)

    def to_json_schema(self) -> dict[str, Any]:
        return {"enum": list(self.values)}


class NullableSchema(_SchemaNode):
    kind: Literal[SchemaKind.NULLABLE] = SchemaKind.NULLABLE
    inner: SchemaNode

    @property
    def label(self) -> str:
        return f"{self.inner.label}{UNION_SEPARATOR}{NULL}"

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        if value is not None:
            self.inner._check(value, path, issues)

    def to_json_schema(self) -> dict[str, Any]:
        return {"anyOf": [self.inner.to_json_schema(), {"type": "null"}]}


class UnionSchema(_SchemaNode):
    """Accepts a value when any member accepts it."""

    kind: Literal[SchemaKind.UNION] = SchemaKind.UNION
    members: list[SchemaNode]

    @property
    def label(self) -> str:
        return UNION_SEPARATOR.join(member.label for member in self.members)

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        for member in self.members:
            scratch: list[ValidationIssue] = []
            member._check(value, path, scratch)
            if not scratch:
                return
        self._mismatch(value, path, issues)

    def to_json_schema(self) -> dict[str, Any]:
        return {"anyOf": [member.to_json_schema() for member in self.members]}


class ListSchema(_SchemaNode):
    kind: Literal[SchemaKind.LIST] = SchemaKind.LIST
    element: SchemaNode = Field(default_factory=AnySchema)

    @property
    def label(self) -> str:
        return f"Array<{self.element.label}>"

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        if not is_list_like(value):
            self._mismatch(value, path, issues)
            return
        for index, item in enumerate(value):
            self.element._check(item, path + (index,), issues)

    def to_json_schema(self) -> dict[str, Any]:
        return {"type": "array", "items": self.element.to_json_schema()}


class RecordSchema(_SchemaNode):
    """Open dictionary: every key matches ``key_regex``, every value matches ``value``."""

    kind: Literal[SchemaKind.RECORD] = SchemaKind.RECORD
    key_pattern: Optional[str] = None
    key_regex: Optional[str] = None
    value: SchemaNode = Field(default_factory=AnySchema)

    @property
    def label(self) -> str:
        return f"Record<{self.key_pattern or STRING}, {self.value.label}>"

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        if not is_keyed_map(value):
            self._mismatch(value, path, issues)
            return
        for key, item in value.items():
            key = str(key)
            if self.key_regex is not None and re.fullmatch(self.key_regex, key) is None:
                issues.append(
                    ValidationIssue(
                        path=format_issue_path(path + (key,)),
                        message=f"Key {key!r} does not match {self.key_pattern} pattern",
                        expected=self.key_regex,
                        received=key,
                    )
                )
                continue
            self.value._check(item, path + (key,), issues)

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "additionalProperties": self.value.to_json_schema(),
        }
        if self.key_regex is not None:
            schema["propertyNames"] = {"pattern": self.key_regex}
        return schema


class ObjectField(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: SchemaNode
    optional: bool = False


class ObjectSchema(_SchemaNode):
    """Fixed shape: declared fields only when ``strict``."""

    kind: Literal[SchemaKind.OBJECT] = SchemaKind.OBJECT
    shape: dict[str, ObjectField] = Field(default_factory=dict)
    strict: bool = True

    @property
    def label(self) -> str:
        if not self.shape:
            return "{}"
        parts = [
            f"{name}{'?' if field.optional else ''}: {field.node.label}"
            for name, field in self.shape.items()
        ]
        return "{ " + "; ".join(parts) + " }"

    def _check(self, value: Any, path: IssuePath, issues: list[ValidationIssue]) -> None:
        if not is_keyed_map(value):
            self._mismatch(value, path, issues)
            return
        present = {str(key): item for key, item in value.items()}
        for name, field in self.shape.items():
            if name not in present:
                if not field.optional:
                    issues.append(
                        ValidationIssue(
                            path=format_issue_path(path + (name,)),
                            message="Required key is missing",
                            expected=field.node.label,
                            received="undefined",
                        )
                    )
                continue
            field.node._check(present[name], path + (name,), issues)
        if self.strict:
            for name in present:
                if name not in self.shape:
                    issues.append(
                        ValidationIssue(
                            path=format_issue_path(path + (name,)),
                            message=f"Unrecognized key {name!r}",
                            expected="never",
                            received=value_tag(present[name]),
                        )
                    )

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {name: field.node.to_json_schema() for name, field in self.shape.items()},
        }
        required = [name for name, field in self.shape.items() if not field.optional]
        if required:
            schema["required"] = required
        if self.strict:
            schema["additionalProperties"] = False
        return schema


SchemaNode = Annotated[
    Union[
        AnySchema,
        ScalarSchema,
        EnumSchema,
        NullableSchema,
        UnionSchema,
        ListSchema,
        RecordSchema,
        ObjectSchema,
    ],
    Field(discriminator="kind"),
]

for _model in (NullableSchema, UnionSchema, ListSchema, RecordSchema, ObjectField, ObjectSchema):
    _model.model_rebuild()


def any_of(schemas: list[SchemaNode]) -> SchemaNode:
    """Union of ``schemas``: nested unions flattened, equal members kept once."""
    members: list[SchemaNode] = []
    for schema in schemas:
        for member in (schema.members if isinstance(schema, UnionSchema) else [schema]):
            if isinstance(member, AnySchema):
                return member
            if member not in members:
                members.append(member)
    if not members:
        return AnySchema()
    if len(members) == 1:
        return members[0]
    return UnionSchema(members=members)


def nullable(schema: SchemaNode) -> SchemaNode:
    """Also accept ``None``; a no-op when ``schema`` already does."""
    if isinstance(schema, (AnySchema, NullableSchema)):
        return schema
    if isinstance(schema, ScalarSchema) and schema.tag == NULL:
        return schema
    if isinstance(schema, UnionSchema) and ScalarSchema(tag=NULL) in schema.members:
        return schema
    return NullableSchema(inner=schema)


def json_schema_document(schema: SchemaNode, title: str | None = None) -> dict[str, Any]:
    """Full JSON Schema document for ``schema``."""
    document: dict[str, Any] = {"$schema": JSON_SCHEMA_DRAFT}
    if title:
        document["title"] = title
    document.update(schema.to_json_schema())
    return document
