"""End-to-end inference tests: samples in, validator out."""

from __future__ import annotations

import jsonschema
import pytest

from typepredictor import (
    InferenceConfig,
    TypePredictor,
    TypePredictorError,
    analyze,
    json_schema_document,
    predict,
)
from typepredictor.core.config import MAX_DEPTH_LIMIT
from typepredictor.core.types import PathSegment
from typepredictor.models.structure import ObjectPrediction, RecordPrediction
from typepredictor.schema.nodes import ListSchema, ObjectSchema, RecordSchema, ScalarSchema
from tests.fakes import API_RESPONSE, CONFIG_FILE, USERS, deep_nest


class TestSelfAcceptance:
    @pytest.mark.parametrize(
        "document",
        [API_RESPONSE, CONFIG_FILE, USERS, 42, "text", True, [1, "two", None], {"a": [[1], []]}],
    )
    def test_accepts_its_own_sample(self, document):
        assert predict(document).is_valid(document)

    def test_accepts_every_sample_of_a_batch(self):
        schema = predict(*USERS)
        for user in USERS:
            assert schema.is_valid(user)

    def test_deterministic(self):
        assert predict(API_RESPONSE) == predict(API_RESPONSE)
        assert str(predict(*USERS)) == str(predict(*USERS))


class TestNullableAndOptional:
    def test_null_sample_makes_field_nullable(self):
        schema = predict({"v": "a"}, {"v": None})
        assert schema.is_valid({"v": None})
        assert schema.is_valid({"v": "b"})
        assert not schema.is_valid({"v": True})

    def test_absent_key_makes_field_optional(self):
        schema = predict({"a": 1, "b": 2}, {"a": 3})
        assert schema.is_valid({"a": 4})
        assert schema.is_valid({"a": 4, "b": 5})
        assert not schema.is_valid({"a": 4, "b": None})
        assert not schema.is_valid({"b": 5})

    def test_users_batch(self):
        schema = predict(*USERS)
        assert schema.is_valid({"id": 9, "name": None, "status": "active"})
        assert not schema.is_valid({"id": 9, "name": "Alice", "status": "deleted"})
        assert not schema.is_valid({"id": 9, "name": "Alice", "status": "active", "tags": "x"})


class TestEnums:
    def test_enum_from_repeated_values(self):
        schema = predict(*({"status": value} for value in ("active", "inactive", "pending", "active")))
        assert schema.is_valid({"status": "pending"})
        assert not schema.is_valid({"status": "archived"})

    def test_single_value_stays_string(self):
        schema = predict({"status": "active"})
        assert schema.is_valid({"status": "anything at all"})

    def test_mixed_casing_stays_string(self):
        schema = predict({"s": "active"}, {"s": "Inactive"})
        assert schema.is_valid({"s": "whatever"})

    def test_wide_length_spread_stays_string(self):
        schema = predict({"s": "A"}, {"s": "somewhatLongerValue"})
        assert schema.is_valid({"s": "unknown"})


class TestRecordVersusObject:
    def test_snake_case_keys_become_record(self):
        schema = predict({"theme_dark": True, "theme_light": False})
        assert isinstance(schema, RecordSchema)
        assert schema.is_valid({"theme_custom": True})
        assert not schema.is_valid({"theme_custom": "yes"})

    def test_large_prefixed_object_becomes_record(self):
        document = {f"key_{i}": i for i in range(50)}
        schema = predict(document)
        assert isinstance(schema, RecordSchema)
        assert schema.is_valid({"key_999": 7})
        assert not schema.is_valid({"other": 7})

    def test_word_keys_stay_object(self):
        schema = predict({"id": 1, "name": "John"})
        assert isinstance(schema, ObjectSchema)
        assert not schema.is_valid({"id": 1, "name": "John", "email": "j@example.com"})

    def test_camel_case_keys_stay_object(self):
        schema = predict({"firstName": "a", "lastName": "b"})
        assert isinstance(schema, ObjectSchema)
        assert not schema.is_valid({"firstName": "a", "lastName": "b", "middleName": "c"})

    def test_identical_values_stay_object(self):
        result = analyze({"feature_a": True, "feature_b": True})
        assert isinstance(result.structure, ObjectPrediction)

    def test_nested_values_stay_object(self):
        result = analyze({"user_one": {"id": 1}, "user_two": {"id": 2}})
        assert isinstance(result.structure, ObjectPrediction)

    def test_non_strict_objects_allow_extra_keys(self):
        schema = predict({"a": 1}, config=InferenceConfig(strict_objects=False))
        assert schema.is_valid({"a": 1, "b": 2})


class TestArrays:
    def test_scores(self):
        schema = predict({"scores": [85, 92, 78]})
        assert schema.is_valid({"scores": [1, 2, 3]})
        assert not schema.is_valid({"scores": ["x"]})

    def test_mixed_scalars(self):
        schema = predict({"mixed": [1, "two", True]})
        assert schema.is_valid({"mixed": [2, "three", False]})
        assert not schema.is_valid({"mixed": [{}]})

    def test_element_union(self):
        schema = predict({"items": [1, "two"]})
        assert schema.is_valid({"items": ["three", 4, 5]})
        assert not schema.is_valid({"items": [True]})

    def test_matrix(self):
        schema = predict({"matrix": [[1, 2], [3, 4]]})
        assert schema.is_valid({"matrix": [[5], [6, 7, 8]]})
        assert not schema.is_valid({"matrix": [["x"]]})
        assert not schema.is_valid({"matrix": [5]})

    def test_array_of_objects_unifies_fields(self):
        schema = predict([{"id": 1, "name": "a"}, {"id": 2}])
        assert schema.is_valid([{"id": 3}, {"id": 4, "name": "b"}])
        assert not schema.is_valid([{"name": "b"}])

    def test_mixed_positions(self):
        schema = predict([[], None, {}])
        assert schema.is_valid([[1], None, {}])
        assert not schema.is_valid(["x"])


class TestEdgeCases:
    def test_zero_documents(self):
        with pytest.raises(TypePredictorError):
            predict()
        with pytest.raises(TypePredictorError):
            TypePredictor().analyze()

    def test_trivial_inputs(self):
        assert predict(None) == ScalarSchema(tag="null")
        assert predict([]) == ListSchema()
        assert isinstance(predict({}), ObjectSchema)
        assert predict({}).is_valid({})
        assert not predict({}).is_valid({"a": 1})

    def test_root_scalars(self):
        schema = predict(1, "a")
        assert schema.is_valid(2)
        assert schema.is_valid("b")
        assert not schema.is_valid(None)

    def test_keys_with_dots_and_markers(self):
        document = {"a.b": 1, "$": "x", "a": {"b": "y"}}
        schema = predict(document)
        assert schema.is_valid(document)
        assert not schema.is_valid({"a.b": "1", "$": "x", "a": {"b": "y"}})

    def test_deep_document_is_capped(self):
        document = deep_nest(2000)
        schema = predict(document)
        assert schema.is_valid(document)

    def test_deep_lists_are_capped(self):
        document: list = [0]
        for _ in range(4000):
            document = [document]
        schema = predict(document)
        assert schema.is_valid(document)
        assert not schema.is_valid(["flat"])

    def test_highest_allowed_depth_cap(self):
        document = deep_nest(1000)
        schema = predict(document, config=InferenceConfig(max_depth=MAX_DEPTH_LIMIT))
        assert schema.is_valid(document)

    def test_depth_cap_accepts_anything_below(self):
        schema = predict(deep_nest(5), config=InferenceConfig(max_depth=2))
        assert schema.is_valid({"next": {"next": {"next": "anything goes"}}})
        assert not schema.is_valid({"next": 1})


class TestAnalyze:
    def test_predictions_per_path(self):
        result = analyze(*USERS)
        status = result.predictions[(PathSegment.key("status"),)]
        assert status.enum_values == ("active", "inactive", "pending")
        name = result.predictions[(PathSegment.key("name"),)]
        assert name.nullable

    def test_structure_is_object(self):
        result = analyze(CONFIG_FILE)
        assert isinstance(result.structure, ObjectPrediction)
        assert set(result.structure.children) == {"app", "server", "database", "logging"}

    def test_record_structure(self):
        result = analyze({"key_0": 1, "key_1": 2})
        assert isinstance(result.structure, RecordPrediction)
        assert result.structure.key_prefix == "key"

    def test_report_is_json_friendly(self):
        report = analyze({"users": [{"id": 1}]}).to_report()
        predictions = {entry["path"]: entry for entry in report["predictions"]}
        assert predictions["users.$.id"]["label"] == "number"
        assert predictions["users.$.id"]["segments"] == [
            {"kind": "key", "value": "users"},
            {"kind": "index", "value": "$"},
            {"kind": "key", "value": "id"},
        ]
        assert report["structure"]["kind"] == "object"

    def test_report_keeps_paths_that_print_alike(self):
        report = analyze({"a.b": 1, "a": {"b": "x"}}).to_report()
        entries = [entry for entry in report["predictions"] if entry["path"] == "a.b"]
        assert sorted(entry["label"] for entry in entries) == ["number", "string"]
        assert sorted(len(entry["segments"]) for entry in entries) == [1, 2]
        assert len([info for info in report["paths"] if info["path"] == "a.b"]) == 2

    def test_report_keeps_dollar_key_apart_from_wildcard(self):
        report = analyze({"xs": {"$": True}}, {"xs": [1]}).to_report()
        labels = {
            tuple(segment["kind"] for segment in entry["segments"]): entry["label"]
            for entry in report["predictions"]
            if entry["path"] == "xs.$"
        }
        assert labels == {("key", "key"): "boolean", ("key", "index"): "number"}


class TestJsonSchemaExport:
    @pytest.mark.parametrize("document", [API_RESPONSE, CONFIG_FILE])
    def test_exported_schema_accepts_sample(self, document):
        exported = json_schema_document(predict(document), title="sample")
        jsonschema.Draft202012Validator.check_schema(exported)
        jsonschema.validate(document, exported, cls=jsonschema.Draft202012Validator)

    def test_exported_schema_rejects_like_the_validator(self):
        schema = predict(*USERS)
        exported = json_schema_document(schema)
        validator = jsonschema.Draft202012Validator(exported)
        bad = {"id": "9", "name": "Alice", "status": "active"}
        assert not schema.is_valid(bad)
        assert not validator.is_valid(bad)
        for user in USERS:
            assert validator.is_valid(user)
