"""Type predictor orchestration: collect, analyze, predict, synthesize."""

from __future__ import annotations

import logging
from typing import Any

from typepredictor.core.config import InferenceConfig
from typepredictor.core.exceptions import TypePredictorError
from typepredictor.inference.collector import collect_documents
from typepredictor.inference.path_analyzer import analyze_paths
from typepredictor.inference.type_predictor import predict_types
from typepredictor.inference.value_types import NULL, is_keyed_map, is_list_like
from typepredictor.models.analysis import AnalysisResult
from typepredictor.schema.builder import build_schema
from typepredictor.schema.nodes import ListSchema, ObjectSchema, ScalarSchema, SchemaNode

logger = logging.getLogger(__name__)


class TypePredictor:
    """Infers a schema from one or more sample documents.

    Every call is independent: nothing is cached between calls, so one
    instance can be shared across threads.
    """

    def __init__(self, config: InferenceConfig | None = None) -> None:
        self._config = config or InferenceConfig()

    @property
    def config(self) -> InferenceConfig:
        return self._config

    def predict(self, *documents: Any) -> SchemaNode:
        """Return a validator accepting every sample document."""
        if not documents:
            raise TypePredictorError("predict() needs at least one sample document")

        trivial = self._trivial_schema(documents)
        if trivial is not None:
            return trivial

        collection = collect_documents(documents, self._config)
        structure = analyze_paths(collection, self._config)
        predictions = predict_types(collection, self._config)
        schema = build_schema(structure, predictions, self._config)
        logger.debug("Synthesized %s schema from %d documents", schema.kind, len(documents))
        return schema

    def analyze(self, *documents: Any) -> AnalysisResult:
        """Return paths, structure and per-path predictions without synthesizing a schema."""
        if not documents:
            raise TypePredictorError("analyze() needs at least one sample document")

        collection = collect_documents(documents, self._config)
        return AnalysisResult(
            paths=collection.path_infos(),
            structure=analyze_paths(collection, self._config),
            predictions=predict_types(collection, self._config),
            collection=collection,
        )

    def _trivial_schema(self, documents: tuple[Any, ...]) -> SchemaNode | None:
        if all(document is None for document in documents):
            return ScalarSchema(tag=NULL)
        if all(is_list_like(document) and not document for document in documents):
            return ListSchema()
        if all(is_keyed_map(document) and not document for document in documents):
            return ObjectSchema(strict=self._config.strict_objects)
        return None


def predict(*documents: Any, config: InferenceConfig | None = None) -> SchemaNode:
    return TypePredictor(config).predict(*documents)


def analyze(*documents: Any, config: InferenceConfig | None = None) -> AnalysisResult:
    return TypePredictor(config).analyze(*documents)
