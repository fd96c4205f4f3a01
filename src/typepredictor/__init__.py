"""Structural type inference and schema synthesis for sample documents."""

from __future__ import annotations

from typepredictor.core.config import InferenceConfig
from typepredictor.core.exceptions import SchemaValidationError, TypePredictorError
from typepredictor.models.analysis import AnalysisResult
from typepredictor.predictor import TypePredictor, analyze, predict
from typepredictor.schema.nodes import SchemaNode, ValidationResult, json_schema_document

__all__ = [
    "AnalysisResult",
    "InferenceConfig",
    "SchemaNode",
    "SchemaValidationError",
    "TypePredictor",
    "TypePredictorError",
    "ValidationResult",
    "analyze",
    "json_schema_document",
    "predict",
]
