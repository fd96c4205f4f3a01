"""Inference endpoints: predict, analyze and validate sample documents."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from typepredictor.core.config import AppSettings
from typepredictor.predictor import TypePredictor
from typepredictor.schema.nodes import ValidationResult, json_schema_document

# Sync handlers: inference is CPU-bound, so FastAPI runs these in its threadpool.
router = APIRouter(tags=["inference"])


class DocumentsRequest(BaseModel):
    documents: list[Any] = Field(min_length=1)


class ValidateRequest(BaseModel):
    samples: list[Any] = Field(min_length=1)
    document: Any = None


class PredictResponse(BaseModel):
    label: str
    json_schema: dict[str, Any]


def _predictor(request: Request) -> TypePredictor:
    settings: AppSettings = getattr(request.app.state, "settings", None) or AppSettings()
    return TypePredictor(settings.inference)


@router.post("/predict")
def predict(body: DocumentsRequest, request: Request) -> PredictResponse:
    schema = _predictor(request).predict(*body.documents)
    return PredictResponse(label=schema.label, json_schema=json_schema_document(schema))


@router.post("/analyze")
def analyze(body: DocumentsRequest, request: Request) -> dict[str, Any]:
    return _predictor(request).analyze(*body.documents).to_report()


@router.post("/validate")
def validate(body: ValidateRequest, request: Request) -> ValidationResult:
    schema = _predictor(request).predict(*body.samples)
    return schema.safe_validate(body.document)
