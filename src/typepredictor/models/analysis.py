"""Diagnostic output of ``analyze``."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from typepredictor.core.types import AccessPath, FlatPath, format_path
from typepredictor.models.samples import PathInfo, SampleCollection
from typepredictor.models.structure import StructuralPrediction
from typepredictor.models.type_prediction import TypePrediction


def _segments(path: AccessPath) -> list[dict[str, str]]:
    return [{"kind": str(segment.kind), "value": segment.value} for segment in path]


class AnalysisResult(BaseModel):
    """Inference artifacts without a synthesized schema."""

    paths: list[PathInfo] = Field(default_factory=list)
    structure: StructuralPrediction
    predictions: dict[FlatPath, TypePrediction] = Field(default_factory=dict)
    collection: SampleCollection = Field(default_factory=SampleCollection, exclude=True)

    def to_report(self) -> dict[str, Any]:
        """JSON-friendly view.

        Paths and predictions are lists of entries carrying both the printable
        ``path`` and its typed ``segments``: a literal ``"a.b"`` key and a nested
        ``a`` -> ``b`` print alike but stay separate entries.
        """
        return {
            "paths": [
                {
                    **info.model_dump(mode="json", exclude={"value", "segments"}),
                    "segments": _segments(info.segments),
                }
                for info in self.paths
            ],
            "structure": self.structure.model_dump(mode="json"),
            "predictions": [
                {
                    "path": format_path(path),
                    "segments": _segments(path),
                    "label": prediction.label,
                    **prediction.model_dump(mode="json", exclude={"element"}),
                }
                for path, prediction in self.predictions.items()
            ],
        }
