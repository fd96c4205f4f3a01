"""Path-relation analyzer: rebuilds the path tree and predicts its structure.

Every node of the flattened-path tree is classified as one of

* ``primitive`` - scalar leaves (possibly a union of scalar tags),
* ``array``     - list samples, with the element position predicted recursively,
* ``record``    - a map whose keys follow a convention and whose values are leaves,
* ``object``    - a map with fixed, named fields,
* ``mixed``     - the same position seen with several of the shapes above.

Recursion stops at ``InferenceConfig.max_depth``; deeper nodes become
``primitive(any)`` so pathological inputs lose precision instead of failing.
"""

from __future__ import annotations

import logging
from typing import Any

from typepredictor.core.config import InferenceConfig
from typepredictor.core.types import ROOT, FlatPath, format_path
from typepredictor.inference.key_patterns import detect_record_pattern
from typepredictor.inference.value_types import (
    ANY,
    NULL,
    is_list_like,
    list_shape,
    render_label,
    value_tag,
)
from typepredictor.models.samples import PathRelation, SampleCollection
from typepredictor.models.structure import (
    ArrayPrediction,
    MixedPrediction,
    ObjectPrediction,
    PrimitivePrediction,
    StructuralPrediction,
)

logger = logging.getLogger(__name__)


def build_relations(collection: SampleCollection) -> dict[FlatPath, PathRelation]:
    """Link every observed flattened path to its parent, creating ancestors as needed."""
    relations: dict[FlatPath, PathRelation] = {ROOT: PathRelation(path=ROOT)}

    def ensure(path: FlatPath) -> PathRelation:
        missing: list[FlatPath] = []
        cursor = path
        while cursor not in relations:
            missing.append(cursor)
            cursor = cursor[:-1]
        for created in reversed(missing):
            parent = created[:-1]
            relations[created] = PathRelation(path=created, parent=parent, key=created[-1])
            relations[parent].children.append(created)
        return relations[path]

    for path in collection.paths():
        relation = ensure(path)
        relation.samples = collection.samples(path)
        relation.key_sets = [frozenset(keys) for keys in collection.key_sets.get(path, [])]

    return relations


class PathAnalyzer:
    """Predicts the structural shape of a sample collection."""

    def __init__(
        self,
        relations: dict[FlatPath, PathRelation],
        config: InferenceConfig | None = None,
    ) -> None:
        self._relations = relations
        self._config = config or InferenceConfig()

    @classmethod
    def from_collection(
        cls, collection: SampleCollection, config: InferenceConfig | None = None
    ) -> PathAnalyzer:
        return cls(build_relations(collection), config)

    def predict(self, path: FlatPath = ROOT, depth: int = 0) -> StructuralPrediction:
        if depth > self._config.max_depth:
            logger.debug("Depth cap %d reached at %r", self._config.max_depth, format_path(path))
            return PrimitivePrediction(value_type=ANY)

        relation = self._relations.get(path)
        if relation is None:
            return PrimitivePrediction(value_type=ANY)

        samples = relation.samples
        nullable = any(value is None for value in samples)
        scalars = [v for v in samples if v is not None and not is_list_like(v)]
        lists = [v for v in samples if is_list_like(v)]

        options: list[StructuralPrediction] = []
        if scalars:
            options.append(PrimitivePrediction(value_type=render_label(value_tag(v) for v in scalars)))
        if lists:
            options.append(self._predict_array(relation, lists, depth))
        if relation.key_sets:
            options.append(self._predict_mapping(relation, depth))

        if not options:
            return PrimitivePrediction(value_type=NULL, nullable=True)
        if len(options) == 1:
            return options[0].model_copy(update={"nullable": nullable})
        return MixedPrediction(options=options, nullable=nullable)

    def _predict_array(self, relation: PathRelation, lists: list[Any], depth: int) -> ArrayPrediction:
        element_path = relation.element_child
        element = self.predict(element_path, depth + 1) if element_path is not None else None
        shapes = [list_shape(sample) for sample in lists]
        tags: set[str] = set()
        for shape in shapes:
            tags.update(shape.tags)
        return ArrayPrediction(
            element=element,
            depth=max(shape.depth for shape in shapes),
            item_types=frozenset(tags),
        )

    def _predict_mapping(self, relation: PathRelation, depth: int) -> StructuralPrediction:
        record = detect_record_pattern(relation, self._relations, self._config)
        if record is not None:
            return record

        children: dict[str, StructuralPrediction] = {}
        for child_path in relation.named_children:
            name = child_path[-1].value
            child = self.predict(child_path, depth + 1)
            # Absent in some sibling map: optional. Explicit null is tracked separately as nullable.
            if any(name not in keys for keys in relation.key_sets):
                child = child.model_copy(update={"optional": True})
            children[name] = child
        return ObjectPrediction(children=children)


def analyze_paths(
    collection: SampleCollection, config: InferenceConfig | None = None
) -> StructuralPrediction:
    """Predict the root structure of a collection."""
    structure = PathAnalyzer.from_collection(collection, config).predict()
    logger.debug("Predicted root structure: %s", structure.kind)
    return structure
