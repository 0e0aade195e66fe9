"""Structural type inference for JSON values.

This module provides the inference pipeline used by:
- jsontotypes: Infer types from JSON sample files
- discover: Infer types for every endpoint of a probe-results document

The pipeline is:
1. infer: one JSON value -> one type tree
2. unify_array: the element types of one array -> one element type,
   possibly a tagged union
3. merge: several object trees for the same endpoint -> one object tree
   with per-field optionality
"""

import logging
import math
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from autodisco.choice_inference import find_discriminator
from autodisco.common import get_node_hash, unique_nodes
from autodisco.typenode import (
    ArrayNode,
    BooleanNode,
    InvalidArgumentError,
    LiteralNode,
    NullNode,
    NumberNode,
    ObjectNode,
    ObjectProperty,
    OptionalNode,
    StringNode,
    TypeNode,
    UnionNode,
    UnknownNode,
    unwrap_optional,
)

logger = logging.getLogger(__name__)


class TypeInferrer:
    """Infers type trees from JSON values and reconciles divergent shapes."""

    def infer(self, value: Any) -> TypeNode:
        """Maps a JSON value to a type tree.

        Args:
            value: A decoded JSON value

        Returns:
            The inferred type tree. Values that are not JSON data become UnknownNode.
        """
        if value is None:
            return NullNode()
        if isinstance(value, list):
            if len(value) == 0:
                return ArrayNode(UnknownNode())
            if len(value) == 1:
                return ArrayNode(self.infer(value[0]))
            return ArrayNode(self.unify_array(value))
        if isinstance(value, dict):
            return ObjectNode(tuple(ObjectProperty(key, self.infer(item)) for key, item in value.items()))
        if isinstance(value, str):
            return StringNode()
        if isinstance(value, bool):
            return BooleanNode()
        if isinstance(value, (int, float)):
            if isinstance(value, float) and not math.isfinite(value):
                return UnknownNode()
            return NumberNode()
        return UnknownNode()

    def unify_array(self, values: List[Any], nodes: Optional[List[TypeNode]] = None) -> TypeNode:
        """Collapses the elements of one array into a single element type.

        Identical element shapes collapse to one type. Distinct shapes become
        a tagged union when a discriminator field exists, a merged object when
        all shapes are objects, and an untagged union otherwise.

        Args:
            values: The raw array elements
            nodes: The inferred element types, aligned with `values`. Inferred when omitted.

        Returns:
            The element type
        """
        if nodes is None:
            nodes = [self.infer(value) for value in values]
        if not nodes:
            return UnknownNode()
        shapes = unique_nodes(nodes)
        if len(shapes) == 1:
            return shapes[0]

        candidate = find_discriminator(values, nodes, len(shapes))
        if candidate is not None:
            logger.debug("Discriminator '%s' detected with values %s", candidate.field_name, candidate.values)
            variants: List[TypeNode] = []
            for partition in candidate.partitions:
                merged = self.merge([nodes[index] for index in partition.indices])
                variants.append(merged.with_property(candidate.field_name, LiteralNode(partition.value, partition.json_type)))
            return UnionNode(tuple(variants), discriminator=candidate.field_name)

        if all(isinstance(shape, ObjectNode) for shape in shapes):
            logger.debug("Folding %d object shapes into one record", len(shapes))
            return self.merge(shapes)
        return UnionNode(tuple(shapes))

    def merge(self, nodes: List[ObjectNode]) -> ObjectNode:
        """Merges object trees by combining their properties.

        Properties present in every input are required; the others become
        optional. Values observed for the same key are reconciled with
        `merge_types`.

        Args:
            nodes: The object trees to merge, at least one

        Returns:
            The merged object tree
        """
        if not nodes:
            raise InvalidArgumentError("At least one object node is required to merge")
        for node in nodes:
            if not isinstance(node, ObjectNode):
                raise InvalidArgumentError(f"Cannot merge {type(node).__name__} as an object", 'merge')

        contributors: 'OrderedDict[str, List[TypeNode]]' = OrderedDict()
        counts: Dict[str, int] = {}
        optional_keys = set()
        for node in nodes:
            for prop in node.properties:
                contributors.setdefault(prop.key, []).append(unwrap_optional(prop.value))
                counts[prop.key] = counts.get(prop.key, 0) + 1
                if isinstance(prop.value, OptionalNode):
                    optional_keys.add(prop.key)

        properties: List[ObjectProperty] = []
        for key, values in contributors.items():
            merged = self.merge_types(values)
            if counts[key] < len(nodes) or key in optional_keys:
                merged = OptionalNode(merged)
            properties.append(ObjectProperty(key, merged))
        return ObjectNode(tuple(properties))

    def merge_types(self, nodes: List[TypeNode]) -> TypeNode:
        """Reconciles several observed types for the same position into one.

        Args:
            nodes: The observed types, at least one

        Returns:
            A merged object, the single distinct type, an array of the merged
            element types, or an untagged union of the distinct types
        """
        if not nodes:
            raise InvalidArgumentError("At least one type node is required to merge")
        if all(isinstance(node, ObjectNode) for node in nodes):
            return self.merge(nodes)  # type: ignore[arg-type]
        distinct = unique_nodes(nodes)
        if len(distinct) == 1:
            return distinct[0]
        if all(isinstance(node, ArrayNode) for node in distinct):
            elements = [node.element for node in distinct]  # type: ignore[attr-defined]
            known = [element for element in elements if not isinstance(element, UnknownNode)]
            return ArrayNode(self.merge_types(known or elements))
        return self._untagged_union(distinct)

    def _untagged_union(self, nodes: List[TypeNode]) -> TypeNode:
        """Builds an untagged union, flattening nested untagged unions."""
        variants: List[TypeNode] = []
        for node in nodes:
            if isinstance(node, UnionNode) and not node.is_tagged:
                variants.extend(node.variants)
            else:
                variants.append(node)
        variants = unique_nodes(variants)
        if len(variants) == 1:
            return variants[0]
        return UnionNode(tuple(variants))

    def infer_from_samples(self, samples: List[Any]) -> TypeNode:
        """Infers one type tree from several samples of the same response.

        Args:
            samples: Decoded JSON values observed for one endpoint

        Returns:
            The reconciled type tree
        """
        if not samples:
            raise InvalidArgumentError("At least one sample is required")
        trees = [self.infer(sample) for sample in samples]
        logger.debug("Reconciling %d samples (%d distinct shapes)",
                     len(trees), len({get_node_hash(tree).hash_value for tree in trees}))
        return self.merge_types(trees)


def infer_type(value: Any) -> TypeNode:
    """Infers the type tree of a single JSON value."""
    return TypeInferrer().infer(value)


def unify_array(values: List[Any], nodes: Optional[List[TypeNode]] = None) -> TypeNode:
    """Collapses array elements into one element type."""
    return TypeInferrer().unify_array(values, nodes)


def merge_schemas(nodes: List[ObjectNode]) -> ObjectNode:
    """Merges object trees for the same endpoint into one."""
    return TypeInferrer().merge(nodes)


def merge_types(nodes: List[TypeNode]) -> TypeNode:
    """Reconciles arbitrary type trees observed for the same position."""
    return TypeInferrer().merge_types(nodes)


def infer_from_samples(samples: List[Any]) -> TypeNode:
    """Infers one type tree from several samples of the same response."""
    return TypeInferrer().infer_from_samples(samples)
