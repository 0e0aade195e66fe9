"""Discriminator detection for arrays of JSON objects.

An array whose elements fall into several object shapes may be a tagged
union. A field is a discriminator when it holds a scalar value in every
element and its values map one-to-one onto the element shapes, e.g.

    [{"type": "product", "sku": "A1"}, {"type": "category", "slug": "tools"}]

Candidate fields are tried in the key order of the first element; the first
one that qualifies wins.
"""

import json
import math
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from autodisco.common import get_node_hash
from autodisco.typenode import TypeNode


@dataclass
class DiscriminatorPartition:
    """The elements sharing one discriminator value."""
    value: str
    json_type: str = 'string'
    indices: List[int] = field(default_factory=list)
    shape_hashes: set = field(default_factory=set)


@dataclass
class DiscriminatorCandidate:
    """A field whose literal values partition the elements by shape."""
    field_name: str
    partitions: List[DiscriminatorPartition]

    @property
    def values(self) -> List[str]:
        return [partition.value for partition in self.partitions]


def literal_text(value: Any) -> Optional[str]:
    """Returns the literal text of a discriminator value, or None if the value cannot discriminate."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return value if value != '' else None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return json.dumps(value)
    return None


def literal_json_type(value: Any) -> str:
    """Returns the JSON kind of a discriminating scalar: 'string', 'number' or 'boolean'."""
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    return 'string'


def candidate_keys(values: List[Any]) -> List[str]:
    """
    Lists the keys that hold a discriminating scalar in every element.

    Args:
        values: The raw array elements

    Returns:
        Keys of the first element, in order, that qualify as candidates
    """
    if not values or not all(isinstance(v, dict) for v in values):
        return []
    return [key for key in values[0].keys()
            if all(key in v and literal_text(v[key]) is not None for v in values)]


def partition_by_key(values: List[Dict[str, Any]], key: str, nodes: List[TypeNode]) -> List[DiscriminatorPartition]:
    """Groups element indices by the literal text of `key`, in first-seen order."""
    partitions: 'OrderedDict[str, DiscriminatorPartition]' = OrderedDict()
    for index, (value, node) in enumerate(zip(values, nodes)):
        text = literal_text(value[key])
        partition = partitions.get(text)
        if partition is None:
            partition = DiscriminatorPartition(value=text, json_type=literal_json_type(value[key]))
            partitions[text] = partition
        partition.indices.append(index)
        partition.shape_hashes.add(get_node_hash(node).hash_value)
    return list(partitions.values())


def find_discriminator(values: List[Any], nodes: List[TypeNode], shape_count: int) -> Optional[DiscriminatorCandidate]:
    """
    Finds the first field whose values map one-to-one onto the element shapes.

    Args:
        values: The raw array elements
        nodes: The inferred type of each element, aligned with `values`
        shape_count: Number of structurally distinct element types

    Returns:
        The winning candidate, or None when no field qualifies
    """
    if shape_count < 2:
        return None
    for key in candidate_keys(values):
        partitions = partition_by_key(values, key, nodes)
        if len(partitions) != shape_count:
            continue
        if all(len(partition.shape_hashes) == 1 for partition in partitions):
            return DiscriminatorCandidate(field_name=key, partitions=partitions)
    return None
