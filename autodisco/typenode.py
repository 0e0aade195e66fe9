"""Structural type tree for inferred JSON shapes.

The tree is a closed set of node variants:
- scalars: NullNode, StringNode, NumberNode, BooleanNode, UnknownNode
- LiteralNode: a pinned scalar value (discriminator fields)
- OptionalNode: a property that may be absent
- ObjectNode: ordered properties with unique keys
- ArrayNode: a single element type
- UnionNode: tagged or untagged alternatives

All nodes are immutable. Every inference stage builds new trees.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Tuple, Union


class TypeNodeError(Exception):
    """
    Base class for errors raised while building or walking type trees.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
    """

    def __init__(self, message: str, context: Optional[str] = None) -> None:
        self.message = message
        self.context = context
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class InvalidArgumentError(TypeNodeError, ValueError):
    """Raised when an operation is called with arguments outside its precondition."""


class InternalInconsistencyError(TypeNodeError):
    """Raised when a walker meets a node outside the closed variant set."""


class TypeNode:
    """Base class of all type tree nodes."""
    kind: ClassVar[str] = ''


@dataclass(frozen=True)
class NullNode(TypeNode):
    kind: ClassVar[str] = 'null'


@dataclass(frozen=True)
class StringNode(TypeNode):
    kind: ClassVar[str] = 'string'


@dataclass(frozen=True)
class NumberNode(TypeNode):
    kind: ClassVar[str] = 'number'


@dataclass(frozen=True)
class BooleanNode(TypeNode):
    kind: ClassVar[str] = 'boolean'


@dataclass(frozen=True)
class UnknownNode(TypeNode):
    kind: ClassVar[str] = 'unknown'


@dataclass(frozen=True)
class LiteralNode(TypeNode):
    """A pinned scalar. `value` is the literal text; `json_type` is the JSON kind it was read from."""
    kind: ClassVar[str] = 'literal'
    value: str
    json_type: str = 'string'


@dataclass(frozen=True)
class OptionalNode(TypeNode):
    kind: ClassVar[str] = 'optional'
    inner: TypeNode

    def __post_init__(self):
        inner = self.inner
        while isinstance(inner, OptionalNode):
            inner = inner.inner
        object.__setattr__(self, 'inner', inner)


@dataclass(frozen=True)
class ObjectProperty:
    key: str
    value: TypeNode


@dataclass(frozen=True)
class ObjectNode(TypeNode):
    """An object shape. Properties keep first-seen order; lookups go through an index map."""
    kind: ClassVar[str] = 'object'
    properties: Tuple[ObjectProperty, ...] = ()
    _index: Dict[str, int] = field(default=None, init=False, repr=False, compare=False, hash=False)  # type: ignore

    def __post_init__(self):
        properties = tuple(self.properties)
        index: Dict[str, int] = {}
        for position, prop in enumerate(properties):
            if prop.key in index:
                raise InvalidArgumentError(f"Duplicate object key '{prop.key}'")
            index[prop.key] = position
        object.__setattr__(self, 'properties', properties)
        object.__setattr__(self, '_index', index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self.properties)

    def __iter__(self) -> Iterator[ObjectProperty]:
        return iter(self.properties)

    def keys(self) -> List[str]:
        return [prop.key for prop in self.properties]

    def get(self, key: str, default: Optional[TypeNode] = None) -> Optional[TypeNode]:
        position = self._index.get(key)
        if position is None:
            return default
        return self.properties[position].value

    def with_property(self, key: str, value: TypeNode) -> 'ObjectNode':
        """Returns a copy with `key` set to `value`. Existing keys keep their position."""
        position = self._index.get(key)
        properties = list(self.properties)
        if position is None:
            properties.append(ObjectProperty(key, value))
        else:
            properties[position] = ObjectProperty(key, value)
        return ObjectNode(tuple(properties))


@dataclass(frozen=True)
class ArrayNode(TypeNode):
    kind: ClassVar[str] = 'array'
    element: TypeNode


@dataclass(frozen=True)
class UnionNode(TypeNode):
    kind: ClassVar[str] = 'union'
    variants: Tuple[TypeNode, ...]
    discriminator: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'variants', tuple(self.variants))

    @property
    def is_tagged(self) -> bool:
        return self.discriminator is not None


NODE_TYPES = (NullNode, StringNode, NumberNode, BooleanNode, UnknownNode,
              LiteralNode, OptionalNode, ObjectNode, ArrayNode, UnionNode)


def object_node(properties: Union[Dict[str, TypeNode], Iterable[Tuple[str, TypeNode]]]) -> ObjectNode:
    """Builds an ObjectNode from a dict or from (key, value) pairs, keeping order."""
    items = properties.items() if isinstance(properties, dict) else properties
    return ObjectNode(tuple(ObjectProperty(key, value) for key, value in items))


def make_optional(node: TypeNode) -> OptionalNode:
    """Wraps a node in OptionalNode unless it already is one."""
    if isinstance(node, OptionalNode):
        return node
    return OptionalNode(node)


def unwrap_optional(node: TypeNode) -> TypeNode:
    if isinstance(node, OptionalNode):
        return node.inner
    return node


def check_node(node: Any, context: Optional[str] = None) -> TypeNode:
    """Returns the node unchanged, or raises if it is not one of the known variants."""
    if not isinstance(node, NODE_TYPES):
        raise InternalInconsistencyError(
            f"Unexpected type node {type(node).__name__}", context)
    return node
