"""Converts type trees to JSON Schema (draft 2020-12)."""

import json
from typing import Any, Dict, List, Optional

from autodisco.common import escape_surrogates
from autodisco.nodewriter import EmitterOptions
from autodisco.typenode import (
    ArrayNode,
    BooleanNode,
    InternalInconsistencyError,
    LiteralNode,
    NullNode,
    NumberNode,
    ObjectNode,
    OptionalNode,
    StringNode,
    TypeNode,
    UnionNode,
    UnknownNode,
    check_node,
)

SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"

JsonSchema = Dict[str, Any]


class NodeToJsonSchema:
    """Converts a type tree to a JSON Schema document."""

    def convert_node(self, node: TypeNode) -> JsonSchema:
        """Converts one node to its JSON Schema fragment."""
        check_node(node, 'json schema')
        if isinstance(node, NullNode):
            return {"type": "null"}
        if isinstance(node, StringNode):
            return {"type": "string"}
        if isinstance(node, NumberNode):
            return {"type": "number"}
        if isinstance(node, BooleanNode):
            return {"type": "boolean"}
        if isinstance(node, UnknownNode):
            return {}
        if isinstance(node, LiteralNode):
            if node.json_type == 'string':
                return {"type": "string", "const": node.value}
            return {"type": node.json_type, "const": json.loads(node.value)}
        if isinstance(node, OptionalNode):
            # absence is expressed by the parent's "required" list
            return self.convert_node(node.inner)
        if isinstance(node, ObjectNode):
            return self.convert_object(node)
        if isinstance(node, ArrayNode):
            return {"type": "array", "items": self.convert_node(node.element)}
        if isinstance(node, UnionNode):
            variants = [self.convert_node(variant) for variant in node.variants]
            if node.is_tagged:
                return {"oneOf": variants, "discriminator": {"propertyName": node.discriminator}}
            return {"anyOf": variants}
        raise InternalInconsistencyError(f"No JSON Schema rendering for {type(node).__name__}")

    def convert_object(self, node: ObjectNode) -> JsonSchema:
        properties: Dict[str, JsonSchema] = {}
        required: List[str] = []
        for prop in node.properties:
            properties[prop.key] = self.convert_node(prop.value)
            if not isinstance(prop.value, OptionalNode):
                required.append(prop.key)
        schema: JsonSchema = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    def convert(self, node: TypeNode, title: Optional[str] = None) -> JsonSchema:
        """
        Converts a type tree to a standalone JSON Schema document.

        Args:
            node: The type tree
            title: Optional document title, usually the type name

        Returns:
            The JSON Schema document
        """
        schema: JsonSchema = {"$schema": SCHEMA_DRAFT}
        if title:
            schema["title"] = title
        schema.update(self.convert_node(node))
        return schema


def convert_node_to_json_schema(node: TypeNode, title: Optional[str] = None) -> JsonSchema:
    """Converts a type tree to a JSON Schema document."""
    return NodeToJsonSchema().convert(node, title)


def dump_json_schema(schema: JsonSchema, options: Optional[EmitterOptions] = None) -> str:
    """Serializes a JSON Schema document with the given indentation, or compactly when minified."""
    options = options or EmitterOptions()
    if options.minify:
        return escape_surrogates(json.dumps(schema, separators=(',', ':'), ensure_ascii=False))
    return escape_surrogates(json.dumps(schema, indent=options.indent, ensure_ascii=False))
