# coding: utf-8
"""
Module to render discovered endpoint types as Markdown documentation.
"""

from typing import List

from autodisco.common import escape_surrogates, process_template
from autodisco.nodewriter import EmitterOptions, TYPESCRIPT, NodeWriter
from autodisco.typenode import ObjectNode, OptionalNode, TypeNode


def describe_fields(node: TypeNode) -> List[dict]:
    """
    Lists the top-level fields of an object type for the field table.

    :param node: The endpoint type.
    :return: One dict per field with name, type and required flag.
    """
    if not isinstance(node, ObjectNode):
        return []
    writer = NodeWriter(TYPESCRIPT, EmitterOptions(minify=True))
    fields = []
    for prop in node.properties:
        value = prop.value.inner if isinstance(prop.value, OptionalNode) else prop.value
        fields.append({
            'name': escape_surrogates(prop.key),
            'type': writer.write(value),
            'required': not isinstance(prop.value, OptionalNode),
        })
    return fields


def convert_endpoints_to_markdown(endpoints: list, title: str = 'API Documentation', indent: str = '  ') -> str:
    """
    Render endpoint types as a Markdown document.

    :param endpoints: Objects with method, path, type_name and node attributes.
    :param title: Document heading.
    :param indent: Indentation used in the TypeScript code blocks.
    :return: The Markdown text.
    """
    writer = NodeWriter(TYPESCRIPT, EmitterOptions(indent=indent))
    entries = []
    for endpoint in endpoints:
        entries.append({
            'method': endpoint.method.upper(),
            'path': escape_surrogates(endpoint.path),
            'type_name': endpoint.type_name,
            'declaration': writer.write(endpoint.node),
            'fields': describe_fields(endpoint.node),
        })
    return process_template('templates/api.md.jinja', title=title, endpoints=entries)
