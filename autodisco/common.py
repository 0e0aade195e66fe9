"""
Common utility functions for autodisco.
"""

# pylint: disable=line-too-long

import hashlib
import json
import os
import re
from typing import Any, Dict, List

import jinja2

from autodisco.typenode import (
    ArrayNode,
    BooleanNode,
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


def safe_identifier(name):
    """Convert a name into a valid TypeScript/JavaScript identifier."""
    if isinstance(name, int):
        name = '_' + str(name)
    val = re.sub(r'[^a-zA-Z0-9_$]', '_', name)
    if not val or re.match(r'^[0-9]', val):
        val = '_' + val
    return val


def escape_surrogates(text: str) -> str:
    """Replace lone UTF-16 surrogates, which json.loads accepts but UTF-8 cannot encode, with \\uXXXX escapes."""
    return re.sub(r'[\ud800-\udfff]', lambda m: f"\\u{ord(m.group()):04x}", text)


def pascal(string):
    """
    Convert a string to PascalCase from snake_case, camelCase, or PascalCase.
    The string can contain dots or double colons, which are preserved in the output.
    Underscores at the beginning of the string are preserved in the output, but
    underscores in the middle of the string are removed.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in PascalCase.
    """
    if '::' in string:
        strings = string.split('::')
        return strings[0] + '::' + '::'.join(pascal(s) for s in strings[1:])
    if '.' in string:
        strings = string.split('.')
        return '.'.join(pascal(s) for s in strings)
    if not string or len(string) == 0:
        return string
    words = []
    startswith_under = string[0] == '_'
    if '_' in string:
        # snake_case
        words = re.split(r'_', string)
    elif string[0].isupper():
        # PascalCase
        words = re.findall(r'[A-Z][a-z0-9_]*\.?', string)
    else:
        # camelCase
        words = re.findall(r'[a-z0-9]+\.?|[A-Z][a-z0-9_]*\.?', string)
    result = ''.join(word.capitalize() for word in words)
    if startswith_under:
        result = '_' + result
    return result


def resolve_type_name(path: str) -> str:
    """
    Derive a type name from an endpoint path or URL.

    The scheme and host, path parameters (``{id}``) and the query string are
    removed; the remaining segments are joined in PascalCase, e.g.
    ``https://api.example.com/auth/users/{id}?active=true`` becomes ``AuthUsers``.

    Args:
        path (str): The endpoint path or URL.

    Returns:
        str: The type name, or an empty string for the root path.
    """
    resolved = re.sub(r'^(?:https?://)[^/]+', '', path)
    resolved = re.sub(r'\{[^}]+\}', '', resolved)
    resolved = resolved.split('?')[0]
    segments = [segment for segment in resolved.split('/') if segment]
    name = ''.join(pascal(re.sub(r'[^a-zA-Z0-9_]', '_', segment)) for segment in segments)
    return name.replace('_', '')


class NodeHash:
    """ A hash value and byte count for a type node. """
    def __init__(self: 'NodeHash', hash_value: bytes, count: int):
        self.hash_value: bytes = hash_value
        self.count: int = count

    def hexdigest(self) -> str:
        return self.hash_value.hex()


def canonical_form(node: TypeNode) -> Any:
    """
    Build the canonical, JSON-serializable form of a type node.

    Object properties are sorted by key and union variants are sorted by
    their own canonical text, so two trees that only differ in encounter
    order share one canonical form.

    Args:
        node (TypeNode): The node to canonicalize.

    Returns:
        Any: Nested dicts and lists describing the node.
    """
    check_node(node, 'canonical_form')
    if isinstance(node, (NullNode, StringNode, NumberNode, BooleanNode, UnknownNode)):
        return {'kind': node.kind}
    if isinstance(node, LiteralNode):
        return {'kind': node.kind, 'value': node.value, 'json_type': node.json_type}
    if isinstance(node, OptionalNode):
        return {'kind': node.kind, 'inner': canonical_form(node.inner)}
    if isinstance(node, ObjectNode):
        properties = sorted(([prop.key, canonical_form(prop.value)] for prop in node.properties),
                            key=lambda pair: pair[0])
        return {'kind': node.kind, 'properties': properties}
    if isinstance(node, ArrayNode):
        return {'kind': node.kind, 'element': canonical_form(node.element)}
    variants = [canonical_form(variant) for variant in node.variants]
    variants.sort(key=lambda v: json.dumps(v, sort_keys=True))
    return {'kind': node.kind, 'discriminator': node.discriminator, 'variants': variants}


def get_node_hash(node: TypeNode) -> NodeHash:
    """
    Generate a structural hash from a type node.

    Args:
        node (TypeNode): The node to hash.

    Returns:
        NodeHash: The hash value and count.
    """
    s = json.dumps(canonical_form(node), sort_keys=True).encode('ascii')
    return NodeHash(hashlib.sha256(s).digest(), len(s))


def fingerprint(node: TypeNode) -> str:
    """Return the structural fingerprint of a type node as a hex string."""
    return get_node_hash(node).hexdigest()


def unique_nodes(nodes: List[TypeNode]) -> List[TypeNode]:
    """
    Eliminate structurally duplicate nodes, keeping the first occurrence.

    Args:
        nodes (List[TypeNode]): The nodes to deduplicate.

    Returns:
        List[TypeNode]: The unique nodes in first-seen order.
    """
    tree_hashes: Dict[bytes, TypeNode] = {}
    for node in nodes:
        tree_hash = get_node_hash(node)
        if tree_hash.hash_value not in tree_hashes:
            tree_hashes[tree_hash.hash_value] = node
    return list(tree_hashes.values())


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the file, relative to the package directory.
        kvargs: The values to use as input for the template.

    Returns:
        str: The processed template as a string.
    """
    # Load the template environment
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader)
    template_env.filters['pascal'] = pascal

    # Load the template from the file
    template = template_env.get_template(file_path)

    # Render the template with the object as input
    output = template.render(**kvargs)

    return output

