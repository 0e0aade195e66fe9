""" Renders type trees as TypeScript type expressions or Zod schema expressions """

# pylint: disable=line-too-long

import json
from dataclasses import dataclass
from typing import Dict, Optional, Union

from autodisco.common import escape_surrogates, process_template, safe_identifier
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

INDENT = '  '


@dataclass(frozen=True)
class TargetGrammar:
    """Token table for one output language. Format fields use str.format placeholders."""
    name: str
    scalars: Dict[str, str]
    literal: str
    optional: str
    object_open: str
    object_close: str
    empty_object: str
    member_separator: str
    array: str
    union_open: str
    union_close: str
    tagged_union_open: str
    alternative_separator: str
    union_block: bool
    module_template: str
    file_extension: str = '.ts'


@dataclass(frozen=True)
class EmitterOptions:
    """Formatting options shared by all targets."""
    indent: str = INDENT
    minify: bool = False


TYPESCRIPT = TargetGrammar(
    name='typescript',
    scalars={
        'null': 'null',
        'string': 'string',
        'number': 'number',
        'boolean': 'boolean',
        'unknown': 'unknown',
    },
    literal='{value}',
    optional='{inner} | undefined',
    object_open='{{',
    object_close='}}',
    empty_object='{{}}',
    member_separator=';',
    array='{element}[]',
    union_open='(',
    union_close=')',
    tagged_union_open='(',
    alternative_separator=' | ',
    union_block=False,
    module_template='templates/typescript.ts.jinja',
)

ZOD = TargetGrammar(
    name='zod',
    scalars={
        'null': 'z.null()',
        'string': 'z.string()',
        'number': 'z.number()',
        'boolean': 'z.boolean()',
        'unknown': 'z.unknown()',
    },
    literal='z.literal({value})',
    optional='{inner}.optional()',
    object_open='z.object({{',
    object_close='}})',
    empty_object='z.object({{}})',
    member_separator=',',
    array='z.array({element})',
    union_open='z.union([',
    union_close='])',
    tagged_union_open='z.discriminatedUnion({discriminator}, [',
    alternative_separator=',',
    union_block=True,
    module_template='templates/zod.ts.jinja',
)

TARGETS: Dict[str, TargetGrammar] = {
    'typescript': TYPESCRIPT,
    'type-expression': TYPESCRIPT,
    'zod': ZOD,
    'schema-builder': ZOD,
}


def get_target(target: Union[str, TargetGrammar]) -> TargetGrammar:
    """Resolves a target name to its grammar."""
    if isinstance(target, TargetGrammar):
        return target
    if target not in TARGETS:
        raise ValueError(f"Unknown target '{target}', expected one of {', '.join(sorted(TARGETS))}")
    return TARGETS[target]


def quote(value: str) -> str:
    """Quotes a string with JSON escaping, which is a valid JavaScript string literal."""
    return escape_surrogates(json.dumps(value, ensure_ascii=False))


class NodeWriter:
    """ Writes a type tree in the syntax of one target grammar """

    def __init__(self, grammar: TargetGrammar, options: Optional[EmitterOptions] = None) -> None:
        self.grammar = grammar
        self.options = options or EmitterOptions()

    @property
    def newline(self) -> str:
        return '' if self.options.minify else '\n'

    def pad(self, depth: int) -> str:
        if self.options.minify:
            return ''
        return self.options.indent * depth

    def write(self, node: TypeNode) -> str:
        """ Renders the tree rooted at node """
        return self.write_node(node, 0)

    def write_node(self, node: TypeNode, depth: int) -> str:
        check_node(node, self.grammar.name)
        if isinstance(node, (NullNode, StringNode, NumberNode, BooleanNode, UnknownNode)):
            return self.grammar.scalars[node.kind]
        if isinstance(node, LiteralNode):
            return self.grammar.literal.format(value=quote(node.value))
        if isinstance(node, OptionalNode):
            return self.grammar.optional.format(inner=self.write_node(node.inner, depth))
        if isinstance(node, ObjectNode):
            return self.write_object(node, depth)
        if isinstance(node, ArrayNode):
            return self.grammar.array.format(element=self.write_node(node.element, depth))
        if isinstance(node, UnionNode):
            return self.write_union(node, depth)
        raise InternalInconsistencyError(f"No {self.grammar.name} rendering for {type(node).__name__}")

    def write_object(self, node: ObjectNode, depth: int) -> str:
        if not node.properties:
            return self.grammar.empty_object.format()
        inner = depth + 1
        key_separator = ':' if self.options.minify else ': '
        members = [f"{self.pad(inner)}{quote(prop.key)}{key_separator}{self.write_node(prop.value, inner)}"
                   for prop in node.properties]
        body = (self.grammar.member_separator + self.newline).join(members)
        return (self.grammar.object_open.format() + self.newline + body + self.newline +
                self.pad(depth) + self.grammar.object_close.format())

    def write_union(self, node: UnionNode, depth: int) -> str:
        if node.is_tagged:
            opening = self.grammar.tagged_union_open.format(discriminator=quote(node.discriminator))
        else:
            opening = self.grammar.union_open
        if not self.grammar.union_block:
            separator = self.grammar.alternative_separator
            if self.options.minify:
                separator = separator.strip()
            options = separator.join(self.write_node(variant, depth) for variant in node.variants)
            return opening + options + self.grammar.union_close
        inner = depth + 1
        options = (self.grammar.alternative_separator + self.newline).join(
            self.pad(inner) + self.write_node(variant, inner) for variant in node.variants)
        return opening + self.newline + options + self.newline + self.pad(depth) + self.grammar.union_close


def emit(node: TypeNode, target: Union[str, TargetGrammar] = 'zod', options: Optional[EmitterOptions] = None) -> str:
    """
    Renders a type tree as source text.

    Args:
        node: The type tree
        target: 'typescript' (type expression) or 'zod' (schema builder), or a TargetGrammar
        options: Indentation and minification

    Returns:
        The rendered expression
    """
    return NodeWriter(get_target(target), options).write(node)


def emit_module(node: TypeNode, type_name: str, target: Union[str, TargetGrammar] = 'zod',
                options: Optional[EmitterOptions] = None) -> str:
    """
    Renders a type tree as a module exporting it under type_name.

    Args:
        node: The type tree
        type_name: Name of the exported type or schema constant
        target: 'typescript' or 'zod', or a TargetGrammar
        options: Indentation and minification

    Returns:
        The module source
    """
    grammar = get_target(target)
    options = options or EmitterOptions()
    expression = NodeWriter(grammar, options).write(node)
    return process_template(grammar.module_template,
                            type_name=safe_identifier(type_name),
                            expression=expression,
                            minify=options.minify)
