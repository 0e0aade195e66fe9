"""Tests for the type tree data model."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from autodisco.typenode import (
    ArrayNode,
    InternalInconsistencyError,
    InvalidArgumentError,
    LiteralNode,
    NumberNode,
    ObjectNode,
    ObjectProperty,
    OptionalNode,
    StringNode,
    UnionNode,
    check_node,
    make_optional,
    object_node,
    unwrap_optional,
)


class TestTypeNodes(unittest.TestCase):
    """Test cases for node construction and invariants."""

    def test_scalar_equality(self):
        """Scalar nodes without payload compare equal."""
        self.assertEqual(StringNode(), StringNode())
        self.assertNotEqual(StringNode(), NumberNode())
        self.assertEqual(LiteralNode('a'), LiteralNode('a'))
        self.assertNotEqual(LiteralNode('a'), LiteralNode('b'))
        self.assertNotEqual(LiteralNode('1'), LiteralNode('1', 'number'))
        self.assertEqual(LiteralNode('a').json_type, 'string')

    def test_optional_is_flattened(self):
        """Optional never wraps another Optional."""
        node = OptionalNode(OptionalNode(OptionalNode(StringNode())))
        self.assertEqual(node.inner, StringNode())
        self.assertEqual(node, OptionalNode(StringNode()))

    def test_make_optional_and_unwrap(self):
        optional = make_optional(NumberNode())
        self.assertIs(make_optional(optional), optional)
        self.assertEqual(unwrap_optional(optional), NumberNode())
        self.assertEqual(unwrap_optional(NumberNode()), NumberNode())

    def test_object_preserves_order_and_lookup(self):
        """Objects keep insertion order and support key lookup."""
        node = object_node([('b', StringNode()), ('a', NumberNode())])
        self.assertEqual(node.keys(), ['b', 'a'])
        self.assertIn('a', node)
        self.assertNotIn('c', node)
        self.assertEqual(node.get('a'), NumberNode())
        self.assertIsNone(node.get('c'))
        self.assertEqual(len(node), 2)

    def test_object_rejects_duplicate_keys(self):
        with self.assertRaises(InvalidArgumentError):
            ObjectNode((ObjectProperty('a', StringNode()), ObjectProperty('a', NumberNode())))

    def test_with_property_keeps_position(self):
        """Replacing a property keeps its position and leaves the original untouched."""
        node = object_node({'type': StringNode(), 'id': NumberNode()})
        pinned = node.with_property('type', LiteralNode('product'))
        self.assertEqual(pinned.keys(), ['type', 'id'])
        self.assertEqual(pinned.get('type'), LiteralNode('product'))
        self.assertEqual(node.get('type'), StringNode())
        extended = node.with_property('name', StringNode())
        self.assertEqual(extended.keys(), ['type', 'id', 'name'])

    def test_nodes_are_immutable_and_hashable(self):
        node = ArrayNode(object_node({'a': StringNode()}))
        with self.assertRaises(Exception):
            node.element = StringNode()  # type: ignore[misc]
        self.assertEqual(len({node, ArrayNode(object_node({'a': StringNode()}))}), 1)

    def test_union_tagging(self):
        untagged = UnionNode([StringNode(), NumberNode()])
        self.assertFalse(untagged.is_tagged)
        self.assertIsInstance(untagged.variants, tuple)
        tagged = UnionNode((object_node({'type': LiteralNode('a')}),), discriminator='type')
        self.assertTrue(tagged.is_tagged)

    def test_check_node_rejects_foreign_values(self):
        self.assertEqual(check_node(StringNode()), StringNode())
        with self.assertRaises(InternalInconsistencyError):
            check_node({'type': 'string'})


if __name__ == '__main__':
    unittest.main()
