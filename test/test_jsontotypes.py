"""Tests for inferring types from JSON sample files."""

import json
import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.insert(0, project_root)

from autodisco.jsontotypes import (
    convert_json_to_json_schema,
    convert_json_to_typescript,
    convert_json_to_zod,
    infer_type_from_files,
)
from autodisco.typenode import ArrayNode, NumberNode, OptionalNode, StringNode, object_node


def get_sample(name):
    """Provides the path of a sample file."""
    return os.path.join(os.path.dirname(__file__), 'samples', name)


POST_ZOD = """import { z } from 'zod';

export const Post = z.object({
  "id": z.number(),
  "title": z.string(),
  "body": z.string().optional(),
  "published": z.boolean(),
  "tags": z.array(z.string()),
  "author": z.object({
    "id": z.number(),
    "name": z.string(),
    "email": z.string().optional()
  })
});
"""


class TestJsonToTypes(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write_input(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_zod_from_several_files(self):
        zod_file = os.path.join(self.temp_dir, 'out', 'post.ts')
        convert_json_to_zod([get_sample('post_1.json'), get_sample('post_2.json')], zod_file, type_name='Post')
        with open(zod_file, 'r', encoding='utf-8') as f:
            self.assertEqual(f.read(), POST_ZOD)

    def test_typescript_minified(self):
        ts_file = os.path.join(self.temp_dir, 'post.ts')
        convert_json_to_typescript([get_sample('post_2.json')], ts_file, type_name='Post', minify=True)
        with open(ts_file, 'r', encoding='utf-8') as f:
            content = f.read()
        self.assertTrue(content.startswith('export type Post = {"id":number;"title":string;'))
        self.assertIn('"tags":unknown[]', content)
        self.assertNotIn('\n', content)

    def test_json_schema(self):
        schema_file = os.path.join(self.temp_dir, 'post.json')
        convert_json_to_json_schema([get_sample('post_1.json'), get_sample('post_2.json')], schema_file, type_name='Post')
        with open(schema_file, 'r', encoding='utf-8') as f:
            schema = json.load(f)
        self.assertEqual(schema['title'], 'Post')
        self.assertEqual(schema['required'], ['id', 'title', 'published', 'tags', 'author'])
        self.assertEqual(schema['properties']['author']['required'], ['id', 'name'])

    def test_json_lines_with_malformed_line(self):
        with self.assertLogs('autodisco.jsontotypes', level='WARNING') as logs:
            node = infer_type_from_files([get_sample('events.jsonl')])
        self.assertEqual(len(logs.output), 1)
        self.assertEqual(node, object_node({
            'event': StringNode(),
            'x': NumberNode(),
            'y': NumberNode(),
            'target': OptionalNode(StringNode()),
        }))

    def test_sample_size(self):
        node = infer_type_from_files([get_sample('events.jsonl')], sample_size=2)
        self.assertNotIn('target', node)

    def test_root_array_is_one_sample(self):
        path = self.write_input('list.json', '[{"a": "x"}, {"a": "x", "b": 1}]')
        node = infer_type_from_files([path])
        self.assertEqual(node, ArrayNode(object_node({'a': StringNode(), 'b': OptionalNode(NumberNode())})))

    def test_lone_surrogate_key_is_written_escaped(self):
        path = self.write_input('odd.json', '{"\\ud800": "x"}')
        zod_file = os.path.join(self.temp_dir, 'odd.ts')
        convert_json_to_zod([path], zod_file, type_name='Odd')
        with open(zod_file, 'r', encoding='utf-8') as f:
            self.assertIn('"\\ud800": z.string()', f.read())
        schema_file = os.path.join(self.temp_dir, 'odd.json')
        convert_json_to_json_schema([path], schema_file, type_name='Odd')
        with open(schema_file, 'r', encoding='utf-8') as f:
            schema = json.load(f)
        self.assertIn('\ud800', schema['properties'])

    def test_no_input(self):
        with self.assertRaises(ValueError):
            infer_type_from_files([])
        empty = self.write_input('empty.json', '  \n')
        with self.assertRaises(ValueError):
            infer_type_from_files([empty])


if __name__ == '__main__':
    unittest.main()
