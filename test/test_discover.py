"""Tests for discovery runs over probe-results documents."""

import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.insert(0, project_root)

from autodisco.discover import discover, discover_file, infer_endpoints
from autodisco.typenode import ArrayNode, NumberNode, ObjectNode, OptionalNode, StringNode, UnionNode


def get_probe_results():
    """Provides the probe-results sample path."""
    return os.path.join(os.path.dirname(__file__), 'samples', 'probe_results.json')


class TestInferEndpoints(unittest.TestCase):

    def test_names_are_unique_per_method(self):
        endpoints = infer_endpoints({
            "get": {"/users": [{"id": 1}], "/users/{id}": [{"id": 1}], "/users2": [{"id": 1}], "/": [{"ok": True}]},
            "post": {"/users": [{"id": 1}]},
        })
        self.assertEqual([(e.method, e.type_name) for e in endpoints],
                         [('get', 'Users'), ('get', 'Users2'), ('get', 'Users22'), ('get', 'Root'),
                          ('post', 'Users')])
        get_names = [e.type_name for e in endpoints if e.method == 'get']
        self.assertEqual(len(get_names), len(set(get_names)))

    def test_empty_endpoint_is_skipped(self):
        with self.assertLogs('autodisco.discover', level='WARNING'):
            endpoints = infer_endpoints({"get": {"/health": [], "/status": [{"up": True}]}})
        self.assertEqual([e.path for e in endpoints], ['/status'])

    def test_samples_are_reconciled(self):
        endpoints = infer_endpoints({"GET": {"/users/{id}": [{"id": 1, "name": "a"}, {"id": 2}]}})
        self.assertEqual(endpoints[0].method, 'get')
        self.assertEqual(endpoints[0].node.get('name'), OptionalNode(StringNode()))

    def test_invalid_documents(self):
        with self.assertRaises(ValueError):
            infer_endpoints([])
        with self.assertRaises(ValueError):
            infer_endpoints({"head": {"/x": [{}]}})
        with self.assertRaises(ValueError):
            infer_endpoints({"get": ["/x"]})
        with self.assertRaises(ValueError):
            infer_endpoints({"get": {"/x": {"a": 1}}})


class TestDiscover(unittest.TestCase):

    def setUp(self):
        self.output_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.output_dir, ignore_errors=True)

    def read(self, *parts):
        with open(os.path.join(self.output_dir, *parts), 'r', encoding='utf-8') as f:
            return f.read()

    def test_default_generates_zod(self):
        endpoints = discover_file(get_probe_results(), self.output_dir)
        self.assertEqual([e.type_name for e in endpoints], ['Posts', 'Users', 'Search', 'Users'])
        for method, name in [('get', 'Posts'), ('get', 'Users'), ('get', 'Search'), ('post', 'Users')]:
            self.assertTrue(os.path.exists(os.path.join(self.output_dir, 'zod', method, f'{name}.ts')))
        self.assertFalse(os.path.exists(os.path.join(self.output_dir, 'zod', 'get', 'Health.ts')))
        self.assertFalse(os.path.exists(os.path.join(self.output_dir, 'typescript')))
        self.assertFalse(os.path.exists(os.path.join(self.output_dir, 'API.md')))

    def test_inferred_endpoint_types(self):
        endpoints = discover_file(get_probe_results(), self.output_dir)
        posts = endpoints[0].node
        self.assertIsInstance(posts, ArrayNode)
        self.assertEqual(posts.element.keys(), ['userId', 'id', 'title', 'body'])
        results = endpoints[2].node.get('results')
        self.assertIsInstance(results.element, UnionNode)
        self.assertEqual(results.element.discriminator, 'type')
        users = endpoints[1].node
        self.assertIsInstance(users, ObjectNode)
        self.assertEqual(users.get('id'), NumberNode())

    def test_all_generators(self):
        discover_file(get_probe_results(), self.output_dir, generate=['zod', 'typescript', 'json', 'markdown'])
        search = self.read('zod', 'get', 'Search.ts')
        self.assertTrue(search.startswith("import { z } from 'zod';\n\nexport const Search = z.object({"))
        self.assertIn('z.discriminatedUnion("type", [', search)
        self.assertIn('"type": z.literal("searchTerm")', search)
        users = self.read('typescript', 'get', 'Users.ts')
        self.assertIn('"phone": string | undefined', users)
        self.assertIn('"$schema"', self.read('json', 'post', 'Users.json'))
        markdown = self.read('API.md')
        self.assertIn('## GET `/search`', markdown)
        self.assertIn('## POST `/users`', markdown)
        self.assertNotIn('/health', markdown)

    def test_minified_output(self):
        discover({"get": {"/todos": [[{"id": 1, "done": False}]]}}, self.output_dir, generate=['zod'], minify=True)
        self.assertEqual(self.read('zod', 'get', 'Todos.ts'),
                         "import { z } from 'zod';export const Todos = z.array(z.object({\"id\":z.number(),\"done\":z.boolean()}));")

    def test_colliding_names_write_separate_files(self):
        discover({"get": {
            "/users": [{"id": 1}],
            "/users/{id}": [{"name": "a"}],
            "/users2": [{"ok": True}],
        }}, self.output_dir, generate=['zod'])
        self.assertEqual(sorted(os.listdir(os.path.join(self.output_dir, 'zod', 'get'))),
                         ['Users.ts', 'Users2.ts', 'Users22.ts'])
        self.assertIn('"id": z.number()', self.read('zod', 'get', 'Users.ts'))
        self.assertIn('"name": z.string()', self.read('zod', 'get', 'Users2.ts'))
        self.assertIn('"ok": z.boolean()', self.read('zod', 'get', 'Users22.ts'))

    def test_unknown_generator(self):
        with self.assertRaises(ValueError):
            discover({"get": {"/x": [{}]}}, self.output_dir, generate=['python'])


if __name__ == '__main__':
    unittest.main()
