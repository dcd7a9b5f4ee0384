from unittest import TestCase
import os

from openapi_refs import OpenApi
from openapi_refs.file import load_file
from openapi_refs.graph import to_graph

script_dir = os.path.dirname(os.path.realpath(__file__))


def _load(name: str) -> OpenApi:
    with open(os.path.join(script_dir, 'fixtures', name)) as f:
        return load_file(f)


class GraphTest(TestCase):

    def test_petstore(self):
        graph = to_graph(_load('petstore.yaml'))
        # 2 paths and 16 components
        self.assertEqual(len(graph.get_nodes()), 18)
        self.assertEqual(len(graph.get_edges()), 17)
        dot = graph.to_string()
        self.assertIn('schemas/PetAlias', dot)
        self.assertIn('/pets/{id}', dot)

    def test_dangling_target(self):
        graph = to_graph(_load('broken.yaml'))
        # 1 path, 2 schemas and the missing response
        self.assertEqual(len(graph.get_nodes()), 4)
        self.assertEqual(len(graph.get_edges()), 4)
        self.assertIn('red', graph.to_string())

    def test_empty(self):
        graph = to_graph(OpenApi())
        self.assertEqual(len(graph.get_nodes()), 0)
        self.assertEqual(len(graph.get_edges()), 0)
