from typing import Dict
import pydot

from ._api.openapi import OpenApi
from .check import iter_references
from .resolve import CATEGORIES, category_of


def to_graph(doc: OpenApi) -> pydot.Dot:
    """
    Builds the reference graph of a document: one node per path and component,
    one edge per reference from its enclosing path or component to the target.
    Targets which do not exist are drawn in red.
    """
    graph = pydot.Dot("reference_graph", graph_type="digraph")
    ids: Dict[str, str] = {}

    def add_node(key: str, label: str, **attrs) -> str:
        ids[key] = f"n{len(ids)}"
        graph.add_node(pydot.Node(ids[key], label=label, **attrs))
        return ids[key]

    for path in doc.paths:
        add_node("paths." + path, path, shape="ellipse")
    if doc.components is not None:
        for category in CATEGORIES:
            for name in category.entries(doc.components):
                add_node(category.pointer(name), f"{category.segment}/{name}", shape="rect")

    for site in iter_references(doc):
        target = site.reference.ref
        if category_of(target) is None:
            continue
        try:
            target_id = ids[target]
        except KeyError:
            target_id = add_node(target, target, shape="rect", color="red")
        graph.add_edge(pydot.Edge(ids[site.owner], target_id, color="blue"))

    return graph
