"""
View filters and filter option lists.

apply_filters derives the visible, laid-out subset of a Graph from a
ViewState. It is recomputed from scratch on every view change and never
mutates the Graph.
"""

import unicodedata
from typing import List

from relgraph.config import Configuration, DEFAULT_CONFIG
from relgraph.layout import circular_layout
from relgraph.model import Graph, Node, ViewState, VisibleGraph


def filter_graph(graph: Graph, view: ViewState) -> VisibleGraph:
    """
    Apply the person and relation filters, without layout.

    - person filter: keep edges whose source is selected, then only the
      nodes those edges touch
    - relation filter: keep edges whose label is selected; nodes are kept
      even if they lose all their edges

    Node order always follows the Graph's node order.
    """
    nodes = list(graph.nodes)
    edges = list(graph.edges(view.use_merged))

    if view.person_filter:
        edges = [e for e in edges if e.source in view.person_filter]
        referenced = set()
        for edge in edges:
            referenced.add(edge.source)
            referenced.add(edge.target)
        nodes = [n for n in nodes if n.id in referenced]

    if view.relation_filter:
        edges = [e for e in edges if e.label in view.relation_filter]

    return VisibleGraph(nodes=nodes, edges=edges)


def apply_filters(graph: Graph, view: ViewState) -> VisibleGraph:
    """Filter the graph and lay the remaining nodes out on a circle."""
    visible = filter_graph(graph, view)
    visible.nodes = circular_layout(visible.nodes)
    return visible


def sort_key(text: str) -> str:
    """
    Locale-aware sort key: accents and case are ignored, so "Élodie"
    sorts next to "elodie" and before "Fabien".
    """
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def person_options(graph: Graph) -> List[Node]:
    """Nodes offered by the person filter, sorted by label."""
    return sorted(graph.nodes, key=lambda n: (sort_key(n.label), n.label))


def relation_options(graph: Graph, use_merged: bool = True, config: Configuration = DEFAULT_CONFIG) -> List[str]:
    """
    Labels offered by the relation filter.

    Merged view: hierarchy categories used by at least one merged edge, in
    hierarchy order. Raw view: every distinct raw label, sorted.
    """
    if use_merged:
        used = {e.label for e in graph.edges_merged}
        return [category for category in config.hierarchy if category in used]
    labels = {e.label for e in graph.edges_raw}
    return sorted(labels, key=lambda label: (sort_key(label), label))


__all__ = [
    "apply_filters",
    "filter_graph",
    "person_options",
    "relation_options",
    "sort_key",
]
