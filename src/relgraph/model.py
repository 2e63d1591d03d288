"""
Core Relation Graph Model Objects

Defines the data structures shared by the parser, builder, filters and
exporters:
    - Columns (raw header + cleaned person name)
    - Survey rows (typed cell lookup)
    - Nodes (persons)
    - Edges (ordered person pairs with a relation label)
    - Graph (root container, two edge views)
    - ViewState (current filters and merged/raw toggle)

ARCHITECTURAL RULE:
    Graph, Node and Edge are immutable. A new upload or configuration
    change produces a new Graph; layout produces new positioned Nodes.
    ViewState is the only mutable object and never touches the Graph.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple


@dataclass(frozen=True)
class Column:
    """
    One CSV header field.

    Properties:
        raw: Header text exactly as found in the file (used to read cells)
        cleaned: Person name derived from the header ("" if none)
    """

    raw: str
    cleaned: str


@dataclass
class SurveyRow:
    """
    One respondent row, keyed by raw column name.

    Cells that are absent from the row read as "".
    """

    values: Dict[str, str] = field(default_factory=dict)

    def get(self, column: Column) -> str:
        return self.values.get(column.raw) or ""


@dataclass(frozen=True)
class Node:
    """
    A person in the graph.

    Properties:
        id: Cleaned display name, unique within a graph
        label: Display label (same as id for survey graphs)
        x, y: Layout position, None until a layout has been applied
    """

    id: str
    label: str
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass(frozen=True)
class Edge:
    """
    Directed relation between two persons.

    Properties:
        source: Respondent (person giving the rating)
        target: Person being rated
        label: Canonical category (merged view) or original text (raw view)
        color: Display color, always derived from the canonical category
    """

    source: str
    target: str
    label: str
    color: str

    @property
    def pair(self) -> Tuple[str, str]:
        return (self.source, self.target)


@dataclass(frozen=True)
class Graph:
    """
    Root container for a survey relation graph.

    Both edge tuples cover exactly the same ordered pairs, in the same
    order. ``edges_merged`` carries canonical categories, ``edges_raw`` the
    original answer text that won conflict resolution.
    """

    nodes: Tuple[Node, ...] = ()
    edges_merged: Tuple[Edge, ...] = ()
    edges_raw: Tuple[Edge, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True if there is nothing to draw: no nodes, or no edges in either view."""
        return not self.nodes or (not self.edges_merged and not self.edges_raw)

    def edges(self, use_merged: bool = True) -> Tuple[Edge, ...]:
        return self.edges_merged if use_merged else self.edges_raw

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, source: str, target: str, use_merged: bool = True) -> Optional[Edge]:
        for edge in self.edges(use_merged):
            if edge.source == source and edge.target == target:
                return edge
        return None


EMPTY_GRAPH = Graph()


@dataclass
class ViewState:
    """
    Transient view selections.

    Properties:
        use_merged: True to show canonical categories, False for raw labels
        person_filter: Selected respondents (empty = no person filtering)
        relation_filter: Selected edge labels (empty = no relation filtering)
    """

    use_merged: bool = True
    person_filter: Set[str] = field(default_factory=set)
    relation_filter: Set[str] = field(default_factory=set)


@dataclass
class VisibleGraph:
    """Filtered, laid-out subset of a Graph, ready for a renderer or exporter."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
