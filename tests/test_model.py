"""
Tests for Relation Graph Core Model Objects

These tests verify:
    - Basic model creation
    - Retrieval methods
    - Immutability of Graph, Node and Edge
    - Default view state
"""

import dataclasses

import pytest
from relgraph.model import (
    EMPTY_GRAPH,
    Column,
    Edge,
    Graph,
    Node,
    SurveyRow,
    ViewState,
    VisibleGraph,
)


class TestSurveyRow:
    """Test typed cell lookup."""

    def test_get_by_column(self):
        row = SurveyRow(values={"Votre relation vis-à-vis de : Bob": "ami"})
        column = Column(raw="Votre relation vis-à-vis de : Bob", cleaned="Bob")
        assert row.get(column) == "ami"

    def test_missing_cell_is_empty(self):
        row = SurveyRow()
        assert row.get(Column(raw="X", cleaned="X")) == ""


class TestNode:
    """Test Node objects."""

    def test_create_node(self):
        node = Node(id="Alice", label="Alice")
        assert node.x is None and node.y is None
        assert not node.has_position

    def test_positioned_node(self):
        assert Node(id="A", label="A", x=0.0, y=0.0).has_position

    def test_node_is_immutable(self):
        node = Node(id="Alice", label="Alice")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.x = 1.0


class TestEdge:
    """Test Edge objects."""

    def test_pair(self):
        edge = Edge(source="Alice", target="Bob", label="ami", color="#00AA00")
        assert edge.pair == ("Alice", "Bob")


class TestGraph:
    """Test Graph container."""

    def make_graph(self):
        return Graph(
            nodes=(Node(id="Alice", label="Alice"), Node(id="Bob", label="Bob")),
            edges_merged=(Edge("Alice", "Bob", "ami", "#00AA00"),),
            edges_raw=(Edge("Alice", "Bob", "Copain", "#00AA00"),),
        )

    def test_empty_graph(self):
        assert EMPTY_GRAPH.is_empty
        assert Graph(nodes=(Node(id="A", label="A"),)).is_empty

    def test_non_empty_graph(self):
        assert not self.make_graph().is_empty

    def test_edges_by_view(self):
        graph = self.make_graph()
        assert graph.edges(True)[0].label == "ami"
        assert graph.edges(False)[0].label == "Copain"

    def test_get_node(self):
        graph = self.make_graph()
        assert graph.get_node("Bob").label == "Bob"
        assert graph.get_node("Nobody") is None

    def test_get_edge(self):
        graph = self.make_graph()
        assert graph.get_edge("Alice", "Bob").label == "ami"
        assert graph.get_edge("Alice", "Bob", use_merged=False).label == "Copain"
        assert graph.get_edge("Bob", "Alice") is None

    def test_graph_is_immutable(self):
        graph = self.make_graph()
        with pytest.raises(dataclasses.FrozenInstanceError):
            graph.nodes = ()


class TestViewState:
    """Test view defaults."""

    def test_defaults(self):
        view = ViewState()
        assert view.use_merged
        assert view.person_filter == set()
        assert view.relation_filter == set()

    def test_filters_not_shared(self):
        a, b = ViewState(), ViewState()
        a.person_filter.add("Alice")
        assert b.person_filter == set()

    def test_visible_graph_defaults(self):
        visible = VisibleGraph()
        assert visible.nodes == [] and visible.edges == []
