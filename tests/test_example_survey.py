"""
Test the example survey used by the demo.

Validates that the example CSV builds the expected persons and that the
duplicate answers from Alice resolve to the stronger relations.
"""

from relgraph.config import DEFAULT_CONFIG, merge_configuration
from relgraph.csv_parser import parse_survey_csv
from relgraph.examples import EXAMPLE_CONFIG, EXAMPLE_PEOPLE, build_example_survey_csv
from relgraph.graph_builder import build_graph_from_csv


def test_example_csv_structure():
    columns, rows = parse_survey_csv(build_example_survey_csv())

    assert [c.cleaned for c in columns[2:]] == EXAMPLE_PEOPLE
    assert len(rows) == 5


def test_example_graph():
    graph = build_graph_from_csv(build_example_survey_csv(), merge_configuration(DEFAULT_CONFIG, EXAMPLE_CONFIG))

    assert [n.id for n in graph.nodes] == EXAMPLE_PEOPLE
    # 4 persons each rating the 3 others
    assert len(graph.edges_merged) == 12

    assert graph.get_edge("Alice", "Bob").label == "amour"
    assert graph.get_edge("Alice", "David").label == "entre ami et neutre"
    assert graph.get_edge("Chloé", "Alice").label == "meilleur ami"
    assert graph.get_edge("Alice", "Chloé", use_merged=False).label == "Meilleur ami"
