"""
Graph Builder (Layer 2: Columns + Rows → Relation Graph).

Turns survey rows into a Graph with two parallel edge views:

    - merged: one canonical category per ordered pair, the strongest
      answer according to the configured hierarchy
    - raw: the original text of the answer that won, colored by its
      canonical category

Empty cells are "no answer" and never an error. The only failures are
unreadable input (CSVParseError) and a graph with nothing to draw
(EmptyGraphError).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

from relgraph.config import Configuration, DEFAULT_CONFIG
from relgraph.csv_parser import parse_survey_csv
from relgraph.model import Column, Edge, Graph, Node, SurveyRow
from relgraph.relations import build_normalization_map, normalize_relation, stronger_relation

logger = logging.getLogger(__name__)

RESPONDENT_COLUMN = 1
FIRST_TARGET_COLUMN = 2


class EmptyGraphError(Exception):
    """Raised when a readable CSV yields no nodes, or no edges in either view."""
    pass


@dataclass
class _RawChoice:
    raw: str
    norm: str


Pair = Tuple[str, str]


def build_graph(
    columns: Sequence[Column],
    rows: Sequence[SurveyRow],
    config: Configuration = DEFAULT_CONFIG,
) -> Graph:
    """
    Build the relation graph from parsed survey data.

    Args:
        columns: Header columns (raw + cleaned names)
        rows: Respondent rows
        config: Hierarchy, colors and synonym groups

    Returns:
        Graph with nodes in first-appearance order and edges in the order
        their ordered pair was first answered. May be empty.
    """
    synonyms = build_normalization_map(config.relation_groups)
    hierarchy = config.hierarchy

    nodes: Dict[str, None] = {}
    merged: Dict[Pair, str] = {}
    raw_choices: Dict[Pair, _RawChoice] = {}

    if len(columns) <= RESPONDENT_COLUMN:
        return Graph()

    respondent_column = columns[RESPONDENT_COLUMN]
    target_columns = list(columns[FIRST_TARGET_COLUMN:])

    for row in rows:
        source = row.get(respondent_column).strip()
        if not source:
            continue
        nodes.setdefault(source)

        for column in target_columns:
            target = column.cleaned
            if not target or target == source:
                continue
            nodes.setdefault(target)

            raw_label = row.get(column).strip()
            normalized = normalize_relation(raw_label, synonyms)
            if normalized is None:
                continue

            pair = (source, target)
            merged[pair] = stronger_relation(merged.get(pair), normalized, hierarchy)

            # The raw label follows the merged decision: it is only replaced
            # when the chosen canonical category changes.
            current = raw_choices.get(pair)
            if current is None:
                raw_choices[pair] = _RawChoice(raw=raw_label, norm=normalized)
            elif stronger_relation(current.norm, normalized, hierarchy) != current.norm:
                raw_choices[pair] = _RawChoice(raw=raw_label, norm=normalized)

    edges_merged = [
        Edge(source=s, target=t, label=category, color=config.color_for(category))
        for (s, t), category in merged.items()
    ]
    edges_raw = [
        Edge(source=s, target=t, label=choice.raw, color=config.color_for(choice.norm))
        for (s, t), choice in raw_choices.items()
    ]

    graph = Graph(
        nodes=tuple(Node(id=name, label=name) for name in nodes),
        edges_merged=tuple(edges_merged),
        edges_raw=tuple(edges_raw),
    )
    logger.debug(
        "Built graph: %d nodes, %d merged edges, %d raw edges from %d rows",
        len(graph.nodes), len(graph.edges_merged), len(graph.edges_raw), len(rows),
    )
    return graph


def build_graph_from_csv(content: Union[str, bytes], config: Configuration = DEFAULT_CONFIG) -> Graph:
    """
    Parse CSV content and build its relation graph.

    Raises:
        CSVParseError: If the content cannot be read as CSV
        EmptyGraphError: If the graph has no nodes or no edges in either view
    """
    columns, rows = parse_survey_csv(content)
    graph = build_graph(columns, rows, config)
    if graph.is_empty:
        raise EmptyGraphError(
            f"No relations found ({len(graph.nodes)} nodes, {len(rows)} rows)"
        )
    return graph


def build_graph_from_file(filepath: str, config: Configuration = DEFAULT_CONFIG) -> Graph:
    """Read a CSV file and build its relation graph (same errors as build_graph_from_csv)."""
    with open(filepath, "rb") as f:
        content = f.read()
    return build_graph_from_csv(content, config)


__all__ = [
    "EmptyGraphError",
    "build_graph",
    "build_graph_from_csv",
    "build_graph_from_file",
]
