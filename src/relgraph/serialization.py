"""
Serialization helpers for relation graphs (Graph, Node, Edge).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
The dict layout is the one renderers consume:

    {"nodes": [{"id", "label", "x"?, "y"?}],
     "edgesMerged": [{"from", "to", "label", "color"}],
     "edgesRaw": [...]}
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from relgraph.model import Edge, Graph, Node


def node_to_dict(n: Node) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": n.id, "label": n.label}
    if n.has_position:
        d["x"] = n.x
        d["y"] = n.y
    return d


def node_from_dict(d: Dict[str, Any]) -> Node:
    return Node(id=d["id"], label=d.get("label", d["id"]), x=d.get("x"), y=d.get("y"))


def edge_to_dict(e: Edge) -> Dict[str, Any]:
    return {"from": e.source, "to": e.target, "label": e.label, "color": e.color}


def edge_from_dict(d: Dict[str, Any]) -> Edge:
    return Edge(source=d["from"], target=d["to"], label=d.get("label", ""), color=d.get("color", ""))


def graph_to_dict(g: Graph) -> Dict[str, Any]:
    return {
        "nodes": [node_to_dict(n) for n in g.nodes],
        "edgesMerged": [edge_to_dict(e) for e in g.edges_merged],
        "edgesRaw": [edge_to_dict(e) for e in g.edges_raw],
    }


def graph_from_dict(d: Dict[str, Any]) -> Graph:
    return Graph(
        nodes=tuple(node_from_dict(n) for n in d.get("nodes", [])),
        edges_merged=tuple(edge_from_dict(e) for e in d.get("edgesMerged", [])),
        edges_raw=tuple(edge_from_dict(e) for e in d.get("edgesRaw", [])),
    )


def graph_to_json(g: Graph) -> str:
    return json.dumps(graph_to_dict(g), sort_keys=True, ensure_ascii=False)


def graph_from_json(s: str) -> Graph:
    d = json.loads(s)
    return graph_from_dict(d)


def graph_to_yaml(g: Graph) -> str:
    return yaml.safe_dump(graph_to_dict(g), allow_unicode=True)


def graph_from_yaml(s: str) -> Graph:
    d = yaml.safe_load(s)
    return graph_from_dict(d)
