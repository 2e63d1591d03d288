"""
Deterministic circular layout.

Nodes are spread evenly on a circle centered on the origin, in the order
given. The picture depends only on node order and count, so the same
filtered node sequence always gives the same drawing.
"""

import math
from dataclasses import replace
from typing import List, Sequence

from relgraph.model import Node

MIN_RADIUS = 250.0
RADIUS_PER_NODE = 25.0


def layout_radius(node_count: int) -> float:
    """Circle radius for ``node_count`` nodes: max(250, 25 * n)."""
    return max(MIN_RADIUS, node_count * RADIUS_PER_NODE)


def circular_layout(nodes: Sequence[Node]) -> List[Node]:
    """
    Place nodes on a circle.

    Node ``i`` of ``n`` goes to (r cos(i * 2π/n), r sin(i * 2π/n)).
    Returns positioned copies; an empty input returns an empty list.
    """
    count = len(nodes)
    if count == 0:
        return []

    radius = layout_radius(count)
    angle_step = 2 * math.pi / count
    return [
        replace(node, x=radius * math.cos(i * angle_step), y=radius * math.sin(i * angle_step))
        for i, node in enumerate(nodes)
    ]


__all__ = ["MIN_RADIUS", "RADIUS_PER_NODE", "circular_layout", "layout_radius"]
