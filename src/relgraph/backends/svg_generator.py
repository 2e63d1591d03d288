"""
SVG generator for relation graphs.

Converts the currently visible, laid-out nodes and edges into a
self-contained SVG document (no external fonts, images or stylesheets).

Drawing order:
    - arrowhead marker definition
    - one line per edge, with its label at the midpoint
    - one circle per node, with its label
"""

import html
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from relgraph.model import Edge, Node

MARGIN = 60
NODE_RADIUS = 22
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
FALLBACK_EDGE_COLOR = "#999"


class ExportError(Exception):
    """Raised when an image cannot be composed or written."""
    pass


def _escape_xml(value: object) -> str:
    """Escape & < > " and ' for use in text content and attributes."""
    return html.escape(str(value), quote=True)


def _fmt(value: float) -> str:
    """Compact coordinate: at most 2 decimals, no trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _bounding_box(positions: Dict[str, Tuple[float, float]]) -> Optional[Tuple[float, float, float, float]]:
    if not positions:
        return None
    xs = [p[0] for p in positions.values()]
    ys = [p[1] for p in positions.values()]
    return min(xs), min(ys), max(xs), max(ys)


def generate_svg(nodes: Sequence[Node], edges: Sequence[Edge]) -> str:
    """
    Generate an SVG document for laid-out nodes and their edges.

    Args:
        nodes: Visible nodes; nodes without a position are not drawn
        edges: Visible edges; edges with an undrawn endpoint are skipped

    Returns:
        SVG document as a string

    Raises:
        ExportError: If a node or edge cannot be rendered
    """
    try:
        positions = {n.id: (float(n.x), float(n.y)) for n in nodes if n.has_position}
    except (TypeError, ValueError) as e:
        raise ExportError(f"Invalid node position: {e}")

    box = _bounding_box(positions)
    if box is None:
        min_x = min_y = 0.0
        width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
    else:
        min_x, min_y, max_x, max_y = box
        width = (max_x - min_x) + MARGIN * 2
        height = (max_y - min_y) + MARGIN * 2

    def transform(node_id: str) -> Tuple[float, float]:
        x, y = positions[node_id]
        return (x - min_x) + MARGIN, (y - min_y) + MARGIN

    lines: List[str] = []

    # Header
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(width)}" height="{_fmt(height)}" '
        f'viewBox="0 0 {_fmt(width)} {_fmt(height)}" font-family="Arial, sans-serif">'
    )
    lines.append(
        '<defs><marker id="arrowhead" markerWidth="12" markerHeight="12" refX="10" refY="6" '
        'orient="auto" markerUnits="strokeWidth"><path d="M0,0 L12,6 L0,12 z" fill="#555" /></marker></defs>'
    )

    # =========================================================================
    # EDGES
    # =========================================================================

    for edge in edges:
        if edge.source not in positions or edge.target not in positions:
            continue
        sx, sy = transform(edge.source)
        tx, ty = transform(edge.target)
        color = _escape_xml(edge.color or FALLBACK_EDGE_COLOR)
        lines.append(
            f'<line x1="{_fmt(sx)}" y1="{_fmt(sy)}" x2="{_fmt(tx)}" y2="{_fmt(ty)}" '
            f'stroke="{color}" stroke-width="2" marker-end="url(#arrowhead)" />'
        )
        if edge.label:
            mx = (sx + tx) / 2
            my = (sy + ty) / 2 - 4
            lines.append(
                f'<text x="{_fmt(mx)}" y="{_fmt(my)}" font-size="14" text-anchor="middle" '
                f'fill="{color}">{_escape_xml(edge.label)}</text>'
            )

    # =========================================================================
    # NODES
    # =========================================================================

    for node in nodes:
        if node.id not in positions:
            continue
        x, y = transform(node.id)
        lines.append(
            f'<circle cx="{_fmt(x)}" cy="{_fmt(y)}" r="{NODE_RADIUS}" fill="#ffffff" stroke="#333" stroke-width="2" />'
        )
        label = node.label or node.id
        lines.append(
            f'<text x="{_fmt(x)}" y="{_fmt(y + 5)}" font-size="12" text-anchor="middle" '
            f'fill="#111">{_escape_xml(label)}</text>'
        )

    # Footer
    lines.append("</svg>")

    return "\n".join(lines)


def export_filename(extension: str = "svg", now: Optional[datetime] = None) -> str:
    """
    Timestamped export name, e.g. graph_2026-10-19-14-03-59.svg (UTC).
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return f"graph_{now.strftime('%Y-%m-%d-%H-%M-%S')}.{extension}"


def save_svg_file(nodes: Sequence[Node], edges: Sequence[Edge], filename: str) -> None:
    """
    Generate SVG and save to file.

    Raises:
        ExportError: If the document cannot be generated or written
    """
    svg = generate_svg(nodes, edges)
    try:
        with open(filename, "w", encoding="utf-8") as f:
            f.write(svg)
    except OSError as e:
        raise ExportError(f"Cannot write {filename}: {e}")


__all__ = ["ExportError", "export_filename", "generate_svg", "save_svg_file"]
