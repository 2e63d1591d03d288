"""
View session: one uploaded survey, its current view, and the renderer.

The session is the boundary where failures become user-facing messages:

    - unreadable CSV       -> PARSE_ERROR_MESSAGE, graph and renderer cleared
    - readable but empty   -> EMPTY_ERROR_MESSAGE, graph and renderer cleared
    - export failure       -> EXPORT_ERROR_MESSAGE, graph untouched

Recomputation is synchronous. A new Graph re-initializes the renderer
(destroy, then create); a view change only updates it.
"""

import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Union

from relgraph.backends.svg_generator import ExportError, export_filename, save_svg_file
from relgraph.config import Configuration, DEFAULT_CONFIG
from relgraph.csv_parser import CSVParseError
from relgraph.filtering import apply_filters, person_options, relation_options
from relgraph.graph_builder import EmptyGraphError, build_graph_from_csv
from relgraph.model import EMPTY_GRAPH, Edge, Graph, Node, ViewState, VisibleGraph

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "Erreur lors de la lecture du CSV. Format non reconnu."
EMPTY_ERROR_MESSAGE = "Aucune donnée trouvée dans le CSV."
EXPORT_ERROR_MESSAGE = "Erreur export SVG"


class Renderer(ABC):
    """
    Interactive display collaborator.

    The session never patches a renderer across graphs: ``destroy`` is
    always called before ``create`` for a new Graph.
    """

    @abstractmethod
    def create(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        ...

    @abstractmethod
    def update(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        ...

    @abstractmethod
    def destroy(self) -> None:
        ...


class ViewSession:
    """
    Holds the current Graph, ViewState and visible subset.

    Usage:
        session = ViewSession(renderer=my_renderer)
        if session.load_csv(text):
            session.set_person_filter({"Alice"})
            session.export_svg("exports/")
        else:
            show(session.error)
    """

    def __init__(self, config: Configuration = DEFAULT_CONFIG, renderer: Optional[Renderer] = None):
        self.config = config
        self.renderer = renderer
        self.graph: Graph = EMPTY_GRAPH
        self.view = ViewState()
        self.visible = VisibleGraph()
        self.error = ""
        self._content: Optional[Union[str, bytes]] = None
        self._renderer_active = False

    # =========================================================================
    # GRAPH LIFECYCLE
    # =========================================================================

    def load_csv(self, content: Union[str, bytes]) -> bool:
        """
        Build a new Graph from CSV content.

        Returns True on success. On failure ``error`` holds the message and
        any previous graph is cleared.
        """
        self.error = ""
        self._content = content
        try:
            graph = build_graph_from_csv(content, self.config)
        except CSVParseError as e:
            logger.warning("CSV rejected: %s", e)
            self._fail(PARSE_ERROR_MESSAGE)
            return False
        except EmptyGraphError as e:
            logger.warning("CSV has no relations: %s", e)
            self._fail(EMPTY_ERROR_MESSAGE)
            return False

        self.graph = graph
        self.visible = apply_filters(self.graph, self.view)
        self._reset_renderer()
        return True

    def load_file(self, filepath: str) -> bool:
        with open(filepath, "rb") as f:
            return self.load_csv(f.read())

    def apply_configuration(self, config: Configuration) -> None:
        """Switch configuration; a loaded survey is rebuilt with it."""
        self.config = config
        if self._content is not None and not self.graph.is_empty:
            self.load_csv(self._content)

    def close(self) -> None:
        self._destroy_renderer()

    def _fail(self, message: str) -> None:
        self.error = message
        self.graph = EMPTY_GRAPH
        self.visible = VisibleGraph()
        self._destroy_renderer()

    def _destroy_renderer(self) -> None:
        if self.renderer is not None and self._renderer_active:
            self.renderer.destroy()
        self._renderer_active = False

    def _reset_renderer(self) -> None:
        if self.renderer is None:
            return
        self._destroy_renderer()
        self.renderer.create(self.visible.nodes, self.visible.edges)
        self._renderer_active = True

    # =========================================================================
    # VIEW STATE
    # =========================================================================

    def refresh(self) -> VisibleGraph:
        """Recompute the visible subset and its layout from the current view."""
        self.visible = apply_filters(self.graph, self.view)
        if self.renderer is not None and self._renderer_active:
            self.renderer.update(self.visible.nodes, self.visible.edges)
        return self.visible

    def set_use_merged(self, use_merged: bool) -> VisibleGraph:
        """Toggle merged/raw labels. The relation filter is reset since its options change."""
        self.view.use_merged = use_merged
        self.view.relation_filter = set()
        return self.refresh()

    def set_person_filter(self, names: Iterable[str]) -> VisibleGraph:
        self.view.person_filter = set(names)
        return self.refresh()

    def set_relation_filter(self, labels: Iterable[str]) -> VisibleGraph:
        self.view.relation_filter = set(labels)
        return self.refresh()

    def person_options(self) -> List[Node]:
        return person_options(self.graph)

    def relation_options(self) -> List[str]:
        return relation_options(self.graph, self.view.use_merged, self.config)

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_svg(self, directory: str = ".", now: Optional[datetime] = None) -> Optional[str]:
        """
        Write the visible graph to ``directory`` as a timestamped SVG.

        Returns the written path, or None when there is nothing loaded or
        the export failed (``error`` is set in the latter case).
        """
        if self.graph.is_empty:
            return None
        path = os.path.join(directory, export_filename("svg", now))
        try:
            save_svg_file(self.visible.nodes, self.visible.edges, path)
        except ExportError as e:
            logger.warning("SVG export failed: %s", e)
            self.error = EXPORT_ERROR_MESSAGE
            return None
        return path


__all__ = [
    "EMPTY_ERROR_MESSAGE",
    "EXPORT_ERROR_MESSAGE",
    "PARSE_ERROR_MESSAGE",
    "Renderer",
    "ViewSession",
]
