"""
Tests for the view session.

Tests verify that:
    - Parse failures and empty results give distinct messages and clear state
    - A new graph destroys the renderer before creating a new one
    - View changes update the renderer without rebuilding the graph
    - Export writes a timestamped SVG and reports failures
    - Configuration changes rebuild the loaded survey
"""

import os
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest
from relgraph.config import DEFAULT_CONFIG, merge_configuration
from relgraph.examples import EXAMPLE_CONFIG, build_example_survey_csv
from relgraph.session import (
    EMPTY_ERROR_MESSAGE,
    EXPORT_ERROR_MESSAGE,
    PARSE_ERROR_MESSAGE,
    Renderer,
    ViewSession,
)

HEADER = "Horodateur,Nom,Votre relation vis-à-vis de : Alice,Votre relation vis-à-vis de : Bob\n"


class RecordingRenderer(Renderer):
    def __init__(self):
        self.calls = []

    def create(self, nodes, edges):
        self.calls.append(("create", len(nodes), len(edges)))

    def update(self, nodes, edges):
        self.calls.append(("update", len(nodes), len(edges)))

    def destroy(self):
        self.calls.append(("destroy",))


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def session(renderer):
    return ViewSession(config=merge_configuration(DEFAULT_CONFIG, EXAMPLE_CONFIG), renderer=renderer)


class TestLoading:

    def test_successful_load(self, session, renderer):
        assert session.load_csv(build_example_survey_csv())
        assert session.error == ""
        assert len(session.graph.nodes) == 4
        assert len(session.visible.nodes) == 4
        assert renderer.calls == [("create", 4, 12)]

    def test_reload_destroys_then_creates(self, session, renderer):
        session.load_csv(build_example_survey_csv())
        session.load_csv(HEADER + "1,Alice,,ami\n")
        assert renderer.calls == [("create", 4, 12), ("destroy",), ("create", 2, 1)]

    def test_parse_failure_clears_previous_graph(self, session, renderer):
        session.load_csv(build_example_survey_csv())
        assert not session.load_csv(b"\xff\xfe\xfa")

        assert session.error == PARSE_ERROR_MESSAGE
        assert session.graph.is_empty
        assert session.visible.nodes == []
        assert renderer.calls[-1] == ("destroy",)

    def test_empty_result_message(self, session, renderer):
        assert not session.load_csv(HEADER + "1,Alice,,\n")
        assert session.error == EMPTY_ERROR_MESSAGE
        assert session.graph.is_empty
        # nothing was ever created, so nothing to destroy
        assert renderer.calls == []

    def test_messages_are_french(self):
        assert PARSE_ERROR_MESSAGE == "Erreur lors de la lecture du CSV. Format non reconnu."
        assert EMPTY_ERROR_MESSAGE == "Aucune donnée trouvée dans le CSV."
        assert EXPORT_ERROR_MESSAGE == "Erreur export SVG"

    def test_error_cleared_on_success(self, session):
        session.load_csv("")
        assert session.error == EMPTY_ERROR_MESSAGE
        session.load_csv(HEADER + "1,Alice,,ami\n")
        assert session.error == ""

    def test_load_file(self, session, tmp_path):
        path = tmp_path / "survey.csv"
        path.write_bytes(build_example_survey_csv().encode("utf-8"))
        assert session.load_file(str(path))

    def test_without_renderer(self):
        session = ViewSession()
        assert session.load_csv(HEADER + "1,Alice,,ami\n")
        assert len(session.visible.edges) == 1


class TestViewChanges:

    def test_person_filter_updates_renderer(self, session, renderer):
        session.load_csv(build_example_survey_csv())
        graph = session.graph
        visible = session.set_person_filter(["Bob"])

        assert session.graph is graph
        assert all(e.source == "Bob" for e in visible.edges)
        assert renderer.calls[-1] == ("update", 4, 3)

    def test_toggle_resets_relation_filter(self, session):
        session.load_csv(build_example_survey_csv())
        session.set_relation_filter({"amour"})
        assert len(session.visible.edges) == 2

        session.set_use_merged(False)
        assert session.view.relation_filter == set()
        assert session.visible.edges == list(session.graph.edges_raw)

    def test_raw_view_labels(self, session):
        session.load_csv(build_example_survey_csv())
        session.set_use_merged(False)
        labels = {e.pair: e.label for e in session.visible.edges}
        assert labels[("Chloé", "Alice")] == "Meilleure amie"
        assert labels[("Alice", "David")] == "pas trop"

    def test_options(self, session):
        session.load_csv(build_example_survey_csv())
        assert [n.label for n in session.person_options()] == ["Alice", "Bob", "Chloé", "David"]
        assert session.relation_options()[0] == "amour"
        session.set_use_merged(False)
        assert "Meilleure amie" in session.relation_options()

    def test_filters_on_empty_graph(self, session, renderer):
        visible = session.set_person_filter({"Alice"})
        assert visible.nodes == []
        assert renderer.calls == []


class TestConfigurationChange:

    def test_rebuild_with_new_configuration(self, renderer):
        session = ViewSession(renderer=renderer)
        session.load_csv(build_example_survey_csv())
        assert session.graph.get_edge("Chloé", "Alice").label == "meilleure amie"

        session.apply_configuration(merge_configuration(DEFAULT_CONFIG, EXAMPLE_CONFIG))
        assert session.graph.get_edge("Chloé", "Alice").label == "meilleur ami"
        assert renderer.calls[-2:] == [("destroy",), ("create", 4, 12)]

    def test_configuration_before_upload(self):
        session = ViewSession()
        config = merge_configuration(DEFAULT_CONFIG, EXAMPLE_CONFIG)
        session.apply_configuration(config)
        assert session.config is config
        assert session.graph.is_empty


class TestExport:

    def test_export_svg(self, session, tmp_path):
        session.load_csv(build_example_survey_csv())
        session.set_person_filter({"Alice"})
        now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        path = session.export_svg(str(tmp_path), now=now)

        assert os.path.basename(path) == "graph_2024-01-02-03-04-05.svg"
        root = ET.parse(path).getroot()
        svg = "{http://www.w3.org/2000/svg}"
        assert len(root.findall(f"{svg}circle")) == len(session.visible.nodes)
        assert len(root.findall(f"{svg}line")) == len(session.visible.edges)

    def test_nothing_to_export(self, session, tmp_path):
        assert session.export_svg(str(tmp_path)) is None
        assert session.error == ""

    def test_export_failure_keeps_graph(self, session, tmp_path):
        session.load_csv(build_example_survey_csv())
        graph = session.graph

        assert session.export_svg(str(tmp_path / "missing")) is None
        assert session.error == EXPORT_ERROR_MESSAGE
        assert session.graph is graph

    def test_close_destroys_renderer(self, session, renderer):
        session.load_csv(build_example_survey_csv())
        session.close()
        session.close()
        assert renderer.calls.count(("destroy",)) == 1
