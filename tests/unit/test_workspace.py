"""
Tests for project settings and workspace persistence.
"""

import json

import pytest

from plotcraft.core.data_types import CanvasSettings, DataType
from plotcraft.core.errors import WorkspaceError
from plotcraft.core.graph import Node, Point2D
from plotcraft.core.project import Project, ProjectSettings, create_starter_graph
from plotcraft.core.workspace import (
    load_workspace,
    project_from_dict,
    project_to_dict,
    save_workspace,
)
from plotcraft.plotprep.types import OptimizationSettings


def make_project() -> Project:
    project = Project.create("Waves")
    project.settings = ProjectSettings(
        canvas=CanvasSettings(300, 200),
        seed=1234,
        plot_speed=40,
        optimization=OptimizationSettings(join_enabled=False, simplify_tolerance=0.3),
    )
    number = Node.create("number", Point2D(10, 20), {"value": 12})
    project.graph.add_node(number)
    grid = project.graph.get_nodes_of_type("grid")[0]
    project.graph.promote_parameter(grid.id, "rows")
    project.graph.connect(number.id, "value", grid.id, "param:rows", DataType.NUMBER)
    return project


class TestProjectSettings:
    def test_round_trip(self):
        settings = ProjectSettings(
            canvas=CanvasSettings(100, 50),
            seed=7,
            plot_speed=25,
            optimization=OptimizationSettings(order_enabled=False),
        )
        assert ProjectSettings.from_dict(settings.to_dict()) == settings

    def test_defaults(self):
        settings = ProjectSettings.from_dict({})
        assert settings.canvas == CanvasSettings()
        assert settings.seed == 0
        assert settings.optimization == OptimizationSettings()


class TestProject:
    def test_starter_graph(self):
        graph = create_starter_graph()
        assert sorted(node.type_id for node in graph.nodes.values()) == ["grid", "output"]
        assert len(graph.connections) == 1
        connection = graph.connections[0]
        assert connection.source.output_name == "paths"
        assert connection.target.input_name == "paths"

    def test_create_without_starter(self):
        project = Project.create("Empty", starter=False)
        assert len(project.graph) == 0

    def test_display_name(self):
        project = Project.create("Sketch")
        assert project.display_name == "Sketch"
        project.mark_modified()
        assert project.display_name == "* Sketch"
        project.mark_saved()
        assert not project.is_modified


class TestWorkspaceFormat:
    def test_round_trip(self):
        project = make_project()
        data = json.loads(json.dumps(project_to_dict(project)))
        loaded = project_from_dict(data)

        assert loaded.name == "Waves"
        assert loaded.settings == project.settings
        assert set(loaded.graph.nodes) == set(project.graph.nodes)
        for node_id, node in project.graph.nodes.items():
            restored = loaded.graph.get_node(node_id)
            assert restored.type_id == node.type_id
            assert restored.parameters == node.parameters
            assert restored.promoted_params == node.promoted_params
            assert restored.position == node.position
        assert {c.id for c in loaded.graph.connections} == {c.id for c in project.graph.connections}

    def test_browser_format(self):
        data = {
            "version": 1,
            "name": "From the browser",
            "canvas": {"width": 210, "height": 297},
            "seed": 99,
            "nodes": [
                {"id": "n1", "type": "grid", "x": 0, "y": 0, "params": {"rows": 3}},
                {"id": "n2", "type": "output", "x": 300, "y": 0, "params": {}},
                {"id": "n3", "type": "number", "x": 0, "y": 200, "params": {"value": 4}},
            ],
            "connections": [
                {"id": "c1", "fromNode": "n1", "fromPort": "paths", "toNode": "n2", "toPort": "paths"},
                {
                    "id": "c2", "fromNode": "n3", "fromPort": "value",
                    "toNode": "n1", "toPort": "param:cols", "dataType": "number",
                },
            ],
        }
        project = project_from_dict(data)
        graph = project.graph
        assert project.settings.seed == 99
        assert graph.get_node("n1").parameters == {"rows": 3}
        assert graph.get_input_connection("n2", "paths").id == "c1"
        assert graph.get_input_connection("n1", "param:cols").data_type == DataType.NUMBER

    def test_dangling_connection_dropped(self):
        data = {
            "version": 1,
            "nodes": [{"id": "n1", "type": "grid"}],
            "connections": [{"fromNode": "n1", "fromPort": "paths", "toNode": "gone", "toPort": "paths"}],
        }
        assert project_from_dict(data).graph.connections == []

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"nodes": []},
            {"version": 1},
            {"version": 1, "nodes": "nope"},
            {"version": 1, "nodes": [{"type": "grid"}]},
            {"version": 1, "nodes": [{"id": "n1"}]},
            {"version": 1, "nodes": [], "canvas": {"width": -5}},
            {"version": 1, "nodes": [{"id": "n1", "type": "grid"}],
             "connections": [{"fromNode": "n1", "fromPort": "paths", "toNode": "n1",
                              "toPort": "paths", "dataType": "bogus"}]},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(WorkspaceError):
            project_from_dict(data)


class TestWorkspaceFiles:
    def test_save_and_load(self, tmp_path):
        project = make_project()
        path = save_workspace(project, tmp_path / "waves.json")
        assert not project.is_modified
        assert project.path == path

        loaded = load_workspace(path)
        assert loaded.path == path
        assert loaded.settings.seed == 1234
        assert len(loaded.graph) == len(project.graph)

    def test_missing_file(self, tmp_path):
        with pytest.raises(WorkspaceError):
            load_workspace(tmp_path / "missing.json")

    def test_not_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(WorkspaceError):
            load_workspace(path)
