"""
Workspace Persistence - Save and load projects to/from disk.

Projects are stored as JSON with a version field, the canvas, seed,
settings, nodes and connections. Files written by the browser editor
(camelCase keys such as ``type``, ``params``, ``fromNode``) load too.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from plotcraft.core.data_types import CanvasSettings, DataType
from plotcraft.core.errors import WorkspaceError
from plotcraft.core.graph import Connection, ConnectionId, Node, NodeGraph, NodeId, Point2D
from plotcraft.core.project import Project, ProjectSettings

logger = logging.getLogger(__name__)

WORKSPACE_VERSION = 1

# Workspace storage directory
WORKSPACE_DIR = Path.home() / ".local" / "share" / "plotcraft" / "workspaces"


def get_workspace_dir() -> Path:
    """Get the workspace storage directory, creating if needed."""
    WORKSPACE_DIR.mkdir(parents=True, exist_ok=True)
    return WORKSPACE_DIR


def project_to_dict(project: Project) -> dict[str, Any]:
    """Serialize a project to the workspace JSON structure."""
    graph = project.graph
    nodes_data = [
        {
            "id": node.id,
            "type_id": node.type_id,
            "x": node.position.x,
            "y": node.position.y,
            "parameters": node.parameters,
            "promoted_params": sorted(node.promoted_params),
        }
        for node in graph.nodes.values()
    ]
    connections_data = [
        {
            "id": conn.id,
            "source": conn.source.node_id,
            "source_output": conn.source.output_name,
            "target": conn.target.node_id,
            "target_input": conn.target.input_name,
            "data_type": conn.data_type.value,
        }
        for conn in graph.connections
    ]
    settings = project.settings
    return {
        "version": WORKSPACE_VERSION,
        "name": project.name,
        "saved_at": datetime.now().isoformat(),
        "canvas": settings.canvas.to_dict(),
        "seed": settings.seed,
        "settings": {
            "plot_speed": settings.plot_speed,
            "optimization": settings.optimization.to_dict(),
        },
        "nodes": nodes_data,
        "connections": connections_data,
    }


def _first(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def project_from_dict(data: dict[str, Any]) -> Project:
    """
    Rebuild a project from workspace JSON.

    Raises:
        WorkspaceError: If required fields are missing or malformed
    """
    if not isinstance(data, dict) or "version" not in data or "nodes" not in data:
        raise WorkspaceError("Invalid workspace format: missing version or nodes")
    if not isinstance(data["nodes"], list) or not isinstance(data.get("connections", []), list):
        raise WorkspaceError("Invalid workspace format: nodes and connections must be lists")

    name = data.get("name", "Untitled")
    settings_data = dict(data.get("settings", {}))
    settings_data["canvas"] = data.get("canvas", {})
    settings_data["seed"] = data.get("seed", 0)
    try:
        settings = ProjectSettings.from_dict(settings_data)
    except (TypeError, ValueError) as e:
        raise WorkspaceError(f"Invalid workspace settings: {e}") from e

    graph = NodeGraph(name=name)
    for entry in data["nodes"]:
        try:
            node = Node(
                id=NodeId(str(entry["id"])),
                type_id=_first(entry, "type_id", "type"),
                position=Point2D(float(entry.get("x", 0)), float(entry.get("y", 0))),
                parameters=dict(_first(entry, "parameters", "params", default={})),
                promoted_params=set(
                    _first(entry, "promoted_params", "promotedParams", default=[])
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise WorkspaceError(f"Invalid node entry: {entry!r}") from e
        if node.type_id is None:
            raise WorkspaceError(f"Node {node.id} has no type")
        graph.add_node(node)

    for entry in data.get("connections", []):
        try:
            connection = Connection.create(
                NodeId(str(_first(entry, "source", "fromNode"))),
                _first(entry, "source_output", "fromPort"),
                NodeId(str(_first(entry, "target", "toNode"))),
                _first(entry, "target_input", "toPort"),
                DataType(_first(entry, "data_type", "dataType", default="paths")),
            )
        except (TypeError, ValueError) as e:
            raise WorkspaceError(f"Invalid connection entry: {entry!r}") from e
        if "id" in entry:
            connection.id = ConnectionId(str(entry["id"]))
        if not graph.add_connection(connection):
            logger.warning(f"Dropping connection with missing endpoint: {entry!r}")

    return Project(id=str(uuid4()), name=name, graph=graph, settings=settings)


def save_workspace(project: Project, path: Path | None = None) -> Path:
    """
    Save a project to disk.

    Args:
        project: Project to save
        path: Optional specific path, otherwise uses the default location

    Returns:
        Path where workspace was saved
    """
    if path is None:
        path = get_workspace_dir() / f"{project.name}.json"

    with open(path, "w", encoding="utf-8") as f:
        json.dump(project_to_dict(project), f, indent=2)

    project.mark_saved(path)
    logger.info(f"Saved workspace to {path}")
    return path


def load_workspace(path: Path) -> Project:
    """
    Load a project from disk.

    Raises:
        WorkspaceError: If the file is missing, not JSON, or not a workspace
    """
    if not path.exists():
        raise WorkspaceError(f"Workspace not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise WorkspaceError(f"Workspace is not valid JSON: {path}") from e

    project = project_from_dict(data)
    project.mark_saved(path)
    return project

