"""
PlotCraft - Main Entry Point

Renders saved workspaces to plotter-ready SVG and lists the available
node types.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plotcraft", description="Procedural line art for pen plotters"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Render a workspace to SVG")
    render.add_argument("workspace", type=Path, help="Workspace JSON file")
    render.add_argument("-o", "--output", type=Path, required=True, help="Output SVG file")
    render.add_argument("--seed", type=int, default=None, help="Override the workspace seed")
    render.add_argument("--no-optimize", action="store_true", help="Skip path optimization")
    render.add_argument(
        "--per-layer", action="store_true", help="Write one SVG per pen layer next to the output"
    )

    commands.add_parser("nodes", help="List registered node types")
    return parser


def render(args: argparse.Namespace) -> int:
    from plotcraft.core.errors import WorkspaceError
    from plotcraft.core.execution import GraphEvaluator
    from plotcraft.core.workspace import load_workspace
    from plotcraft.export import build_svg, build_svg_per_layer
    from plotcraft.export.svg import layer_file_stem
    from plotcraft.nodes import create_node_registry
    from plotcraft.plotprep import optimize_per_pen

    try:
        project = load_workspace(args.workspace)
    except WorkspaceError as e:
        logger.error(str(e))
        return 1

    settings = project.settings
    seed = settings.seed if args.seed is None else args.seed
    evaluator = GraphEvaluator(create_node_registry())
    layers = evaluator.evaluate(project.graph, settings.canvas, seed)

    for node_id, error in evaluator.errors.items():
        logger.warning(f"Node {node_id} failed: {error.message}")

    if not args.no_optimize:
        result = optimize_per_pen(layers, settings.optimization, settings.plot_speed)
        layers = result.output_layers
        stats = result.stats
        logger.info(
            f"Paths {stats.path_count_before} -> {stats.path_count_after}, "
            f"points {stats.point_count_before} -> {stats.point_count_after}, "
            f"draw {stats.draw_distance:.0f}mm, travel {stats.travel_distance:.0f}mm, "
            f"~{stats.estimated_time / 60:.1f} min"
        )

    if args.per_layer:
        output = args.output
        used: set[str] = set()
        for svg, layer in build_svg_per_layer(layers, settings.canvas).values():
            stem = f"{output.stem}-{layer_file_stem(layer)}"
            # Same pen and name on two outputs
            suffix = 2
            base = stem
            while stem in used:
                stem = f"{base}-{suffix}"
                suffix += 1
            used.add(stem)
            path = output.with_name(f"{stem}{output.suffix}")
            path.write_text(svg, encoding="utf-8")
            logger.info(f"Wrote {path}")
    else:
        args.output.write_text(build_svg(layers, settings.canvas, for_export=True), encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    return 0


def list_nodes() -> int:
    from plotcraft.core.node_types import NodeCategory
    from plotcraft.nodes import create_node_registry

    registry = create_node_registry()
    for category in NodeCategory:
        for node_type in sorted(registry.list_by_category(category), key=lambda t: t.id):
            print(f"{category.value:<10} {node_type.id:<18} {node_type.description}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for PlotCraft.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    # Ensure we're running Python 3.11+
    if sys.version_info < (3, 11):
        print("Error: PlotCraft requires Python 3.11 or later")
        return 1

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "render":
        return render(args)
    return list_nodes()


if __name__ == "__main__":
    sys.exit(main())
