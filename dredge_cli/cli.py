"""
Dredge Zone CLI - Main entry point.

Provides a command-line interface to compute selection statistics, export
selections as GeoJSON, summarize project trends and edit a project
boundary stored as YAML.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dredge_zone import (
    BoundaryEditor,
    DashboardConfig,
    DepthRange,
    FileExportSink,
    GeoPoint,
    MqttExportSink,
    SelectionSession,
    critical_records,
    monthly_trends,
    peak_month,
    select_records,
    summarize_project,
)
from dredge_zone.logging import create_logger

from .store import BoundaryStore, load_records, load_selection


def load_config(config_path: Optional[str]) -> DashboardConfig:
    """
    Load dashboard configuration (defaults when no path is given).

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if not config_path:
        return DashboardConfig()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    return DashboardConfig.from_yaml(path)


def build_session(args: argparse.Namespace, config: DashboardConfig) -> SelectionSession:
    """Session from the records, boundary and selection files named in args."""
    records = select_records(load_records(args.records), project_id=args.project)
    boundary = BoundaryStore(args.boundary).load() if args.boundary else None

    session = SelectionSession(records, boundary_vertices=boundary, config=config)
    if args.hide_boundary:
        session.set_boundary_visible(False)
    if args.selection:
        session.dispatch('polygon_created', load_selection(args.selection))
    if args.min_depth is not None or args.max_depth is not None:
        current = session.depth_range
        session.set_depth_range(DepthRange(
            minimum=current.minimum if args.min_depth is None else args.min_depth,
            maximum=current.maximum if args.max_depth is None else args.max_depth,
        ))
    return session


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_stats(args: argparse.Namespace, config: DashboardConfig) -> None:
    session = build_session(args, config)
    stats = session.stats
    if stats is None:
        print("No active selection (no polygon or no records).")
        return
    print_json(stats.to_dict())


def cmd_export(args: argparse.Namespace, config: DashboardConfig) -> None:
    session = build_session(args, config)
    document, filename = session.export()

    if args.publish:
        if config.mqtt is None:
            raise ValueError("--publish requires an 'mqtt' block in the config file")
        sink = MqttExportSink(
            broker_host=config.mqtt.broker,
            broker_port=config.mqtt.port,
            topic=config.mqtt.topic,
            username=config.mqtt.username,
            password=config.mqtt.password,
            qos=config.mqtt.qos,
        )
        if not sink.connect(timeout=5.0):
            raise ConnectionError(f"Could not connect to MQTT broker {config.mqtt.broker}:{config.mqtt.port}")
        try:
            if not sink.deliver(document, filename):
                raise ConnectionError("MQTT broker rejected the export")
        finally:
            sink.disconnect()
        print(f"Published {filename} to {config.mqtt.topic}")
    else:
        path = FileExportSink(Path(args.output_dir)).deliver(document, filename)
        print(f"Wrote {path}")


def cmd_trends(args: argparse.Namespace, config: DashboardConfig) -> None:
    records = select_records(load_records(args.records), project_id=args.project)
    trends = monthly_trends(records)
    peak = peak_month(trends)
    print_json({
        'months': [t.to_dict() for t in trends],
        'peak_month': peak.month if peak else None,
    })


def cmd_summary(args: argparse.Namespace, config: DashboardConfig) -> None:
    records = select_records(load_records(args.records), project_id=args.project, search=args.search)
    target_depth = config.target_depth if args.target_depth is None else args.target_depth
    summary: Dict[str, Any] = summarize_project(records).to_dict()
    summary['target_depth'] = target_depth
    summary['critical_ids'] = [r.id for r in critical_records(records, target_depth)]
    print_json(summary)


def cmd_boundary(args: argparse.Namespace, config: DashboardConfig) -> None:
    store = BoundaryStore(args.file)
    editor = BoundaryEditor(
        vertices=store.load(),
        on_save=store.save,
        logger=create_logger("boundary", level=config.logging_level),
    )

    if args.action == 'add':
        editor.append_vertex(GeoPoint(lat=args.lat, lng=args.lng))
    elif args.action == 'undo':
        editor.undo_last()
    elif args.action == 'remove':
        editor.remove_vertex_at(args.index)
    elif args.action == 'clear':
        editor.clear()

    polygon = editor.to_polygon()
    print_json({
        'vertices': [v.to_dict() for v in editor.vertices],
        'is_polygon': polygon is not None,
        'bounds': polygon.bounds.to_dict() if polygon else None,
    })


def _add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('records', help='Path to records JSON array')
    parser.add_argument('--boundary', help='Project boundary YAML file')
    parser.add_argument('--selection', help='Ad-hoc polygon (GeoJSON or [{lat, lng}] JSON)')
    parser.add_argument('--min-depth', type=float, default=None, help='Minimum depth (m)')
    parser.add_argument('--max-depth', type=float, default=None, help='Maximum depth (m)')
    parser.add_argument('--project', default=None, help='Only records of this project ID')
    parser.add_argument('--hide-boundary', action='store_true', help='Exclude the project boundary')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dredge-zone",
        description="Dredge Zone CLI - Geofenced statistics for dredging field data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Stats inside the project boundary, 5-20 m only
  dredge-zone stats points.json --boundary boundary.yaml --min-depth 5 --max-depth 20

  # Export a drawn selection as GeoJSON
  dredge-zone export points.json --selection area.geojson --output-dir exports/

  # Monthly production and shallow points
  dredge-zone trends points.json --project santos
  dredge-zone summary points.json --target-depth 12

  # Edit the project boundary
  dredge-zone boundary add boundary.yaml -23.960 -46.335
  dredge-zone boundary undo boundary.yaml
  dredge-zone boundary remove boundary.yaml 2
"""
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Dashboard config YAML (default: built-in defaults)"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    stats = subparsers.add_parser('stats', help='Selection statistics as JSON')
    _add_selection_arguments(stats)

    export = subparsers.add_parser('export', help='Export selection as GeoJSON')
    _add_selection_arguments(export)
    export.add_argument('--output-dir', default='.', help='Directory for the exported file')
    export.add_argument('--publish', action='store_true', help='Publish to the configured MQTT topic')

    trends = subparsers.add_parser('trends', help='Monthly production trends')
    trends.add_argument('records', help='Path to records JSON array')
    trends.add_argument('--project', default=None, help='Only records of this project ID')

    summary = subparsers.add_parser('summary', help='Project totals and shallow points')
    summary.add_argument('records', help='Path to records JSON array')
    summary.add_argument('--project', default=None, help='Only records of this project ID')
    summary.add_argument('--search', default=None, help='Vessel / material / notes search term')
    summary.add_argument('--target-depth', type=float, default=None, help='Design depth (m)')

    boundary = subparsers.add_parser('boundary', help='Edit the project boundary')
    actions = boundary.add_subparsers(dest='action', required=True)

    show = actions.add_parser('show', help='Show boundary vertices')
    show.add_argument('file', help='Boundary YAML file')

    add = actions.add_parser('add', help='Append a vertex')
    add.add_argument('file', help='Boundary YAML file')
    add.add_argument('lat', type=float, help='Latitude')
    add.add_argument('lng', type=float, help='Longitude')

    undo = actions.add_parser('undo', help='Remove the last vertex')
    undo.add_argument('file', help='Boundary YAML file')

    remove = actions.add_parser('remove', help='Remove a vertex by index')
    remove.add_argument('file', help='Boundary YAML file')
    remove.add_argument('index', type=int, help='Zero-based vertex index')

    clear = actions.add_parser('clear', help='Remove all vertices')
    clear.add_argument('file', help='Boundary YAML file')

    return parser


COMMANDS = {
    'stats': cmd_stats,
    'export': cmd_export,
    'trends': cmd_trends,
    'summary': cmd_summary,
    'boundary': cmd_boundary,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
        COMMANDS[args.command](args, config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
