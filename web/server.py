#!/usr/bin/env python3
"""
WiFi Scan Map - Web API Server
==============================
Optional localhost JSON API for reading a scan map file.

The file is re-read on every request, so a recorder running in another
terminal is picked up without restarting the server. Nothing is written.

Routes:
- GET /api/map                  name, notes and node count
- GET /api/nodes                nodes table
- GET /api/nodes/<index>        one node with its networks
- GET /api/networks             networks table
- GET /api/export/nodes.csv     nodes table as CSV
- GET /api/export/networks.csv  networks table as CSV
"""

import argparse
import logging
import os
import sys
from datetime import datetime

from flask import Flask, Response, jsonify

from scanmap.config import (
    DEFAULT_WEB_HOST,
    DEFAULT_WEB_PORT,
    NETWORKS_CSV_COLUMNS,
    NETWORKS_CSV_NAME,
    NODES_CSV_COLUMNS,
    NODES_CSV_NAME,
)
from scanmap.errors import NotFoundError, ScanMapError
from scanmap.exporter import network_rows, node_rows, rows_to_csv
from scanmap.json_utils import load_scan_map, scan_map_to_dict

logger = logging.getLogger(__name__)


def create_app(map_path: str) -> Flask:
    """
    Create Flask application.

    Args:
        map_path: Path to the scan map file

    Returns:
        Flask application instance
    """
    app = Flask(__name__)
    app.config['MAP_PATH'] = map_path

    @app.errorhandler(NotFoundError)
    def handle_not_found(error):
        return jsonify({'error': str(error)}), 404

    @app.errorhandler(ScanMapError)
    def handle_scan_map_error(error):
        logger.error("Cannot serve %s: %s", map_path, error)
        return jsonify({'error': str(error)}), 500

    @app.route('/api/map')
    def api_map():
        """Overview of the scan map."""
        scan_map = load_scan_map(map_path)
        return jsonify({
            'name': scan_map.name,
            'notes': scan_map.notes,
            'node_count': len(scan_map.nodes),
            'network_count': scan_map.network_count,
            'timestamp': datetime.now().isoformat()
        })

    @app.route('/api/nodes')
    def api_nodes():
        rows = node_rows(load_scan_map(map_path))
        return jsonify({'nodes': rows, 'count': len(rows)})

    @app.route('/api/nodes/<int:index>')
    def api_node(index: int):
        """A single node, including its networks."""
        nodes = scan_map_to_dict(load_scan_map(map_path))['nodes']
        if index >= len(nodes):
            return jsonify({'error': f'no node with index {index}'}), 404
        return jsonify({'index': index, **nodes[index]})

    @app.route('/api/networks')
    def api_networks():
        rows = network_rows(load_scan_map(map_path))
        return jsonify({'networks': rows, 'count': len(rows)})

    @app.route(f'/api/export/{NODES_CSV_NAME}')
    def api_export_nodes():
        text = rows_to_csv(node_rows(load_scan_map(map_path)), NODES_CSV_COLUMNS)
        return Response(text, mimetype='text/csv')

    @app.route(f'/api/export/{NETWORKS_CSV_NAME}')
    def api_export_networks():
        text = rows_to_csv(network_rows(load_scan_map(map_path)), NETWORKS_CSV_COLUMNS)
        return Response(text, mimetype='text/csv')

    return app


def run_server(map_path: str, host: str = DEFAULT_WEB_HOST, port: int = DEFAULT_WEB_PORT,
               debug: bool = False) -> None:
    """
    Run the web API server.

    Args:
        map_path: Path to the scan map file
        host: Host address to bind to
        port: Port number
        debug: Enable debug mode
    """
    if not os.path.exists(map_path):
        raise NotFoundError(f"scan map file not found: {map_path}")

    app = create_app(map_path)

    print(f"Starting scan map API at http://{host}:{port}/api/map")
    print(f"Reading scan map from: {map_path}")
    print("Press Ctrl+C to stop")

    app.run(host=host, port=port, debug=debug)


def main():
    """Main entry point for web server."""
    parser = argparse.ArgumentParser(
        description="Web API - Read-only HTTP access to a scan map"
    )
    parser.add_argument(
        "--map-file", "-f",
        required=True,
        help="Scan map file to serve"
    )
    parser.add_argument(
        "--host", "-H",
        default=DEFAULT_WEB_HOST,
        help=f"Host address to bind to (default: {DEFAULT_WEB_HOST})"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=DEFAULT_WEB_PORT,
        help=f"Port number (default: {DEFAULT_WEB_PORT})"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug mode"
    )

    args = parser.parse_args()

    try:
        run_server(args.map_file, host=args.host, port=args.port, debug=args.debug)
    except ScanMapError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
