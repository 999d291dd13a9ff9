#!/usr/bin/env python3
"""
WiFi Scan Map - Command Line Interface
======================================
Record geotagged WiFi scans into a scan map file and export them.

Usage:
    wifi-scan-map -f survey.json                 # show or create a map
    wifi-scan-map -f survey.json record [--loop] # record node(s)
    wifi-scan-map -f survey.json export-csv out/ # write nodes.csv, networks.csv
    wifi-scan-map -f survey.json overview
    wifi-scan-map -f survey.json serve           # read-only JSON API
"""

import argparse
import functools
import logging
import os
import sys
from typing import List, Optional

from scanners.wifi_scanner import scan_networks
from ui.terminal import TerminalUI

from .acquisition import Acquisition, prompt_new_scan_map
from .config import DEFAULT_WEB_HOST, DEFAULT_WEB_PORT, get_log_level
from .errors import ScanMapError, ScanMapIOError
from .exporter import export_csv
from .json_utils import load_scan_map, save_scan_map
from .logging_config import setup_logging
from .models import ScanMap
from .recorder import record_loop, record_node

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wifi-scan-map",
        description="Map wireless networks"
    )
    parser.add_argument(
        "--map-file", "-f",
        required=True,
        metavar="MAP_FILE",
        help="File to save scan map"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug log output"
    )
    parser.add_argument(
        "--log-file",
        help="Also write log output to this file"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    record = subparsers.add_parser("record", help="Record a new scan to the map")
    record.add_argument(
        "--loop", "-l",
        action="store_true",
        help="Keep recording nodes until interrupted"
    )
    record.add_argument(
        "--interface", "-i",
        help="Wireless interface to scan on (default: auto-detect)"
    )

    export = subparsers.add_parser("export-csv", help="Export the map as nodes.csv and networks.csv")
    export.add_argument("directory", help="Directory to write the CSV files to")

    subparsers.add_parser("overview", help="Print a summary of the map")

    serve = subparsers.add_parser("serve", help="Serve the map over a read-only JSON API")
    serve.add_argument(
        "--host", "-H",
        default=DEFAULT_WEB_HOST,
        help=f"Host address to bind to (default: {DEFAULT_WEB_HOST})"
    )
    serve.add_argument(
        "--port", "-p",
        type=int,
        default=DEFAULT_WEB_PORT,
        help=f"Port number (default: {DEFAULT_WEB_PORT})"
    )

    return parser


def open_scan_map(map_file: str, ui: TerminalUI) -> ScanMap:
    """
    Load the scan map, or create a new one by prompting when the file is missing.

    A loaded map is taken as stored, even with an empty name. A new map
    must be given a non-empty name.
    """
    if os.path.exists(map_file):
        scan_map = load_scan_map(map_file)
        ui.say(f"loaded existing scan map \"{map_file}\"")
        ui.show_overview(scan_map)
        return scan_map

    ui.say(f"creating new scan map \"{map_file}\"")
    return prompt_new_scan_map(ui.read_line, report=ui.say)


def run_record(args: argparse.Namespace, ui: TerminalUI) -> None:
    scan_map = open_scan_map(args.map_file, ui)

    acquisition = Acquisition(
        read_line=ui.read_line,
        scan_networks=functools.partial(scan_networks, interface=args.interface),
        report=ui.say,
    )

    if args.loop:
        ui.say("[*] Recording nodes, press Ctrl+C to stop")
        record_loop(scan_map, args.map_file, acquisition, on_recorded=ui.show_recorded)
    else:
        result = record_node(scan_map, args.map_file, acquisition)
        ui.show_recorded(result)


def run_default(args: argparse.Namespace, ui: TerminalUI) -> None:
    existed = os.path.exists(args.map_file)
    scan_map = open_scan_map(args.map_file, ui)
    if not existed:
        save_scan_map(scan_map, args.map_file)
        ui.say(f"[+] Saved new scan map to: {args.map_file}")


def run_export(args: argparse.Namespace, ui: TerminalUI) -> None:
    scan_map = load_scan_map(args.map_file)
    nodes_path, networks_path = export_csv(scan_map, args.directory)
    ui.say(f"[+] Exported {len(scan_map.nodes)} nodes to: {nodes_path}")
    ui.say(f"[+] Exported {scan_map.network_count} networks to: {networks_path}")


def run_overview(args: argparse.Namespace, ui: TerminalUI) -> None:
    ui.show_overview(load_scan_map(args.map_file))


def run_serve(args: argparse.Namespace, ui: TerminalUI) -> None:
    from web.server import run_server

    run_server(args.map_file, host=args.host, port=args.port)


COMMANDS = {
    None: run_default,
    "record": run_record,
    "export-csv": run_export,
    "overview": run_overview,
    "serve": run_serve,
}


def main(argv: Optional[List[str]] = None, ui: Optional[TerminalUI] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    ui = ui or TerminalUI()

    try:
        try:
            setup_logging(logging.DEBUG if args.verbose else get_log_level(), args.log_file)
        except OSError as e:
            raise ScanMapIOError(f"cannot open log file {args.log_file}: {e}") from e
        COMMANDS[args.command](args, ui)
    except ScanMapError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except EOFError:
        print("error: input closed", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n[*] Interrupted", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
