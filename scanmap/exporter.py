"""
WiFi Scan Map - CSV Export
==========================
Flattens a scan map into two tables: one row per node, one row per network
observation keyed by the owning node's index.
"""

import csv
import io
import logging
import os
from typing import Any, Dict, List, Sequence, Tuple

from .config import NETWORKS_CSV_COLUMNS, NETWORKS_CSV_NAME, NODES_CSV_COLUMNS, NODES_CSV_NAME
from .errors import InvalidTarget, ScanMapIOError
from .json_utils import PathLike
from .models import ScanMap

logger = logging.getLogger(__name__)


def node_rows(scan_map: ScanMap) -> List[Dict[str, Any]]:
    """
    Flatten nodes into table rows. The index is the storage order.

    Args:
        scan_map: Scan map to flatten

    Returns:
        List of row dictionaries keyed by NODES_CSV_COLUMNS
    """
    return [
        {
            "index": index,
            "x": node.position.x,
            "y": node.position.y,
            "z": node.position.z,
            "notes": node.notes,
        }
        for index, node in enumerate(scan_map.nodes)
    ]


def network_rows(scan_map: ScanMap) -> List[Dict[str, Any]]:
    """
    Flatten every network observation into table rows.

    Args:
        scan_map: Scan map to flatten

    Returns:
        List of row dictionaries keyed by NETWORKS_CSV_COLUMNS
    """
    rows = []
    for index, node in enumerate(scan_map.nodes):
        for net in node.networks:
            rows.append({
                "node_index": index,
                "mac": net.mac,
                "ssid": net.ssid,
                "channel": net.channel,
                "strength": net.strength,
                "time_scanned": net.time_scanned,
            })
    return rows


def rows_to_csv(rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> str:
    """Render rows as CSV text with a header line."""
    buffer = io.StringIO(newline='')
    writer = csv.DictWriter(buffer, fieldnames=list(columns))
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def _write_table(rows: Sequence[Dict[str, Any]], columns: Sequence[str], output_path: str) -> str:
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=list(columns))
        writer.writeheader()
        writer.writerows(rows)
    return output_path


def export_csv(scan_map: ScanMap, output_dir: PathLike) -> Tuple[str, str]:
    """
    Export a scan map to nodes.csv and networks.csv.

    The directory is created if it does not exist. Existing files with the
    same names are overwritten. The scan map is not modified.

    Args:
        scan_map: Scan map to export
        output_dir: Directory to write the two tables to

    Returns:
        Tuple of (nodes.csv path, networks.csv path)

    Raises:
        InvalidTarget: If output_dir exists and is not a directory
        ScanMapIOError: If the directory or files cannot be written
    """
    output_dir = os.fspath(output_dir)
    if os.path.exists(output_dir) and not os.path.isdir(output_dir):
        raise InvalidTarget(f"export target is not a directory: {output_dir}")

    nodes = node_rows(scan_map)
    networks = network_rows(scan_map)

    try:
        os.makedirs(output_dir, exist_ok=True)
        nodes_path = _write_table(nodes, NODES_CSV_COLUMNS,
                                  os.path.join(output_dir, NODES_CSV_NAME))
        networks_path = _write_table(networks, NETWORKS_CSV_COLUMNS,
                                     os.path.join(output_dir, NETWORKS_CSV_NAME))
    except OSError as e:
        raise ScanMapIOError(f"could not export to {output_dir}: {e}") from e

    logger.info("Exported %d nodes and %d networks to %s", len(nodes), len(networks), output_dir)
    return nodes_path, networks_path
