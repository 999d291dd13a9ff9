"""
WiFi Scan Map - JSON Persistence
================================
Reads and writes scan map documents. The document is a single JSON object
with the fields ``name``, ``notes`` and ``nodes``; every node carries
``position {x, y, z}``, ``notes`` and ``networks``, every network carries
``mac``, ``ssid``, ``channel``, ``strength`` and ``time_scanned``.
"""

import json
import math
import logging
import os
import stat
import tempfile
import time
from typing import Any, Dict, Union

from .config import JSON_INDENT
from .errors import NotFoundError, ParseError, ScanMapIOError
from .models import Coordinate, NetworkObservation, Node, ScanMap

logger = logging.getLogger(__name__)

PathLike = Union[str, 'os.PathLike[str]']

# time_scanned is an unsigned 128-bit integer
_MAX_TIMESTAMP = 2 ** 128 - 1


def get_timestamp_ms() -> int:
    """Get current time in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def scan_map_to_dict(scan_map: ScanMap) -> Dict[str, Any]:
    """
    Convert a scan map to its JSON document structure.

    Args:
        scan_map: Scan map to convert

    Returns:
        Dictionary ready for json.dump
    """
    return {
        "name": scan_map.name,
        "notes": scan_map.notes,
        "nodes": [
            {
                "position": {
                    "x": node.position.x,
                    "y": node.position.y,
                    "z": node.position.z,
                },
                "notes": node.notes,
                "networks": [
                    {
                        "mac": net.mac,
                        "ssid": net.ssid,
                        "channel": net.channel,
                        "strength": net.strength,
                        "time_scanned": net.time_scanned,
                    }
                    for net in node.networks
                ],
            }
            for node in scan_map.nodes
        ],
    }


def _field(data: Any, key: str, where: str) -> Any:
    if not isinstance(data, dict):
        raise ParseError(f"{where}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise ParseError(f"{where}: missing field '{key}'")
    return data[key]


def _str_field(data: Any, key: str, where: str) -> str:
    value = _field(data, key, where)
    if not isinstance(value, str):
        raise ParseError(f"{where}.{key}: expected a string, got {type(value).__name__}")
    return value


def _float_field(data: Any, key: str, where: str) -> float:
    value = _field(data, key, where)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"{where}.{key}: expected a number, got {type(value).__name__}")
    try:
        result = float(value)
    except OverflowError as e:
        raise ParseError(f"{where}.{key}: number out of range") from e
    if not math.isfinite(result):
        raise ParseError(f"{where}.{key}: must be a finite number")
    return result


def _list_field(data: Any, key: str, where: str) -> list:
    value = _field(data, key, where)
    if not isinstance(value, list):
        raise ParseError(f"{where}.{key}: expected an array, got {type(value).__name__}")
    return value


def _network_from_dict(data: Any, where: str) -> NetworkObservation:
    time_scanned = _field(data, "time_scanned", where)
    if isinstance(time_scanned, bool) or not isinstance(time_scanned, int):
        raise ParseError(f"{where}.time_scanned: expected an integer")
    if not 0 <= time_scanned <= _MAX_TIMESTAMP:
        raise ParseError(f"{where}.time_scanned: out of range")

    return NetworkObservation(
        mac=_str_field(data, "mac", where),
        ssid=_str_field(data, "ssid", where),
        channel=_str_field(data, "channel", where),
        strength=_str_field(data, "strength", where),
        time_scanned=time_scanned,
    )


def _node_from_dict(data: Any, where: str) -> Node:
    position = _field(data, "position", where)
    coordinate = Coordinate(
        x=_float_field(position, "x", f"{where}.position"),
        y=_float_field(position, "y", f"{where}.position"),
        z=_float_field(position, "z", f"{where}.position"),
    )
    networks = [
        _network_from_dict(item, f"{where}.networks[{i}]")
        for i, item in enumerate(_list_field(data, "networks", where))
    ]
    return Node(position=coordinate, notes=_str_field(data, "notes", where), networks=networks)


def scan_map_from_dict(data: Any) -> ScanMap:
    """
    Build a scan map from a decoded JSON document.

    Fields are taken verbatim; an empty name is accepted. Unknown extra
    fields are ignored.

    Args:
        data: Decoded JSON document

    Returns:
        Scan map

    Raises:
        ParseError: If a required field is missing or has the wrong type
    """
    nodes = [
        _node_from_dict(item, f"nodes[{i}]")
        for i, item in enumerate(_list_field(data, "nodes", "scan map"))
    ]
    return ScanMap(
        name=_str_field(data, "name", "scan map"),
        notes=_str_field(data, "notes", "scan map"),
        nodes=nodes,
    )


def _target_mode(filepath: str) -> int:
    # mkstemp creates 0600 files; keep the mode of the file being replaced
    try:
        return stat.S_IMODE(os.stat(filepath).st_mode)
    except FileNotFoundError:
        return 0o644


def _reject_constant(name: str) -> float:
    raise ParseError(f"invalid number literal {name}")


def load_scan_map(filepath: PathLike) -> ScanMap:
    """
    Load a scan map from a JSON file.

    Args:
        filepath: Path to the scan map file

    Returns:
        Loaded scan map

    Raises:
        NotFoundError: If the file does not exist
        ParseError: If the file is not a valid scan map document
        ScanMapIOError: If the file cannot be read
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f, parse_constant=_reject_constant)
    except FileNotFoundError as e:
        raise NotFoundError(f"scan map file not found: {filepath}") from e
    except (ValueError, UnicodeDecodeError, RecursionError) as e:
        raise ParseError(f"{filepath}: not valid JSON: {e}") from e
    except OSError as e:
        raise ScanMapIOError(f"could not read {filepath}: {e}") from e

    try:
        scan_map = scan_map_from_dict(data)
    except ParseError as e:
        raise ParseError(f"{filepath}: {e}") from e

    logger.debug("Loaded %d nodes from %s", len(scan_map.nodes), filepath)
    return scan_map


def save_scan_map(scan_map: ScanMap, filepath: PathLike) -> str:
    """
    Save the whole scan map to a JSON file.

    The document is written to a temporary file next to the target and then
    renamed over it, so the target is either the old or the new content.

    Args:
        scan_map: Scan map to save
        filepath: Path to the scan map file

    Returns:
        Path to saved file

    Raises:
        ScanMapIOError: If the file cannot be written
    """
    filepath = os.fspath(filepath)
    directory = os.path.dirname(os.path.abspath(filepath))

    tmp_path = None
    try:
        document = json.dumps(scan_map_to_dict(scan_map), indent=JSON_INDENT,
                              ensure_ascii=False, allow_nan=False)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=directory,
            prefix=f".{os.path.basename(filepath)}.",
            suffix=".tmp",
        )
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(document)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, _target_mode(filepath))
        os.replace(tmp_path, filepath)
        tmp_path = None
    except (OSError, ValueError) as e:
        # ValueError: a non-finite coordinate has no JSON representation
        raise ScanMapIOError(f"could not save scan map to {filepath}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)

    logger.debug("Saved %d nodes to %s", len(scan_map.nodes), filepath)
    return filepath


def print_json(data: Any, pretty: bool = True) -> None:
    """
    Print data as JSON to stdout.

    Args:
        data: Data to print
        pretty: Whether to pretty-print with indentation
    """
    if pretty:
        print(json.dumps(data, indent=JSON_INDENT, ensure_ascii=False))
    else:
        print(json.dumps(data, ensure_ascii=False))

