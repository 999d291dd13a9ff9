"""
WiFi Scan Map - Core Library
============================
Data model, persistence, acquisition workflow and CSV export for
geotagged WiFi surveys.
"""

from .acquisition import (
    Acquisition,
    AcquisitionResult,
    AcquisitionState,
    parse_position,
    prompt_new_scan_map,
)
from .errors import (
    InvalidInput,
    InvalidTarget,
    NotFoundError,
    ParseError,
    ScanFailure,
    ScanMapError,
    ScanMapIOError,
)
from .exporter import export_csv
from .json_utils import (
    get_timestamp_ms,
    load_scan_map,
    save_scan_map,
    scan_map_from_dict,
    scan_map_to_dict,
)
from .models import Coordinate, NetworkObservation, Node, ScanMap, VisibleNetwork
from .recorder import record_loop, record_node

__version__ = "0.1.0"

__all__ = [
    'Acquisition',
    'AcquisitionResult',
    'AcquisitionState',
    'Coordinate',
    'InvalidInput',
    'InvalidTarget',
    'NetworkObservation',
    'Node',
    'NotFoundError',
    'ParseError',
    'ScanFailure',
    'ScanMap',
    'ScanMapError',
    'ScanMapIOError',
    'VisibleNetwork',
    'export_csv',
    'get_timestamp_ms',
    'load_scan_map',
    'parse_position',
    'prompt_new_scan_map',
    'record_loop',
    'record_node',
    'save_scan_map',
    'scan_map_from_dict',
    'scan_map_to_dict',
]
