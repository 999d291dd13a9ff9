"""
WiFi Scan Map - Configuration
=============================
Central registry of defaults and environment overrides.

Environment:
    SCANMAP_LOG_LEVEL: Logging level name (default: WARNING)
    SCANMAP_INTERFACE: Preferred wireless interface for scans
    SCANMAP_SCAN_TIMEOUT: Scan tool timeout in seconds (default: 30)
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

NODES_CSV_NAME = "nodes.csv"
NETWORKS_CSV_NAME = "networks.csv"

NODES_CSV_COLUMNS = ["index", "x", "y", "z", "notes"]
NETWORKS_CSV_COLUMNS = ["node_index", "mac", "ssid", "channel", "strength", "time_scanned"]

JSON_INDENT = 2

DEFAULT_SCAN_TIMEOUT = 30.0
DEFAULT_WEB_HOST = "127.0.0.1"
DEFAULT_WEB_PORT = 8080
DEFAULT_LOG_LEVEL = "WARNING"


def get_log_level() -> int:
    """Resolve the log level from SCANMAP_LOG_LEVEL."""
    name = os.environ.get("SCANMAP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning("Unknown SCANMAP_LOG_LEVEL %r, using %s", name, DEFAULT_LOG_LEVEL)
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    return level


def get_interface() -> Optional[str]:
    """Preferred wireless interface, or None to auto-detect."""
    return os.environ.get("SCANMAP_INTERFACE") or None


def get_scan_timeout() -> float:
    """Scan tool timeout in seconds from SCANMAP_SCAN_TIMEOUT."""
    raw = os.environ.get("SCANMAP_SCAN_TIMEOUT")
    if not raw:
        return DEFAULT_SCAN_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        timeout = -1.0
    if timeout <= 0:
        logger.warning("Invalid SCANMAP_SCAN_TIMEOUT %r, using %s", raw, DEFAULT_SCAN_TIMEOUT)
        return DEFAULT_SCAN_TIMEOUT
    return timeout
