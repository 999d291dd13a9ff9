"""
WiFi Scan Map - Recorder
========================
Appends acquired nodes to a scan map and persists the map after each one.
"""

import logging
from typing import Callable, Optional

from .acquisition import Acquisition, AcquisitionResult
from .json_utils import PathLike, save_scan_map
from .models import ScanMap

logger = logging.getLogger(__name__)


def record_node(scan_map: ScanMap, map_path: PathLike, acquisition: Acquisition) -> AcquisitionResult:
    """
    Acquire one node, append it and save the whole map.

    If the scan or the save fails, the in-memory map is left as it was and
    the error propagates.

    Args:
        scan_map: Map to append to
        map_path: File to save the map to
        acquisition: Workflow producing the node

    Returns:
        The acquisition result for the appended node
    """
    result = acquisition.run()

    index = scan_map.append_node(result.node)
    try:
        save_scan_map(scan_map, map_path)
    except Exception:
        del scan_map.nodes[index]
        raise

    logger.info("Recorded node %d in %s", index, map_path)
    return result


def record_loop(
    scan_map: ScanMap,
    map_path: PathLike,
    acquisition: Acquisition,
    on_recorded: Optional[Callable[[AcquisitionResult], None]] = None,
    limit: Optional[int] = None,
) -> int:
    """
    Record nodes one after another.

    Runs until interrupted, or until ``limit`` nodes were recorded. Each node
    is saved before the next acquisition starts.

    Args:
        scan_map: Map to append to
        map_path: File to save the map to
        acquisition: Workflow producing each node
        on_recorded: Called with each result after it was saved
        limit: Optional maximum number of nodes to record

    Returns:
        Number of nodes recorded
    """
    recorded = 0
    while limit is None or recorded < limit:
        result = record_node(scan_map, map_path, acquisition)
        recorded += 1
        if on_recorded:
            on_recorded(result)
    return recorded
