"""
WiFi Scan Map - Acquisition Workflow
====================================
Prompts for a position and notes, performs one scan and builds one Node.

The workflow moves through COLLECT_POSITION -> COLLECT_NOTES -> SCAN -> DONE.
Malformed positions are reported and re-prompted; a failed scan aborts the
acquisition without producing a node. Appending and saving are up to the
caller (see scanmap.recorder).
"""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidInput, ScanFailure
from .json_utils import get_timestamp_ms
from .models import Coordinate, NetworkObservation, Node, ScanMap, VisibleNetwork

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], str]
ScanNetworks = Callable[[], Iterable[Union[VisibleNetwork, Mapping[str, Any]]]]
Report = Callable[[str], None]

POSITION_PROMPT = "x y z: "
NOTES_PROMPT = "notes: "
NAME_PROMPT = "name: "

NO_NETWORKS_WARNING = "no networks found"


class AcquisitionState(Enum):
    COLLECT_POSITION = "collect_position"
    COLLECT_NOTES = "collect_notes"
    SCAN = "scan"
    DONE = "done"


@dataclass
class AcquisitionResult:
    """Outcome of one acquisition."""

    node: Node
    # Same observations as node.networks with SSIDs right-padded for printing
    display_networks: List[NetworkObservation] = field(default_factory=list)
    ssid_width: int = 0
    warnings: List[str] = field(default_factory=list)


def _strip_newline(line: str) -> str:
    return line.rstrip("\r\n")


def parse_position(line: str) -> Coordinate:
    """
    Parse "x y z" into a Coordinate.

    Args:
        line: Three whitespace-separated numbers

    Returns:
        Parsed coordinate

    Raises:
        InvalidInput: If the token count is wrong or a token is not a finite float
    """
    parts = line.split()
    if len(parts) != 3:
        raise InvalidInput("must be in format: x y z")

    values = []
    for axis, token in zip("xyz", parts):
        try:
            value = float(token)
        except ValueError:
            raise InvalidInput(f"failed to parse {axis} as float: {token!r}") from None
        if not math.isfinite(value):
            raise InvalidInput(f"{axis} must be a finite number: {token!r}")
        values.append(value)

    return Coordinate(*values)


def sort_networks(networks: Sequence[NetworkObservation]) -> List[NetworkObservation]:
    """Sort by MAC, comparing the UTF-8 bytes. Equal MACs keep scan order."""
    return sorted(networks, key=lambda net: net.mac.encode("utf-8"))


def pad_ssids(networks: Sequence[NetworkObservation]) -> Tuple[int, List[NetworkObservation]]:
    """
    Make a display copy with every SSID right-padded to the longest one.

    Returns:
        Tuple of (ssid width, padded copies)
    """
    width = max((len(net.ssid) for net in networks), default=0)
    return width, [replace(net, ssid=net.ssid.ljust(width)) for net in networks]


def _as_visible(item: Union[VisibleNetwork, Mapping[str, Any]]) -> VisibleNetwork:
    if isinstance(item, VisibleNetwork):
        return item
    try:
        return VisibleNetwork(
            mac=str(item["mac"]),
            ssid=str(item["ssid"]),
            channel=str(item["channel"]),
            signal_level=str(item["signal_level"]),
        )
    except (KeyError, TypeError) as e:
        raise ScanFailure(f"malformed scan result {item!r}: {e}") from e


class Acquisition:
    """Builds one Node from interactive input and a single scan."""

    def __init__(
        self,
        read_line: ReadLine,
        scan_networks: ScanNetworks,
        clock: Callable[[], int] = get_timestamp_ms,
        report: Optional[Report] = None,
    ):
        """
        Initialize the workflow.

        Args:
            read_line: Returns one line of user input for the given prompt
            scan_networks: Returns the currently visible networks, raises ScanFailure
            clock: Returns milliseconds since the Unix epoch
            report: Receives input problems to show the user (default: print)
        """
        self.read_line = read_line
        self.scan_networks = scan_networks
        self.clock = clock
        self.report = report or print
        self.state = AcquisitionState.COLLECT_POSITION

        self._position: Optional[Coordinate] = None
        self._notes = ""
        self._result: Optional[AcquisitionResult] = None

    def run(self) -> AcquisitionResult:
        """
        Run the workflow to completion.

        Returns:
            The acquisition result holding the new node

        Raises:
            ScanFailure: If the scan capability fails. No node is produced.
        """
        self.state = AcquisitionState.COLLECT_POSITION
        self._result = None

        while self.state is not AcquisitionState.DONE:
            if self.state is AcquisitionState.COLLECT_POSITION:
                self._position = self._collect_position()
                self.state = AcquisitionState.COLLECT_NOTES
            elif self.state is AcquisitionState.COLLECT_NOTES:
                self._notes = _strip_newline(self.read_line(NOTES_PROMPT))
                self.state = AcquisitionState.SCAN
            elif self.state is AcquisitionState.SCAN:
                self._result = self._scan()
                self.state = AcquisitionState.DONE

        return self._result

    def _collect_position(self) -> Coordinate:
        while True:
            line = _strip_newline(self.read_line(POSITION_PROMPT))
            try:
                return parse_position(line)
            except InvalidInput as e:
                logger.debug("Rejected position input %r: %s", line, e)
                self.report(str(e))

    def _scan(self) -> AcquisitionResult:
        time_scanned = self.clock()
        try:
            visible = [_as_visible(item) for item in self.scan_networks()]
        except ScanFailure as e:
            logger.error("Scan failed: %s", e)
            raise

        networks = sort_networks([
            NetworkObservation.from_visible(net, time_scanned) for net in visible
        ])

        warnings = []
        if not networks:
            logger.warning("Scan at %s returned no networks", self._position)
            warnings.append(NO_NETWORKS_WARNING)

        node = Node(position=self._position, notes=self._notes, networks=networks)
        width, display = pad_ssids(networks)
        logger.info("Acquired node at %s with %d networks", self._position, len(networks))

        return AcquisitionResult(
            node=node,
            display_networks=display,
            ssid_width=width,
            warnings=warnings,
        )


def prompt_new_scan_map(read_line: ReadLine, report: Optional[Report] = None) -> ScanMap:
    """
    Create a new scan map by prompting for its name and notes.

    The name is re-prompted until it is non-empty.

    Args:
        read_line: Returns one line of user input for the given prompt
        report: Receives input problems to show the user (default: print)

    Returns:
        New, empty scan map
    """
    report = report or print

    while True:
        name = _strip_newline(read_line(NAME_PROMPT))
        if name:
            break
        report("name cannot be empty")

    notes = _strip_newline(read_line(NOTES_PROMPT))
    return ScanMap(name=name, notes=notes)
