"""
WiFi Scan Map - Data Model
==========================
Value types for a wireless survey: coordinates, network observations,
recorded nodes and the scan map that owns them.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Coordinate:
    """
    Position in the survey coordinate system.

    x and y are a position in the horizontal plane, z is the height.
    Values are held as Python floats (64-bit), wider than the 32-bit floats
    of the survey format; every 32-bit value round-trips unchanged.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class VisibleNetwork:
    """One entry returned by a scan capability, before it is timestamped."""

    mac: str
    ssid: str
    channel: str
    signal_level: str


@dataclass(frozen=True)
class NetworkObservation:
    """A wireless network measured at one point in time."""

    mac: str
    ssid: str
    channel: str
    # Usually dBm, kept as reported by the scan tool
    strength: str
    # Milliseconds since the Unix epoch
    time_scanned: int

    @classmethod
    def from_visible(cls, network: VisibleNetwork, time_scanned: int) -> 'NetworkObservation':
        return cls(
            mac=network.mac,
            ssid=network.ssid,
            channel=network.channel,
            strength=network.signal_level,
            time_scanned=time_scanned,
        )


@dataclass(frozen=True)
class Node:
    """The result of one scan at one location."""

    position: Coordinate
    notes: str = ""
    networks: Tuple[NetworkObservation, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "networks", tuple(self.networks))


@dataclass
class ScanMap:
    """Holds recorded nodes for one survey. Saved to a single file."""

    name: str = ""
    notes: str = ""
    nodes: List[Node] = field(default_factory=list)

    def append_node(self, node: Node) -> int:
        """
        Append a node in recording order.

        Args:
            node: Node to append

        Returns:
            Index of the new node
        """
        self.nodes.append(node)
        return len(self.nodes) - 1

    @property
    def network_count(self) -> int:
        return sum(len(node.networks) for node in self.nodes)

    def overview(self) -> str:
        """Short human-readable summary of the map."""
        return "\n".join([
            f"name: {self.name}",
            f"notes: {self.notes}",
            f"# nodes: {len(self.nodes)}",
        ])
