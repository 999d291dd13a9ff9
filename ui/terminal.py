"""
WiFi Scan Map - Terminal UI
===========================
Line-based interactive input and plain-text output for the recorder.
"""

import sys
from typing import List, Optional, TextIO

from scanmap.acquisition import AcquisitionResult
from scanmap.models import ScanMap


class TerminalUI:
    """Reads answers from stdin and prints results to stdout."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        """
        Initialize terminal UI.

        Args:
            stdin: Input stream (default: sys.stdin)
            stdout: Output stream (default: sys.stdout)
        """
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def read_line(self, prompt: str) -> str:
        """
        Show a prompt and read one line.

        Raises:
            EOFError: If input is closed
        """
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("input closed")
        return line.rstrip("\r\n")

    def say(self, message: str = "") -> None:
        print(message, file=self.stdout)

    def warn(self, message: str) -> None:
        print(f"[!] {message}", file=self.stdout)

    def show_overview(self, scan_map: ScanMap) -> None:
        self.say(scan_map.overview())

    def show_recorded(self, result: AcquisitionResult) -> None:
        """Print the recorded node and its networks as an aligned table."""
        position = result.node.position
        self.say(f"added node at ({position.x}, {position.y}, {position.z}) "
                 f"with {len(result.node.networks)} networks")
        for warning in result.warnings:
            self.warn(warning)
        for line in format_network_table(result):
            self.say(line)


def format_network_table(result: AcquisitionResult) -> List[str]:
    """
    Format the display copy of a node's networks, one line each.

    SSIDs are already padded to a common width by the acquisition.
    """
    if not result.display_networks:
        return []

    header = f"    {'MAC':<17}  {'SSID'.ljust(result.ssid_width)}  {'CH':<4} SIGNAL"
    lines = [header]
    for net in result.display_networks:
        lines.append(f"    {net.mac:<17}  {net.ssid}  {net.channel:<4} {net.strength}")
    return lines
