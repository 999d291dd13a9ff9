#!/usr/bin/env python3
"""
WiFi Scan Map - WiFi Scanner Module
===================================
Lists the wireless networks currently visible to this machine.

Backends, in order of preference:
- iw (Linux, usually needs root for a fresh scan)
- iwlist (Linux wireless-tools, when iw is not installed)
- termux-wifi-scaninfo (Android via Termux-API, when no interface is found)

Signal level and channel are passed through as the tool reports them.
"""

import argparse
import json
import logging
import os
import re
import subprocess
import sys
from dataclasses import asdict
from typing import List, Optional

from scanmap.config import get_interface, get_scan_timeout
from scanmap.errors import ScanFailure
from scanmap.json_utils import print_json
from scanmap.models import VisibleNetwork

logger = logging.getLogger(__name__)


def _run_tool(cmd: List[str], timeout: float) -> str:
    """
    Run a scan tool and return its stdout.

    Raises:
        FileNotFoundError: If the tool is not installed
        ScanFailure: If the tool cannot be run, times out or exits with an error
    """
    logger.debug("Running %s", " ".join(cmd))
    try:
        # ESSIDs are raw bytes and need not be valid UTF-8
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            errors='replace',
            timeout=timeout
        )
    except subprocess.TimeoutExpired as e:
        raise ScanFailure(f"{cmd[0]} timed out after {timeout:g}s") from e
    except FileNotFoundError:
        raise
    except OSError as e:
        raise ScanFailure(f"cannot run {cmd[0]}: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        raise ScanFailure(f"{' '.join(cmd)} failed (exit {result.returncode}): {detail}")

    return result.stdout


def get_wireless_interfaces(timeout: float = 5) -> List[str]:
    """
    Get list of wireless interfaces.

    Returns:
        List of wireless interface names
    """
    interfaces = []

    try:
        output = _run_tool(['iw', 'dev'], timeout)
        for line in output.split('\n'):
            parts = line.split()
            if len(parts) >= 2 and parts[0] == 'Interface':
                interfaces.append(parts[1])
        if interfaces:
            return interfaces
    except (FileNotFoundError, ScanFailure) as e:
        logger.debug("iw dev unavailable: %s", e)

    # Fallback: Check /sys/class/net/*/wireless
    try:
        for iface in sorted(os.listdir('/sys/class/net')):
            if os.path.exists(f'/sys/class/net/{iface}/wireless'):
                interfaces.append(iface)
    except OSError as e:
        logger.debug("Cannot list /sys/class/net: %s", e)

    return interfaces


def freq_to_channel(freq: int) -> Optional[int]:
    """Convert frequency (MHz) to WiFi channel number."""
    if not freq:
        return None

    # 2.4 GHz band
    if 2412 <= freq <= 2484:
        if freq == 2484:
            return 14
        return (freq - 2407) // 5

    # 5 GHz band
    if 5160 <= freq <= 5885:
        return (freq - 5000) // 5

    # 6 GHz band
    if 5955 <= freq <= 7115:
        return (freq - 5950) // 5

    return None


def parse_iw_scan(output: str) -> List[VisibleNetwork]:
    """
    Parse the output of ``iw dev <iface> scan``.

    Args:
        output: Tool stdout

    Returns:
        Networks in the order the tool listed them
    """
    networks = []
    current = None

    def flush():
        if current is not None:
            if not current['channel'] and current['freq']:
                channel = freq_to_channel(current['freq'])
                current['channel'] = str(channel) if channel else ''
            networks.append(VisibleNetwork(
                mac=current['mac'],
                ssid=current['ssid'],
                channel=current['channel'],
                signal_level=current['signal'],
            ))

    for line in output.split('\n'):
        stripped = line.strip()

        # New BSS (network)
        bss_match = re.match(r'BSS\s+([0-9a-fA-F:]{17})', stripped)
        if bss_match and not line.startswith((' ', '\t')):
            flush()
            current = {
                'mac': bss_match.group(1).lower(),
                'ssid': '',
                'channel': '',
                'signal': '',
                'freq': 0,
            }
            continue

        if current is None:
            continue

        ssid_match = re.match(r'SSID:\s?(.*)$', stripped)
        if ssid_match:
            current['ssid'] = ssid_match.group(1)
            continue

        freq_match = re.match(r'freq:\s*(\d+)', stripped)
        if freq_match:
            current['freq'] = int(freq_match.group(1))
            continue

        signal_match = re.match(r'signal:\s*(-?\d+(?:\.\d+)?)\s*dBm', stripped)
        if signal_match:
            current['signal'] = signal_match.group(1)
            continue

        channel_match = re.match(r'(?:DS Parameter set: channel|\* primary channel:)\s*(\d+)', stripped)
        if channel_match and not current['channel']:
            current['channel'] = channel_match.group(1)

    flush()
    return networks


def parse_iwlist_scan(output: str) -> List[VisibleNetwork]:
    """
    Parse the output of ``iwlist <iface> scan``.

    Args:
        output: Tool stdout

    Returns:
        Networks in the order the tool listed them
    """
    networks = []
    current = None

    def flush():
        if current is not None:
            networks.append(VisibleNetwork(**current))

    for line in output.split('\n'):
        line = line.strip()

        # New cell (network)
        cell_match = re.match(r'Cell\s+\d+\s+-\s+Address:\s*([0-9a-fA-F:]{17})', line)
        if cell_match:
            flush()
            current = {
                'mac': cell_match.group(1).lower(),
                'ssid': '',
                'channel': '',
                'signal_level': '',
            }
            continue

        if current is None:
            continue

        essid_match = re.match(r'ESSID:"(.*)"', line)
        if essid_match:
            current['ssid'] = essid_match.group(1)
            continue

        channel_match = re.match(r'Channel:(\d+)', line)
        if channel_match:
            current['channel'] = channel_match.group(1)
            continue

        freq_match = re.match(r'Frequency:[\d.]+\s*GHz\s*\(Channel\s+(\d+)\)', line)
        if freq_match and not current['channel']:
            current['channel'] = freq_match.group(1)
            continue

        signal_match = re.search(r'Signal level[=:]\s*(-?\d+(?:\.\d+)?)\s*dBm', line)
        if signal_match:
            current['signal_level'] = signal_match.group(1)

    flush()
    return networks


def parse_termux_scan(output: str) -> List[VisibleNetwork]:
    """
    Parse the JSON output of ``termux-wifi-scaninfo``.

    Raises:
        ScanFailure: If Termux-API reports an error instead of a list of networks
    """
    try:
        data = json.loads(output)
    except (ValueError, RecursionError) as e:
        raise ScanFailure(f"termux-wifi-scaninfo returned invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ScanFailure(f"termux-wifi-scaninfo error: {data}")

    networks = []
    for net in data:
        if not isinstance(net, dict):
            raise ScanFailure(f"termux-wifi-scaninfo returned an unexpected entry: {net!r}")
        freq = net.get('frequency_mhz')
        if isinstance(freq, bool) or not isinstance(freq, int):
            freq = 0
        channel = freq_to_channel(freq)
        rssi = net.get('rssi')
        networks.append(VisibleNetwork(
            mac=str(net.get('bssid', '')).lower(),
            ssid=net.get('ssid') or '',
            channel=str(channel) if channel else '',
            signal_level='' if rssi is None else str(rssi),
        ))
    return networks


def scan_interface(interface: str, timeout: float) -> List[VisibleNetwork]:
    """
    Scan on one interface with iw, or iwlist when iw is not installed.

    Raises:
        ScanFailure: If the scan fails or no scan tool is installed
    """
    try:
        return parse_iw_scan(_run_tool(['iw', 'dev', interface, 'scan'], timeout))
    except FileNotFoundError:
        logger.debug("iw not installed, trying iwlist")

    try:
        return parse_iwlist_scan(_run_tool(['iwlist', interface, 'scan'], timeout))
    except FileNotFoundError as e:
        raise ScanFailure("neither iw nor iwlist is installed") from e


def scan_networks(interface: Optional[str] = None, timeout: Optional[float] = None) -> List[VisibleNetwork]:
    """
    List currently visible networks. A single attempt, no retry.

    Args:
        interface: Wireless interface to scan on (default: SCANMAP_INTERFACE
            or the first detected interface)
        timeout: Tool timeout in seconds (default: SCANMAP_SCAN_TIMEOUT)

    Returns:
        Visible networks; an empty list when the scan found nothing

    Raises:
        ScanFailure: If the scan could not be performed
    """
    timeout = timeout or get_scan_timeout()
    interface = interface or get_interface()

    if not interface:
        interfaces = get_wireless_interfaces()
        if not interfaces:
            logger.info("No wireless interfaces found, trying Termux-API")
            try:
                return parse_termux_scan(_run_tool(['termux-wifi-scaninfo'], timeout))
            except FileNotFoundError as e:
                raise ScanFailure("no wireless interfaces found") from e
        if len(interfaces) > 1:
            logger.info("Several wireless interfaces found (%s), using %s",
                        ", ".join(interfaces), interfaces[0])
        interface = interfaces[0]

    networks = scan_interface(interface, timeout)
    logger.debug("Scan on %s found %d networks", interface, len(networks))
    return networks


def main():
    """Main entry point for a one-off scan."""
    parser = argparse.ArgumentParser(
        description="WiFi Scanner - List nearby wireless networks"
    )
    parser.add_argument(
        "--interface", "-i",
        help="Wireless interface to use"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON to stdout"
    )

    args = parser.parse_args()

    try:
        networks = scan_networks(interface=args.interface)
    except ScanFailure as e:
        print(f"[!] failed to scan networks: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print_json([asdict(net) for net in networks])
        return

    print(f"[+] Discovered {len(networks)} WiFi networks")
    for net in networks:
        print(f"    {net.mac}  {net.ssid[:32]:<32} Ch:{net.channel:<4} {net.signal_level} dBm")


if __name__ == "__main__":
    main()
