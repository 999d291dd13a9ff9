"""
WiFi Scan Map - Scanner Modules
===============================
Bindings to the system tools that list visible wireless networks.
"""

__all__ = [
    'wifi_scanner',
]
