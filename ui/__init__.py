"""
WiFi Scan Map - Terminal UI Module
"""
