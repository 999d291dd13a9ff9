"""
WiFi Scan Map - Web API Module
"""
