"""
WiFi Scan Map - Errors
======================
Exception hierarchy shared by the scan map core, the scanner binding and the CLI.
"""


class ScanMapError(Exception):
    """Base class for all scan map failures."""


class NotFoundError(ScanMapError):
    """The scan map file does not exist."""


class ParseError(ScanMapError):
    """Stored data is not a valid scan map document."""


class ScanMapIOError(ScanMapError):
    """Filesystem read or write failure unrelated to the document format."""


class ScanFailure(ScanMapError):
    """The network scan capability reported an error."""


class InvalidInput(ScanMapError):
    """Interactively supplied data is malformed. Recovered by re-prompting."""


class InvalidTarget(ScanMapError):
    """Export destination exists but is not a directory."""
