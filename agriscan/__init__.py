"""AgriScan: multi-source plant disease analysis service."""

__version__ = "0.1.0"
