"""Carrier cost spreadsheet cataloging, baseline extraction and inventory optimization."""

__version__ = "0.1.0"
