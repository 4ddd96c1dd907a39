"""Command line interface (``python -m freight_baseline.cli``)."""
