"""Console and formatting helpers."""
