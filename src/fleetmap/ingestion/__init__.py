"""Ingestion layer.

This package contains the dataset loader and the pure transformations
that turn raw history records into normalized telemetry samples.
"""

__all__: list[str] = []
