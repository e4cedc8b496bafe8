"""State layer.

Holds the read-only telemetry index built per load and the explicit
selection value owned by the presentation layer.
"""
