"""
errors.py — Error Types
=======================
Everything the visualizer raises on purpose derives from VisualizerError,
so the web layer can turn any of them into a 400 response in one place.

    ValidationError     – playback asked to run without usable endpoints
    MalformedInputError – a graph could not be built from user input
"""


class VisualizerError(Exception):
    """Base class for user-facing errors."""


class ValidationError(VisualizerError):
    """Start or end node missing (or unknown) when a run is requested."""


class MalformedInputError(VisualizerError):
    """Bad edge, non-numeric / non-positive weight, duplicate id, unknown preset."""
