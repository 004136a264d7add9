"""LiveKit room token service."""

__version__ = "0.1.0"
