"""Dependency-aware registry component installer and schema module emitter."""

__version__ = "0.4.1"
