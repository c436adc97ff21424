"""Loom: project tracking store with live change notifications."""

__version__ = "0.1.0"
