"""Probe search-service environments and decode their index catalogues."""

__version__ = "0.2.0"
