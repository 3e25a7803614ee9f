"""Firmware asset packers: memory-mapped asset tables and wakenet bundles."""

__version__ = "0.1.0"
