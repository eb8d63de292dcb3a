"""Inventory, order and statistics services for a small online store."""

__version__ = "0.1.0"