"""Inventory sample package."""
