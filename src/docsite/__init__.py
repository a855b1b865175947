"""Docsite - documentation website server."""
