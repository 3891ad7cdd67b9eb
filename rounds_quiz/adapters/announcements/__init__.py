"""Announcement source adapters.

Implementations:
- HTTP (raw JSON document with cache busting)
"""
