"""Packaged diagnosis registry and case library data."""
