"""Key-value store adapters for local persistence.

Implementations:
- SQLite (zero-config, single-file)
"""
