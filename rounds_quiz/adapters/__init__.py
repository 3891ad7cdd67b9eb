"""External adapters for the Rounds quiz core.

This package contains all external dependencies (HTTP, SQLite, packaged
data files, the terminal) and provides implementations of the core port
interfaces.

Adapter Organization:

- announcements/: Remote "What's New" announcement sources (HTTP)
- store/: Key-value persistence for the cache and seen marker (SQLite)
- registry/: Diagnosis registry and case library (JSON files)
- cli/: Command-line interface and quiz commands
"""
