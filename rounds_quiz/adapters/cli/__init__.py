"""Command-line interface adapters.

Provides CLI commands for exercising the Rounds quiz core:
- suggest: Autocomplete a partial diagnosis name
- match: Resolve a guess to its canonical diagnosis
- guess: Check a guess against a case
- whats-new: Load the announcement and report whether to show it
- dismiss / force / reset: Manage the seen marker
"""
