"""Name source adapters for the diagnosis lexicon.

Implementations:
- JSON files (packaged registry and case library, or custom paths)
"""
