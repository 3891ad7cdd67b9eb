"""Rounds quiz core: diagnosis autocomplete and the "What's New" gate."""

__version__ = "1.3.0"
