"""Integration tests for adapter implementations.

These tests exercise adapters against temporary databases, packaged
data files and mocked HTTP transports to validate translation between
core domain models and external formats.
"""
