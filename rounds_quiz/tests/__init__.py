"""Test suite for the Rounds quiz core.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - Tests against temporary SQLite files and mocked HTTP transports
   - Validates adapter behavior and error handling

3. fakes/: Port implementations for testing
   - In-memory implementations of AnnouncementSourcePort, KeyValueStorePort, etc.
   - Used by core unit tests
"""
