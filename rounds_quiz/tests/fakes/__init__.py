"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeDiagnosisRegistryPort: In-memory canonical diagnosis registry
- FakeCaseLibraryPort: In-memory case library
- FakeAnnouncementSourcePort: Canned or failing announcement fetches
- FakeKeyValueStorePort: In-memory key-value persistence
"""

from .announcements import FakeAnnouncementSourcePort
from .names import FakeCaseLibraryPort, FakeDiagnosisRegistryPort
from .store import FakeKeyValueStorePort

__all__ = [
    "FakeAnnouncementSourcePort",
    "FakeCaseLibraryPort",
    "FakeDiagnosisRegistryPort",
    "FakeKeyValueStorePort",
]
