"""Port interfaces for the Rounds quiz core.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package; in-memory fakes live in tests/fakes/.

Port Interface Categories:

1. **Name sources** (synchronous, in-memory data)
   - DiagnosisRegistryPort: canonical diagnosis names and lookup
   - CaseLibraryPort: playable cases, used as the fallback name source

2. **I/O ports** (asynchronous)
   - AnnouncementSourcePort: fetch the latest "What's New" payload
   - KeyValueStorePort: persist seen marker, cached payload, fetch time
"""

from abc import ABC, abstractmethod

from .models import AnnouncementPayload, CaseRecord, DiagnosisDefinition


# ============================================================================
# NAME SOURCES
# ============================================================================


class DiagnosisRegistryPort(ABC):
    """Port for the canonical diagnosis registry.

    Every diagnosis is defined once, with its alternative names
    consolidated onto a single definition.
    """

    @abstractmethod
    def list_all_names(self) -> list[str]:
        """Return every canonical name (unique, any order)."""

    @abstractmethod
    def find_by_name(self, name: str) -> DiagnosisDefinition | None:
        """Look up a definition by any of its names.

        Comparison is case-insensitive and whitespace-normalized.

        Returns:
            The matching definition, or None.
        """

    @abstractmethod
    def find_by_slug(self, slug: str) -> DiagnosisDefinition | None:
        """Look up a definition by its slug id."""


class CaseLibraryPort(ABC):
    """Port for the library of playable cases."""

    @abstractmethod
    def list_all(self) -> list[CaseRecord]:
        """Return every case in the library."""


# ============================================================================
# I/O PORTS
# ============================================================================


class AnnouncementSourcePort(ABC):
    """Port for retrieving the latest announcement payload.

    Implementations must raise on any failure (transport, status,
    decoding). The caller folds every failure into "remote unavailable".
    """

    @abstractmethod
    async def fetch_latest(self) -> AnnouncementPayload:
        """Fetch and decode the current announcement.

        Returns:
            Decoded AnnouncementPayload.

        Raises:
            Exception: If the source is unreachable or the payload is invalid.
        """


class KeyValueStorePort(ABC):
    """Port for small key-value persistence.

    Values are either strings or opaque byte blobs. No transactional
    guarantees beyond last-write-wins are required.
    """

    @abstractmethod
    async def get_string(self, key: str) -> str | None:
        """Return the string stored under key, or None if absent."""

    @abstractmethod
    async def set_string(self, key: str, value: str) -> None:
        """Store a string under key, replacing any previous value."""

    @abstractmethod
    async def get_blob(self, key: str) -> bytes | None:
        """Return the blob stored under key, or None if absent."""

    @abstractmethod
    async def set_blob(self, key: str, value: bytes) -> None:
        """Store a blob under key, replacing any previous value."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
