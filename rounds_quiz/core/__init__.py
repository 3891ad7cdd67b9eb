"""Core domain logic for the Rounds quiz.

This package contains zero external dependencies and represents
the pure logic of the application: the diagnosis lexicon and the
version-gated announcement loader. All adapters and external
integrations are handled by the adapters package.
"""

from .models import (
    AnnouncementDecodeError,
    AnnouncementFeature,
    AnnouncementPayload,
    CaseRecord,
    DiagnosisDefinition,
    GateState,
    Provenance,
)

__all__ = [
    "AnnouncementDecodeError",
    "AnnouncementFeature",
    "AnnouncementPayload",
    "CaseRecord",
    "DiagnosisDefinition",
    "GateState",
    "Provenance",
]
