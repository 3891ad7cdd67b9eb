"""Domain models for the Rounds quiz core.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

import hashlib
import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_SEEN_VERSION = "0.0.0"
DEFAULT_DISMISS_LABEL = "Continue"
CASE_HINT_COUNT = 5
CASE_HINT_PLACEHOLDER = "Additional clue coming soon"

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_name(text: str) -> str:
    """Lowercase, trim and collapse internal whitespace runs to one space."""
    return _WHITESPACE_RUN.sub(" ", text.lower().strip())


def generate_slug(name: str) -> str:
    """Derive a slug identifier from a diagnosis name.

    'Crohn's Disease (Ileal)' → 'crohns-disease-ileal'
    """
    slug = name.lower().replace(" ", "-")
    for char in ("'", "’", "(", ")", ","):
        slug = slug.replace(char, "")
    slug = slug.replace("--", "-")
    return slug.strip("-")


# ============================================================================
# Diagnosis lexicon models
# ============================================================================


@dataclass(frozen=True)
class DiagnosisDefinition:
    """A single diagnosis in the canonical registry."""

    id: str  # slug, e.g. "giant-cell-arteritis"
    canonical_name: str
    alternative_names: tuple[str, ...] = ()
    category: str = ""

    def __post_init__(self) -> None:
        """Validate definition invariants on creation."""
        if not self.id or not self.id.strip():
            raise ValueError("id must be a non-empty string")
        if not self.canonical_name or not self.canonical_name.strip():
            raise ValueError("canonical_name must be a non-empty string")
        if isinstance(self.alternative_names, list):
            object.__setattr__(
                self, "alternative_names", tuple(self.alternative_names)
            )

    @property
    def all_names(self) -> tuple[str, ...]:
        """Canonical name followed by every accepted alternative."""
        return (self.canonical_name, *self.alternative_names)

    def matches(self, guess: str) -> bool:
        """Check whether a guess names this diagnosis."""
        normalized_guess = normalize_name(guess)
        if not normalized_guess:
            return False
        return any(normalize_name(name) == normalized_guess for name in self.all_names)


@dataclass(frozen=True)
class CaseRecord:
    """A playable medical case from the case library.

    The id is derived from the diagnosis so the same case keeps the same
    identity across loads.
    """

    diagnosis: str
    alternative_names: tuple[str, ...] = ()
    hints: tuple[str, ...] = ()
    category: str = ""
    difficulty: int = 3
    id: uuid.UUID = field(init=False)

    def __post_init__(self) -> None:
        """Normalize hints and difficulty, derive the deterministic id."""
        if not self.diagnosis or not self.diagnosis.strip():
            raise ValueError("diagnosis must be a non-empty string")

        hints = tuple(self.hints)[:CASE_HINT_COUNT]
        if len(hints) < CASE_HINT_COUNT:
            hints += (CASE_HINT_PLACEHOLDER,) * (CASE_HINT_COUNT - len(hints))

        object.__setattr__(self, "alternative_names", tuple(self.alternative_names))
        object.__setattr__(self, "hints", hints)
        object.__setattr__(self, "difficulty", max(1, min(5, self.difficulty)))
        object.__setattr__(self, "id", self.deterministic_id(self.diagnosis))

    @staticmethod
    def deterministic_id(diagnosis: str) -> uuid.UUID:
        """Build a stable UUID from the first 16 bytes of a SHA-256 digest."""
        seed = f"rounds.case.{diagnosis.lower().strip()}"
        digest = hashlib.sha256(seed.encode()).digest()
        return uuid.UUID(bytes=digest[:16])

    def is_correct_diagnosis(self, guess: str) -> bool:
        """Check a guess against the diagnosis and its alternative names."""
        normalized_guess = normalize_name(guess)
        if not normalized_guess:
            return False
        if normalized_guess == normalize_name(self.diagnosis):
            return True
        return any(
            normalize_name(alt) == normalized_guess for alt in self.alternative_names
        )


# ============================================================================
# Announcement models
# ============================================================================


class AnnouncementDecodeError(ValueError):
    """Raised when a payload does not match the announcement schema."""


class Provenance(Enum):
    """Which source produced the active announcement payload."""

    REMOTE = "remote"
    CACHED = "cached"
    BUNDLED = "bundled"


class GateState(Enum):
    """Lifecycle of a ContentGate.

    - IDLE: nothing loaded yet
    - LOADING: a load is in flight
    - LOADED: a payload has been resolved (remote, cached or bundled)
    - FAILED: the fallback chain itself raised unexpectedly
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise AnnouncementDecodeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise AnnouncementDecodeError(f"'{key}' must be a string or null")
    return value


@dataclass(frozen=True)
class AnnouncementFeature:
    """One highlighted feature inside an announcement."""

    icon: str
    title: str
    description: str

    @classmethod
    def from_dict(cls, data: Any) -> "AnnouncementFeature":
        """Decode a feature from its JSON object form."""
        if not isinstance(data, dict):
            raise AnnouncementDecodeError("feature entries must be objects")
        return cls(
            icon=_require_str(data, "icon"),
            title=_require_str(data, "title"),
            description=_require_str(data, "description"),
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {"icon": self.icon, "title": self.title, "description": self.description}


@dataclass(frozen=True)
class AnnouncementPayload:
    """Versioned "What's New" content.

    Field names on the wire are camelCase; see from_dict/to_dict.
    """

    version: str
    last_updated: str
    show_to_versions_below: str
    title: str
    features: tuple[AnnouncementFeature, ...]
    footer: str | None = None
    dismiss_button_text: str | None = None

    def __post_init__(self) -> None:
        """Freeze the feature list."""
        if isinstance(self.features, list):
            object.__setattr__(self, "features", tuple(self.features))

    @property
    def dismiss_label(self) -> str:
        """Label for the dismiss action, defaulting to 'Continue'."""
        return self.dismiss_button_text or DEFAULT_DISMISS_LABEL

    @classmethod
    def from_dict(cls, data: Any) -> "AnnouncementPayload":
        """Decode a payload from parsed JSON.

        Raises:
            AnnouncementDecodeError: If required fields are missing or mistyped.
        """
        if not isinstance(data, dict):
            raise AnnouncementDecodeError("announcement payload must be a JSON object")

        features = data.get("features")
        if not isinstance(features, list):
            raise AnnouncementDecodeError("'features' must be a list")

        return cls(
            version=_require_str(data, "version"),
            last_updated=_require_str(data, "lastUpdated"),
            show_to_versions_below=_require_str(data, "showToVersionsBelow"),
            title=_require_str(data, "title"),
            features=tuple(AnnouncementFeature.from_dict(f) for f in features),
            footer=_optional_str(data, "footer"),
            dismiss_button_text=_optional_str(data, "dismissButtonText"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary."""
        result: dict[str, Any] = {
            "version": self.version,
            "lastUpdated": self.last_updated,
            "showToVersionsBelow": self.show_to_versions_below,
            "title": self.title,
            "features": [feature.to_dict() for feature in self.features],
        }
        if self.footer is not None:
            result["footer"] = self.footer
        if self.dismiss_button_text is not None:
            result["dismissButtonText"] = self.dismiss_button_text
        return result
