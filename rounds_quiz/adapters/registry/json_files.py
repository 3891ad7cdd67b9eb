"""JSON file adapters for the diagnosis registry and case library.

Implements DiagnosisRegistryPort and CaseLibraryPort from JSON documents.
The package ships default data files; a path override lets deployments
supply their own.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from rounds_quiz.core.models import CaseRecord, DiagnosisDefinition, generate_slug, normalize_name
from rounds_quiz.core.ports import CaseLibraryPort, DiagnosisRegistryPort

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_FILE = "diagnoses.json"
DEFAULT_CASE_LIBRARY_FILE = "cases.json"


def _load_json_list(path: str | None, default_file: str) -> list[dict[str, Any]]:
    """Load a JSON array from path, or from the packaged data file.

    Raises:
        ValueError: If the document is not a JSON array of objects.
    """
    if path:
        text = Path(path).read_text(encoding="utf-8")
        source = path
    else:
        text = resources.files("rounds_quiz.data").joinpath(default_file).read_text(encoding="utf-8")
        source = f"package:{default_file}"

    data = json.loads(text)
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"{source} must contain a JSON array of objects")

    logger.debug(f"Loaded {len(data)} records from {source}")
    return data


class JsonDiagnosisRegistry(DiagnosisRegistryPort):
    """Diagnosis registry backed by a JSON array of definitions."""

    def __init__(self, definitions: list[DiagnosisDefinition]):
        """Initialize from already-parsed definitions.

        Name lookups return the first definition that claims a name.
        """
        self.definitions = list(definitions)
        self._by_slug: dict[str, DiagnosisDefinition] = {}
        self._by_name: dict[str, DiagnosisDefinition] = {}

        for definition in self.definitions:
            if definition.id in self._by_slug:
                logger.warning(f"Duplicate diagnosis slug ignored: {definition.id}")
                continue
            self._by_slug[definition.id] = definition
            for name in definition.all_names:
                self._by_name.setdefault(normalize_name(name), definition)

    @classmethod
    def from_file(cls, path: str | None = None) -> "JsonDiagnosisRegistry":
        """Load the registry from a JSON file (packaged default when path is empty).

        Records without an id get one derived from the canonical name.
        """
        records = _load_json_list(path, DEFAULT_REGISTRY_FILE)
        definitions = [
            DiagnosisDefinition(
                id=record.get("id") or generate_slug(record["canonical_name"]),
                canonical_name=record["canonical_name"],
                alternative_names=tuple(record.get("alternative_names", [])),
                category=record.get("category", ""),
            )
            for record in records
        ]
        return cls(definitions)

    def list_all_names(self) -> list[str]:
        """Canonical names of every registered diagnosis."""
        return [definition.canonical_name for definition in self._by_slug.values()]

    def find_by_name(self, name: str) -> DiagnosisDefinition | None:
        """Look up a definition by canonical or alternative name."""
        normalized = normalize_name(name)
        if not normalized:
            return None
        return self._by_name.get(normalized)

    def find_by_slug(self, slug: str) -> DiagnosisDefinition | None:
        """Look up a definition by slug id."""
        return self._by_slug.get(slug)


class JsonCaseLibrary(CaseLibraryPort):
    """Case library backed by a JSON array of cases."""

    def __init__(self, cases: list[CaseRecord]):
        self.cases = list(cases)

    @classmethod
    def from_file(cls, path: str | None = None) -> "JsonCaseLibrary":
        """Load cases from a JSON file (packaged default when path is empty)."""
        records = _load_json_list(path, DEFAULT_CASE_LIBRARY_FILE)
        cases = [
            CaseRecord(
                diagnosis=record["diagnosis"],
                alternative_names=tuple(record.get("alternative_names", [])),
                hints=tuple(record.get("hints", [])),
                category=record.get("category", ""),
                difficulty=int(record.get("difficulty", 3)),
            )
            for record in records
        ]
        return cls(cases)

    def list_all(self) -> list[CaseRecord]:
        """Every case in load order."""
        return list(self.cases)
