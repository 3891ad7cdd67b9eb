"""Diagnosis lexicon: the name universe and autocomplete ranking.

The universe merges canonical registry names with diagnosis names from
the case library, keeping one entry per case-insensitive spelling.
Suggestions are ranked in three tiers: names starting with the query,
names with a word starting with the query, then names containing it.
"""

import logging

from .models import CaseRecord, DiagnosisDefinition, normalize_name
from .ports import CaseLibraryPort, DiagnosisRegistryPort

logger = logging.getLogger(__name__)

SCAN_MATCH_LIMIT = 20
MAX_SUGGESTIONS = 10


def rank_suggestions(
    query: str,
    universe: tuple[str, ...] | list[str],
    scan_limit: int = SCAN_MATCH_LIMIT,
    max_results: int = MAX_SUGGESTIONS,
) -> list[str]:
    """Rank universe entries against a free-text query.

    Scanning stops once scan_limit matches have been collected, so later
    alphabetical matches may be missed on large universes.

    Returns:
        At most max_results names: exact starts, then word starts, then
        substring matches, each in universe order. Empty for blank queries.
    """
    trimmed = query.strip()
    if not trimmed:
        return []
    lower = trimmed.lower()

    seen: set[str] = set()
    exact_starts: list[str] = []
    word_starts: list[str] = []
    contains: list[str] = []

    for term in universe:
        lower_term = term.lower()
        if lower_term in seen:
            continue

        if lower_term.startswith(lower):
            exact_starts.append(term)
            seen.add(lower_term)
        elif any(word.startswith(lower) for word in lower_term.split(" ")):
            word_starts.append(term)
            seen.add(lower_term)
        elif lower in lower_term:
            contains.append(term)
            seen.add(lower_term)

        if len(exact_starts) + len(word_starts) + len(contains) >= scan_limit:
            break

    return (exact_starts + word_starts + contains)[:max_results]


class NameSuggester:
    """Builds the name universe and serves autocomplete suggestions.

    The universe is computed on first access and treated as immutable;
    call rebuild() after the underlying sources change.
    """

    def __init__(
        self,
        registry: DiagnosisRegistryPort,
        case_library: CaseLibraryPort,
    ):
        self.registry = registry
        self.case_library = case_library
        self._universe: tuple[str, ...] | None = None

    @property
    def universe(self) -> tuple[str, ...]:
        """The sorted, case-insensitively unique name universe."""
        if self._universe is None:
            self._universe = self.build_universe()
        return self._universe

    def build_universe(self) -> tuple[str, ...]:
        """Merge canonical names with fallback case diagnoses.

        A case diagnosis is only added when the registry does not know it
        under any name and no entry with the same lowercase spelling exists.
        """
        names: list[str] = []
        seen: set[str] = set()

        for name in self.registry.list_all_names():
            key = name.lower()
            if key not in seen:
                seen.add(key)
                names.append(name)

        skipped = 0
        for case in self.case_library.list_all():
            key = case.diagnosis.lower()
            if key in seen or self.registry.find_by_name(case.diagnosis) is not None:
                skipped += 1
                continue
            seen.add(key)
            names.append(case.diagnosis)

        logger.debug(
            f"Built name universe with {len(names)} entries "
            f"({skipped} case diagnoses already covered)"
        )
        return tuple(sorted(names))

    def rebuild(self) -> tuple[str, ...]:
        """Discard the cached universe and build it again."""
        self._universe = None
        return self.universe

    def suggest(self, query: str) -> list[str]:
        """Autocomplete suggestions for a partial guess."""
        return rank_suggestions(query, self.universe)

    def find_diagnosis(self, guess: str) -> DiagnosisDefinition | None:
        """Resolve a guess to its registry definition, if any."""
        return self.registry.find_by_name(guess)

    def find_case(self, diagnosis: str) -> CaseRecord | None:
        """Look up a case by its diagnosis name."""
        normalized = normalize_name(diagnosis)
        if not normalized:
            return None
        for case in self.case_library.list_all():
            if normalize_name(case.diagnosis) == normalized:
                return case
        return None

    def is_correct_guess(self, case: CaseRecord, guess: str) -> bool:
        """Check a guess against a case.

        Besides the case's own names, any registry name of the case's
        diagnosis is accepted.
        """
        if case.is_correct_diagnosis(guess):
            return True
        definition = self.registry.find_by_name(case.diagnosis)
        return definition is not None and definition.matches(guess)
