"""Unit tests for the diagnosis lexicon.

Tests verify that NameSuggester builds a case-insensitively unique
universe and that rank_suggestions orders matches by tier.
"""

import pytest

from rounds_quiz.core.lexicon import (
    MAX_SUGGESTIONS,
    SCAN_MATCH_LIMIT,
    NameSuggester,
    rank_suggestions,
)
from rounds_quiz.core.models import CaseRecord, DiagnosisDefinition
from rounds_quiz.tests.fakes import FakeCaseLibraryPort, FakeDiagnosisRegistryPort

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def registry() -> FakeDiagnosisRegistryPort:
    """Registry with a handful of cardiology and pulmonology diagnoses."""
    return FakeDiagnosisRegistryPort(
        [
            DiagnosisDefinition(
                id="myocardial-infarction",
                canonical_name="Myocardial Infarction",
                alternative_names=("MI", "Heart Attack"),
                category="Cardiology",
            ),
            DiagnosisDefinition(
                id="pulmonary-embolism",
                canonical_name="Pulmonary Embolism",
                alternative_names=("PE",),
                category="Pulmonology",
            ),
            DiagnosisDefinition(
                id="pneumonia",
                canonical_name="Pneumonia",
                category="Pulmonology",
            ),
        ]
    )


@pytest.fixture
def case_library() -> FakeCaseLibraryPort:
    """Case library overlapping the registry in several ways."""
    return FakeCaseLibraryPort.from_diagnoses(
        [
            "Myocardial Infarction",  # exact canonical duplicate
            "heart attack",  # alternative name, different case
            "PNEUMONIA",  # canonical name, different case
            "Deep Vein Thrombosis",  # new
            "Deep vein thrombosis",  # duplicate of a new name
        ]
    )


@pytest.fixture
def suggester(
    registry: FakeDiagnosisRegistryPort, case_library: FakeCaseLibraryPort
) -> NameSuggester:
    """NameSuggester wired to the fakes."""
    return NameSuggester(registry=registry, case_library=case_library)


# ============================================================================
# Universe Tests
# ============================================================================


class TestBuildUniverse:
    """Tests for merging canonical and fallback names."""

    def test_universe_is_sorted(self, suggester: NameSuggester) -> None:
        """Universe entries are in lexicographic order."""
        universe = suggester.universe
        assert list(universe) == sorted(universe)

    def test_universe_contents(self, suggester: NameSuggester) -> None:
        """Fallback names already known to the registry are skipped."""
        assert suggester.universe == (
            "Deep Vein Thrombosis",
            "Myocardial Infarction",
            "Pneumonia",
            "Pulmonary Embolism",
        )

    def test_no_case_insensitive_duplicates(self, suggester: NameSuggester) -> None:
        """No two entries are equal ignoring case."""
        lowered = [name.lower() for name in suggester.universe]
        assert len(lowered) == len(set(lowered))

    def test_duplicates_inside_canonical_source_collapse(self) -> None:
        """Even a registry with case variants yields a unique universe."""
        registry = FakeDiagnosisRegistryPort.from_names(["Gout", "GOUT", "Lupus"])
        suggester = NameSuggester(registry, FakeCaseLibraryPort())

        assert suggester.universe == ("Gout", "Lupus")

    def test_universe_is_cached(
        self, suggester: NameSuggester, case_library: FakeCaseLibraryPort
    ) -> None:
        """The universe is built once and reused."""
        first = suggester.universe
        second = suggester.universe

        assert first is second
        assert case_library.list_all_call_count == 1

    def test_rebuild_picks_up_new_sources(
        self, suggester: NameSuggester, case_library: FakeCaseLibraryPort
    ) -> None:
        """rebuild() recomputes from the current sources."""
        _ = suggester.universe
        case_library.cases.append(CaseRecord(diagnosis="Gout"))

        assert "Gout" not in suggester.universe
        assert "Gout" in suggester.rebuild()

    def test_empty_sources(self) -> None:
        """Empty sources produce an empty universe."""
        suggester = NameSuggester(FakeDiagnosisRegistryPort(), FakeCaseLibraryPort())
        assert suggester.universe == ()

    def test_find_diagnosis_by_alternative(self, suggester: NameSuggester) -> None:
        """Guesses resolve through alternative names."""
        definition = suggester.find_diagnosis("  heart   ATTACK ")
        assert definition is not None
        assert definition.id == "myocardial-infarction"

    def test_find_diagnosis_unknown(self, suggester: NameSuggester) -> None:
        """Unknown guesses resolve to None."""
        assert suggester.find_diagnosis("Migraine") is None


# ============================================================================
# Ranking Tests
# ============================================================================


class TestRankSuggestions:
    """Tests for the three-tier ranking."""

    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_blank_query_returns_nothing(self, query: str) -> None:
        """Blank queries produce no suggestions."""
        assert rank_suggestions(query, ("Pneumonia", "Gout")) == []

    def test_prefix_match(self) -> None:
        """Entries starting with the query win."""
        universe = ("Deep Vein Thrombosis", "Pneumonia", "Pulmonary Embolism")
        assert rank_suggestions("pul", universe) == ["Pulmonary Embolism"]

    def test_word_start_match_keeps_universe_order(self) -> None:
        """Word-start matches keep universe order."""
        universe = ("Acute Kidney Injury", "Chronic Kidney Disease")
        assert rank_suggestions("kidney", universe) == [
            "Acute Kidney Injury",
            "Chronic Kidney Disease",
        ]

    def test_tier_ordering(self) -> None:
        """Exact starts, then word starts, then substring matches."""
        universe = (
            "Acute Pancreatitis",
            "Chronic Pancreatitis",
            "Pancreatic Cancer",
            "Necrotizing pancreatitis",
            "Autoimmune Pancreatitis",
            "Hyperpancreatism",
        )
        assert rank_suggestions("panc", universe) == [
            "Pancreatic Cancer",
            "Acute Pancreatitis",
            "Chronic Pancreatitis",
            "Necrotizing pancreatitis",
            "Autoimmune Pancreatitis",
            "Hyperpancreatism",
        ]

    def test_query_is_trimmed_and_case_insensitive(self) -> None:
        """Surrounding whitespace and case do not matter."""
        universe = ("Gout", "Pseudogout")
        assert rank_suggestions("  GOU ", universe) == ["Gout", "Pseudogout"]

    def test_no_match(self) -> None:
        """A query matching nothing returns an empty list."""
        assert rank_suggestions("xyz", ("Gout", "Lupus")) == []

    def test_case_variants_counted_once(self) -> None:
        """Case-insensitive duplicates in the universe appear once."""
        universe = ("GOUT", "Gout", "gout")
        assert rank_suggestions("gout", universe) == ["GOUT"]

    def test_results_capped_at_ten(self) -> None:
        """At most ten suggestions are returned."""
        universe = tuple(f"Syndrome {i:02d}" for i in range(50))
        results = rank_suggestions("syn", universe)

        assert len(results) == MAX_SUGGESTIONS
        assert results == list(universe[:MAX_SUGGESTIONS])

    def test_scan_stops_after_limit(self) -> None:
        """Scanning stops once the combined match count reaches the limit.

        Twenty contains-matches early in the universe exhaust the scan
        before a later exact-start match is reached.
        """
        early = tuple(f"A{i:02d} xgoutx" for i in range(SCAN_MATCH_LIMIT))
        universe = early + ("Gout",)

        results = rank_suggestions("gout", universe)

        assert "Gout" not in results
        assert results == list(early[:MAX_SUGGESTIONS])

    def test_exact_start_found_before_limit_is_promoted(self) -> None:
        """An exact start seen before the limit outranks earlier contains-matches."""
        universe = tuple(f"A{i:02d} xgoutx" for i in range(5)) + ("Gout",)

        results = rank_suggestions("gout", universe)

        assert results[0] == "Gout"
        assert len(results) == 6

    def test_suggester_delegates(self, suggester: NameSuggester) -> None:
        """NameSuggester.suggest ranks against its universe."""
        assert suggester.suggest("emb") == ["Pulmonary Embolism"]
        assert suggester.suggest("") == []


# ============================================================================
# Guess Checking Tests
# ============================================================================


class TestGuessChecking:
    """Tests for find_case and is_correct_guess."""

    def test_find_case_normalizes(self, suggester: NameSuggester) -> None:
        """Cases are found regardless of case and spacing."""
        case = suggester.find_case("  deep   vein THROMBOSIS ")
        assert case is not None
        assert case.diagnosis == "Deep Vein Thrombosis"

    @pytest.mark.parametrize("diagnosis", ["Gout", "", "   "])
    def test_find_case_unknown(self, suggester: NameSuggester, diagnosis: str) -> None:
        """Unknown or blank diagnoses find nothing."""
        assert suggester.find_case(diagnosis) is None

    def test_guess_matches_case_diagnosis(self, suggester: NameSuggester) -> None:
        """The case's own diagnosis is accepted."""
        case = suggester.find_case("Pneumonia")
        assert suggester.is_correct_guess(case, " pneumonia ")

    def test_guess_accepts_registry_alternative(self, suggester: NameSuggester) -> None:
        """Registry alternatives count even when the case lists none."""
        case = suggester.find_case("Myocardial Infarction")

        assert case.alternative_names == ()
        assert suggester.is_correct_guess(case, "MI")
        assert suggester.is_correct_guess(case, "heart  attack")

    def test_guess_accepts_case_alternative(self) -> None:
        """Alternatives listed only on the case are accepted."""
        suggester = NameSuggester(
            FakeDiagnosisRegistryPort(),
            FakeCaseLibraryPort([CaseRecord(diagnosis="Gout", alternative_names=("Podagra",))]),
        )
        case = suggester.find_case("gout")

        assert suggester.is_correct_guess(case, "podagra")
        assert not suggester.is_correct_guess(case, "Pseudogout")

    def test_wrong_guess(self, suggester: NameSuggester) -> None:
        """Names of other diagnoses are rejected."""
        case = suggester.find_case("Deep Vein Thrombosis")

        assert not suggester.is_correct_guess(case, "Pulmonary Embolism")
        assert not suggester.is_correct_guess(case, "")
