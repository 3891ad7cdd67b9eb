"""Unit tests for announcement version comparison."""

import pytest

from rounds_quiz.core.bundled import BUNDLED_ANNOUNCEMENT
from rounds_quiz.core.versioning import is_version_less_than, parse_version, should_show


class TestParseVersion:
    """Tests for splitting dotted versions."""

    def test_numeric_components(self) -> None:
        """Plain dotted versions parse to integers."""
        assert parse_version("1.12.3") == [1, 12, 3]

    def test_non_numeric_components_count_as_zero(self) -> None:
        """Components that are not integers become 0."""
        assert parse_version("2.beta.1") == [2, 0, 1]
        assert parse_version("1..2") == [1, 0, 2]


class TestIsVersionLessThan:
    """Tests for the ordering rule."""

    @pytest.mark.parametrize(
        ("v1", "v2", "expected"),
        [
            ("1.2.0", "1.3.0", True),
            ("1.3.0", "1.3.0", False),
            ("1.3", "1.3.0", False),
            ("1.3.0", "1.3", False),
            ("1.3.1", "1.3", False),
            ("1.3", "1.3.1", True),
            ("0.0.0", "1.0", True),
            ("1.10.0", "1.9.0", False),
            ("1.9.0", "1.10.0", True),
            ("2", "10", True),
            ("x.y", "0.0.1", True),
        ],
    )
    def test_ordering(self, v1: str, v2: str, expected: bool) -> None:
        """Component-wise comparison with zero padding."""
        assert is_version_less_than(v1, v2) is expected


class TestShouldShow:
    """Tests for the seen-marker gate."""

    def test_lower_marker_shows(self) -> None:
        """A user who has only seen older announcements sees this one."""
        payload = BUNDLED_ANNOUNCEMENT  # showToVersionsBelow 1.3.0
        assert should_show(payload, "1.2.0") is True

    def test_equal_marker_hides(self) -> None:
        """A marker equal to the threshold hides the announcement."""
        assert should_show(BUNDLED_ANNOUNCEMENT, "1.3.0") is False

    def test_default_marker_shows(self) -> None:
        """The never-seen sentinel is below any real threshold."""
        assert should_show(BUNDLED_ANNOUNCEMENT, "0.0.0") is True

    def test_higher_marker_hides(self) -> None:
        """A marker above the threshold hides the announcement."""
        assert should_show(BUNDLED_ANNOUNCEMENT, "2.0") is False
