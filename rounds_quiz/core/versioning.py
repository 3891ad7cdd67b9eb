"""Version comparison used to gate announcements.

Versions are dotted strings such as "1.3.0". Components that are not
integers count as 0, and the shorter version is right-padded with zeros,
so "1.3" and "1.3.0" compare equal.
"""

from .models import AnnouncementPayload


def parse_version(version: str) -> list[int]:
    """Split a dotted version into integer components."""
    parts = []
    for component in version.split("."):
        try:
            parts.append(int(component))
        except ValueError:
            parts.append(0)
    return parts


def is_version_less_than(v1: str, v2: str) -> bool:
    """Is v1 strictly lower than v2?"""
    v1_parts = parse_version(v1)
    v2_parts = parse_version(v2)

    length = max(len(v1_parts), len(v2_parts))
    v1_parts += [0] * (length - len(v1_parts))
    v2_parts += [0] * (length - len(v2_parts))

    for a, b in zip(v1_parts, v2_parts):
        if a < b:
            return True
        if a > b:
            return False

    return False


def should_show(payload: AnnouncementPayload, seen_marker: str) -> bool:
    """Should this announcement be shown to a user whose last seen version is seen_marker?"""
    return is_version_less_than(seen_marker, payload.show_to_versions_below)
