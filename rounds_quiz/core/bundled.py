"""Announcement shipped with the application.

Used when neither the remote source nor the local cache can provide a
payload, so a ContentGate always has something to show.
"""

from .models import AnnouncementFeature, AnnouncementPayload

BUNDLED_ANNOUNCEMENT = AnnouncementPayload(
    version="1.3.0",
    last_updated="2025-02-12",
    show_to_versions_below="1.3.0",
    title="What's New in Rounds",
    features=(
        AnnouncementFeature(
            icon="trophy.fill",
            title="Global Leaderboard",
            description="Compete with medical students worldwide! See rankings by school.",
        ),
        AnnouncementFeature(
            icon="square.and.arrow.up",
            title="Challenge Friends",
            description="Share cases directly with friends via deep links.",
        ),
        AnnouncementFeature(
            icon="flame.fill",
            title="Streak Freezes",
            description="Pro users get weekly streak freezes to protect progress.",
        ),
    ),
    footer="Thanks for playing Rounds!",
    dismiss_button_text="Let's Go!",
)
