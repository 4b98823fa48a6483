"""Outbound notifications."""

from notifications.mattermost import (
    AchievementNotice,
    MatchNotification,
    MattermostNotifier,
    build_match_message,
)

__all__ = ["AchievementNotice", "MatchNotification", "MattermostNotifier", "build_match_message"]
