"""Post match summaries to a Mattermost incoming webhook."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from domain.protocol import GameMode
from domain.ratings.calculator import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "Tablesoccer"
DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class AchievementNotice:
    player_name: str
    achievement_name: str


@dataclass(frozen=True)
class MatchNotification:
    team1_names: tuple[str, ...]
    team2_names: tuple[str, ...]
    team1_score: int
    team2_score: int
    game_mode: GameMode
    total_rating_change: int
    is_crawl_game: bool
    achievements: tuple[AchievementNotice, ...] = ()


def build_match_message(notification: MatchNotification, *, link_url: str | None = None) -> str:
    team1_won = notification.team1_score > notification.team2_score
    team1_icon = ":trophy:" if team1_won else ":crossed_swords:"
    team2_icon = ":crossed_swords:" if team1_won else ":trophy:"

    if notification.game_mode is GameMode.DUEL:
        lines = [":crossed_swords: An epic DUEL just took place!", ""]
        players_per_match = 2
    else:
        lines = [":soccer: Classic 2vs2 played!", ""]
        players_per_match = 4

    lines.append(
        f"{team1_icon} {' & '.join(notification.team1_names)}     "
        f"{notification.team1_score} - {notification.team2_score}     "
        f"{' & '.join(notification.team2_names)} {team2_icon}"
    )
    lines.append("")

    if notification.is_crawl_game:
        lines += ["**CRAWL GAME!** Under the table!", ""]

    average_change = round_half_up(abs(notification.total_rating_change) / players_per_match)
    lines += [f"Rating change: +/-{average_change} points", ""]

    if notification.achievements:
        lines.append("**New achievements unlocked:**")
        lines += [f"- {notice.player_name} - {notice.achievement_name}" for notice in notification.achievements]
        lines.append("")

    if link_url:
        lines.append(f"Click [here]({link_url}) for more information.")

    return "\n".join(lines).rstrip()


class MattermostNotifier:
    """Fire-and-forget webhook client; failures are logged and swallowed."""

    def __init__(
        self,
        webhook_url: str | None,
        *,
        enabled: bool = True,
        username: str = DEFAULT_USERNAME,
        icon_url: str | None = None,
        link_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.webhook_url = webhook_url
        self.enabled = enabled
        self.username = username
        self.icon_url = icon_url
        self.link_url = link_url
        self.timeout = timeout

    def notify_match(self, notification: MatchNotification) -> bool:
        """Send one match summary; returns whether the webhook accepted it."""
        if not self.enabled:
            logger.info("Mattermost notifications disabled, skipping match summary")
            return False
        if not self.webhook_url:
            logger.warning("Mattermost webhook URL not configured, skipping match summary")
            return False

        payload: dict[str, str] = {
            "text": build_match_message(notification, link_url=self.link_url),
            "username": self.username,
        }
        if self.icon_url:
            payload["icon_url"] = self.icon_url

        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Failed to send match summary to Mattermost: %s", exc)
            return False

        logger.info("Match summary sent to Mattermost")
        return True


__all__ = ["AchievementNotice", "MatchNotification", "MattermostNotifier", "build_match_message"]
