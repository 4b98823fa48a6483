"""Closed catalog of unlockable achievements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from domain.protocol import AchievementCategory


class AchievementKind(str, Enum):
    """Every achievement the league knows; the value is the stored name."""

    FIRST_WIN = "First Win"
    WINNER = "Winner"
    SERIAL_WINNER = "Serial Winner"
    CHAMPION = "Champion"
    CONQUEROR = "Conqueror"

    REGULAR = "Regular"
    VETERAN = "Veteran"
    DIE_HARD = "Die-hard"

    SHARPSHOOTER = "Sharpshooter"
    GOAL_MACHINE = "Goal Machine"
    GOAL_FACTORY = "Goal Factory"
    GOAL_LEGEND = "Goal Legend"

    RISING_STAR = "Rising Star"
    ELITE_PLAYER = "Elite Player"
    LEGEND = "Legend"

    HAT_TRICK = "Hat Trick"
    PENTAKILL = "Pentakill"
    UNSTOPPABLE = "Unstoppable"
    JUGGERNAUT = "Juggernaut"
    GODLIKE = "Godlike"

    BAD_DAY = "Bad Day"
    COLD_STREAK = "Cold Streak"
    ROCK_BOTTOM = "Rock Bottom"
    CURSED = "Cursed"
    HOPELESS = "Hopeless"

    CRAWLER = "Crawler"
    CARPET_INSPECTOR = "Carpet Inspector"
    FLOOR_DWELLER = "Floor Dweller"
    TABLE_RESIDENT = "Table Resident"

    DESTROYER = "Destroyer"
    EXTERMINATOR = "Exterminator"
    DEMOLISHER = "Demolisher"
    ANNIHILATOR = "Annihilator"

    SNIPER = "Sniper"
    DEADEYE = "Deadeye"
    STANDING_TALL = "Standing Tall"
    IRON_KNEES = "Iron Knees"
    GLASS_CANNON = "Glass Cannon"

    STREAK_BREAKER = "Streak Breaker"
    PARTY_POOPER = "Party Pooper"
    GIANT_SLAYER = "Giant Slayer"
    DREAM_CRUSHER = "Dream Crusher"
    LEGEND_KILLER = "Legend Killer"


@dataclass(frozen=True)
class AchievementDefinition:
    kind: AchievementKind
    category: AchievementCategory
    description: str
    requirement_type: str
    requirement_value: int

    @property
    def name(self) -> str:
        return self.kind.value


def _define(
    kind: AchievementKind,
    category: AchievementCategory,
    requirement_type: str,
    requirement_value: int,
    description: str,
) -> AchievementDefinition:
    return AchievementDefinition(
        kind=kind,
        category=category,
        description=description,
        requirement_type=requirement_type,
        requirement_value=requirement_value,
    )


_K = AchievementKind
_C = AchievementCategory

# Threshold tables drive both the evaluator and the catalog rows.
WIN_MILESTONES: dict[int, AchievementKind] = {
    10: _K.WINNER,
    25: _K.SERIAL_WINNER,
    50: _K.CHAMPION,
    100: _K.CONQUEROR,
}
GAMES_MILESTONES: dict[int, AchievementKind] = {30: _K.REGULAR, 50: _K.VETERAN, 80: _K.DIE_HARD}
GOALS_MILESTONES: dict[int, AchievementKind] = {
    50: _K.SHARPSHOOTER,
    100: _K.GOAL_MACHINE,
    250: _K.GOAL_FACTORY,
    500: _K.GOAL_LEGEND,
}
RATING_BANDS: dict[int, AchievementKind] = {1300: _K.RISING_STAR, 1500: _K.ELITE_PLAYER, 1700: _K.LEGEND}
WIN_STREAKS: dict[int, AchievementKind] = {
    3: _K.HAT_TRICK,
    5: _K.PENTAKILL,
    10: _K.UNSTOPPABLE,
    15: _K.JUGGERNAUT,
    20: _K.GODLIKE,
}
LOSS_STREAKS: dict[int, AchievementKind] = {
    3: _K.BAD_DAY,
    5: _K.COLD_STREAK,
    10: _K.ROCK_BOTTOM,
    15: _K.CURSED,
    20: _K.HOPELESS,
}
CRAWLS_RECEIVED: dict[int, AchievementKind] = {
    5: _K.CARPET_INSPECTOR,
    10: _K.FLOOR_DWELLER,
    20: _K.TABLE_RESIDENT,
}
CRAWLS_CAUSED: dict[int, AchievementKind] = {
    1: _K.DESTROYER,
    5: _K.EXTERMINATOR,
    10: _K.DEMOLISHER,
    25: _K.ANNIHILATOR,
}
# (minimum games, minimum average goals per match)
SCORING_AVERAGES: dict[AchievementKind, tuple[int, float]] = {
    _K.SNIPER: (10, 8.0),
    _K.DEADEYE: (25, 9.0),
}
NEVER_CRAWLED: dict[int, AchievementKind] = {25: _K.STANDING_TALL, 50: _K.IRON_KNEES}
GLASS_CANNON_MIN_GAMES = 10
GLASS_CANNON_MIN_AVERAGE = 7.0
GLASS_CANNON_MIN_CRAWLS = 3
# Highest tier first; only one tier is awarded per match.
STREAK_BREAKERS: tuple[tuple[int, AchievementKind], ...] = (
    (20, _K.LEGEND_KILLER),
    (15, _K.DREAM_CRUSHER),
    (10, _K.GIANT_SLAYER),
    (5, _K.PARTY_POOPER),
    (3, _K.STREAK_BREAKER),
)


def _build_catalog() -> dict[AchievementKind, AchievementDefinition]:
    definitions = [
        _define(_K.FIRST_WIN, _C.MILESTONE, "wins", 1, "Win your first match"),
        _define(_K.CRAWLER, _C.SPECIAL, "crawls", 1, "Crawl under the table for the first time"),
        _define(
            _K.GLASS_CANNON,
            _C.SPECIAL,
            "glass_cannon",
            GLASS_CANNON_MIN_CRAWLS,
            f"Average {GLASS_CANNON_MIN_AVERAGE:g}+ goals per match and still crawl "
            f"{GLASS_CANNON_MIN_CRAWLS} times",
        ),
    ]
    definitions += [
        _define(kind, _C.MILESTONE, "wins", value, f"Win {value} matches")
        for value, kind in WIN_MILESTONES.items()
    ]
    definitions += [
        _define(kind, _C.GAMES, "games_played", value, f"Play {value} matches")
        for value, kind in GAMES_MILESTONES.items()
    ]
    definitions += [
        _define(kind, _C.GOALS, "goals_scored", value, f"Score {value} goals")
        for value, kind in GOALS_MILESTONES.items()
    ]
    definitions += [
        _define(kind, _C.RATING, "rating", value, f"Reach a rating of {value}")
        for value, kind in RATING_BANDS.items()
    ]
    definitions += [
        _define(kind, _C.STREAK, "win_streak", value, f"Win {value} matches in a row")
        for value, kind in WIN_STREAKS.items()
    ]
    definitions += [
        _define(kind, _C.STREAK, "loss_streak", value, f"Lose {value} matches in a row")
        for value, kind in LOSS_STREAKS.items()
    ]
    definitions += [
        _define(kind, _C.SPECIAL, "crawls", value, f"Crawl under the table {value} times")
        for value, kind in CRAWLS_RECEIVED.items()
    ]
    definitions += [
        _define(kind, _C.SPECIAL, "crawls_caused", value, f"Send opponents under the table {value} times")
        for value, kind in CRAWLS_CAUSED.items()
    ]
    definitions += [
        _define(
            kind,
            _C.GOALS,
            "average_goals",
            min_games,
            f"Average {min_average:g}+ goals per match over at least {min_games} matches",
        )
        for kind, (min_games, min_average) in SCORING_AVERAGES.items()
    ]
    definitions += [
        _define(kind, _C.SPECIAL, "never_crawled", value, f"Play {value} matches without ever crawling")
        for value, kind in NEVER_CRAWLED.items()
    ]
    definitions += [
        _define(kind, _C.STREAK, "streak_broken", value, f"End an opponent's win streak of {value}+")
        for value, kind in STREAK_BREAKERS
    ]
    return {definition.kind: definition for definition in definitions}


CATALOG: dict[AchievementKind, AchievementDefinition] = _build_catalog()


def get_definition(kind: AchievementKind) -> AchievementDefinition:
    return CATALOG[kind]


__all__ = [
    "CATALOG",
    "AchievementDefinition",
    "AchievementKind",
    "get_definition",
]
