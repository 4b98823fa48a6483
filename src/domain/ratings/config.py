"""Load rating system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs
from domain.ratings.calculator import RatingParameters


@dataclass(frozen=True)
class RatingSystemConfig(BaseSystemConfig):
    """Configuration for the league's rating formula."""

    parameters: RatingParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.parameters.initial_rating,
            "k_factor": self.parameters.k_factor,
            "scale_factor": self.parameters.scale_factor,
            "score_multiplier": self.parameters.score_multiplier,
            "streak_bonus_unit": self.parameters.streak_bonus_unit,
            "duel_scale_factor": self.parameters.duel_scale_factor,
            "crawl_target_score": self.parameters.crawl_target_score,
            "crawl_min_margin": self.parameters.crawl_min_margin,
        }


def load_rating_system_configs(config_path: Path) -> list[RatingSystemConfig]:
    """Load and validate a rating TOML file or a directory of them."""
    return load_system_configs(
        config_path,
        _parse_rating_system_config,
        duplicate_name_label="rating",
    )


def _parse_rating_system_config(raw: dict[str, Any], file_path: Path) -> RatingSystemConfig:
    system_raw = raw.get("system", {})
    rating_raw = raw.get("rating", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    parameters = RatingParameters(
        initial_rating=int(rating_raw.get("initial_rating", 1200)),
        k_factor=float(rating_raw.get("k_factor", 32.0)),
        scale_factor=float(rating_raw.get("scale_factor", 400.0)),
        score_multiplier=float(rating_raw.get("score_multiplier", 0.15)),
        streak_bonus_unit=float(rating_raw.get("streak_bonus_unit", 0.3)),
        duel_scale_factor=float(rating_raw.get("duel_scale_factor", 0.6)),
        crawl_target_score=int(rating_raw.get("crawl_target_score", 10)),
        crawl_min_margin=int(rating_raw.get("crawl_min_margin", 9)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return RatingSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: RatingParameters) -> None:
    if parameters.initial_rating < 0:
        raise ValueError(f"{file_path}: [rating].initial_rating must be >= 0")
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].scale_factor must be > 0")
    if parameters.score_multiplier < 0.0:
        raise ValueError(f"{file_path}: [rating].score_multiplier must be >= 0")
    if parameters.streak_bonus_unit < 0.0:
        raise ValueError(f"{file_path}: [rating].streak_bonus_unit must be >= 0")
    if parameters.duel_scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].duel_scale_factor must be > 0")
    if parameters.crawl_target_score <= 0:
        raise ValueError(f"{file_path}: [rating].crawl_target_score must be > 0")
    if parameters.crawl_min_margin <= 0 or parameters.crawl_min_margin > parameters.crawl_target_score:
        raise ValueError(
            f"{file_path}: [rating].crawl_min_margin must be between 1 and crawl_target_score"
        )
