# Area: Shared
"""
rally_score.config — Scoring configuration
==========================================

Configuration for the rating gate and the anti-self-reporting rule.

Values are read from an optional JSON file, then overridden by
environment variables (a local .env file is loaded first):

    RALLY_MIN_GAME_SCORE                 -> min_game_score
    RALLY_MAX_GAMES                      -> max_games
    DUPR_CLUB_ID                         -> rating_club_id
    RALLY_SELF_REPORTING_ENFORCED_FROM   -> self_reporting_enforced_from

self_reporting_enforced_from is an epoch-millisecond cutoff. Unset means
the organizer anti-self-reporting rule applies to every match; when set,
matches created before the cutoff are exempt.
"""

from __future__ import annotations
import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv

from .enums import RegulationMode
from .errors import ConfigError
from .permissions import RegulatoryContext

logger = logging.getLogger("rally_score.config")

# Rating authority structural requirements
DEFAULT_MIN_GAME_SCORE = 6
DEFAULT_MAX_GAMES = 5

ENV_MAPPINGS = {
    "RALLY_MIN_GAME_SCORE": "min_game_score",
    "RALLY_MAX_GAMES": "max_games",
    "DUPR_CLUB_ID": "rating_club_id",
    "RALLY_SELF_REPORTING_ENFORCED_FROM": "self_reporting_enforced_from",
}

INT_KEYS = {"min_game_score", "max_games", "self_reporting_enforced_from"}


@dataclass(frozen=True)
class ScoringConfig:
    """
    Settings consumed by the eligibility gate and permission context.

    Attributes:
        min_game_score: At least one game must reach this many points
        max_games: Most games a submittable match may have
        rating_club_id: Club id for CLUB-sourced submissions (PARTNER if unset)
        self_reporting_enforced_from: Epoch ms cutoff for the anti-self-reporting rule
    """

    min_game_score: int = DEFAULT_MIN_GAME_SCORE
    max_games: int = DEFAULT_MAX_GAMES
    rating_club_id: Optional[str] = None
    self_reporting_enforced_from: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = ScoringConfig()


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration dict

    Raises:
        ConfigError: If any value is malformed
    """
    problems: List[str] = []
    unknown = sorted(set(config) - set(ScoringConfig.__dataclass_fields__))
    if unknown:
        problems.append(f"Unknown config keys: {unknown}")

    for key in INT_KEYS:
        value = config.get(key)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            problems.append(f"'{key}' must be an integer, got {type(value).__name__}")

    if isinstance(config.get("min_game_score"), int) and config["min_game_score"] < 1:
        problems.append("'min_game_score' must be at least 1")
    if isinstance(config.get("max_games"), int) and config["max_games"] < 1:
        problems.append("'max_games' must be at least 1")

    club_id = config.get("rating_club_id")
    if club_id is not None and not str(club_id).strip().isdigit():
        problems.append(f"'rating_club_id' must be numeric, got {club_id!r}")

    if problems:
        raise ConfigError(problems)


def load_config(config_path: Optional[Union[str, Path]] = None) -> ScoringConfig:
    """Load config from file, then environment (after loading .env)."""
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)
        else:
            logger.warning(f"Config file not found: {path}")

    load_dotenv()

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            value: Any = os.environ[env_key]
            if config_key in INT_KEYS:
                try:
                    value = int(value)
                except ValueError:
                    raise ConfigError([f"{env_key} must be an integer, got {value!r}"])
            config[config_key] = value

    validate_config(config)
    if config.get("rating_club_id") is not None:
        config["rating_club_id"] = str(config["rating_club_id"]).strip()
    return ScoringConfig(**config)


def build_context(
    mode: Union[RegulationMode, str],
    is_organizer: bool,
    config: Optional[ScoringConfig] = None,
) -> RegulatoryContext:
    """Build the per-call regulatory context from caller facts and config."""
    config = config or DEFAULT_CONFIG
    return RegulatoryContext(
        mode=RegulationMode(mode),
        is_organizer=is_organizer,
        self_reporting_enforced_from=config.self_reporting_enforced_from,
    )
