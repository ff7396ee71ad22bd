import logging
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from player_number.models.enums import League


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Upstream Stats API
    api_base_url: str = Field(
        "https://api.mysportsfeeds.com/v1.1/pull/",
        description="Base URL of the stats API; the league tag is appended to it.",
    )
    api_username: str = Field(..., description="Basic auth user for the stats API.")
    api_password: str = Field(..., description="Basic auth password for the stats API.")
    teams_path: str = Field(
        "/latest/overall_team_standings.json",
        description="Path suffix for team standings, appended after the league.",
    )
    games_path: str = Field(
        "/latest/full_game_schedule.json",
        description="Path suffix for the game schedule, appended after the league.",
    )
    players_path: str = Field(
        "/latest/cumulative_player_stats.json",
        description="Path suffix for player stats, appended after the league.",
    )
    leagues: List[League] = Field(
        default_factory=lambda: [League.NHL, League.NBA, League.NFL, League.MLB],
        min_length=1,
        description="Leagues pulled on every ingestion run.",
    )
    request_timeout: float = Field(
        30.0, gt=0, description="Timeout in seconds for a single upstream request."
    )
    fetch_attempts: int = Field(
        1,  # No retries unless a deployment opts in
        ge=1,
        le=10,
        description="Total attempts per upstream request (1 disables retries).",
    )
    league_scoped_resolution: bool = Field(
        True,
        description="Resolve team stubs by (league, id) instead of bare id.",
    )

    # Supabase Storage Configuration
    supabase_url: str = Field(..., description="URL for the Supabase project.")
    supabase_key: str = Field(..., description="Service key for the Supabase project.")
    storage_bucket: str = Field(
        "player-number", description="Storage bucket holding every snapshot."
    )
    colors_key: str = Field("colors.json", description="Team colour dataset key.")
    teams_key: str = Field("teams.json", description="Teams snapshot key.")
    games_key: str = Field("games.json", description="Games snapshot key.")
    players_key: str = Field("players.json", description="Players snapshot key.")

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    def path_for(self, kind) -> str:
        """Returns the configured path suffix for a RecordKind."""
        return {
            "team_standings": self.teams_path,
            "game_schedule": self.games_path,
            "player_stats": self.players_path,
        }[kind.value]


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")

    log_level_upper = settings.log_level.upper()
    # Validate log_level even if loaded from .env
    if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        logging.warning(
            f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
        )
        settings.log_level = "INFO"
    else:
        settings.log_level = log_level_upper
    return settings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Process-wide settings, loaded on first use."""
    return load_settings()
