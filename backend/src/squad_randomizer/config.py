"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Chat command trigger
    command: str = "squadrandomize"
    admin_chat: str = "ChatAdmin"

    # Game server admin bridge (empty URL = in-memory server)
    game_server_url: str = ""
    game_server_token: str = ""
    game_server_timeout: float = 10.0

    # Diagnostics (env var RANDOMIZER_DIAGNOSTICS overrides at runtime)
    diagnostics_enabled: bool = False
    diagnostics_dir: str = ""

    # Player-facing messages
    start_message: str = "Teams are being randomized, please wait a moment..."
    done_message: str = "Teams have been shuffled. Good luck!"
    no_players_message: str = "No players found to randomize."
    failure_message: str = "Randomizer failed - see server console for details."
    summary_template: str = "Team 1 = {team1} players, Team 2 = {team2} players."


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
