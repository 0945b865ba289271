from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Commanderdle"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/commanderdle"

    topdeck_base_url: str = "https://topdeck.gg/api"
    topdeck_api_key: str = ""

    scryfall_base_url: str = "https://api.scryfall.com"

    # Topdeck responses can take ~30s on its side
    http_timeout_s: float = 45.0
    http_max_attempts: int = 3

    tournament_lookback_days: int = 90
    tournament_min_participants: int = 20
    tournament_game: str = "Magic: The Gathering"
    tournament_format: str = "EDH"
    competitive_marker: str = "cedh"
    max_tournament_attempts: int = 5

    scryfall_batch_size: int = 75
    scryfall_batch_delay_s: float = 0.1

    # Outer retry loop of the daily generation job
    generation_max_attempts: int = 3
    generation_backoff_s: float = 10.0


settings = Settings()


# =============================================================================
# FIXED UPSTREAM LIMITS
# =============================================================================

# Scryfall /cards/collection rejects more identifiers than this per request
SCRYFALL_MAX_IDENTIFIERS = 75

USER_AGENT = "Commanderdle/1.0"
