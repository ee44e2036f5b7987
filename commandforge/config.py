from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "commandforge"
    debug: bool = False

    scryfall_base_url: str = "https://api.scryfall.com"
    scryfall_user_agent: str = "commandforge/1.0"
    scryfall_timeout: float = 30.0

    # Scryfall asks for 50-100ms between requests
    min_request_interval: float = 0.1

    # 429 handling: bounded retry, delay grows by one step per attempt
    max_rate_limit_retries: int = 3
    rate_limit_backoff: float = 1.0


settings = Settings()


# =============================================================================
# CATALOG LIMITS
# =============================================================================

# Bulk lookup ceiling for POST /cards/collection
COLLECTION_CHUNK_SIZE = 75

# Game changer membership is re-fetched wholesale after this long
GAME_CHANGER_TTL_SECONDS = 30 * 60

# Autocomplete is not worth a request below this many characters
AUTOCOMPLETE_MIN_LENGTH = 2

BASIC_LAND_NAMES = (
    "Plains",
    "Island",
    "Swamp",
    "Mountain",
    "Forest",
    "Wastes",
)
