# Landmark proxy configuration (env vars / .env)

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "Local Landmarks"
    VERSION: str = "0.2.0"
    BRIEF_DESCRIPTION: str = "Discover encyclopedia landmarks around any point on the map, powered by the Wikipedia geosearch API."

    ENV: str = Field("development", description="Application environment (e.g., production, development)")
    LOG_LEVEL: str = Field("INFO", description="Minimum level emitted by the root logger (DEBUG, INFO, WARNING, ...)")
    CORS_ORIGINS: List[str] = Field(default_factory=list, description="Origins allowed to call the API from a browser")

    # --- Upstream (Wikipedia MediaWiki API) ---
    WIKIPEDIA_API_URL: str = Field("https://en.wikipedia.org/w/api.php", description="MediaWiki action API endpoint")
    WIKIPEDIA_USER_AGENT: str = Field(
        "LocalLandmarks/0.2 (https://github.com/local-landmarks)",
        description="User-Agent sent upstream, as the MediaWiki API etiquette asks for",
    )
    WIKIPEDIA_TIMEOUT: float = 8.0  # seconds
    GEOSEARCH_LIMIT: int = 50
    THUMBNAIL_SIZE: int = 400  # px

    # --- Search radius (meters) ---
    DEFAULT_SEARCH_RADIUS: float = 5000
    MIN_SEARCH_RADIUS: float = 10
    MAX_SEARCH_RADIUS: float = 10000

    # --- Rate limiting (per client, fixed window) ---
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_MAX_REQUESTS: int = 60
    RATE_LIMIT_MAX_CLIENTS: int = Field(10000, description="Upper bound on tracked client keys")
    RATE_LIMIT_SWEEP_SECONDS: int = Field(60, description="Interval between sweeps of expired entries")
    TRUST_FORWARDED_FOR: bool = Field(
        False,
        description="Key rate limits on the first X-Forwarded-For address instead of the peer address",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )


settings = Settings()
