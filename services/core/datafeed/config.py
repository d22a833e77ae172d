from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the directory where this config.py file is located
_config_dir = Path(__file__).parent
_env_file = _config_dir.parent / ".env"  # services/core/.env


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_env_file),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8888  # first port probed by the launcher
    log_level: str = "INFO"

    # Symbol store
    symbols_db_path: str = "data/symbols.db"

    # Upstream hosts
    primary_history_host: str = "ichart.finance.yahoo.com"
    secondary_history_host: str = "www.quandl.com"
    quote_host: str = "query.yahooapis.com"
    metadata_host: str = "query1.finance.yahoo.com"
    news_host: str = "feeds.finance.yahoo.com"
    futures_news_host: str = "www.futuresmag.com"

    # Provider keys (free account on quandl.com)
    quandl_api_key: str | None = None

    # Fetch / failover / cache
    fetch_timeout_seconds: float = 5.0  # idle socket timeout per outbound request
    failover_cooldown_seconds: float = 60 * 60  # stay on the secondary provider for 1 hour
    history_cache_clear_seconds: float = 3 * 60 * 60

    # Advertised in /config and /symbols
    supported_resolutions: str = "D,2D,3D,W,3W,M,6M"

    def get_supported_resolutions(self) -> list[str]:
        """Parse advertised resolutions."""
        return [r.strip() for r in self.supported_resolutions.split(",") if r.strip()]


def get_settings() -> Settings:
    return Settings()
