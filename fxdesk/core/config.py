from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, PORT, DATA_DIR, RATES_FILENAME).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Currency Converter"
    debug: bool = False
    version: str = "0.1.0"

    # Listening socket
    host: str = "127.0.0.1"
    port: int = 3000

    # Rate table persistence
    data_dir: Path = Path("data")
    rates_filename: str = "exchange-rates.json"
    rates_path: Optional[Path] = None  # derived if not provided

    # Currency every rate is quoted against; cannot be deleted
    base_currency: str = "USD"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.rates_path is None:
            self.rates_path = self.data_dir / self.rates_filename
        # Ensure persistence directory exists
        self.rates_path.parent.mkdir(parents=True, exist_ok=True)
        self.base_currency = self.base_currency.strip().upper()
        if not self.base_currency:
            raise ValueError("base_currency must not be empty")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
