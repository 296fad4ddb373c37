from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # HTTP Basic credentials (override the persisted settings store)
    CHIP_API_BA_USERNAME: Optional[str] = None
    CHIP_API_BA_PASSWORD: Optional[str] = None

    # API
    API_BASE_URI: str = "https://bc-api.bestcheck.de"
    API_VERSION: str = "1"
    DETAIL_PAGE_BASE_URL: str = "https://www.bestcheck.de/"

    # Transport
    DEFAULT_TIMEOUT: int = 10
    MAX_RETRIES: int = 1
    RETRY_DELAY: int = 1

    # Offer selection
    OFFER_BATCH_SIZE: int = 10
    MAX_NON_AMAZON_OFFERS: int = 3
    AMAZON_MERCHANT_NAME: str = "Amazon"

    # Persisted settings (chip_api.settings)
    SETTINGS_FILE: str = "chip_api.settings.json"

    LOG_LEVEL: str = "INFO"

settings = Settings()
