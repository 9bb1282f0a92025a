# gold_ledger/core/config/settings.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from gold_ledger.core.constants import DEFAULT_STORAGE_KEY
from gold_ledger.core.enums.fee_split_policy import FeeSplitPolicy

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or .env file.
    Includes general app settings, ledger storage location and batch fee policy.
    """
    # General App Settings
    APP_NAME: str = "Gold Ledger API"
    APP_VERSION: str = "0.1.0"
    DEBUG_MODE: bool = False

    # API Specific Settings
    API_V1_STR: str = "/api/v1"

    # Logging Settings
    LOG_LEVEL: str = "INFO" # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Ledger Settings
    DECIMAL_PRECISION: int = 18
    LEDGER_FILE: Path = Path("gold_ledger.json")
    STORAGE_KEY: str = DEFAULT_STORAGE_KEY
    FEE_SPLIT_POLICY: FeeSplitPolicy = FeeSplitPolicy.EVEN

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parents[3] / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

settings = Settings()
