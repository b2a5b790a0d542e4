# app/config.py
import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === Algemene app settings ===
    app_env: str = "local"  # local | development | production

    # === Cashback tiers (defaults als de settings store niets levert) ===
    CASHBACK_TIER_1_THRESHOLD: float = Field(500, description="Subtotal vanaf waar tier 1 geldt")
    CASHBACK_TIER_1_PERCENTAGE: float = 3.0
    CASHBACK_TIER_2_THRESHOLD: float = 1000
    CASHBACK_TIER_2_PERCENTAGE: float = 5.0
    CASHBACK_TIER_3_THRESHOLD: float = 1500
    CASHBACK_TIER_3_PERCENTAGE: float = 7.0

    # === Brand / product rules ===
    CASHBACK_USE_BRANDS_LOGIC: bool = False
    CASHBACK_BRAND_TAXONOMY: str = "product_brand"

    # === Limits (read-only hier, bookkeeping zit buiten deze service) ===
    CASHBACK_USAGE_LIMIT_PERCENTAGE: float = 50.0
    CASHBACK_MAX_LIMIT: float = 10000.0

    # === Logging ===
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_rotation: str = "1 day"
    log_retention: str = "30 days"

    # === Pydantic Settings config ===
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def tier_rows(self) -> list[tuple[float, float]]:
        """(threshold, percentage) per tier, laagste tier eerst."""
        return [
            (self.CASHBACK_TIER_1_THRESHOLD, self.CASHBACK_TIER_1_PERCENTAGE),
            (self.CASHBACK_TIER_2_THRESHOLD, self.CASHBACK_TIER_2_PERCENTAGE),
            (self.CASHBACK_TIER_3_THRESHOLD, self.CASHBACK_TIER_3_PERCENTAGE),
        ]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance met simpele env-overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.log_level = "WARNING"
    elif env == "development":
        s.log_level = "DEBUG"

    return s


def get_usage_limit_percentage() -> float:
    return float(get_settings().CASHBACK_USAGE_LIMIT_PERCENTAGE)


def get_max_cashback_limit() -> float:
    return float(get_settings().CASHBACK_MAX_LIMIT)
