from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    BASE_CURRENCY, RATES_STALE_AFTER_SECONDS, BUDGET_GOOD_PCT).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "NomadGuide Budget Engine"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rates
    base_currency: str = "USD"
    # Allowed: 'static' (offline table), 'external-http' (exchangerate-api style endpoint)
    exchange_rate_provider: str = "static"
    exchange_api_base_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest"
    http_timeout_seconds: float = 5.0
    http_retries: int = 2
    rates_stale_after_seconds: int = 24 * 60 * 60

    # Budget status policy, percent of initial budget still available
    budget_good_pct: float = 20.0
    budget_warning_pct: float = 5.0

    # Reporting windows
    monthly_trend_months: int = 6
    weekly_series_weeks: int = 8

    # Calendar days are resolved in this timezone
    timezone: str = "UTC"

    def init_post_load(self) -> None:
        """Normalize and validate derived fields."""
        self.base_currency = self.base_currency.strip().upper()
        allowed = {"static", "external-http"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        if not (0 <= self.budget_warning_pct < self.budget_good_pct <= 100):
            raise ValueError(
                "Invalid budget thresholds: require 0 <= warning < good <= 100"
            )
        if self.rates_stale_after_seconds <= 0:
            raise ValueError("rates_stale_after_seconds must be positive")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{self.timezone}'") from exc

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
