from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    EXCHANGE_RATE_PROVIDER, RAZORPAY_KEY_SECRET, KYC_DELAY_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Enkrypt Exchange"
    debug: bool = False  # verbose logging only
    version: str = "0.1.0"
    cors_allow_origins: List[str] = ["*"]

    # Exchange rates
    # Allowed: 'static' (fallback constant only), 'coingecko', 'exchangerate-api'
    exchange_rate_provider: str = "coingecko"
    coingecko_url: str = (
        "https://api.coingecko.com/api/v3/simple/price?ids=tether&vs_currencies=inr"
    )
    exchangerate_api_url: str = "https://api.exchangerate-api.com/v4/latest/USD"
    fallback_rate: float = 0.012  # USDT per 1 INR
    http_timeout_seconds: float = 5.0
    rates_cache_ttl_seconds: int = 300
    rates_fallback_ttl_seconds: int = 30

    # Payments (signature secret shared with the checkout widget)
    razorpay_key_id: str = "rzp_test_1234567890"
    razorpay_key_secret: str = "test_secret_key"

    # Simulated external effects
    kyc_delay_seconds: float = 2.0
    kyc_success_probability: float = 0.7
    payment_delay_seconds: float = 1.0
    payment_success_probability: float = 0.9
    transfer_delay_seconds: float = 3.0
    transfer_success_probability: float = 0.95

    # KYC uploads
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = 5 * 1024 * 1024

    def init_post_load(self) -> None:
        """Validate derived fields and ensure directories exist."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        allowed = {"static", "coingecko", "exchangerate-api"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        for name in (
            "kyc_success_probability",
            "payment_success_probability",
            "transfer_success_probability",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
