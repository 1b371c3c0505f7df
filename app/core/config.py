import json
import os
from typing import List, Union
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Checkout Relay")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    STORE_NAME: str = os.getenv("STORE_NAME", "MiracleMods")

    # Stripe
    STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET: str = os.getenv("STRIPE_WEBHOOK_SECRET", "")
    STRIPE_API_BASE: str = os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1")
    STRIPE_WEBHOOK_TOLERANCE: int = int(os.getenv("STRIPE_WEBHOOK_TOLERANCE", "300"))

    # WooCommerce
    WOOCOMMERCE_URL: str = os.getenv("WOOCOMMERCE_URL", "https://miraclemods.com")
    WOOCOMMERCE_CONSUMER_KEY: str = os.getenv("WOOCOMMERCE_CONSUMER_KEY", "")
    WOOCOMMERCE_CONSUMER_SECRET: str = os.getenv("WOOCOMMERCE_CONSUMER_SECRET", "")

    # Checkout
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "")
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "usd")

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and v.startswith("["):
            return json.loads(v)
        elif isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    @field_validator("WOOCOMMERCE_URL", "STRIPE_API_BASE", "PUBLIC_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().lower()

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
        enable_decoding=False,
    )

settings = Settings()
