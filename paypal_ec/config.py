import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Force-load .env (Windows-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


class GatewayConfig(BaseModel):
    """Settings an admin enters for the PayPal Express Checkout gateway."""

    client_id: str = ""
    client_secret: str = ""
    mode: Literal["live", "sandbox"] = "sandbox"
    # 0 bills immediately, 1-31 bills on that day of the month
    recurring_start_date: int = Field(default=0, ge=0, le=31)
    base_url: str = "http://localhost:8000"

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value):
        return "live" if value == "live" else "sandbox"

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def load_gateway_config() -> GatewayConfig:
    return GatewayConfig(
        client_id=os.getenv("PAYPAL_CLIENT_ID", ""),
        client_secret=os.getenv("PAYPAL_CLIENT_SECRET", ""),
        mode=os.getenv("PAYPAL_MODE", "sandbox"),
        recurring_start_date=int(os.getenv("PAYPAL_RECURRING_START_DATE", "0") or 0),
        base_url=os.getenv("PAYPAL_BASE_URL", "http://localhost:8000"),
    )


DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set. Check your .env file.")

JWT_SECRET = os.getenv("JWT_SECRET")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
