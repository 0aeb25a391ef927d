# shop_service/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL") or (
        f"postgresql+asyncpg://{os.getenv('SHOP_DB_USER')}:{os.getenv('SHOP_DB_PASSWORD')}"
        f"@{os.getenv('SHOP_DB_HOST')}:{os.getenv('SHOP_DB_PORT')}/{os.getenv('SHOP_DB_NAME')}"
    )
    SQL_ECHO = _as_bool(os.getenv("SQL_ECHO"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    SEED_DATA = _as_bool(os.getenv("SEED_DATA"))
    CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Stripe, amounts are sent in minor units
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_API_BASE = os.getenv("STRIPE_API_BASE", "https://api.stripe.com")
    STRIPE_CURRENCY = os.getenv("STRIPE_CURRENCY", "mad")


settings = Settings()
