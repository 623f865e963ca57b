# config/settings.py
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./investizen.db")

# ─── Connection-pool tuning ────────────────────────────────────────
# Ignored for SQLite URLs (single-file / in-memory engines).
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "1800"))

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")

# Money in alert/insight messages is rendered in whole units.
DISPLAY_CURRENCY = (os.getenv("DISPLAY_CURRENCY") or "INR").upper()
DISPLAY_LOCALE_GROUPING = (os.getenv("DISPLAY_LOCALE_GROUPING") or "indian").strip().lower()

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "CA$",
}
