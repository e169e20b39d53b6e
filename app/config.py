import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Local SQLite file by default; production points this at PostgreSQL
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./workshop.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

# Frontend base URL (CORS)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv(
    "EMAIL_FROM_ADDRESS", "Les Cycles Larivière <atelier@lescycleslariviere.com>"
)

# HTTP notification function (takes precedence over Resend when set)
# Expects JSON {to, subject, body, repairId, clientName} and a Bearer session token
NOTIFICATION_FUNCTION_URL = os.getenv("NOTIFICATION_FUNCTION_URL")
NOTIFICATION_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "10"))

# Shop identity used in outgoing emails
SHOP_NAME = os.getenv("SHOP_NAME", "Les Cycles Larivière")
SHOP_NOTIFICATION_EMAIL = os.getenv(
    "SHOP_NOTIFICATION_EMAIL", "technicien@lescycleslariviere.com"
)

# Pricing defaults (hourly rate is overridden by the admin settings row)
DEFAULT_HOURLY_RATE = Decimal(os.getenv("DEFAULT_HOURLY_RATE", "60"))
DETAILED_QUOTE_FEE = Decimal(os.getenv("DETAILED_QUOTE_FEE", "50"))

# Sign-in throttling
SIGN_IN_RATE_LIMIT = int(os.getenv("SIGN_IN_RATE_LIMIT", "10"))
SIGN_IN_RATE_WINDOW_SECONDS = int(os.getenv("SIGN_IN_RATE_WINDOW_SECONDS", "300"))
