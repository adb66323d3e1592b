import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./signalist.db")

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
# Web API key is required for password sign-in through the Identity Toolkit REST API
FIREBASE_WEB_API_KEY = os.getenv("FIREBASE_WEB_API_KEY")
FIREBASE_AUTH_BASE_URL = os.getenv(
    "FIREBASE_AUTH_BASE_URL", "https://identitytoolkit.googleapis.com/v1"
)

# Gemini Configuration
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")
GEMINI_API_BASE_URL = os.getenv(
    "GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "60"))

# Finnhub Configuration
FINNHUB_API_KEY = os.getenv("FINNHUB_API_KEY")
FINNHUB_BASE_URL = os.getenv("FINNHUB_BASE_URL", "https://finnhub.io/api/v1")

# Public base URL of the web app (used for email links and deletion callback)
APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Signalist <noreply@signalist.app>")

# Daily news summary cron (UTC hour)
NEWS_SUMMARY_HOUR_UTC = int(os.getenv("NEWS_SUMMARY_HOUR_UTC", "12"))

# Confirming an account deletion requires a sign-in this recent (seconds),
# normally the one made from the emailed confirmation link
DELETE_ACCOUNT_MAX_SESSION_AGE_SECONDS = int(
    os.getenv("DELETE_ACCOUNT_MAX_SESSION_AGE_SECONDS", "600")
)
