import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent
env_path = PROJECT_ROOT / ".env"
load_dotenv(dotenv_path=env_path)

BUSINESS_NAME = os.getenv("BUSINESS_NAME", "KMI Services")

# Pricing catalog (list of catalog rows exported from the pricing spreadsheet)
PRICING_DATA_PATH = os.getenv("PRICING_DATA_PATH", str(PROJECT_ROOT / "data" / "pricing_data.json"))
# "cached" loads once and re-reads only when the file changes, "fresh" re-reads per request
PRICING_CACHE_MODE = os.getenv("PRICING_CACHE_MODE", "cached").lower()

# Quote record document
QUOTES_DATA_DIR = os.getenv("QUOTES_DATA_DIR", str(PROJECT_ROOT / "data" / "quotes"))
QUOTES_FILE_NAME = os.getenv("QUOTES_FILE_NAME", "quotes.json")

# Frontend origins allowed by CORS
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
).split(",")

# Email
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "KMI Services <quotes@kmiservices.co.uk>")
QUOTES_NOTIFY_TO = os.getenv("QUOTES_NOTIFY_TO", "info@kmiservices.co.uk")
# When disabled, rendered emails are logged instead of sent (development default)
EMAIL_DELIVERY_ENABLED = os.getenv("EMAIL_DELIVERY_ENABLED", "false").lower() == "true"

# Resend Email Configuration (fallback when no SMTP host is configured)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")

# SMTP Configuration
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

# IANA zone used to decide which calendar day, week, month or quarter a quote falls in
REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "Europe/London")
