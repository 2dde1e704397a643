"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'rh_notifier.sqlite'}")

# RH window: batches whose expiry falls within this many days are flagged for return
RH_DAYS = int(os.getenv("RH_DAYS", "14"))

# WhatsApp gateway (Fonnte)
FONNTE_TOKEN = os.getenv("FONNTE_TOKEN", "")
FONNTE_TOKEN_PLACEHOLDER = "your_fonnte_token_here"
FONNTE_TOKEN_MIN_LENGTH = 10
FONNTE_API_URL = os.getenv("FONNTE_API_URL", "https://api.fonnte.com/send")
WHATSAPP_COUNTRY_CODE = os.getenv("WHATSAPP_COUNTRY_CODE", "62")
WHATSAPP_TIMEOUT_SECONDS = float(os.getenv("WHATSAPP_TIMEOUT_SECONDS", "15"))

# "fonnte" | "mock" (mock appends to an outbox JSON file instead of sending)
WHATSAPP_PROVIDER = os.getenv("WHATSAPP_PROVIDER", "fonnte").lower()
WHATSAPP_OUTBOX_PATH = Path(os.getenv("WHATSAPP_OUTBOX_PATH", str(OUTPUT_DIR / "whatsapp_outbox.json")))

# HTTP API
API_PORT = int(os.getenv("API_PORT", "8000"))

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# OpenTelemetry
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "")
SERVICE_NAME = os.getenv("SERVICE_NAME", "rh-notifier")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")
