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
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'relief_hub.sqlite'}")

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# HTTP server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "3000"))
API_PREFIX = "/api"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Auth tokens
TOKEN_SECRET = os.getenv("TOKEN_SECRET", "relief-hub-dev-secret-change-me")
ACCESS_TOKEN_TTL_SECONDS = int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "900"))
REFRESH_TOKEN_TTL_DAYS = int(os.getenv("REFRESH_TOKEN_TTL_DAYS", "7"))

# Listing window for public help requests and the summary
HELP_REQUEST_WINDOW_DAYS = int(os.getenv("HELP_REQUEST_WINDOW_DAYS", "30"))
DEFAULT_PAGE_LIMIT = 10

# API client (Python counterpart of the web frontend)
API_URL = (
    os.getenv("NEXT_PUBLIC_API_URL")
    or os.getenv("RELIEF_HUB_API_URL")
    or "http://localhost:3000"
).rstrip("/")
API_CLIENT_TIMEOUT_SECONDS = float(os.getenv("API_CLIENT_TIMEOUT_SECONDS", "15"))
SESSION_STORE_PATH = Path(
    os.getenv("RELIEF_HUB_SESSION_PATH", str(Path.home() / ".relief-hub" / "session.json"))
)
