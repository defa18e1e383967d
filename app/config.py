"""Application configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

ENV = os.getenv("ENV")
ENV_IS_PROD = ENV == "prod"
COMMIT_HASH = os.getenv("COMMIT_HASH")
if not COMMIT_HASH and ENV_IS_PROD:
    raise ValueError("COMMIT_HASH is required for production environments")

APP_ADDR = os.getenv("HOST", "0.0.0.0")
APP_PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Database
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is required")
SQL_DEBUG = os.getenv("SQL_DEBUG", "false").lower() == "true"

# Conversations
TYPING_TTL_SECONDS = int(os.getenv("TYPING_TTL_SECONDS", "10"))

# Outbox dispatcher
OUTBOX_DISPATCHER_ENABLED = (
    os.getenv("OUTBOX_DISPATCHER_ENABLED", "true").lower() == "true"
)
OUTBOX_POLL_INTERVAL_SECONDS = float(os.getenv("OUTBOX_POLL_INTERVAL_SECONDS", "2.0"))
OUTBOX_BATCH_SIZE = int(os.getenv("OUTBOX_BATCH_SIZE", "100"))
OUTBOX_MAX_ATTEMPTS = int(os.getenv("OUTBOX_MAX_ATTEMPTS", "5"))
OUTBOX_CLAIM_SECONDS = int(os.getenv("OUTBOX_CLAIM_SECONDS", "60"))

# Live delivery gateway
REALTIME_GATEWAY_URL = os.getenv("REALTIME_GATEWAY_URL")
REALTIME_GATEWAY_API_KEY = os.getenv("REALTIME_GATEWAY_API_KEY", "")
