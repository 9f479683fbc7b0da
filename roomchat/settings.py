"""Runtime configuration for roomchat, read from the environment."""
import os
from dotenv import load_dotenv

# Load environment variables from a local .env file if one exists
load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./roomchat.db")

# Secret shared with the external auth flow that issues bearer tokens
AUTH_SECRET = os.environ.get("AUTH_SECRET", "roomchat-dev-secret-change-me")
AUTH_ALGORITHM = os.environ.get("AUTH_ALGORITHM", "HS256")

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

# Per-connection buffer of undelivered live messages
SUBSCRIBER_QUEUE_SIZE = int(os.environ.get("SUBSCRIBER_QUEUE_SIZE", "100"))

HISTORY_LIMIT_DEFAULT = 50
HISTORY_LIMIT_MAX = int(os.environ.get("HISTORY_LIMIT_MAX", "200"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

VERSION = "1.0.0"
