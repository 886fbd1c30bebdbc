import os
from dotenv import load_dotenv
from pathlib import Path

# Go up one level from newsbubble/ to root/
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Reasoning service (any OpenAI-compatible chat completions endpoint)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
REASONER_TIMEOUT_S = float(os.getenv("REASONER_TIMEOUT_S", "45"))

# Recommendation engine knobs
MIN_HISTORY_CLICKS = int(os.getenv("MIN_HISTORY_CLICKS", "1"))
PROFILE_OVERRIDE_MIN_CHARS = int(os.getenv("PROFILE_OVERRIDE_MIN_CHARS", "100"))
ARTICLES_PER_SECTION = int(os.getenv("ARTICLES_PER_SECTION", "4"))
CANDIDATE_LIMIT = int(os.getenv("CANDIDATE_LIMIT", "100"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))

# Ingestion
INGEST_INTERVAL_MINUTES = int(os.getenv("INGEST_INTERVAL_MINUTES", "30"))
MAX_ITEMS_PER_FEED = int(os.getenv("MAX_ITEMS_PER_FEED", "10"))
FEED_TIMEOUT_S = float(os.getenv("FEED_TIMEOUT_S", "15"))

# Other configuration variables
TIMEZONE = os.getenv("TIMEZONE", "Europe/Rome")
DB_URL = os.getenv("DB_URL", "sqlite:///newsbubble.db")
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", "")


def build_reasoner():
    """
    Create the reasoning client from environment configuration.
    Call sites receive the client as a dependency; nothing below the routers
    reads these settings directly.
    """
    from .reasoner import ReasoningClient

    return ReasoningClient(
        api_key=OPENAI_API_KEY,
        base_url=OPENAI_BASE_URL,
        model=OPENAI_MODEL,
        timeout=REASONER_TIMEOUT_S,
    )
