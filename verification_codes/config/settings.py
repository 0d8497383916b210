"""
Environment settings loaded from .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Normalization ---
MAX_BODY_CHARS: int = int(os.getenv("MAX_BODY_CHARS", "50000"))

# --- Scoring ---
CONTEXT_WINDOW_CHARS: int = int(os.getenv("CONTEXT_WINDOW_CHARS", "100"))

# --- Deny-list ---
YEAR_MIN: int = int(os.getenv("YEAR_MIN", "2015"))
YEAR_MAX: int = int(os.getenv("YEAR_MAX", "2035"))
REJECT_FIVE_DIGIT_CODES: bool = os.getenv("REJECT_FIVE_DIGIT_CODES", "true").lower() == "true"

# --- Ranking ---
DEDUP_MODE: str = os.getenv("DEDUP_MODE", "code_sender")

# --- Candidate shape ---
ALPHANUMERIC_CODES: bool = os.getenv("ALPHANUMERIC_CODES", "false").lower() == "true"
