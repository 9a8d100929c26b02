import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (parent of autopilot/), then the working directory
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)
load_dotenv(Path.cwd() / ".env")


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


FORM_URL = os.getenv("FORM_URL")
QUESTIONS_FILE = os.getenv("QUESTIONS_FILE", "questions.json")
HEADLESS = _flag("HEADLESS")

# Run loop
ITERATIONS = int(os.getenv("ITERATIONS", "300"))
COOLDOWN_MIN_MS = int(os.getenv("COOLDOWN_MIN_MS", "120000"))
COOLDOWN_MAX_MS = int(os.getenv("COOLDOWN_MAX_MS", "240000"))
MAX_TIME_SECONDS = int(os.getenv("MAX_TIME_SECONDS")) if os.getenv("MAX_TIME_SECONDS") else None

# Per-session timing
SETUP_TIMEOUT_MS = int(os.getenv("SETUP_TIMEOUT_MS", "15000"))
ACTION_TIMEOUT_MS = int(os.getenv("ACTION_TIMEOUT_MS", "15000"))
ACTION_DELAY_MS = int(os.getenv("ACTION_DELAY_MS", "2000"))
CONFIRMATION_TIMEOUT_MS = int(os.getenv("CONFIRMATION_TIMEOUT_MS", "15000"))

MAX_EXCLUSION_ATTEMPTS = int(os.getenv("MAX_EXCLUSION_ATTEMPTS", "10"))
