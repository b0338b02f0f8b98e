import os
import logging
import secrets
from pathlib import Path
from dotenv import load_dotenv

log = logging.getLogger("config")

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH, override=False)

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai").strip().lower()

AI_API_KEY = os.getenv("AI_API_KEY", "")
AI_BASE_URL = os.getenv("AI_BASE_URL", "https://api.openai.com/v1")
AI_MODEL = os.getenv("AI_MODEL", "gpt-4.1-mini")

GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

LOCAL_BASE_URL = os.getenv("LOCAL_BASE_URL", "http://localhost:11434/v1")
LOCAL_MODEL = os.getenv("LOCAL_MODEL", "qwen2.5:7b-instruct")

LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

# empty -> the app's own /api/generate-mcqs
GENERATE_ENDPOINT_URL = os.getenv("GENERATE_ENDPOINT_URL", "").strip()
GENERATE_ENDPOINT_KEY = os.getenv("GENERATE_ENDPOINT_KEY", "").strip()
GENERATE_TIMEOUT = float(os.getenv("GENERATE_TIMEOUT", "90"))

DEFAULT_FEEDBACK_MODE = os.getenv("DEFAULT_FEEDBACK_MODE", "immediate").strip().lower()

ENV = os.getenv("ENV", "").lower()
IS_PROD = ENV == "prod"
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

WEB_SESSION_SECRET = os.getenv("WEB_SESSION_SECRET", "").strip()
if not WEB_SESSION_SECRET:
    log.warning("WEB_SESSION_SECRET not set, using a random per-process secret")
    WEB_SESSION_SECRET = secrets.token_urlsafe(32)

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24)))

# where the page flow reaches its own /api/generate-mcqs; never taken from a request
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").strip().rstrip("/")
_SELF_HOST = "127.0.0.1" if HOST in ("", "0.0.0.0", "::") else HOST
SELF_BASE_URL = PUBLIC_BASE_URL or f"http://{_SELF_HOST}:{PORT}"

log.debug("BASE_DIR=%s", BASE_DIR)
log.debug("ENV_PATH=%s exists=%s", ENV_PATH, ENV_PATH.exists())
log.debug("LLM_PROVIDER=%s", LLM_PROVIDER)
log.debug("AI_BASE_URL=%s", AI_BASE_URL)
log.debug("AI_MODEL=%s", AI_MODEL)
log.debug("KEY_LEN=%s", len(AI_API_KEY or ""))
log.debug("GENERATE_ENDPOINT_URL=%s", GENERATE_ENDPOINT_URL or "<self>")
log.debug("SELF_BASE_URL=%s", SELF_BASE_URL)
log.debug("DEFAULT_FEEDBACK_MODE=%s", DEFAULT_FEEDBACK_MODE)
