"""Process-wide settings for finplan, read once from the environment (.env supported)."""

from pathlib import Path

from dotenv import load_dotenv

from finplan.utils import clean_env, env_int

load_dotenv()

# --- AI providers ---
GEMINI_PROVIDER = "gemini_studio"
GEMINI_BASE_URL = clean_env("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
GEMINI_MODEL = clean_env("GEMINI_MODEL", "gemini-2.0-flash")

OPENROUTER_BASE_URL = clean_env("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODELS = {
    "kimi": clean_env("OPENROUTER_MODEL_KIMI", "moonshotai/kimi-k2"),
    "mistral": clean_env("OPENROUTER_MODEL_MISTRAL", "mistralai/mistral-small-3.2-24b-instruct"),
    "llama": clean_env("OPENROUTER_MODEL_LLAMA", "meta-llama/llama-3.3-70b-instruct"),
    "deepseek": clean_env("OPENROUTER_MODEL_DEEPSEEK", "deepseek/deepseek-chat"),
}

PROVIDERS = [GEMINI_PROVIDER] + list(OPENROUTER_MODELS)

LLM_TIMEOUT_SECONDS = env_int("FINPLAN_LLM_TIMEOUT", 60)


def api_key_for(provider: str) -> str:
    """API key for ``provider``: ``<PROVIDER>_API_KEY``, then ``OPENROUTER_API_KEY`` for routed models."""
    key = clean_env(f"{provider.upper()}_API_KEY")
    if not key and provider in OPENROUTER_MODELS:
        key = clean_env("OPENROUTER_API_KEY")
    return key


# --- Twilio / WhatsApp ---
TWILIO_ACCOUNT_SID = clean_env("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = clean_env("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = clean_env("TWILIO_PHONE_NUMBER")  # e.g. 'whatsapp:+14155238886'
TWILIO_API_BASE = clean_env("TWILIO_API_BASE", "https://api.twilio.com/2010-04-01")
TWILIO_TIMEOUT_SECONDS = env_int("TWILIO_TIMEOUT", 15)

# --- Web server / media ---
PUBLIC_BASE_URL = clean_env("FINPLAN_PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/")
MEDIA_DIR = Path(clean_env("FINPLAN_MEDIA_DIR", "media"))
HOST = clean_env("FINPLAN_HOST", "0.0.0.0")
PORT = env_int("PORT", 3000)

# --- Plan limits ---
MAX_PLAN_STEPS = env_int("FINPLAN_MAX_STEPS", 30)
