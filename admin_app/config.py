# admin_app/config.py

import os
from dotenv import load_dotenv

# ✅ Load .env file at the start
load_dotenv()


def _getenv_list(name: str, default: str = "") -> list[str]:
    raw = os.getenv(name, default) or ""
    raw = raw.replace("\n", " ")
    parts = [p.strip() for p in raw.split(",")]
    return [p for p in parts if p]


def _getenv_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    # -----------------------------
    # 🔥 Firebase (document store + realtime tree)
    # -----------------------------
    FIREBASE_KEY_PATH = os.getenv("FIREBASE_KEY_PATH", "firebase-key.json").strip()
    FIREBASE_DATABASE_URL = os.getenv("FIREBASE_DATABASE_URL", "").strip()
    FIREBASE_ENABLED = _getenv_bool("FIREBASE_ENABLED", "1")

    # -----------------------------
    # Groq API (✅ Primary LLM, OpenAI-compatible tool calling)
    # -----------------------------
    GROQ_API_KEY = os.getenv("GROQ_API_KEY", "").strip()
    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant").strip()
    GROQ_API_URL = os.getenv("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions").strip()
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))
    LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "512"))
    LLM_CONNECT_TIMEOUT = float(os.getenv("LLM_CONNECT_TIMEOUT", "5"))
    LLM_READ_TIMEOUT = float(os.getenv("LLM_READ_TIMEOUT", "60"))
    LLM_HEALTHCHECK_SECONDS = int(os.getenv("LLM_HEALTHCHECK_SECONDS", "10"))
    LLM_MAX_TOOL_ROUNDS = int(os.getenv("LLM_MAX_TOOL_ROUNDS", "4"))
    SYSTEM_PROMPT = os.getenv(
        "SYSTEM_PROMPT",
        "You are the admin assistant of a learning platform. "
        "Use the provided tools to manage users, subscriptions, gift codes and settings. "
        "Confirm what you did in one or two short sentences.",
    )

    # -----------------------------
    # Admin actions
    # -----------------------------
    ACTION_AGENT_ID = os.getenv("ACTION_AGENT_ID", "AI_AGENT").strip()
    GIFT_CODE_GENERATOR = os.getenv("GIFT_CODE_GENERATOR", "AI_ADMIN").strip()
    GIFT_CODE_LENGTH = int(os.getenv("GIFT_CODE_LENGTH", "12"))
    DEFAULT_CLASS_LEVEL = os.getenv("DEFAULT_CLASS_LEVEL", "10").strip()
    INACTIVE_AFTER_DAYS = int(os.getenv("INACTIVE_AFTER_DAYS", "30"))
    RECENT_LOGS_LIMIT = int(os.getenv("RECENT_LOGS_LIMIT", "20"))

    # -----------------------------
    # Read-aloud / TTS
    # -----------------------------
    TTS_ENABLED = _getenv_bool("TTS_ENABLED", "1")
    VOICE = os.getenv("VOICE", "en-US-AriaNeural").strip()
    TTS_LANG = os.getenv("TTS_LANG", "en-US").strip()
    TTS_RATE = float(os.getenv("TTS_RATE", "1.0"))
    TTS_PREFERRED_VENDOR = os.getenv("TTS_PREFERRED_VENDOR", "Natural").strip()
    VOICE_LIST_TIMEOUT = float(os.getenv("VOICE_LIST_TIMEOUT", "2.0"))
    AUDIO_DIR = os.getenv("AUDIO_DIR", "audio").strip()
    KEEP_TTS = _getenv_bool("KEEP_TTS", "0")
    READ_ALOUD = _getenv_bool("READ_ALOUD", "0")

    # -----------------------------
    # Logs
    # -----------------------------
    LOGS_DIR = os.getenv("LOGS_DIR", "logs").strip()
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    CONTEXT_TURNS = int(os.getenv("CONTEXT_TURNS", "10"))
    EXIT_WORDS = _getenv_list("EXIT_WORDS", "quit,exit")


cfg = Config()
