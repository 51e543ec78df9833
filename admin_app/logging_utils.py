# admin_app/logging_utils.py
import os
import json
import logging
from datetime import datetime

from admin_app.config import cfg
from admin_app.text_utils import sanitize_for_log  # never log role blocks

TRANSCRIPT_PATTERN = "transcript_{date}.jsonl"
ACTIONS_PATTERN = "actions_{date}.jsonl"
CONTEXT_FILE = "context.json"


def setup_logging(level: str | None = None):
    """Configure root logging once for the CLI and scripts."""
    logging.basicConfig(
        level=getattr(logging, (level or cfg.LOG_LEVEL), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _logs_dir() -> str:
    path = os.path.abspath(cfg.LOGS_DIR)
    os.makedirs(path, exist_ok=True)
    return path


def _today_file(pattern: str) -> str:
    return os.path.join(_logs_dir(), pattern.format(date=datetime.now().strftime("%Y-%m-%d")))


def _append(path: str, rec: dict):
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(rec, ensure_ascii=False, default=str) + "\n")


def log_turn(role: str, text: str):
    """
    Write one admin/assistant turn to the daily transcript JSONL.
    Text is sanitized to strip accidental role headers and code fences.
    """
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    rec = {"ts": now, "role": role, "text": sanitize_for_log(text or "")}
    try:
        _append(_today_file(TRANSCRIPT_PATTERN), rec)
    except Exception as e:
        logging.error(f"Failed to write transcript: {e}")


def log_action(name: str, params: dict, ok: bool, message: str = ""):
    """Append one dispatched admin action to the daily audit trail."""
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    rec = {
        "ts": now,
        "action": name,
        "params": params,
        "ok": bool(ok),
        "message": sanitize_for_log(message, max_len=1000),
    }
    try:
        _append(_today_file(ACTIONS_PATTERN), rec)
    except Exception as e:
        logging.error(f"Failed to write action audit log: {e}")


def save_context(turns: list[dict]):
    """Persist the last N conversation turns into context.json."""
    ctx_file = os.path.join(_logs_dir(), CONTEXT_FILE)
    try:
        with open(ctx_file, "w", encoding="utf-8") as f:
            json.dump(turns[-(cfg.CONTEXT_TURNS * 2):], f, ensure_ascii=False, indent=2)
    except Exception as e:
        logging.error(f"Failed to save context: {e}")


def load_context() -> list[dict]:
    """
    Load previous conversation context from context.json.
    Returns [] if none or if parsing fails.
    """
    ctx_file = os.path.join(_logs_dir(), CONTEXT_FILE)
    if os.path.exists(ctx_file):
        try:
            with open(ctx_file, "r", encoding="utf-8") as f:
                ctx = json.load(f)
                return ctx if isinstance(ctx, list) else []
        except Exception as e:
            logging.error(f"Failed to load context: {e}")
    return []


def should_exit(text: str) -> bool:
    t = (text or "").lower().strip()
    return t in cfg.EXIT_WORDS
