from __future__ import annotations
import os, json, time, logging

from admin_app.config import cfg

TELEMETRY_FILE = "telemetry.log"


def log_event(kind: str, payload: dict):
    rec = {"ts": time.time(), "kind": kind, "payload": payload}
    try:
        os.makedirs(cfg.LOGS_DIR, exist_ok=True)
        with open(os.path.join(cfg.LOGS_DIR, TELEMETRY_FILE), "a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False, default=str) + "\n")
    except Exception as e:
        logging.error(f"Failed to write telemetry: {e}")
