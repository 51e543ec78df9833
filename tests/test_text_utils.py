"""
tests/test_text_utils.py

Reply cleanup, speech sanitising and the JSONL log helpers.
"""
import json
import os

from admin_app import logging_utils
from admin_app.config import cfg
from admin_app.telemetry import log_event
from admin_app.text_utils import sanitize_for_log, strip_role_blocks, tts_sanitize


def test_strip_role_blocks():
    raw = "```assistant\nignored\n```\nassistant: Done.\nuser\n"
    assert strip_role_blocks(raw) == "Done."
    assert strip_role_blocks("") == ""


def test_tts_sanitize_html_and_entities():
    assert tts_sanitize("<p>Exam&nbsp;on <b>Monday</b></p>") == "Exam on Monday"
    assert tts_sanitize("{curly} [ok]") == "curly [ok]"


def test_tts_sanitize_caps_on_word_boundary():
    out = tts_sanitize("word " * 400, max_chars=100)
    assert out.endswith("...")
    assert len(out) <= 103
    assert "wor..." not in out


def test_sanitize_for_log_truncates():
    assert sanitize_for_log("x" * 20, max_len=10) == "x" * 9 + "…"


def _read_jsonl(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f]


def test_log_turn_and_action(tmp_path):
    logging_utils.log_turn("admin", "assistant: ban u1")
    logging_utils.log_action("ban_user", {"user_id": "u1"}, True, "User u1 updated.")

    files = sorted(os.listdir(tmp_path / "logs"))
    transcript = next(f for f in files if f.startswith("transcript_"))
    actions = next(f for f in files if f.startswith("actions_"))

    assert _read_jsonl(tmp_path / "logs" / transcript)[0]["text"] == "ban u1"
    rec = _read_jsonl(tmp_path / "logs" / actions)[0]
    assert rec["action"] == "ban_user"
    assert rec["ok"] is True
    assert rec["params"] == {"user_id": "u1"}


def test_context_roundtrip(monkeypatch):
    monkeypatch.setattr(cfg, "CONTEXT_TURNS", 1)
    turns = [{"role": "user", "content": str(i)} for i in range(5)]
    logging_utils.save_context(turns)
    assert logging_utils.load_context() == turns[-2:]


def test_load_context_ignores_garbage(tmp_path):
    os.makedirs(tmp_path / "logs", exist_ok=True)
    (tmp_path / "logs" / "context.json").write_text("{not json", encoding="utf-8")
    assert logging_utils.load_context() == []


def test_should_exit():
    assert logging_utils.should_exit("  QUIT ")
    assert not logging_utils.should_exit("ban u1")


def test_log_event(tmp_path):
    log_event("tool_call", {"name": "ban_user"})
    rec = _read_jsonl(tmp_path / "logs" / "telemetry.log")[0]
    assert rec["kind"] == "tool_call"
    assert rec["payload"] == {"name": "ban_user"}
