# admin_app/text_utils.py
from __future__ import annotations
import re
from html import unescape

# Role labels some models echo back into their replies
_ROLE_WORDS = ("system", "assistant", "user", "tool", "developer", "function")

_FENCED_ROLE = re.compile(
    r"```(?:\s*)(?:%s)\b.*?```" % "|".join(_ROLE_WORDS),
    flags=re.IGNORECASE | re.DOTALL,
)
_ROLE_ONLY_LINE = re.compile(rf"(?mi)^\s*(?:{'|'.join(_ROLE_WORDS)})\s*$")
_ROLE_COLON = re.compile(rf"(?mi)^\s*(?:{'|'.join(_ROLE_WORDS)})\s*:\s*")
_HTML_TAG = re.compile(r"<[^>]+>")


def strip_role_blocks(text: str) -> str:
    """
    Remove 'role' wrappers that some LLM outputs include, e.g.:
      ```assistant
      ...
      ```
    or lines that begin with 'assistant:', 'system:', etc.
    """
    if not text:
        return ""

    s = _FENCED_ROLE.sub("", str(text))
    s = _ROLE_ONLY_LINE.sub("", s)
    s = _ROLE_COLON.sub("", s)
    s = re.sub(r"\n{3,}", "\n\n", s)
    return s.strip()


def tts_sanitize(text: str, max_chars: int = 1200) -> str:
    """
    Make text safe for the speech engine:
      - strip role wrappers and HTML tags (admin notices are often HTML)
      - unescape HTML entities
      - drop SSML-ish brackets/braces
      - collapse whitespace and hard-cap length on a word boundary
    """
    if not text:
        return ""

    s = strip_role_blocks(text)
    s = _HTML_TAG.sub(" ", s)
    s = unescape(s)
    s = s.replace("\r", "")
    s = re.sub(r"[<>{}]", "", s)
    s = re.sub(r"\s+", " ", s).strip()

    if len(s) > max_chars:
        cut = s[:max_chars]
        space = cut.rfind(" ")
        s = (cut[:space] if space > 50 else cut).rstrip() + "..."

    return s


def sanitize_for_log(text: str, max_len: int = 4000) -> str:
    """Safer string for log files."""
    s = strip_role_blocks(text or "")
    if len(s) > max_len:
        s = s[: max_len - 1] + "…"
    return s
