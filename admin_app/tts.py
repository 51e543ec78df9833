# admin_app/tts.py
"""
Read-aloud support: voice discovery, voice picking and playback.

Voices come from the edge-tts catalogue (dicts with ShortName, Locale,
FriendlyName, ...). Playback synthesises to an mp3 under AUDIO_DIR and plays
it on a background thread so callers never block on audio.
"""
import re
import uuid
import asyncio
import os
import logging
import threading
import ctypes
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import edge_tts
from playsound import playsound

from admin_app.config import cfg
from admin_app.text_utils import tts_sanitize

logger = logging.getLogger(__name__)

Voice = Dict[str, Any]

_DEVANAGARI = re.compile(r"[\u0900-\u097F]")

# === Internal TTS state ===
_voices_cache: List[Voice] = []
_speaking_thread: Optional[threading.Thread] = None
_current_stop: Optional[threading.Event] = None
_is_speaking = False
_state_lock = threading.Lock()


@dataclass
class Utterance:
    text: str
    voice: str
    lang: str
    rate: str = "+0%"
    pitch: str = "+0Hz"


# ------------------------
# Voice catalogue
# ------------------------
def voice_name(v: Voice) -> str:
    return v.get("FriendlyName") or v.get("Name") or v.get("ShortName") or ""


def voice_lang(v: Voice) -> str:
    return v.get("Locale") or ""


def is_hindi_voice(v: Voice) -> bool:
    return voice_lang(v).lower().startswith("hi") or "hindi" in voice_name(v).lower()


def is_indian_english_voice(v: Voice) -> bool:
    lang = voice_lang(v)
    return lang == "en-IN" or (lang.lower().startswith("en") and "india" in voice_name(v).lower())


async def get_available_voices(timeout: Optional[float] = None) -> List[Voice]:
    """
    Fetch the engine's voice list. The catalogue can be slow to arrive, so the
    wait is capped at VOICE_LIST_TIMEOUT; on timeout or error the last known
    list (possibly empty) is returned.
    """
    global _voices_cache
    if not cfg.TTS_ENABLED:
        return []
    try:
        voices = await asyncio.wait_for(edge_tts.list_voices(), timeout or cfg.VOICE_LIST_TIMEOUT)
    except asyncio.TimeoutError:
        logger.warning("Voice list did not arrive in time")
        return list(_voices_cache)
    except Exception as e:
        logger.warning(f"Could not fetch voices: {e}")
        return list(_voices_cache)
    _voices_cache = list(voices or [])
    return list(_voices_cache)


def categorize_voices(voices: List[Voice]) -> Dict[str, List[Voice]]:
    return {
        "hindi": [v for v in voices if is_hindi_voice(v)],
        "indian_english": [v for v in voices if is_indian_english_voice(v)],
        "others": [
            v for v in voices
            if not is_hindi_voice(v)
            and voice_lang(v) != "en-IN"
            and "india" not in voice_name(v).lower()
        ],
    }


async def get_categorized_voices() -> Dict[str, List[Voice]]:
    return categorize_voices(await get_available_voices())


def pick_voice(text: str, voices: List[Voice], vendor: Optional[str] = None) -> Tuple[Optional[Voice], Optional[str]]:
    """
    Choose a voice for `text`: Devanagari script gets a Hindi voice, anything
    else an Indian English one, preferring names that contain `vendor`.
    Returns (voice, lang) or (None, None).
    """
    vendor = cfg.TTS_PREFERRED_VENDOR if vendor is None else vendor

    def _first(pred):
        return next((v for v in voices if pred(v)), None)

    def _has_vendor(v: Voice) -> bool:
        return bool(vendor) and vendor in voice_name(v)

    if _DEVANAGARI.search(text or ""):
        hindi = lambda v: voice_lang(v).lower().startswith("hi")
        voice = _first(lambda v: hindi(v) and _has_vendor(v)) or _first(hindi)
        return (voice, "hi-IN") if voice else (None, None)

    en_in = lambda v: "en-IN" in voice_lang(v)
    voice = (
        _first(lambda v: en_in(v) and _has_vendor(v))
        or _first(en_in)
        or _first(lambda v: "India" in voice_name(v))
    )
    return (voice, "en-IN") if voice else (None, None)


def _fallback_voice(lang: str) -> str:
    match = next((v for v in _voices_cache if voice_lang(v) == lang), None)
    return match["ShortName"] if match and match.get("ShortName") else cfg.VOICE


def _edge_rate(rate: float) -> str:
    return f"{round((float(rate) - 1.0) * 100):+d}%"


# ------------------------
# Playback
# ------------------------
async def _tts_to_file(utt: Utterance, outfile: str) -> bool:
    """Generate speech using Edge TTS into a file."""
    try:
        comm = edge_tts.Communicate(utt.text, utt.voice, rate=utt.rate, pitch=utt.pitch)
        await comm.save(outfile)
        return True
    except Exception as e:
        logger.error(f"Failed to generate speech: {e}")
        return False


def _stop_thread(thread: threading.Thread):
    """Forcefully stop a thread using ctypes (last resort)."""
    if not thread or not thread.is_alive():
        return
    try:
        tid = thread.ident
        exc = ctypes.py_object(SystemExit)
        res = ctypes.pythonapi.PyThreadState_SetAsyncExc(ctypes.c_long(tid), exc)
        if res == 0:
            raise ValueError("Invalid thread ID")
        elif res > 1:
            ctypes.pythonapi.PyThreadState_SetAsyncExc(ctypes.c_long(tid), None)
            raise SystemError("PyThreadState_SetAsyncExc failed")
    except Exception as e:
        logger.error(f"Failed to stop thread: {e}")


def _play(utt: Utterance, stop: threading.Event):
    global _is_speaking
    filename = None
    try:
        audio_dir = os.path.abspath(cfg.AUDIO_DIR)
        os.makedirs(audio_dir, exist_ok=True)
        filename = os.path.join(audio_dir, f"tts_{uuid.uuid4().hex}.mp3")

        ok = asyncio.run(_tts_to_file(utt, filename))
        if not ok or not os.path.exists(filename):
            logger.error("❌ Failed to generate speech audio")
            return
        if stop.is_set():
            logger.info("🛑 TTS cancelled before playback")
            return

        playsound(filename)
    except Exception as e:
        logger.error(f"TTS playback failed: {e}")
    finally:
        with _state_lock:
            if _current_stop is stop:
                _is_speaking = False
        if filename and not cfg.KEEP_TTS and os.path.exists(filename):
            try:
                os.remove(filename)
            except OSError as e:
                logger.warning(f"Could not remove temp file: {e}")


def _start_playback(utt: Utterance):
    global _speaking_thread, _current_stop, _is_speaking
    stop = threading.Event()
    with _state_lock:
        _current_stop = stop
        _is_speaking = True
    _speaking_thread = threading.Thread(target=_play, args=(utt, stop), name="TTS_Player", daemon=True)
    _speaking_thread.start()


def speak_text(
    text: str,
    voice: Union[Voice, str, None] = None,
    rate: Optional[float] = None,
    lang: Optional[str] = None,
) -> Optional[Utterance]:
    """
    Read `text` aloud, cancelling anything already playing.

    `voice` may be a catalogue entry or a ShortName; when omitted one is picked
    from the last fetched catalogue by script and locale. Returns the queued
    Utterance, or None when nothing was spoken.
    """
    if not cfg.TTS_ENABLED:
        logger.warning("Text-to-speech not supported.")
        return None

    stop_speech()

    txt = tts_sanitize(text)
    if not txt:
        return None

    utter_lang = lang or cfg.TTS_LANG
    if voice is None:
        voice, picked_lang = pick_voice(txt, _voices_cache)
        if voice:
            utter_lang = picked_lang

    if isinstance(voice, dict):
        short_name = voice.get("ShortName") or cfg.VOICE
        utter_lang = voice_lang(voice) or utter_lang
    elif voice:
        short_name = voice
    else:
        short_name = _fallback_voice(utter_lang)

    utt = Utterance(
        text=txt,
        voice=short_name,
        lang=utter_lang,
        rate=_edge_rate(cfg.TTS_RATE if rate is None else rate),
    )
    _start_playback(utt)
    return utt


def stop_speech():
    global _is_speaking
    with _state_lock:
        if _current_stop is not None:
            _current_stop.set()
        _is_speaking = False
    if _speaking_thread and _speaking_thread.is_alive():
        _stop_thread(_speaking_thread)


def is_speaking() -> bool:
    return _is_speaking
