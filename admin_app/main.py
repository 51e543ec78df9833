# admin_app/main.py
import asyncio
import json
import logging

from admin_app.config import cfg
from admin_app.llm import llm_is_up
from admin_app.logging_utils import setup_logging, log_turn, save_context, load_context, should_exit
from admin_app.tts import get_categorized_voices, speak_text, stop_speech, voice_name
from admin_agent.tools import tool_names
from admin_orchestrator.turn import handle_admin_command

logger = logging.getLogger(__name__)

BANNER = "Admin copilot ready. Type a command, /tools, /voices, /stop or 'exit'."


async def _print_voices():
    groups = await get_categorized_voices()
    for label, voices in groups.items():
        print(f"{label} ({len(voices)}):")
        for v in voices[:10]:
            print(f"  - {v.get('ShortName')}  {voice_name(v)}")


async def _handle_line(line: str, history: list[dict]) -> bool:
    """Process one input line; returns False when the loop should end."""
    text = line.strip()
    if not text:
        return True
    if should_exit(text):
        return False
    if text == "/tools":
        print(", ".join(tool_names()))
        return True
    if text == "/voices":
        await _print_voices()
        return True
    if text == "/stop":
        stop_speech()
        return True

    log_turn("admin", text)
    result = await handle_admin_command(text, history)
    log_turn("assistant", result.reply)
    save_context(history)

    print(f"🤖 {result.reply}")
    for outcome in result.tool_calls:
        status = "✅" if outcome.result.get("ok") else "❌"
        logger.debug(f"{status} {outcome.name} {json.dumps(outcome.args, default=str)}")
    if cfg.READ_ALOUD:
        speak_text(result.reply)
    return True


async def run():
    history = load_context()
    if not await asyncio.to_thread(llm_is_up):
        logger.warning("LLM backend is not reachable; commands will fail until it is")
    if cfg.READ_ALOUD:
        # warms the voice cache so speak_text can pick Hindi / Indian English voices
        await get_categorized_voices()
    print(BANNER)
    while True:
        try:
            line = await asyncio.to_thread(input, "🛠️  > ")
        except (EOFError, KeyboardInterrupt):
            break
        if not await _handle_line(line, history):
            break
    stop_speech()


def main():
    setup_logging()
    asyncio.run(run())


if __name__ == "__main__":
    main()
