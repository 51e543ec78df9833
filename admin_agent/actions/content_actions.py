"""
admin_agent/actions/content_actions.py

Content actions: subjects, the universal video playlist, the custom blogger
page, recycle-bin requests and AI interaction logs.
"""
import asyncio
import re
from typing import Any, Dict, List

from admin_agent.registry import ActionContext, ActionRegistry
from admin_agent.schemas import (
    BloggerPageParams,
    RecentLogsParams,
    SoftDeleteParams,
    SubjectParams,
    UniversalVideoParams,
)

SUBJECTS_POOL_PATH = "custom_subjects_pool"
UNIVERSAL_PLAYLIST_KEY = "nst_universal_playlist"
BLOGGER_PAGE_PATH = "custom_blogger_page"

DEFAULT_SUBJECT_COLOR = "bg-slate-50 text-slate-600"

DEFAULT_SUBJECTS: Dict[str, Dict[str, str]] = {
    "math": {"id": "math", "name": "Mathematics", "icon": "calculator", "color": "bg-blue-50 text-blue-600"},
    "science": {"id": "science", "name": "Science", "icon": "flask", "color": "bg-green-50 text-green-600"},
    "english": {"id": "english", "name": "English", "icon": "book-open", "color": "bg-amber-50 text-amber-600"},
    "hindi": {"id": "hindi", "name": "Hindi", "icon": "languages", "color": "bg-orange-50 text-orange-600"},
    "sst": {"id": "sst", "name": "Social Science", "icon": "globe", "color": "bg-purple-50 text-purple-600"},
}


def subject_id(name: str) -> str:
    return re.sub(r"\s+", "", name.lower())


def register_content_actions(registry: ActionRegistry) -> None:

    @registry.register("add_subject", "Add a subject to the custom subject pool.", SubjectParams, exposed=False)
    async def add_subject(params: SubjectParams, ctx: ActionContext) -> str:
        sid = subject_id(params.name)
        subject = {"id": sid, "name": params.name, "icon": "book", "color": DEFAULT_SUBJECT_COLOR}
        custom = await asyncio.to_thread(ctx.store.read, SUBJECTS_POOL_PATH)
        pool = {**DEFAULT_SUBJECTS, **(custom if isinstance(custom, dict) else {}), sid: subject}
        await asyncio.to_thread(ctx.store.write, SUBJECTS_POOL_PATH, pool)
        return f"Subject {params.name} added."

    @registry.register(
        "add_universal_video",
        "Append a free video to the universal playlist.",
        UniversalVideoParams,
        exposed=False,
    )
    async def add_universal_video(params: UniversalVideoParams, ctx: ActionContext) -> str:
        data = await asyncio.to_thread(ctx.store.get_chapter_data, UNIVERSAL_PLAYLIST_KEY) or {}
        playlist = list(data.get("videoPlaylist") or [])
        playlist.append({"title": params.title, "url": params.url, "price": 0, "access": "FREE"})
        await asyncio.to_thread(
            ctx.store.save_chapter_data, UNIVERSAL_PLAYLIST_KEY, {**data, "videoPlaylist": playlist}
        )
        return f'Video "{params.title}" added to Universal Playlist.'

    @registry.register(
        "save_custom_blogger_page",
        "Replace the custom blogger page HTML.",
        BloggerPageParams,
        exposed=False,
    )
    async def save_custom_blogger_page(params: BloggerPageParams, ctx: ActionContext) -> str:
        await asyncio.to_thread(ctx.store.write, BLOGGER_PAGE_PATH, params.html)
        return "Custom Blogger Page saved."

    @registry.register(
        "soft_delete",
        "Move an item to the recycle bin.",
        SoftDeleteParams,
        exposed=False,
    )
    async def soft_delete(params: SoftDeleteParams, ctx: ActionContext) -> str:
        # recycle-bin bookkeeping lives in the dashboard UI
        return "Soft delete not fully supported via AI yet, please use Dashboard."

    @registry.register(
        "get_recent_logs",
        "Most recent AI interaction records, newest first.",
        RecentLogsParams,
        category="query",
        exposed=False,
    )
    async def get_recent_logs(params: RecentLogsParams, ctx: ActionContext) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(ctx.store.recent_interactions, params.limit)
