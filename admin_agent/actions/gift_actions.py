"""
admin_agent/actions/gift_actions.py

Redeem-code generation. Codes are written one by one to
`redeem_codes/{code}`; a failure part-way leaves the earlier codes in place.
"""
import asyncio
import logging
import secrets
from typing import Any, Dict, List

from admin_agent.registry import ActionContext, ActionRegistry
from admin_agent.schemas import GiftCodeParams
from admin_agent.actions.common import iso
from admin_app.config import cfg

logger = logging.getLogger(__name__)

# excludes 0, O, 1 and I
CODE_CHARS = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
REDEEM_CODES_PATH = "redeem_codes"


def new_code(length: int) -> str:
    return "".join(secrets.choice(CODE_CHARS) for _ in range(length))


def build_gift_code(code: str, code_id: str, kind: str, amount, created_at: str) -> Dict[str, Any]:
    rec: Dict[str, Any] = {
        "id": code_id,
        "code": code.upper(),
        "type": kind,
        "amount": amount if kind == "CREDITS" else 0,
        "createdAt": created_at,
        "isRedeemed": False,
        "generatedBy": cfg.GIFT_CODE_GENERATOR,
        "maxUses": 1,
        "usedCount": 0,
        "redeemedBy": [],
    }
    if kind == "SUBSCRIPTION":
        rec["subTier"] = "WEEKLY"
        rec["subLevel"] = "BASIC"
    return rec


def register_gift_actions(registry: ActionRegistry) -> None:

    @registry.register("generate_gift_codes", "Generate redeem codes.", GiftCodeParams)
    async def generate_gift_codes(params: GiftCodeParams, ctx: ActionContext) -> str:
        base_id = str(ctx.now_ms())
        created_at = iso(ctx.now())
        codes: List[Dict[str, Any]] = []
        for i in range(params.count):
            rec = build_gift_code(
                new_code(cfg.GIFT_CODE_LENGTH), f"{base_id}{i}", params.type, params.amount, created_at
            )
            codes.append(rec)
            await asyncio.to_thread(ctx.store.write, f"{REDEEM_CODES_PATH}/{rec['code']}", rec)

        logger.info(f"Generated {len(codes)} {params.type} gift codes")
        return f"{params.count} Gift Codes Generated: {', '.join(c['code'] for c in codes)}"
