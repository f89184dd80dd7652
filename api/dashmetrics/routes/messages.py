from typing import Any

from fastapi import APIRouter, Depends

from ..auth.admin_deps import require_admin_role
from ..http_helpers import compute_or_fail
from ..services import metrics
from ..services.period import resolve_period

router = APIRouter(dependencies=[Depends(require_admin_role("viewer"))])


@router.get("/messages/stats")
def messaging_stats(period: str | None = None) -> Any:
    return compute_or_fail("messaging stats", metrics.messaging_stats, resolve_period(period))


@router.get("/messages/by-hour")
def messages_by_hour(period: str | None = None) -> Any:
    return compute_or_fail("messages by hour", metrics.hourly_messages, resolve_period(period))


@router.get("/messages/by-gender")
def messages_by_gender(period: str | None = None) -> Any:
    return compute_or_fail("messages by gender", metrics.gender_messages, resolve_period(period))


@router.get("/conversations/{conversation_id}/plans")
def conversation_plans(conversation_id: str) -> Any:
    return compute_or_fail("conversation plans", metrics.conversation_plans, conversation_id)
