from typing import Any

from fastapi import APIRouter, Depends

from ..auth.admin_deps import require_admin_role
from ..http_helpers import compute_or_fail
from ..services import metrics

router = APIRouter(prefix="/world-domination", dependencies=[Depends(require_admin_role("viewer"))])


@router.get("")
def world_domination() -> Any:
    return compute_or_fail("world domination", metrics.world_domination)


@router.get("/{city_id}")
def city_detail(city_id: str) -> Any:
    return compute_or_fail("city stats", metrics.city_detail, city_id)
