from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..auth.admin_deps import require_admin_role
from ..http_helpers import compute_or_fail
from ..services import metrics

router = APIRouter(dependencies=[Depends(require_admin_role("viewer"))])


@router.get("/drops/compare")
def compare_drops(current: str | None = None, previous: str | None = None) -> Any:
    if not current or not previous:
        raise HTTPException(status_code=400, detail="current and previous drop ids are required")
    return compute_or_fail("drop comparison", metrics.drop_comparison, current, previous)
