from typing import Any

from fastapi import APIRouter, Depends

from ..auth.admin_deps import require_admin_role
from ..http_helpers import compute_or_fail
from ..services import metrics

router = APIRouter(dependencies=[Depends(require_admin_role("viewer"))])


@router.get("/profiles/{profile_id}/completeness")
def profile_completeness(profile_id: str) -> Any:
    return compute_or_fail("profile completeness", metrics.profile_completeness, profile_id)
