"""Licensing API router."""

import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from keymint.common.config import get_settings
from keymint.common.schemas import PaginatedResponse
from keymint.common.security import require_admin
from keymint.licensing.schemas import BatchCreate, BatchResponse, LicenseResponse

router = APIRouter()

_FAILURE_STATUS = {
    "INVALID_COUNT": 422,
    "UNIQUENESS_VIOLATION": 409,
    "STORE_UNAVAILABLE": 503,
}


def _get_issuer():
    from keymint.deps import get_license_issuer
    return get_license_issuer()


def _get_store():
    from keymint.deps import get_license_store
    return get_license_store()


def _get_db():
    from keymint.deps import get_db
    return get_db()


@router.post("/licenses/batch", response_model=BatchResponse, status_code=201)
async def issue_batch(body: BatchCreate, _=Depends(require_admin)):
    count = body.count if body.count is not None else get_settings().default_batch_size
    result = await _get_issuer().issue(count)
    if not result.success:
        raise HTTPException(
            status_code=_FAILURE_STATUS.get(result.code, 500),
            detail={"code": result.code, "message": result.message, "retryable": result.retryable},
        )
    return BatchResponse(count=len(result.keys), keys=result.keys)


@router.get("/licenses", response_model=PaginatedResponse)
async def list_licenses(
    is_used: Optional[bool] = None,
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    _=Depends(require_admin),
):
    settings = get_settings()
    page_size = min(page_size or settings.default_page_size, settings.max_page_size)
    store = _get_store()
    db = _get_db()
    async with db.get_session() as session:
        items, total = await store.list_licenses(
            session, is_used=is_used,
            offset=(page - 1) * page_size, limit=page_size,
        )
        return PaginatedResponse(
            items=[LicenseResponse.model_validate(lic).model_dump(mode="json") for lic in items],
            total=total,
            page=page,
            page_size=page_size,
            pages=math.ceil(total / page_size) if total else 0,
        )
