"""Reports router -- user reports and the moderation queue."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from mangafas.auth.models import User
from mangafas.auth.permissions import require_capability
from mangafas.comments.reports import RESOLVE_CAPABILITY
from mangafas.platform import Platform
from web.backend.app.middleware.auth import get_current_user, get_platform
from web.backend.app.models.api import (
    ActionResult,
    ReportRequest,
    ReportResponse,
    ResolveReportRequest,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post(
    "/users/{user_id}",
    response_model=ActionResult,
    summary="Report a user",
)
async def report_user(
    user_id: str,
    body: ReportRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    report = platform.reports.report_user(user_id, user, body.reason, body.description)
    return ActionResult(ok=report is not None, id=report.id if report else None)


@router.get(
    "",
    response_model=list[ReportResponse],
    summary="Open reports",
)
async def list_open(
    target: Optional[Literal["comment", "user"]] = None,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    return [ReportResponse(**r.to_dict()) for r in platform.reports.list_pending(target)]


@router.get(
    "/{report_id}",
    response_model=ReportResponse,
    summary="Get a report",
)
async def get_report(
    report_id: str,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    require_capability(user, "can_moderate_comments")
    report = platform.reports.get(report_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report '{report_id}' not found",
        )
    return ReportResponse(**report.to_dict())


@router.post(
    "/{report_id}/resolve",
    response_model=ActionResult,
    summary="Resolve or dismiss a report",
)
async def resolve_report(
    report_id: str,
    body: ResolveReportRequest,
    user: User = Depends(get_current_user),
    platform: Platform = Depends(get_platform),
):
    """Close a pending report. User reports need administrator rights."""
    report = platform.reports.get(report_id)
    if report is None:
        return ActionResult(ok=False, id=report_id)
    require_capability(user, RESOLVE_CAPABILITY[report.target_kind])
    ok = platform.reports.resolve(report_id, user, body.status, body.notes)
    return ActionResult(ok=ok, id=report_id)
