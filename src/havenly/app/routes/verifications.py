"""Identity verification routes: eligibility, document submission and decisions."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.app.errors import to_http
from havenly.app.routes.auth import get_current_user_dep
from havenly.domain.errors import HavenlyError
from havenly.domain.models import User
from havenly.domain.schemas import (
    EligibilityResponse,
    VerificationDecisionRequest,
    VerificationResponse,
)
from havenly.infra.database import get_db
from havenly.services import verification_gate
from havenly.services.catalog_service import get_property_or_raise
from havenly.services.document_service import encode_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/verifications", tags=["verifications"])
property_verification_router = APIRouter(prefix="/api/properties", tags=["verifications"])


@property_verification_router.get("/{property_id}/eligibility", response_model=EligibilityResponse)
async def get_eligibility(
    property_id: str,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    """Whether the caller may book this property: verified, pending or unverified."""
    try:
        prop = await get_property_or_raise(db, property_id)
    except HavenlyError as e:
        raise to_http(e)
    eligibility = await verification_gate.get_eligibility(db, user, prop)
    return EligibilityResponse(property_id=prop.id, host_id=prop.host_id, eligibility=eligibility)


@property_verification_router.post(
    "/{property_id}/verification",
    response_model=VerificationResponse,
    status_code=201,
)
async def submit_verification(
    property_id: str,
    document: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    """Upload an identity document for the property's host to review."""
    try:
        prop = await get_property_or_raise(db, property_id)
        content = await document.read() if document is not None else b""
        reference = encode_document(content, document.content_type if document else None)
        request = await verification_gate.submit_verification(db, user, prop, reference)
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()
    return VerificationResponse.model_validate(request)


@router.get("", response_model=list[VerificationResponse])
async def list_verifications(
    status: Optional[str] = Query(None, description="Filter by status"),
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    """Requests scoped to the caller: all for admins, received ones for hosts, own for guests."""
    requests = await verification_gate.list_verifications(db, user, status=status)
    return [VerificationResponse.model_validate(r) for r in requests]


@router.post("/{request_id}/decision", response_model=VerificationResponse)
async def decide_verification(
    request_id: str,
    body: VerificationDecisionRequest,
    user: User = Depends(get_current_user_dep),
    db: AsyncSession = Depends(get_db),
):
    try:
        request = await verification_gate.decide_verification(db, request_id, body.decision, user)
    except HavenlyError as e:
        raise to_http(e)
    await db.commit()
    return VerificationResponse.model_validate(request)
