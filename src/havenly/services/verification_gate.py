"""Verification Gate: per-host identity verification and booking eligibility.

A guest is verified for a host when the guest carries the global
``id_verified`` flag or the host (or an admin) approved a verification
request for that exact (guest, host) pair. Approval by one host never
carries over to another host's listings.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.domain.enums import Eligibility, VerificationDecision, VerificationStatus
from havenly.domain.errors import NotFoundError, ValidationError
from havenly.domain.models import Property, User, VerificationRequest
from havenly.services import access_policy

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = {VerificationStatus.PENDING.value, VerificationStatus.APPROVED.value}


def check_eligibility(
    user: User,
    prop: Property,
    verifications: Iterable[VerificationRequest],
) -> Eligibility:
    """Decide whether ``user`` may book ``prop``. Pure; no side effects."""
    if user.id_verified:
        return Eligibility.VERIFIED

    statuses = {
        v.status
        for v in verifications
        if v.user_id == user.id and v.host_id == prop.host_id
    }
    if VerificationStatus.APPROVED.value in statuses:
        return Eligibility.VERIFIED
    if VerificationStatus.PENDING.value in statuses:
        return Eligibility.PENDING
    return Eligibility.UNVERIFIED


async def list_pair_requests(
    db: AsyncSession, user_id: str, host_id: str
) -> list[VerificationRequest]:
    result = await db.execute(
        select(VerificationRequest).where(
            VerificationRequest.user_id == user_id,
            VerificationRequest.host_id == host_id,
        )
    )
    return list(result.scalars().all())


async def get_eligibility(db: AsyncSession, user: User, prop: Property) -> Eligibility:
    """Load the user's requests for the property's host and check eligibility."""
    if user.id_verified:
        return Eligibility.VERIFIED
    requests = await list_pair_requests(db, user.id, prop.host_id)
    return check_eligibility(user, prop, requests)


async def submit_verification(
    db: AsyncSession,
    user: User,
    prop: Property,
    document_reference: str,
) -> VerificationRequest:
    """File a pending verification request scoped to the property's host.

    Raises:
        ValidationError: No document attached, or the guest already has a
            pending or approved request for this host.
    """
    if not document_reference or not document_reference.strip():
        raise ValidationError("An identity document is required")

    existing = await list_pair_requests(db, user.id, prop.host_id)
    active = [v for v in existing if v.status in ACTIVE_STATUSES]
    if active:
        raise ValidationError(
            f"A {active[0].status} verification already exists for this host"
        )
    if user.id_verified:
        raise ValidationError("User is already verified")

    request = VerificationRequest(
        user_id=user.id,
        host_id=prop.host_id,
        status=VerificationStatus.PENDING.value,
        document_url=document_reference,
        submitted_at=datetime.now(timezone.utc),
    )
    db.add(request)
    await db.flush()

    logger.info(
        "Verification %s submitted: user=%s host=%s", request.id, user.id, prop.host_id
    )
    return request


async def decide_verification(
    db: AsyncSession,
    request_id: str,
    decision: VerificationDecision,
    acting_user: User,
) -> VerificationRequest:
    """Approve or reject a request. Re-deciding overwrites the previous decision."""
    request = await db.get(VerificationRequest, request_id)
    if request is None:
        raise NotFoundError("Verification request not found")

    access_policy.require(
        access_policy.can_decide_verification(acting_user, request),
        "Only the scoped host or an admin can decide this verification",
    )

    previous = request.status
    request.status = (
        VerificationStatus.APPROVED.value
        if decision == VerificationDecision.APPROVE
        else VerificationStatus.REJECTED.value
    )
    request.decided_at = datetime.now(timezone.utc)
    request.decided_by = acting_user.id
    await db.flush()

    logger.info(
        "Verification %s: %s → %s (by %s)",
        request.id,
        previous,
        request.status,
        acting_user.id,
    )
    return request


async def list_verifications(
    db: AsyncSession,
    acting_user: User,
    status: str | None = None,
) -> list[VerificationRequest]:
    """Requests visible to ``acting_user``, newest first."""
    query = select(VerificationRequest).where(access_policy.verification_scope(acting_user))
    if status:
        query = query.where(VerificationRequest.status == status)
    query = query.order_by(VerificationRequest.submitted_at.desc())

    result = await db.execute(query)
    return list(result.scalars().all())
