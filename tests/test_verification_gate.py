"""Tests for per-host identity verification and booking eligibility."""

import logging
from types import SimpleNamespace

import pytest
from sqlalchemy import select

from havenly.domain.enums import Eligibility, UserRole, VerificationDecision, VerificationStatus
from havenly.domain.errors import AuthorizationError, NotFoundError, ValidationError
from havenly.domain.models import VerificationRequest
from havenly.services.verification_gate import (
    check_eligibility,
    decide_verification,
    get_eligibility,
    list_verifications,
    submit_verification,
)

DOC = "data:image/png;base64,iVBORw0KGgo="


def _user(user_id="g1", id_verified=False):
    return SimpleNamespace(id=user_id, id_verified=id_verified)


def _prop(host_id="h1"):
    return SimpleNamespace(host_id=host_id)


def _req(status, user_id="g1", host_id="h1"):
    return SimpleNamespace(user_id=user_id, host_id=host_id, status=status)


# ===========================================================================
# Pure eligibility check
# ===========================================================================


class TestCheckEligibility:
    def test_no_history_is_unverified(self):
        assert check_eligibility(_user(), _prop(), []) == Eligibility.UNVERIFIED

    def test_global_flag_overrides_everything(self):
        history = [_req("rejected"), _req("pending")]
        assert check_eligibility(_user(id_verified=True), _prop(), history) == Eligibility.VERIFIED
        assert check_eligibility(_user(id_verified=True), _prop(), []) == Eligibility.VERIFIED

    def test_pending_request(self):
        assert check_eligibility(_user(), _prop(), [_req("pending")]) == Eligibility.PENDING

    def test_approved_wins_over_pending(self):
        history = [_req("pending"), _req("approved")]
        assert check_eligibility(_user(), _prop(), history) == Eligibility.VERIFIED

    def test_rejected_only_is_unverified(self):
        assert check_eligibility(_user(), _prop(), [_req("rejected")]) == Eligibility.UNVERIFIED

    def test_approval_is_scoped_to_host(self):
        history = [_req("approved", host_id="h1")]
        assert check_eligibility(_user(), _prop("h2"), history) == Eligibility.UNVERIFIED

    def test_other_users_requests_ignored(self):
        history = [_req("approved", user_id="someone-else")]
        assert check_eligibility(_user(), _prop(), history) == Eligibility.UNVERIFIED

    def test_pending_only_for_exact_pair(self):
        history = [_req("pending", host_id="h2")]
        assert check_eligibility(_user(), _prop("h1"), history) == Eligibility.UNVERIFIED


# ===========================================================================
# Submission and decisions (database)
# ===========================================================================


@pytest.fixture
async def actors(make_user, make_property):
    guest = await make_user(UserRole.GUEST)
    host = await make_user(UserRole.HOST)
    other_host = await make_user(UserRole.HOST)
    admin = await make_user(UserRole.SUPERADMIN)
    prop = await make_property(host)
    other_prop = await make_property(other_host, title="Cabaña del Bosque")
    return SimpleNamespace(
        guest=guest, host=host, other_host=other_host, admin=admin,
        prop=prop, other_prop=other_prop,
    )


class TestSubmitVerification:
    async def test_creates_pending_request_scoped_to_host(self, db_session, actors):
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)

        assert request.status == VerificationStatus.PENDING.value
        assert request.user_id == actors.guest.id
        assert request.host_id == actors.host.id
        assert request.document_url == DOC
        assert request.submitted_at is not None
        assert await get_eligibility(db_session, actors.guest, actors.prop) == Eligibility.PENDING

    @pytest.mark.parametrize("document", ["", "   "])
    async def test_missing_document_rejected(self, db_session, actors, document):
        with pytest.raises(ValidationError, match="document"):
            await submit_verification(db_session, actors.guest, actors.prop, document)

        rows = (await db_session.execute(select(VerificationRequest))).scalars().all()
        assert rows == []

    async def test_duplicate_pending_rejected(self, db_session, actors):
        await submit_verification(db_session, actors.guest, actors.prop, DOC)
        with pytest.raises(ValidationError, match="pending"):
            await submit_verification(db_session, actors.guest, actors.prop, DOC)

    async def test_resubmission_allowed_after_rejection(self, db_session, actors, make_verification):
        await make_verification(actors.guest, actors.host, VerificationStatus.REJECTED)
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)
        assert request.status == VerificationStatus.PENDING.value

    async def test_other_host_is_independent(self, db_session, actors, make_verification):
        await make_verification(actors.guest, actors.host, VerificationStatus.APPROVED)
        request = await submit_verification(db_session, actors.guest, actors.other_prop, DOC)
        assert request.host_id == actors.other_host.id


class TestDecideVerification:
    async def test_host_approval_makes_guest_verified(self, db_session, actors):
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)

        decided = await decide_verification(
            db_session, request.id, VerificationDecision.APPROVE, actors.host
        )

        assert decided.status == VerificationStatus.APPROVED.value
        assert decided.decided_by == actors.host.id
        assert await get_eligibility(db_session, actors.guest, actors.prop) == Eligibility.VERIFIED

    async def test_approval_does_not_extend_to_other_host(self, db_session, actors):
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)
        await decide_verification(db_session, request.id, VerificationDecision.APPROVE, actors.host)

        eligibility = await get_eligibility(db_session, actors.guest, actors.other_prop)
        assert eligibility == Eligibility.UNVERIFIED

    async def test_admin_can_decide(self, db_session, actors):
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)
        decided = await decide_verification(
            db_session, request.id, VerificationDecision.REJECT, actors.admin
        )
        assert decided.status == VerificationStatus.REJECTED.value

    @pytest.mark.parametrize("who", ["other_host", "guest"])
    async def test_unrelated_user_cannot_decide(self, db_session, actors, who):
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)

        with pytest.raises(AuthorizationError):
            await decide_verification(
                db_session, request.id, VerificationDecision.APPROVE, getattr(actors, who)
            )

        await db_session.refresh(request)
        assert request.status == VerificationStatus.PENDING.value
        assert request.decided_by is None

    async def test_redecision_overwrites(self, db_session, actors):
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)
        await decide_verification(db_session, request.id, VerificationDecision.APPROVE, actors.host)
        await decide_verification(db_session, request.id, VerificationDecision.REJECT, actors.host)

        assert request.status == VerificationStatus.REJECTED.value
        eligibility = await get_eligibility(db_session, actors.guest, actors.prop)
        assert eligibility == Eligibility.UNVERIFIED

    async def test_unknown_request(self, db_session, actors):
        with pytest.raises(NotFoundError):
            await decide_verification(
                db_session, "missing", VerificationDecision.APPROVE, actors.admin
            )

    async def test_decision_is_logged_as_transition(self, db_session, actors, caplog):
        request = await submit_verification(db_session, actors.guest, actors.prop, DOC)

        with caplog.at_level(logging.INFO, logger="havenly.services.verification_gate"):
            await decide_verification(db_session, request.id, VerificationDecision.APPROVE, actors.host)

        assert f"Verification {request.id}: pending → approved (by {actors.host.id})" in caplog.text


class TestListVerifications:
    async def test_visibility_by_role(self, db_session, actors, make_verification):
        mine = await make_verification(actors.guest, actors.host)
        other = await make_verification(actors.guest, actors.other_host)

        host_view = {r.id for r in await list_verifications(db_session, actors.host)}
        guest_view = {r.id for r in await list_verifications(db_session, actors.guest)}
        admin_view = {r.id for r in await list_verifications(db_session, actors.admin)}

        assert host_view == {mine.id}
        assert guest_view == {mine.id, other.id}
        assert admin_view == {mine.id, other.id}

    async def test_status_filter(self, db_session, actors, make_verification):
        await make_verification(actors.guest, actors.host, VerificationStatus.REJECTED)
        pending = await make_verification(actors.guest, actors.other_host)

        result = await list_verifications(db_session, actors.admin, status="pending")
        assert [r.id for r in result] == [pending.id]
