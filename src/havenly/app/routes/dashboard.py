"""Host and admin panel statistics."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from havenly.app.routes.auth import require_role
from havenly.domain.enums import UserRole
from havenly.domain.models import User
from havenly.domain.schemas import DashboardResponse
from havenly.infra.database import get_db
from havenly.services.dashboard_service import get_dashboard_stats

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def dashboard(
    user: User = Depends(require_role(UserRole.HOST, UserRole.SUPERADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Revenue, listing and workload counts: global for admins, own listings for hosts."""
    return DashboardResponse(**await get_dashboard_stats(db, user))
