from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from relive.database import get_db
from relive.models.user import User
from relive.routers.auth import get_current_user_required
from relive.schemas.stats import StatsOut
from relive.services.stats_service import get_stats

router = APIRouter(prefix="/api/v1/stats", tags=["Stats"])


@router.get("/", response_model=StatsOut)
async def read_stats(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Totals, memories added in the last week, photo count and mood distribution."""
    return {"stats": await get_stats(db, current_user.id)}
