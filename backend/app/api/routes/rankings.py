from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.base import INT_MAX
from app.db.session import get_db
from app.schemas.ranking import DashboardStatsOut, RankingOut
from app.services import ranking as ranking_service

router = APIRouter()

@router.get("", response_model=RankingOut, summary="Players ordered by total points")
def ranking(
    limit: int = Query(default=ranking_service.DEFAULT_LIMIT, le=INT_MAX, description="Clamped to at least 1"),
    offset: int = Query(default=0, le=INT_MAX, description="Clamped to at least 0"),
    db: Session = Depends(get_db),
    current=Depends(get_current_user),
):
    limit, offset = ranking_service.clamp_page(limit, offset)
    rows = ranking_service.get_ranking(db, limit=limit, offset=offset)
    return RankingOut(rows=rows, limit=limit, offset=offset)

@router.get("/dashboard", response_model=DashboardStatsOut, summary="Total players, leader and average points")
def dashboard(db: Session = Depends(get_db), current=Depends(get_current_user)):
    return ranking_service.get_dashboard_stats(db)
