from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.config import settings
from app.db.base import INT_MAX
from app.db.session import get_db
from app.schemas.match import MatchCreateIn, MatchOut, MatchesOut, match_out
from app.services import matches as match_service

router = APIRouter()

@router.post("", response_model=MatchOut, status_code=201, summary="Record a match")
def create_match(payload: MatchCreateIn, db: Session = Depends(get_db), current=Depends(get_current_user)):
    return match_out(match_service.create_match(db, payload))

@router.get("", response_model=MatchesOut, summary="List matches, most recent first")
def list_matches(
    limit: int = Query(default=50, ge=1, le=settings.MATCHES_PAGE_MAX),
    offset: int = Query(default=0, ge=0, le=INT_MAX),
    db: Session = Depends(get_db),
    current=Depends(get_current_user),
):
    rows = match_service.list_matches(db, limit=limit, offset=offset)
    return MatchesOut(
        rows=[match_out(m) for m in rows],
        limit=limit,
        offset=offset,
        next_offset=offset + limit if len(rows) == limit else None,
    )

@router.get("/{match_id}", response_model=MatchOut, summary="Get a match")
def get_match(match_id: int = Path(..., ge=1, le=INT_MAX), db: Session = Depends(get_db), current=Depends(get_current_user)):
    return match_out(match_service.get_match(db, match_id))

@router.delete("/{match_id}", response_model=MatchOut, summary="Delete a match and its participants")
def delete_match(match_id: int = Path(..., ge=1, le=INT_MAX), db: Session = Depends(get_db), current=Depends(get_current_user)):
    return match_out(match_service.delete_match(db, match_id))
