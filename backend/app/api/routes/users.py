from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.base import INT_MAX
from app.db.session import get_db
from app.schemas.users import UserCreateIn, UserOut, UserUpdateIn
from app.services import users as user_service

router = APIRouter()

@router.post("", response_model=UserOut, status_code=201, summary="Register a user")
def create_user(payload: UserCreateIn, db: Session = Depends(get_db)):
    return UserOut.model_validate(user_service.create_user(db, payload))

@router.get("", response_model=list[UserOut], summary="List users")
def list_users(db: Session = Depends(get_db), current=Depends(get_current_user)):
    return [UserOut.model_validate(u) for u in user_service.list_users(db)]

@router.get("/{user_id}", response_model=UserOut, summary="Get a user")
def get_user(user_id: int = Path(..., ge=1, le=INT_MAX), db: Session = Depends(get_db), current=Depends(get_current_user)):
    return UserOut.model_validate(user_service.get_user(db, user_id))

@router.api_route("/{user_id}", methods=["PUT", "PATCH"], response_model=UserOut, summary="Update a user")
def update_user(
    payload: UserUpdateIn,
    user_id: int = Path(..., ge=1, le=INT_MAX),
    db: Session = Depends(get_db),
    current=Depends(get_current_user),
):
    return UserOut.model_validate(user_service.update_user(db, user_id, payload))

@router.delete("/{user_id}", status_code=204, summary="Delete a user")
def delete_user(user_id: int = Path(..., ge=1, le=INT_MAX), db: Session = Depends(get_db), current=Depends(get_current_user)):
    user_service.delete_user(db, user_id)
    return Response(status_code=204)
