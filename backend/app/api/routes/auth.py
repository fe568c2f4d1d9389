from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.auth import LoginIn, LoginOut
from app.schemas.users import UserOut
from app.services import auth as auth_service

router = APIRouter()

@router.post("/login", response_model=LoginOut, summary="Log in and obtain an access token")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user, token = auth_service.login(db, payload.email, payload.password)
    return LoginOut(user=UserOut.model_validate(user), token=token)
