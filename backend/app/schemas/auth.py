from pydantic import BaseModel, Field

from app.schemas.users import UserOut


class LoginIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=160)
    password: str = Field(..., min_length=1, max_length=128)


class LoginOut(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"
