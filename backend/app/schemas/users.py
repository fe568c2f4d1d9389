from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import MAX_PASSWORD_BYTES, password_fits


def looks_like_email(value: str) -> bool:
    v = value.strip()
    return "@" in v and "." in v.split("@")[-1]


def normalize_email(value: str) -> str:
    v = value.strip().lower()
    if not looks_like_email(v):
        raise ValueError("Invalid email")
    return v


def check_password(value: str) -> str:
    if not password_fits(value):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class UserCreateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=3, max_length=160, examples=["player@example.com"])
    password: str = Field(..., min_length=1, max_length=128)
    name: str | None = Field(default=None, max_length=80)
    last_name: str | None = Field(default=None, alias="lastName", max_length=80)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password(v)


class UserUpdateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = Field(default=None, min_length=3, max_length=160)
    password: str | None = Field(default=None, min_length=1, max_length=128)
    name: str | None = Field(default=None, max_length=80)
    last_name: str | None = Field(default=None, alias="lastName", max_length=80)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return check_password(v)

    def changes(self) -> dict:
        """Fields the caller actually sent, keyed by column name."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    name: str | None
    last_name: str | None = Field(alias="lastName")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class UserSummaryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | None
    name: str | None
    last_name: str | None = Field(alias="lastName")
    email: str
