from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

# purpose: request/response contracts for signup, login and the current account
# status: active

Role = Literal["user", "admin"]


def normalize_email(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


NormalizedEmail = Annotated[EmailStr, BeforeValidator(normalize_email)]


class SignupRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(min_length=6)
    role: Role = "user"


class LoginRequest(BaseModel):
    email: Annotated[str, BeforeValidator(normalize_email)] = Field(min_length=1)
    password: str


class AccountOut(BaseModel):
    id: int
    email: str
    role: Role
    created_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class CreatorOut(BaseModel):
    id: int
    email: str
    role: Role
    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    access_token: str
    token: str
    token_type: str = "bearer"
    user: AccountOut
