# crm/schemas/auth.py
from pydantic import BaseModel, Field

from crm.schemas.common import EMAIL_PATTERN, StrictBaseModel
from crm.schemas.user import UserRead


class RegisterRequest(StrictBaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320, examples=["admin@crm.local"])
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=300)


class LoginRequest(StrictBaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=128)


class TokenResponse(BaseModel):
    token: str
    user: UserRead
