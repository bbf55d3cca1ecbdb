from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


# ===== USER PYDANTIC MODELS =====

class UserRegister(BaseModel):
    # email/password presence is checked by the route so the caller gets a
    # single "Email and password required" message
    full_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255, description="User's email address")
    password: Optional[str] = Field(None, description="Plaintext password, hashed before storage")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower().strip() if v else v

    @field_validator('full_name')
    @classmethod
    def strip_full_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v else None


class UserLogin(BaseModel):
    email: str = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class UserResponse(BaseModel):
    """User data echoed to the client - no password hash"""
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    full_name: Optional[str]
    email: str
