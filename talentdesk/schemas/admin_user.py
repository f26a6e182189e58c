"""
Pydantic schemas for admin authentication and account management.
"""

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
import re

PASSWORD_SYMBOLS = "!@#$%^&*"


def validate_password_strength(v: str) -> str:
    """Shared password policy for signup and password changes."""
    if len(v) < 8:
        raise ValueError('Password must be at least 8 characters long')
    if not re.search(r'[a-z]', v):
        raise ValueError('Password must contain at least one lowercase letter')
    if not re.search(r'[A-Z]', v):
        raise ValueError('Password must contain at least one uppercase letter')
    if not re.search(r'\d', v):
        raise ValueError('Password must contain at least one number')
    if not re.search(r'[!@#$%^&*]', v):
        raise ValueError(f'Password must contain at least one special character ({PASSWORD_SYMBOLS})')
    if not re.fullmatch(r'[A-Za-z\d!@#$%^&*]+', v):
        raise ValueError(f'Password may only contain letters, numbers and {PASSWORD_SYMBOLS}')
    return v


class SignupRequest(BaseModel):
    """Request schema for admin registration."""
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(
        ...,
        description="At least 8 characters with uppercase, lowercase, number, and one of !@#$%^&*"
    )

    @field_validator('password')
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenIdentity(BaseModel):
    """Identity decoded from a verified access token."""
    id: int
    uuid: Optional[str] = None
    role: str = "admin"


class AdminUserResponse(BaseModel):
    """Admin profile (no sensitive data)."""
    id: int
    uuid: Optional[str] = None
    name: str = Field(..., validation_alias=AliasChoices("name", "full_name"))
    email: str
    role: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    user: AdminUserResponse


class SignupResponse(BaseModel):
    success: bool = True
    message: str = "Admin registered successfully"
    user: AdminUserResponse


class AdminUserListResponse(BaseModel):
    success: bool = True
    users: List[AdminUserResponse]


class AddUserRequest(BaseModel):
    """Request schema for creating an admin with the default password."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: str = Field(..., min_length=1, max_length=20)


class UpdateUserRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None


class UpdatePasswordRequest(BaseModel):
    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword")

    @field_validator('new_password')
    @classmethod
    def check_new_password(cls, v: str) -> str:
        return validate_password_strength(v)

    class Config:
        populate_by_name = True
