"""
Authentication endpoints for admin registration and login.

- POST /signup: Create an admin account (password policy enforced)
- POST /login: Authenticate and receive a 7-day JWT
- GET /me: Profile of the admin behind the token
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from talentdesk.core.database import get_db
from talentdesk.core.deps import get_current_admin
from talentdesk.core.exceptions import NotFoundError
from talentdesk.core.security import create_access_token
from talentdesk.crud import admin_user as admin_crud
from talentdesk.schemas.admin_user import (
    AdminUserResponse,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    TokenIdentity,
)

router = APIRouter(tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new admin account.

    The password must be at least 8 characters and contain an uppercase letter,
    a lowercase letter, a digit and one of !@#$%^&*. Duplicate emails are
    rejected with 409.
    """
    admin = admin_crud.create(db, request.full_name, request.email, request.password)
    logger.info(f"New admin registered: {admin.email}")

    return SignupResponse(user=AdminUserResponse.model_validate(admin))


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate an admin and return a bearer token.

    The token embeds the admin id (`sub`), uuid and role and expires after
    7 days. Unknown emails give 404, wrong passwords 401.
    """
    admin = admin_crud.authenticate(db, request.email, request.password)
    role = admin.effective_role

    token = create_access_token(data={"sub": str(admin.id), "uuid": admin.uuid, "role": role})
    logger.info(f"Admin logged in: {admin.email}")

    return LoginResponse(
        token=token,
        user=AdminUserResponse(id=admin.id, uuid=admin.uuid, name=admin.full_name, email=admin.email, role=role),
    )


@router.get("/me", response_model=AdminUserResponse)
def get_current_admin_profile(
    identity: TokenIdentity = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Profile of the authenticated admin."""
    admin = admin_crud.get_by_id(db, identity.id)
    if not admin:
        raise NotFoundError("Admin not found")
    return AdminUserResponse.model_validate(admin)
