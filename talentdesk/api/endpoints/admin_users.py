"""
Admin account management. Every route requires a valid bearer token; the
role in the token is not checked.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from talentdesk.core.config import settings
from talentdesk.core.database import get_db
from talentdesk.core.deps import get_current_admin
from talentdesk.crud import admin_user as admin_crud
from talentdesk.schemas.admin_user import (
    AddUserRequest,
    AdminUserListResponse,
    AdminUserResponse,
    TokenIdentity,
    UpdatePasswordRequest,
    UpdateUserRequest,
)

router = APIRouter(tags=["Admin Users"], dependencies=[Depends(get_current_admin)])
logger = logging.getLogger(__name__)


@router.get("/", response_model=AdminUserListResponse)
def list_admin_users(db: Session = Depends(get_db)):
    """List all admin accounts, newest first."""
    users = admin_crud.get_multi(db)
    return AdminUserListResponse(users=[AdminUserResponse.model_validate(u) for u in users])


@router.post("/add-user")
def add_user(
    request: AddUserRequest,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """
    Create an admin with the default password.

    The new admin is expected to change it through /update-password.
    """
    admin = admin_crud.create(db, request.name, request.email, settings.DEFAULT_ADMIN_PASSWORD, role=request.role)
    logger.info(f"Admin {identity.id} added admin {admin.id}")

    return {"success": True, "user": AdminUserResponse.model_validate(admin)}


@router.delete("/delete-user/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    admin_crud.delete(db, user_id)
    return {"success": True, "message": "User deleted successfully", "id": user_id}


@router.patch("/update-user/{user_id}")
def update_user(
    user_id: int,
    request: UpdateUserRequest,
    db: Session = Depends(get_db)
):
    """Change an admin's name and/or email. At least one must be given."""
    admin = admin_crud.update(db, user_id, full_name=request.name, email=request.email)
    return {
        "success": True,
        "message": "User updated successfully",
        "user": AdminUserResponse.model_validate(admin),
    }


@router.patch("/update-password/{user_id}")
def update_password(
    user_id: int,
    request: UpdatePasswordRequest,
    db: Session = Depends(get_db)
):
    """
    Change a password. The current password must be supplied and correct,
    and the new one must satisfy the signup password policy.
    """
    admin_crud.change_password(db, user_id, request.current_password, request.new_password)
    return {"success": True, "message": "Password updated successfully"}
