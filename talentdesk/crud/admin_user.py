"""
CRUD operations for admin accounts.

Lookups return None when nothing matches; the account operations used by
the API raise the domain errors from talentdesk.core.exceptions instead.
"""

import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from talentdesk.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from talentdesk.core.security import get_password_hash, verify_password
from talentdesk.models.admin_user import AdminUser

logger = logging.getLogger(__name__)


def get_by_id(db: Session, admin_id: int) -> Optional[AdminUser]:
    return db.query(AdminUser).filter(AdminUser.id == admin_id).first()


def get_by_email(db: Session, email: str) -> Optional[AdminUser]:
    return db.query(AdminUser).filter(AdminUser.email == email).first()


def get_multi(db: Session) -> List[AdminUser]:
    """All admins, newest first."""
    return db.query(AdminUser).order_by(AdminUser.id.desc()).all()


def create(
    db: Session,
    full_name: str,
    email: str,
    password: str,
    role: Optional[str] = None,
) -> AdminUser:
    """
    Create an admin account with a bcrypt-hashed password.

    Args:
        db: Database session
        full_name: Display name
        email: Login email, must be unique
        password: Plaintext password (only the hash is stored)
        role: Role label, defaults to "admin" when blank

    Returns:
        Created AdminUser

    Raises:
        ConflictError: If the email is already registered
    """
    if get_by_email(db, email):
        raise ConflictError("Admin already exists")

    admin = AdminUser(
        full_name=full_name,
        email=email,
        hashed_password=get_password_hash(password),
        role=role.strip() if role and role.strip() else "admin",
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup with the same email
        db.rollback()
        raise ConflictError("Admin already exists")
    db.refresh(admin)

    logger.info(f"Created admin {admin.id} ({admin.email})")
    return admin


def authenticate(db: Session, email: str, password: str) -> AdminUser:
    """
    Check an email/password pair.

    Raises:
        NotFoundError: If no account has this email
        AuthError: If the password does not match
    """
    admin = get_by_email(db, email)
    if not admin:
        raise NotFoundError("Admin not found")

    if not verify_password(password, admin.hashed_password):
        raise AuthError("Invalid password")

    return admin


def update(
    db: Session,
    admin_id: int,
    full_name: Optional[str] = None,
    email: Optional[str] = None,
) -> AdminUser:
    """
    Rename an admin and/or change their email.

    Raises:
        ValidationError: If neither field is supplied
        NotFoundError: If the admin does not exist
        ConflictError: If the email belongs to another admin
    """
    if not full_name and not email:
        raise ValidationError("At least one field (name or email) must be provided")

    admin = get_by_id(db, admin_id)
    if not admin:
        raise NotFoundError("User not found")

    if email and email != admin.email:
        if get_by_email(db, email):
            raise ConflictError("Email is already in use")
        admin.email = email
    if full_name:
        admin.full_name = full_name

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email is already in use")
    db.refresh(admin)

    return admin


def delete(db: Session, admin_id: int) -> None:
    """
    Raises:
        NotFoundError: If the admin does not exist
    """
    admin = get_by_id(db, admin_id)
    if not admin:
        raise NotFoundError("User not found")

    db.delete(admin)
    db.commit()
    logger.info(f"Deleted admin {admin_id}")


def change_password(db: Session, admin_id: int, current_password: str, new_password: str) -> None:
    """
    Replace an admin's password after verifying the current one.

    Raises:
        NotFoundError: If the admin does not exist
        AuthError: If current_password is wrong
    """
    admin = get_by_id(db, admin_id)
    if not admin:
        raise NotFoundError("User not found")

    if not verify_password(current_password, admin.hashed_password):
        raise AuthError("Current password is incorrect")

    admin.hashed_password = get_password_hash(new_password)
    db.commit()
    logger.info(f"Password updated for admin {admin_id}")
