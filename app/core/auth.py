"""
Authentication and Authorization utilities.

Customers sign in with email and password; a random session id is stored in
an httpOnly cookie and resolved through the session store.
"""

from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.sessions import SessionStore, get_session_store
from app.models.customer import Customer


def verify_password(plain_password: str, hashed_password_in_db: str) -> bool:
    """
    Verify plain password against stored bcrypt hash in database.

    Args:
        plain_password: Plain text password from frontend
        hashed_password_in_db: Bcrypt hash stored in database

    Returns:
        True if password matches hash, False otherwise (including a malformed hash)
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password_in_db.encode('utf-8')
        )
    except ValueError:
        return False


def get_password_hash(plain_password: str) -> str:
    """
    Hash a plain password using Bcrypt.

    The salt is generated per call and stored in the hash; the cost factor
    comes from BCRYPT_ROUNDS.

    Args:
        plain_password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(plain_password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def is_admin(customer: Customer) -> bool:
    """Stored admin flag, or the email is on the ADMIN_EMAILS allowlist"""
    return bool(customer.is_admin) or customer.email.lower() in settings.admin_emails


# ============================================================================
# Session cookie
# ============================================================================

def set_session_cookie(response: Response, sid: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sid,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


# ============================================================================
# Dependencies
# ============================================================================

def get_optional_customer_id(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> Optional[int]:
    """Customer id for the session cookie, or None when signed out"""
    sid = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not sid:
        return None
    return store.get(sid)


def get_current_customer_id(customer_id: Optional[int] = Depends(get_optional_customer_id)) -> int:
    if customer_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in."
        )
    return customer_id


def get_optional_customer(
    customer_id: Optional[int] = Depends(get_optional_customer_id),
    db: Session = Depends(get_db),
) -> Optional[Customer]:
    if customer_id is None:
        return None
    return db.query(Customer).filter(Customer.id == customer_id).first()


def get_current_customer(
    customer_id: int = Depends(get_current_customer_id),
    db: Session = Depends(get_db),
) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in."
        )
    return customer


def require_admin(customer: Customer = Depends(get_current_customer)) -> Customer:
    if not is_admin(customer):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin only."
        )
    return customer
