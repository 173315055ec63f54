"""
Customer API endpoints.

Registration, sign in, profile management and admin customer tools.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.core.auth import (
    clear_session_cookie,
    get_current_customer,
    require_admin,
    set_session_cookie,
    verify_password,
)
from app.core.config import settings
from app.core.database import get_db
from app.core.sessions import SessionStore, get_session_store, new_session_id
from app.models.customer import Customer
from app.schemas.customer import (
    AdminFlagUpdate,
    BusinessLinkUpdate,
    CustomerLogin,
    CustomerProfile,
    CustomerRegister,
    OkResponse,
    PasswordReset,
    ProfileUpdate,
)
from app.services.customer_repository import CustomerRepository, to_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])


def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = CustomerRepository.get_by_id(db, customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer with ID {customer_id} not found"
        )
    return customer


# ============================================================================
# Account
# ============================================================================

@router.post("/register", response_model=CustomerProfile, status_code=status.HTTP_201_CREATED)
def register_customer(data: CustomerRegister, db: Session = Depends(get_db)):
    """
    Register a new customer.

    **Required fields:** email, password (8+ characters with an uppercase
    letter and a number), name (2+ characters).

    Company details are optional; when given they link the customer to an
    existing business with the same ABN and names, or create one.

    Raises:
        HTTPException 409: If the email is already registered
    """
    customer = CustomerRepository.register(db, data)
    return to_profile(customer)


@router.post("/login", response_model=CustomerProfile)
def login_customer(
    credentials: CustomerLogin,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """
    Sign in with email and password.

    Sets an httpOnly session cookie valid for SESSION_MAX_AGE_SECONDS.

    Raises:
        HTTPException 401: If the email or password is wrong
    """
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid email or password."
    )

    customer = CustomerRepository.get_by_email(db, credentials.email)
    if not customer:
        raise invalid

    if not settings.passwords_disabled:
        if not credentials.password or not verify_password(credentials.password, customer.password_hash):
            raise invalid

    sid = new_session_id()
    store.set(sid, customer.id)
    set_session_cookie(response, sid)
    logger.info(f"Customer {customer.id} signed in")

    return to_profile(customer)


@router.post("/logout", response_model=OkResponse)
def logout_customer(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    """End the current session and clear the cookie."""
    sid = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if sid:
        store.delete(sid)
    clear_session_cookie(response)
    return OkResponse()


@router.get("/me", response_model=CustomerProfile)
def get_me(customer: Customer = Depends(get_current_customer)):
    """Profile of the signed-in customer, including linked business details."""
    return to_profile(customer)


@router.put("/profile", response_model=CustomerProfile)
def update_profile(
    data: ProfileUpdate,
    customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """
    Update the signed-in customer's profile.

    Company fields update the linked business; without one, a business is
    created only when company details are supplied.
    """
    customer = CustomerRepository.update_profile(db, customer, data)
    return to_profile(customer)


# ============================================================================
# Admin
# ============================================================================

@router.get("/admin/list", response_model=List[CustomerProfile])
def list_customers(
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """All customers with business details, newest first."""
    return [to_profile(c) for c in CustomerRepository.list_all(db)]


@router.post("/{customer_id}/password", response_model=OkResponse)
def reset_customer_password(
    customer_id: int,
    data: PasswordReset,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """Set a new password for a customer."""
    customer = _get_customer_or_404(db, customer_id)
    CustomerRepository.set_password(db, customer, data.password)
    logger.info(f"Password reset for customer {customer_id}")
    return OkResponse()


@router.post("/{customer_id}/admin", response_model=CustomerProfile)
def set_customer_admin(
    customer_id: int,
    data: AdminFlagUpdate,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """Grant or revoke the stored admin flag."""
    customer = _get_customer_or_404(db, customer_id)
    customer = CustomerRepository.set_admin(db, customer, data.is_admin)
    return to_profile(customer)


@router.post("/{customer_id}/business", response_model=CustomerProfile)
def set_customer_business(
    customer_id: int,
    data: BusinessLinkUpdate,
    db: Session = Depends(get_db),
    _: Customer = Depends(require_admin),
):
    """Link a customer to a business, or unlink with business_id null."""
    customer = _get_customer_or_404(db, customer_id)
    customer = CustomerRepository.set_business(db, customer, data.business_id)
    return to_profile(customer)
