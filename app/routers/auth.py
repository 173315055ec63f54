"""
Session endpoints shared by all signed-in pages.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.auth import clear_session_cookie, set_session_cookie
from app.core.config import settings
from app.core.database import get_db
from app.core.sessions import SessionStore, get_session_store, new_session_id
from app.schemas.customer import OkResponse
from app.services.customer_repository import CustomerRepository

router = APIRouter(prefix="/auth", tags=["Auth"])


class DevLoginRequest(BaseModel):
    id: Optional[int] = None


class DevLoginResponse(BaseModel):
    ok: bool = True
    customer_id: int


@router.post("/logout", response_model=OkResponse)
def logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    """Clear the session cookie and forget the session."""
    sid = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if sid:
        store.delete(sid)
    clear_session_cookie(response)
    return OkResponse()


@router.post("/devlogin", response_model=DevLoginResponse)
def dev_login(
    response: Response,
    payload: Optional[DevLoginRequest] = None,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """
    Start a session for a customer without a password (DEBUG only).

    Defaults to customer 1.
    """
    if not settings.debug:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not Found"
        )

    customer_id = payload.id if payload and payload.id else 1
    if not CustomerRepository.get_by_id(db, customer_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer with ID {customer_id} not found"
        )

    sid = new_session_id()
    store.set(sid, customer_id)
    set_session_cookie(response, sid)
    return DevLoginResponse(customer_id=customer_id)
