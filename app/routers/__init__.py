"""
API routers for the application.
"""

from fastapi import APIRouter
from app.routers import items, pricing, customers, auth, businesses

api_router = APIRouter()

# Include routers
api_router.include_router(items.router)  # Price list upload, rules & item views
api_router.include_router(pricing.router)  # Customer rule-file pricing
api_router.include_router(customers.router)  # Customer accounts
api_router.include_router(auth.router)  # Session endpoints
api_router.include_router(businesses.router)  # Businesses & special prices

__all__ = ["api_router", "items", "pricing", "customers", "auth", "businesses"]
