"""
Database models for the application.
"""

from app.core.database import Base
from app.models.item import Item
from app.models.price_upload import PriceUpload
from app.models.customer import Business, Customer, BusinessPricing, CustomerSession

__all__ = [
    "Base",
    "Item",
    "PriceUpload",
    "Business",
    "Customer",
    "BusinessPricing",
    "CustomerSession",
]
