"""
Customer, business and business-pricing models.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Business(Base):
    """
    Business model - the company a customer buys for.

    Table: business_customer
    Unique per (abn, entity_name, business_name), compared case-insensitively.
    """
    __tablename__ = "business_customer"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    abn = Column(String(11), nullable=True)
    entity_name = Column(String(255), nullable=True)
    business_name = Column(String(255), nullable=True)
    delivery_address = Column(Text, nullable=True)
    billing_address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    customers = relationship("Customer", back_populates="business")
    pricing = relationship("BusinessPricing", back_populates="business", cascade="all, delete-orphan")

    __table_args__ = (
        Index(
            "ux_business_identity",
            func.lower(abn),
            func.lower(entity_name),
            func.lower(business_name),
            unique=True,
        ),
    )

    def __repr__(self):
        return f"<Business(id={self.id}, entity='{self.entity_name}', trading='{self.business_name}')>"


class Customer(Base):
    """
    Customer model - a signed-in account.

    Table: customers
    Company details live on the linked Business.
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    business_id = Column(Integer, ForeignKey("business_customer.id", ondelete="SET NULL"), nullable=True, index=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    business = relationship("Business", back_populates="customers")

    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}')>"


class BusinessPricing(Base):
    """
    Per-(business, item) fixed price override in cents.

    Table: business_pricing
    """
    __tablename__ = "business_pricing"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    business_id = Column(Integer, ForeignKey("business_customer.id", ondelete="CASCADE"), nullable=False, index=True)
    item_number = Column(String(255), nullable=False)
    price_cents = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    business = relationship("Business", back_populates="pricing")

    __table_args__ = (
        UniqueConstraint("business_id", "item_number", name="uq_business_pricing_item"),
    )

    def __repr__(self):
        return f"<BusinessPricing(business_id={self.business_id}, item='{self.item_number}', cents={self.price_cents})>"


class CustomerSession(Base):
    """
    Persisted session id → customer id, used by the database session store.

    Table: customer_sessions
    """
    __tablename__ = "customer_sessions"

    sid = Column(String(64), primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
