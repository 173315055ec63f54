"""
Repository layer for Customer operations.
Profile reads and writes join the customer with their linked business.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from app.core.auth import get_password_hash, is_admin
from app.models.customer import Business, Customer
from app.schemas.customer import CustomerProfile, CustomerRegister, ProfileUpdate
from app.services.business_repository import BusinessRepository

logger = logging.getLogger(__name__)


def to_profile(customer: Customer) -> CustomerProfile:
    business: Optional[Business] = customer.business
    return CustomerProfile(
        id=customer.id,
        email=customer.email,
        name=customer.name,
        phone=customer.phone,
        company_name=business.entity_name if business else None,
        trading_name=business.business_name if business else None,
        abn=business.abn if business else None,
        delivery_address=business.delivery_address if business else None,
        billing_address=business.billing_address if business else None,
        business_id=customer.business_id,
        is_admin=is_admin(customer),
        created_at=customer.created_at,
    )


class CustomerRepository:
    """Repository for Customer operations"""

    @staticmethod
    def get_by_id(db: Session, customer_id: int) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.id == customer_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.email == email.strip().lower()).first()

    @staticmethod
    def register(db: Session, data: CustomerRegister) -> Customer:
        """
        Create a customer, linking or creating their business when company details are given.

        Raises:
            HTTPException 409: If the email is already registered
        """
        email = data.email.strip().lower()
        if CustomerRepository.get_by_email(db, email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered."
            )

        try:
            customer = Customer(
                email=email,
                password_hash=get_password_hash(data.password),
                name=data.name,
                phone=data.phone,
                is_admin=False,
            )
            if data.has_business_details():
                customer.business = BusinessRepository.find_or_create(
                    db,
                    abn=data.abn,
                    entity_name=data.company_name,
                    business_name=data.trading_name,
                    delivery_address=data.delivery_address,
                    billing_address=data.billing_address,
                )
            db.add(customer)
            db.commit()
            db.refresh(customer)
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered."
            )

        logger.info(f"Registered customer {customer.id} ({email})")
        return customer

    @staticmethod
    def update_profile(db: Session, customer: Customer, data: ProfileUpdate) -> Customer:
        """
        Update name/phone and the linked business.

        With no linked business, one is created (or an existing match linked)
        only when company details are supplied.
        """
        customer.name = data.name or customer.name
        customer.phone = data.phone

        business = customer.business
        if business:
            business.abn = data.abn
            business.entity_name = data.company_name
            business.business_name = data.trading_name
            business.delivery_address = data.delivery_address
            business.billing_address = data.billing_address
        elif data.has_business_details():
            customer.business = BusinessRepository.find_or_create(
                db,
                abn=data.abn,
                entity_name=data.company_name,
                business_name=data.trading_name,
                delivery_address=data.delivery_address,
                billing_address=data.billing_address,
            )

        try:
            db.commit()
            db.refresh(customer)
            return customer
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Another business already has this ABN and name combination"
            )

    @staticmethod
    def list_all(db: Session) -> List[Customer]:
        return (
            db.query(Customer)
            .options(joinedload(Customer.business))
            .order_by(Customer.created_at.desc(), Customer.id.desc())
            .all()
        )

    @staticmethod
    def set_password(db: Session, customer: Customer, password: str) -> Customer:
        customer.password_hash = get_password_hash(password)
        db.commit()
        return customer

    @staticmethod
    def set_admin(db: Session, customer: Customer, admin: bool) -> Customer:
        customer.is_admin = admin
        db.commit()
        return customer

    @staticmethod
    def set_business(db: Session, customer: Customer, business_id: Optional[int]) -> Customer:
        if business_id is not None and not BusinessRepository.get_by_id(db, business_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Business with ID {business_id} not found"
            )
        customer.business_id = business_id
        db.commit()
        db.refresh(customer)
        return customer
