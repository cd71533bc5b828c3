"""
Customer accounts (the storefront's users collection)
"""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from gleaming_admin.core.database import Base


class Customer(Base):
    """
    One row per storefront user. The id is the auth user id when the
    customer signed up through the storefront.
    """
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    data = Column(JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
