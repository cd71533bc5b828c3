"""
Product collections
"""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from gleaming_admin.core.database import Base


class Product(Base):
    """
    Catalog products - the live source of stock counts
    """
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    data = Column(JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Bestseller(Base):
    """
    Mirror of every product flagged isBestseller, read by the storefront
    """
    __tablename__ = "bestsellers"

    id = Column(String(64), primary_key=True)
    data = Column(JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
