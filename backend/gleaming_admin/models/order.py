"""
Orders and their line items, nested under the customer that placed them
"""
from sqlalchemy import Column, DateTime, ForeignKeyConstraint, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from gleaming_admin.core.database import Base


class Order(Base):
    """
    users/{user_id}/orders/{id}

    user_id is not a foreign key: orders outlive deleted customer records.
    """
    __tablename__ = "orders"

    user_id = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    data = Column(JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    """
    users/{user_id}/orders/{order_id}/orderItems/{id}
    """
    __tablename__ = "order_items"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id", "order_id"],
            ["orders.user_id", "orders.id"],
            ondelete="CASCADE",
        ),
    )

    user_id = Column(String(64), primary_key=True)
    order_id = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    data = Column(JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="items")
