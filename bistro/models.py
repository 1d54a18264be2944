"""
SQLAlchemy Database Models

Four tables back the bistro:
- users: customer and admin accounts
- menu_items: the catalog, with a derived aggregate rating
- orders: placed orders with frozen line-item snapshots
- reviews: customer reviews awaiting or past moderation
"""

from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Text, Enum, Boolean, JSON, ForeignKey,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from bistro.database import Base
import enum


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class MenuCategory(str, enum.Enum):
    FAST_FOOD = "Fast Food"
    PIZZA = "Pizza"
    BURGER = "Burger"
    SANDWICH = "Sandwich"
    ITALIAN = "Italian"
    DESSERTS = "Desserts"
    BEVERAGES = "Beverages"


class FoodType(str, enum.Enum):
    VEG = "veg"
    NON_VEG = "non-veg"


class OrderStatus(str, enum.Enum):
    """
    Order status workflow.

    pending -> confirmed -> preparing -> ready -> delivered,
    with cancelled reachable from pending or confirmed.
    """
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class User(Base):
    """Customer or administrator account, keyed by mobile number."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    full_name = Column(String(100), nullable=False)
    mobile_number = Column(String(20), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User #{self.id} - {self.mobile_number} - {self.role.value}>"


class MenuItem(Base):
    """
    Catalog entry.

    ``rating`` and ``num_reviews`` are derived from approved reviews and are
    only written by the review aggregator.
    """
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    category = Column(Enum(MenuCategory), nullable=False, index=True)
    type = Column(Enum(FoodType), nullable=False, index=True)
    price = Column(Float, nullable=False)
    image = Column(String(500), default="default-food.jpg", nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    preparation_time = Column(Integer, default=20, nullable=False)  # minutes
    tags = Column(JSON, default=list, nullable=False)

    # Aggregate rating
    rating = Column(Float, default=0.0, nullable=False)
    num_reviews = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name} - {self.price}>"


class Order(Base):
    """
    Placed order.

    ``items`` holds frozen snapshots ({menuItem, name, quantity, price}) taken
    at creation; ``total_amount`` is computed once and never recomputed.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    items = Column(JSON, nullable=False)
    total_amount = Column(Float, nullable=False)
    status = Column(
        Enum(OrderStatus),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )

    # =========================================================================
    # DELIVERY
    # =========================================================================
    delivery_address = Column(String(255), nullable=False)
    contact_number = Column(String(20), nullable=False)
    special_instructions = Column(Text, nullable=True)
    estimated_delivery_time = Column(DateTime(timezone=True), nullable=True)

    # =========================================================================
    # PAYMENT INFO
    # =========================================================================
    payment_method = Column(Enum(PaymentMethod), default=PaymentMethod.CASH, nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", lazy="selectin")

    def __repr__(self):
        return f"<Order #{self.id} - user {self.user_id} - {self.status.value}>"


class Review(Base):
    """Customer review; only approved reviews count toward a menu item's rating."""
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(100), nullable=False)  # snapshot at submission
    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=False)
    menu_item_id = Column(
        Integer,
        ForeignKey("menu_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_approved = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    menu_item = relationship("MenuItem", lazy="selectin")

    @property
    def menu_item_name(self):
        return self.menu_item.name if self.menu_item is not None else None

    def __repr__(self):
        state = "approved" if self.is_approved else "pending"
        return f"<Review #{self.id} - {self.rating}/5 - {state}>"
