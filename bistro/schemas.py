"""
Pydantic Schemas for Request/Response Validation

Wire format is camelCase (``fullName``, ``totalAmount``, ``isApproved``);
attributes are snake_case. Requests accept either spelling.

Every response is wrapped in the envelope
``{success, message?, data?, count?}``.
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from bistro.models import (
    FoodType,
    MenuCategory,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    UserRole,
)


class CamelModel(BaseModel):
    """Base for all wire schemas."""

    class Config:
        populate_by_name = True
        from_attributes = True


# =============================================================================
# AUTH SCHEMAS
# =============================================================================

class RegisterRequest(CamelModel):
    full_name: str = Field(..., alias="fullName", min_length=1, max_length=100, examples=["Asha Rao"])
    mobile_number: str = Field(..., alias="mobileNumber", min_length=10, max_length=20, examples=["9876543210"])
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("full_name", "mobile_number")
    @classmethod
    def strip_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v


class LoginRequest(CamelModel):
    mobile_number: str = Field(..., alias="mobileNumber", min_length=1)
    password: str = Field(..., min_length=1)


class UserPublic(CamelModel):
    """User profile as returned to clients; never includes the password hash."""
    id: int
    full_name: str = Field(..., alias="fullName")
    mobile_number: str = Field(..., alias="mobileNumber")
    role: UserRole


class UserSummary(CamelModel):
    id: int
    full_name: str = Field(..., alias="fullName")
    mobile_number: str = Field(..., alias="mobileNumber")


class AuthData(CamelModel):
    user: UserPublic
    token: str


# =============================================================================
# MENU SCHEMAS
# =============================================================================

class MenuItemCreate(CamelModel):
    """Request schema for adding a catalog entry."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Paneer Tikka Pizza"])
    description: str = Field(..., min_length=1, max_length=500)
    category: MenuCategory
    type: FoodType
    price: float = Field(..., ge=0, examples=[249.0])
    image: str = Field(default="default-food.jpg", max_length=500)
    is_available: bool = Field(default=True, alias="isAvailable")
    preparation_time: int = Field(default=20, ge=0, alias="preparationTime")
    tags: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class MenuItemUpdate(CamelModel):
    """Partial update; only supplied fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[MenuCategory] = None
    type: Optional[FoodType] = None
    price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = Field(None, max_length=500)
    is_available: Optional[bool] = Field(None, alias="isAvailable")
    preparation_time: Optional[int] = Field(None, ge=0, alias="preparationTime")
    tags: Optional[List[str]] = None


class MenuItemResponse(CamelModel):
    id: int
    name: str
    description: str
    category: MenuCategory
    type: FoodType
    price: float
    image: str
    is_available: bool = Field(..., alias="isAvailable")
    preparation_time: int = Field(..., alias="preparationTime")
    tags: List[str]
    rating: float
    num_reviews: int = Field(..., alias="numReviews")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


# =============================================================================
# ORDER SCHEMAS
# =============================================================================

class OrderLineRequest(CamelModel):
    """Single requested line: which catalog item and how many."""
    menu_item_id: int = Field(
        ...,
        validation_alias=AliasChoices("menuItem", "menuItemId", "menu_item_id"),
        examples=[1],
    )
    quantity: int = Field(..., ge=1, le=99, examples=[2])


class OrderCreate(CamelModel):
    """Request schema for placing an order."""
    items: List[OrderLineRequest] = Field(..., min_length=1)
    delivery_address: str = Field(..., alias="deliveryAddress", min_length=1, max_length=255)
    contact_number: str = Field(..., alias="contactNumber", min_length=1, max_length=20)
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH, alias="paymentMethod")
    special_instructions: Optional[str] = Field(None, alias="specialInstructions", max_length=200)


class OrderLine(CamelModel):
    """Frozen snapshot of a menu item at order time."""
    menu_item: int = Field(..., alias="menuItem")
    name: str
    quantity: int
    price: float


class OrderResponse(CamelModel):
    id: int
    user: UserSummary
    items: List[OrderLine]
    total_amount: float = Field(..., alias="totalAmount")
    status: OrderStatus
    delivery_address: str = Field(..., alias="deliveryAddress")
    contact_number: str = Field(..., alias="contactNumber")
    payment_method: PaymentMethod = Field(..., alias="paymentMethod")
    payment_status: PaymentStatus = Field(..., alias="paymentStatus")
    special_instructions: Optional[str] = Field(None, alias="specialInstructions")
    estimated_delivery_time: Optional[datetime] = Field(None, alias="estimatedDeliveryTime")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class OrderStatusUpdate(CamelModel):
    # Plain string: unknown values are reported as InvalidStatus, not a schema error
    status: str = Field(..., examples=["confirmed"])


# =============================================================================
# REVIEW SCHEMAS
# =============================================================================

class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5, examples=[5])
    comment: str = Field(..., min_length=1, max_length=500)
    menu_item_id: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("menuItem", "menuItemId", "menu_item_id"),
    )

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please provide a review comment")
        return v


class ReviewResponse(CamelModel):
    id: int
    user: int = Field(..., validation_alias=AliasChoices("user_id", "user"))
    user_name: str = Field(..., alias="userName")
    rating: int
    comment: str
    menu_item: Optional[int] = Field(
        None,
        alias="menuItem",
        validation_alias=AliasChoices("menu_item_id", "menuItem"),
    )
    menu_item_name: Optional[str] = Field(None, alias="menuItemName")
    is_approved: bool = Field(..., alias="isApproved")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


# =============================================================================
# RESPONSE ENVELOPES
# =============================================================================

class MessageResponse(BaseModel):
    """Envelope without a payload (logout, deletions)."""
    success: bool = True
    message: Optional[str] = None


class AuthResponse(MessageResponse):
    data: AuthData


class UserResponse(MessageResponse):
    data: UserPublic


class MenuItemEnvelope(MessageResponse):
    data: MenuItemResponse


class MenuItemListResponse(MessageResponse):
    count: int
    data: List[MenuItemResponse]


class OrderEnvelope(MessageResponse):
    data: OrderResponse


class OrderListResponse(MessageResponse):
    count: int
    data: List[OrderResponse]


class ReviewEnvelope(MessageResponse):
    data: ReviewResponse


class ReviewListResponse(MessageResponse):
    count: int
    data: List[ReviewResponse]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    environment: str
    timestamp: datetime
