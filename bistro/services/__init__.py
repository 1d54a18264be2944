"""
                        Services Module

Business logic behind the HTTP routes. Each service wraps a request-scoped
database session and raises ``bistro.core.exceptions`` errors.

Services:
    - identity: registration, login, admin provisioning
    - catalog: menu items
    - orders: order placement and status lifecycle
    - reviews: review moderation and rating aggregation
"""

from bistro.services.catalog import CatalogService
from bistro.services.identity import IdentityService
from bistro.services.orders import OrderService
from bistro.services.reviews import ReviewService

__all__ = ["CatalogService", "IdentityService", "OrderService", "ReviewService"]
