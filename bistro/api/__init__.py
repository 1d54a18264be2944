"""
HTTP routers, one per resource.
"""

from bistro.api import auth, menu, orders, reviews

routers = [auth.router, menu.router, orders.router, reviews.router]

__all__ = ["routers"]
