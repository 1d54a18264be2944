"""
                Amay Bistro Ordering API

Backend for a single-restaurant ordering app: accounts, menu catalog,
order placement and tracking, and customer reviews.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
