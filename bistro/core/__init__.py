"""
Core module initialization.
Exports configuration and logging utilities.
"""

from bistro.core.config import get_settings, Settings, EnvironmentMode, AdminCredentials

__all__ = ["get_settings", "Settings", "EnvironmentMode", "AdminCredentials"]
