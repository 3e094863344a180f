"""
User profile package.
Provides the profile models and the persistent user store.
"""

from .models import PriceAlert, UserProfile, UserSettings
from .user_storage import UserStore

__all__ = ["PriceAlert", "UserProfile", "UserSettings", "UserStore"]
