"""
Service layer for the curriculum, scheduling, attendance, lesson and support rules.
"""

from . import attendance, curriculum, dashboard, lessons, scheduling, support, user_settings

__all__ = ["attendance", "curriculum", "dashboard", "lessons", "scheduling", "support", "user_settings"]
