"""
Models package - Data models and type definitions.
"""

from .activity import Activity, ActivityDraft, sort_activities

__all__ = ['Activity', 'ActivityDraft', 'sort_activities']
