"""
Activity data models.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from ..errors import InvalidInput


@dataclass
class ActivityDraft:
    """
    The user-editable part of an activity, as sent to the sync gateway.

    Attributes:
        name: Display name (stored stripped)
        category: Category key
        duration: Duration in whole minutes
    """
    name: str
    category: str
    duration: int

    def __post_init__(self):
        """Validate draft data."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidInput("Activity name cannot be empty", field="name")
        if not isinstance(self.category, str) or not self.category.strip():
            raise InvalidInput("Category cannot be empty", field="category")
        # bool is an int subclass but never a valid duration
        if isinstance(self.duration, bool) or not isinstance(self.duration, int):
            raise InvalidInput("Duration must be a whole number of minutes", field="duration")
        if self.duration <= 0:
            raise InvalidInput("Duration must be positive", field="duration")
        self.name = self.name.strip()

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'category': self.category,
            'duration': self.duration,
        }


@dataclass
class Activity:
    """
    A single logged activity for one day.

    Attributes:
        id: Identifier assigned by the sync gateway
        name: Display name
        category: Category key (unknown keys are kept as-is)
        duration: Duration in minutes
        created_at: Server-assigned creation time, None while pending
        updated_at: Time of the last update, if any
    """
    id: str
    name: str
    category: str
    duration: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def hours(self) -> float:
        """Duration in hours."""
        return self.duration / 60

    def to_dict(self) -> dict:
        """Convert activity to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'duration': self.duration,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Activity':
        """Create Activity from dictionary."""
        created_at = data.get('created_at')
        updated_at = data.get('updated_at')
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        if isinstance(updated_at, str):
            updated_at = datetime.fromisoformat(updated_at)
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            category=data.get('category', ''),
            duration=int(data.get('duration', 0)),
            created_at=created_at,
            updated_at=updated_at,
        )


def sort_activities(activities: Iterable[Activity]) -> List[Activity]:
    """
    Order activities by creation time.

    The sort is stable so equal timestamps keep delivery order; activities
    whose timestamp is still pending go last.
    """
    return sorted(
        activities,
        key=lambda a: (a.created_at is None, a.created_at or datetime.min),
    )
