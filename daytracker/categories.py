"""
Category registry.
Static display metadata (icon, color, label) for every activity category.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class CategoryInfo:
    """Display metadata for a single category."""
    key: str
    icon: str
    color: str
    label: str

    @property
    def display_name(self) -> str:
        return f"{self.icon} {self.label}"


OTHER_KEY = "other"

# Registry order is the order categories are offered in forms
CATEGORIES: Dict[str, CategoryInfo] = {
    "work": CategoryInfo("work", "💼", "#6366f1", "Work"),
    "study": CategoryInfo("study", "📚", "#8b5cf6", "Study"),
    "sleep": CategoryInfo("sleep", "😴", "#6366f1", "Sleep"),
    "exercise": CategoryInfo("exercise", "🏃", "#22c55e", "Exercise"),
    "entertainment": CategoryInfo("entertainment", "🎮", "#f59e0b", "Entertainment"),
    "meals": CategoryInfo("meals", "🍽️", "#ef4444", "Meals"),
    "commute": CategoryInfo("commute", "🚗", "#14b8a6", "Commute"),
    "personal": CategoryInfo("personal", "🧘", "#ec4899", "Personal Care"),
    "social": CategoryInfo("social", "👥", "#3b82f6", "Social"),
    OTHER_KEY: CategoryInfo(OTHER_KEY, "📌", "#71717a", "Other"),
}


def lookup(key: Optional[str]) -> CategoryInfo:
    """
    Get display metadata for a category key.

    Never fails: unknown, empty or missing keys resolve to the 'other' entry.

    Args:
        key: Category key as stored on the activity

    Returns:
        CategoryInfo for the key
    """
    if key and key in CATEGORIES:
        return CATEGORIES[key]
    return CATEGORIES[OTHER_KEY]


def category_keys() -> List[str]:
    """All known category keys in registry order."""
    return list(CATEGORIES.keys())


def display_name(key: Optional[str]) -> str:
    """'<icon> <label>' for a category key."""
    return lookup(key).display_name
