"""
Fixed set of question categories offered to the player.
"""
from enum import Enum
from typing import List

from .exceptions import ValidationError


class Category(str, Enum):
    """Topic label for a This or That round."""
    EVERYDAY_LIFE = "Everyday Life"
    SUPERPOWERS = "Superpowers"
    FOOD_AND_DRINK = "Food & Drink"
    TRAVEL = "Travel"
    TECHNOLOGY = "Technology"
    ENTERTAINMENT = "Entertainment"
    ANIMALS = "Animals"
    FANTASY = "Fantasy"
    WORK_AND_SCHOOL = "Work & School"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def labels(cls) -> List[str]:
        """All labels in display order."""
        return [category.value for category in cls]

    @classmethod
    def from_label(cls, label: str) -> "Category":
        """
        Resolve a category from its display label.

        Matching ignores surrounding whitespace and letter case.

        :param label: Label sent by the browser
        :return: Matching Category
        :raises ValidationError: If the label is empty or unknown
        """
        if not label or not isinstance(label, str):
            raise ValidationError("Category must be a non-empty string")

        wanted = label.strip().lower()
        for category in cls:
            if category.value.lower() == wanted:
                return category

        raise ValidationError(
            f"Unknown category: {label!r}. Expected one of: {', '.join(cls.labels())}"
        )


DEFAULT_CATEGORY = Category.EVERYDAY_LIFE
