from dataclasses import dataclass
from typing import Dict

from .categories import Category


@dataclass(frozen=True)
class OptionPair:
    first: str
    second: str

    @classmethod
    def empty(cls) -> "OptionPair":
        return cls("", "")

    @property
    def is_empty(self) -> bool:
        """Both options blank, the marker of a failed generation."""
        return not self.first and not self.second

    def to_dict(self) -> Dict[str, str]:
        return {"first": self.first, "second": self.second}


@dataclass(frozen=True)
class HistoryEntry:
    category: Category
    pair: OptionPair

    def to_dict(self) -> Dict[str, object]:
        return {"category": self.category.value, **self.pair.to_dict()}
