"""
Immutable, ordered view over catalog entries.

Every operation returns a new collection; the wrapped tuple is never
modified.
"""

from functools import cmp_to_key
from typing import Iterable, Iterator, List, Sequence

from .matcher import FuzzySearchStrategy, compare_by_rules
from .models import DocumentLanguage, OrderRule
from .values import Language


class DocumentLanguageCollection:
    """Read-only sequence of DocumentLanguage with ranking helpers."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[DocumentLanguage] = ()):
        self._items = tuple(items)

    @classmethod
    def from_languages(cls, languages: Iterable[DocumentLanguage]) -> "DocumentLanguageCollection":
        return cls(languages)

    def order_by_rules(self, rules: Sequence[OrderRule]) -> "DocumentLanguageCollection":
        """Stable multi-key sort; the first rule that separates two entries wins."""
        key = cmp_to_key(lambda a, b: compare_by_rules(a, b, rules))
        return DocumentLanguageCollection(sorted(self._items, key=key))

    def find_by_fuzzy_search(
        self,
        term: Language,
        strategy: FuzzySearchStrategy,
    ) -> "DocumentLanguageCollection":
        return DocumentLanguageCollection(strategy.search(self._items, term))

    def take(self, count: int) -> "DocumentLanguageCollection":
        return DocumentLanguageCollection(self._items[:max(count, 0)])

    def first(self) -> DocumentLanguage:
        if not self._items:
            raise IndexError("collection is empty")
        return self._items[0]

    def names(self) -> List[str]:
        return [lang.name for lang in self._items]

    def is_empty(self) -> bool:
        return not self._items

    def size(self) -> int:
        return len(self._items)

    def to_list(self) -> List[DocumentLanguage]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[DocumentLanguage]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocumentLanguageCollection):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"DocumentLanguageCollection({self.names()!r})"
