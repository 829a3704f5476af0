"""
Language matching for DevDocs catalog resolution.

Maps a user's language guess ("py", "Python 3.12", "nodejs") to catalog
entries. Resolution is a cascade:
1. Weighted field scoring (exact and substring hits on name, display
   name, slug, alias, type)
2. Ordering rules to break score ties deterministically
3. Fuzzy matching via RapidFuzz when nothing scored

RapidFuzz keeps the fallback fast; catalog names are short strings, so
no embedding model is needed.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Protocol, Sequence

from rapidfuzz import fuzz

from .models import (
    FUZZY_THRESHOLD,
    DocumentLanguage,
    OrderRule,
    ScoredLanguage,
)
from .values import Language


_DIGITS = re.compile(r"(\d+)")


def natural_key(value: str) -> list:
    """Case-insensitive sort key where digit runs compare as numbers."""
    parts = _DIGITS.split(value.casefold())
    # re.split with a capture group alternates text, digits, text, ...
    return [int(part) if index % 2 else part for index, part in enumerate(parts)]


def collate(a: str, b: str) -> int:
    """Three-way natural comparison, falling back to raw order on ties."""
    key_a, key_b = natural_key(a), natural_key(b)
    if key_a != key_b:
        return -1 if key_a < key_b else 1
    if a == b:
        return 0
    return -1 if a < b else 1


# ============================================================================
# Pairwise Matchers
# ============================================================================

class Matcher(Protocol):
    def compare(self, a: str, b: str) -> int:
        """0 when a and b match, negative when a sorts first, positive otherwise."""
        ...


class ExactMatcher:
    """Equal strings match; everything else falls back to collation order."""

    def compare(self, a: str, b: str) -> int:
        return 0 if a == b else collate(a, b)


class PartialMatcher:
    """
    Strings match when each contains the other.

    Mutual containment is deliberately narrower than one-way substring
    containment: "java" vs "javascript" is not a match.
    """

    def compare(self, a: str, b: str) -> int:
        if b in a and a in b:
            return 0
        return collate(a, b)


EXACT = ExactMatcher()
PARTIAL = PartialMatcher()

# Ranking cascade, highest priority first
DEFAULT_ORDER_RULES: List[OrderRule] = [
    OrderRule("name", EXACT, "asc"),
    OrderRule("type", EXACT, "asc"),
    OrderRule("alias", EXACT, "asc"),
    OrderRule("name", PARTIAL, "asc"),
    OrderRule("type", PARTIAL, "asc"),
    OrderRule("alias", PARTIAL, "asc"),
    OrderRule("version", EXACT, "desc"),
    OrderRule("version", PARTIAL, "desc"),
]


def compare_by_rules(a: DocumentLanguage, b: DocumentLanguage, rules: Sequence[OrderRule]) -> int:
    """Apply rules in order until one tells a and b apart."""
    for rule in rules:
        result = rule.matcher.compare(a.field_value(rule.key), b.field_value(rule.key))
        if rule.direction == "desc":
            result = -result
        if result != 0:
            return result
    return 0


# ============================================================================
# Weighted Scoring
# ============================================================================

# Field weights for a substring hit; an exact hit adds EXACT_BONUS
SCORE_WEIGHTS: Dict[str, int] = {
    "name": 100,
    "display_name": 95,
    "slug": 90,
    "alias": 85,
    "type": 20,
}
EXACT_BONUS = 10


class LanguageScorer:
    """
    Scores catalog entries against a language hint.

    Each field contributes its weight when it contains the hint and
    weight + EXACT_BONUS when it equals it (case-insensitive). An entry's
    score is its best field; zero means no relation at all.
    """

    def __init__(self, weights: Dict[str, int] = SCORE_WEIGHTS, exact_bonus: int = EXACT_BONUS):
        self._weights = weights
        self._exact_bonus = exact_bonus

    def score(self, language: DocumentLanguage, term: Language) -> int:
        probe = term.lower()
        best = 0
        for key, weight in self._weights.items():
            value = language.field_value(key).lower()
            if not value:
                continue
            if value == probe:
                best = max(best, weight + self._exact_bonus)
            elif probe in value:
                best = max(best, weight)
        return best

    def rank(self, languages: Sequence[DocumentLanguage], term: Language) -> List[ScoredLanguage]:
        """Score every entry, drop zeros, highest score first (stable)."""
        scored = [ScoredLanguage(lang, self.score(lang, term)) for lang in languages]
        scored = [item for item in scored if item.score > 0]
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored


# ============================================================================
# Fuzzy Fallback
# ============================================================================

class FuzzySearchStrategy(ABC):
    """Approximate matcher used when scoring finds nothing."""

    @abstractmethod
    def search(self, languages: Sequence[DocumentLanguage], term: Language) -> List[DocumentLanguage]:
        """Return matching entries, best first."""


# Relative importance of each field in the fuzzy score
FUZZY_WEIGHTS: Dict[str, float] = {
    "name": 0.4,
    "type": 0.3,
    "alias": 0.2,
    "display_name": 0.1,
}


class RapidFuzzSearchStrategy(FuzzySearchStrategy):
    """
    Fuzzy matching with RapidFuzz ``ratio``.

    ``threshold`` follows Fuse.js conventions: 0.0 only accepts perfect
    matches, 1.0 accepts anything. An entry qualifies when its best single
    field reaches ``(1 - threshold) * 100``; qualifying entries are ordered
    by the weighted mean over their non-empty fields.

    ``ratio`` is stricter than ``WRatio`` and avoids substring false
    positives, which the scoring stage already covers.
    """

    def __init__(self, threshold: float = FUZZY_THRESHOLD, weights: Dict[str, float] = FUZZY_WEIGHTS):
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
        self.threshold = threshold
        self._floor = (1.0 - threshold) * 100
        self._weights = weights

    def search(self, languages: Sequence[DocumentLanguage], term: Language) -> List[DocumentLanguage]:
        probe = term.lower()
        matches = []
        for index, language in enumerate(languages):
            best, weighted = self._similarity(language, probe)
            if best >= self._floor:
                matches.append((weighted, index, language))

        # Highest weighted similarity first, catalog order on ties
        matches.sort(key=lambda item: (-item[0], item[1]))
        return [language for _, _, language in matches]

    def _similarity(self, language: DocumentLanguage, probe: str):
        best = 0.0
        total = 0.0
        weight_sum = 0.0
        for key, weight in self._weights.items():
            value = language.field_value(key).lower()
            if not value:
                continue
            ratio = fuzz.ratio(probe, value)
            best = max(best, ratio)
            total += ratio * weight
            weight_sum += weight
        return best, (total / weight_sum if weight_sum else 0.0)
