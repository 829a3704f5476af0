"""
Validated value objects for tool input.

Each object is built through a ``create`` factory that either returns an
immutable instance or raises ValidationError with a readable reason.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from .models import DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT, ValidationError


SLUG_PATTERN = re.compile(r"^[A-Za-z0-9~._-]+$", re.ASCII)

# Tried in order against a combined hint: "python 3.12", "openjdk~21", "vue v3"
VERSION_PATTERNS = (
    re.compile(r"\b(\d+(?:\.\d+)*)\b"),
    re.compile(r"~(\d+(?:\.\d+)*)"),
    re.compile(r"v(\d+(?:\.\d+)*)", re.IGNORECASE),
)


def _clean(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else ""


@dataclass(frozen=True)
class Slug:
    """Canonical DevDocs identifier, e.g. "openjdk~21"."""
    value: str

    @classmethod
    def create(cls, raw: Any) -> "Slug":
        value = _clean(raw)
        if not value:
            raise ValidationError("Slug must not be empty")
        if not SLUG_PATTERN.match(value):
            raise ValidationError(
                f"Slug '{value}' has invalid characters "
                "(allowed: letters, digits, '~', '.', '_', '-')"
            )
        return cls(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Query:
    """Free-text search term."""
    value: str

    @classmethod
    def create(cls, raw: Any) -> "Query":
        value = _clean(raw)
        if not value:
            raise ValidationError("Query must not be empty")
        return cls(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Limit:
    """Result count, always inside [min, max]."""
    value: int

    @classmethod
    def create(
        cls,
        raw: Any = None,
        min: int = MIN_LIMIT,
        max: int = MAX_LIMIT,
        fallback: int = DEFAULT_LIMIT,
    ) -> "Limit":
        """
        Coerce raw input to a bounded integer.

        Non-numeric or non-finite input becomes ``fallback``; anything else
        is truncated toward zero and clamped to ``[min, max]``.
        """
        number = _to_number(raw)
        value = math.trunc(number) if number is not None else fallback
        if value < min:
            return cls(min)
        if value > max:
            return cls(max)
        return cls(value)

    def to_number(self) -> int:
        return self.value

    def __int__(self) -> int:
        return self.value


def _to_number(raw: Any) -> Union[int, float, None]:
    # ints may exceed float range; trunc and the clamp handle them as-is
    if isinstance(raw, int):
        return int(raw)
    if isinstance(raw, float):
        number = float(raw)
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class Language:
    """User-supplied language name or alias; the fuzzy-search probe."""
    value: str

    @classmethod
    def create(cls, raw: Any) -> "Language":
        value = _clean(raw)
        if not value:
            raise ValidationError("Language value cannot be empty")
        return cls(value)

    def lower(self) -> str:
        return self.value.lower()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """User-supplied version hint."""
    value: str

    @classmethod
    def create(cls, raw: Any) -> "Version":
        value = _clean(raw)
        if not value:
            raise ValidationError("Version value cannot be empty")
        return cls(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LanguageVersionInput:
    """
    A language hint split into language and optional version.

    "Python 3.12" -> (python, 3.12), "openjdk~21" -> (openjdk, 21).
    An explicit version argument always wins over one found in the text.
    """
    language: Language
    version: Optional[Version] = None

    @classmethod
    def create(cls, language: Any, version: Any = None) -> "LanguageVersionInput":
        text = _clean(language).lower()

        if _clean(version):
            return cls(Language.create(text), Version.create(version))

        for pattern in VERSION_PATTERNS:
            match = pattern.search(text)
            if match:
                remainder = pattern.sub("", text, count=1).strip(" ~")
                # "21" alone is a language name, not a version
                if remainder:
                    return cls(Language.create(remainder), Version.create(match.group(1)))

        return cls(Language.create(text))
