"""
Orchestration of catalog resolution and slug search.

DevDocsManager is built once per process around a DevDocsClient and keeps
no per-request state. Value objects and collections are created fresh for
every call.
"""

import logging
from typing import Optional, Union

from .client import DevDocsClient
from .collection import DocumentLanguageCollection
from .matcher import (
    DEFAULT_ORDER_RULES,
    FuzzySearchStrategy,
    LanguageScorer,
    RapidFuzzSearchStrategy,
)
from .models import (
    RESOLVE_LIMIT,
    AppError,
    BadRequestError,
    DevDocsAPIError,
    DocumentLanguage,
    DocumentVersion,
    InternalError,
    LanguageResolution,
    NotFoundError,
    ScoredLanguage,
    SearchHits,
    ValidationError,
)
from .values import LanguageVersionInput, Limit, Query, Slug, Version


logger = logging.getLogger("devdocs.manager")


class DevDocsManager:
    """
    Resolves language hints to slugs and searches slug indexes.

    Resolution cascade:
    1. Weighted field scoring (LanguageScorer)
    2. Ordering rules as the tie-break between equal scores
    3. Fuzzy fallback when nothing scored
    """

    def __init__(
        self,
        client: Optional[DevDocsClient] = None,
        scorer: Optional[LanguageScorer] = None,
        fuzzy_strategy: Optional[FuzzySearchStrategy] = None,
        resolve_limit: int = RESOLVE_LIMIT,
    ):
        self.client = client or DevDocsClient()
        self._scorer = scorer or LanguageScorer()
        self._fuzzy = fuzzy_strategy or RapidFuzzSearchStrategy()
        self._resolve_limit = resolve_limit

    async def get_available_list(self) -> DocumentLanguageCollection:
        """
        Fetch the full catalog.

        Raises:
            NotFoundError: If DevDocs reports no languages
            DevDocsAPIError: If the catalog cannot be fetched
        """
        languages = await self.client.fetch_available_languages()
        if not languages:
            raise NotFoundError("No available languages found from DevDocs")
        return DocumentLanguageCollection.from_languages(languages)

    async def resolve_language(
        self,
        language: str,
        version: Optional[str] = None,
    ) -> LanguageResolution:
        """
        Resolve a language hint (name, alias, "Java 17", ...) to catalog entries.

        Args:
            language: Free-text language hint
            version: Optional explicit version; wins over one in the hint

        Returns:
            LanguageResolution with up to resolve_limit ranked candidates and
            the version chosen for the top one

        Raises:
            BadRequestError: If the hint is empty
            NotFoundError: If the catalog is empty or nothing matches
        """
        try:
            hint = LanguageVersionInput.create(language, version)
        except ValidationError as e:
            raise BadRequestError(f"Invalid language input: {e}") from e

        catalog = await self.get_available_list()
        requested = str(hint.version) if hint.version else None
        logger.info("resolve_language: input=%r version=%r", language, requested or "")

        ranked = self._scorer.rank(catalog.to_list(), hint.language)
        if ranked:
            # Rules first, then a stable sort by score keeps rule order within a score
            score_of = {id(item.language): item.score for item in ranked}
            ordered = DocumentLanguageCollection.from_languages(
                item.language for item in ranked
            ).order_by_rules(DEFAULT_ORDER_RULES)
            candidates = DocumentLanguageCollection(
                sorted(ordered, key=lambda lang: score_of[id(lang)], reverse=True)
            )
            ranked = [ScoredLanguage(lang, score_of[id(lang)]) for lang in candidates]
            tier = "score"
            logger.info(
                "resolve_language: candidates=[%s]",
                ",".join(f"{item.language.name}:{item.score}" for item in ranked[:self._resolve_limit]),
            )
        else:
            candidates = catalog.find_by_fuzzy_search(hint.language, self._fuzzy)
            tier = "fuzzy"
            logger.info("resolve_language: no scored match, fuzzy found %d", candidates.size())

        if candidates.is_empty():
            raise NotFoundError(
                f"No matching language found for input: \"{language}\"",
                target=language,
                available=catalog.names(),
            )

        candidates = candidates.take(self._resolve_limit)
        selected = candidates.first()
        chosen = choose_version(selected, hint.version)

        logger.info(
            "resolve_language: selected name=%s display=%s slug=%s version=%s",
            selected.name,
            selected.display_name,
            chosen.slug if chosen else selected.slug,
            chosen.version if chosen else "",
        )

        return LanguageResolution(
            input=language,
            candidates=candidates,
            language=selected,
            version=chosen,
            tier=tier,
            requested_version=requested,
            scores=ranked[:self._resolve_limit],
        )

    async def search_documentation_by_slug(
        self,
        slug: Union[Slug, str],
        query: Union[Query, str],
        limit: Union[Limit, int, str, None] = None,
    ) -> SearchHits:
        """
        Search one documentation set by its exact slug.

        Args:
            slug: DevDocs slug, raw or validated
            query: Search text, raw or validated
            limit: Maximum hits; raw values are clamped by Limit.create

        Returns:
            At most limit hits whose title or path contains query

        Raises:
            BadRequestError: If slug or query fail validation
            DevDocsAPIError: If the index cannot be fetched
            InternalError: For any other failure
        """
        try:
            slug = slug if isinstance(slug, Slug) else Slug.create(slug)
            query = query if isinstance(query, Query) else Query.create(query)
            limit = limit if isinstance(limit, Limit) else Limit.create(limit)
        except ValidationError as e:
            raise BadRequestError(f"validation error in search_documentation_by_slug: {e}") from e

        logger.info("Searching by slug %r for query %r", str(slug), str(query))
        try:
            hits = await self.client.fetch_index(slug)
        except (AppError, DevDocsAPIError):
            raise
        except Exception as e:
            raise InternalError(f"Error searching by slug: {e}") from e

        extracted = hits.extract(query, limit)
        logger.info("Found %d search results by slug (of %d entries)", len(extracted), len(hits))
        return extracted


def choose_version(
    language: DocumentLanguage,
    requested: Optional[Version] = None,
) -> Optional[DocumentVersion]:
    """
    Pick a version of one language.

    Exact version match first, then a version containing the request,
    then the default version.
    """
    if requested is not None:
        wanted = str(requested)
        for candidate in language.versions:
            if candidate.version == wanted:
                return candidate
        for candidate in language.versions:
            if wanted in candidate.version:
                return candidate
    return language.default_version
