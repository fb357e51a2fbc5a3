"""
Search Service business logic
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
import logging

from .config import settings
from .domain.models import (
    Candidate,
    EntityKind,
    PostCandidate,
    PostType,
    QuiltCandidate,
    RankedItem,
    SearchQuery,
    SearchTab,
    UserCandidate,
    UserRef,
)
from .domain.repositories import ISearchRepository
from .exceptions import SearchError, SearchFailedError
from .ranking import build_pagination, paginate, rank
from .schemas import (
    OverallSearchResponse,
    OverallSections,
    PaginationOut,
    PostResult,
    PostsSection,
    QuiltResult,
    QuiltsSection,
    TabSearchResponse,
    UserRefOut,
    UserResult,
    UsersSection,
)
from .scoring import SCORERS

logger = logging.getLogger(__name__)

SearchResponse = Union[TabSearchResponse, OverallSearchResponse]


# Response assembly
def map_user_ref(ref: Optional[UserRef]) -> Optional[UserRefOut]:
    if ref is None:
        return None
    return UserRefOut(
        id=ref.id,
        username=ref.username,
        name=ref.name,
        profile_picture=ref.profile_picture,
    )


def map_user(user: UserCandidate) -> UserResult:
    return UserResult(
        id=user.id,
        username=user.username,
        name=user.name,
        bio=user.bio or "",
        profile_picture=user.profile_picture or None,
    )


def map_post(post: PostCandidate) -> PostResult:
    return PostResult(
        id=post.id,
        type=post.type.value,
        caption=post.caption or "",
        image_url=post.image_url,
        price_cents=post.price_cents,
        is_sold=bool(post.is_sold),
        created_at=post.created_at,
        author=map_user_ref(post.author),
    )


def map_quilt(quilt: QuiltCandidate) -> QuiltResult:
    preview_images = [url for url in quilt.preview_images if url]
    return QuiltResult(
        id=quilt.id,
        name=quilt.name,
        description=quilt.description or "",
        created_at=quilt.created_at,
        patch_count=quilt.patch_count,
        preview_images=preview_images[: settings.SEARCH_PREVIEW_IMAGES],
        owner=map_user_ref(quilt.owner),
    )


MAPPERS: Dict[EntityKind, Callable[[Any], Any]] = {
    EntityKind.USERS: map_user,
    EntityKind.SOCIAL: map_post,
    EntityKind.MARKETPLACE: map_post,
    EntityKind.QUILTS: map_quilt,
}

SECTION_MODELS = {
    EntityKind.USERS: UsersSection,
    EntityKind.SOCIAL: PostsSection,
    EntityKind.MARKETPLACE: PostsSection,
    EntityKind.QUILTS: QuiltsSection,
}


def empty_tab_response(query: SearchQuery) -> TabSearchResponse:
    pagination = build_pagination(0, query.offset, query.limit)
    return TabSearchResponse(
        query=query.normalized_text,
        tab=query.tab.value,
        items=[],
        pagination=PaginationOut(**vars(pagination)),
    )


def empty_overall_response(query: SearchQuery) -> OverallSearchResponse:
    return OverallSearchResponse(
        query=query.normalized_text,
        tab=SearchTab.OVERALL.value,
        sections=OverallSections(),
    )


async def gather_or_cancel(*aws: Awaitable) -> List[Any]:
    """Await concurrently; on the first failure cancel the rest and re-raise"""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        raise


class SearchService:
    """Business logic for multi-entity search"""

    def __init__(self, repository: ISearchRepository):
        self.repository = repository

    async def search(self, query: SearchQuery, viewer_id: Optional[str]) -> SearchResponse:
        """
        Run a search for one tab or the overall view

        Args:
            query: Normalized query from build_search_query
            viewer_id: Authenticated viewer, used for visibility filtering

        Returns:
            TabSearchResponse for entity tabs, OverallSearchResponse for overall

        Raises:
            SearchFailedError: If fetching, scoring or assembly fails
        """
        if len(query.normalized_text) < settings.SEARCH_MIN_QUERY_LENGTH:
            if query.tab == SearchTab.OVERALL:
                return empty_overall_response(query)
            return empty_tab_response(query)

        logger.debug(
            f"Searching tab={query.tab.value} query_length={len(query.normalized_text)} "
            f"tokens={len(query.tokens)}"
        )

        try:
            if query.tab == SearchTab.OVERALL:
                return await self._search_overall(query, viewer_id)
            return await self._search_tab(query, viewer_id)
        except SearchError:
            raise
        except Exception as e:
            logger.exception("Search failed")
            raise SearchFailedError() from e

    async def _search_tab(self, query: SearchQuery, viewer_id: Optional[str]) -> TabSearchResponse:
        kind = EntityKind(query.tab.value)
        ranked = await self.rank_kind(kind, query, viewer_id)
        page = paginate(ranked, query.offset, query.limit)
        pagination = build_pagination(len(ranked), query.offset, query.limit)

        return TabSearchResponse(
            query=query.normalized_text,
            tab=query.tab.value,
            items=[MAPPERS[kind](item.candidate) for item in page],
            pagination=PaginationOut(**vars(pagination)),
        )

    async def _search_overall(
        self, query: SearchQuery, viewer_id: Optional[str]
    ) -> OverallSearchResponse:
        kinds = list(EntityKind)
        results = await gather_or_cancel(
            *(self.rank_kind(kind, query, viewer_id) for kind in kinds)
        )

        sections = {
            kind.value: self._build_section(kind, ranked, query.section_limit)
            for kind, ranked in zip(kinds, results)
        }
        return OverallSearchResponse(
            query=query.normalized_text,
            tab=SearchTab.OVERALL.value,
            sections=OverallSections(**sections),
        )

    def _build_section(self, kind: EntityKind, ranked: List[RankedItem], limit: int):
        # Sections always start at offset 0
        page = paginate(ranked, 0, limit)
        return SECTION_MODELS[kind](
            items=[MAPPERS[kind](item.candidate) for item in page],
            total=len(ranked),
            has_more=limit < len(ranked),
        )

    async def fetch_candidates(
        self, kind: EntityKind, query: SearchQuery, viewer_id: Optional[str]
    ) -> List[Candidate]:
        """Load the full visibility-filtered candidate set for one entity kind"""
        if kind == EntityKind.USERS:
            candidates = await self.repository.find_users(query.match_text, query.tokens)
        elif kind == EntityKind.SOCIAL:
            candidates = await self.repository.find_posts(PostType.REGULAR, viewer_id)
        elif kind == EntityKind.MARKETPLACE:
            candidates = await self.repository.find_posts(PostType.MARKET, viewer_id)
        else:
            candidates = await self.repository.find_quilts(
                viewer_id, settings.SEARCH_PREVIEW_IMAGES
            )

        visible = [c for c in candidates if c.is_visible_to(viewer_id)]
        logger.debug(f"Fetched {len(visible)} {kind.value} candidates")
        return visible

    async def rank_kind(
        self, kind: EntityKind, query: SearchQuery, viewer_id: Optional[str]
    ) -> List[RankedItem]:
        """Fetch, score and rank the candidates of one entity kind"""
        candidates = await self.fetch_candidates(kind, query, viewer_id)
        scorer = SCORERS[kind]
        text, tokens = query.match_text, query.tokens
        return rank(candidates, lambda candidate: scorer(candidate, text, tokens))
