"""
Ranking and pagination of scored candidates
"""
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from .domain.models import Candidate, Pagination, RankedItem


def _timestamp(value: Optional[datetime]) -> float:
    return value.timestamp() if value is not None else 0.0


def rank_key(item: RankedItem) -> Tuple[int, float, str]:
    """Score desc, then newest first, then id as the final tiebreak"""
    return (-item.score, -_timestamp(item.created_at), str(item.candidate.id))


def rank(
    candidates: Iterable[Candidate],
    scorer: Callable[[Candidate], int],
) -> List[RankedItem]:
    """Score candidates, drop non-matches and sort deterministically"""
    scored = (RankedItem(candidate=candidate, score=scorer(candidate)) for candidate in candidates)
    return sorted((item for item in scored if item.score > 0), key=rank_key)


def paginate(items: List[RankedItem], offset: int, limit: int) -> List[RankedItem]:
    safe_offset = max(offset, 0)
    return items[safe_offset : safe_offset + limit]


def build_pagination(total: int, offset: int, limit: int) -> Pagination:
    safe_offset = max(offset, 0)
    next_offset = safe_offset + limit
    return Pagination(
        offset=safe_offset,
        limit=limit,
        total=total,
        has_more=next_offset < total,
        next_offset=next_offset,
    )
