"""
Query normalization and tokenization
"""
import re
from typing import Any, List, Optional

from .config import settings
from .domain.models import SearchQuery, SearchTab
from .exceptions import InvalidTabError

_WHITESPACE = re.compile(r"\s+")


def to_int(value: Any, fallback: int) -> int:
    """Parse a loose integer such as "20" or "20abc", else return fallback"""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return fallback
    match = re.match(r"\s*([+-]?\d+)", value)
    return int(match.group(1)) if match else fallback


def clamp(value: int, lower: int, upper: int) -> int:
    return min(max(value, lower), upper)


def normalize_query(raw_query: Optional[str]) -> str:
    """Trim, collapse whitespace runs and truncate to the max query length"""
    if not isinstance(raw_query, str):
        return ""
    collapsed = _WHITESPACE.sub(" ", raw_query.strip())
    return collapsed[: settings.SEARCH_MAX_QUERY_LENGTH].strip()


def normalize_tab(raw_tab: Optional[str]) -> SearchTab:
    """Resolve the tab name; a missing tab means overall

    Raises:
        InvalidTabError: If the tab is not one of the known tabs
    """
    if raw_tab is None:
        return SearchTab.OVERALL
    try:
        return SearchTab(str(raw_tab).strip().lower())
    except ValueError:
        raise InvalidTabError()


def tokenize_query(query: str) -> List[str]:
    """Distinct lower-cased words in order of first appearance, capped"""
    if not query:
        return []
    words = [word for word in query.lower().split() if word]
    return list(dict.fromkeys(words))[: settings.SEARCH_MAX_TOKENS]


def build_search_query(
    q: Optional[str] = None,
    tab: Optional[str] = None,
    limit: Any = None,
    offset: Any = None,
    section_limit: Any = None,
) -> SearchQuery:
    """Validate the tab and clamp paging parameters into a SearchQuery"""
    search_tab = normalize_tab(tab)
    normalized = normalize_query(q)

    return SearchQuery(
        raw_text=q,
        normalized_text=normalized,
        tokens=tokenize_query(normalized),
        tab=search_tab,
        limit=clamp(
            to_int(limit, settings.SEARCH_DEFAULT_LIMIT), 1, settings.SEARCH_MAX_LIMIT
        ),
        offset=clamp(to_int(offset, 0), 0, settings.SEARCH_MAX_OFFSET),
        section_limit=clamp(
            to_int(section_limit, settings.SEARCH_DEFAULT_SECTION_LIMIT),
            1,
            settings.SEARCH_MAX_SECTION_LIMIT,
        ),
    )
