"""
Domain models - Core search entities

Candidates are read-only projections of stored rows, built per request
and discarded once the response is assembled.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Union
from enum import Enum


class SearchTab(str, Enum):
    """Tabs accepted by the search endpoint"""
    OVERALL = "overall"
    USERS = "users"
    SOCIAL = "social"
    MARKETPLACE = "marketplace"
    QUILTS = "quilts"


class EntityKind(str, Enum):
    """Entity types that can be searched, one per non-overall tab"""
    USERS = "users"
    SOCIAL = "social"
    MARKETPLACE = "marketplace"
    QUILTS = "quilts"


class PostType(str, Enum):
    """Post type as stored in the posts table"""
    REGULAR = "regular"
    MARKET = "market"


@dataclass(frozen=True)
class FieldWeights:
    """Points awarded to one text field per kind of match"""
    exact: int
    prefix: int
    contains: int
    token_prefix: int
    token_contains: int


@dataclass
class UserRef:
    """Denormalized author/owner reference"""
    id: str
    username: str
    name: Optional[str] = None
    profile_picture: Optional[str] = None


@dataclass
class UserCandidate:
    """User row eligible for scoring"""
    id: str
    username: str
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_visible_to(self, viewer_id: Optional[str]) -> bool:
        """Users have no visibility gate"""
        return True


@dataclass
class PostCandidate:
    """Social or marketplace post eligible for scoring"""
    id: str
    type: PostType
    owner_id: str
    image_url: Optional[str] = None
    caption: Optional[str] = None
    price_cents: Optional[int] = None
    is_sold: bool = False
    is_public: bool = True
    created_at: Optional[datetime] = None
    author: Optional[UserRef] = None

    def is_visible_to(self, viewer_id: Optional[str]) -> bool:
        return self.is_public or (viewer_id is not None and self.owner_id == viewer_id)


@dataclass
class QuiltCandidate:
    """Quilt eligible for scoring, with its patch preview"""
    id: str
    name: str
    owner_id: str
    description: Optional[str] = None
    is_public: bool = False
    created_at: Optional[datetime] = None
    owner: Optional[UserRef] = None
    preview_images: List[str] = field(default_factory=list)
    patch_count: int = 0

    def is_visible_to(self, viewer_id: Optional[str]) -> bool:
        return self.is_public or (viewer_id is not None and self.owner_id == viewer_id)


Candidate = Union[UserCandidate, PostCandidate, QuiltCandidate]


@dataclass
class RankedItem:
    """Candidate with its relevance score"""
    candidate: Candidate
    score: int

    @property
    def created_at(self) -> Optional[datetime]:
        return self.candidate.created_at


@dataclass
class SearchQuery:
    """Normalized search request"""
    raw_text: Optional[str]
    normalized_text: str
    tokens: List[str]
    tab: SearchTab
    limit: int
    offset: int
    section_limit: int

    @property
    def match_text(self) -> str:
        """Lower-cased query used for field matching"""
        return self.normalized_text.lower()


@dataclass
class Pagination:
    """Tab-mode pagination block"""
    offset: int
    limit: int
    total: int
    has_more: bool
    next_offset: int
