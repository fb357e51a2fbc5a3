"""
Repository interfaces - Define contracts for data access
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from .models import UserCandidate, PostCandidate, QuiltCandidate, PostType


class ISearchRepository(ABC):
    """Read-only store consumed by the search engine

    Every method returns the full eligible candidate set; ranking and
    pagination happen in memory afterwards.
    """

    @abstractmethod
    async def find_users(self, query: str, tokens: List[str]) -> List[UserCandidate]:
        """Users whose username, name or bio contains the query or any token"""
        pass

    @abstractmethod
    async def find_posts(
        self, post_type: PostType, viewer_id: Optional[str]
    ) -> List[PostCandidate]:
        """Posts of one type that are public or owned by the viewer"""
        pass

    @abstractmethod
    async def find_quilts(
        self, viewer_id: Optional[str], preview_limit: int
    ) -> List[QuiltCandidate]:
        """Quilts that are public or owned by the viewer, with patch previews"""
        pass
