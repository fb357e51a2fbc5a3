"""Shared fixtures for search service tests."""

from datetime import datetime, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from search_service.database import get_search_repository
from search_service.dependencies import get_current_user
from search_service.domain.models import (
    PostCandidate,
    PostType,
    QuiltCandidate,
    UserCandidate,
    UserRef,
)
from search_service.domain.repositories import ISearchRepository
from search_service.main import app
from search_service.schemas import User

VIEWER_ID = "viewer-1"
OTHER_ID = "other-1"


def ts(year: int, month: int = 1, day: int = 1) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def make_user(id, username, name=None, bio=None, created_at=None) -> UserCandidate:
    return UserCandidate(
        id=id,
        username=username,
        name=name,
        bio=bio,
        created_at=created_at or ts(2024),
    )


def make_post(
    id,
    caption,
    post_type=PostType.REGULAR,
    owner_id=OTHER_ID,
    is_public=True,
    created_at=None,
    author=None,
) -> PostCandidate:
    return PostCandidate(
        id=id,
        type=post_type,
        owner_id=owner_id,
        caption=caption,
        image_url=f"https://img.example/{id}.jpg",
        price_cents=1500 if post_type == PostType.MARKET else None,
        is_public=is_public,
        created_at=created_at or ts(2024),
        author=author or UserRef(id=owner_id, username="quiet_owner", name="Q"),
    )


def make_quilt(
    id,
    name,
    description=None,
    owner_id=OTHER_ID,
    is_public=True,
    created_at=None,
    preview_images=None,
    patch_count=0,
) -> QuiltCandidate:
    return QuiltCandidate(
        id=id,
        name=name,
        owner_id=owner_id,
        description=description,
        is_public=is_public,
        created_at=created_at or ts(2024),
        owner=UserRef(id=owner_id, username="quiet_owner", name="Q"),
        preview_images=preview_images or [],
        patch_count=patch_count,
    )


class FakeSearchRepository(ISearchRepository):
    """In-memory store that records every call it receives."""

    def __init__(self, users=None, posts=None, quilts=None, fail_on=None):
        self.users: List[UserCandidate] = users or []
        self.posts: List[PostCandidate] = posts or []
        self.quilts: List[QuiltCandidate] = quilts or []
        self.fail_on = fail_on
        self.calls: List[str] = []

    def _record(self, name: str):
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"store failure in {name}")

    async def find_users(self, query: str, tokens: List[str]) -> List[UserCandidate]:
        self._record("users")
        terms = [query, *tokens]
        return [
            user
            for user in self.users
            if any(
                term in (value or "").lower()
                for value in (user.username, user.name, user.bio)
                for term in terms
            )
        ]

    async def find_posts(
        self, post_type: PostType, viewer_id: Optional[str]
    ) -> List[PostCandidate]:
        # Visibility is left to the engine so tests can check it is enforced
        self._record(post_type.value)
        return [post for post in self.posts if post.type == post_type]

    async def find_quilts(
        self, viewer_id: Optional[str], preview_limit: int
    ) -> List[QuiltCandidate]:
        self._record("quilts")
        return list(self.quilts)


@pytest.fixture
def repository():
    return FakeSearchRepository()


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_current_user] = lambda: User(
        id=VIEWER_ID, username="viewer"
    )
    app.dependency_overrides[get_search_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()
