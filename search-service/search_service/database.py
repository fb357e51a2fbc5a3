"""
Database connection and search queries
"""
import asyncpg
from typing import Optional, List, Dict, Any
import logging

from .config import settings
from .domain.models import (
    UserRef,
    UserCandidate,
    PostCandidate,
    QuiltCandidate,
    PostType,
)
from .domain.repositories import ISearchRepository

logger = logging.getLogger(__name__)


class Database:
    """PostgreSQL database connection manager using asyncpg"""

    def __init__(self):
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Create database connection pool"""
        try:
            self.pool = await asyncpg.create_pool(
                settings.DATABASE_URL,
                min_size=1,
                max_size=settings.DB_POOL_SIZE,
                command_timeout=settings.DB_COMMAND_TIMEOUT,
            )
            logger.info("Database connection pool created successfully")
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def disconnect(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            logger.info("Database connection pool closed")

    async def fetch_all(self, query: str, *args) -> List[Dict[str, Any]]:
        """Fetch all rows"""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]


# Global database instance
db = Database()


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only matches literally"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _user_ref(row: Dict[str, Any], prefix: str) -> Optional[UserRef]:
    if row.get(f"{prefix}_id") is None:
        return None
    return UserRef(
        id=row[f"{prefix}_id"],
        username=row[f"{prefix}_username"],
        name=row[f"{prefix}_name"],
        profile_picture=row[f"{prefix}_profile_picture"],
    )


class SearchRepository(ISearchRepository):
    """Search candidate queries against PostgreSQL"""

    def __init__(self, db: Database):
        self.db = db

    async def find_users(self, query: str, tokens: List[str]) -> List[UserCandidate]:
        patterns = [f"%{escape_like(term)}%" for term in dict.fromkeys([query, *tokens])]
        rows = await self.db.fetch_all(
            """
            SELECT id::text AS id, username, name, bio, profile_picture, created_at
            FROM users
            WHERE username ILIKE ANY($1::text[])
               OR name ILIKE ANY($1::text[])
               OR bio ILIKE ANY($1::text[])
            """,
            patterns,
        )
        return [UserCandidate(**row) for row in rows]

    async def find_posts(
        self, post_type: PostType, viewer_id: Optional[str]
    ) -> List[PostCandidate]:
        rows = await self.db.fetch_all(
            """
            SELECT p.id::text AS id, p.type::text AS type, p.user_id::text AS owner_id,
                   p.caption, p.image_url, p.price_cents, p.is_sold, p.is_public,
                   p.created_at,
                   u.id::text AS author_id, u.username AS author_username,
                   u.name AS author_name, u.profile_picture AS author_profile_picture
            FROM posts p
            LEFT JOIN users u ON u.id = p.user_id
            WHERE p.type = $1
              AND (p.is_public = true OR p.user_id::text = $2)
            ORDER BY p.created_at DESC
            """,
            post_type.value,
            viewer_id,
        )
        return [
            PostCandidate(
                id=row["id"],
                type=PostType(row["type"]),
                owner_id=row["owner_id"],
                caption=row["caption"],
                image_url=row["image_url"],
                price_cents=row["price_cents"],
                is_sold=row["is_sold"],
                is_public=row["is_public"],
                created_at=row["created_at"],
                author=_user_ref(row, "author"),
            )
            for row in rows
        ]

    async def find_quilts(
        self, viewer_id: Optional[str], preview_limit: int
    ) -> List[QuiltCandidate]:
        rows = await self.db.fetch_all(
            """
            SELECT q.id::text AS id, q.name, q.description, q.user_id::text AS owner_id,
                   q.is_public, q.created_at,
                   u.id::text AS owner_ref_id, u.username AS owner_ref_username,
                   u.name AS owner_ref_name, u.profile_picture AS owner_ref_profile_picture,
                   (SELECT COUNT(*) FROM patches pa WHERE pa.quilt_id = q.id) AS patch_count,
                   ARRAY(
                       SELECT po.image_url
                       FROM patches pa
                       JOIN posts po ON po.id = pa.post_id
                       WHERE pa.quilt_id = q.id AND po.image_url IS NOT NULL
                       ORDER BY pa.created_at ASC
                       LIMIT $2
                   ) AS preview_images
            FROM quilts q
            LEFT JOIN users u ON u.id = q.user_id
            WHERE q.is_public = true OR q.user_id::text = $1
            ORDER BY q.created_at DESC
            """,
            viewer_id,
            preview_limit,
        )
        return [
            QuiltCandidate(
                id=row["id"],
                name=row["name"],
                owner_id=row["owner_id"],
                description=row["description"],
                is_public=row["is_public"],
                created_at=row["created_at"],
                owner=_user_ref(row, "owner_ref"),
                preview_images=list(row["preview_images"] or []),
                patch_count=row["patch_count"] or 0,
            )
            for row in rows
        ]


async def get_search_repository() -> ISearchRepository:
    """Dependency for getting the search repository"""
    return SearchRepository(db)
