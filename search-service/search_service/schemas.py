"""
Pydantic schemas for request/response validation

Response fields are serialized in camelCase to match the web client.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union
from datetime import datetime


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Response Schemas
class MessageResponse(BaseModel):
    """Generic message response"""

    message: str


class UserRefOut(CamelModel):
    """Author or owner attached to a result"""

    id: str
    username: str
    name: Optional[str] = None
    profile_picture: Optional[str] = None


class UserResult(CamelModel):
    """User search result"""

    id: str
    username: str
    name: Optional[str] = None
    bio: str = ""
    profile_picture: Optional[str] = None


class PostResult(CamelModel):
    """Social or marketplace post search result"""

    id: str
    type: str
    caption: str = ""
    image_url: Optional[str] = None
    price_cents: Optional[int] = None
    is_sold: bool = False
    created_at: Optional[datetime] = None
    author: Optional[UserRefOut] = None


class QuiltResult(CamelModel):
    """Quilt search result"""

    id: str
    name: str
    description: str = ""
    created_at: Optional[datetime] = None
    patch_count: int = 0
    preview_images: List[str] = Field(default_factory=list)
    owner: Optional[UserRefOut] = None


class PaginationOut(CamelModel):
    """Tab-mode pagination block"""

    offset: int
    limit: int
    total: int
    has_more: bool
    next_offset: int


class UsersSection(CamelModel):
    """Users section of the overall view"""

    items: List[UserResult] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False


class PostsSection(CamelModel):
    """Social or marketplace section of the overall view"""

    items: List[PostResult] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False


class QuiltsSection(CamelModel):
    """Quilts section of the overall view"""

    items: List[QuiltResult] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False


class OverallSections(CamelModel):
    """The four sections of the overall view"""

    users: UsersSection = Field(default_factory=UsersSection)
    social: PostsSection = Field(default_factory=PostsSection)
    marketplace: PostsSection = Field(default_factory=PostsSection)
    quilts: QuiltsSection = Field(default_factory=QuiltsSection)


class TabSearchResponse(CamelModel):
    """Single-tab paginated search response"""

    query: str
    tab: str
    items: List[Union[UserResult, PostResult, QuiltResult]]
    pagination: PaginationOut


class OverallSearchResponse(CamelModel):
    """Four-section overview search response"""

    query: str
    tab: str = "overall"
    sections: OverallSections = Field(default_factory=OverallSections)


# Internal Models
class User(BaseModel):
    """User model from Auth Service"""

    id: str
    username: str
    is_active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)
