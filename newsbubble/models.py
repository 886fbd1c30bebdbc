from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint
from datetime import datetime

# Values for UserProfile.profile_source
PROFILE_SOURCE_AI = "ai_generated"
PROFILE_SOURCE_USER = "user_edited"


class Article(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    url: str = Field(index=True, unique=True)
    title: str
    description: Optional[str] = None
    source: str = ""
    image_url: Optional[str] = None
    published_at: Optional[datetime] = Field(default=None, index=True)
    category: Optional[str] = None  # ingestion hint only; recommendations tag per response
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ClickEvent(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    article_id: int = Field(foreign_key="article.id")
    clicked_at: datetime = Field(default_factory=datetime.utcnow, index=True)


class UserProfile(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    display_name: Optional[str] = None
    interests: Optional[str] = None
    custom_profile: Optional[str] = None
    # None on rows written before provenance was tracked
    profile_source: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class SectionPreference(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "section_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    section_name: str
    enabled: bool = True
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class SavedArticle(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    title: str
    url: str
    description: Optional[str] = None
    source: Optional[str] = None
    saved_at: datetime = Field(default_factory=datetime.utcnow)
