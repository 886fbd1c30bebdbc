from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime


class ArticleOut(BaseModel):
    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    url: str
    source: str = ""
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    category: str


class RecommendationOut(BaseModel):
    articles: List[ArticleOut]
    userProfile: Optional[str] = None
    fallback: bool = False
    notice: Optional[str] = None


class ProfileIn(BaseModel):
    custom_profile: Optional[str] = Field(default=None, max_length=4000)
    display_name: Optional[str] = None
    interests: Optional[str] = None


class ProfileOut(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    interests: Optional[str] = None
    custom_profile: Optional[str] = None
    profile_source: Optional[str] = None
    mode: str  # user_customized | ai_default


class SectionsIn(BaseModel):
    sections: Dict[str, bool]  # section name -> enabled


class SectionsOut(BaseModel):
    sections: Dict[str, bool]
    enabled: List[str]


class ClickIn(BaseModel):
    article_id: int


class ClickOut(BaseModel):
    id: int
    article_id: int
    clicked_at: datetime
    title: str
    description: str = ""
    source: str = ""
    url: str
    category: Optional[str] = None


class SavedIn(BaseModel):
    title: str
    url: str
    description: Optional[str] = None
    source: Optional[str] = None


class SavedOut(BaseModel):
    id: int
    title: str
    url: str
    description: Optional[str] = None
    source: Optional[str] = None
    saved_at: datetime
