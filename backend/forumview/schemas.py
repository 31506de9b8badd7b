from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any

class PageRequest(BaseModel):
    page_number: int = Field(1, ge=1)
    page_size: int = Field(..., ge=1)

    class Config:
        frozen = True

class ArticleOut(BaseModel):
    id: int = Field(alias="oId")
    title: str = Field(alias="articleTitle")
    tags: str = Field("", alias="articleTags")
    permalink: str = Field(alias="articlePermalink")
    perfect: bool = Field(False, alias="articlePerfect")
    stick_remains: int = Field(0, alias="articleStickRemains")
    comment_count: int = Field(0, alias="articleCommentCount")
    view_count: int = Field(0, alias="articleViewCount")
    created_at: datetime | None = Field(None, alias="articleCreateTime")
    author_name: str = Field(alias="articleAuthorName")
    author_thumbnail_url: str | None = Field(None, alias="articleAuthorThumbnailURL")

    class Config:
        populate_by_name = True

class Pagination(BaseModel):
    page_count: int = Field(0, ge=0, alias="paginationPageCount")
    page_nums: list[int] = Field(default_factory=list, alias="paginationPageNums")

    class Config:
        populate_by_name = True

class ArticlePage(BaseModel):
    articles: list[dict[str, Any]]
    pagination: Pagination

class TagOut(BaseModel):
    title: str = Field(alias="tagTitle")
    icon_path: str | None = Field(None, alias="tagIconPath")
    reference_count: int = Field(0, alias="tagReferenceCount")

    class Config:
        from_attributes = True
        populate_by_name = True

class CommentOut(BaseModel):
    id: int = Field(alias="oId")
    content: str = Field(alias="commentContent")
    author_name: str = Field(alias="commentAuthorName")
    author_thumbnail_url: str | None = Field(None, alias="commentAuthorThumbnailURL")
    article_title: str = Field(alias="commentArticleTitle")
    article_permalink: str = Field(alias="commentArticlePermalink")
    created_at: datetime | None = Field(None, alias="commentCreateTime")

    class Config:
        populate_by_name = True

class DomainOut(BaseModel):
    title: str = Field(alias="domainTitle")
    uri: str = Field(alias="domainURI")

    class Config:
        from_attributes = True
        populate_by_name = True

class TimelineOut(BaseModel):
    id: int = Field(alias="oId")
    content: str
    created_at: datetime | None = Field(None, alias="createTime")

    class Config:
        from_attributes = True
        populate_by_name = True

class UserOut(BaseModel):
    name: str = Field(alias="userName")
    avatar_url: str | None = Field(None, alias="userAvatarURL")
    list_page_size: int = Field(0, alias="userListPageSize")
    avatar_view_mode: int = Field(0, alias="userAvatarViewMode")

    class Config:
        from_attributes = True
        populate_by_name = True
