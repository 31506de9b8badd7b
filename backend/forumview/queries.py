from __future__ import annotations
import time
from typing import Any
from bs4 import BeautifulSoup
from sqlalchemy import select, func, desc, case
from sqlalchemy.orm import Session
import structlog
from .models import Article, Comment, Domain, Tag, Timeline, User
from .schemas import ArticleOut, ArticlePage, CommentOut, DomainOut, Pagination, TagOut, TimelineOut
from .pagination import page_count, paginate
from .utils import avatar_url
from .config import settings

logger = structlog.get_logger(__name__)

def _permalink(article_id: int) -> str:
    return f"/article/{article_id}"

class ArticleQueryService:
    def __init__(self, db: Session, now=time.time):
        self.db = db
        self._now = now

    def _stick_remains(self, article: Article) -> int:
        """Whole minutes left on the stick; negative once it has expired."""
        expires = article.stick_expires_at or 0
        if not expires:
            return 0
        return int((expires - self._now()) // 60)

    def _to_dict(self, article: Article, avatar_view_mode: int) -> dict[str, Any]:
        out = ArticleOut(
            id=article.id,
            title=article.title,
            tags=article.tags or "",
            permalink=_permalink(article.id),
            perfect=bool(article.perfect),
            stick_remains=self._stick_remains(article),
            comment_count=article.comment_count or 0,
            view_count=article.view_count or 0,
            created_at=article.created_at,
            author_name=article.author.name,
            author_thumbnail_url=avatar_url(article.author.avatar_url, avatar_view_mode, settings.AVATAR_SIZE),
        )
        return out.model_dump(by_alias=True, mode="json")

    def _list(self, stmt, avatar_view_mode: int) -> list[dict[str, Any]]:
        return [self._to_dict(a, avatar_view_mode) for a in self.db.scalars(stmt).unique().all()]

    def _page(self, stmt, avatar_view_mode: int, page: int, size: int) -> ArticlePage:
        total = self.db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
        count = page_count(total, size)
        page_nums = paginate(page, count, settings.ARTICLES_WINDOW_SIZE)
        if page > count:
            # Past the last page: nothing to fetch
            articles = []
        else:
            articles = self._list(stmt.offset((page - 1) * size).limit(size), avatar_view_mode)
        logger.debug("article page", page=page, size=size, total=total, page_count=count)
        return ArticlePage(
            articles=articles,
            pagination=Pagination(page_count=count, page_nums=page_nums),
        )

    def _hot_stmt(self):
        return select(Article).order_by(
            desc(Article.comment_count), desc(Article.view_count), desc(Article.created_at), desc(Article.id)
        )

    def get_index_hot_articles(self, avatar_view_mode: int) -> list[dict[str, Any]]:
        return self.get_hot_articles(avatar_view_mode, settings.INDEX_HOT_ARTICLES_CNT)

    def get_index_perfect_articles(self, avatar_view_mode: int) -> list[dict[str, Any]]:
        stmt = (
            select(Article)
            .where(Article.perfect.is_(True))
            .order_by(desc(Article.created_at), desc(Article.id))
            .limit(settings.INDEX_PERFECT_ARTICLES_CNT)
        )
        return self._list(stmt, avatar_view_mode)

    def get_hot_articles(self, avatar_view_mode: int, fetch_size: int) -> list[dict[str, Any]]:
        return self._list(self._hot_stmt().limit(fetch_size), avatar_view_mode)

    def get_recent_articles(self, avatar_view_mode: int, page: int, size: int) -> ArticlePage:
        now = int(self._now())
        stuck_first = case((Article.stick_expires_at > now, 1), else_=0)
        stmt = select(Article).order_by(desc(stuck_first), desc(Article.created_at), desc(Article.id))
        return self._page(stmt, avatar_view_mode, page, size)

    def get_perfect_articles(self, avatar_view_mode: int, page: int, size: int) -> ArticlePage:
        stmt = (
            select(Article)
            .where(Article.perfect.is_(True))
            .order_by(desc(Article.created_at), desc(Article.id))
        )
        return self._page(stmt, avatar_view_mode, page, size)

    def get_random_articles(self, avatar_view_mode: int, fetch_size: int) -> list[dict[str, Any]]:
        return self._list(select(Article).order_by(func.random()).limit(fetch_size), avatar_view_mode)

    def get_side_hot_articles(self, avatar_view_mode: int, fetch_size: int) -> list[dict[str, Any]]:
        return self.get_hot_articles(avatar_view_mode, fetch_size)

class UserQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_name(self, name: str) -> User | None:
        return self.db.scalar(select(User).where(User.name == name))

    def get_current_user(self, request) -> User | None:
        """The user named by the authenticating proxy header, if any."""
        name = (request.headers.get(settings.AUTH_USER_HEADER) or "").strip()
        if not name:
            return None
        return self.get_user_by_name(name)

class TagQueryService:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_dict(tag: Tag) -> dict[str, Any]:
        return TagOut(
            title=tag.title, icon_path=tag.icon_path, reference_count=tag.reference_count or 0
        ).model_dump(by_alias=True)

    def get_side_tags(self, fetch_size: int) -> list[dict[str, Any]]:
        stmt = select(Tag).order_by(desc(Tag.reference_count), Tag.title).limit(fetch_size)
        return [self._to_dict(t) for t in self.db.scalars(stmt).all()]

    def get_index_tags(self, fetch_size: int) -> list[dict[str, Any]]:
        stmt = (
            select(Tag)
            .where(Tag.icon_path.is_not(None), Tag.icon_path != "")
            .order_by(desc(Tag.reference_count), Tag.title)
            .limit(fetch_size)
        )
        return [self._to_dict(t) for t in self.db.scalars(stmt).all()]

def abbreviate(html: str, max_len: int) -> str:
    """Plain text of ``html``, cut to ``max_len`` characters plus an ellipsis."""
    text = BeautifulSoup(html or "", "lxml").get_text(" ", strip=True)
    if len(text) > max_len:
        return text[:max_len] + "..."
    return text

class CommentQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_latest_comments(self, fetch_size: int) -> list[dict[str, Any]]:
        stmt = select(Comment).order_by(desc(Comment.created_at), desc(Comment.id)).limit(fetch_size)
        out = []
        for c in self.db.scalars(stmt).unique().all():
            out.append(
                CommentOut(
                    id=c.id,
                    content=abbreviate(c.content, settings.SIDE_CMT_CONTENT_MAX_LEN),
                    author_name=c.author.name,
                    author_thumbnail_url=avatar_url(c.author.avatar_url, settings.DEFAULT_AVATAR_VIEW_MODE, settings.AVATAR_SIZE),
                    article_title=c.article.title,
                    article_permalink=_permalink(c.article_id),
                    created_at=c.created_at,
                ).model_dump(by_alias=True, mode="json")
            )
        return out

class DomainQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_nav_domains(self) -> list[dict[str, Any]]:
        stmt = select(Domain).where(Domain.nav.is_(True)).order_by(Domain.sort, Domain.id)
        return [DomainOut(title=d.title, uri=d.uri).model_dump(by_alias=True) for d in self.db.scalars(stmt).all()]

class TimelineQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_timelines(self) -> list[dict[str, Any]]:
        stmt = select(Timeline).order_by(desc(Timeline.created_at), desc(Timeline.id)).limit(settings.TIMELINE_CNT)
        return [
            TimelineOut(id=t.id, content=t.content, created_at=t.created_at).model_dump(by_alias=True, mode="json")
            for t in self.db.scalars(stmt).all()
        ]
