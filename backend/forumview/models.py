from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from .db import Base

AVATAR_VIEW_MODE_ORIGINAL = 0
AVATAR_VIEW_MODE_STATIC = 1

def _now():
    return datetime.now(timezone.utc)

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String(64), unique=True, nullable=False, index=True)
    avatar_url = Column(String(1024), nullable=True)
    list_page_size = Column(Integer, default=0)
    avatar_view_mode = Column(Integer, default=AVATAR_VIEW_MODE_ORIGINAL)

class Article(Base):
    __tablename__ = "articles"
    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    tags = Column(String(255), nullable=False, default="")
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    perfect = Column(Boolean, default=False, index=True)
    # epoch seconds, 0 when the article was never stuck
    stick_expires_at = Column(Integer, default=0, nullable=False)
    comment_count = Column(Integer, default=0)
    view_count = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=_now)

    author = relationship("User", lazy="joined")

    __table_args__ = (
        Index('ix_articles_created_desc', 'created_at'),
        Index('ix_articles_hot', 'comment_count', 'view_count'),
    )

class Tag(Base):
    __tablename__ = "tags"
    id = Column(Integer, primary_key=True)
    title = Column(String(64), unique=True, nullable=False)
    icon_path = Column(String(255), nullable=True)
    reference_count = Column(Integer, default=0, index=True)

class Comment(Base):
    __tablename__ = "comments"
    id = Column(Integer, primary_key=True)
    content = Column(Text, nullable=False)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, index=True)

    article = relationship("Article", lazy="joined")
    author = relationship("User", lazy="joined")

class Domain(Base):
    __tablename__ = "domains"
    id = Column(Integer, primary_key=True)
    title = Column(String(64), nullable=False)
    uri = Column(String(64), unique=True, nullable=False)
    sort = Column(Integer, default=10)
    nav = Column(Boolean, default=True)

class Timeline(Base):
    __tablename__ = "timelines"
    id = Column(Integer, primary_key=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, index=True)
