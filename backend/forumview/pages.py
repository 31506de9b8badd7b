"""Listing-page view models.

A request is first resolved into a :class:`PageRequest`, then
:class:`ViewAssembler` pulls every collection the page kind needs from its
collaborators and merges them into one mapping for the renderer. Nothing is
returned until every collaborator call has succeeded; a failing call
propagates and the half-built mapping is dropped.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence

from .schemas import ArticlePage, PageRequest, Pagination
from .stopwatch import measure, timed

DIGITS_RE = re.compile(r"[0-9]+")

class PageKind(str, Enum):
    INDEX = "index"
    RECENT = "recent"
    HOT = "hot"
    PERFECT = "perfect"
    ABOUT = "about"
    B3LOG = "b3log"
    KILL_BROWSER = "kill-browser"

class ArticleSource(Protocol):
    def get_index_hot_articles(self, avatar_view_mode: int) -> list[dict[str, Any]]: ...
    def get_index_perfect_articles(self, avatar_view_mode: int) -> list[dict[str, Any]]: ...
    def get_hot_articles(self, avatar_view_mode: int, fetch_size: int) -> list[dict[str, Any]]: ...
    def get_recent_articles(self, avatar_view_mode: int, page: int, size: int) -> ArticlePage: ...
    def get_perfect_articles(self, avatar_view_mode: int, page: int, size: int) -> ArticlePage: ...

class TimelineSource(Protocol):
    def get_timelines(self) -> list[dict[str, Any]]: ...

class LangSource(Protocol):
    def get_all(self, locale: str) -> dict[str, str]: ...

class PageFiller(Protocol):
    def fill_header_and_footer(self, model: dict[str, Any], is_mobile: bool, user=None) -> None: ...
    def fill_domain_nav(self, model: dict[str, Any]) -> None: ...
    def fill_index_tags(self, model: dict[str, Any]) -> None: ...
    def fill_random_articles(self, avatar_view_mode: int, model: dict[str, Any]) -> None: ...
    def fill_side_hot_articles(self, avatar_view_mode: int, model: dict[str, Any]) -> None: ...
    def fill_side_tags(self, model: dict[str, Any]) -> None: ...
    def fill_latest_cmts(self, model: dict[str, Any]) -> None: ...
    def fill_minified(self, model: dict[str, Any]) -> None: ...
    def fill_runtime(self, model: dict[str, Any]) -> None: ...

@dataclass
class DataSources:
    articles: ArticleSource
    timelines: TimelineSource
    filler: PageFiller
    langs: LangSource

@dataclass(frozen=True)
class PageContext:
    kind: PageKind
    page_request: PageRequest
    avatar_view_mode: int = 0
    is_mobile: bool = False
    current_user: Any = None
    locale: str = "en_US"

def resolve_page_request(raw_page: str | None, current_user, default_page_size: int) -> PageRequest:
    """Page number from the raw ``p`` parameter, page size from the user's preference.

    Anything but a run of ASCII digits means page 1. A positive
    ``list_page_size`` on the user wins over ``default_page_size`` and is
    used as given.
    """
    page_number = 1
    if raw_page and DIGITS_RE.fullmatch(raw_page):
        try:
            page_number = max(int(raw_page), 1)
        except ValueError:
            # past the interpreter's int conversion limit
            page_number = 1

    page_size = default_page_size
    preferred = getattr(current_user, "list_page_size", None) if current_user is not None else None
    if isinstance(preferred, int) and preferred > 0:
        page_size = preferred

    return PageRequest(page_number=page_number, page_size=page_size)

def window_bounds(page_nums: Sequence[int]) -> dict[str, int]:
    # Keys are left out for an empty window; 0 would render as a real page
    if not page_nums:
        return {}
    return {
        "paginationFirstPageNum": page_nums[0],
        "paginationLastPageNum": page_nums[-1],
    }

def normalize_article(article: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``article`` with the stick flag and the brief tag added."""
    out = dict(article)
    try:
        remains = int(article.get("articleStickRemains") or 0)
    except (TypeError, ValueError):
        remains = 0
    out["articleIsStick"] = remains > 0

    tags = article.get("articleTags") or ""
    # trailing empty fields do not count as tags
    titles = tags.rstrip(",").split(",")
    out["articleTagsBrief"] = titles[0] if len(titles) > 1 else tags
    return out

class ViewAssembler:
    def __init__(self, sources: DataSources):
        self.sources = sources
        self._assemblers = {
            PageKind.INDEX: self._index,
            PageKind.RECENT: self._recent,
            PageKind.HOT: self._hot,
            PageKind.PERFECT: self._perfect,
            PageKind.ABOUT: self._side_only,
            PageKind.B3LOG: self._side_only,
            PageKind.KILL_BROWSER: self._kill_browser,
        }

    @timed("assemble")
    def assemble(self, ctx: PageContext) -> dict[str, Any]:
        model: dict[str, Any] = {}
        self._assemblers[ctx.kind](ctx, model)
        return model

    def _fill_side(self, ctx: PageContext, model: dict[str, Any], skip_random_on_mobile: bool = True) -> None:
        filler = self.sources.filler
        if not (skip_random_on_mobile and ctx.is_mobile):
            filler.fill_random_articles(ctx.avatar_view_mode, model)
        filler.fill_side_hot_articles(ctx.avatar_view_mode, model)
        filler.fill_side_tags(model)
        filler.fill_latest_cmts(model)

    @staticmethod
    def _fill_pagination(model: dict[str, Any], req: PageRequest, pagination: Pagination) -> None:
        page_nums = list(pagination.page_nums)
        model.update(window_bounds(page_nums))
        model["paginationCurrentPageNum"] = req.page_number
        model["paginationPageCount"] = pagination.page_count
        model["paginationPageNums"] = page_nums

    def _index(self, ctx: PageContext, model: dict[str, Any]) -> None:
        articles = self.sources.articles
        model["hotArticles"] = articles.get_index_hot_articles(ctx.avatar_view_mode)
        model["perfectArticles"] = articles.get_index_perfect_articles(ctx.avatar_view_mode)
        model["timelines"] = self.sources.timelines.get_timelines()

        filler = self.sources.filler
        filler.fill_domain_nav(model)
        filler.fill_header_and_footer(model, ctx.is_mobile, ctx.current_user)
        filler.fill_index_tags(model)

    def _paged(self, ctx: PageContext, model: dict[str, Any], key: str, result: ArticlePage) -> None:
        model[key] = [normalize_article(a) for a in result.articles]
        model["articleStickCheck"] = True
        self._fill_pagination(model, ctx.page_request, result.pagination)

        self.sources.filler.fill_domain_nav(model)
        self.sources.filler.fill_header_and_footer(model, ctx.is_mobile, ctx.current_user)
        self._fill_side(ctx, model)

    def _recent(self, ctx: PageContext, model: dict[str, Any]) -> None:
        req = ctx.page_request
        result = self.sources.articles.get_recent_articles(ctx.avatar_view_mode, req.page_number, req.page_size)
        self._paged(ctx, model, "latestArticles", result)

    def _perfect(self, ctx: PageContext, model: dict[str, Any]) -> None:
        req = ctx.page_request
        result = self.sources.articles.get_perfect_articles(ctx.avatar_view_mode, req.page_number, req.page_size)
        self._paged(ctx, model, "perfectArticles", result)

    def _hot(self, ctx: PageContext, model: dict[str, Any]) -> None:
        model["indexArticles"] = self.sources.articles.get_hot_articles(
            ctx.avatar_view_mode, ctx.page_request.page_size
        )

        filler = self.sources.filler
        with measure("Fills"):
            filler.fill_header_and_footer(model, ctx.is_mobile, ctx.current_user)
            filler.fill_domain_nav(model)
            self._fill_side(ctx, model)

    def _side_only(self, ctx: PageContext, model: dict[str, Any]) -> None:
        self.sources.filler.fill_header_and_footer(model, ctx.is_mobile, ctx.current_user)
        self._fill_side(ctx, model, skip_random_on_mobile=False)

    def _kill_browser(self, ctx: PageContext, model: dict[str, Any]) -> None:
        model.update(self.sources.langs.get_all(ctx.locale))
        self.sources.filler.fill_runtime(model)
        self.sources.filler.fill_minified(model)
