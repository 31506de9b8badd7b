from datetime import datetime, timezone
from typing import Any
from .queries import ArticleQueryService, CommentQueryService, DomainQueryService, TagQueryService
from .schemas import UserOut
from .utils import avatar_url
from .config import Settings

class Filler:
    """Writes the shared page furniture (header, footer, side panels) into a view model."""

    def __init__(
        self,
        articles: ArticleQueryService,
        tags: TagQueryService,
        comments: CommentQueryService,
        domains: DomainQueryService,
        settings: Settings,
        database: str = "",
    ):
        self.articles = articles
        self.tags = tags
        self.comments = comments
        self.domains = domains
        self.settings = settings
        self.database = database

    def fill_header_and_footer(self, model: dict[str, Any], is_mobile: bool, user=None) -> None:
        model["isMobile"] = is_mobile
        model["isLoggedIn"] = user is not None
        if user is not None:
            current = UserOut(
                name=user.name,
                avatar_url=avatar_url(user.avatar_url, user.avatar_view_mode or 0, self.settings.AVATAR_SIZE),
                list_page_size=user.list_page_size or 0,
                avatar_view_mode=user.avatar_view_mode or 0,
            )
            model["currentUser"] = current.model_dump(by_alias=True)
        model["servePath"] = self.settings.SERVE_PATH
        model["staticServePath"] = self.settings.STATIC_SERVE_PATH
        model["version"] = self.settings.VERSION
        model["year"] = datetime.now(timezone.utc).year
        self.fill_minified(model)

    def fill_domain_nav(self, model: dict[str, Any]) -> None:
        model["domains"] = self.domains.get_nav_domains()

    def fill_index_tags(self, model: dict[str, Any]) -> None:
        model["tags"] = self.tags.get_index_tags(self.settings.INDEX_TAGS_CNT)

    def fill_random_articles(self, avatar_view_mode: int, model: dict[str, Any]) -> None:
        model["sideRandomArticles"] = self.articles.get_random_articles(
            avatar_view_mode, self.settings.SIDE_RANDOM_ARTICLES_CNT
        )

    def fill_side_hot_articles(self, avatar_view_mode: int, model: dict[str, Any]) -> None:
        model["sideHotArticles"] = self.articles.get_side_hot_articles(
            avatar_view_mode, self.settings.SIDE_HOT_ARTICLES_CNT
        )

    def fill_side_tags(self, model: dict[str, Any]) -> None:
        model["sideTags"] = self.tags.get_side_tags(self.settings.SIDE_TAGS_CNT)

    def fill_latest_cmts(self, model: dict[str, Any]) -> None:
        model["sideLatestCmts"] = self.comments.get_latest_comments(self.settings.SIDE_LATEST_CMTS_CNT)

    def fill_minified(self, model: dict[str, Any]) -> None:
        model["miniPostfix"] = ".min" if self.settings.is_production else ""

    def fill_runtime(self, model: dict[str, Any]) -> None:
        model["runtimeMode"] = "PRODUCTION" if self.settings.is_production else "DEVELOPMENT"
        model["runtimeDatabase"] = self.database
