import pytest

from forumview.pages import DataSources, PageContext, PageKind, ViewAssembler, resolve_page_request
from forumview.schemas import ArticlePage, Pagination

SIDE_KEYS = {"sideHotArticles", "sideTags", "sideLatestCmts"}


class FakeArticles:
    def __init__(self, articles=None, page_count=1, page_nums=(1,)):
        self.articles = articles if articles is not None else [
            {"oId": 1, "articleTags": "a,b", "articleStickRemains": 5},
            {"oId": 2, "articleTags": "c", "articleStickRemains": 0},
        ]
        self.pagination = Pagination(page_count=page_count, page_nums=list(page_nums))
        self.calls = []

    def get_index_hot_articles(self, avatar_view_mode):
        self.calls.append(("index_hot", avatar_view_mode))
        return [{"oId": 10}]

    def get_index_perfect_articles(self, avatar_view_mode):
        self.calls.append(("index_perfect", avatar_view_mode))
        return [{"oId": 11}]

    def get_hot_articles(self, avatar_view_mode, fetch_size):
        self.calls.append(("hot", avatar_view_mode, fetch_size))
        return [{"oId": 12}]

    def get_recent_articles(self, avatar_view_mode, page, size):
        self.calls.append(("recent", avatar_view_mode, page, size))
        return ArticlePage(articles=self.articles, pagination=self.pagination)

    def get_perfect_articles(self, avatar_view_mode, page, size):
        self.calls.append(("perfect", avatar_view_mode, page, size))
        return ArticlePage(articles=self.articles, pagination=self.pagination)


class FakeTimelines:
    def get_timelines(self):
        return [{"oId": 1, "content": "hello"}]


class FakeLangs:
    def get_all(self, locale):
        return {"killBrowserLabel": f"label-{locale}"}


class FakeFiller:
    def fill_header_and_footer(self, model, is_mobile, user=None):
        model["isMobile"] = is_mobile
        model["isLoggedIn"] = user is not None

    def fill_domain_nav(self, model):
        model["domains"] = []

    def fill_index_tags(self, model):
        model["tags"] = []

    def fill_random_articles(self, avatar_view_mode, model):
        model["sideRandomArticles"] = []

    def fill_side_hot_articles(self, avatar_view_mode, model):
        model["sideHotArticles"] = []

    def fill_side_tags(self, model):
        model["sideTags"] = []

    def fill_latest_cmts(self, model):
        model["sideLatestCmts"] = []

    def fill_minified(self, model):
        model["miniPostfix"] = ""

    def fill_runtime(self, model):
        model["runtimeMode"] = "DEVELOPMENT"
        model["runtimeDatabase"] = "sqlite"


class BrokenTimelines:
    def get_timelines(self):
        raise RuntimeError("timeline store down")


def make(articles=None, timelines=None):
    articles = articles or FakeArticles()
    sources = DataSources(articles=articles, timelines=timelines or FakeTimelines(), filler=FakeFiller(), langs=FakeLangs())
    return ViewAssembler(sources), articles


def ctx(kind, raw_page=None, is_mobile=False, user=None, avatar_view_mode=0, locale="en_US"):
    return PageContext(
        kind=kind,
        page_request=resolve_page_request(raw_page, user, 20),
        avatar_view_mode=avatar_view_mode,
        is_mobile=is_mobile,
        current_user=user,
        locale=locale,
    )


def test_index_merges_lists_without_pagination():
    assembler, articles = make()
    model = assembler.assemble(ctx(PageKind.INDEX, avatar_view_mode=1))
    assert model["hotArticles"] == [{"oId": 10}]
    assert model["perfectArticles"] == [{"oId": 11}]
    assert model["timelines"] == [{"oId": 1, "content": "hello"}]
    assert "tags" in model and "domains" in model
    assert "paginationPageNums" not in model
    assert ("index_hot", 1) in articles.calls


def test_recent_normalizes_and_paginates():
    assembler, articles = make(FakeArticles(page_count=7, page_nums=[5, 6, 7]))
    model = assembler.assemble(ctx(PageKind.RECENT, raw_page="6"))
    assert articles.calls == [("recent", 0, 6, 20)]
    first, second = model["latestArticles"]
    assert first["articleIsStick"] is True and first["articleTagsBrief"] == "a"
    assert second["articleIsStick"] is False and second["articleTagsBrief"] == "c"
    assert first["articleTags"] == "a,b"
    assert model["articleStickCheck"] is True
    assert model["paginationCurrentPageNum"] == 6
    assert model["paginationPageCount"] == 7
    assert model["paginationPageNums"] == [5, 6, 7]
    assert model["paginationFirstPageNum"] == 5
    assert model["paginationLastPageNum"] == 7


def test_recent_does_not_touch_source_records():
    source = FakeArticles()
    assembler, _ = make(source)
    assembler.assemble(ctx(PageKind.RECENT))
    assert "articleIsStick" not in source.articles[0]


def test_recent_with_no_articles():
    assembler, _ = make(FakeArticles(articles=[], page_count=0, page_nums=[]))
    model = assembler.assemble(ctx(PageKind.RECENT))
    assert model["latestArticles"] == []
    assert model["paginationPageNums"] == []
    assert model["paginationPageCount"] == 0
    assert "paginationFirstPageNum" not in model
    assert "paginationLastPageNum" not in model


@pytest.mark.parametrize("kind", [PageKind.RECENT, PageKind.HOT, PageKind.PERFECT])
def test_mobile_drops_random_articles_only(kind):
    assembler, _ = make()
    model = assembler.assemble(ctx(kind, is_mobile=True))
    assert "sideRandomArticles" not in model
    assert SIDE_KEYS <= model.keys()


@pytest.mark.parametrize("kind", [PageKind.RECENT, PageKind.HOT, PageKind.PERFECT, PageKind.ABOUT, PageKind.B3LOG])
def test_desktop_gets_every_side_panel(kind):
    assembler, _ = make()
    model = assembler.assemble(ctx(kind))
    assert SIDE_KEYS | {"sideRandomArticles"} <= model.keys()


def test_hot_uses_resolved_page_size():
    class User:
        list_page_size = 7

    assembler, articles = make()
    model = assembler.assemble(ctx(PageKind.HOT, user=User()))
    assert model["indexArticles"] == [{"oId": 12}]
    assert articles.calls == [("hot", 0, 7)]
    assert model["isLoggedIn"] is True
    assert "paginationPageNums" not in model


def test_perfect_is_paginated_and_normalized():
    assembler, articles = make(FakeArticles(page_count=2, page_nums=[1, 2]))
    model = assembler.assemble(ctx(PageKind.PERFECT, raw_page="2"))
    assert articles.calls == [("perfect", 0, 2, 20)]
    assert model["perfectArticles"][0]["articleTagsBrief"] == "a"
    assert model["paginationFirstPageNum"] == 1
    assert model["paginationLastPageNum"] == 2


@pytest.mark.parametrize("kind", [PageKind.ABOUT, PageKind.B3LOG])
def test_side_only_pages(kind):
    assembler, articles = make()
    model = assembler.assemble(ctx(kind, is_mobile=True))
    assert articles.calls == []
    assert "sideRandomArticles" in model
    assert "latestArticles" not in model


def test_kill_browser_has_langs_and_runtime_only():
    assembler, articles = make()
    model = assembler.assemble(ctx(PageKind.KILL_BROWSER, locale="zh_CN"))
    assert model["killBrowserLabel"] == "label-zh_CN"
    assert model["runtimeMode"] == "DEVELOPMENT"
    assert model["runtimeDatabase"] == "sqlite"
    assert "miniPostfix" in model
    assert articles.calls == []
    assert not any(key.startswith("side") for key in model)


def test_source_failure_propagates():
    assembler, _ = make(timelines=BrokenTimelines())
    with pytest.raises(RuntimeError, match="timeline store down"):
        assembler.assemble(ctx(PageKind.INDEX))


def test_every_page_kind_has_an_assembler():
    assembler, _ = make()
    for kind in PageKind:
        assert isinstance(assembler.assemble(ctx(kind)), dict)


def test_assemble_is_timed():
    assert ViewAssembler.assemble.__wrapped__ is not None
