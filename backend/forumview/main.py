from fastapi import FastAPI, Depends, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session
from sqlalchemy import select
from datetime import datetime, timezone
import logging
import os
import structlog
import traceback
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from .db import Base, engine, SessionLocal
from .models import User
from .queries import (
    ArticleQueryService,
    CommentQueryService,
    DomainQueryService,
    TagQueryService,
    TimelineQueryService,
    UserQueryService,
)
from .filler import Filler
from .langs import LangPropsService
from .pages import DataSources, PageContext, PageKind, ViewAssembler, resolve_page_request
from .stopwatch import measure
from .utils import is_mobile, negotiate_locale
from .config import settings

# Configure structured logging
structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.LOG_LEVEL.upper())
    ),
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)

app = FastAPI(title="Forum pages")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"]
)

Base.metadata.create_all(bind=engine)

if settings.STATIC_DIR and os.path.exists(settings.STATIC_DIR):
    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

langs = LangPropsService(settings.LANG_DIR, settings.DEFAULT_LOCALE)

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        path=request.url.path,
        method=request.method,
        traceback=traceback.format_exc()
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "path": request.url.path}
    )

@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    try:
        # Test database connection
        db = SessionLocal()
        try:
            db.execute(select(1))
        finally:
            db.close()
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.VERSION
        }
    except Exception as e:
        logger.error("Health check failed", exc_info=e)
        raise HTTPException(status_code=503, detail="Service unhealthy")

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_current_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    return UserQueryService(db).get_current_user(request)

def get_sources(db: Session = Depends(get_db)) -> DataSources:
    articles = ArticleQueryService(db)
    filler = Filler(
        articles,
        TagQueryService(db),
        CommentQueryService(db),
        DomainQueryService(db),
        settings,
        database=db.get_bind().dialect.name,
    )
    return DataSources(
        articles=articles,
        timelines=TimelineQueryService(db),
        filler=filler,
        langs=langs,
    )

def render_page(kind: PageKind, request: Request, sources: DataSources, user: User | None) -> JSONResponse:
    ctx = PageContext(
        kind=kind,
        page_request=resolve_page_request(request.query_params.get("p"), user, settings.INDEX_ARTICLES_CNT),
        avatar_view_mode=user.avatar_view_mode if user is not None and user.avatar_view_mode is not None
        else settings.DEFAULT_AVATAR_VIEW_MODE,
        is_mobile=is_mobile(request.headers.get("user-agent")),
        current_user=user,
        locale=negotiate_locale(request.headers.get("accept-language"), settings.DEFAULT_LOCALE),
    )
    with measure(f"page.{kind.value}", path=request.url.path):
        model = ViewAssembler(sources).assemble(ctx)
    return JSONResponse(content=jsonable_encoder(model))

@app.get("/")
@limiter.limit(settings.rate_limit)
def show_index(request: Request, sources: DataSources = Depends(get_sources), user: User | None = Depends(get_current_user)):
    return render_page(PageKind.INDEX, request, sources, user)

@app.get("/recent")
@limiter.limit(settings.rate_limit)
def show_recent(request: Request, sources: DataSources = Depends(get_sources), user: User | None = Depends(get_current_user)):
    return render_page(PageKind.RECENT, request, sources, user)

@app.get("/hot")
@limiter.limit(settings.rate_limit)
def show_hot(request: Request, sources: DataSources = Depends(get_sources), user: User | None = Depends(get_current_user)):
    return render_page(PageKind.HOT, request, sources, user)

@app.get("/perfect")
@limiter.limit(settings.rate_limit)
def show_perfect(request: Request, sources: DataSources = Depends(get_sources), user: User | None = Depends(get_current_user)):
    return render_page(PageKind.PERFECT, request, sources, user)

@app.get("/about")
@limiter.limit(settings.rate_limit)
def show_about(request: Request, sources: DataSources = Depends(get_sources), user: User | None = Depends(get_current_user)):
    return render_page(PageKind.ABOUT, request, sources, user)

@app.get("/b3log")
@limiter.limit(settings.rate_limit)
def show_b3log(request: Request, sources: DataSources = Depends(get_sources), user: User | None = Depends(get_current_user)):
    return render_page(PageKind.B3LOG, request, sources, user)

@app.get("/kill-browser")
@limiter.limit(settings.rate_limit)
def show_kill_browser(request: Request, sources: DataSources = Depends(get_sources), user: User | None = Depends(get_current_user)):
    return render_page(PageKind.KILL_BROWSER, request, sources, user)
