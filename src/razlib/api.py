"""
HTTP catalog service.

Serves the level list, per-level book lists (built live from the library
source on every request) and streams PDF/audio objects to readers.

Routes:
    GET /api/levels                       {levels: [{id, name, bookCount}]}
    GET /api/levels/{level}/books         {books: [...]}
    GET /api/pdf/{level}/{filename}       application/pdf stream
    GET /api/audio/{level}/{filename}     audio/mpeg stream
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from razlib import __version__
from razlib.catalog.builder import BuildOptions, build_level
from razlib.config import Settings, get_settings
from razlib.exceptions import StorageError
from razlib.levels import FileKind, LevelTable
from razlib.schemas.api import BookPayload, BooksResponse, LevelPayload, LevelsResponse
from razlib.sources import BucketLibrary, LibrarySource, LocalLibrary

logger = logging.getLogger(__name__)


# =============================================================================
# Dependencies
# =============================================================================


def make_library_source(settings: Settings) -> LibrarySource:
    """Bucket when object storage is configured, else the local library."""
    if settings.storage.configured:
        logger.info("Serving from bucket %s", settings.storage.bucket)
        return BucketLibrary.from_config(settings.storage)
    logger.info("Serving from local library %s", settings.paths.pdf_root)
    return LocalLibrary(
        settings.paths.pdf_root,
        settings.paths.audio_root,
        settings.levels,
        pdf_prefix=settings.storage.pdf_prefix,
        audio_prefix=settings.storage.audio_prefix,
    )


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_library_source(request: Request) -> LibrarySource:
    """The app's library source, created on first use."""
    state = request.app.state
    if getattr(state, "source", None) is None:
        state.source = make_library_source(state.settings)
    return state.source


def get_level_table(settings: Settings = Depends(get_app_settings)) -> LevelTable:
    return settings.levels


def _require_level(level: str, table: LevelTable) -> str:
    if level not in table:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown level: {level}"
        )
    return level


# =============================================================================
# Routes
# =============================================================================


router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/levels", response_model=LevelsResponse)
def list_levels(
    source: LibrarySource = Depends(get_library_source),
    table: LevelTable = Depends(get_level_table),
) -> LevelsResponse:
    levels: list[LevelPayload] = []
    for code in table.codes:
        try:
            count = len(source.list_files(code, FileKind.pdf))
        except StorageError as e:
            # One unreadable level should not hide the others
            logger.warning("Cannot count books for level %s: %s", code, e)
            count = 0
        levels.append(LevelPayload(id=code, name=code, book_count=count))
    return LevelsResponse(levels=levels)


@router.get("/levels/{level}/books", response_model=BooksResponse)
def list_books(
    level: str,
    source: LibrarySource = Depends(get_library_source),
    table: LevelTable = Depends(get_level_table),
    settings: Settings = Depends(get_app_settings),
) -> BooksResponse:
    _require_level(level, table)
    options = BuildOptions(
        numbering=settings.catalog.numbering,
        title_fallback=settings.catalog.title_fallback,
    )
    try:
        report = build_level(source, level, options=options)
    except StorageError as e:
        logger.error("Cannot list level %s: %s", level, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    books = [BookPayload.model_validate(book.to_dict()) for book in report.books]
    return BooksResponse(books=books)


def _stream(
    kind: FileKind,
    level: str,
    filename: str,
    source: LibrarySource,
    table: LevelTable,
    settings: Settings,
) -> StreamingResponse:
    _require_level(level, table)
    try:
        stored = source.get_object(level, kind, filename)
    except StorageError as e:
        logger.error("Cannot read %s/%s/%s: %s", kind.value, level, filename, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    if stored is None:
        label = "PDF" if kind is FileKind.pdf else "Audio"
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")

    headers = {"Cache-Control": f"public, max-age={settings.server.cache_max_age}"}
    if stored.content_length is not None:
        headers["Content-Length"] = str(stored.content_length)
    return StreamingResponse(stored.chunks, media_type=stored.content_type, headers=headers)


@router.get("/pdf/{level}/{filename}")
def get_pdf(
    level: str,
    filename: str,
    source: LibrarySource = Depends(get_library_source),
    table: LevelTable = Depends(get_level_table),
    settings: Settings = Depends(get_app_settings),
) -> StreamingResponse:
    return _stream(FileKind.pdf, level, filename, source, table, settings)


@router.get("/audio/{level}/{filename}")
def get_audio(
    level: str,
    filename: str,
    source: LibrarySource = Depends(get_library_source),
    table: LevelTable = Depends(get_level_table),
    settings: Settings = Depends(get_app_settings),
) -> StreamingResponse:
    return _stream(FileKind.audio, level, filename, source, table, settings)


# =============================================================================
# Application factory
# =============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(title="razlib catalog API", version=__version__)
    app.state.settings = settings
    app.state.source = None

    origins = [origin.strip() for origin in settings.server.cors_origin.split(",") if origin]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(router)

    @app.get("/", tags=["health"])
    def root_healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app

