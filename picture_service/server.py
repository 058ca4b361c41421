from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from common.logging_setup import get_logger, setup_logging
from picture_service.config import Settings
from picture_service.encoder import ImageEncoder
from picture_service.picture_cache import PictureCache
from picture_service.preload import Preloader, read_dates_file
from picture_service.service import PictureService
from picture_service.upstream import MarsPhotosApi

log = get_logger(__name__)

router = APIRouter()


def build_service(settings: Settings, client: httpx.AsyncClient, cache: Optional[PictureCache] = None) -> PictureService:
    api = MarsPhotosApi(api_key=settings.api_key, client=client, base_url=settings.base_url, timeout=settings.timeout)
    return PictureService(
        cache=cache if cache is not None else PictureCache(),
        build_url=api.urls,
        list_photos=api.get_photos_at,
        encode=ImageEncoder(api.get_image),
    )


def _start_preload(settings: Settings, service: PictureService) -> Optional[asyncio.Task]:
    if not settings.preload_enabled:
        return None
    try:
        dates = read_dates_file(settings.dates_file)
    except OSError as e:
        log.warning("Error preloading cache: %s", e)
        return None
    preloader = Preloader(service.fetch_and_store, rover=settings.preload_rover)
    return asyncio.create_task(preloader.preload(dates), name="preload-cache")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    client = httpx.AsyncClient(transport=app.state.transport, timeout=settings.timeout, follow_redirects=True)
    app.state.service = build_service(settings, client, cache=app.state.cache)
    # the request path never waits on this task
    app.state.preload_task = _start_preload(settings, app.state.service)
    try:
        yield
    finally:
        task = app.state.preload_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await client.aclose()


@router.get("/pictures")
async def pictures(
    request: Request,
    rover: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
):
    """
    Return every photo a rover took on an Earth date, inlined as JPEG data URIs.

    200 {"images": [...]} | 400 {"Error": reason} | 500 {"Error": detail}
    """
    service: PictureService = request.app.state.service
    resp = await service.get_pictures(rover, date)
    return JSONResponse(resp.body, status_code=resp.status_code, headers=resp.headers)


@router.get("/health")
async def health(request: Request):
    state = request.app.state
    task = state.preload_task
    if task is None:
        preload = {"status": "disabled" if not state.settings.preload_enabled else "skipped"}
    elif not task.done():
        preload = {"status": "running"}
    elif not task.cancelled() and task.exception() is None:
        report = task.result()
        preload = {"status": "done", "succeeded": report.succeeded, "failed": report.failed}
    else:
        preload = {"status": "failed"}
    return {"status": "ok", "cache": state.service.cache.stats(), "preload": preload}


@router.get("/stats")
async def stats(request: Request):
    return {"cache": request.app.state.service.cache.stats()}


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cache: Optional[PictureCache] = None,
) -> FastAPI:
    """
    Params:
        settings: defaults to Settings.load() (config/params.yaml or PICTURES_CONFIG)
        transport: optional httpx transport for the upstream client (tests use MockTransport)
        cache: optional pre-built cache; a fresh one is created otherwise
    """
    app = FastAPI(title="Rover Pictures API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings or Settings.load()
    app.state.transport = transport
    app.state.cache = cache
    app.state.preload_task = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def main() -> None:
    settings = Settings.load()
    setup_logging(settings.log_level, force=True)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


# -------- local dev entrypoint --------
if __name__ == "__main__":
    main()
