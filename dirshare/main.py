from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .config import Settings, normalize_root, settings
from .errors import BrowseError
from .routers import browse

log = logging.getLogger(__name__)

_SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
}


def _apply_security_headers(response):
    for key, value in _SECURITY_HEADERS.items():
        response.headers[key] = value
    return response


async def security_middleware(request: Request, call_next):
    response = await call_next(request)
    return _apply_security_headers(response)


async def browse_error_handler(request: Request, exc: BrowseError):
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    log.log(level, '%s %s -> %d %s', request.method, request.url.path, exc.status_code, exc.detail, exc_info=exc.__cause__)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    log.error('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    return PlainTextResponse('Internal server error', status_code=500)


@asynccontextmanager
async def lifespan(app: FastAPI):
    root = app.state.root
    if not Path(root).is_dir():
        raise RuntimeError(f'Root directory {root} does not exist or is not a directory')
    log.info('Serving files from: %s', root)
    yield


def create_app(config: Settings | None = None) -> FastAPI:
    config = config or settings
    root = normalize_root(config.serve_root)

    app = FastAPI(title=config.app_name, lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.root = root
    app.state.dispatcher = browse.build_dispatcher(root)

    app.middleware('http')(security_middleware)
    app.add_exception_handler(BrowseError, browse_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(browse.router)
    return app


app = create_app()
