from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from ..dispatch import PrefixDispatcher, Route
from ..errors import BrowseError, ListingFailure
from ..services.content import Disposition, respond
from ..services.links import DOWNLOAD_PREFIX, VIEW_PREFIX, build_page
from ..services.listing import list_dir
from ..services.paths import logical_path, resolve

log = logging.getLogger(__name__)

router = APIRouter(tags=['browse'])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / 'templates'))


def listing(request: Request, root: str, path: str) -> Response:
    directory = resolve(root, path)
    try:
        entries = list_dir(directory)
    except BrowseError as exc:
        raise ListingFailure() from exc

    log.info('list %s', directory)
    page = build_page(logical_path(root, directory), entries)
    return templates.TemplateResponse(request, 'listing.html', {'page': page})


def download(request: Request, root: str, path: str) -> Response:
    return respond(resolve(root, path), Disposition.ATTACHMENT)


def view(request: Request, root: str, path: str) -> Response:
    return respond(resolve(root, path), Disposition.INLINE)


def build_dispatcher(root: str) -> PrefixDispatcher:
    return PrefixDispatcher(
        root,
        [
            Route(DOWNLOAD_PREFIX + '/', download),
            Route(VIEW_PREFIX + '/', view),
            Route('/', listing),
        ],
    )


@router.api_route('/{path:path}', methods=['GET', 'HEAD'], include_in_schema=False)
def serve(request: Request, path: str):
    return request.app.state.dispatcher.dispatch(request)
