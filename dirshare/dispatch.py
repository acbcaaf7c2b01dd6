from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence
from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import Response

from .errors import NotFound

Handler = Callable[[Request, str, str], Response]

# printable ASCII is passed through untouched, existing escapes included
_RAW_SAFE = ''.join(chr(c) for c in range(0x21, 0x7F))


@dataclass(frozen=True)
class Route:
    prefix: str
    handler: Handler


def raw_request_path(request: Request) -> str:
    raw = request.scope.get('raw_path')
    if raw is None:
        return quote(request.scope['path'], safe=_RAW_SAFE.replace('%', ''))
    return quote(raw, safe=_RAW_SAFE)


class PrefixDispatcher:
    def __init__(self, root: str, routes: Sequence[Route]):
        self.root = root
        self.routes = tuple(routes)

    def match(self, raw_path: str) -> tuple[Route, str]:
        for route in self.routes:
            if raw_path.startswith(route.prefix):
                return route, '/' + raw_path[len(route.prefix):]
        raise NotFound()

    def dispatch(self, request: Request) -> Response:
        route, path = self.match(raw_request_path(request))
        return route.handler(request, self.root, path)
