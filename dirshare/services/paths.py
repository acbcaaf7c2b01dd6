from __future__ import annotations

import os
import re
from pathlib import Path
from urllib.parse import unquote

from ..errors import InvalidEncoding, PathTraversal

_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def decode_path(raw: str) -> str:
    if _BAD_ESCAPE.search(raw):
        raise InvalidEncoding()
    # bytes that are not UTF-8 map to surrogates, matching os.fsdecode
    decoded = unquote(raw, errors='surrogateescape')
    if '\x00' in decoded:
        raise InvalidEncoding()
    return decoded


def resolve(root: str, request_path: str) -> Path:
    # only the joined path is normalized, so ".." is always taken relative to root
    decoded = decode_path(request_path)
    base = Path(os.path.normpath(root))
    candidate = Path(os.path.normpath(root.rstrip('/') + '/' + decoded.lstrip('/')))
    if base != candidate and base not in candidate.parents:
        raise PathTraversal()
    return candidate


def logical_path(root: str, resolved: Path) -> str:
    rel = resolved.relative_to(os.path.normpath(root)).as_posix()
    if rel == '.':
        return '/'
    return f'/{rel}/'
