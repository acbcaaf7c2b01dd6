from __future__ import annotations

import errno
import logging
import os
import stat
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterator
from urllib.parse import quote

from fastapi.responses import FileResponse, StreamingResponse
from starlette.responses import Response

from ..errors import IOFailure, IsADirectory, NotFound, map_os_error
from .sniff import SNIFF_LEN, detect_content_type

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

_MISSING_ERRNOS = {errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG, errno.ELOOP}


class Disposition(str, Enum):
    INLINE = 'inline'
    ATTACHMENT = 'attachment'


def content_disposition(disposition: Disposition, filename: str) -> str:
    quoted = quote(filename, errors='surrogateescape')
    if quoted != filename:
        return f"{disposition.value}; filename*=utf-8''{quoted}"
    return f'{disposition.value}; filename="{filename}"'


def stat_file(path: Path) -> os.stat_result:
    try:
        result = path.stat()
    except OSError as exc:
        if exc.errno in _MISSING_ERRNOS:
            raise NotFound() from exc
        raise map_os_error(exc) from exc
    if stat.S_ISDIR(result.st_mode):
        raise IsADirectory()
    # sockets, fifos and devices are never served
    if not stat.S_ISREG(result.st_mode):
        raise NotFound()
    return result


def open_file(path: Path) -> BinaryIO:
    try:
        return path.open('rb')
    except OSError as exc:
        raise map_os_error(exc) from exc


def _iter_file(handle: BinaryIO, path: Path) -> Iterator[bytes]:
    try:
        while chunk := handle.read(CHUNK_SIZE):
            yield chunk
    except OSError as exc:
        log.error('Transfer of %s interrupted: %s', path, exc)
        raise IOFailure() from exc
    finally:
        handle.close()


def respond(path: Path, disposition: Disposition) -> Response:
    result = stat_file(path)
    log.info('%s %s', disposition.value, path)

    handle = open_file(path)

    if disposition is Disposition.ATTACHMENT:
        # the file response reopens the path once headers are out
        handle.close()
        headers = {'Content-Disposition': content_disposition(Disposition.ATTACHMENT, path.name)}
        return FileResponse(path, headers=headers, stat_result=result)

    try:
        content_type = detect_content_type(handle.read(SNIFF_LEN))
        handle.seek(0)
    except OSError as exc:
        handle.close()
        raise IOFailure() from exc

    headers = {
        'Content-Disposition': content_disposition(Disposition.INLINE, path.name),
        'Content-Length': str(result.st_size),
    }
    return StreamingResponse(_iter_file(handle, path), media_type=content_type, headers=headers)
