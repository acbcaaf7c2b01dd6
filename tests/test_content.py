from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi.responses import FileResponse, StreamingResponse

from dirshare.errors import IOFailure, IsADirectory, NotFound, PermissionDenied
from dirshare.services import content
from dirshare.services.content import Disposition, content_disposition, respond


async def _body(response: StreamingResponse) -> bytes:
    chunks = [chunk async for chunk in response.body_iterator]
    return b''.join(chunks)


def test_content_disposition_ascii():
    assert content_disposition(Disposition.ATTACHMENT, 'a.txt') == 'attachment; filename="a.txt"'


def test_content_disposition_non_ascii():
    value = content_disposition(Disposition.INLINE, 'résumé 1.pdf')
    assert value == "inline; filename*=utf-8''r%C3%A9sum%C3%A9%201.pdf"


def test_respond_missing_file(tmp_path):
    with pytest.raises(NotFound):
        respond(tmp_path / 'missing.txt', Disposition.INLINE)


def test_respond_directory(tmp_path):
    with pytest.raises(IsADirectory):
        respond(tmp_path, Disposition.ATTACHMENT)


def test_attachment_uses_file_response(tmp_path):
    target = tmp_path / 'report.csv'
    target.write_text('a,b\n1,2\n')

    response = respond(target, Disposition.ATTACHMENT)

    assert isinstance(response, FileResponse)
    assert response.headers['content-disposition'] == 'attachment; filename="report.csv"'


@pytest.mark.asyncio
async def test_inline_streams_whole_file_with_sniffed_type(tmp_path):
    payload = b'\xFF\xD8\xFF\xE0' + bytes(range(256)) * 20
    target = tmp_path / 'photo.bin'
    target.write_bytes(payload)

    response = respond(target, Disposition.INLINE)

    assert response.media_type == 'image/jpeg'
    assert response.headers['content-disposition'] == 'inline; filename="photo.bin"'
    assert response.headers['content-length'] == str(len(payload))
    assert await _body(response) == payload


class _FailingHandle(io.BytesIO):
    def __init__(self, data: bytes, fail_after: int):
        super().__init__(data)
        self.fail_after = fail_after
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if self.reads > self.fail_after:
            raise OSError(5, 'Input/output error')
        return super().read(size)


def _patch_open(monkeypatch, handle):
    monkeypatch.setattr(Path, 'open', lambda self, *args, **kwargs: handle)


@pytest.mark.parametrize('disposition', [Disposition.INLINE, Disposition.ATTACHMENT])
def test_respond_unopenable_file_is_permission_denied(tmp_path, monkeypatch, disposition):
    target = tmp_path / 'locked.txt'
    target.write_text('secret')

    def _deny(self, *args, **kwargs):
        raise PermissionError(13, 'Permission denied', str(self))

    monkeypatch.setattr(Path, 'open', _deny)

    with pytest.raises(PermissionDenied) as exc:
        respond(target, disposition)

    assert isinstance(exc.value.__cause__, PermissionError)


def test_respond_sniff_read_failure_is_io_failure(tmp_path, monkeypatch):
    target = tmp_path / 'a.txt'
    target.write_text('hello')
    handle = _FailingHandle(b'hello', fail_after=0)
    _patch_open(monkeypatch, handle)

    with pytest.raises(IOFailure):
        respond(target, Disposition.INLINE)

    assert handle.closed


def test_attachment_closes_checked_handle(tmp_path, monkeypatch):
    target = tmp_path / 'a.txt'
    target.write_text('hello')
    handle = _FailingHandle(b'hello', fail_after=10)
    _patch_open(monkeypatch, handle)

    response = respond(target, Disposition.ATTACHMENT)

    assert isinstance(response, FileResponse)
    assert handle.closed


def test_stream_read_failure_is_io_failure_and_closes(tmp_path):
    handle = _FailingHandle(b'x' * (content.CHUNK_SIZE * 2), fail_after=1)

    chunks = content._iter_file(handle, tmp_path / 'a.bin')

    assert next(chunks) == b'x' * content.CHUNK_SIZE
    with pytest.raises(IOFailure) as exc:
        next(chunks)
    assert isinstance(exc.value.__cause__, OSError)
    assert handle.closed


def test_stat_file_maps_name_too_long_to_not_found(tmp_path):
    with pytest.raises(NotFound):
        content.stat_file(tmp_path / ('a' * 300))


def test_stat_file_maps_symlink_loop_to_not_found(tmp_path):
    (tmp_path / 'loop').symlink_to(tmp_path / 'loop')

    with pytest.raises(NotFound):
        content.stat_file(tmp_path / 'loop')
