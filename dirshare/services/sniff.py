from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

SNIFF_LEN = 512

DEFAULT_CONTENT_TYPE = 'application/octet-stream'
TEXT_CONTENT_TYPE = 'text/plain; charset=utf-8'
HTML_CONTENT_TYPE = 'text/html; charset=utf-8'

_WHITESPACE = b'\t\n\x0c\r '


class Signature(Protocol):
    def match(self, data: bytes, first_non_ws: int) -> str | None:
        ...


@dataclass(frozen=True)
class ExactSig:
    sig: bytes
    content_type: str

    def match(self, data: bytes, first_non_ws: int) -> str | None:
        if data.startswith(self.sig):
            return self.content_type
        return None


@dataclass(frozen=True)
class MaskedSig:
    mask: bytes
    pattern: bytes
    content_type: str
    skip_ws: bool = False

    def match(self, data: bytes, first_non_ws: int) -> str | None:
        if self.skip_ws:
            data = data[first_non_ws:]
        if len(self.pattern) != len(self.mask) or len(data) < len(self.pattern):
            return None
        for pb, mb, db in zip(self.pattern, self.mask, data):
            if db & mb != pb:
                return None
        return self.content_type


@dataclass(frozen=True)
class HtmlSig:
    tag: bytes

    def match(self, data: bytes, first_non_ws: int) -> str | None:
        data = data[first_non_ws:]
        if len(data) < len(self.tag) + 1:
            return None
        for i, b in enumerate(self.tag):
            db = data[i]
            if ord('A') <= b <= ord('Z'):
                db &= 0xDF
            if b != db:
                return None
        # the tag must be terminated by a space or '>'
        if data[len(self.tag)] not in b' >':
            return None
        return HTML_CONTENT_TYPE


class Mp4Sig:
    def match(self, data: bytes, first_non_ws: int) -> str | None:
        if len(data) < 12:
            return None
        box_size = int.from_bytes(data[:4], 'big')
        if len(data) < box_size or box_size % 4 != 0:
            return None
        if data[4:8] != b'ftyp':
            return None
        for start in range(8, box_size, 4):
            if start == 12:
                # minor version
                continue
            if data[start:start + 3] == b'mp4':
                return 'video/mp4'
        return None


class TextSig:
    def match(self, data: bytes, first_non_ws: int) -> str | None:
        for b in data[first_non_ws:]:
            if b <= 0x08 or b == 0x0B or 0x0E <= b <= 0x1A or 0x1C <= b <= 0x1F:
                return None
        return TEXT_CONTENT_TYPE


_RIFF_MASK = b'\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF'

SIGNATURES: tuple[Signature, ...] = (
    HtmlSig(b'<!DOCTYPE HTML'),
    HtmlSig(b'<HTML'),
    HtmlSig(b'<HEAD'),
    HtmlSig(b'<SCRIPT'),
    HtmlSig(b'<IFRAME'),
    HtmlSig(b'<H1'),
    HtmlSig(b'<DIV'),
    HtmlSig(b'<FONT'),
    HtmlSig(b'<TABLE'),
    HtmlSig(b'<A'),
    HtmlSig(b'<STYLE'),
    HtmlSig(b'<TITLE'),
    HtmlSig(b'<B'),
    HtmlSig(b'<BODY'),
    HtmlSig(b'<BR'),
    HtmlSig(b'<P'),
    HtmlSig(b'<!--'),
    MaskedSig(b'\xFF\xFF\xFF\xFF\xFF', b'<?xml', 'text/xml; charset=utf-8', skip_ws=True),
    ExactSig(b'%PDF-', 'application/pdf'),
    ExactSig(b'%!PS-Adobe-', 'application/postscript'),
    # byte order marks
    MaskedSig(b'\xFF\xFF\x00\x00', b'\xFE\xFF\x00\x00', 'text/plain; charset=utf-16be'),
    MaskedSig(b'\xFF\xFF\x00\x00', b'\xFF\xFE\x00\x00', 'text/plain; charset=utf-16le'),
    MaskedSig(b'\xFF\xFF\xFF\x00', b'\xEF\xBB\xBF\x00', 'text/plain; charset=utf-8'),
    # images
    ExactSig(b'\x00\x00\x01\x00', 'image/x-icon'),
    ExactSig(b'\x00\x00\x02\x00', 'image/x-icon'),
    ExactSig(b'BM', 'image/bmp'),
    ExactSig(b'GIF87a', 'image/gif'),
    ExactSig(b'GIF89a', 'image/gif'),
    MaskedSig(
        b'\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF\xFF\xFF',
        b'RIFF\x00\x00\x00\x00WEBPVP',
        'image/webp',
    ),
    ExactSig(b'\x89PNG\x0D\x0A\x1A\x0A', 'image/png'),
    ExactSig(b'\xFF\xD8\xFF', 'image/jpeg'),
    # audio and video
    MaskedSig(_RIFF_MASK, b'FORM\x00\x00\x00\x00AIFF', 'audio/aiff'),
    MaskedSig(b'\xFF\xFF\xFF', b'ID3', 'audio/mpeg'),
    MaskedSig(b'\xFF\xFF\xFF\xFF\xFF', b'OggS\x00', 'application/ogg'),
    MaskedSig(b'\xFF' * 8, b'MThd\x00\x00\x00\x06', 'audio/midi'),
    MaskedSig(_RIFF_MASK, b'RIFF\x00\x00\x00\x00AVI ', 'video/avi'),
    MaskedSig(_RIFF_MASK, b'RIFF\x00\x00\x00\x00WAVE', 'audio/wave'),
    Mp4Sig(),
    ExactSig(b'\x1A\x45\xDF\xA3', 'video/webm'),
    # fonts
    MaskedSig(b'\x00' * 34 + b'\xFF\xFF', b'\x00' * 34 + b'LP', 'application/vnd.ms-fontobject'),
    ExactSig(b'\x00\x01\x00\x00', 'font/ttf'),
    ExactSig(b'OTTO', 'font/otf'),
    ExactSig(b'ttcf', 'font/collection'),
    ExactSig(b'wOFF', 'font/woff'),
    ExactSig(b'wOF2', 'font/woff2'),
    # archives
    ExactSig(b'\x1F\x8B\x08', 'application/x-gzip'),
    ExactSig(b'PK\x03\x04', 'application/zip'),
    ExactSig(b'Rar!\x1A\x07\x00', 'application/x-rar-compressed'),
    ExactSig(b'Rar!\x1A\x07\x01\x00', 'application/x-rar-compressed'),
    ExactSig(b'\x00\x61\x73\x6D', 'application/wasm'),
    TextSig(),
)


def detect_content_type(data: bytes) -> str:
    data = data[:SNIFF_LEN]

    first_non_ws = 0
    while first_non_ws < len(data) and data[first_non_ws] in _WHITESPACE:
        first_non_ws += 1

    for sig in SIGNATURES:
        content_type = sig.match(data, first_non_ws)
        if content_type:
            return content_type
    return DEFAULT_CONTENT_TYPE
