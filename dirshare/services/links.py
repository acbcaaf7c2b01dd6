from __future__ import annotations

import posixpath
from urllib.parse import quote

from ..schemas import DirectoryEntry, ListingPage
from .listing import EntryInfo

DOWNLOAD_PREFIX = '/download'
VIEW_PREFIX = '/view'


def encode_name(name: str) -> str:
    return quote(name, safe='', errors='surrogateescape')


def encode_path(path: str) -> str:
    return quote(path, safe='/', errors='surrogateescape')


def entry_links(current: str, entry: EntryInfo) -> tuple[str, str]:
    location = encode_path(current) + encode_name(entry.name)
    if entry.is_dir:
        browse = location + '/'
        return browse, browse
    return DOWNLOAD_PREFIX + location, VIEW_PREFIX + location


def parent_link(current: str) -> str | None:
    trimmed = current.rstrip('/')
    if not trimmed:
        return None
    parent = posixpath.dirname(trimmed)
    if parent in ('', '/'):
        return '/'
    return encode_path(parent) + '/'


def display_name(name: str) -> str:
    # undecodable bytes survive in URLs but not in the rendered page
    return name.encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')


def build_entry(current: str, entry: EntryInfo) -> DirectoryEntry:
    url, original = entry_links(current, entry)
    return DirectoryEntry(
        name=display_name(entry.name),
        size=entry.size,
        is_dir=entry.is_dir,
        url=url,
        original=original,
        mod_time=entry.mod_time,
    )


def build_page(current: str, entries: list[EntryInfo]) -> ListingPage:
    return ListingPage(
        path=current,
        parent=parent_link(current),
        entries=[build_entry(current, entry) for entry in entries],
    )
