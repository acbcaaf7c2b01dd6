from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..errors import map_os_error

log = logging.getLogger(__name__)

MOD_TIME_FORMAT = '%Y-%m-%d %H:%M:%S'


@dataclass(frozen=True)
class EntryInfo:
    name: str
    is_dir: bool
    size: int
    mod_time: str


def _entry_info(entry: os.DirEntry) -> EntryInfo:
    try:
        stat = entry.stat()
    except OSError:
        # dangling symlink: describe the link itself
        stat = entry.stat(follow_symlinks=False)

    try:
        is_dir = entry.is_dir()
    except OSError:
        is_dir = False

    return EntryInfo(
        name=entry.name,
        is_dir=is_dir,
        size=0 if is_dir else stat.st_size,
        mod_time=datetime.fromtimestamp(stat.st_mtime).strftime(MOD_TIME_FORMAT),
    )


def sort_entries(entries: list[EntryInfo]) -> list[EntryInfo]:
    return sorted(entries, key=lambda e: (not e.is_dir, os.fsencode(e.name)))


def list_dir(directory: Path) -> list[EntryInfo]:
    try:
        with os.scandir(directory) as it:
            entries = [_entry_info(entry) for entry in it]
    except OSError as exc:
        log.warning('Cannot list %s: %s', directory, exc)
        raise map_os_error(exc) from exc
    return sort_entries(entries)
