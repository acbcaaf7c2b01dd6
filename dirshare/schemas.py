from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class DirectoryEntry(BaseModel):
    name: str
    size: int
    is_dir: bool
    url: str
    original: str
    mod_time: str


class ListingPage(BaseModel):
    path: str
    parent: Optional[str] = None
    entries: list[DirectoryEntry]
