from __future__ import annotations


class BrowseError(Exception):
    status_code = 500
    detail = 'Internal server error'

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class InvalidEncoding(BrowseError):
    status_code = 400
    detail = 'Invalid file name'


class PathTraversal(BrowseError):
    status_code = 404
    detail = 'File not found'


class NotFound(BrowseError):
    status_code = 404
    detail = 'File not found'


class IsADirectory(BrowseError):
    status_code = 404
    detail = 'File not found'


class NotADirectory(BrowseError):
    status_code = 500
    detail = 'Not a directory'


class PermissionDenied(BrowseError):
    status_code = 403
    detail = 'Permission denied'


class IOFailure(BrowseError):
    status_code = 500
    detail = 'I/O error'


class ListingFailure(BrowseError):
    status_code = 500
    detail = 'Failed to read directory'


def map_os_error(exc: OSError) -> BrowseError:
    if isinstance(exc, FileNotFoundError):
        return NotFound()
    if isinstance(exc, NotADirectoryError):
        return NotADirectory()
    if isinstance(exc, IsADirectoryError):
        return IsADirectory()
    if isinstance(exc, PermissionError):
        return PermissionDenied()
    return IOFailure()
