from __future__ import annotations


class CcAtlasError(Exception):
    """Base error for failures a caller is expected to report."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CcAtlasError):
    pass


class ExportIOError(CcAtlasError):
    pass


class ConfigMissingError(CcAtlasError):
    pass
