"""
Error types raised while uploading a folder.

Every failure aborts the run. Library code raises these; only the CLI turns
them into a process exit status.
"""

from typing import Optional


class UploaderError(Exception):
    """Base class for all errors raised by hashed_s3_upload."""


class ConfigError(UploaderError):
    """Missing or empty configuration value (bucket, region, root folder)."""


class TraversalError(UploaderError):
    """A directory could not be listed during the walk."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read directory {path}: {reason}")
        self.path = path


class FileAccessError(UploaderError):
    """A local file could not be opened for reading."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot open {path}: {reason}")
        self.path = path


class UploadError(UploaderError):
    """The storage backend rejected or could not complete a put_object call."""

    def __init__(self, path: str, key: str, reason: str, code: Optional[str] = None) -> None:
        super().__init__(f"upload of {path} to {key} failed: {reason}")
        self.path = path
        self.key = key
        # AWS error code (e.g. "AccessDenied", "NoSuchBucket") when the
        # backend returned a structured error
        self.code = code
