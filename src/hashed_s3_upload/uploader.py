import logging
import os
import stat
import time
from dataclasses import dataclass
from typing import Iterator, List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .config import UploadConfig
from .errors import ConfigError, FileAccessError, TraversalError, UploadError
from .hashing import object_key_for

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    path: str
    s3_key: str
    size_bytes: int
    duration_sec: float


def make_s3_client(
    region: Optional[str],
    profile: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    use_path_style: bool = False,
    credentials: Optional[dict] = None,
):
    session_kwargs = {}
    if profile:
        session_kwargs["profile_name"] = profile
    session = boto3.session.Session(**session_kwargs)
    boto_cfg = BotoConfig(s3={"addressing_style": "path" if use_path_style else "virtual"})
    client_kwargs = {"region_name": region, "config": boto_cfg, "endpoint_url": endpoint_url}
    if credentials:
        client_kwargs.update(credentials)
    return session.client("s3", **{k: v for k, v in client_kwargs.items() if v is not None})


def client_from_config(config: UploadConfig):
    try:
        return make_s3_client(
            region=config.region,
            profile=config.profile,
            endpoint_url=config.endpoint_url,
            use_path_style=config.use_path_style,
            credentials=config.credentials,
        )
    except BotoCoreError as e:
        # e.g. ProfileNotFound
        raise ConfigError(f"cannot create S3 client: {e}") from e


def _scan_sorted(directory: str) -> List[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        raise TraversalError(directory, e.strerror or str(e)) from e
    entries.sort(key=lambda entry: entry.name)
    return entries


def iter_files(root: str) -> Iterator[str]:
    """Yield every regular file under ``root``, depth-first.

    Entries of each directory are visited in lexicographic order, files and
    subdirectories interleaved. Symlinked directories are not followed. If
    ``root`` is itself a regular file, it is the only item yielded.
    """
    try:
        st = os.stat(root)
    except OSError as e:
        raise TraversalError(root, e.strerror or str(e)) from e
    if stat.S_ISREG(st.st_mode):
        yield root
        return
    if not stat.S_ISDIR(st.st_mode):
        raise TraversalError(root, "not a directory or regular file")

    stack = [iter(_scan_sorted(root))]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        try:
            if entry.is_dir(follow_symlinks=False):
                stack.append(iter(_scan_sorted(entry.path)))
                continue
            is_file = entry.is_file()
        except OSError as e:
            raise TraversalError(entry.path, e.strerror or str(e)) from e
        if is_file:
            yield entry.path
        else:
            logger.debug("Skipping non-regular entry %s", entry.path)


def display_path(text: str) -> str:
    # undecodable filesystem names carry lone surrogates that strict stdout rejects
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def upload_file(s3, config: UploadConfig, file_path: str, key: Optional[str] = None) -> UploadResult:
    """Upload one file under its hashed key with a single put_object call.

    Raises FileAccessError if the file cannot be opened and UploadError if
    the key is not valid UTF-8 or the backend rejects the request. Nothing
    is retried here.
    """
    if key is None:
        key = object_key_for(config.root, file_path, config.prefix)
    try:
        key.encode("utf-8")
    except UnicodeEncodeError as e:
        raise UploadError(
            display_path(file_path), display_path(key), "object key is not valid UTF-8 (undecodable file name)"
        ) from e

    try:
        fp = open(file_path, "rb")
    except OSError as e:
        raise FileAccessError(file_path, e.strerror or str(e)) from e

    with fp:
        size = os.fstat(fp.fileno()).st_size
        start = time.perf_counter()
        try:
            s3.put_object(Bucket=config.bucket, Key=key, Body=fp)
        except ClientError as e:
            err = e.response.get("Error", {})
            raise UploadError(
                file_path, key, err.get("Message") or str(e), code=err.get("Code")
            ) from e
        except BotoCoreError as e:
            raise UploadError(file_path, key, str(e)) from e
        duration = time.perf_counter() - start

    logger.debug("Put s3://%s/%s (%dB in %.3fs)", config.bucket, key, size, duration)
    return UploadResult(path=file_path, s3_key=key, size_bytes=size, duration_sec=duration)


def upload_folder(s3, config: UploadConfig) -> List[UploadResult]:
    """Upload every regular file under ``config.root`` one at a time.

    The first traversal or upload error propagates and stops the walk.
    """
    results: List[UploadResult] = []
    for path in iter_files(config.root):
        key = object_key_for(config.root, path, config.prefix)
        print(f"Uploading: {display_path(path)} -> {display_path(key)}", flush=True)
        results.append(upload_file(s3, config, path, key=key))
    return results


def summarize(results: List[UploadResult]) -> dict:
    total_bytes = sum(r.size_bytes for r in results)
    total_time = sum(r.duration_sec for r in results)
    return {
        "files": len(results),
        "total_bytes": total_bytes,
        "total_time_sec": total_time,
    }
