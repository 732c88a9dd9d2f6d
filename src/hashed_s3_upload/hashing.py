"""
Path obfuscation for object keys.

Each directory segment is replaced by the first 16 hex characters of the
SHA-256 digest of its UTF-8 bytes. No salt and no key: the same folder name
hashes to the same segment anywhere in the tree, and nothing here can map a
hash back to its name.

Example:
    docs/2024/report.txt
    -> <sha256("docs")[:16]>/<sha256("2024")[:16]>/report.txt
"""

import hashlib
import hmac
import os
import re
from typing import List

HASH_LENGTH = 16

_SEPARATORS = [os.sep] + ([os.altsep] if os.altsep else [])
_SPLIT_RE = re.compile("|".join(re.escape(s) for s in _SEPARATORS))


def hash_segment(segment: str) -> str:
    """Return the 16-char lowercase hex SHA-256 prefix of ``segment``."""
    # surrogateescape restores the raw bytes of undecodable filesystem names
    try:
        data = segment.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        data = segment.encode("utf-8", errors="surrogatepass")
    return hashlib.sha256(data).hexdigest()[:HASH_LENGTH]


def verify_segment(segment: str, hashed: str) -> bool:
    """Check that ``hashed`` is the stored hash of a known original ``segment``."""
    return hmac.compare_digest(hash_segment(segment), hashed.lower())


def split_path(path: str) -> List[str]:
    """Split on every native separator, keeping empty segments.

    A leading separator yields an empty first segment, as ``str.split`` does.
    """
    return _SPLIT_RE.split(path)


def obfuscate_path(path: str) -> str:
    """Hash every segment of ``path`` and join them with ``/``."""
    return "/".join(hash_segment(part) for part in split_path(path))


def object_key_for(root: str, file_path: str, prefix: str = "") -> str:
    """Compute the destination key for ``file_path`` relative to ``root``.

    Only the directory part is hashed; the base name is kept. Files directly
    under ``root`` get no hashed prefix at all.
    """
    rel = os.path.relpath(file_path, root)
    rel_dir = os.path.dirname(rel)
    name = os.path.basename(file_path)

    if rel_dir in ("", os.curdir):
        key = name
    else:
        key = f"{obfuscate_path(rel_dir)}/{name}"

    prefix = prefix.strip("/")
    return f"{prefix}/{key}" if prefix else key
