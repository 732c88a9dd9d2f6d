"""
Shared pytest fixtures for hashed_s3_upload tests.

Provides:
- make_tree: build a directory tree from a {relative path: content} dict
- mock_s3: a Mock S3 client that records every put_object call with the
  bytes read from its Body
- make_config: UploadConfig factory pointing at a given root
"""

from unittest.mock import MagicMock

import pytest

from hashed_s3_upload.config import UploadConfig


@pytest.fixture
def make_tree(tmp_path):
    """
    Create files (and empty directories for keys ending in "/") under tmp_path/root.

    Usage:
        root = make_tree({"docs/report.txt": "hello", "empty/": None})
    """
    def _make(layout):
        root = tmp_path / "root"
        root.mkdir(exist_ok=True)
        for rel, content in layout.items():
            target = root / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content.encode("utf-8") if isinstance(content, str) else content)
        return str(root)

    return _make


@pytest.fixture
def mock_s3():
    """
    Mock S3 client. put_object reads the Body so tests can assert on content.

    Recorded calls are available as mock_s3.uploads: list of (bucket, key, body).
    """
    client = MagicMock()
    client.uploads = []

    def _put_object(Bucket, Key, Body):
        client.uploads.append((Bucket, Key, Body.read()))
        return {"ETag": '"d41d8cd98f00b204e9800998ecf8427e"'}

    client.put_object.side_effect = _put_object
    return client


@pytest.fixture
def make_config():
    def _make(root, **overrides):
        values = {"bucket": "test-bucket", "region": "us-east-1", "root": root}
        values.update(overrides)
        return UploadConfig(**values)

    return _make
