"""
Centralized configuration for the S3 destination.

Edit these constants to set project defaults. CLI flags and environment
variables (including those loaded from a .env file) override these values
at runtime.
"""

import argparse
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

# Default S3 bucket name. You can override via CLI `--bucket` or env `S3_BUCKET_NAME`.
DEFAULT_BUCKET: str = ""

# Default region. You can override via CLI `--region` or env `AWS_REGION`.
DEFAULT_REGION: str = ""

# Optional S3-compatible endpoint URL (e.g., MinIO, Cloudflare R2, etc.)
# Example: "http://localhost:9000" or "https://accountid.r2.cloudflarestorage.com"
DEFAULT_ENDPOINT_URL: Optional[str] = None

# Whether to use path-style addressing ("https://endpoint/bucket/key")
# Some S3-compatible services require this.
DEFAULT_USE_PATH_STYLE: bool = False

# .env file read at startup when present. Existing environment variables win.
DOTENV_PATH: str = ".env"

BUCKET_ENV = "S3_BUCKET_NAME"
REGION_ENV = "AWS_REGION"
ENDPOINT_ENV = "S3_ENDPOINT_URL"


@dataclass(frozen=True)
class UploadConfig:
    bucket: str
    region: str
    root: str
    prefix: str = ""
    endpoint_url: Optional[str] = None
    profile: Optional[str] = None
    use_path_style: bool = False
    credentials: Optional[dict] = field(default=None, repr=False)


def load_env_file(path: Optional[str] = None) -> bool:
    """Load a .env file into os.environ without overriding existing values.

    Returns True when a file was found and read. A missing default .env is
    ignored; an explicitly named file that does not exist raises ConfigError.
    """
    if path and not os.path.isfile(path):
        raise ConfigError(f"env file not found: {path}")
    path = path or DOTENV_PATH
    if not os.path.isfile(path):
        return False
    return load_dotenv(path, override=False)


def resolve_bucket(args: argparse.Namespace, environ: Mapping[str, str]) -> str:
    # Priority: --bucket flag > env S3_BUCKET_NAME > config.DEFAULT_BUCKET
    return (args.bucket or environ.get(BUCKET_ENV) or DEFAULT_BUCKET).strip()


def resolve_region(args: argparse.Namespace, environ: Mapping[str, str]) -> str:
    # Priority: --region flag > env AWS_REGION > config.DEFAULT_REGION
    return (args.region or environ.get(REGION_ENV) or DEFAULT_REGION).strip()


def resolve_endpoint(args: argparse.Namespace, environ: Mapping[str, str]) -> Optional[str]:
    # Priority: --endpoint-url > env S3_ENDPOINT_URL > config.DEFAULT_ENDPOINT_URL
    return args.endpoint_url or environ.get(ENDPOINT_ENV) or DEFAULT_ENDPOINT_URL


def resolve_credentials(environ: Mapping[str, str]) -> Optional[dict]:
    access = environ.get("AWS_ACCESS_KEY_ID")
    secret = environ.get("AWS_SECRET_ACCESS_KEY")
    token = environ.get("AWS_SESSION_TOKEN")

    if access and secret:
        creds = {"aws_access_key_id": access, "aws_secret_access_key": secret}
        if token:
            creds["aws_session_token"] = token
        return creds
    # Fall back to boto3's default chain (profile, instance role, ...)
    return None


def load_config(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> UploadConfig:
    """Build the run configuration from parsed CLI args and the environment.

    Raises ConfigError if the bucket, region or root folder is empty.
    """
    if environ is None:
        environ = os.environ

    bucket = resolve_bucket(args, environ)
    region = resolve_region(args, environ)
    root = args.folder or ""

    missing = []
    if not bucket:
        missing.append(BUCKET_ENV)
    if not region:
        missing.append(REGION_ENV)
    if missing:
        raise ConfigError(
            f"{' and '.join(missing)} must be set (environment, {DOTENV_PATH} file, or CLI flag)"
        )
    if not root.strip():
        raise ConfigError("folder path must not be empty")

    return UploadConfig(
        bucket=bucket,
        region=region,
        root=root,
        prefix=(args.prefix or "").strip("/"),
        endpoint_url=resolve_endpoint(args, environ),
        profile=args.profile,
        use_path_style=bool(args.path_style or DEFAULT_USE_PATH_STYLE),
        credentials=resolve_credentials(environ),
    )
