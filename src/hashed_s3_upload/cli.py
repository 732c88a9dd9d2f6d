import argparse
import logging
from typing import List, Optional

from . import config as cfg
from .errors import ConfigError, UploaderError
from .uploader import client_from_config, display_path, summarize, upload_folder

logger = logging.getLogger("hashed_s3_upload")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="hashed-s3-upload",
        description=(
            "Upload every file under a folder to S3. Each folder name in the object key is "
            "replaced by a 16-character SHA-256 prefix; file names are kept."
        ),
    )
    p.add_argument("folder", help="Path to the local folder to upload")
    p.add_argument(
        "--bucket",
        default=None,
        help=f"Target S3 bucket (overrides env {cfg.BUCKET_ENV})",
    )
    p.add_argument(
        "--region",
        default=None,
        help=f"AWS region for the S3 client (overrides env {cfg.REGION_ENV})",
    )
    p.add_argument(
        "--prefix",
        "-p",
        default="",
        help="Optional literal key prefix placed before the hashed path (not hashed)",
    )
    p.add_argument(
        "--profile",
        default=None,
        help="AWS profile name to use for credentials (optional)",
    )
    p.add_argument(
        "--endpoint-url",
        default=None,
        help="Custom S3-compatible endpoint URL (e.g., http://localhost:9000)",
    )
    p.add_argument(
        "--path-style",
        action="store_true",
        help="Use path-style addressing (required by some S3-compatible services)",
    )
    p.add_argument(
        "--env-file",
        default=None,
        help=f"Path of the .env file to load (default: {cfg.DOTENV_PATH})",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for name in ("boto3", "botocore", "s3transfer", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except SystemExit as e:
        # --help exits 0; usage errors share the single failure status
        return 0 if e.code in (0, None) else 1
    setup_logging(args.verbose)

    try:
        if cfg.load_env_file(args.env_file):
            logger.debug("Loaded environment from %s", args.env_file or cfg.DOTENV_PATH)
        config = cfg.load_config(args)
    except ConfigError as e:
        logger.error("Error: %s", e)
        return 1

    print(
        f"Uploading {display_path(config.root)} to s3://{config.bucket}/{config.prefix}" + ("/" if config.prefix else "") +
        f" ({config.region})" +
        (f" via {config.endpoint_url}" if config.endpoint_url else "") +
        (" (path-style)" if config.use_path_style else ""),
        flush=True,
    )

    try:
        s3 = client_from_config(config)
        results = upload_folder(s3, config)
    except UploaderError as e:
        logger.error("Upload failed: %s", e)
        return 1

    summary = summarize(results)
    print(
        "Summary: files={files} total_bytes={total_bytes} total_time={total_time_sec:.3f}s".format(**summary)
    )
    print("All files uploaded successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
