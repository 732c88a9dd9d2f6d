"""Upload a directory tree to S3 under hashed, non-reversible folder names."""

__version__ = "0.1.0"
