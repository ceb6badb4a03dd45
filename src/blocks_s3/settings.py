"""
Settings and configuration for the S3 block store.

Centralizes configuration values and provides validation with fail-fast behavior.
Loads settings from environment variables at store construction time.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .storage.credentials import Credentials, EnvironmentDefault, SessionKeys, StaticKeys
from .storage.keys import normalize_prefix

__all__ = [
    "StoreSettings",
    "SUPPORTED_REGIONS",
    "SSE_ALGORITHMS",
    "validate_region",
    "validate_sse",
    "create_settings_from_env",
]

# AWS commercial regions accepted for the region selector
SUPPORTED_REGIONS = frozenset({
    "us-east-1", "us-east-2", "us-west-1", "us-west-2",
    "ca-central-1", "ca-west-1",
    "sa-east-1",
    "eu-west-1", "eu-west-2", "eu-west-3", "eu-central-1", "eu-central-2",
    "eu-north-1", "eu-south-1", "eu-south-2",
    "ap-east-1", "ap-south-1", "ap-south-2",
    "ap-northeast-1", "ap-northeast-2", "ap-northeast-3",
    "ap-southeast-1", "ap-southeast-2", "ap-southeast-3", "ap-southeast-4",
    "me-south-1", "me-central-1", "il-central-1", "af-south-1",
})

# Server-side encryption selectors mapped to S3 algorithm names
SSE_ALGORITHMS = {
    "aes-256": "AES256",
}


def _selector(value: str) -> str:
    # Tolerate keyword-style selectors such as ":us-west-2"
    return value.strip().lstrip(":").lower()


def validate_region(region: Optional[str]) -> Optional[str]:
    """
    Validate a region selector.

    Returns:
        Canonical region name, or None if no region was given

    Raises:
        ConfigurationError: If the region is not supported
    """
    if region is None:
        return None
    name = _selector(region)
    if name not in SUPPORTED_REGIONS:
        raise ConfigurationError(f"No supported region matching {region!r}", value=region)
    return name


def validate_sse(sse: Optional[str]) -> Optional[str]:
    """
    Validate a server-side encryption selector.

    Returns:
        S3 algorithm name (e.g. "AES256"), or None if no selector was given

    Raises:
        ConfigurationError: If the selector is not supported
    """
    if sse is None:
        return None
    name = _selector(sse)
    if name not in SSE_ALGORITHMS:
        supported = sorted(SSE_ALGORITHMS)
        raise ConfigurationError(
            f"Unsupported server-side encryption {sse!r}; supported values: {', '.join(supported)}",
            value=sse,
            supported=supported,
        )
    return SSE_ALGORITHMS[name]


@dataclass(frozen=True)
class StoreSettings:
    """
    Configuration settings for an S3 block store.

    Attributes:
        bucket: Bucket name (required, trimmed)
        prefix: Key prefix; normalized to end in a single "/" or None
        region: AWS region selector (validated against SUPPORTED_REGIONS)
        sse: Server-side encryption selector (validated against SSE_ALGORITHMS)
        endpoint_url: Custom endpoint for S3-compatible services (MinIO, SeaweedFS)
        credentials: Credential variant; defaults to environment resolution
        max_attempts: botocore retry attempts per request
    """
    bucket: str
    prefix: Optional[str] = None
    region: Optional[str] = None
    sse: Optional[str] = None
    endpoint_url: Optional[str] = None
    credentials: Credentials = EnvironmentDefault()
    max_attempts: int = 3

    def __post_init__(self):
        """Validate and normalize settings on construction."""
        if not isinstance(self.bucket, str) or not self.bucket.strip():
            raise ConfigurationError(
                f"Bucket name must be a non-empty string, got: {self.bucket!r}",
                value=self.bucket,
            )
        object.__setattr__(self, "bucket", self.bucket.strip())
        object.__setattr__(self, "prefix", normalize_prefix(self.prefix))

        if self.region is not None:
            object.__setattr__(self, "region", validate_region(self.region))

        # Validate only; the selector is mapped to an algorithm name by the store
        validate_sse(self.sse)

        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {self.max_attempts}", value=self.max_attempts)

    @property
    def sse_algorithm(self) -> Optional[str]:
        return validate_sse(self.sse)


def create_settings_from_env() -> StoreSettings:
    """
    Load settings from environment variables.

    Environment Variables:
        - BLOCKS_S3_BUCKET (required)
        - BLOCKS_S3_PREFIX (optional)
        - BLOCKS_S3_REGION (optional)
        - BLOCKS_S3_SSE (optional, e.g. "aes-256")
        - BLOCKS_S3_ENDPOINT_URL (optional, for S3-compatible services)
        - BLOCKS_S3_MAX_ATTEMPTS (default: 3)
        - AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY / AWS_SESSION_TOKEN (optional)

    Returns:
        StoreSettings with validated configuration

    Raises:
        ConfigurationError: If configuration is invalid or required values missing

    Note:
        Creates a fresh StoreSettings instance every time (no caching).
    """
    bucket = os.getenv("BLOCKS_S3_BUCKET")
    if not bucket:
        raise ConfigurationError("BLOCKS_S3_BUCKET environment variable is required")

    max_attempts_raw = os.getenv("BLOCKS_S3_MAX_ATTEMPTS")
    try:
        max_attempts = int(max_attempts_raw) if max_attempts_raw else 3
    except ValueError:
        raise ConfigurationError(
            f"BLOCKS_S3_MAX_ATTEMPTS must be an integer, got {max_attempts_raw!r}",
            value=max_attempts_raw,
        )

    access_key = os.getenv("AWS_ACCESS_KEY_ID")
    secret_key = os.getenv("AWS_SECRET_ACCESS_KEY")
    session_token = os.getenv("AWS_SESSION_TOKEN")

    credentials: Credentials
    if access_key and secret_key and session_token:
        credentials = SessionKeys(access_key=access_key, secret_key=secret_key, session_token=session_token)
    elif access_key and secret_key:
        credentials = StaticKeys(access_key=access_key, secret_key=secret_key)
    else:
        credentials = EnvironmentDefault()

    return StoreSettings(
        bucket=bucket,
        prefix=os.getenv("BLOCKS_S3_PREFIX"),
        region=os.getenv("BLOCKS_S3_REGION"),
        sse=os.getenv("BLOCKS_S3_SSE"),
        endpoint_url=os.getenv("BLOCKS_S3_ENDPOINT_URL"),
        credentials=credentials,
        max_attempts=max_attempts,
    )
