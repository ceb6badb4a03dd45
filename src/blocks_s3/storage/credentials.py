"""
AWS credential variants.

Callers pick a variant explicitly; it is resolved once into a boto3 session
when the store's client is built.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

import boto3
import botocore.session
from botocore.credentials import CredentialProvider

from ..errors import ConfigurationError

__all__ = [
    "StaticKeys",
    "SessionKeys",
    "ExternalProvider",
    "EnvironmentDefault",
    "Credentials",
    "credentials_from_mapping",
    "create_session",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaticKeys:
    """Explicit access key pair."""
    access_key: str
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class SessionKeys:
    """Temporary credentials: key pair plus session token."""
    access_key: str
    secret_key: str = field(repr=False)
    session_token: str = field(repr=False)


@dataclass(frozen=True)
class ExternalProvider:
    """A botocore credential provider consulted ahead of the default chain."""
    provider: CredentialProvider


@dataclass(frozen=True)
class EnvironmentDefault:
    """Let botocore resolve credentials from the environment, config files, or instance role."""
    pass


Credentials = Union[StaticKeys, SessionKeys, ExternalProvider, EnvironmentDefault]


def credentials_from_mapping(creds: Optional[Mapping[str, Any]]) -> Credentials:
    """
    Build a credential variant from a plain mapping.

    Accepts ``{"access-key", "secret-key"}`` with an optional
    ``"session-token"``. Underscored key names are accepted too.

    Raises:
        ConfigurationError: If the mapping is incomplete or has unknown keys
    """
    if creds is None:
        return EnvironmentDefault()

    normalized = {str(k).replace("_", "-"): v for k, v in creds.items()}
    known = {"access-key", "secret-key", "session-token"}
    unknown = sorted(set(normalized) - known)
    if unknown:
        raise ConfigurationError(f"Unknown credential keys: {', '.join(unknown)}", value=unknown)

    access_key = normalized.get("access-key")
    secret_key = normalized.get("secret-key")
    session_token = normalized.get("session-token")

    if not access_key or not secret_key:
        raise ConfigurationError(
            "Credential map must contain non-empty access-key and secret-key",
            value=sorted(normalized),
        )

    if session_token:
        return SessionKeys(access_key=access_key, secret_key=secret_key, session_token=session_token)
    return StaticKeys(access_key=access_key, secret_key=secret_key)


def create_session(credentials: Credentials, region: Optional[str] = None) -> boto3.session.Session:
    """
    Resolve a credential variant into a boto3 session.

    Raises:
        ConfigurationError: If the variant is not a recognized credential type
    """
    if isinstance(credentials, StaticKeys):
        logger.debug("Using explicit access key credentials")
        return boto3.session.Session(
            aws_access_key_id=credentials.access_key,
            aws_secret_access_key=credentials.secret_key,
            region_name=region,
        )

    if isinstance(credentials, SessionKeys):
        logger.debug("Using explicit session token credentials")
        return boto3.session.Session(
            aws_access_key_id=credentials.access_key,
            aws_secret_access_key=credentials.secret_key,
            aws_session_token=credentials.session_token,
            region_name=region,
        )

    if isinstance(credentials, ExternalProvider):
        logger.debug(f"Using external credential provider {type(credentials.provider).__name__}")
        core_session = botocore.session.get_session()
        resolver = core_session.get_component("credential_provider")
        resolver.insert_before("env", credentials.provider)
        return boto3.session.Session(botocore_session=core_session, region_name=region)

    if isinstance(credentials, EnvironmentDefault):
        logger.debug("Using default credential resolution")
        return boto3.session.Session(region_name=region)

    raise ConfigurationError(
        f"Unsupported credentials type: {type(credentials).__name__}",
        value=credentials,
    )
