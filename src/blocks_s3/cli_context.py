"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and store
instances, avoiding global state and enabling proper dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .settings import StoreSettings, create_settings_from_env
from .storage.s3_store import S3BlockStore


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Holds the settings and a lazily created store for a single CLI command
    execution.
    """
    settings: StoreSettings
    _store: Optional[S3BlockStore] = None

    @classmethod
    def from_env(cls) -> CLIContext:
        """
        Create CLI context from environment variables.

        Raises:
            ConfigurationError: If the environment does not describe a valid store
        """
        return cls(settings=create_settings_from_env())

    @property
    def store(self) -> S3BlockStore:
        """
        Get or create the block store (lazy initialization).

        The boto3 client is created on first access and reused afterwards.
        """
        if self._store is None:
            self._store = S3BlockStore.from_settings(self.settings)
        return self._store
