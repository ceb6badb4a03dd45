"""
Tests for credential variants and boto3 session/client construction.

boto3 is patched out so nothing here touches the network or the local AWS
configuration.
"""
from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
from botocore.credentials import CredentialProvider

from blocks_s3.errors import ConfigurationError
from blocks_s3.settings import StoreSettings
from blocks_s3.storage.client import create_s3_client
from blocks_s3.storage.credentials import (
    EnvironmentDefault,
    ExternalProvider,
    SessionKeys,
    StaticKeys,
    create_session,
    credentials_from_mapping,
)


class TestCredentialsFromMapping:
    """Test credentials_from_mapping function."""

    def test_none_means_environment(self):
        assert credentials_from_mapping(None) == EnvironmentDefault()

    def test_static_keys(self):
        creds = credentials_from_mapping({"access-key": "AKIA", "secret-key": "s3cr3t"})
        assert creds == StaticKeys(access_key="AKIA", secret_key="s3cr3t")

    def test_session_keys(self):
        creds = credentials_from_mapping({
            "access_key": "AKIA",
            "secret_key": "s3cr3t",
            "session_token": "tok",
        })
        assert isinstance(creds, SessionKeys)
        assert creds.session_token == "tok"

    def test_secret_not_in_repr(self):
        assert "s3cr3t" not in repr(StaticKeys(access_key="AKIA", secret_key="s3cr3t"))

    def test_missing_secret_rejected(self):
        with pytest.raises(ConfigurationError, match="access-key and secret-key"):
            credentials_from_mapping({"access-key": "AKIA"})

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown credential keys: region"):
            credentials_from_mapping({"access-key": "AKIA", "secret-key": "x", "region": "us-west-2"})


class TestCreateSession:
    """Test create_session with boto3 patched."""

    @patch("blocks_s3.storage.credentials.boto3")
    def test_static_keys(self, mock_boto3):
        create_session(StaticKeys(access_key="AKIA", secret_key="s3cr3t"), region="us-west-2")
        mock_boto3.session.Session.assert_called_once_with(
            aws_access_key_id="AKIA",
            aws_secret_access_key="s3cr3t",
            region_name="us-west-2",
        )

    @patch("blocks_s3.storage.credentials.boto3")
    def test_session_keys(self, mock_boto3):
        create_session(SessionKeys(access_key="AKIA", secret_key="s3cr3t", session_token="tok"))
        kwargs = mock_boto3.session.Session.call_args.kwargs
        assert kwargs["aws_session_token"] == "tok"
        assert kwargs["region_name"] is None

    @patch("blocks_s3.storage.credentials.boto3")
    def test_environment_default(self, mock_boto3):
        create_session(EnvironmentDefault(), region="eu-west-1")
        mock_boto3.session.Session.assert_called_once_with(region_name="eu-west-1")

    @patch("blocks_s3.storage.credentials.boto3")
    @patch("botocore.session.get_session")
    def test_external_provider_consulted_first(self, mock_get_session, mock_boto3):
        provider = Mock(spec=CredentialProvider)
        core_session = mock_get_session.return_value
        resolver = core_session.get_component.return_value

        create_session(ExternalProvider(provider=provider))

        core_session.get_component.assert_called_once_with("credential_provider")
        resolver.insert_before.assert_called_once_with("env", provider)
        mock_boto3.session.Session.assert_called_once_with(botocore_session=core_session, region_name=None)

    def test_unknown_variant_rejected(self):
        with pytest.raises(ConfigurationError, match="Unsupported credentials type: dict"):
            create_session({"access-key": "AKIA"})


class TestCreateS3Client:
    """Test create_s3_client configuration."""

    @patch("blocks_s3.storage.client.create_session")
    def test_client_config(self, mock_create_session):
        session = mock_create_session.return_value
        settings = StoreSettings(bucket="bkt", region="us-west-2", max_attempts=5)

        client = create_s3_client(settings)

        assert client is session.client.return_value
        mock_create_session.assert_called_once_with(settings.credentials, region="us-west-2")
        args, kwargs = session.client.call_args
        assert args == ("s3",)
        assert "endpoint_url" not in kwargs
        config = kwargs["config"]
        assert config.region_name == "us-west-2"
        assert config.signature_version == "s3v4"
        assert config.retries == {"max_attempts": 5, "mode": "standard"}

    @patch("blocks_s3.storage.client.create_session")
    def test_custom_endpoint(self, mock_create_session):
        settings = StoreSettings(bucket="bkt", endpoint_url="http://localhost:9000")
        create_s3_client(settings)
        kwargs = mock_create_session.return_value.client.call_args.kwargs
        assert kwargs["endpoint_url"] == "http://localhost:9000"
